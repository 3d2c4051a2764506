"""Purchase analysis: pricing checks, inference, opportunity cost, tracing.

Inference failures never reach the caller; the neutral fallback
recommendation is returned instead. Evaluation runs after the response in a
background task and only feeds the trace.
"""
import asyncio
import logging
import time

from second_thought.pricing import analyze_pricing
from second_thought.providers.core.exceptions import InferenceError
from second_thought.providers.core.protocols import InferenceProvider
from second_thought.providers.inference.prompts import (build_prompt,
                                                        fallback_recommendation,
                                                        parse_response)
from second_thought.providers.tracing import TraceClient, TraceContext
from second_thought.schemas import (AnalysisMetadata, AnalysisOutcome,
                                    ProductRecord, Recommendation, UserProfile)
from second_thought.services.evaluation import EvaluationScorer
from second_thought.services.user_profiles import UserProfileManager

logger = logging.getLogger(__name__)


class AnalysisService:
    """Produces the merged Recommendation for one product."""

    def __init__(
        self,
        provider: InferenceProvider,
        profiles: UserProfileManager,
        tracer: TraceClient,
        *,
        evaluator: EvaluationScorer | None = None,
    ) -> None:
        self._provider = provider
        self._profiles = profiles
        self._tracer = tracer
        self._evaluator = evaluator
        self._pending: set[asyncio.Task] = set()

    async def analyze(
        self,
        product: ProductRecord,
        user_id: str | None = None,
        session_id: str | None = None,
    ) -> AnalysisOutcome:
        """Analyze a product for an optional user.

        Warnings are merged with the pricing analyzer's first, followed by any
        the model returned.
        """
        profile = await self._profiles.get_or_create(user_id) if user_id else None
        trace = await self._tracer.start_analysis_trace(product, user_id, session_id)

        pricing_warnings = analyze_pricing(product)

        started = time.monotonic()
        used_fallback = False
        try:
            content = await self._provider.complete(build_prompt(product, profile))
            inferred = parse_response(content, product)
        except InferenceError as exc:
            logger.warning("Inference failed for %s, using fallback: %s", product.url, exc)
            inferred = fallback_recommendation(product)
            used_fallback = True
        latency_ms = int((time.monotonic() - started) * 1000)

        recommendation = inferred.model_copy(
            update={"warnings": [*pricing_warnings, *inferred.warnings]}
        )

        await self._tracer.complete_analysis_trace(
            trace,
            recommendation,
            {"hasUserProfile": profile is not None, "usedFallback": used_fallback},
        )
        if self._evaluator is not None:
            self._schedule_evaluation(trace, product, recommendation, profile)

        return AnalysisOutcome(
            recommendation=recommendation,
            metadata=AnalysisMetadata(latency_ms=latency_ms, has_user_profile=profile is not None),
        )

    def _schedule_evaluation(
        self,
        trace: TraceContext,
        product: ProductRecord,
        recommendation: Recommendation,
        profile: UserProfile | None,
    ) -> None:
        task = asyncio.create_task(self._evaluate(trace, product, recommendation, profile))
        self._pending.add(task)
        task.add_done_callback(self._on_evaluation_done)

    async def _evaluate(
        self,
        trace: TraceContext,
        product: ProductRecord,
        recommendation: Recommendation,
        profile: UserProfile | None,
    ) -> None:
        evaluation = await self._evaluator.evaluate_intervention(product, recommendation, profile)
        await self._tracer.log_evaluation(trace, evaluation)

    def _on_evaluation_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Evaluation failed for trace: %s", exc)

    async def drain(self) -> None:
        """Wait for scheduled evaluations to finish (shutdown, tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
