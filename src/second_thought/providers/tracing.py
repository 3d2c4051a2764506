"""Best-effort Opik tracing for analysis, engagement and cool-down events.

Every public method logs and drops errors from the Opik client: tracing must
never fail the request it observes. The SDK is synchronous, so traces are
sent from a worker thread.
"""
import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any

import opik

from second_thought.config import Settings
from second_thought.providers.inference.prompts import PROMPT_VERSION
from second_thought.schemas import (EvaluationResult, ProductRecord,
                                    Recommendation, SuggestedAction)

logger = logging.getLogger(__name__)

# Which user action counts as following each suggestion.
_FOLLOWED_ACTIONS = {
    SuggestedAction.COOLDOWN: "cooldown_started",
    SuggestedAction.SKIP: "dismissed",
    SuggestedAction.PROCEED: "proceeded",
}


@dataclass(frozen=True)
class TraceContext:
    """Handle returned by start_analysis_trace."""

    trace_id: str
    start_time: float


def followed_advice(recommendation: Recommendation | None, action: str) -> bool:
    """True when the user's action matches the suggested action."""
    if recommendation is None:
        return False
    return _FOLLOWED_ACTIONS.get(recommendation.suggested_action) == action


class TraceClient:
    """Logs one Opik trace per event; only debug-logs when no client is configured."""

    def __init__(
        self,
        client: opik.Opik | None = None,
        *,
        project_name: str = "second-thought",
        model_version: str = "",
    ) -> None:
        self._client = client
        self._project = project_name
        self._model_version = model_version

    @classmethod
    def from_settings(cls, settings: Settings) -> "TraceClient":
        """Connect to Opik when an API key or self-hosted URL is configured."""
        client = None
        if settings.tracing_enabled:
            client = opik.Opik(
                project_name=settings.opik_project,
                workspace=settings.opik_workspace,
                host=settings.opik_url,
                api_key=settings.opik_api_key,
            )
        return cls(client, project_name=settings.opik_project, model_version=settings.llm_model)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def _log_trace(
        self,
        name: str,
        input: dict[str, Any],
        output: dict[str, Any],
        metadata: dict[str, Any],
    ) -> None:
        trace = self._client.trace(
            name=name,
            input=input,
            output=output,
            metadata=metadata,
            project_name=self._project,
        )
        trace.end()
        self._client.flush()

    async def _send(
        self,
        name: str,
        *,
        input: dict[str, Any] | None = None,
        output: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        if self._client is None:
            logger.debug("Tracing disabled; dropping trace %s", name)
            return
        try:
            await asyncio.to_thread(
                self._log_trace, name, input or {}, output or {}, metadata or {}
            )
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Trace %s failed: %s", name, exc)

    async def start_analysis_trace(
        self, product: ProductRecord, user_id: str | None, session_id: str | None = None
    ) -> TraceContext:
        """Record the start of an analysis and return a context for completion."""
        context = TraceContext(trace_id=f"trace_{uuid.uuid4().hex}", start_time=time.monotonic())
        await self._send(
            "purchase-analysis",
            input={
                "product": {
                    "name": product.name,
                    "price": product.price,
                    "currency": product.currency,
                    "category": product.category,
                    "hasDiscount": product.original_price is not None,
                    "urgencyIndicatorCount": len(product.urgency_indicators),
                }
            },
            metadata={
                "traceId": context.trace_id,
                "userId": user_id,
                "sessionId": session_id,
                "productUrl": product.url,
                "promptVersion": PROMPT_VERSION,
            },
        )
        return context

    async def complete_analysis_trace(
        self,
        context: TraceContext,
        recommendation: Recommendation,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Record the analysis result with its latency."""
        latency_ms = int((time.monotonic() - context.start_time) * 1000)
        await self._send(
            "purchase-analysis-complete",
            input={"traceId": context.trace_id},
            output={
                "isEssential": recommendation.is_essential,
                "essentialityScore": recommendation.essentiality_score,
                "suggestedAction": recommendation.suggested_action.value,
                "warningCount": len(recommendation.warnings),
                "opportunityCost20yr": recommendation.opportunity_cost.projections.year20,
            },
            metadata={
                **(metadata or {}),
                "latencyMs": latency_ms,
                "modelVersion": self._model_version,
            },
        )

    async def log_evaluation(self, context: TraceContext, evaluation: EvaluationResult) -> None:
        """Attach quality scores to an analysis trace."""
        await self._send(
            "purchase-analysis-evaluation",
            input={"traceId": context.trace_id},
            output=evaluation.model_dump(by_alias=True),
            metadata={"promptVersion": PROMPT_VERSION},
        )

    async def log_user_engagement(
        self,
        user_id: str,
        session_id: str,
        action: str,
        product: ProductRecord | None = None,
        recommendation: Recommendation | None = None,
    ) -> None:
        """Record what the user did with an intervention."""
        await self._send(
            "user-engagement",
            input={
                "productName": product.name if product else "unknown",
                "productPrice": product.price if product else 0,
                "suggestedAction": (
                    recommendation.suggested_action.value if recommendation else "unknown"
                ),
            },
            output={
                "userAction": action,
                "followedAdvice": followed_advice(recommendation, action),
            },
            metadata={
                "userId": user_id,
                "sessionId": session_id,
                "essentialityScore": recommendation.essentiality_score if recommendation else 0,
                "warningCount": len(recommendation.warnings) if recommendation else 0,
            },
        )

    async def log_cooldown_event(
        self,
        user_id: str,
        event_type: str,
        product_url: str,
        remaining_time_ms: int | None = None,
    ) -> None:
        """Record a cool-down lifecycle event (started, checked, expired, cancelled)."""
        remaining_hours = (
            round(remaining_time_ms / 3_600_000, 1) if remaining_time_ms else 0
        )
        await self._send(
            "cooldown-event",
            input={"eventType": event_type, "productUrl": product_url},
            output={"remainingTimeMs": remaining_time_ms, "remainingHours": remaining_hours},
            metadata={"userId": user_id},
        )

    async def log_profile_update(self, user_id: str, updated_fields: list[str]) -> None:
        """Record which profile fields a user changed."""
        await self._send(
            "profile-update",
            input={"updatedFields": updated_fields},
            metadata={"userId": user_id},
        )

    async def close(self) -> None:
        """Flush pending traces and shut the Opik client down."""
        if self._client is not None:
            await asyncio.to_thread(self._client.end)
