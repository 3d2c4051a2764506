"""Quality scoring of recommendations for monitoring (never gates user flow).

Empathy, accuracy and actionability are heuristics; relevance is delegated to
an external judge with a fixed default when the judge is unavailable.
"""
import logging
from dataclasses import dataclass

from second_thought.pricing.opportunity_cost import compound
from second_thought.providers.core.exceptions import InferenceError
from second_thought.providers.core.protocols import RelevanceJudge
from second_thought.schemas import (EvaluationResult, ProductRecord,
                                    Recommendation, SuggestedAction,
                                    UserProfile)
from second_thought.utils import clamp01, format_number

logger = logging.getLogger(__name__)

DEFAULT_RELEVANCE = 0.7
COST_TOLERANCE = 0.01
PROJECTION_HORIZON_YEARS = 20

SUPPORTIVE_CATEGORIES: tuple[tuple[str, ...], ...] = (
    ("understand", "know"),
    ("goal", "dream"),
    ("help", "support"),
    ("consider", "think"),
)
HARSH_CATEGORIES: tuple[tuple[str, ...], ...] = (
    ("must", "should not"),
    ("wrong", "bad"),
)
ESSENTIAL_KEYWORDS = ("food", "medicine", "health", "utilities", "housing")
NON_ESSENTIAL_KEYWORDS = ("luxury", "entertainment", "fashion", "gadgets")


@dataclass(frozen=True)
class MetricScore:
    """A single metric value with a human-readable reason."""

    name: str
    value: float
    reason: str


def score_empathy(message: str, financial_goals: list[str] | None = None) -> MetricScore:
    """Tone heuristic: +0.1 per supportive category, -0.1 per harsh one."""
    text = message.lower()
    goals = [g.lower() for g in financial_goals or [] if g.strip()]

    score = 0.5
    for index, words in enumerate(SUPPORTIVE_CATEGORIES):
        matched = any(w in text for w in words)
        # Mentioning one of the user's own goals counts as a goal reference.
        if index == 1 and not matched:
            matched = any(g in text for g in goals)
        if matched:
            score += 0.1
    for words in HARSH_CATEGORIES:
        if any(w in text for w in words):
            score -= 0.1

    return MetricScore(
        name="empathy",
        value=round(clamp01(score), 2),
        reason="Empathy score based on message tone and supportiveness",
    )


def score_accuracy(
    price: float, opportunity_cost_20yr: float, is_essential: bool, category: str | None
) -> MetricScore:
    """Check the 20-year projection and the essential/non-essential call."""
    score = 1.0
    reasons: list[str] = []

    expected = compound(price, PROJECTION_HORIZON_YEARS) if price > 0 else 0.0
    if expected > 0:
        off = abs(opportunity_cost_20yr - expected) / expected > COST_TOLERANCE
    else:
        off = opportunity_cost_20yr != 0
    if off:
        score -= 0.3
        reasons.append("Opportunity cost calculation may be inaccurate")

    if category:
        lowered = category.lower()
        if any(k in lowered for k in ESSENTIAL_KEYWORDS) and not is_essential:
            score -= 0.2
            reasons.append("Essential category marked as non-essential")
        if any(k in lowered for k in NON_ESSENTIAL_KEYWORDS) and is_essential:
            score -= 0.2
            reasons.append("Non-essential category marked as essential")

    return MetricScore(
        name="accuracy",
        value=round(max(0.0, score), 2),
        reason="; ".join(reasons) if reasons else "Analysis appears accurate",
    )


def score_actionability(
    suggested_action: SuggestedAction | str, reasoning: str, warning_count: int
) -> MetricScore:
    score = 0.5
    reasons: list[str] = []

    action = suggested_action.value if isinstance(suggested_action, SuggestedAction) else suggested_action
    if action in {a.value for a in SuggestedAction}:
        score += 0.2
        reasons.append("Clear action suggested")
    if reasoning and len(reasoning) > 20:
        score += 0.2
        reasons.append("Detailed reasoning provided")
    if warning_count > 0 and action != SuggestedAction.PROCEED.value:
        score += 0.1
        reasons.append("Action aligns with warnings")

    return MetricScore(
        name="actionability",
        value=round(min(1.0, score), 2),
        reason="; ".join(reasons),
    )


def relevance_question(product: ProductRecord) -> str:
    return f"Should I buy {product.name} for {product.currency} {format_number(product.price)}?"


class EvaluationScorer:
    """Composes the four metrics into an EvaluationResult."""

    def __init__(self, judge: RelevanceJudge | None = None) -> None:
        self._judge = judge

    async def score_relevance(self, question: str, answer: str) -> float:
        """Judge relevance; DEFAULT_RELEVANCE when no judge or the judge fails."""
        if self._judge is None:
            return DEFAULT_RELEVANCE
        try:
            return clamp01(await self._judge.score(question, answer))
        except (InferenceError, ValueError, TypeError) as exc:
            logger.warning("Relevance judge failed, using default: %s", exc)
            return DEFAULT_RELEVANCE

    async def evaluate_intervention(
        self,
        product: ProductRecord,
        recommendation: Recommendation,
        profile: UserProfile | None = None,
    ) -> EvaluationResult:
        empathy = score_empathy(
            recommendation.personalized_message,
            profile.financial_goals if profile else None,
        )
        accuracy = score_accuracy(
            product.price,
            recommendation.opportunity_cost.projections.year20,
            recommendation.is_essential,
            product.category,
        )
        actionability = score_actionability(
            recommendation.suggested_action,
            recommendation.reasoning,
            len(recommendation.warnings),
        )
        relevance = await self.score_relevance(
            relevance_question(product), recommendation.personalized_message
        )
        return EvaluationResult(
            empathy_score=empathy.value,
            accuracy_score=accuracy.value,
            relevance_score=relevance,
            actionability_score=actionability.value,
        )
