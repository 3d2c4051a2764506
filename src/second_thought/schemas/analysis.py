"""Recommendation, pricing warning, opportunity cost and evaluation models."""
from enum import Enum

from pydantic import Field

from second_thought.schemas.base import CamelModel, FrozenCamelModel


class WarningType(str, Enum):
    """Kinds of pricing manipulation the analyzer can flag."""

    FAKE_DISCOUNT = "fake_discount"
    URGENCY_MANIPULATION = "urgency_manipulation"
    INFLATED_PRICE = "inflated_price"


class SuggestedAction(str, Enum):
    """What the user is nudged to do with the purchase."""

    PROCEED = "proceed"
    COOLDOWN = "cooldown"
    SKIP = "skip"


class PricingWarning(FrozenCamelModel):
    """A manipulation signal with a [0, 1] confidence."""

    type: WarningType
    confidence: float = Field(ge=0.0, le=1.0)
    explanation: str = Field(min_length=1)


class Projections(FrozenCamelModel):
    """Projected value of the price if invested instead."""

    year5: float = 0.0
    year10: float = 0.0
    year20: float = 0.0


class OpportunityCost(FrozenCamelModel):
    """Investment projection for a purchase price."""

    amount: float = Field(ge=0.0)
    projections: Projections
    comparison_text: str


class Recommendation(FrozenCamelModel):
    """Merged analysis result returned to the user for a product."""

    is_essential: bool
    essentiality_score: float = Field(ge=0.0, le=1.0)
    reasoning: str
    warnings: list[PricingWarning] = Field(default_factory=list)
    opportunity_cost: OpportunityCost
    personalized_message: str
    suggested_action: SuggestedAction


class EvaluationResult(CamelModel):
    """Quality scores for one recommendation; each in [0, 1]."""

    empathy_score: float = Field(ge=0.0, le=1.0)
    accuracy_score: float = Field(ge=0.0, le=1.0)
    relevance_score: float = Field(ge=0.0, le=1.0)
    actionability_score: float = Field(ge=0.0, le=1.0)


class AnalysisMetadata(CamelModel):
    """Timing metadata attached to an analysis response."""

    latency_ms: int
    has_user_profile: bool


class AnalysisOutcome(CamelModel):
    """Result of one analysis request: recommendation plus metadata."""

    recommendation: Recommendation
    metadata: AnalysisMetadata
