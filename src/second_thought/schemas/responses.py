"""Response bodies for the HTTP routes."""
from second_thought.schemas.analysis import AnalysisMetadata, Recommendation
from second_thought.schemas.base import CamelModel
from second_thought.schemas.cooldown import CoolDownView
from second_thought.schemas.product import ProductRecord
from second_thought.schemas.profile import UserProfile


class AnalyzeResponse(CamelModel):
    success: bool = True
    analysis: Recommendation
    metadata: AnalysisMetadata


class ExtractResponse(CamelModel):
    success: bool = True
    product: ProductRecord
    site: str


class SelectorsResponse(CamelModel):
    site: str
    name: str
    price: str
    original_price: str
    urgency: str


class CoolDownResponse(CamelModel):
    """Single cool-down lookup; cool_down is None when nothing is active."""

    success: bool = True
    cool_down: CoolDownView | None = None


class CoolDownListResponse(CamelModel):
    success: bool = True
    cool_downs: list[CoolDownView]


class ProfileResponse(CamelModel):
    success: bool = True
    profile: UserProfile


class TrackResponse(CamelModel):
    success: bool = True
    intervention_id: str | None = None


class SuccessResponse(CamelModel):
    success: bool = True
