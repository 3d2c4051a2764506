"""Pydantic schemas for API and runtime use. Persisted only as JSON snapshots."""
from second_thought.schemas.analysis import (AnalysisMetadata, AnalysisOutcome,
                                             EvaluationResult, OpportunityCost,
                                             PricingWarning, Projections,
                                             Recommendation, SuggestedAction,
                                             WarningType)
from second_thought.schemas.cooldown import (CoolDown, CoolDownStatus,
                                             CoolDownView)
from second_thought.schemas.product import ProductRecord, RawProductFields
from second_thought.schemas.profile import (DEFAULT_SPENDING_THRESHOLD,
                                            ProfileUpdate, UserProfile)
from second_thought.schemas.requests import (AnalyzeRequest,
                                             ProfileUpsertRequest,
                                             StartCoolDownRequest,
                                             TrackEventType, TrackRequest)
from second_thought.schemas.responses import (AnalyzeResponse,
                                              CoolDownListResponse,
                                              CoolDownResponse,
                                              ExtractResponse, ProfileResponse,
                                              SelectorsResponse,
                                              SuccessResponse, TrackResponse)

__all__ = [
    "AnalysisMetadata",
    "AnalysisOutcome",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "CoolDown",
    "CoolDownListResponse",
    "CoolDownResponse",
    "CoolDownStatus",
    "CoolDownView",
    "DEFAULT_SPENDING_THRESHOLD",
    "EvaluationResult",
    "ExtractResponse",
    "OpportunityCost",
    "PricingWarning",
    "ProductRecord",
    "ProfileResponse",
    "ProfileUpdate",
    "ProfileUpsertRequest",
    "Projections",
    "RawProductFields",
    "Recommendation",
    "SelectorsResponse",
    "StartCoolDownRequest",
    "SuccessResponse",
    "SuggestedAction",
    "TrackEventType",
    "TrackRequest",
    "TrackResponse",
    "UserProfile",
    "WarningType",
]
