"""Request bodies for the HTTP routes."""
from enum import Enum
from typing import Any

from pydantic import Field

from second_thought.schemas.analysis import Recommendation
from second_thought.schemas.base import CamelModel
from second_thought.schemas.product import ProductRecord
from second_thought.schemas.profile import ProfileUpdate


class AnalyzeRequest(CamelModel):
    """Body of POST /analyze. Product is validated by the route before use."""

    product: dict[str, Any]
    user_id: str | None = None
    session_id: str | None = None


class StartCoolDownRequest(CamelModel):
    """Body of POST /cooldowns."""

    user_id: str
    product: ProductRecord
    analysis: Recommendation


class ProfileUpsertRequest(ProfileUpdate):
    """Body of POST /profiles. Without user_id a new profile is created."""

    user_id: str | None = None


class TrackEventType(str, Enum):
    """Event kinds accepted by POST /track."""

    ENGAGEMENT = "engagement"
    COOLDOWN = "cooldown"
    PROFILE = "profile"


class TrackRequest(CamelModel):
    """Body of POST /track."""

    event_type: str
    user_id: str
    session_id: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
