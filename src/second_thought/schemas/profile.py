"""User profile models."""
from datetime import datetime

from pydantic import Field

from second_thought.schemas.base import CamelModel

DEFAULT_SPENDING_THRESHOLD = 20.0


class UserProfile(CamelModel):
    """Financial context for a user, created lazily on first sight."""

    id: str
    savings_goal: float | None = None
    monthly_budget: float | None = None
    financial_goals: list[str] = Field(default_factory=list)
    spending_threshold: float = DEFAULT_SPENDING_THRESHOLD
    cooldown_enabled: bool = Field(default=True, alias="coolDownEnabled")
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(CamelModel):
    """Partial profile update; only fields that were set are merged."""

    savings_goal: float | None = None
    monthly_budget: float | None = None
    financial_goals: list[str] | None = None
    spending_threshold: float | None = None
    cooldown_enabled: bool | None = Field(default=None, alias="coolDownEnabled")
