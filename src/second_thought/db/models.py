"""Database models for the purchase reflection service.

Product and recommendation snapshots are stored as JSON copies, never as
references, so later changes to a listing do not alter history. Timestamps
are timezone-aware UTC.
"""
import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel

from second_thought.utils import utcnow


def _timestamp(index: bool = False) -> Column:
    return Column(DateTime(timezone=True), nullable=False, index=index)


def _new_id() -> str:
    return str(uuid.uuid4())


class UserProfileRow(SQLModel, table=True):
    """User financial context (goals, budget, cool-down preference)."""

    __tablename__ = "user_profiles"

    id: str = Field(primary_key=True)
    savings_goal: float | None = None
    monthly_budget: float | None = None
    financial_goals: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    spending_threshold: float = Field(default=20.0)
    cooldown_enabled: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, sa_column=_timestamp())
    updated_at: datetime = Field(default_factory=utcnow, sa_column=_timestamp())


class CoolDownRow(SQLModel, table=True):
    """A deferral period for one (user, product url) pair."""

    __tablename__ = "cooldowns"

    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(foreign_key="user_profiles.id", index=True)
    product_url: str = Field(index=True)
    product_info: dict = Field(sa_column=Column(JSON, nullable=False))
    analysis_result: dict = Field(sa_column=Column(JSON, nullable=False))
    started_at: datetime = Field(sa_column=_timestamp())
    expires_at: datetime = Field(sa_column=_timestamp(index=True))
    status: str = Field(default="active", index=True)  # active | expired | cancelled
    created_at: datetime = Field(default_factory=utcnow, sa_column=_timestamp())


class InterventionRow(SQLModel, table=True):
    """What a user did after seeing a recommendation (analytics)."""

    __tablename__ = "interventions"

    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(foreign_key="user_profiles.id", index=True)
    product_info: dict = Field(sa_column=Column(JSON, nullable=False))
    analysis_result: dict = Field(sa_column=Column(JSON, nullable=False))
    user_action: str  # dismissed | cooldown_started | proceeded
    created_at: datetime = Field(default_factory=utcnow, sa_column=_timestamp(index=True))
