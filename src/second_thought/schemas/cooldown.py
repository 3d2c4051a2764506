"""Cool-down models."""
from datetime import datetime
from enum import Enum

from second_thought.schemas.analysis import Recommendation
from second_thought.schemas.base import CamelModel
from second_thought.schemas.product import ProductRecord


class CoolDownStatus(str, Enum):
    """Cool-down lifecycle states. expired and cancelled are terminal."""

    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class CoolDown(CamelModel):
    """A deferral period for one (user, product url) pair."""

    id: str
    user_id: str
    product_url: str
    product_info: ProductRecord
    analysis_result: Recommendation
    started_at: datetime
    expires_at: datetime
    status: CoolDownStatus


class CoolDownView(CoolDown):
    """Cool-down as returned to clients, with remaining time."""

    remaining_time: int
    formatted_time: str
