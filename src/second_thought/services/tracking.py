"""User engagement, cool-down and profile events reported by the extension."""
import asyncio
import logging
from typing import Any

from second_thought.db.store import InterventionStore
from second_thought.providers.tracing import TraceClient
from second_thought.schemas import (ProductRecord, Recommendation,
                                    TrackEventType)

logger = logging.getLogger(__name__)

ENGAGEMENT_ACTIONS = frozenset({"dismissed", "cooldown_started", "proceeded"})
COOLDOWN_EVENTS = frozenset({"started", "checked", "expired", "cancelled"})
UNKNOWN_SESSION = "unknown"


class TrackingService:
    """Validates event payloads, forwards them to tracing and logs interventions."""

    def __init__(
        self, tracer: TraceClient, interventions: InterventionStore | None = None
    ) -> None:
        self._tracer = tracer
        self._interventions = interventions

    async def track(
        self,
        event_type: str,
        user_id: str,
        session_id: str | None,
        data: dict[str, Any],
    ) -> str | None:
        """Handle one event. Returns the intervention id when one was recorded.

        Raises:
            ValueError: Unknown event type or malformed event data.
        """
        if not user_id:
            raise ValueError("userId is required")
        try:
            kind = TrackEventType(event_type)
        except ValueError:
            raise ValueError(f"Invalid event type: {event_type!r}") from None

        if kind is TrackEventType.ENGAGEMENT:
            return await self._engagement(user_id, session_id or UNKNOWN_SESSION, data)
        if kind is TrackEventType.COOLDOWN:
            await self._cooldown(user_id, data)
        else:
            await self._profile(user_id, data)
        return None

    async def _engagement(self, user_id: str, session_id: str, data: dict[str, Any]) -> str | None:
        action = data.get("action")
        if action not in ENGAGEMENT_ACTIONS:
            raise ValueError(f"Invalid engagement action: {action!r}")
        # pydantic's ValidationError is a ValueError, so bad snapshots map to 400.
        product = ProductRecord.model_validate(data["product"]) if data.get("product") else None
        recommendation = (
            Recommendation.model_validate(data["analysis"]) if data.get("analysis") else None
        )

        intervention_id = None
        if self._interventions is not None and product and recommendation:
            intervention_id = await asyncio.to_thread(
                self._interventions.record, user_id, product, recommendation, action
            )
            logger.debug("Recorded intervention %s (%s) for %s", intervention_id, action, user_id)

        await self._tracer.log_user_engagement(user_id, session_id, action, product, recommendation)
        return intervention_id

    async def _cooldown(self, user_id: str, data: dict[str, Any]) -> None:
        event = data.get("event")
        if event not in COOLDOWN_EVENTS:
            raise ValueError(f"Invalid cool-down event: {event!r}")
        product_url = data.get("productUrl")
        if not isinstance(product_url, str):
            raise ValueError("productUrl is required for cool-down events")
        remaining = data.get("remainingTimeMs")
        if remaining is not None and (isinstance(remaining, bool) or not isinstance(remaining, (int, float))):
            raise ValueError("remainingTimeMs must be a number")
        await self._tracer.log_cooldown_event(
            user_id, event, product_url, int(remaining) if remaining is not None else None
        )

    async def _profile(self, user_id: str, data: dict[str, Any]) -> None:
        fields = data.get("updatedFields") or []
        if not isinstance(fields, list) or not all(isinstance(f, str) for f in fields):
            raise ValueError("updatedFields must be a list of field names")
        await self._tracer.log_profile_update(user_id, fields)
