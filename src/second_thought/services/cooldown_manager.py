"""Cool-down lifecycle: start, check, list, cancel, with lazy expiry.

States: active -> expired (on any read after expires_at) and
active -> cancelled (explicit). Expired and cancelled are terminal. There is
no background job; every status-dependent read sweeps stale records first.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta

from second_thought.db.store import CoolDownStore
from second_thought.providers.core.exceptions import (NotFoundError,
                                                      ProfileRequiredError)
from second_thought.schemas import (CoolDown, CoolDownStatus, CoolDownView,
                                    ProductRecord, Recommendation, UserProfile)
from second_thought.utils import utcnow

logger = logging.getLogger(__name__)

COOLDOWN_DURATION = timedelta(hours=24)
DEFAULT_EXPIRED_LIMIT = 10

ProfileResolver = Callable[[str], Awaitable[UserProfile | None]]


class CoolDownManager:
    """Sole writer of cool-down status transitions."""

    def __init__(
        self,
        store: CoolDownStore,
        *,
        profile_resolver: ProfileResolver | None = None,
        duration: timedelta = COOLDOWN_DURATION,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the manager.

        Args:
            store: Backing store for cool-down records.
            profile_resolver: Async lookup of a user's profile; when given, start()
                refuses users without one.
            duration: Length of a cool-down.
            clock: Returns the current aware UTC time.
        """
        self._store = store
        self._resolve_profile = profile_resolver
        self._duration = duration
        self._clock = clock

    async def start(
        self, user_id: str, product: ProductRecord, recommendation: Recommendation
    ) -> CoolDown:
        """Create an active cool-down with snapshots of product and recommendation."""
        if self._resolve_profile is not None and await self._resolve_profile(user_id) is None:
            raise ProfileRequiredError(f"No user profile for '{user_id}'")

        now = self._clock()
        cool_down = await asyncio.to_thread(
            self._store.insert,
            user_id=user_id,
            product=product.model_copy(deep=True),
            recommendation=recommendation.model_copy(deep=True),
            started_at=now,
            expires_at=now + self._duration,
        )
        logger.info("Cool-down %s started for user %s on %s", cool_down.id, user_id, product.url)
        return cool_down

    async def expire_stale(self) -> int:
        """Mark every active record past its expiry as expired. Idempotent."""
        expired = await asyncio.to_thread(self._store.expire_stale, self._clock())
        if expired:
            logger.debug("Expired %d cool-down(s)", expired)
        return expired

    async def check(self, user_id: str, product_url: str) -> CoolDown | None:
        """The active cool-down for (user, url), or None."""
        await self.expire_stale()
        cool_down = await asyncio.to_thread(self._store.find_active, user_id, product_url)
        if cool_down is None or cool_down.status is not CoolDownStatus.ACTIVE:
            return None
        return cool_down

    async def get_active(self, user_id: str) -> list[CoolDown]:
        """Active cool-downs, soonest expiry first."""
        await self.expire_stale()
        return await asyncio.to_thread(
            self._store.list_by_status, user_id, CoolDownStatus.ACTIVE
        )

    async def get_expired(self, user_id: str, limit: int = DEFAULT_EXPIRED_LIMIT) -> list[CoolDown]:
        """Expired cool-downs, most recent expiry first."""
        await self.expire_stale()
        return await asyncio.to_thread(
            self._store.list_by_status,
            user_id,
            CoolDownStatus.EXPIRED,
            newest_first=True,
            limit=limit,
        )

    async def cancel(self, cooldown_id: str) -> CoolDown:
        """Set status to cancelled regardless of the current status; return the record."""
        found = await asyncio.to_thread(
            self._store.update_status, cooldown_id, CoolDownStatus.CANCELLED
        )
        if not found:
            raise NotFoundError(f"Cool-down '{cooldown_id}' not found")
        logger.info("Cool-down %s cancelled", cooldown_id)
        return await asyncio.to_thread(self._store.get, cooldown_id)

    def get_remaining_time(self, cool_down: CoolDown) -> int:
        """Milliseconds until expiry, never negative."""
        remaining = cool_down.expires_at - self._clock()
        return max(0, int(remaining.total_seconds() * 1000))

    def format_remaining_time(self, cool_down: CoolDown) -> str:
        """Human-readable remaining time, e.g. "3h 12m remaining" or "Expired"."""
        remaining = self.get_remaining_time(cool_down)
        if remaining <= 0:
            return "Expired"
        hours, rest = divmod(remaining, 3_600_000)
        minutes = rest // 60_000
        if hours > 0:
            return f"{hours}h {minutes}m remaining"
        return f"{minutes}m remaining"

    def to_view(self, cool_down: CoolDown) -> CoolDownView:
        """Attach remaining time for API responses."""
        return CoolDownView(
            **cool_down.model_dump(),
            remaining_time=self.get_remaining_time(cool_down),
            formatted_time=self.format_remaining_time(cool_down),
        )
