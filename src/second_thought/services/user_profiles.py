"""User profile access: get, create, partial update, get-or-create."""
import asyncio
import logging
import uuid

from second_thought.db.store import UserProfileStore
from second_thought.providers.core.exceptions import NotFoundError
from second_thought.schemas import ProfileUpdate, UserProfile

logger = logging.getLogger(__name__)


# Fields that may be cleared by sending null.
_NULLABLE_FIELDS = frozenset({"savings_goal", "monthly_budget"})


def _changed_fields(update: ProfileUpdate | None) -> dict:
    """Only the fields the caller actually set, keyed by attribute name."""
    if update is None:
        return {}
    dumped = update.model_dump(include=set(ProfileUpdate.model_fields), exclude_unset=True)
    return {k: v for k, v in dumped.items() if v is not None or k in _NULLABLE_FIELDS}


class UserProfileManager:
    """Creates profiles lazily and merges partial updates."""

    def __init__(self, store: UserProfileStore) -> None:
        self._store = store

    async def get(self, user_id: str) -> UserProfile | None:
        return await asyncio.to_thread(self._store.get, user_id)

    async def create(
        self, update: ProfileUpdate | None = None, user_id: str | None = None
    ) -> UserProfile:
        """Create a profile; a random id is generated when none is given."""
        profile_id = user_id or str(uuid.uuid4())
        fields = {k: v for k, v in _changed_fields(update).items() if v is not None}
        profile = await asyncio.to_thread(self._store.insert, profile_id, fields)
        logger.info("Created user profile %s", profile.id)
        return profile

    async def update(self, user_id: str, update: ProfileUpdate) -> UserProfile:
        """Merge the set fields of update into an existing profile."""
        profile = await asyncio.to_thread(self._store.update, user_id, _changed_fields(update))
        if profile is None:
            raise NotFoundError(f"User profile '{user_id}' not found")
        return profile

    async def get_or_create(self, user_id: str | None = None) -> UserProfile:
        if user_id:
            existing = await self.get(user_id)
            if existing is not None:
                return existing
        return await self.create(user_id=user_id)

    async def upsert(self, user_id: str | None, update: ProfileUpdate) -> UserProfile:
        """Update when the profile exists, otherwise create it with these fields."""
        if user_id and await self.get(user_id) is not None:
            return await self.update(user_id, update)
        return await self.create(update, user_id=user_id)

    @staticmethod
    def changed_field_names(update: ProfileUpdate) -> list[str]:
        """camelCase names of the fields set on update (for tracing)."""
        fields = ProfileUpdate.model_fields
        return [fields[name].alias or name for name in _changed_fields(update)]
