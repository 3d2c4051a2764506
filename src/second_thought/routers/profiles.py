"""User profile routes."""
from dependency_injector.wiring import inject
from fastapi import APIRouter

from second_thought.container import ProfileManagerDep, TraceClientDep
from second_thought.providers.core import (SERVICE_EXCEPTIONS, NotFoundError,
                                           ServiceErrorMapper)
from second_thought.schemas import (ProfileResponse, ProfileUpdate,
                                    ProfileUpsertRequest)
from second_thought.services import UserProfileManager

router = APIRouter(prefix="/profiles", tags=["profiles"])
_errors = ServiceErrorMapper(resource_name="Profile", api_name="Store")


@router.get("/{user_id}", response_model=ProfileResponse)
@inject
async def get_profile(user_id: str, profiles: ProfileManagerDep) -> ProfileResponse:
    try:
        profile = await profiles.get(user_id)
        if profile is None:
            raise NotFoundError(user_id)
    except SERVICE_EXCEPTIONS as exc:
        _errors.raise_http(exc, identifier=user_id)
    return ProfileResponse(profile=profile)


@router.post("", response_model=ProfileResponse)
@inject
async def save_profile(
    body: ProfileUpsertRequest, profiles: ProfileManagerDep, tracer: TraceClientDep
) -> ProfileResponse:
    """Update the profile for userId, or create it (with a new id when userId is omitted)."""
    update = ProfileUpdate.model_validate(
        body.model_dump(include=set(ProfileUpdate.model_fields), exclude_unset=True)
    )
    try:
        profile = await profiles.upsert(body.user_id, update)
    except SERVICE_EXCEPTIONS as exc:
        _errors.raise_http(exc, identifier=body.user_id)
    changed = UserProfileManager.changed_field_names(update)
    if changed:
        await tracer.log_profile_update(profile.id, changed)
    return ProfileResponse(profile=profile)
