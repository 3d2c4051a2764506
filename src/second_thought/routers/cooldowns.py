"""Cool-down routes. Expiry is applied lazily by the manager on every read."""
from dependency_injector.wiring import inject
from fastapi import APIRouter, Query

from second_thought.container import CoolDownManagerDep, ProfileManagerDep
from second_thought.providers.core import (SERVICE_EXCEPTIONS,
                                           ServiceErrorMapper)
from second_thought.schemas import (CoolDownListResponse, CoolDownResponse,
                                    StartCoolDownRequest, SuccessResponse)
from second_thought.services.cooldown_manager import DEFAULT_EXPIRED_LIMIT

router = APIRouter(prefix="/cooldowns", tags=["cooldowns"])
_errors = ServiceErrorMapper(resource_name="Cool-down", api_name="Store")


@router.get("", response_model=CoolDownListResponse | CoolDownResponse)
@inject
async def get_cooldowns(
    manager: CoolDownManagerDep,
    user_id: str = Query(..., alias="userId", min_length=1),
    product_url: str | None = Query(default=None, alias="productUrl"),
) -> CoolDownListResponse | CoolDownResponse:
    """Active cool-down for one product URL, or all active cool-downs of a user."""
    try:
        if product_url:
            cool_down = await manager.check(user_id, product_url)
            return CoolDownResponse(
                cool_down=manager.to_view(cool_down) if cool_down else None
            )
        cool_downs = await manager.get_active(user_id)
    except SERVICE_EXCEPTIONS as exc:
        _errors.raise_http(exc)
    return CoolDownListResponse(cool_downs=[manager.to_view(cd) for cd in cool_downs])


@router.get("/expired", response_model=CoolDownListResponse)
@inject
async def get_expired_cooldowns(
    manager: CoolDownManagerDep,
    user_id: str = Query(..., alias="userId", min_length=1),
    limit: int = Query(default=DEFAULT_EXPIRED_LIMIT, ge=1, le=100),
) -> CoolDownListResponse:
    """Expired cool-downs, most recently expired first."""
    try:
        cool_downs = await manager.get_expired(user_id, limit)
    except SERVICE_EXCEPTIONS as exc:
        _errors.raise_http(exc)
    return CoolDownListResponse(cool_downs=[manager.to_view(cd) for cd in cool_downs])


@router.post("", response_model=CoolDownResponse)
@inject
async def start_cooldown(
    body: StartCoolDownRequest,
    manager: CoolDownManagerDep,
    profiles: ProfileManagerDep,
) -> CoolDownResponse:
    """Start a cool-down; the user's profile is created first if missing."""
    try:
        await profiles.get_or_create(body.user_id)
        cool_down = await manager.start(body.user_id, body.product, body.analysis)
    except SERVICE_EXCEPTIONS as exc:
        _errors.raise_http(exc)
    return CoolDownResponse(cool_down=manager.to_view(cool_down))


@router.delete("/{cooldown_id}", response_model=SuccessResponse)
@inject
async def cancel_cooldown(cooldown_id: str, manager: CoolDownManagerDep) -> SuccessResponse:
    try:
        await manager.cancel(cooldown_id)
    except SERVICE_EXCEPTIONS as exc:
        _errors.raise_http(exc, identifier=cooldown_id)
    return SuccessResponse()
