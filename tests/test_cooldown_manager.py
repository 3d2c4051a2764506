from datetime import timedelta

import pytest

from second_thought.providers.core import NotFoundError, ProfileRequiredError
from second_thought.schemas import CoolDownStatus, PricingWarning, WarningType
from second_thought.services import CoolDownManager

from conftest import T0, make_product, make_recommendation


@pytest.fixture
def manager(cooldown_store, clock) -> CoolDownManager:
    return CoolDownManager(cooldown_store, clock=clock)


@pytest.mark.asyncio
async def test_start_creates_active_cooldown_for_24_hours(manager, product, recommendation):
    cool_down = await manager.start("user-1", product, recommendation)

    assert cool_down.status is CoolDownStatus.ACTIVE
    assert cool_down.product_url == product.url
    assert cool_down.started_at == T0
    assert cool_down.expires_at == T0 + timedelta(hours=24)
    assert cool_down.product_info == product
    assert cool_down.analysis_result == recommendation


@pytest.mark.asyncio
async def test_check_finds_active_cooldown(manager, product, recommendation, clock):
    started = await manager.start("user-1", product, recommendation)
    clock.now = T0 + timedelta(hours=23)

    found = await manager.check("user-1", product.url)

    assert found is not None
    assert found.id == started.id
    assert await manager.check("user-2", product.url) is None
    assert await manager.check("user-1", "https://shop.example/other") is None


@pytest.mark.asyncio
async def test_check_after_expiry_reports_expired(manager, cooldown_store, product, recommendation, clock):
    started = await manager.start("user-1", product, recommendation)
    clock.now = T0 + timedelta(hours=25)

    assert await manager.check("user-1", product.url) is None
    stored = cooldown_store.get(started.id)
    assert stored.status is CoolDownStatus.EXPIRED
    assert manager.get_remaining_time(stored) == 0
    assert manager.format_remaining_time(stored) == "Expired"


@pytest.mark.asyncio
async def test_get_active_sweeps_and_orders_by_soonest_expiry(manager, product, recommendation, clock):
    first = await manager.start("user-1", make_product(url="https://a"), recommendation)
    clock.now = T0 + timedelta(hours=2)
    second = await manager.start("user-1", make_product(url="https://b"), recommendation)
    clock.now = T0 + timedelta(hours=3)
    third = await manager.start("user-1", make_product(url="https://c"), recommendation)
    await manager.start("user-2", product, recommendation)

    active = await manager.get_active("user-1")
    assert [cd.id for cd in active] == [first.id, second.id, third.id]

    clock.now = T0 + timedelta(hours=26, minutes=30)
    active = await manager.get_active("user-1")
    assert [cd.id for cd in active] == [third.id]
    assert all(cd.status is CoolDownStatus.ACTIVE for cd in active)


@pytest.mark.asyncio
async def test_get_expired_newest_first_with_limit(manager, recommendation, clock):
    ids = []
    for hour, url in enumerate(["https://a", "https://b", "https://c"]):
        clock.now = T0 + timedelta(hours=hour)
        ids.append((await manager.start("user-1", make_product(url=url), recommendation)).id)

    clock.now = T0 + timedelta(days=3)
    expired = await manager.get_expired("user-1")
    assert [cd.id for cd in expired] == list(reversed(ids))
    assert all(cd.status is CoolDownStatus.EXPIRED for cd in expired)

    limited = await manager.get_expired("user-1", limit=2)
    assert [cd.id for cd in limited] == [ids[2], ids[1]]


@pytest.mark.asyncio
async def test_sweep_is_idempotent(manager, cooldown_store, product, recommendation, clock):
    started = await manager.start("user-1", product, recommendation)
    clock.now = T0 + timedelta(hours=30)

    assert await manager.expire_stale() == 1
    assert await manager.expire_stale() == 0
    assert cooldown_store.get(started.id).status is CoolDownStatus.EXPIRED


@pytest.mark.asyncio
async def test_cancel_sets_cancelled(manager, cooldown_store, product, recommendation):
    started = await manager.start("user-1", product, recommendation)

    cancelled = await manager.cancel(started.id)

    assert cancelled.id == started.id
    assert cancelled.status is CoolDownStatus.CANCELLED
    assert cooldown_store.get(started.id).status is CoolDownStatus.CANCELLED
    assert await manager.check("user-1", product.url) is None
    assert await manager.get_active("user-1") == []


@pytest.mark.asyncio
async def test_cancel_past_expiry_is_not_overwritten_by_sweep(
    manager, cooldown_store, product, recommendation, clock
):
    started = await manager.start("user-1", product, recommendation)
    clock.now = T0 + timedelta(hours=25)

    await manager.cancel(started.id)
    assert await manager.expire_stale() == 0

    assert cooldown_store.get(started.id).status is CoolDownStatus.CANCELLED
    assert await manager.get_expired("user-1") == []


@pytest.mark.asyncio
async def test_cancel_unknown_id_raises_not_found(manager):
    with pytest.raises(NotFoundError):
        await manager.cancel("missing")


@pytest.mark.asyncio
async def test_start_requires_profile_when_resolver_given(cooldown_store, product, recommendation, clock):
    async def no_profile(_user_id):
        return None

    manager = CoolDownManager(cooldown_store, profile_resolver=no_profile, clock=clock)
    with pytest.raises(ProfileRequiredError):
        await manager.start("ghost", product, recommendation)
    assert await manager.get_active("ghost") == []


@pytest.mark.asyncio
async def test_custom_duration(cooldown_store, product, recommendation, clock):
    manager = CoolDownManager(cooldown_store, duration=timedelta(hours=2), clock=clock)
    cool_down = await manager.start("user-1", product, recommendation)
    assert cool_down.expires_at == T0 + timedelta(hours=2)


@pytest.mark.asyncio
async def test_remaining_time_formatting(manager, product, recommendation, clock):
    cool_down = await manager.start("user-1", product, recommendation)

    assert manager.get_remaining_time(cool_down) == 24 * 3_600_000
    assert manager.format_remaining_time(cool_down) == "24h 0m remaining"

    clock.now = T0 + timedelta(hours=22, minutes=55)
    assert manager.format_remaining_time(cool_down) == "1h 5m remaining"

    clock.now = T0 + timedelta(hours=23, minutes=30)
    assert manager.format_remaining_time(cool_down) == "30m remaining"

    view = manager.to_view(cool_down)
    assert view.remaining_time == 30 * 60_000
    assert view.formatted_time == "30m remaining"
    assert view.model_dump(by_alias=True)["remainingTime"] == 30 * 60_000


@pytest.mark.asyncio
async def test_stored_snapshot_ignores_later_changes_to_live_objects(manager):
    product = make_product(urgency_indicators=["Only 2 left"])
    recommendation = make_recommendation(
        warnings=[
            PricingWarning(
                type=WarningType.URGENCY_MANIPULATION,
                confidence=0.65,
                explanation="Uses pressure tactics.",
            )
        ]
    )
    await manager.start("user-1", product, recommendation)

    product.urgency_indicators.append("Hurry, selling fast")
    recommendation.warnings.clear()

    found = await manager.check("user-1", product.url)
    assert found.product_info.urgency_indicators == ["Only 2 left"]
    assert [w.type for w in found.analysis_result.warnings] == [WarningType.URGENCY_MANIPULATION]
