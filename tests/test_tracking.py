from unittest.mock import AsyncMock, MagicMock

import pytest

from second_thought.db import get_session
from second_thought.db.models import InterventionRow
from second_thought.providers import TraceClient
from second_thought.services import TrackingService

from conftest import make_product, make_recommendation


@pytest.fixture
def tracer() -> MagicMock:
    tracer = MagicMock(spec=TraceClient)
    tracer.log_user_engagement = AsyncMock()
    tracer.log_cooldown_event = AsyncMock()
    tracer.log_profile_update = AsyncMock()
    return tracer


@pytest.fixture
def service(tracer, intervention_store) -> TrackingService:
    return TrackingService(tracer, intervention_store)


def _snapshot_data(action: str) -> dict:
    return {
        "action": action,
        "product": make_product().model_dump(mode="json", by_alias=True),
        "analysis": make_recommendation().model_dump(mode="json", by_alias=True),
    }


@pytest.mark.asyncio
async def test_engagement_with_snapshots_records_intervention(service, tracer, engine):
    intervention_id = await service.track("engagement", "user-1", "s-1", _snapshot_data("dismissed"))

    assert intervention_id is not None
    with get_session(engine) as session:
        row = session.get(InterventionRow, intervention_id)
        assert row.user_action == "dismissed"
        assert row.user_id == "user-1"
    args = tracer.log_user_engagement.await_args.args
    assert args[:3] == ("user-1", "s-1", "dismissed")
    assert args[3] == make_product()


@pytest.mark.asyncio
async def test_engagement_without_snapshots_only_traces(service, tracer):
    assert await service.track("engagement", "user-1", None, {"action": "proceeded"}) is None
    tracer.log_user_engagement.assert_awaited_once_with("user-1", "unknown", "proceeded", None, None)


@pytest.mark.asyncio
async def test_cooldown_event(service, tracer):
    await service.track(
        "cooldown", "user-1", None, {"event": "checked", "productUrl": "https://x", "remainingTimeMs": 60000}
    )
    tracer.log_cooldown_event.assert_awaited_once_with("user-1", "checked", "https://x", 60000)


@pytest.mark.asyncio
async def test_profile_event(service, tracer):
    await service.track("profile", "user-1", None, {"updatedFields": ["savingsGoal"]})
    tracer.log_profile_update.assert_awaited_once_with("user-1", ["savingsGoal"])


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "event_type,data",
    [
        ("purchase", {}),
        ("engagement", {"action": "bought"}),
        ("engagement", {"action": "dismissed", "product": {"name": "no price"}}),
        ("cooldown", {"event": "paused", "productUrl": "https://x"}),
        ("cooldown", {"event": "started"}),
        ("cooldown", {"event": "started", "productUrl": "https://x", "remainingTimeMs": "soon"}),
        ("profile", {"updatedFields": "savingsGoal"}),
    ],
)
async def test_invalid_events_raise_value_error(service, event_type, data):
    with pytest.raises(ValueError):
        await service.track(event_type, "user-1", None, data)


@pytest.mark.asyncio
async def test_user_id_required(service):
    with pytest.raises(ValueError, match="userId"):
        await service.track("profile", "", None, {})
