import logging
from unittest.mock import MagicMock, patch

import opik
import pytest

from second_thought.config import Settings
from second_thought.providers import TraceClient
from second_thought.providers.tracing import followed_advice
from second_thought.schemas import EvaluationResult, SuggestedAction

from conftest import make_product, make_recommendation


@pytest.fixture
def opik_client() -> MagicMock:
    return MagicMock(spec=opik.Opik)


@pytest.fixture
def tracer(opik_client) -> TraceClient:
    return TraceClient(opik_client, project_name="test-project", model_version="m-1")


def _traces(opik_client: MagicMock) -> list[dict]:
    return [call.kwargs for call in opik_client.trace.call_args_list]


@pytest.mark.asyncio
async def test_analysis_trace_start_and_complete(tracer, opik_client):
    product = make_product(original_price=150, urgency_indicators=["Hurry"])

    context = await tracer.start_analysis_trace(product, "user-1", "session-1")
    await tracer.complete_analysis_trace(context, make_recommendation(), {"hasUserProfile": True})

    start, complete = _traces(opik_client)
    assert start["name"] == "purchase-analysis"
    assert start["project_name"] == "test-project"
    assert start["input"]["product"]["hasDiscount"] is True
    assert start["input"]["product"]["urgencyIndicatorCount"] == 1
    assert start["metadata"]["traceId"] == context.trace_id
    assert start["metadata"]["userId"] == "user-1"
    assert complete["output"]["suggestedAction"] == "cooldown"
    assert complete["output"]["opportunityCost20yr"] == pytest.approx(386.97)
    assert complete["metadata"]["hasUserProfile"] is True
    assert complete["metadata"]["modelVersion"] == "m-1"
    assert complete["metadata"]["latencyMs"] >= 0
    assert opik_client.trace.return_value.end.call_count == 2
    assert opik_client.flush.call_count == 2


@pytest.mark.asyncio
async def test_engagement_computes_followed_advice(tracer, opik_client):
    await tracer.log_user_engagement(
        "user-1", "s-1", "cooldown_started", make_product(), make_recommendation()
    )
    await tracer.log_user_engagement("user-1", "s-1", "proceeded")

    followed, unknown = _traces(opik_client)
    assert followed["name"] == "user-engagement"
    assert followed["output"] == {"userAction": "cooldown_started", "followedAdvice": True}
    assert unknown["input"]["productName"] == "unknown"
    assert unknown["output"]["followedAdvice"] is False


@pytest.mark.parametrize(
    "suggested,action,expected",
    [
        (SuggestedAction.COOLDOWN, "cooldown_started", True),
        (SuggestedAction.SKIP, "dismissed", True),
        (SuggestedAction.PROCEED, "proceeded", True),
        (SuggestedAction.SKIP, "proceeded", False),
    ],
)
def test_followed_advice(suggested, action, expected):
    assert followed_advice(make_recommendation(suggested_action=suggested), action) is expected


@pytest.mark.asyncio
async def test_cooldown_event_rounds_remaining_hours(tracer, opik_client):
    await tracer.log_cooldown_event("user-1", "checked", "https://x", 5_400_000)
    await tracer.log_cooldown_event("user-1", "expired", "https://x")

    checked, expired = _traces(opik_client)
    assert checked["output"]["remainingHours"] == 1.5
    assert expired["output"] == {"remainingTimeMs": None, "remainingHours": 0}


@pytest.mark.asyncio
async def test_profile_update_and_evaluation(tracer, opik_client):
    context = await tracer.start_analysis_trace(make_product(), None)

    await tracer.log_profile_update("user-1", ["savingsGoal"])
    await tracer.log_evaluation(
        context,
        EvaluationResult(
            empathy_score=0.7, accuracy_score=1.0, relevance_score=0.7, actionability_score=0.9
        ),
    )

    _, profile, evaluation = _traces(opik_client)
    assert profile["input"] == {"updatedFields": ["savingsGoal"]}
    assert profile["output"] == {}
    assert evaluation["output"]["empathyScore"] == 0.7
    assert evaluation["input"]["traceId"] == context.trace_id


@pytest.mark.asyncio
async def test_client_failures_are_logged_not_raised(tracer, opik_client, caplog):
    opik_client.trace.side_effect = RuntimeError("backend unavailable")
    with caplog.at_level(logging.WARNING):
        await tracer.log_profile_update("user-1", ["savingsGoal"])
    assert "Trace profile-update failed: backend unavailable" in caplog.text


@pytest.mark.asyncio
async def test_close_ends_client(tracer, opik_client):
    await tracer.close()
    opik_client.end.assert_called_once_with()


@pytest.mark.asyncio
async def test_disabled_tracer_only_logs():
    tracer = TraceClient()
    assert not tracer.enabled
    context = await tracer.start_analysis_trace(make_product(), "user-1")
    assert context.trace_id.startswith("trace_")
    await tracer.close()


def test_from_settings_without_opik_config_is_disabled():
    with patch("second_thought.providers.tracing.opik.Opik") as opik_cls:
        tracer = TraceClient.from_settings(Settings())
    assert not tracer.enabled
    opik_cls.assert_not_called()


def test_from_settings_connects_to_opik():
    settings = Settings(opik_url="http://localhost:5173/api", opik_workspace="team")
    with patch("second_thought.providers.tracing.opik.Opik") as opik_cls:
        tracer = TraceClient.from_settings(settings)
    assert tracer.enabled
    opik_cls.assert_called_once_with(
        project_name="second-thought",
        workspace="team",
        host="http://localhost:5173/api",
        api_key=None,
    )
