import json
from datetime import timedelta

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from second_thought.config import Settings
from second_thought.container import Container
from second_thought.main import create_app
from second_thought.providers import TraceClient
from second_thought.services import CoolDownManager

from conftest import T0, FakeClock, make_product, make_recommendation

AI_RESPONSE = json.dumps(
    {
        "isEssential": False,
        "essentialityScore": 0.3,
        "reasoning": "Nice to have, not a need.",
        "warnings": [],
        "personalizedMessage": "Consider waiting a day.",
        "suggestedAction": "cooldown",
    }
)


class StaticProvider:
    async def complete(self, prompt: str) -> str:
        return AI_RESPONSE

    async def close(self) -> None:
        return None


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(T0)


@pytest.fixture
def container(engine, clock):
    container = Container()
    container.settings.override(providers.Object(Settings()))
    container.engine.override(providers.Object(engine))
    container.inference_provider.override(providers.Object(StaticProvider()))
    container.trace_client.override(providers.Object(TraceClient()))
    container.evaluator.override(providers.Object(None))
    container.cooldown_manager.override(
        providers.Singleton(
            CoolDownManager,
            container.cooldown_store,
            profile_resolver=container.profile_manager.provided.get,
            clock=clock,
        )
    )
    container.wire()
    yield container
    container.unwire()


@pytest.fixture
def client(container):
    with TestClient(create_app(container)) as test_client:
        yield test_client


def _product_json(**overrides) -> dict:
    return make_product(**overrides).model_dump(mode="json", by_alias=True)


def _analysis_json() -> dict:
    return make_recommendation().model_dump(mode="json", by_alias=True)


def test_health(client):
    assert client.get("/").json() == {"status": "ok"}


def test_analyze_returns_camel_case_analysis(client):
    response = client.post(
        "/analyze", json={"product": _product_json(price=20, originalPrice=100)}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["analysis"]["suggestedAction"] == "cooldown"
    assert body["analysis"]["warnings"][0]["type"] == "fake_discount"
    assert body["analysis"]["opportunityCost"]["projections"]["year20"] == pytest.approx(77.39)
    assert body["metadata"]["hasUserProfile"] is False
    assert body["metadata"]["latencyMs"] >= 0


def test_analyze_with_user_creates_profile(client):
    response = client.post("/analyze", json={"product": _product_json(), "userId": "user-1"})
    assert response.json()["metadata"]["hasUserProfile"] is True
    assert client.get("/profiles/user-1").status_code == 200


@pytest.mark.parametrize(
    "product",
    [
        {"price": 10, "url": "https://x"},
        {"name": "Lamp", "url": "https://x"},
        {"name": "Lamp", "price": 0, "url": "https://x"},
    ],
)
def test_analyze_requires_name_and_price(client, product):
    response = client.post("/analyze", json={"product": product})
    assert response.status_code == 400
    assert "Name and price are required" in response.json()["detail"]


def test_analyze_rejects_product_without_url(client):
    response = client.post("/analyze", json={"product": {"name": "Lamp", "price": 10}})
    assert response.status_code == 400


@pytest.mark.parametrize(
    "overrides",
    [{"price": -5}, {"currency": "USDX"}, {"currency": "US"}, {"name": 42}],
)
def test_analyze_rejects_invalid_product(client, overrides):
    product = {"name": "Lamp", "price": 10, "currency": "USD", "url": "https://x", **overrides}
    response = client.post("/analyze", json={"product": product})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid product data."


def test_analyze_rejects_too_many_urgency_indicators(client):
    product = {"name": "Lamp", "price": 10, "url": "https://x", "urgencyIndicators": ["Hurry"] * 6}
    response = client.post("/analyze", json={"product": product})
    assert response.status_code == 400


def test_extract(client):
    response = client.post(
        "/extract",
        json={
            "url": "https://www.amazon.com/dp/B01",
            "name": "Desk Lamp",
            "priceText": "$24.99",
            "originalPriceText": "$49.99",
            "urgencyTexts": ["Only 4 left in stock"],
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["site"] == "amazon"
    assert body["product"]["price"] == 24.99
    assert body["product"]["originalPrice"] == 49.99
    assert body["product"]["urgencyIndicators"] == ["Only 4 left in stock"]


def test_extract_without_price_is_400(client):
    response = client.post("/extract", json={"url": "https://x", "name": "Lamp"})
    assert response.status_code == 400


def test_selectors(client):
    body = client.get("/extract/selectors", params={"hostname": "www.ebay.com"}).json()
    assert body["site"] == "ebay"
    assert "originalPrice" in body


def test_cooldown_lifecycle(client, clock):
    product = _product_json()
    started = client.post(
        "/cooldowns", json={"userId": "user-1", "product": product, "analysis": _analysis_json()}
    )
    assert started.status_code == 200
    cool_down = started.json()["coolDown"]
    assert cool_down["status"] == "active"
    assert cool_down["remainingTime"] == 24 * 3_600_000
    assert cool_down["formattedTime"] == "24h 0m remaining"
    assert cool_down["productInfo"]["name"] == "Noise Cancelling Headphones"

    checked = client.get("/cooldowns", params={"userId": "user-1", "productUrl": product["url"]})
    assert checked.json()["coolDown"]["id"] == cool_down["id"]

    listed = client.get("/cooldowns", params={"userId": "user-1"}).json()
    assert [cd["id"] for cd in listed["coolDowns"]] == [cool_down["id"]]

    clock.now = T0 + timedelta(hours=25)
    checked = client.get("/cooldowns", params={"userId": "user-1", "productUrl": product["url"]})
    assert checked.json() == {"success": True, "coolDown": None}

    expired = client.get("/cooldowns/expired", params={"userId": "user-1"}).json()
    assert expired["coolDowns"][0]["status"] == "expired"
    assert expired["coolDowns"][0]["remainingTime"] == 0
    assert expired["coolDowns"][0]["formattedTime"] == "Expired"


def test_start_cooldown_creates_missing_profile(client):
    client.post(
        "/cooldowns", json={"userId": "fresh", "product": _product_json(), "analysis": _analysis_json()}
    )
    assert client.get("/profiles/fresh").status_code == 200


@pytest.mark.parametrize(
    "overrides", [{"name": ""}, {"price": -5}, {"price": 0}, {"currency": "US"}]
)
def test_start_cooldown_rejects_invalid_product(client, overrides):
    product = {**_product_json(), **overrides}
    response = client.post(
        "/cooldowns", json={"userId": "user-1", "product": product, "analysis": _analysis_json()}
    )
    assert response.status_code == 422
    assert client.get("/cooldowns", params={"userId": "user-1"}).json()["coolDowns"] == []


def test_cancel_cooldown(client):
    cool_down = client.post(
        "/cooldowns",
        json={"userId": "user-1", "product": _product_json(), "analysis": _analysis_json()},
    ).json()["coolDown"]

    assert client.delete(f"/cooldowns/{cool_down['id']}").json() == {"success": True}
    assert client.get("/cooldowns", params={"userId": "user-1"}).json()["coolDowns"] == []


def test_cancel_unknown_cooldown_is_404(client):
    response = client.delete("/cooldowns/nope")
    assert response.status_code == 404
    assert response.json()["detail"] == "Cool-down 'nope' not found"


def test_cooldowns_require_user_id(client):
    assert client.get("/cooldowns").status_code == 422


def test_profile_get_missing_is_404(client):
    response = client.get("/profiles/ghost")
    assert response.status_code == 404
    assert response.json()["detail"] == "Profile 'ghost' not found"


def test_profile_create_then_update(client):
    created = client.post("/profiles", json={"financialGoals": ["House"], "savingsGoal": 100})
    profile = created.json()["profile"]
    assert profile["financialGoals"] == ["House"]
    assert profile["coolDownEnabled"] is True

    updated = client.post(
        "/profiles", json={"userId": profile["id"], "coolDownEnabled": False}
    ).json()["profile"]
    assert updated["id"] == profile["id"]
    assert updated["coolDownEnabled"] is False
    assert updated["savingsGoal"] == 100


def test_track_engagement(client):
    response = client.post(
        "/track",
        json={
            "eventType": "engagement",
            "userId": "user-1",
            "sessionId": "s-1",
            "data": {"action": "dismissed", "product": _product_json(), "analysis": _analysis_json()},
        },
    )
    assert response.status_code == 200
    assert response.json()["interventionId"]


def test_track_invalid_event_type_is_400(client):
    response = client.post("/track", json={"eventType": "purchase", "userId": "user-1", "data": {}})
    assert response.status_code == 400
    assert "Invalid event type" in response.json()["detail"]
