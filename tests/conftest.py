"""Shared fixtures: product/recommendation builders, in-memory database, fake collaborators."""
from datetime import datetime, timezone

import pytest
from openai.types.chat import ChatCompletion
from openai.types.chat.chat_completion import ChatCompletionMessage, Choice

from second_thought.db import (SqlCoolDownStore, SqlInterventionStore,
                               SqlUserProfileStore, create_db_engine, init_db)
from second_thought.pricing import calculate_opportunity_cost
from second_thought.schemas import (ProductRecord, Recommendation,
                                    SuggestedAction)

T0 = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_product(**overrides) -> ProductRecord:
    fields = {
        "name": "Noise Cancelling Headphones",
        "price": 100.0,
        "currency": "USD",
        "url": "https://shop.example/p/headphones",
    }
    fields.update(overrides)
    return ProductRecord(**fields)


def make_recommendation(**overrides) -> Recommendation:
    fields = {
        "is_essential": False,
        "essentiality_score": 0.3,
        "reasoning": "Headphones are a want rather than a need for most people.",
        "warnings": [],
        "opportunity_cost": calculate_opportunity_cost(100.0),
        "personalized_message": "Think about whether this helps your vacation goal.",
        "suggested_action": SuggestedAction.COOLDOWN,
    }
    fields.update(overrides)
    return Recommendation(**fields)


def create_mock_completion(content: str | None) -> ChatCompletion:
    return ChatCompletion(
        id="chatcmpl-mock",
        choices=[
            Choice(
                finish_reason="stop",
                index=0,
                message=ChatCompletionMessage(content=content, role="assistant"),
            )
        ],
        created=1677652288,
        model="mock-model",
        object="chat.completion",
    )


class FakeClock:
    """Settable clock returning aware UTC datetimes."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeInferenceProvider:
    """Returns canned completions in order; an Exception entry is raised instead."""

    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        return None


@pytest.fixture
def product() -> ProductRecord:
    return make_product()


@pytest.fixture
def recommendation() -> Recommendation:
    return make_recommendation()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def cooldown_store(engine) -> SqlCoolDownStore:
    return SqlCoolDownStore(engine)


@pytest.fixture
def profile_store(engine) -> SqlUserProfileStore:
    return SqlUserProfileStore(engine)


@pytest.fixture
def intervention_store(engine) -> SqlInterventionStore:
    return SqlInterventionStore(engine)
