"""Protocols for external collaborators the core consumes."""
from typing import Protocol, runtime_checkable


@runtime_checkable
class InferenceProvider(Protocol):
    """Generative text completion (one prompt in, free-form text out)."""

    async def complete(self, prompt: str) -> str:
        """Return the model's text for prompt; raise InferenceError on failure."""
        ...


class RelevanceJudge(Protocol):
    """Semantic relevance judge for a question/answer pair."""

    async def score(self, question: str, answer: str) -> float:
        """Return relevance in [0, 1]; may raise on judge failure."""
        ...
