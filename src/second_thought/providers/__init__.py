"""External collaborators: generative inference, relevance judging and tracing.

- OpenAIInferenceProvider: chat completions against an OpenAI-compatible endpoint
- OpikRelevanceJudge: answer relevance scoring with Opik's AnswerRelevance metric
- TraceClient: best-effort tracing through the Opik SDK
"""
from second_thought.providers.inference import (ApiKeyPool,
                                                OpenAIInferenceProvider,
                                                OpikRelevanceJudge)
from second_thought.providers.tracing import TraceClient, TraceContext

__all__ = [
    "ApiKeyPool",
    "OpenAIInferenceProvider",
    "OpikRelevanceJudge",
    "TraceClient",
    "TraceContext",
]
