"""Generative inference: key rotation, prompt/response handling, relevance judge."""
from second_thought.providers.inference.key_pool import ApiKeyPool
from second_thought.providers.inference.openai_provider import \
    OpenAIInferenceProvider
from second_thought.providers.inference.prompts import (PROMPT_VERSION,
                                                        build_prompt,
                                                        fallback_recommendation,
                                                        parse_response)
from second_thought.providers.inference.relevance import OpikRelevanceJudge

__all__ = [
    "ApiKeyPool",
    "OpenAIInferenceProvider",
    "OpikRelevanceJudge",
    "PROMPT_VERSION",
    "build_prompt",
    "fallback_recommendation",
    "parse_response",
]
