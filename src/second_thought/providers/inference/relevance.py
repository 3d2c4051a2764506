"""Answer relevance scoring with Opik's LLM-as-judge metric."""
import openai
from opik.evaluation.metrics import AnswerRelevance
from opik.evaluation.models import LiteLLMChatModel
from opik.exceptions import MetricComputationError

from second_thought.providers.core.exceptions import InferenceError
from second_thought.utils import clamp01


class OpikRelevanceJudge:
    """Scores how directly an answer addresses a question."""

    def __init__(self, metric: AnswerRelevance) -> None:
        self._metric = metric

    @classmethod
    def for_endpoint(
        cls, model: str, base_url: str, api_keys: list[str]
    ) -> "OpikRelevanceJudge | None":
        """Judge that runs on the OpenAI-compatible inference endpoint; None without keys."""
        if not api_keys:
            return None
        judge_model = LiteLLMChatModel(
            model_name=f"openai/{model}", api_base=base_url, api_key=api_keys[0]
        )
        return cls(AnswerRelevance(model=judge_model, require_context=False, track=False))

    async def score(self, question: str, answer: str) -> float:
        """Relevance in [0, 1]. Raises InferenceError when the judge cannot score."""
        try:
            result = await self._metric.ascore(input=question, output=answer)
        except (MetricComputationError, openai.APIError) as exc:
            raise InferenceError(f"Relevance judge failed: {exc}") from exc
        return clamp01(float(result.value))
