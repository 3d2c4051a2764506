"""Inference provider for any OpenAI-compatible chat completions endpoint."""
import asyncio
import logging
from collections.abc import Callable

import openai
from openai import AsyncOpenAI

from second_thought.providers.core.exceptions import InferenceError
from second_thought.providers.inference.key_pool import ApiKeyPool

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], AsyncOpenAI]


class OpenAIInferenceProvider:
    """Sends a single-prompt chat completion, rotating through the key pool.

    Each failed attempt is reported against its key and the next key is
    tried, up to one attempt per key (or max_attempts).
    """

    def __init__(
        self,
        key_pool: ApiKeyPool,
        *,
        model: str,
        base_url: str | None = None,
        timeout: float = 30.0,
        max_attempts: int | None = None,
        retry_backoff: float = 0.5,
        client_factory: ClientFactory | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            key_pool: Pool of API keys for the endpoint.
            model: Model name passed to chat.completions.create.
            base_url: OpenAI-compatible API base URL.
            timeout: Per-request timeout in seconds.
            max_attempts: Attempts before giving up; defaults to the pool size.
            retry_backoff: Base delay between attempts, doubled each time.
            client_factory: Builds a client for an API key (tests inject mocks).
        """
        self._pool = key_pool
        self._model = model
        self._max_attempts = max_attempts
        self._retry_backoff = retry_backoff
        self._factory = client_factory or (
            lambda key: AsyncOpenAI(api_key=key, base_url=base_url, timeout=timeout)
        )
        self._clients: dict[str, AsyncOpenAI] = {}

    @property
    def model(self) -> str:
        return self._model

    def _client_for(self, key: str) -> AsyncOpenAI:
        if key not in self._clients:
            self._clients[key] = self._factory(key)
        return self._clients[key]

    async def complete(self, prompt: str) -> str:
        """Return the completion text for prompt. Raises InferenceError when all attempts fail."""
        attempts = self._max_attempts or max(1, len(self._pool))
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            key = self._pool.next_key()
            loop = asyncio.get_running_loop()
            start = loop.time()
            try:
                completion = await self._client_for(key).chat.completions.create(
                    model=self._model,
                    messages=[{"role": "user", "content": prompt}],
                )
            except openai.OpenAIError as exc:
                last_exc = exc
                self._pool.report_error(key)
                logger.warning(
                    "Inference call failed (attempt %s/%s): %s", attempt, attempts, exc
                )
                if attempt < attempts and self._retry_backoff > 0:
                    await asyncio.sleep(self._retry_backoff * (2 ** (attempt - 1)))
                continue

            self._pool.report_success(key)
            logger.debug(
                "Inference call succeeded | model=%s | latency=%.2fs",
                self._model,
                loop.time() - start,
            )
            if not completion.choices:
                return ""
            return completion.choices[0].message.content or ""

        raise InferenceError(
            f"Inference failed after {attempts} attempt(s): {last_exc}"
        ) from last_exc

    async def close(self) -> None:
        """Close all HTTP clients."""
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
