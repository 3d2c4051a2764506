"""Round-robin API key pool with per-key health tracking."""
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from second_thought.providers.core.exceptions import InferenceError

logger = logging.getLogger(__name__)

ERROR_THRESHOLD = 3
RECOVERY_SECONDS = 60.0


@dataclass
class KeyHealth:
    """Health bookkeeping for one API key."""

    key: str
    healthy: bool = True
    error_count: int = 0
    last_error: float | None = None
    last_success: float | None = None


class ApiKeyPool:
    """Hands out keys round-robin, skipping keys that failed repeatedly.

    A key is marked unhealthy after ERROR_THRESHOLD consecutive errors and is
    given another chance RECOVERY_SECONDS after its last error. When every key
    is unhealthy the pool resets and returns the key at the starting cursor.
    """

    def __init__(
        self,
        keys: list[str],
        *,
        error_threshold: int = ERROR_THRESHOLD,
        recovery_seconds: float = RECOVERY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._keys = [KeyHealth(key=k) for k in keys]
        self._index = 0
        self._error_threshold = error_threshold
        self._recovery_seconds = recovery_seconds
        self._clock = clock

    def __len__(self) -> int:
        return len(self._keys)

    def _find(self, key: str) -> KeyHealth | None:
        return next((k for k in self._keys if k.key == key), None)

    def next_key(self) -> str:
        """Return the next healthy key. Raises InferenceError if the pool is empty."""
        if not self._keys:
            raise InferenceError("No inference API keys configured")

        start = self._index
        for _ in range(len(self._keys)):
            health = self._keys[self._index]
            self._index = (self._index + 1) % len(self._keys)

            if not health.healthy and health.last_error is not None:
                if self._clock() - health.last_error > self._recovery_seconds:
                    health.healthy = True
                    health.error_count = 0

            if health.healthy:
                return health.key

        logger.warning("All %d API keys unhealthy; resetting pool", len(self._keys))
        self._reset_all()
        return self._keys[start].key

    def report_error(self, key: str) -> None:
        """Count a failure against key; mark it unhealthy at the threshold."""
        health = self._find(key)
        if health is None:
            return
        health.error_count += 1
        health.last_error = self._clock()
        if health.error_count >= self._error_threshold and health.healthy:
            health.healthy = False
            logger.warning("API key ...%s marked unhealthy", key[-4:])

    def report_success(self, key: str) -> None:
        """Mark key healthy and clear its error count."""
        health = self._find(key)
        if health is None:
            return
        health.healthy = True
        health.error_count = 0
        health.last_success = self._clock()

    def healthy_count(self) -> int:
        return sum(1 for k in self._keys if k.healthy)

    def _reset_all(self) -> None:
        for health in self._keys:
            health.healthy = True
            health.error_count = 0
