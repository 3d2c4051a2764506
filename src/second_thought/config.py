"""Deployment settings read from the environment.

Algorithm constants (growth rate, discount thresholds) live next to the code
that uses them; only values that change per deployment are configured here.
"""
import os
from dataclasses import dataclass, field

_DEFAULT_DATABASE_URL = "sqlite:///./second_thought.db"
_DEFAULT_LLM_BASE_URL = "https://api.cerebras.ai/v1"
_DEFAULT_LLM_MODEL = "qwen-3-235b-a22b-instruct-2507"


def _split_csv(raw: str | None) -> list[str]:
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


@dataclass(frozen=True)
class Settings:
    """Service configuration. Build with Settings.from_env() at startup."""

    database_url: str = _DEFAULT_DATABASE_URL
    sql_echo: bool = False
    llm_api_keys: list[str] = field(default_factory=list)
    llm_base_url: str = _DEFAULT_LLM_BASE_URL
    llm_model: str = _DEFAULT_LLM_MODEL
    llm_timeout_seconds: float = 30.0
    opik_url: str | None = None
    opik_api_key: str | None = None
    opik_workspace: str | None = None
    opik_project: str = "second-thought"
    cooldown_hours: float = 24.0
    log_level: str = "INFO"

    @property
    def tracing_enabled(self) -> bool:
        """Opik needs either a self-hosted URL or a cloud API key."""
        return bool(self.opik_url or self.opik_api_key)

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from environment variables, falling back to defaults."""
        return cls(
            database_url=os.getenv("DATABASE_URL", _DEFAULT_DATABASE_URL),
            sql_echo=os.getenv("SQL_ECHO", "0") == "1",
            llm_api_keys=_split_csv(os.getenv("LLM_API_KEYS")),
            llm_base_url=os.getenv("LLM_BASE_URL", _DEFAULT_LLM_BASE_URL),
            llm_model=os.getenv("LLM_MODEL", _DEFAULT_LLM_MODEL),
            llm_timeout_seconds=float(os.getenv("LLM_TIMEOUT_SECONDS", "30")),
            opik_url=os.getenv("OPIK_URL_OVERRIDE") or None,
            opik_api_key=os.getenv("OPIK_API_KEY") or None,
            opik_workspace=os.getenv("OPIK_WORKSPACE") or None,
            opik_project=os.getenv("OPIK_PROJECT_NAME", "second-thought"),
            cooldown_hours=float(os.getenv("COOLDOWN_HOURS", "24")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
