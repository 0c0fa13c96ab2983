"""Configuration for LLM providers, the taste API and batch processing.

Settings are pydantic models whose defaults are read from environment variables
at construction time, so a `.env` file loaded before construction is honoured.
"""

import logging
import os
from typing import Any, Literal, TypeVar, get_args

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

LLM_PROVIDER = Literal["openai", "anthropic", "google"]
ALLOWED_LLM_PROVIDERS = get_args(LLM_PROVIDER)

TField = TypeVar("TField")


def EnvField(*env_vars: str, default: TField | None = None, **kwargs: Any) -> TField:  # noqa: N802
    """Create a Field that gets its default value from an environment variable."""

    def get_env_value():
        for env_var in env_vars:
            value = os.getenv(env_var)
            if value is not None:
                return value
        logger.debug(
            f"No environment variable found among: {env_vars}, using default value: {default}"
        )
        return default

    return Field(default_factory=get_env_value, validate_default=True, **kwargs)  # pyright: ignore[reportReturnType]


class LLMSettings(BaseModel):
    """Settings used by the LLM client factory."""

    provider: LLM_PROVIDER = EnvField("LLM_PROVIDER", default="anthropic")
    model: str | None = EnvField("LLM_MODEL", default=None)
    stage: str = EnvField("STAGE", default="dev")
    max_retries: int = EnvField("LLM_MAX_RETRIES", default=3)
    timeout: float = EnvField("LLM_TIMEOUT", default=30.0)
    environment: str = EnvField("APP_ENV", default="production")
    local_api_key: str | None = EnvField("LLM_API_KEY", default=None, exclude=True)

    @property
    def is_local_development(self) -> bool:
        """Whether the inline local credential may be used."""
        return self.environment == "development"


class TasteApiSettings(BaseModel):
    """Settings for the taste/peer-signal API client."""

    base_url: str = EnvField("TASTE_API_URL", default="https://api.taste.example.com")
    stage: str = EnvField("STAGE", default="dev")
    timeout: float = EnvField("TASTE_API_TIMEOUT", default=30.0)
    max_retries: int = EnvField("TASTE_API_MAX_RETRIES", default=3)
    requests_per_second: float = EnvField("TASTE_API_RATE_LIMIT", default=5.0)
    local_api_key: str | None = EnvField("TASTE_API_KEY", default=None, exclude=True)


class PipelineSettings(BaseModel):
    """Batch sizes and limits for the optimization pipeline."""

    optimization_batch_size: int = EnvField("OPTIMIZATION_BATCH_SIZE", default=5)
    enhancement_batch_size: int = EnvField("ENHANCEMENT_BATCH_SIZE", default=5)
    taste_profile_batch_size: int = EnvField("TASTE_PROFILE_BATCH_SIZE", default=10)
    max_suggestions: int = EnvField("MAX_SUGGESTIONS", default=5)
