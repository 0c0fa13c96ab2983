"""Secret stores used to resolve provider API keys."""

import logging
import os
import re
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


def llm_api_key_path(stage: str, provider: str) -> str:
    """Parameter path holding the API key of a provider in a stage."""
    return f"/{stage}/llm/{provider}/api-key"


class SecretStore(ABC):
    """Read-only access to named, possibly encrypted, parameters."""

    @abstractmethod
    async def get_parameter(
        self, name: str, with_decryption: bool = True
    ) -> str | None:
        """Return the parameter value, or None when it does not exist."""
        pass


class StaticSecretStore(SecretStore):
    """Secret store backed by an explicit in-process mapping."""

    def __init__(self, values: dict[str, str] | None = None):
        """Initialize with a mapping of parameter path to value."""
        self._values = dict(values or {})

    async def get_parameter(
        self, name: str, with_decryption: bool = True
    ) -> str | None:
        """Look the parameter up in the mapping."""
        return self._values.get(name)


class EnvSecretStore(SecretStore):
    """Secret store that maps parameter paths onto environment variables.

    ``/dev/llm/openai/api-key`` is read from ``DEV_LLM_OPENAI_API_KEY``.
    """

    def __init__(self, fallbacks: dict[str, str] | None = None):
        """Initialize the store.

        Args:
            fallbacks: Optional mapping of parameter path to an additional
                environment variable consulted when the derived one is unset

        """
        self._fallbacks = dict(fallbacks or {})

    @staticmethod
    def env_var_for(name: str) -> str:
        """Environment variable name derived from a parameter path."""
        return re.sub(r"[^A-Za-z0-9]+", "_", name).strip("_").upper()

    async def get_parameter(
        self, name: str, with_decryption: bool = True
    ) -> str | None:
        """Read the derived environment variable, then the fallback."""
        value = os.getenv(self.env_var_for(name))
        if value:
            return value
        fallback = self._fallbacks.get(name)
        if fallback:
            logger.debug(f"Parameter {name} not set, trying {fallback}")
            return os.getenv(fallback) or None
        return None
