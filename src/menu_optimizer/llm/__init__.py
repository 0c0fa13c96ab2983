"""Multi-provider LLM clients."""

from .base import (
    CompletionRequest,
    CompletionResponse,
    LLMCallLog,
    ProviderClient,
    TokenUsage,
)
from .cache import ClientCache, client_cache_key
from .factory import LLMClientFactory
from .secrets import EnvSecretStore, SecretStore, StaticSecretStore
from .service import LLMService

__all__ = [
    "ClientCache",
    "CompletionRequest",
    "CompletionResponse",
    "EnvSecretStore",
    "LLMCallLog",
    "LLMClientFactory",
    "LLMService",
    "ProviderClient",
    "SecretStore",
    "StaticSecretStore",
    "TokenUsage",
    "client_cache_key",
]
