"""LLM service used by the optimization pipeline."""

from ..config import LLMSettings
from .base import CompletionRequest, CompletionResponse, ProviderClient
from .cache import ClientCache, client_cache_key
from .factory import LLMClientFactory
from .secrets import SecretStore


class LLMService:
    """Runs completions on cached provider clients.

    One long-lived instance owns the factory and the client cache; callers
    receive the service by reference.
    """

    def __init__(
        self,
        factory: LLMClientFactory | None = None,
        cache: ClientCache | None = None,
    ):
        """Initialize the service with a client factory and cache."""
        self.factory = factory or LLMClientFactory()
        self.cache = cache or ClientCache()

    @classmethod
    def from_settings(
        cls, settings: LLMSettings, secret_store: SecretStore | None = None
    ) -> "LLMService":
        """Create a service from LLM settings."""
        return cls(LLMClientFactory(settings, secret_store))

    async def get_client(
        self, provider: str | None = None, model: str | None = None
    ) -> ProviderClient:
        """Return a cached client, creating it on first use."""
        key = client_cache_key(provider, model)
        if provider is None:
            return await self.cache.get_or_create(key, self.factory.create_client)
        return await self.cache.get_or_create(
            key, lambda: self.factory.create_client_with_provider(provider, model)
        )

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Run a completion on the default provider."""
        client = await self.get_client()
        return await client.complete(request)

    async def complete_with_provider(
        self, provider: str, request: CompletionRequest, model: str | None = None
    ) -> CompletionResponse:
        """Run a completion on a specific provider and model."""
        client = await self.get_client(provider, model)
        return await client.complete(request)

    async def clear_cache(self) -> None:
        """Drop every cached client; the next call resolves credentials again."""
        await self.cache.clear()

    async def close(self) -> None:
        """Release all clients."""
        await self.cache.clear()
