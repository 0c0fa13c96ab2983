"""Factory that resolves credentials and builds provider clients."""

import logging

from ..config import ALLOWED_LLM_PROVIDERS, LLMSettings
from ..errors import CredentialResolutionError, UnsupportedProviderError
from .base import ProviderClient
from .clients import AnthropicClient, GoogleClient, OpenAIClient
from .config import ProviderClientConfig
from .secrets import EnvSecretStore, SecretStore, llm_api_key_path

logger = logging.getLogger(__name__)

PROVIDER_CLIENTS: dict[str, type[ProviderClient]] = {
    "openai": OpenAIClient,
    "anthropic": AnthropicClient,
    "google": GoogleClient,
}


class LLMClientFactory:
    """Builds provider clients from settings and a secret store."""

    def __init__(
        self,
        settings: LLMSettings | None = None,
        secret_store: SecretStore | None = None,
    ):
        """Initialize the factory.

        Args:
            settings: LLM settings. If None, read from the environment.
            secret_store: Where API keys live. Defaults to environment variables.

        """
        self.settings = settings or LLMSettings()
        self.secret_store = secret_store or EnvSecretStore()

    async def resolve_api_key(self, provider: str) -> str:
        """Resolve the API key of a provider.

        In local development an inline key configured in the settings takes
        precedence over the secret store.

        Raises:
            CredentialResolutionError: If no key exists for the provider.

        """
        if self.settings.is_local_development and self.settings.local_api_key:
            logger.debug(f"Using local API key override for {provider}")
            return self.settings.local_api_key

        path = llm_api_key_path(self.settings.stage, provider)
        api_key = await self.secret_store.get_parameter(path, with_decryption=True)
        if not api_key:
            raise CredentialResolutionError(
                f"No API key found for provider {provider} at {path}"
            )
        return api_key

    async def create_client(self) -> ProviderClient:
        """Create a client for the configured default provider and model."""
        return await self.create_client_with_provider(
            self.settings.provider, self.settings.model
        )

    async def create_client_with_provider(
        self, provider: str, model: str | None = None
    ) -> ProviderClient:
        """Create a client for a specific provider.

        Args:
            provider: One of ``openai``, ``anthropic`` or ``google``
            model: Model name, or None for the provider default

        Raises:
            UnsupportedProviderError: If the provider is unknown.
            CredentialResolutionError: If no key exists for the provider.

        """
        client_class = PROVIDER_CLIENTS.get(provider)
        if client_class is None:
            raise UnsupportedProviderError(
                f"Unsupported LLM provider: {provider}. "
                f"Supported providers: {', '.join(ALLOWED_LLM_PROVIDERS)}"
            )

        api_key = await self.resolve_api_key(provider)
        config = ProviderClientConfig(
            provider=provider,  # pyright: ignore[reportArgumentType]
            api_key=api_key,
            model=model,
            max_retries=self.settings.max_retries,
            timeout=self.settings.timeout,
        )
        logger.info(
            f"Created {provider} client for model {model or client_class.default_model}"
        )
        return client_class(config)
