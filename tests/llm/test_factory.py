"""Tests for credential resolution, the client factory and the client cache."""

import pytest

from menu_optimizer.config import LLMSettings
from menu_optimizer.errors import CredentialResolutionError, UnsupportedProviderError
from menu_optimizer.llm import (
    ClientCache,
    EnvSecretStore,
    LLMClientFactory,
    LLMService,
    StaticSecretStore,
    client_cache_key,
)
from menu_optimizer.llm.clients import AnthropicClient, GoogleClient, OpenAIClient

SECRETS = {
    "/dev/llm/openai/api-key": "openai-key",
    "/dev/llm/anthropic/api-key": "anthropic-key",
    "/dev/llm/google/api-key": "google-key",
}


class CountingSecretStore(StaticSecretStore):
    """Static store that counts lookups."""

    def __init__(self, values):
        """Initialize with a mapping of parameter path to value."""
        super().__init__(values)
        self.lookups: list[str] = []

    async def get_parameter(self, name, with_decryption=True):
        """Record the lookup, then answer from the mapping."""
        self.lookups.append(name)
        return await super().get_parameter(name, with_decryption)


def _settings(**kwargs) -> LLMSettings:
    values = {
        "provider": "anthropic",
        "model": None,
        "stage": "dev",
        "environment": "production",
        "local_api_key": None,
    }
    values.update(kwargs)
    return LLMSettings(**values)


class TestLLMClientFactory:
    """Test suite for LLMClientFactory."""

    @pytest.mark.asyncio
    async def test_create_client_uses_default_provider(self):
        """The configured provider and model are used."""
        factory = LLMClientFactory(
            _settings(provider="openai", model="gpt-test"), StaticSecretStore(SECRETS)
        )
        client = await factory.create_client()
        assert isinstance(client, OpenAIClient)
        assert client.model == "gpt-test"
        assert client.config.api_key == "openai-key"

    @pytest.mark.asyncio
    async def test_create_client_with_provider(self):
        """Each provider name maps to its client class."""
        factory = LLMClientFactory(_settings(), StaticSecretStore(SECRETS))
        assert isinstance(
            await factory.create_client_with_provider("anthropic"), AnthropicClient
        )
        google = await factory.create_client_with_provider("google", "gemini-test")
        assert isinstance(google, GoogleClient)
        assert google.model == "gemini-test"
        assert google.config.api_key == "google-key"

    @pytest.mark.asyncio
    async def test_settings_flow_into_client(self):
        """Retry budget and timeout come from the settings."""
        factory = LLMClientFactory(
            _settings(max_retries=5, timeout=12), StaticSecretStore(SECRETS)
        )
        client = await factory.create_client()
        assert client.config.max_retries == 5
        assert client.config.timeout == 12

    @pytest.mark.asyncio
    async def test_secret_path_uses_stage(self):
        """The key is read from /{stage}/llm/{provider}/api-key."""
        store = CountingSecretStore({"/prod/llm/openai/api-key": "prod-key"})
        factory = LLMClientFactory(_settings(stage="prod"), store)
        client = await factory.create_client_with_provider("openai")
        assert store.lookups == ["/prod/llm/openai/api-key"]
        assert client.config.api_key == "prod-key"

    @pytest.mark.asyncio
    async def test_missing_credential(self):
        """A missing key raises CredentialResolutionError."""
        factory = LLMClientFactory(_settings(), StaticSecretStore())
        with pytest.raises(CredentialResolutionError):
            await factory.create_client()

    @pytest.mark.asyncio
    async def test_unsupported_provider(self):
        """Unknown providers are rejected before any secret lookup."""
        store = CountingSecretStore(SECRETS)
        factory = LLMClientFactory(_settings(), store)
        with pytest.raises(UnsupportedProviderError):
            await factory.create_client_with_provider("mistral")
        assert store.lookups == []

    @pytest.mark.asyncio
    async def test_local_development_override(self):
        """In development the inline key wins over the secret store."""
        store = CountingSecretStore({})
        factory = LLMClientFactory(
            _settings(environment="development", local_api_key="local-key"), store
        )
        client = await factory.create_client()
        assert client.config.api_key == "local-key"
        assert store.lookups == []

    @pytest.mark.asyncio
    async def test_local_key_ignored_outside_development(self):
        """Outside development the inline key is not used."""
        factory = LLMClientFactory(
            _settings(local_api_key="local-key"), StaticSecretStore()
        )
        with pytest.raises(CredentialResolutionError):
            await factory.create_client()


class TestEnvSecretStore:
    """Test suite for EnvSecretStore."""

    def test_env_var_for(self):
        """Parameter paths become upper-case variable names."""
        assert (
            EnvSecretStore.env_var_for("/dev/llm/openai/api-key")
            == "DEV_LLM_OPENAI_API_KEY"
        )

    @pytest.mark.asyncio
    async def test_reads_environment(self, monkeypatch):
        """The derived variable is read, then the fallback."""
        monkeypatch.setenv("DEV_LLM_OPENAI_API_KEY", "from-env")
        monkeypatch.delenv("DEV_LLM_GOOGLE_API_KEY", raising=False)
        monkeypatch.setenv("GOOGLE_API_KEY", "from-fallback")
        store = EnvSecretStore({"/dev/llm/google/api-key": "GOOGLE_API_KEY"})

        assert await store.get_parameter("/dev/llm/openai/api-key") == "from-env"
        assert await store.get_parameter("/dev/llm/google/api-key") == "from-fallback"

    @pytest.mark.asyncio
    async def test_missing_variable(self, monkeypatch):
        """Unset variables resolve to None."""
        monkeypatch.delenv("DEV_LLM_ANTHROPIC_API_KEY", raising=False)
        assert await EnvSecretStore().get_parameter("/dev/llm/anthropic/api-key") is None


class TestClientCache:
    """Test suite for the client cache and LLMService."""

    def test_cache_keys(self):
        """Keys are 'default' or provider:model with a default model marker."""
        assert client_cache_key() == "default"
        assert client_cache_key("openai") == "openai:default"
        assert client_cache_key("openai", "gpt-4o") == "openai:gpt-4o"

    @pytest.mark.asyncio
    async def test_cache_hit_skips_credential_resolution(self):
        """The second lookup of a key reuses the client."""
        store = CountingSecretStore(SECRETS)
        service = LLMService(LLMClientFactory(_settings(), store))

        first = await service.get_client()
        second = await service.get_client()

        assert first is second
        assert len(store.lookups) == 1

    @pytest.mark.asyncio
    async def test_provider_and_model_are_separate_entries(self):
        """Different provider/model pairs get different clients."""
        store = CountingSecretStore(SECRETS)
        service = LLMService(LLMClientFactory(_settings(), store))

        default = await service.get_client()
        openai = await service.get_client("openai")
        openai_model = await service.get_client("openai", "gpt-4o")

        assert len({id(default), id(openai), id(openai_model)}) == 3
        assert "openai:default" in service.cache
        assert "openai:gpt-4o" in service.cache
        assert len(store.lookups) == 3

    @pytest.mark.asyncio
    async def test_clear_cache_forces_new_credential_fetch(self):
        """After clearing, the next call resolves credentials again."""
        store = CountingSecretStore(SECRETS)
        service = LLMService(LLMClientFactory(_settings(), store))

        first = await service.get_client()
        await service.clear_cache()
        assert len(service.cache) == 0
        second = await service.get_client()

        assert first is not second
        assert len(store.lookups) == 2

    @pytest.mark.asyncio
    async def test_cache_is_per_instance(self):
        """Separate caches never share clients."""
        first_cache = ClientCache()
        second_cache = ClientCache()
        factory = LLMClientFactory(_settings(), StaticSecretStore(SECRETS))
        await first_cache.get_or_create("default", factory.create_client)
        assert "default" in first_cache
        assert "default" not in second_cache
