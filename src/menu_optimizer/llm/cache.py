"""Explicit cache of provider clients."""

import logging
from collections.abc import Awaitable, Callable

from .base import ProviderClient

logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "default"


def client_cache_key(provider: str | None = None, model: str | None = None) -> str:
    """Cache key of a client: ``default`` or ``<provider>:<model-or-default>``."""
    if provider is None:
        return DEFAULT_CACHE_KEY
    return f"{provider}:{model or 'default'}"


class ClientCache:
    """Provider clients keyed by provider and model.

    Two tasks missing on the same key may both build a client; the last one
    stored wins. Building a client is idempotent, so that race is harmless.
    """

    def __init__(self):
        """Initialize an empty cache."""
        self._clients: dict[str, ProviderClient] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._clients

    def __len__(self) -> int:
        return len(self._clients)

    def get(self, key: str) -> ProviderClient | None:
        """Return the cached client for a key, if any."""
        return self._clients.get(key)

    def set(self, key: str, client: ProviderClient) -> None:
        """Store a client under a key."""
        self._clients[key] = client

    async def get_or_create(
        self, key: str, create: Callable[[], Awaitable[ProviderClient]]
    ) -> ProviderClient:
        """Return the cached client for a key, building it on a miss."""
        client = self._clients.get(key)
        if client is None:
            logger.debug(f"Client cache miss for {key}")
            client = await create()
            self._clients[key] = client
        return client

    async def clear(self) -> None:
        """Close and drop every cached client."""
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.close()
