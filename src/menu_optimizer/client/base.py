"""Lightweight base client with core aiohttp functionality."""

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

import aiohttp
from pydantic import BaseModel

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for HTTP request retry logic.

    The delay before retry ``n`` (counting from one) is
    ``base_delay * backoff_multiplier ** n`` capped at ``max_delay``.
    """

    max_retries: int = 3
    base_delay: float = 1.0  # seconds
    max_delay: float = 30.0
    backoff_multiplier: float = 2.0
    jitter: bool = False
    jitter_size: float = 0.25
    retry_on_status: set[int] = field(default_factory=lambda: {429})
    retry_on_server_errors: bool = True
    retry_on_exceptions: set[type] = field(
        default_factory=lambda: {
            TimeoutError,
            aiohttp.ServerTimeoutError,
        }
    )

    def is_retryable_status(self, status: int) -> bool:
        """Whether an HTTP status should be retried."""
        if status in self.retry_on_status:
            return True
        return self.retry_on_server_errors and status >= 500


@dataclass
class ClientMetrics:
    """Request counters of one client."""

    total_requests: int = 0
    successful_requests: int = 0
    total_retries: int = 0
    fatal_errors: int = 0
    retries_by_status: dict[str, int] = field(default_factory=dict)
    retries_by_exception: dict[str, int] = field(default_factory=dict)


class ClientError(Exception):
    """Base exception for client errors."""

    pass


class HTTPError(ClientError):
    """HTTP error from server."""

    def __init__(self, status: int, message: str):
        """Initialize HTTP error with status and message."""
        self.status = status
        self.message = message
        super().__init__(f"HTTP {status}: {message}")


class BaseClient:
    """Lightweight base client with core HTTP functionality."""

    def __init__(
        self,
        base_url: str,
        timeout: float | None = 30.0,
        retry_config: RetryConfig | None = None,
    ):
        """Initialize base client with URL, timeout, and retry configuration."""
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout) if timeout else None
        self.retry_config = retry_config or RetryConfig()
        self.metrics = ClientMetrics()
        self._session: aiohttp.ClientSession | None = None
        self._ref_count: int = 0

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    @property
    def is_connected(self) -> bool:
        """Whether an aiohttp session is open."""
        return self._session is not None

    async def connect(self):
        """Create the aiohttp session and increment reference count."""
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        self._ref_count += 1

    async def close(self):
        """Close the aiohttp session when reference count reaches zero."""
        # Don't let ref count go below 0
        self._ref_count = max(self._ref_count - 1, 0)

        # Only actually close the session when no more references exist
        if self._ref_count == 0 and self._session:
            session = self._session
            self._session = None
            await session.close()

    def _build_url(
        self, path: str, params: BaseModel | dict[str, Any] | None = None
    ) -> str:
        """Build a complete URL with query parameters."""
        url = f"{self.base_url}/{path.lstrip('/')}" if path else self.base_url
        if params:
            if isinstance(params, BaseModel):
                params_dict = params.model_dump(
                    mode="json", exclude_none=True, by_alias=True
                )
            else:
                params_dict = {k: v for k, v in params.items() if v is not None}
            if params_dict:
                url += "?" + urlencode(params_dict, doseq=True)
        return url

    def _calculate_delay(self, retry: int) -> float:
        """Calculate delay for exponential backoff with optional jitter."""
        delay = self.retry_config.base_delay * (
            self.retry_config.backoff_multiplier**retry
        )
        delay = min(delay, self.retry_config.max_delay)

        if self.retry_config.jitter:
            # Final delay is [100%, 125%] of the original delay
            jitter_range = delay * self.retry_config.jitter_size
            delay += random.uniform(0, jitter_range)

        return max(0, delay)

    async def _request(
        self,
        method: str,
        path: str,
        params: BaseModel | dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Make an HTTP request with retry logic and return parsed JSON response.

        Raises:
            HTTPError: On a non-retryable status, or a retryable one once the
                retry budget is spent.
            ClientError: When the client is not connected, or when retryable
                exceptions exhausted the retry budget.

        """
        if not self._session:
            raise ClientError(
                "Client is not connected. You must call connect before request."
            )

        self.metrics.total_requests += 1

        url = self._build_url(path, params)
        request_headers = headers or {}

        last_exception: Exception | None = None
        retry = 0
        while True:
            try:
                async with self._session.request(
                    method, url, json=json_data, headers=request_headers
                ) as response:
                    response.raise_for_status()
                    self.metrics.successful_requests += 1
                    return await response.json()
            except aiohttp.ClientResponseError as e:
                last_exception = e
                if not self.retry_config.is_retryable_status(e.status):
                    self.metrics.fatal_errors += 1
                    raise HTTPError(e.status, e.message) from e

                status_key = str(e.status)
                self.metrics.retries_by_status[status_key] = (
                    self.metrics.retries_by_status.get(status_key, 0) + 1
                )
            except Exception as e:
                last_exception = e
                if not isinstance(e, tuple(self.retry_config.retry_on_exceptions)):
                    self.metrics.fatal_errors += 1
                    raise

                exception_key = type(e).__name__
                self.metrics.retries_by_exception[exception_key] = (
                    self.metrics.retries_by_exception.get(exception_key, 0) + 1
                )

            if retry >= self.retry_config.max_retries:
                break

            retry += 1
            delay = self._calculate_delay(retry)
            self.metrics.total_retries += 1
            logger.info(
                f"Retrying {method} {path} after {type(last_exception).__name__} "
                f"(retry {retry}/{self.retry_config.max_retries}), waiting {delay:.2f}s"
            )
            await asyncio.sleep(delay)

        # If we make it here, retries were exceeded.
        self.metrics.fatal_errors += 1
        if isinstance(last_exception, aiohttp.ClientResponseError):
            raise HTTPError(
                last_exception.status, last_exception.message
            ) from last_exception
        raise ClientError(
            f"Maximum retries exceeded: {last_exception!r}"
        ) from last_exception

    async def request(
        self,
        method: str,
        path: str,
        params: BaseModel | dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Public method for making HTTP requests."""
        return await self._request(method, path, params, json_data, headers)
