"""Abstract base class for model provider clients."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import aiohttp
from pydantic import BaseModel, Field

from ..client import BaseClient, ClientError, HTTPError, RetryConfig
from ..errors import ModelProviderError
from .config import ProviderClientConfig

logger = logging.getLogger(__name__)


class CompletionRequest(BaseModel):
    """Provider-independent completion request."""

    prompt: str
    system_prompt: str | None = None
    max_tokens: int = Field(default=1000, gt=0)
    temperature: float = 0.7
    top_p: float = 1.0
    stop: list[str] | None = None


class TokenUsage(BaseModel):
    """Token accounting reported by a provider."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class CompletionResponse(BaseModel):
    """Provider-independent completion response."""

    text: str
    usage: TokenUsage | None = None


class LLMCallLog(BaseModel):
    """Structured log data for an LLM call."""

    type: str = "llm_call"
    success: bool
    provider: str
    model: str
    duration_ms: float
    token_count: int
    error_message: str | None
    prompt: str
    system_prompt: str | None
    response: str
    api_args: dict[str, Any]


class ProviderClient(ABC):
    """Abstract base class for model provider clients.

    Subclasses describe one provider's wire format: where to send a request,
    how to authenticate, how to shape the payload and how to read the reply.
    Transport, retry with exponential backoff and call logging are shared.
    """

    provider: ClassVar[str]
    default_model: ClassVar[str]
    default_base_url: ClassVar[str]

    def __init__(self, config: ProviderClientConfig):
        """Create an instance of a ProviderClient.

        Args:
            config: Connection settings for this provider

        """
        self.config = config
        self.model = config.model or self.default_model
        self.base_url = config.base_url or self.default_base_url
        self._http = BaseClient(
            self.base_url,
            timeout=config.timeout,
            retry_config=RetryConfig(
                max_retries=config.max_retries,
                base_delay=config.retry_base_delay,
            ),
        )

    async def connect(self) -> None:
        """Open the underlying HTTP session."""
        await self._http.connect()

    async def close(self) -> None:
        """Release the underlying HTTP session."""
        await self._http.close()

    @abstractmethod
    def endpoint(self) -> str:
        """Path of the completion endpoint relative to the base URL."""
        pass

    @abstractmethod
    def headers(self) -> dict[str, str]:
        """Request headers including authentication."""
        pass

    def query_params(self) -> dict[str, str] | None:
        """Query parameters added to every request."""
        return None

    @abstractmethod
    def build_payload(self, request: CompletionRequest) -> dict[str, Any]:
        """Translate a completion request into the provider's JSON body."""
        pass

    @abstractmethod
    def parse_response(self, data: dict[str, Any]) -> CompletionResponse:
        """Translate the provider's JSON reply into a completion response."""
        pass

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Run one completion, retrying rate limits, server errors and timeouts.

        Args:
            request: The provider-independent request

        Returns:
            The generated text and, where the provider reports it, token usage

        Raises:
            ModelProviderError: On a non-retryable failure or once the retry
                budget is exhausted.

        """
        if not self._http.is_connected:
            await self.connect()

        payload = self.build_payload(request)
        start_time = time.time()
        try:
            data = await self._http.request(
                "POST",
                self.endpoint(),
                params=self.query_params(),
                json_data=payload,
                headers=self.headers(),
            )
            result = self.parse_response(data)
        except HTTPError as e:
            error = ModelProviderError(self.provider, e.message, e.status)
            self._log_call(request, start_time, error=error)
            raise error from e
        except (ClientError, aiohttp.ClientError) as e:
            error = ModelProviderError(self.provider, str(e) or type(e).__name__)
            self._log_call(request, start_time, error=error)
            raise error from e
        except (KeyError, IndexError, TypeError) as e:
            error = ModelProviderError(
                self.provider, f"Unexpected response shape: {e!r}"
            )
            self._log_call(request, start_time, error=error)
            raise error from e

        self._log_call(request, start_time, result=result)
        return result

    def _log_call(
        self,
        request: CompletionRequest,
        start_time: float,
        *,
        result: CompletionResponse | None = None,
        error: Exception | None = None,
    ) -> None:
        duration_ms = (time.time() - start_time) * 1000
        log_data = LLMCallLog(
            success=error is None,
            provider=self.provider,
            model=self.model,
            duration_ms=duration_ms,
            token_count=result.usage.total_tokens if result and result.usage else 0,
            error_message=str(error) if error else None,
            prompt=request.prompt,
            system_prompt=request.system_prompt,
            response=result.text if result else "",
            api_args=request.model_dump(exclude={"prompt", "system_prompt"}),
        )
        if error is None:
            logger.debug(f"LLM call succeeded: {log_data.model_dump_json()}")
        else:
            logger.debug(f"LLM call failed: {log_data.model_dump_json()}")
