"""OpenAI model client implementation."""

from typing import Any, ClassVar

from openai.types.chat import (
    ChatCompletionMessageParam,
    ChatCompletionSystemMessageParam,
    ChatCompletionUserMessageParam,
)

from ..base import CompletionRequest, CompletionResponse, ProviderClient, TokenUsage


class OpenAIClient(ProviderClient):
    """Client for the OpenAI chat completions API."""

    provider: ClassVar[str] = "openai"
    default_model: ClassVar[str] = "gpt-4-turbo"
    default_base_url: ClassVar[str] = "https://api.openai.com/v1"

    def endpoint(self) -> str:
        """Chat completions path."""
        return "/chat/completions"

    def headers(self) -> dict[str, str]:
        """Bearer token authentication."""
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }

    def build_payload(self, request: CompletionRequest) -> dict[str, Any]:
        """Build a chat completions body with an optional system message."""
        messages: list[ChatCompletionMessageParam] = []
        if request.system_prompt:
            messages.append(
                ChatCompletionSystemMessageParam(
                    role="system", content=request.system_prompt
                )
            )
        messages.append(
            ChatCompletionUserMessageParam(role="user", content=request.prompt)
        )

        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "top_p": request.top_p,
        }
        if request.stop:
            payload["stop"] = request.stop
        return payload

    def parse_response(self, data: dict[str, Any]) -> CompletionResponse:
        """Read the first choice and the token usage."""
        text = data["choices"][0]["message"]["content"] or ""
        usage = data.get("usage")
        return CompletionResponse(
            text=text,
            usage=TokenUsage(
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
            )
            if usage
            else None,
        )
