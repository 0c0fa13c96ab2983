"""Anthropic model client implementation."""

from typing import Any, ClassVar

from anthropic.types import MessageParam

from ..base import CompletionRequest, CompletionResponse, ProviderClient, TokenUsage

ANTHROPIC_API_VERSION = "2023-06-01"


class AnthropicClient(ProviderClient):
    """Client for the Anthropic messages API."""

    provider: ClassVar[str] = "anthropic"
    default_model: ClassVar[str] = "claude-sonnet-4-20250514"
    default_base_url: ClassVar[str] = "https://api.anthropic.com/v1"

    def endpoint(self) -> str:
        """Messages path."""
        return "/messages"

    def headers(self) -> dict[str, str]:
        """API key and version headers."""
        return {
            "Content-Type": "application/json",
            "x-api-key": self.config.api_key,
            "anthropic-version": ANTHROPIC_API_VERSION,
        }

    def build_payload(self, request: CompletionRequest) -> dict[str, Any]:
        """Build a messages body; the system prompt goes in the top-level field."""
        messages: list[MessageParam] = [
            MessageParam(role="user", content=request.prompt)
        ]
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "top_p": request.top_p,
        }
        if request.system_prompt:
            payload["system"] = request.system_prompt
        if request.stop:
            payload["stop_sequences"] = request.stop
        return payload

    def parse_response(self, data: dict[str, Any]) -> CompletionResponse:
        """Read the first content block and the token usage."""
        text = data["content"][0]["text"]
        usage = data.get("usage")
        if not usage:
            return CompletionResponse(text=text)

        input_tokens = usage.get("input_tokens", 0)
        output_tokens = usage.get("output_tokens", 0)
        return CompletionResponse(
            text=text,
            usage=TokenUsage(
                prompt_tokens=input_tokens,
                completion_tokens=output_tokens,
                total_tokens=input_tokens + output_tokens,
            ),
        )
