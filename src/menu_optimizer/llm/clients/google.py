"""Google Generative Language model client implementation."""

from typing import Any, ClassVar

from ..base import CompletionRequest, CompletionResponse, ProviderClient


class GoogleClient(ProviderClient):
    """Client for the Gemini ``generateContent`` API.

    The API reports no token usage, so responses carry ``usage=None``.
    """

    provider: ClassVar[str] = "google"
    default_model: ClassVar[str] = "gemini-pro"
    default_base_url: ClassVar[str] = (
        "https://generativelanguage.googleapis.com/v1beta"
    )

    def endpoint(self) -> str:
        """Model-specific generateContent path."""
        return f"/models/{self.model}:generateContent"

    def headers(self) -> dict[str, str]:
        """Plain JSON headers; the key travels as a query parameter."""
        return {"Content-Type": "application/json"}

    def query_params(self) -> dict[str, str]:
        """API key query parameter."""
        return {"key": self.config.api_key}

    def build_payload(self, request: CompletionRequest) -> dict[str, Any]:
        """Build a generateContent body.

        A system prompt is sent as a leading user turn, followed by the prompt.
        """
        contents: list[dict[str, Any]] = []
        if request.system_prompt:
            contents.append(
                {"role": "user", "parts": [{"text": request.system_prompt}]}
            )
        contents.append({"role": "user", "parts": [{"text": request.prompt}]})

        generation_config: dict[str, Any] = {
            "maxOutputTokens": request.max_tokens,
            "temperature": request.temperature,
            "topP": request.top_p,
        }
        if request.stop:
            generation_config["stopSequences"] = request.stop

        return {"contents": contents, "generationConfig": generation_config}

    def parse_response(self, data: dict[str, Any]) -> CompletionResponse:
        """Read the text of the first candidate."""
        text = data["candidates"][0]["content"]["parts"][0]["text"]
        return CompletionResponse(text=text)
