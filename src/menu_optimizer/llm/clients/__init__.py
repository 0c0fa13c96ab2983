"""Provider client implementations."""

from .anthropic import AnthropicClient
from .google import GoogleClient
from .openai import OpenAIClient

__all__ = ["AnthropicClient", "GoogleClient", "OpenAIClient"]
