"""Shared aiohttp client with retry and backoff."""

from .base import BaseClient, ClientError, HTTPError, RetryConfig

__all__ = ["BaseClient", "ClientError", "HTTPError", "RetryConfig"]
