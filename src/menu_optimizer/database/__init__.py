"""Repository interfaces and the in-memory implementation."""

from .base import DatabaseController, Repository, ReviewRepository
from .memory import InMemoryDatabase

__all__ = ["DatabaseController", "InMemoryDatabase", "Repository", "ReviewRepository"]
