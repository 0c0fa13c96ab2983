"""In-memory repositories."""

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from ..shared.models import (
    DemographicsData,
    MenuItem,
    MenuItemAnalytics,
    MenuItemSuggestion,
    OptimizedMenuItem,
    Restaurant,
    ReviewStatus,
    SimilarRestaurantData,
)
from .base import DatabaseController, Repository, ReviewRepository

ModelType = TypeVar("ModelType", bound=BaseModel)


class InMemoryRepository(Repository[ModelType], Generic[ModelType]):
    """Dictionary-backed repository of pydantic records.

    Records are copied on the way in and out, so callers never share state
    with the store.
    """

    def __init__(self, key: Callable[[ModelType], str]):
        """Initialize with a function returning the key of a record."""
        self._key = key
        self._rows: dict[str, ModelType] = {}

    async def create(self, item: ModelType) -> ModelType:
        """Store a new record, replacing any record with the same key."""
        self._rows[self._key(item)] = item.model_copy(deep=True)
        return item

    async def get_by_id(self, item_id: str) -> ModelType | None:
        """Retrieve a record by its key."""
        row = self._rows.get(item_id)
        return row.model_copy(deep=True) if row is not None else None

    async def update(self, item_id: str, updates: dict[str, Any]) -> ModelType | None:
        """Apply field updates and revalidate the record."""
        row = self._rows.get(item_id)
        if row is None:
            return None
        updated = type(row).model_validate({**row.model_dump(), **updates})
        self._rows[item_id] = updated
        return updated.model_copy(deep=True)

    async def list_by_restaurant(self, restaurant_id: str) -> list[ModelType]:
        """List records whose ``restaurant_id`` matches."""
        return [
            row.model_copy(deep=True)
            for row in self._rows.values()
            if getattr(row, "restaurant_id", None) == restaurant_id
        ]


class InMemoryReviewRepository(
    InMemoryRepository[ModelType], ReviewRepository[ModelType]
):
    """In-memory repository of reviewable records."""

    async def list_by_status(
        self, restaurant_id: str, status: ReviewStatus
    ) -> list[ModelType]:
        """List records of a restaurant in one review status."""
        return [
            row
            for row in await self.list_by_restaurant(restaurant_id)
            if getattr(row, "status", None) == status
        ]


class InMemoryDatabase(DatabaseController):
    """Database whose repositories live in process memory."""

    def __init__(self):
        """Create empty repositories."""
        self._restaurants = InMemoryRepository[Restaurant](lambda r: r.restaurant_id)
        self._menu_items = InMemoryRepository[MenuItem](lambda m: m.item_id)
        self._demographics = InMemoryRepository[DemographicsData](
            lambda d: d.restaurant_id
        )
        self._similar_restaurants = InMemoryRepository[SimilarRestaurantData](
            lambda s: s.restaurant_id
        )
        self._optimized_items = InMemoryReviewRepository[OptimizedMenuItem](
            lambda o: o.item_id
        )
        self._suggestions = InMemoryReviewRepository[MenuItemSuggestion](
            lambda s: s.suggestion_id
        )
        self._analytics = InMemoryRepository[MenuItemAnalytics](lambda a: a.item_id)

    @property
    def restaurants(self) -> InMemoryRepository[Restaurant]:
        """Restaurant profiles."""
        return self._restaurants

    @property
    def menu_items(self) -> InMemoryRepository[MenuItem]:
        """Canonical menu items."""
        return self._menu_items

    @property
    def demographics(self) -> InMemoryRepository[DemographicsData]:
        """Demographics snapshots."""
        return self._demographics

    @property
    def similar_restaurants(self) -> InMemoryRepository[SimilarRestaurantData]:
        """Peer restaurant data."""
        return self._similar_restaurants

    @property
    def optimized_items(self) -> InMemoryReviewRepository[OptimizedMenuItem]:
        """Optimization candidates."""
        return self._optimized_items

    @property
    def suggestions(self) -> InMemoryReviewRepository[MenuItemSuggestion]:
        """New-dish suggestions."""
        return self._suggestions

    @property
    def analytics(self) -> InMemoryRepository[MenuItemAnalytics]:
        """Analytics records."""
        return self._analytics
