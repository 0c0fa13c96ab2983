"""Base repository interfaces used by the pipeline."""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

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

EntryType = TypeVar("EntryType")


class Repository(ABC, Generic[EntryType]):  # noqa: UP046
    """Abstract key-value store of one record type.

    Records are keyed by a stable id and grouped by restaurant.
    """

    @abstractmethod
    async def create(self, item: EntryType) -> EntryType:
        """Store a new record."""
        pass

    @abstractmethod
    async def get_by_id(self, item_id: str) -> EntryType | None:
        """Retrieve a record by its id."""
        pass

    @abstractmethod
    async def update(self, item_id: str, updates: dict[str, Any]) -> EntryType | None:
        """Apply field updates to a record. Returns None if it does not exist."""
        pass

    @abstractmethod
    async def list_by_restaurant(self, restaurant_id: str) -> list[EntryType]:
        """List all records of a restaurant."""
        pass


class ReviewRepository(Repository[EntryType]):
    """Repository of records that move through the review lifecycle."""

    @abstractmethod
    async def list_by_status(
        self, restaurant_id: str, status: ReviewStatus
    ) -> list[EntryType]:
        """List records of a restaurant in one review status."""
        pass


class DatabaseController(ABC):
    """Access to every repository the pipeline reads and writes."""

    @property
    @abstractmethod
    def restaurants(self) -> Repository[Restaurant]:
        """Restaurant profiles."""
        pass

    @property
    @abstractmethod
    def menu_items(self) -> Repository[MenuItem]:
        """Canonical menu items."""
        pass

    @property
    @abstractmethod
    def demographics(self) -> Repository[DemographicsData]:
        """Demographics snapshots, keyed by restaurant id."""
        pass

    @property
    @abstractmethod
    def similar_restaurants(self) -> Repository[SimilarRestaurantData]:
        """Peer restaurant data, keyed by restaurant id."""
        pass

    @property
    @abstractmethod
    def optimized_items(self) -> ReviewRepository[OptimizedMenuItem]:
        """Optimization candidates, keyed by menu item id."""
        pass

    @property
    @abstractmethod
    def suggestions(self) -> ReviewRepository[MenuItemSuggestion]:
        """New-dish suggestions, keyed by suggestion id."""
        pass

    @property
    @abstractmethod
    def analytics(self) -> Repository[MenuItemAnalytics]:
        """Analytics records, keyed by menu item id."""
        pass
