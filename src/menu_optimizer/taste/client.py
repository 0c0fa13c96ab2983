"""Client for the taste/peer-signal API."""

import logging
import math
import re
from datetime import datetime
from typing import Any

import aiohttp
from pydantic import BaseModel, Field

from ..client import BaseClient, ClientError, HTTPError, RetryConfig
from ..config import TasteApiSettings
from ..errors import CredentialResolutionError, TasteApiError
from ..llm.secrets import EnvSecretStore, SecretStore
from ..shared.models import (
    MenuItem,
    SimilarRestaurant,
    SimilarRestaurantData,
    SpecialtyDish,
    utc_now,
)
from .scheduler import RequestScheduler

logger = logging.getLogger(__name__)


class TasteProfile(BaseModel):
    """Taste analysis of one menu item."""

    item_id: str
    restaurant_id: str
    taste_attributes: dict[str, float] = Field(default_factory=dict)
    dietary_compatibility: dict[str, Any] | None = None
    appeal_factors: dict[str, Any] | None = None
    demographic_appeal: dict[str, Any] | None = None
    pairings: list[Any] | None = None
    analysis_date: datetime = Field(default_factory=utc_now)


def taste_api_key_path(stage: str) -> str:
    """Parameter path holding the taste API key in a stage."""
    return f"/{stage}/taste-api/api-key"


def specialty_dish_tag_id(name: str) -> str:
    """Tag id derived from a dish name when the API omits one."""
    slug = re.sub(r"\s+", "_", name.lower())
    return f"urn:tag:specialty_dish:place:{slug}"


def _coerce_weight(value: Any) -> float:
    """Dish weight, defaulting to 1 when missing, non-numeric or NaN."""
    try:
        weight = float(value)
    except (TypeError, ValueError):
        return 1.0
    if math.isnan(weight):
        return 1.0
    return weight


def merge_specialty_dishes(
    restaurants: list[SimilarRestaurant],
) -> list[SpecialtyDish]:
    """Merge the specialty dishes of peer restaurants by tag id.

    Each repeat occurrence of a tag adds one to ``restaurant_count`` and to
    ``popularity`` and its weight to ``total_weight``; ``weight`` is kept equal
    to ``total_weight / restaurant_count``. The result is sorted by popularity,
    then weight, both descending.
    """
    merged: dict[str, SpecialtyDish] = {}
    for restaurant in restaurants:
        for dish in restaurant.specialty_dishes:
            existing = merged.get(dish.tag_id)
            if existing is None:
                merged[dish.tag_id] = SpecialtyDish(
                    dish_name=dish.dish_name,
                    tag_id=dish.tag_id,
                    restaurant_count=1,
                    popularity=1,
                    weight=dish.weight,
                    total_weight=dish.weight,
                )
                continue

            existing.restaurant_count += 1
            existing.popularity += 1
            existing.total_weight += dish.weight
            existing.weight = existing.total_weight / existing.restaurant_count

    return sorted(merged.values(), key=lambda d: (-d.popularity, -d.weight))


def parse_similar_restaurant(entity: dict[str, Any]) -> SimilarRestaurant:
    """Read one insights entity into a peer restaurant."""
    properties = entity.get("properties") or {}
    dishes: list[SpecialtyDish] = []
    for tag in properties.get("specialty_dishes") or []:
        name = tag.get("name")
        if not name:
            continue
        weight = _coerce_weight(tag.get("weight"))
        dishes.append(
            SpecialtyDish(
                dish_name=name,
                tag_id=tag.get("tag_id") or specialty_dish_tag_id(name),
                weight=weight,
                total_weight=weight,
            )
        )

    return SimilarRestaurant(
        name=entity.get("name") or "",
        entity_id=entity.get("entity_id") or entity.get("id") or "",
        address=properties.get("address"),
        price_level=properties.get("price_level"),
        business_rating=properties.get("business_rating"),
        popularity=entity.get("popularity"),
        specialty_dishes=dishes,
    )


def build_similar_restaurant_data(
    restaurant_id: str,
    entity_id: str | None,
    restaurants: list[SimilarRestaurant],
) -> SimilarRestaurantData:
    """Bundle peer restaurants with their merged specialty dishes."""
    return SimilarRestaurantData(
        restaurant_id=restaurant_id,
        entity_id=entity_id,
        similar_restaurants=restaurants,
        specialty_dishes=merge_specialty_dishes(restaurants),
    )


class TasteApiClient:
    """Rate-limited client for peer search and taste-profile analysis."""

    def __init__(
        self,
        settings: TasteApiSettings | None = None,
        secret_store: SecretStore | None = None,
        scheduler: RequestScheduler | None = None,
    ):
        """Initialize the client.

        Args:
            settings: API settings. If None, read from the environment.
            secret_store: Where the API key lives when no local key is set
            scheduler: Request spacing; built from the settings when None

        """
        self.settings = settings or TasteApiSettings()
        self.secret_store = secret_store or EnvSecretStore()
        self.scheduler = scheduler or RequestScheduler(
            self.settings.requests_per_second
        )
        self._http = BaseClient(
            self.settings.base_url,
            timeout=self.settings.timeout,
            retry_config=RetryConfig(max_retries=self.settings.max_retries),
        )
        self._api_key: str | None = None

    async def connect(self) -> None:
        """Open the underlying HTTP session."""
        await self._http.connect()

    async def close(self) -> None:
        """Release the underlying HTTP session."""
        await self._http.close()

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def _get_api_key(self) -> str:
        if self._api_key:
            return self._api_key
        if self.settings.local_api_key:
            self._api_key = self.settings.local_api_key
            return self._api_key

        path = taste_api_key_path(self.settings.stage)
        api_key = await self.secret_store.get_parameter(path, with_decryption=True)
        if not api_key:
            raise CredentialResolutionError(f"No taste API key found at {path}")
        self._api_key = api_key
        return api_key

    async def _call(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if not self._http.is_connected:
            await self.connect()

        headers = {
            "x-api-key": await self._get_api_key(),
            "Content-Type": "application/json",
        }
        try:
            return await self.scheduler.run(
                lambda: self._http.request(
                    method, path, params=params, json_data=json_data, headers=headers
                )
            )
        except HTTPError as e:
            raise TasteApiError(e.message, e.status) from e
        except (ClientError, aiohttp.ClientError) as e:
            raise TasteApiError(str(e) or type(e).__name__) from e

    async def search_similar_restaurants(
        self,
        entity_id: str,
        location: str,
        cuisine: str,
        min_rating: float = 3.0,
        count: int = 10,
    ) -> list[SimilarRestaurant]:
        """Find peer restaurants of an entity in a location and cuisine.

        Args:
            entity_id: Taste API entity id of the restaurant
            location: Free-text location query
            cuisine: Cuisine genre, e.g. ``italian``
            min_rating: Minimum external rating of returned peers
            count: Maximum number of peers

        Returns:
            Peer restaurants with their specialty dishes

        Raises:
            TasteApiError: If the API call fails.

        """
        params = {
            "filter.type": "urn:entity:place",
            "filter.location.query": location,
            "filter.tags": f"urn:tag:genre:place:restaurant:{cuisine}",
            "signal.interests.entities": entity_id,
            "count": str(count),
            "filter.external.tripadvisor.rating.min": str(min_rating),
        }
        logger.info(f"Searching similar restaurants for {entity_id} in {location}")
        data = await self._call("GET", "/v2/insights", params=params)
        entities = (data.get("results") or {}).get("entities") or []
        return [parse_similar_restaurant(entity) for entity in entities]

    async def analyze_taste_profile(self, item: MenuItem) -> TasteProfile:
        """Analyse the taste attributes of a menu item.

        Raises:
            TasteApiError: If the API call fails.

        """
        menu_item: dict[str, Any] = {
            "name": item.name,
            "description": item.description,
            "price": item.price,
            "category": item.category,
        }
        if item.ingredients:
            menu_item["ingredients"] = item.ingredients
        if item.dietary_tags:
            menu_item["dietaryTags"] = item.dietary_tags

        data = await self._call(
            "POST",
            "/taste-profiles/analyze",
            json_data={
                "menuItem": menu_item,
                "metadata": {
                    "itemId": item.item_id,
                    "restaurantId": item.restaurant_id,
                },
            },
        )

        attributes = {
            name: float(value)
            for name, value in (data.get("tasteAttributes") or {}).items()
            if isinstance(value, int | float) and not isinstance(value, bool)
        }
        return TasteProfile(
            item_id=item.item_id,
            restaurant_id=item.restaurant_id,
            taste_attributes=attributes,
            dietary_compatibility=data.get("dietaryCompatibility"),
            appeal_factors=data.get("appealFactors"),
            demographic_appeal=data.get("demographicAppeal"),
            pairings=data.get("pairings"),
        )
