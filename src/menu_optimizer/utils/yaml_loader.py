"""Loading of restaurant fixtures from YAML files.

Each file describes one restaurant::

    restaurant: {restaurant_id: r1, name: Trattoria, price_level: 2}
    menu_items: [{name: Carbonara, price: 14, category: pasta}]
    demographics: {age_groups: [...], interests: [...]}
    specialty_dishes: [{dish_name: Cacio e Pepe, tag_id: ..., popularity: 3}]

Only ``restaurant`` is required. Menu items, demographics and specialty
dishes inherit the restaurant id.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from ..database.base import DatabaseController
from ..shared.models import (
    DemographicsData,
    MenuItem,
    Restaurant,
    SimilarRestaurantData,
    SpecialtyDish,
)


class RestaurantBundle(BaseModel):
    """A restaurant with its menu and signal data."""

    restaurant: Restaurant
    menu_items: list[MenuItem] = Field(default_factory=list)
    demographics: DemographicsData | None = None
    specialty_dishes: list[SpecialtyDish] | None = None


def _with_restaurant_id(data: dict[str, Any], restaurant_id: str) -> dict[str, Any]:
    return {"restaurant_id": restaurant_id, **data}


def parse_restaurant_bundle(data: dict[str, Any]) -> RestaurantBundle:
    """Validate one fixture document, filling in the restaurant id."""
    restaurant = Restaurant.model_validate(data["restaurant"])
    restaurant_id = restaurant.restaurant_id
    demographics = data.get("demographics")
    return RestaurantBundle(
        restaurant=restaurant,
        menu_items=[
            MenuItem.model_validate(_with_restaurant_id(item, restaurant_id))
            for item in data.get("menu_items") or []
        ],
        demographics=DemographicsData.model_validate(
            _with_restaurant_id(demographics, restaurant_id)
        )
        if demographics is not None
        else None,
        specialty_dishes=[
            SpecialtyDish.model_validate(dish) for dish in data["specialty_dishes"]
        ]
        if data.get("specialty_dishes") is not None
        else None,
    )


def load_restaurant_bundles(data_dir: Path) -> list[RestaurantBundle]:
    """Load restaurant fixtures from YAML files in the given directory."""
    if not data_dir.exists():
        raise FileNotFoundError(f"Data directory not found: {data_dir}")

    yaml_files = list(data_dir.glob("*.yaml")) + list(data_dir.glob("*.yml"))
    if not yaml_files:
        raise ValueError(f"No YAML files found in data directory: {data_dir}")

    bundles: list[RestaurantBundle] = []
    for yaml_file in sorted(yaml_files):
        with open(yaml_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        bundles.append(parse_restaurant_bundle(data))
    return bundles


async def populate_database(
    db: DatabaseController, bundles: list[RestaurantBundle]
) -> None:
    """Store every bundle in the database."""
    for bundle in bundles:
        restaurant_id = bundle.restaurant.restaurant_id
        await db.restaurants.create(bundle.restaurant)
        for item in bundle.menu_items:
            await db.menu_items.create(item)
        if bundle.demographics is not None:
            await db.demographics.create(bundle.demographics)
        if bundle.specialty_dishes is not None:
            await db.similar_restaurants.create(
                SimilarRestaurantData(
                    restaurant_id=restaurant_id,
                    entity_id=bundle.restaurant.entity_id,
                    specialty_dishes=bundle.specialty_dishes,
                )
            )
