"""Readiness of a restaurant for the optimization workflows."""

from ..database.base import DatabaseController
from ..shared.models import (
    OptimizationOption,
    OptimizationOptionsResponse,
    OptimizationReadiness,
)


async def check_optimization_readiness(
    db: DatabaseController, restaurant_id: str
) -> OptimizationReadiness:
    """Report which inputs of the optimization workflows exist for a restaurant."""
    items = await db.menu_items.list_by_restaurant(restaurant_id)
    active_count = sum(1 for item in items if item.is_active)
    demographics = await db.demographics.get_by_id(restaurant_id)
    peer_data = await db.similar_restaurants.get_by_id(restaurant_id)

    return OptimizationReadiness(
        has_menu_items=active_count > 0,
        has_demographics_data=demographics is not None,
        has_similar_restaurant_data=peer_data is not None,
        menu_item_count=active_count,
        specialty_dish_count=len(peer_data.specialty_dishes) if peer_data else 0,
    )


def build_optimization_options(
    readiness: OptimizationReadiness,
) -> list[OptimizationOption]:
    """List both workflows with their availability."""
    if not readiness.has_menu_items:
        existing_reason = "No menu items found. Upload and save the menu first."
    elif not readiness.has_demographics_data:
        existing_reason = (
            "Demographics data not available. Complete the restaurant profile setup."
        )
    else:
        existing_reason = None

    if not readiness.has_similar_restaurant_data:
        suggest_reason = (
            "Similar restaurant data not available. "
            "Complete the restaurant profile setup."
        )
    elif readiness.specialty_dish_count == 0:
        suggest_reason = "No specialty dish data found from similar restaurants."
    else:
        suggest_reason = None

    return [
        OptimizationOption(
            id="optimize-existing",
            title="Optimize Existing Menu Items",
            description=(
                "Rewrite current dish names and descriptions using demographic "
                "insights to appeal to target customers."
            ),
            requirements=[
                "Menu items uploaded and saved",
                "Demographics data collected",
            ],
            available=existing_reason is None,
            unavailable_reason=existing_reason,
        ),
        OptimizationOption(
            id="suggest-new-items",
            title="Suggest New Menu Items",
            description=(
                "Generate new dishes based on popular specialty dishes from "
                "similar restaurants in the area."
            ),
            requirements=[
                "Similar restaurant data collected",
                "Specialty dish data available",
            ],
            available=suggest_reason is None,
            unavailable_reason=suggest_reason,
        ),
    ]


async def get_optimization_options(
    db: DatabaseController, restaurant_id: str
) -> OptimizationOptionsResponse:
    """Readiness and available workflows of a restaurant."""
    readiness = await check_optimization_readiness(db, restaurant_id)
    return OptimizationOptionsResponse(
        restaurant_id=restaurant_id,
        readiness=readiness,
        options=build_optimization_options(readiness),
    )
