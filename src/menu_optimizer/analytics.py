"""Collection of item analytics and restaurant dashboard data."""

import logging
from collections import defaultdict

from pydantic import BaseModel, Field

from .database.base import DatabaseController
from .errors import NotFoundError
from .scoring import ScoringEngine, composite_score
from .shared.models import MenuItem, MenuItemAnalytics, TrendPoint, utc_now

logger = logging.getLogger(__name__)

PERFORMER_COUNT = 5


class CategoryMetrics(BaseModel):
    """Item count and mean composite score of one category."""

    category: str
    item_count: int
    average_score: float


class MonthlyTrend(BaseModel):
    """Mean composite score of the trend points recorded in one month."""

    month: str = Field(description="YYYY-MM")
    average_score: float
    data_points: int


class DashboardData(BaseModel):
    """Aggregated analytics of a restaurant."""

    restaurant_id: str
    total_menu_items: int
    average_popularity_score: float
    average_profitability_score: float
    average_recommendation_score: float
    top_performing_items: list[MenuItem]
    low_performing_items: list[MenuItem]
    category_breakdown: list[CategoryMetrics]
    monthly_trends: list[MonthlyTrend]


def _average(values: list[float]) -> float:
    if not values:
        return 0.0
    return round(sum(values) / len(values), 2)


class AnalyticsService:
    """Scores menu items and aggregates the scores for reporting."""

    def __init__(self, db: DatabaseController, engine: ScoringEngine | None = None):
        """Initialize with repositories and a scoring engine."""
        self.db = db
        self.engine = engine or ScoringEngine()

    async def collect_restaurant_analytics(
        self, restaurant_id: str
    ) -> list[MenuItemAnalytics]:
        """Score every active item and record a composite trend point.

        Raises:
            NotFoundError: If the restaurant does not exist.

        """
        restaurant = await self.db.restaurants.get_by_id(restaurant_id)
        if restaurant is None:
            raise NotFoundError(f"Restaurant {restaurant_id} not found")

        records: list[MenuItemAnalytics] = []
        for item in await self.db.menu_items.list_by_restaurant(restaurant_id):
            if not item.is_active:
                continue
            metrics = self.engine.score(item, restaurant)
            point = TrendPoint(score=composite_score(metrics))

            existing = await self.db.analytics.get_by_id(item.item_id)
            if existing is None:
                record = await self.db.analytics.create(
                    MenuItemAnalytics(
                        item_id=item.item_id,
                        restaurant_id=restaurant_id,
                        metrics=metrics,
                        trends=[point],
                    )
                )
            else:
                record = await self.db.analytics.update(
                    item.item_id,
                    {
                        "metrics": metrics,
                        "trends": [*existing.trends, point],
                        "updated_at": utc_now(),
                    },
                )
            if record is not None:
                records.append(record)

        logger.info(f"Collected analytics for {len(records)} items of {restaurant.name}")
        return records

    async def get_dashboard_data(self, restaurant_id: str) -> DashboardData:
        """Aggregate the stored analytics of a restaurant."""
        records = await self.db.analytics.list_by_restaurant(restaurant_id)
        items = await self.db.menu_items.list_by_restaurant(restaurant_id)
        items_by_id = {item.item_id: item for item in items}

        ranked = sorted(records, key=lambda r: composite_score(r.metrics), reverse=True)
        top = [
            items_by_id[r.item_id]
            for r in ranked[:PERFORMER_COUNT]
            if r.item_id in items_by_id
        ]
        low = [
            items_by_id[r.item_id]
            for r in reversed(ranked[-PERFORMER_COUNT:])
            if r.item_id in items_by_id
        ]

        category_items: dict[str, int] = defaultdict(int)
        for item in items:
            category_items[item.category] += 1
        category_scores: dict[str, list[float]] = defaultdict(list)
        for record in records:
            item = items_by_id.get(record.item_id)
            if item is not None:
                category_scores[item.category].append(composite_score(record.metrics))
        breakdown = sorted(
            (
                CategoryMetrics(
                    category=category,
                    item_count=count,
                    average_score=_average(category_scores[category]),
                )
                for category, count in category_items.items()
            ),
            key=lambda c: c.average_score,
            reverse=True,
        )

        monthly: dict[str, list[float]] = defaultdict(list)
        for record in records:
            for point in record.trends:
                monthly[point.timestamp.strftime("%Y-%m")].append(point.score)
        monthly_trends = [
            MonthlyTrend(
                month=month, average_score=_average(scores), data_points=len(scores)
            )
            for month, scores in sorted(monthly.items())
        ]

        return DashboardData(
            restaurant_id=restaurant_id,
            total_menu_items=len(items),
            average_popularity_score=_average(
                [r.metrics.popularity_score for r in records]
            ),
            average_profitability_score=_average(
                [r.metrics.profitability_score for r in records]
            ),
            average_recommendation_score=_average(
                [r.metrics.recommendation_score for r in records]
            ),
            top_performing_items=top,
            low_performing_items=low,
            category_breakdown=breakdown,
            monthly_trends=monthly_trends,
        )
