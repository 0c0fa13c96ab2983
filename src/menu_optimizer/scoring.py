"""Deterministic heuristic scores of menu items.

Each score starts at 50, moves by fixed bounded amounts and is clamped to
[0, 100]. The engine has no randomness and makes no external calls.
"""

import math

from .shared.models import AnalyticsMetrics, MenuItem, Restaurant

BASE_SCORE = 50.0
MIN_SCORE = 0.0
MAX_SCORE = 100.0

POPULAR_CATEGORIES = frozenset({"appetizers", "burgers", "pizza", "pasta", "desserts"})

CATEGORY_BASE_COSTS: dict[str, float] = {
    "appetizers": 3,
    "salads": 4,
    "soups": 3,
    "sandwiches": 5,
    "burgers": 6,
    "pizza": 4,
    "pasta": 4,
    "seafood": 12,
    "steaks": 15,
    "chicken": 7,
    "pork": 8,
    "beef": 10,
    "vegetarian": 4,
    "desserts": 3,
    "beverages": 1,
}
DEFAULT_BASE_COST = 5.0
COST_PER_INGREDIENT = 0.5

# Expected price band (min, max) per restaurant price level
PRICE_RANGES: dict[int, tuple[float, float]] = {
    1: (5, 15),
    2: (12, 25),
    3: (20, 40),
    4: (35, 80),
}
DEFAULT_PRICE_RANGE = (10.0, 30.0)


def clamp_score(score: float) -> float:
    """Clamp a score to [0, 100]."""
    return min(MAX_SCORE, max(MIN_SCORE, score))


def expected_price_range(restaurant: Restaurant) -> tuple[float, float] | None:
    """Expected price band of the restaurant, or None without a price level."""
    if not restaurant.price_level:
        return None
    return PRICE_RANGES.get(restaurant.price_level, DEFAULT_PRICE_RANGE)


def estimate_food_cost(item: MenuItem) -> float:
    """Category base cost plus a fixed amount per ingredient."""
    base = CATEGORY_BASE_COSTS.get(item.category.strip().lower(), DEFAULT_BASE_COST)
    return base + COST_PER_INGREDIENT * len(item.ingredients)


def gross_margin(item: MenuItem) -> float:
    """Share of the price left after food cost; -inf for a zero price."""
    if item.price <= 0:
        return -math.inf
    return (item.price - estimate_food_cost(item)) / item.price


class ScoringEngine:
    """Computes popularity, profitability and recommendation scores."""

    def popularity_score(self, item: MenuItem, restaurant: Restaurant) -> float:
        """Appeal of an item to a broad audience."""
        score = BASE_SCORE
        if item.has_approved_enhancement:
            score += 15
        score += min(len(item.dietary_tags) * 5, 20)
        if item.category.strip().lower() in POPULAR_CATEGORIES:
            score += 10
        price_range = expected_price_range(restaurant)
        if price_range and price_range[0] <= item.price <= price_range[1]:
            score += 10
        if item.llm_generated_tags:
            score += 5
        return clamp_score(score)

    def profitability_score(self, item: MenuItem, restaurant: Restaurant) -> float:
        """Estimated margin and price positioning of an item."""
        score = BASE_SCORE
        margin = gross_margin(item)
        if margin > 0.7:
            score += 30
        elif margin > 0.6:
            score += 20
        elif margin > 0.5:
            score += 10
        elif margin < 0.3:
            score -= 20

        price_range = expected_price_range(restaurant)
        if price_range:
            low, high = price_range
            position = (item.price - low) / (high - low)
            if 0.6 <= position <= 0.8:
                score += 15
            elif position > 0.9:
                score -= 10
        return clamp_score(score)

    def recommendation_score(self, item: MenuItem) -> float:
        """How much content an item offers for recommendations."""
        score = BASE_SCORE
        if item.has_approved_enhancement:
            score += 20
        if item.taste_profile is not None:
            score += 15
        if item.llm_generated_tags:
            score += 10
        if item.dietary_tags:
            score += 10

        description_length = len(item.description)
        if description_length > 100:
            score += 10
        elif description_length < 30:
            score -= 10

        if len(item.ingredients) > 5:
            score += 5
        return clamp_score(score)

    def score(self, item: MenuItem, restaurant: Restaurant) -> AnalyticsMetrics:
        """All three scores of an item."""
        return AnalyticsMetrics(
            popularity_score=self.popularity_score(item, restaurant),
            profitability_score=self.profitability_score(item, restaurant),
            recommendation_score=self.recommendation_score(item),
        )


def composite_score(metrics: AnalyticsMetrics) -> float:
    """Mean of the three scores."""
    return (
        metrics.popularity_score
        + metrics.profitability_score
        + metrics.recommendation_score
    ) / 3
