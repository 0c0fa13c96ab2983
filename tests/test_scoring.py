"""Tests for the heuristic scoring engine."""

import math

import pytest

from menu_optimizer.scoring import (
    ScoringEngine,
    clamp_score,
    composite_score,
    estimate_food_cost,
    gross_margin,
)
from menu_optimizer.shared.models import MenuItem, Restaurant


def _restaurant(price_level: int | None = 3) -> Restaurant:
    return Restaurant(restaurant_id="r", name="Harbor House", price_level=price_level)


def _item(**fields) -> MenuItem:
    defaults = {
        "restaurant_id": "r",
        "name": "Grilled Branzino",
        "description": "Whole branzino with lemon and herbs",
        "price": 30.0,
        "category": "seafood",
        "ingredients": ["branzino", "lemon", "parsley", "garlic", "olive oil"],
    }
    return MenuItem(**{**defaults, **fields})


@pytest.fixture
def engine() -> ScoringEngine:
    """A scoring engine."""
    return ScoringEngine()


class TestHelpers:
    """Test suite for cost and margin helpers."""

    def test_food_cost(self):
        """Seafood base cost plus 0.5 per ingredient."""
        assert estimate_food_cost(_item()) == 14.5

    def test_unknown_category_cost(self):
        """Unknown categories use the default base cost."""
        assert estimate_food_cost(_item(category="fusion", ingredients=[])) == 5.0

    def test_zero_price_margin(self):
        """A zero price has an infinitely negative margin."""
        assert gross_margin(_item(price=0)) == -math.inf

    @pytest.mark.parametrize(("raw", "clamped"), [(-5, 0), (42, 42), (130, 100)])
    def test_clamp(self, raw, clamped):
        """Scores are clamped to [0, 100]."""
        assert clamp_score(raw) == clamped


class TestScoringEngine:
    """Test suite for ScoringEngine."""

    def test_mid_range_seafood(self, engine):
        """A $30 seafood dish at price level 3 scores 60 and 60."""
        metrics = engine.score(_item(), _restaurant())
        assert metrics.popularity_score == 60
        assert metrics.profitability_score == 60

    def test_sweet_spot_price_bonus(self, engine):
        """Prices in the 60-80% band of the expected range earn a bonus."""
        assert engine.profitability_score(_item(price=34), _restaurant()) == 75

    def test_premium_price_penalty(self, engine):
        """Prices above 90% of the range are penalised."""
        assert engine.profitability_score(_item(price=100), _restaurant()) == 70

    @pytest.mark.parametrize("price", [0, 0.01, 10000])
    def test_extreme_prices_stay_in_bounds(self, engine, price):
        """Extreme prices still produce scores within bounds."""
        metrics = engine.score(_item(price=price), _restaurant())
        for score in (
            metrics.popularity_score,
            metrics.profitability_score,
            metrics.recommendation_score,
        ):
            assert 0 <= score <= 100

    def test_popularity_is_clamped(self, engine):
        """Every bonus at once is capped at 100."""
        item = _item(
            category="pasta",
            price=25,
            dietary_tags=["vegetarian", "vegan", "gluten-free", "nut-free", "halal"],
            llm_generated_tags=["comfort"],
            enhanced_description="Hearty",
            enhanced_description_status="approved",
        )
        assert engine.popularity_score(item, _restaurant()) == 100

    def test_no_price_level(self, engine):
        """Without a price level no price positioning applies."""
        metrics = engine.score(_item(), _restaurant(price_level=None))
        assert metrics.popularity_score == 50
        assert metrics.profitability_score == 60

    def test_approved_enhancement_raises_scores(self, engine):
        """An approved enhancement scores higher than a pending one."""
        pending = _item(
            enhanced_description="Flaky", enhanced_description_status="pending"
        )
        approved = _item(
            enhanced_description="Flaky", enhanced_description_status="approved"
        )
        restaurant = _restaurant()
        assert engine.popularity_score(approved, restaurant) == (
            engine.popularity_score(pending, restaurant) + 15
        )
        assert engine.recommendation_score(approved) == (
            engine.recommendation_score(pending) + 20
        )

    def test_recommendation_content(self, engine):
        """Taste profile, tags, long description and many ingredients add up."""
        item = _item(
            description="x" * 120,
            taste_profile={"savory": 0.7},
            llm_generated_tags=["light"],
            dietary_tags=["pescatarian"],
            ingredients=[str(i) for i in range(6)],
        )
        assert engine.recommendation_score(item) == 100

    def test_short_description_penalty(self, engine):
        """Descriptions under 30 characters lose points."""
        assert engine.recommendation_score(_item(description="Fish")) == 40

    def test_deterministic(self, engine):
        """Identical inputs give identical scores."""
        assert engine.score(_item(), _restaurant()) == engine.score(
            _item(), _restaurant()
        )

    def test_composite(self, engine):
        """The composite score is the mean of the three."""
        metrics = engine.score(_item(), _restaurant())
        assert composite_score(metrics) == pytest.approx(
            (
                metrics.popularity_score
                + metrics.profitability_score
                + metrics.recommendation_score
            )
            / 3
        )
