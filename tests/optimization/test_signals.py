"""Tests for demographic insights and specialty-dish prioritization."""

from menu_optimizer.optimization.signals import (
    build_demographic_insights,
    prioritize_specialty_dishes,
    rank_specialty_dishes,
)
from menu_optimizer.shared.models import SelectedDemographics, SpecialtyDish


def _dish(name: str, popularity: float, weight: float, count: int = 1) -> SpecialtyDish:
    return SpecialtyDish(
        dish_name=name,
        tag_id=f"tag:{name}",
        popularity=popularity,
        weight=weight,
        restaurant_count=count,
        total_weight=weight * count,
    )


class TestDemographicInsights:
    """Test suite for build_demographic_insights."""

    def test_selected_age_group(self, demographics):
        """Only the selected age group and its preferences are rendered."""
        insights = build_demographic_insights(
            demographics, SelectedDemographics(selected_age_groups=["25-34"])
        )
        assert insights == [
            "Target age groups: 25-34 (40%)",
            "Age group preferences: craft cocktails, shareable plates",
            "Primary dining pattern: weekend dinner (60% frequency)",
            "Popular dining times: evening, late night",
        ]

    def test_preferences_are_deduplicated_and_capped(self, demographics):
        """Shared preferences appear once and at most max_preferences are kept."""
        insights = build_demographic_insights(
            demographics,
            SelectedDemographics(selected_age_groups=["25-34", "35-44"]),
            max_preferences=2,
        )
        assert "Age group preferences: craft cocktails, shareable plates" in insights

    def test_genders_and_interests(self, demographics):
        """Gender and interest selections render their own lines."""
        insights = build_demographic_insights(
            demographics,
            SelectedDemographics(
                selected_gender_groups=["female"],
                selected_interests=["wine", "skiing"],
            ),
        )
        assert "Target genders: female (55%)" in insights
        assert "Gender preferences: light dishes" in insights
        assert "Target interests: wine" in insights
        assert not any(line.startswith("Target age groups") for line in insights)

    def test_no_selection_uses_all_data(self, demographics):
        """Without a selection every bucket is used."""
        insights = build_demographic_insights(demographics)
        assert insights[0] == "Target age groups: 25-34 (40%), 35-44 (30%)"
        assert "Target genders: female (55%), male (45%)" in insights
        assert "Target interests: wine, live music" in insights

    def test_selection_without_matches_is_empty(self, demographics):
        """A selection matching nothing yields no insights and no error."""
        insights = build_demographic_insights(
            demographics,
            SelectedDemographics(
                selected_age_groups=["65+"], selected_interests=["skiing"]
            ),
        )
        assert insights == []


class TestSpecialtyDishPrioritization:
    """Test suite for ranking and selecting specialty dishes."""

    def test_rank_order(self):
        """Popularity, then weight, then restaurant count, all descending."""
        dishes = [
            _dish("a", 1, 0.9, 1),
            _dish("b", 3, 0.1, 1),
            _dish("c", 1, 0.9, 4),
            _dish("d", 1, 0.95, 1),
        ]
        assert [d.dish_name for d in rank_specialty_dishes(dishes)] == [
            "b",
            "d",
            "c",
            "a",
        ]

    def test_truncates_to_max(self):
        """The ranking is cut to max_dishes."""
        dishes = [_dish(str(i), i, 0.5) for i in range(10)]
        top = prioritize_specialty_dishes(dishes, 3)
        assert [d.dish_name for d in top] == ["9", "8", "7"]

    def test_explicit_selection_used_verbatim(self):
        """A caller selection overrides ranking and truncation."""
        candidates = [_dish("popular", 9, 1.0)]
        selected = [_dish("z", 0, 0.1), _dish("y", 1, 0.2), _dish("x", 2, 0.3)]
        chosen = prioritize_specialty_dishes(candidates, 1, selected)
        assert [d.dish_name for d in chosen] == ["z", "y", "x"]
