"""Tests for prompt rendering."""

from menu_optimizer.optimization.prompts import (
    build_enhancement_prompt,
    build_optimization_prompt,
    build_suggestion_prompt,
)
from menu_optimizer.shared.models import MenuItem


class TestOptimizationPrompt:
    """Test suite for build_optimization_prompt."""

    def test_deterministic(self, restaurant, menu_items, specialty_dishes):
        """Identical inputs render identical prompts."""
        args = (restaurant, menu_items[0], ["Target interests: wine"], specialty_dishes)
        assert build_optimization_prompt(*args) == build_optimization_prompt(*args)

    def test_contains_item_insights_and_format(
        self, restaurant, menu_items, specialty_dishes
    ):
        """The item, the insights, the dishes and the JSON fields are present."""
        rendered = build_optimization_prompt(
            restaurant,
            menu_items[0],
            ["Target interests: wine"],
            specialty_dishes,
            style="playful",
            target_audience="young professionals",
        )
        prompt = rendered.prompt
        assert '"Carbonara"' in prompt
        assert "Ingredients: spaghetti, egg, pecorino, guanciale" in prompt
        assert "Target interests: wine" in prompt
        assert "Cacio e Pepe" in prompt
        assert "Style: playful" in prompt
        assert "Target Audience: young professionals" in prompt
        for field in ("optimizedName", "optimizedDescription", "reason"):
            assert f'"{field}"' in prompt
        assert "JSON" in rendered.system_prompt

    def test_missing_optional_fields_are_omitted(self, restaurant):
        """No ingredients, tags, audience or dishes means no such lines."""
        item = MenuItem(restaurant_id="rest-1", name="Bread", price=3)
        prompt = build_optimization_prompt(restaurant, item, []).prompt
        assert "Ingredients" not in prompt
        assert "Dietary Tags" not in prompt
        assert "Target Audience" not in prompt
        assert "CUSTOMER DEMOGRAPHICS" not in prompt
        assert "SPECIALTY DISHES" not in prompt

    def test_cuisine_override(self, restaurant, menu_items):
        """An explicit cuisine replaces the restaurant's."""
        prompt = build_optimization_prompt(
            restaurant, menu_items[0], [], cuisine_override="roman"
        ).prompt
        assert "Cuisine Type: roman" in prompt
        assert "italian" not in prompt


class TestSuggestionPrompt:
    """Test suite for build_suggestion_prompt."""

    def test_lists_dishes_and_avoids_existing(self, restaurant, specialty_dishes):
        """Dishes are numbered and existing names are listed."""
        prompt = build_suggestion_prompt(
            restaurant,
            specialty_dishes,
            ["Carbonara", "Margherita"],
            max_suggestions=3,
            excluded_categories=["desserts"],
        ).prompt
        assert "1. Cacio e Pepe (served at 3 restaurants" in prompt
        assert "2. Burrata" in prompt
        assert "Carbonara, Margherita" in prompt
        assert "CATEGORIES TO EXCLUDE:\ndesserts" in prompt
        assert "Generate 3 unique menu item suggestions" in prompt
        assert '"suggestions"' in prompt
        assert '"estimatedPrice"' in prompt

    def test_existing_names_capped(self, restaurant, specialty_dishes):
        """At most 20 existing names are listed."""
        names = [f"Dish {i}" for i in range(25)]
        prompt = build_suggestion_prompt(
            restaurant, specialty_dishes, names, max_suggestions=5
        ).prompt
        assert "Dish 19..." in prompt
        assert "Dish 20" not in prompt
        assert "CATEGORIES TO EXCLUDE" not in prompt


class TestEnhancementPrompt:
    """Test suite for build_enhancement_prompt."""

    def test_includes_taste_profile_and_audience(self):
        """Top taste attributes and the audience are rendered."""
        item = MenuItem(
            restaurant_id="rest-1",
            name="Carbonara",
            description="Classic pasta",
            price=16,
            category="pasta",
            taste_profile={"savory": 0.9, "creamy": 0.7, "sweet": 0.1},
        )
        prompt = build_enhancement_prompt(
            item, style="elegant", target_audience="foodies"
        ).prompt
        assert "Price: $16.00" in prompt
        assert prompt.index("savory") < prompt.index("creamy")
        assert "Target Audience: foodies" in prompt
        assert "Desired Style: elegant" in prompt

    def test_minimal_item(self):
        """An item without optional data still renders."""
        item = MenuItem(restaurant_id="rest-1", name="Bread", price=3)
        prompt = build_enhancement_prompt(item).prompt
        assert "Item Name: Bread" in prompt
        assert "Taste Profile" not in prompt
        assert "Target Audience" not in prompt
