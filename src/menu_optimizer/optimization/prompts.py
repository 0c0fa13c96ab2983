"""Prompt templates for optimization, suggestion and enhancement calls.

Every builder is deterministic: identical inputs render identical text.
Optional inputs that are missing are left out of the prompt.
"""

from pydantic import BaseModel

from ..shared.models import MenuItem, Restaurant, SpecialtyDish

MAX_EXISTING_NAMES = 20
MAX_TASTE_ATTRIBUTES = 5

OPTIMIZATION_SYSTEM_PROMPT = (
    "You are a professional menu consultant. You rewrite menu item names and "
    "descriptions so they appeal to a restaurant's customers while staying "
    "true to the dish. Reply with a single JSON object and nothing else."
)

SUGGESTION_SYSTEM_PROMPT = (
    "You are a professional menu consultant. You propose new dishes for a "
    "restaurant based on dishes that are popular at similar restaurants. "
    'Reply with a single JSON object of the form {"suggestions": [...]} '
    "and nothing else."
)

ENHANCEMENT_SYSTEM_PROMPT = """You are an expert culinary writer who writes compelling, appetizing menu descriptions.
Follow these guidelines:
1. Keep the essence and key information of the original description
2. Use vivid sensory language about taste, smell, texture and appearance
3. Highlight quality ingredients and preparation methods
4. Be concise: two or three sentences
5. Do not invent ingredients that the original does not mention
6. Keep any dietary information from the original description"""


class RenderedPrompt(BaseModel):
    """A user prompt and its system prompt."""

    prompt: str
    system_prompt: str


def _section(title: str, lines: list[str]) -> str:
    return "\n".join([f"{title}:", *lines])


def _join_sections(sections: list[str]) -> str:
    return "\n\n".join(section for section in sections if section)


def _format_price(price: float) -> str:
    return f"${price:.2f}"


def _item_lines(item: MenuItem) -> list[str]:
    lines = [
        f'Name: "{item.name}"',
        f'Description: "{item.description}"',
    ]
    if item.category:
        lines.append(f"Category: {item.category}")
    lines.append(f"Price: {_format_price(item.price)}")
    if item.ingredients:
        lines.append(f"Ingredients: {', '.join(item.ingredients)}")
    if item.dietary_tags:
        lines.append(f"Dietary Tags: {', '.join(item.dietary_tags)}")
    return lines


def _restaurant_lines(restaurant: Restaurant, cuisine: str | None) -> list[str]:
    lines = [f"Name: {restaurant.name}"]
    if restaurant.location:
        lines.append(f"Location: {restaurant.location}")
    if cuisine:
        lines.append(f"Cuisine Type: {cuisine}")
    if restaurant.price_level:
        lines.append(f"Price level: {restaurant.price_level} (1=budget, 4=luxury)")
    return lines


def build_optimization_prompt(
    restaurant: Restaurant,
    item: MenuItem,
    insights: list[str],
    dishes: list[SpecialtyDish] | None = None,
    style: str | None = None,
    target_audience: str | None = None,
    cuisine_override: str | None = None,
) -> RenderedPrompt:
    """Render the prompt that rewrites one existing menu item.

    The reply must be ``{"optimizedName", "optimizedDescription", "reason"}``.
    """
    cuisine = cuisine_override or restaurant.cuisine

    requirements = [
        "- Keep the essence and accuracy of the original dish",
        "- Make the name and description more appealing to the target customers",
        "- Use language that resonates with the customer base",
    ]
    if style:
        requirements.append(f"- Style: {style}")
    if target_audience:
        requirements.append(f"- Target Audience: {target_audience}")
    if cuisine:
        requirements.append(f"- Fit the {cuisine} cuisine style")

    sections = [
        "Optimize the name and description of this menu item.",
        _section("RESTAURANT", _restaurant_lines(restaurant, cuisine)),
        _section("MENU ITEM TO OPTIMIZE", _item_lines(item)),
    ]
    if insights:
        sections.append(_section("CUSTOMER DEMOGRAPHICS", insights))
    if dishes:
        sections.append(
            _section(
                "HIGHLY RATED SPECIALTY DISHES FROM SIMILAR RESTAURANTS",
                [
                    f'- "{dish.dish_name}" (popularity: {dish.popularity:g}, '
                    f"weight: {dish.weight:.2f})"
                    for dish in dishes
                ],
            )
        )
        requirements.append(
            "- Draw on the naming and description techniques of these dishes; "
            "higher weight means stronger customer preference"
        )
    sections.append(_section("REQUIREMENTS", requirements))
    sections.append(
        "Respond with exactly this JSON object:\n"
        "{\n"
        '  "optimizedName": "the new dish name",\n'
        '  "optimizedDescription": "the new description",\n'
        '  "reason": "why these changes appeal to the target customers"\n'
        "}"
    )
    return RenderedPrompt(
        prompt=_join_sections(sections), system_prompt=OPTIMIZATION_SYSTEM_PROMPT
    )


def build_suggestion_prompt(
    restaurant: Restaurant,
    dishes: list[SpecialtyDish],
    existing_names: list[str],
    max_suggestions: int,
    excluded_categories: list[str] | None = None,
    cuisine_override: str | None = None,
) -> RenderedPrompt:
    """Render the prompt that proposes new dishes inspired by peer dishes.

    The reply must be ``{"suggestions": [{"name", "description",
    "estimatedPrice", "category", "ingredients", "dietaryTags",
    "basedOnDish"}]}``.
    """
    cuisine = cuisine_override or restaurant.cuisine

    sections = [
        f"Suggest {max_suggestions} new menu items for this restaurant.",
        _section("RESTAURANT PROFILE", _restaurant_lines(restaurant, cuisine)),
    ]
    if dishes:
        sections.append(
            _section(
                "POPULAR SPECIALTY DISHES FROM SIMILAR RESTAURANTS",
                [
                    f"{index}. {dish.dish_name} (served at {dish.restaurant_count} "
                    f"restaurants, popularity: {dish.popularity:g})"
                    for index, dish in enumerate(dishes, start=1)
                ],
            )
        )
    if existing_names:
        names = ", ".join(existing_names[:MAX_EXISTING_NAMES])
        if len(existing_names) > MAX_EXISTING_NAMES:
            names += "..."
        sections.append(_section("EXISTING MENU ITEMS TO AVOID DUPLICATING", [names]))
    if excluded_categories:
        sections.append(
            _section("CATEGORIES TO EXCLUDE", [", ".join(excluded_categories)])
        )
    sections.append(
        _section(
            "REQUIREMENTS",
            [
                f"- Generate {max_suggestions} unique menu item suggestions",
                "- Base them on the popular specialty dishes above",
                "- Fit the restaurant's cuisine and price level",
                "- Do not duplicate existing menu items",
                "- Give realistic price estimates",
            ],
        )
    )
    sections.append(
        "Respond with exactly this JSON object:\n"
        "{\n"
        '  "suggestions": [\n'
        "    {\n"
        '      "name": "dish name",\n'
        '      "description": "appealing description",\n'
        '      "estimatedPrice": 15.99,\n'
        '      "category": "appetizer/entree/dessert/etc",\n'
        '      "ingredients": ["ingredient"],\n'
        '      "dietaryTags": ["vegetarian"],\n'
        '      "basedOnDish": "specialty dish that inspired it"\n'
        "    }\n"
        "  ]\n"
        "}"
    )
    return RenderedPrompt(
        prompt=_join_sections(sections), system_prompt=SUGGESTION_SYSTEM_PROMPT
    )


def build_enhancement_prompt(
    item: MenuItem,
    style: str | None = None,
    target_audience: str | None = None,
) -> RenderedPrompt:
    """Render the prompt that writes an enhanced description.

    The reply is plain description text rather than JSON.
    """
    lines = [
        f"Item Name: {item.name}",
        f"Original Description: {item.description}",
        f"Price: {_format_price(item.price)}",
    ]
    if item.category:
        lines.insert(1, f"Category: {item.category}")
    if item.ingredients:
        lines.append(f"Ingredients: {', '.join(item.ingredients)}")
    if item.dietary_tags:
        lines.append(f"Dietary Information: {', '.join(item.dietary_tags)}")

    sections = [
        "Enhance the description of this menu item so it is more appealing "
        "to customers.",
        "\n".join(lines),
    ]
    if item.taste_profile:
        top_attributes = sorted(
            item.taste_profile.items(), key=lambda kv: (-kv[1], kv[0])
        )[:MAX_TASTE_ATTRIBUTES]
        sections.append(
            _section(
                "Taste Profile",
                [f"- {name}: {score:.2f}" for name, score in top_attributes],
            )
        )
    if target_audience:
        sections.append(
            f"Target Audience: {target_audience}\n"
            "Tailor the description to this audience."
        )
    if style:
        sections.append(f"Desired Style: {style}")
    sections.append(
        "Reply with ONLY the enhanced description, two or three sentences, "
        "without any commentary."
    )
    return RenderedPrompt(
        prompt=_join_sections(sections), system_prompt=ENHANCEMENT_SYSTEM_PROMPT
    )
