"""Extraction and validation of JSON embedded in free-form model replies.

Nothing in this module raises on bad model output: unusable replies come back
as an empty result and the caller decides whether that is an error.
"""

import json
import logging
import math
from typing import Any, Literal

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

UNNAMED_DISH = "Unnamed Dish"
DEFAULT_DESCRIPTION = "Delicious dish"
DEFAULT_CATEGORY = "entree"

_decoder = json.JSONDecoder()


def extract_json(
    text: str, shape: Literal["object", "array", "any"] = "any"
) -> dict[str, Any] | list[Any] | None:
    """Return the first well-formed JSON value of the wanted shape in ``text``.

    Each ``{`` (or ``[``) is tried in turn as the start of a JSON value and
    decoded incrementally, so braces inside string values and prose around
    the value do not break extraction. Returns None when nothing decodes.
    """
    match shape:
        case "object":
            openers = "{"
        case "array":
            openers = "["
        case _:
            openers = "{["

    for index, char in enumerate(text):
        if char not in openers:
            continue
        try:
            value, _ = _decoder.raw_decode(text, index)
        except json.JSONDecodeError:
            continue
        return value
    return None


def coerce_price(value: Any) -> float | None:
    """Coerce a price to a finite, non-negative float, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().lstrip("$").replace(",", "")
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price) or price < 0:
        return None
    return price


def coerce_string_list(value: Any) -> list[str]:
    """Coerce a value to a list of non-empty strings; non-lists become []."""
    if not isinstance(value, list):
        return []
    items = (str(v).strip() for v in value if isinstance(v, str | int | float))
    return [item for item in items if item]


def _coerce_string(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _optional_string(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class ParsedOptimization(BaseModel):
    """Fields recovered from an optimization reply."""

    optimized_name: str | None = None
    optimized_description: str | None = None
    reason: str | None = None

    @property
    def is_empty(self) -> bool:
        """Whether no usable field was recovered."""
        return not (self.optimized_name or self.optimized_description or self.reason)


class ParsedSuggestion(BaseModel):
    """One validated dish suggestion."""

    name: str = UNNAMED_DISH
    description: str = DEFAULT_DESCRIPTION
    estimated_price: float = Field(ge=0)
    category: str = DEFAULT_CATEGORY
    ingredients: list[str] = Field(default_factory=list)
    dietary_tags: list[str] = Field(default_factory=list)
    based_on_dish: str | None = None


def parse_optimization_response(text: str) -> ParsedOptimization:
    """Parse an optimization reply; an empty result means nothing was usable."""
    data = extract_json(text, "object")
    if not isinstance(data, dict):
        logger.warning("No JSON object found in optimization response")
        return ParsedOptimization()

    return ParsedOptimization(
        optimized_name=_optional_string(data.get("optimizedName")),
        optimized_description=_optional_string(data.get("optimizedDescription")),
        reason=_optional_string(data.get("reason")),
    )


def parse_suggestion(record: Any) -> ParsedSuggestion | None:
    """Validate one suggestion record. Returns None if it must be dropped."""
    if not isinstance(record, dict):
        return None
    price = coerce_price(record.get("estimatedPrice"))
    if price is None:
        logger.warning(
            f"Dropping suggestion with invalid price: {record.get('estimatedPrice')!r}"
        )
        return None

    return ParsedSuggestion(
        name=_coerce_string(record.get("name"), UNNAMED_DISH),
        description=_coerce_string(record.get("description"), DEFAULT_DESCRIPTION),
        estimated_price=price,
        category=_coerce_string(record.get("category"), DEFAULT_CATEGORY),
        ingredients=coerce_string_list(record.get("ingredients")),
        dietary_tags=coerce_string_list(record.get("dietaryTags")),
        based_on_dish=_optional_string(record.get("basedOnDish")),
    )


def parse_suggestions_response(text: str) -> list[ParsedSuggestion]:
    """Parse a suggestion reply into validated records.

    Accepts ``{"suggestions": [...]}`` or a bare array. An empty list means
    no JSON was found, it was malformed, or every record was dropped.
    """
    data = extract_json(text)
    if isinstance(data, dict):
        records = data.get("suggestions")
    else:
        records = data

    if not isinstance(records, list):
        logger.warning("No suggestions array found in model response")
        return []

    suggestions: list[ParsedSuggestion] = []
    for record in records:
        suggestion = parse_suggestion(record)
        if suggestion is not None:
            suggestions.append(suggestion)
    return suggestions


def parse_enhanced_description(text: str) -> str | None:
    """Clean a plain-text description reply. Returns None when blank."""
    cleaned = text.strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
        cleaned = cleaned[1:-1].strip()
    return cleaned or None
