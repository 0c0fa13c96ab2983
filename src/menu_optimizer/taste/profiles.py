"""Comparison and plain-language summaries of stored taste profiles.

Profiles are the attribute maps kept on ``MenuItem.taste_profile``. Values
are expected in [0, 1]; an attribute one item lacks counts as 0.
"""

import math

from pydantic import BaseModel, Field

from ..errors import DomainValidationError
from ..shared.models import MenuItem

SIGNIFICANT_DIFFERENCE = 0.3
SLIGHT_DIFFERENCE = 0.1
KEY_DIFFERENCE_COUNT = 3
KEY_ATTRIBUTE_COUNT = 5
DEFAULT_PRIMARY_APPEAL = "General appeal"

# (lower bound, word), checked in order
INTENSITY_LEVELS: list[tuple[float, str]] = [
    (0.8, "dominant"),
    (0.6, "strong"),
    (0.4, "moderate"),
    (0.2, "subtle"),
]


class AttributeComparison(BaseModel):
    attribute: str
    item1_value: float
    item2_value: float
    difference: float


class TasteProfileComparison(BaseModel):
    """Side-by-side view of two items' taste profiles."""

    item1_id: str
    item1_name: str
    item2_id: str
    item2_name: str
    similarity_score: float
    attribute_comparison: list[AttributeComparison] = Field(default_factory=list)
    key_differences: list[str] = Field(default_factory=list)
    complementary_score: float


class TasteAttribute(BaseModel):
    attribute: str
    value: float


class TasteProfileSummary(BaseModel):
    """Readable description of one item's taste profile."""

    item_id: str
    name: str
    short_summary: str
    detailed_summary: str
    key_attributes: list[TasteAttribute] = Field(default_factory=list)
    primary_appeal: str = DEFAULT_PRIMARY_APPEAL


def _require_profile(item: MenuItem) -> dict[str, float]:
    if item.taste_profile is None:
        raise DomainValidationError(
            f"Menu item {item.item_id} does not have a taste profile"
        )
    return item.taste_profile


def _ranked(profile: dict[str, float]) -> list[tuple[str, float]]:
    return sorted(profile.items(), key=lambda entry: entry[1], reverse=True)


def cosine_similarity(
    profile1: dict[str, float], profile2: dict[str, float]
) -> float:
    """Cosine similarity over the union of attributes; 0 for empty vectors."""
    attributes = set(profile1) | set(profile2)
    if not attributes:
        return 0.0
    dot = sum(profile1.get(a, 0.0) * profile2.get(a, 0.0) for a in attributes)
    magnitude1 = math.sqrt(sum(v * v for v in profile1.values()))
    magnitude2 = math.sqrt(sum(v * v for v in profile2.values()))
    if magnitude1 == 0 or magnitude2 == 0:
        return 0.0
    return dot / (magnitude1 * magnitude2)


def complementary_score(
    profile1: dict[str, float], profile2: dict[str, float]
) -> float:
    """Mean absolute difference over the union of attributes.

    Higher means the two items contrast more.
    """
    attributes = set(profile1) | set(profile2)
    if not attributes:
        return 0.0
    total = sum(abs(profile1.get(a, 0.0) - profile2.get(a, 0.0)) for a in attributes)
    return total / len(attributes)


def describe_difference(name1: str, name2: str, comparison: AttributeComparison) -> str:
    attribute = comparison.attribute
    difference = comparison.difference
    if difference > SIGNIFICANT_DIFFERENCE:
        return f"{name1} is significantly more {attribute} than {name2}"
    if difference < -SIGNIFICANT_DIFFERENCE:
        return f"{name2} is significantly more {attribute} than {name1}"
    if difference > SLIGHT_DIFFERENCE:
        return f"{name1} is slightly more {attribute} than {name2}"
    if difference < -SLIGHT_DIFFERENCE:
        return f"{name2} is slightly more {attribute} than {name1}"
    return f"{name1} and {name2} have similar {attribute} levels"


def intensity_description(value: float) -> str:
    """Word for how strongly an attribute shows, from "hint of" to "dominant"."""
    for lower_bound, word in INTENSITY_LEVELS:
        if value >= lower_bound:
            return word
    return "hint of"


def compare_taste_profiles(item1: MenuItem, item2: MenuItem) -> TasteProfileComparison:
    """Compare the taste profiles of two menu items.

    Attributes are listed in sorted order. Key differences describe the three
    attributes with the largest absolute difference.

    Raises:
        DomainValidationError: If either item has no taste profile.

    """
    profile1 = _require_profile(item1)
    profile2 = _require_profile(item2)

    comparisons = [
        AttributeComparison(
            attribute=attribute,
            item1_value=profile1.get(attribute, 0.0),
            item2_value=profile2.get(attribute, 0.0),
            difference=profile1.get(attribute, 0.0) - profile2.get(attribute, 0.0),
        )
        for attribute in sorted(set(profile1) | set(profile2))
    ]
    largest = sorted(comparisons, key=lambda c: abs(c.difference), reverse=True)

    return TasteProfileComparison(
        item1_id=item1.item_id,
        item1_name=item1.name,
        item2_id=item2.item_id,
        item2_name=item2.name,
        similarity_score=cosine_similarity(profile1, profile2),
        attribute_comparison=comparisons,
        key_differences=[
            describe_difference(item1.name, item2.name, c)
            for c in largest[:KEY_DIFFERENCE_COUNT]
        ],
        complementary_score=complementary_score(profile1, profile2),
    )


def _short_summary(name: str, ranked: list[tuple[str, float]]) -> str:
    if not ranked:
        return f"{name} has a balanced taste profile."
    if len(ranked) == 1:
        return f"{name} has a predominantly {ranked[0][0]} flavor profile."
    return f"{name} combines {ranked[0][0]} and {ranked[1][0]} flavors."


def _detailed_summary(name: str, ranked: list[tuple[str, float]]) -> str:
    descriptions = [
        f"{intensity_description(value)} {attribute}" for attribute, value in ranked[:3]
    ]
    if not descriptions:
        body = "a balanced flavor profile"
    elif len(descriptions) == 1:
        body = f"a {descriptions[0]} profile"
    elif len(descriptions) == 2:
        body = f"{descriptions[0]} and {descriptions[1]} notes"
    else:
        first, second, third = descriptions
        body = f"{first}, {second}, and {third} characteristics"
    return f"{name} features {body}."


def summarize_taste_profile(item: MenuItem) -> TasteProfileSummary:
    """Describe an item's taste profile in one short and one longer sentence.

    Raises:
        DomainValidationError: If the item has no taste profile.

    """
    ranked = _ranked(_require_profile(item))
    return TasteProfileSummary(
        item_id=item.item_id,
        name=item.name,
        short_summary=_short_summary(item.name, ranked),
        detailed_summary=_detailed_summary(item.name, ranked),
        key_attributes=[
            TasteAttribute(attribute=attribute, value=value)
            for attribute, value in ranked[:KEY_ATTRIBUTE_COUNT]
        ],
    )
