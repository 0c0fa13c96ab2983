"""Ranking and rendering of demographic and peer-dish signals for prompts."""

from ..shared.models import DemographicsData, SelectedDemographics, SpecialtyDish

DEFAULT_MAX_PREFERENCES = 5


def _format_percentage(value: float) -> str:
    return f"{value:g}%"


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


def build_demographic_insights(
    demographics: DemographicsData,
    selected: SelectedDemographics | None = None,
    max_preferences: int = DEFAULT_MAX_PREFERENCES,
) -> list[str]:
    """Render demographic insight strings for a prompt.

    With no selection every age group, gender and interest is used. With a
    selection only matching buckets are used, and a selection that matches
    nothing yields an empty list (no demographic signal at all). The most
    frequent dining pattern is appended whenever any signal remains.

    Args:
        demographics: The restaurant's demographics snapshot
        selected: Segments chosen by the caller
        max_preferences: Preferences kept per bucket type, in first-seen order

    Returns:
        Insight lines, possibly empty

    """
    if selected is None or selected.is_empty():
        age_groups = demographics.age_groups
        genders = demographics.gender_data
        interests = demographics.interests
    else:
        age_groups = [
            group
            for group in demographics.age_groups
            if group.age_range in selected.selected_age_groups
        ]
        genders = [
            group
            for group in demographics.gender_data
            if group.gender in selected.selected_gender_groups
        ]
        interests = [
            interest
            for interest in selected.selected_interests
            if interest in demographics.interests
        ]
        if not (age_groups or genders or interests):
            return []

    insights: list[str] = []

    if age_groups:
        names = ", ".join(
            f"{group.age_range} ({_format_percentage(group.percentage)})"
            for group in age_groups
        )
        insights.append(f"Target age groups: {names}")
        preferences = _unique([p for group in age_groups for p in group.preferences])
        if preferences:
            insights.append(
                f"Age group preferences: {', '.join(preferences[:max_preferences])}"
            )

    if genders:
        names = ", ".join(
            f"{group.gender} ({_format_percentage(group.percentage)})"
            for group in genders
        )
        insights.append(f"Target genders: {names}")
        preferences = _unique([p for group in genders for p in group.preferences])
        if preferences:
            insights.append(
                f"Gender preferences: {', '.join(preferences[:max_preferences])}"
            )

    if interests:
        insights.append(f"Target interests: {', '.join(_unique(interests))}")

    if demographics.dining_patterns:
        # max() keeps the first of equally frequent patterns
        top_pattern = max(demographics.dining_patterns, key=lambda p: p.frequency)
        insights.append(
            f"Primary dining pattern: {top_pattern.pattern} "
            f"({_format_percentage(top_pattern.frequency)} frequency)"
        )
        if top_pattern.time_of_day:
            insights.append(
                f"Popular dining times: {', '.join(top_pattern.time_of_day)}"
            )

    return insights


def rank_specialty_dishes(dishes: list[SpecialtyDish]) -> list[SpecialtyDish]:
    """Sort dishes by popularity, then weight, then restaurant count, all descending.

    The sort is stable, so fully tied dishes keep their input order.
    """
    return sorted(
        dishes,
        key=lambda dish: (-dish.popularity, -dish.weight, -dish.restaurant_count),
    )


def prioritize_specialty_dishes(
    candidates: list[SpecialtyDish],
    max_dishes: int,
    selected: list[SpecialtyDish] | None = None,
) -> list[SpecialtyDish]:
    """Choose the peer dishes that go into a prompt.

    An explicit caller selection is returned verbatim, neither re-sorted nor
    truncated. Otherwise the candidates are ranked and cut to ``max_dishes``.
    """
    if selected:
        return list(selected)
    return rank_specialty_dishes(candidates)[: max(max_dishes, 0)]
