"""Client for the taste and peer-restaurant signal API."""

from .client import TasteApiClient, build_similar_restaurant_data, merge_specialty_dishes
from .profiles import compare_taste_profiles, summarize_taste_profile
from .scheduler import RequestScheduler

__all__ = [
    "RequestScheduler",
    "TasteApiClient",
    "build_similar_restaurant_data",
    "compare_taste_profiles",
    "merge_specialty_dishes",
    "summarize_taste_profile",
]
