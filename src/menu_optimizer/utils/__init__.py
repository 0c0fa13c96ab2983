"""Logging and data loading helpers."""

from .color_formatter import ColoredFormatter, setup_logging
from .yaml_loader import RestaurantBundle, load_restaurant_bundles, populate_database

__all__ = [
    "ColoredFormatter",
    "RestaurantBundle",
    "load_restaurant_bundles",
    "populate_database",
    "setup_logging",
]
