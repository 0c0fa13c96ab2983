"""Optimization, suggestion and review workflows."""

from .options import get_optimization_options
from .pipeline import OptimizationPipeline
from .review import ReviewService

__all__ = ["OptimizationPipeline", "ReviewService", "get_optimization_options"]
