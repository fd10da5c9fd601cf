"""Recommendation catalog and selection engine."""
from screening.recommendations.catalog import RecommendationCatalog
from screening.recommendations.engine import (
    RecommendationEngine,
    filter_by_priority,
    lifestyle_only,
    medical_only,
    merge,
)

__all__ = [
    "RecommendationCatalog",
    "RecommendationEngine",
    "filter_by_priority",
    "lifestyle_only",
    "medical_only",
    "merge",
]
