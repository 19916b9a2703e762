from __future__ import annotations

from .context import RecommendationContext
from .run import NoSupportedAssetsError, get_recommendation, run_recommendation

__all__ = [
    "NoSupportedAssetsError",
    "RecommendationContext",
    "get_recommendation",
    "run_recommendation",
]
