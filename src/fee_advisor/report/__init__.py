from __future__ import annotations

from .formatter import (
    format_recommendation_table,
    recommendation_to_dict,
    recommendation_to_json,
)

__all__ = [
    "format_recommendation_table",
    "recommendation_to_dict",
    "recommendation_to_json",
]
