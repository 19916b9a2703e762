"""Gas-fee token advisor."""

from __future__ import annotations

from .domain import Asset, MarketSnapshot, Recommendation, ScoredAsset
from .scoring import recommend

__all__ = ["Asset", "MarketSnapshot", "Recommendation", "ScoredAsset", "recommend"]
