from __future__ import annotations

from .market_data import MarketDataCache
from .ttl_cache import TTLCache

__all__ = ["MarketDataCache", "TTLCache"]
