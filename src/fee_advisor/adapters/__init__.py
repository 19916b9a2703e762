from __future__ import annotations

from .eligibility import ELIGIBILITY_REGISTRY
from .market_data import PROVIDER_REGISTRY

__all__ = ["ELIGIBILITY_REGISTRY", "PROVIDER_REGISTRY"]
