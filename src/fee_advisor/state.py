"""Application state container."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .adapters.eligibility import BaseEligibilityFilter, get_eligibility_class
from .adapters.market_data import BaseMarketDataProvider, get_provider_class
from .cache import MarketDataCache
from .scoring import ScoringConfig
from .settings import AdvisorSettings


@dataclass
class AppState:
    """Container for application-wide state and dependencies.

    Built once per process and passed through the pipeline so the market data
    cache is shared by reference instead of living in a module global.
    """

    settings: AdvisorSettings
    logger: logging.Logger
    provider: BaseMarketDataProvider
    cache: MarketDataCache
    eligibility: BaseEligibilityFilter
    scoring: ScoringConfig


def build_state(
    settings: AdvisorSettings, logger: logging.Logger | None = None
) -> AppState:
    """Wire collaborators selected by ``settings`` into an ``AppState``."""
    provider = get_provider_class(settings.provider.value)(settings)
    eligibility = get_eligibility_class(settings.eligibility.value)(settings)
    return AppState(
        settings=settings,
        logger=logger or logging.getLogger("fee_advisor"),
        provider=provider,
        cache=MarketDataCache.from_settings(settings, provider),
        eligibility=eligibility,
        scoring=ScoringConfig.from_settings(settings),
    )
