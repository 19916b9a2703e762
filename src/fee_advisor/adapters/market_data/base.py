from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...domain import SlippageEstimate
from ...settings import AdvisorSettings


class ProviderError(Exception):
    """Raised when a market data provider cannot serve a request."""


class BaseMarketDataProvider(ABC):
    """Abstract base class for market data providers.

    Every fetch method receives lowercase token addresses and returns a mapping
    keyed by the same addresses. Addresses the provider knows nothing about are
    left out of the mapping. Providers may raise; callers decide how to degrade.
    """

    def __init__(self, config: AdvisorSettings):
        """Initialize the provider with configuration."""
        self.config = config

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider."""
        ...

    @abstractmethod
    async def fetch_prices(self, addresses: list[str]) -> dict[str, Decimal]:
        """Fetch USD unit prices for the given addresses."""
        ...

    @abstractmethod
    async def fetch_volatility(self, addresses: list[str]) -> dict[str, Decimal]:
        """Fetch 24h volatility percentages for the given addresses."""
        ...

    @abstractmethod
    async def fetch_slippage(
        self, addresses: list[str]
    ) -> dict[str, SlippageEstimate]:
        """Estimate swap slippage percentages for the given addresses."""
        ...
