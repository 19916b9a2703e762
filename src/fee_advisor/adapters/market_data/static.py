from __future__ import annotations

import logging
import random
from decimal import Decimal

from ...constants import (
    ESTIMATED_FEE_RATIO,
    REFERENCE_PRICES,
    REFERENCE_SLIPPAGE,
    REFERENCE_VOLATILITY,
)
from ...domain import SlippageEstimate
from ...settings import AdvisorSettings
from .base import BaseMarketDataProvider

logger = logging.getLogger(__name__)


def estimate_slippage(slippage: Decimal) -> SlippageEstimate:
    """Pair a slippage percentage with its derived fee estimate."""
    return SlippageEstimate(
        slippage=slippage,
        estimated_fee=slippage * Decimal(ESTIMATED_FEE_RATIO),
    )


class StaticMarketDataProvider(BaseMarketDataProvider):
    """Provider backed by reference tables for well-known mainnet tokens.

    Tokens missing from the tables get pseudo-random values drawn from
    ``random.Random(static_seed)``. Set ``static_seed`` for reproducible runs.
    """

    PRICE_RANGE = (0.1, 10.1)
    VOLATILITY_RANGE = (1.0, 15.0)
    SLIPPAGE_RANGE = (0.5, 5.0)

    def __init__(self, config: AdvisorSettings):
        super().__init__(config)
        self._rng = random.Random(config.static_seed)

    @property
    def provider_name(self) -> str:
        return "static"

    def _random_value(self, bounds: tuple[float, float]) -> Decimal:
        low, high = bounds
        return Decimal(str(round(self._rng.uniform(low, high), 4)))

    def _lookup(
        self,
        addresses: list[str],
        table: dict[str, str],
        bounds: tuple[float, float],
        kind: str,
    ) -> dict[str, Decimal]:
        result: dict[str, Decimal] = {}
        for address in addresses:
            known = table.get(address)
            if known is not None:
                result[address] = Decimal(known)
            else:
                result[address] = self._random_value(bounds)
                logger.debug(
                    "No reference %s for %s, generated %s", kind, address, result[address]
                )
        return result

    async def fetch_prices(self, addresses: list[str]) -> dict[str, Decimal]:
        return self._lookup(addresses, REFERENCE_PRICES, self.PRICE_RANGE, "price")

    async def fetch_volatility(self, addresses: list[str]) -> dict[str, Decimal]:
        return self._lookup(
            addresses, REFERENCE_VOLATILITY, self.VOLATILITY_RANGE, "volatility"
        )

    async def fetch_slippage(
        self, addresses: list[str]
    ) -> dict[str, SlippageEstimate]:
        values = self._lookup(
            addresses, REFERENCE_SLIPPAGE, self.SLIPPAGE_RANGE, "slippage"
        )
        return {address: estimate_slippage(value) for address, value in values.items()}
