"""Time-bounded cache in front of a market data provider."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from decimal import Decimal

from ..adapters.market_data.base import BaseMarketDataProvider
from ..domain import MarketSnapshot, SlippageEstimate
from ..settings import AdvisorSettings
from .ttl_cache import Clock, TTLCache

logger = logging.getLogger(__name__)

Fetcher = Callable[[list[str]], Awaitable[dict[str, Decimal]]]


class MarketDataCache:
    """Serves price, volatility and slippage for batches of token addresses.

    Price and volatility are cached separately, each with its own TTL. Only
    addresses whose entry is missing or expired are sent to the provider, in a
    single call per data kind. When the provider fails, the last value ever
    stored for an address is served whatever its age; addresses with no stored
    value are left out of the result.

    Slippage is requested from the provider on every call and is not cached.

    Concurrent calls needing the same fetch share one in-flight request.
    """

    def __init__(
        self,
        provider: BaseMarketDataProvider,
        price_ttl: float,
        volatility_ttl: float,
        clock: Clock | None = None,
    ):
        self.provider = provider
        self.prices: TTLCache[Decimal] = TTLCache(price_ttl, clock)
        self.volatility: TTLCache[Decimal] = TTLCache(volatility_ttl, clock)
        self._inflight: dict[tuple[str, frozenset[str]], asyncio.Task[None]] = {}

    @classmethod
    def from_settings(
        cls,
        settings: AdvisorSettings,
        provider: BaseMarketDataProvider,
        clock: Clock | None = None,
    ) -> MarketDataCache:
        return cls(
            provider,
            price_ttl=settings.price_cache_ttl,
            volatility_ttl=settings.volatility_cache_ttl,
            clock=clock,
        )

    async def get_market_data(
        self, addresses: Iterable[str]
    ) -> dict[str, MarketSnapshot]:
        """Return a snapshot for every address with at least one known signal.

        Never raises because of provider errors; a missing address means no
        data is available for it.
        """
        requested = list(dict.fromkeys(address.lower() for address in addresses))
        if not requested:
            return {}

        prices, volatility, slippage = await asyncio.gather(
            self._resolve("price", self.prices, self.provider.fetch_prices, requested),
            self._resolve(
                "volatility",
                self.volatility,
                self.provider.fetch_volatility,
                requested,
            ),
            self._fetch_slippage(requested),
        )

        result: dict[str, MarketSnapshot] = {}
        for address in requested:
            price = prices.get(address)
            vol = volatility.get(address)
            slip = slippage.get(address)
            if price is None and vol is None and slip is None:
                continue
            result[address] = MarketSnapshot(
                price=price,
                volatility_24h=vol,
                slippage=None if slip is None else slip.slippage,
                estimated_fee=None if slip is None else slip.estimated_fee,
            )
        return result

    async def _resolve(
        self,
        kind: str,
        store: TTLCache[Decimal],
        fetch: Fetcher,
        addresses: list[str],
    ) -> dict[str, Decimal]:
        fresh, needs_fetch = store.partition(addresses)
        logger.debug(
            "%s cache: %d fresh, %d to fetch", kind, len(fresh), len(needs_fetch)
        )

        if needs_fetch:
            key = (kind, frozenset(needs_fetch))
            task = self._inflight.get(key)
            if task is None:
                task = asyncio.ensure_future(
                    self._fetch_into(kind, store, fetch, needs_fetch)
                )
                self._inflight[key] = task
                task.add_done_callback(lambda _t: self._inflight.pop(key, None))
            await asyncio.shield(task)

        values: dict[str, Decimal] = {}
        for address in addresses:
            value = store.get_any(address)
            if value is not None:
                values[address] = value
        return values

    async def _fetch_into(
        self,
        kind: str,
        store: TTLCache[Decimal],
        fetch: Fetcher,
        addresses: list[str],
    ) -> None:
        try:
            fetched = await fetch(addresses)
        except Exception as e:
            stale = sum(1 for address in addresses if address in store)
            logger.warning(
                "Failed to fetch %s data from %s for %d tokens, serving %d cached: %s",
                kind,
                self.provider.provider_name,
                len(addresses),
                stale,
                e,
            )
            return

        requested = set(addresses)
        store.set_many(
            {
                address.lower(): value
                for address, value in fetched.items()
                if address.lower() in requested
            }
        )
        missing = requested - {address.lower() for address in fetched}
        if missing:
            logger.debug(
                "Provider %s returned no %s for %d tokens",
                self.provider.provider_name,
                kind,
                len(missing),
            )

    async def _fetch_slippage(
        self, addresses: list[str]
    ) -> dict[str, SlippageEstimate]:
        try:
            estimates = await self.provider.fetch_slippage(addresses)
        except Exception as e:
            logger.warning(
                "Failed to fetch slippage from %s: %s", self.provider.provider_name, e
            )
            return {}
        return {address.lower(): estimate for address, estimate in estimates.items()}
