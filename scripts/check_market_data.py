#!/usr/bin/env python3
"""Standalone script printing the market data the advisor would score with."""

from __future__ import annotations

import asyncio
import sys
from argparse import ArgumentParser

from fee_advisor.cache import MarketDataCache
from fee_advisor.constants import MAINNET_TOKENS
from fee_advisor.adapters.market_data import get_provider_class
from fee_advisor.logger import get_logger, setup_logging
from fee_advisor.settings import AdvisorSettings, ProviderKind

setup_logging()
logger = get_logger(__name__)


async def check_market_data(provider_name: str, addresses: list[str]) -> int:
    """Fetch market data twice and report how many entries came from cache.

    Args:
        provider_name: Registered provider to query
        addresses: Token addresses to look up
    """
    settings = AdvisorSettings(provider=ProviderKind(provider_name))
    provider = get_provider_class(provider_name)(settings)
    cache = MarketDataCache.from_settings(settings, provider)

    snapshots = await cache.get_market_data(addresses)
    if not snapshots:
        logger.error("No market data returned by %s", provider_name)
        return 1

    for address, snapshot in snapshots.items():
        logger.info(
            "%s price=%s volatility=%s slippage=%s fee=%s",
            address,
            snapshot.price,
            snapshot.volatility_24h,
            snapshot.slippage,
            snapshot.estimated_fee,
        )

    missing = [a for a in addresses if a.lower() not in snapshots]
    if missing:
        logger.warning("No data for: %s", ", ".join(missing))

    await cache.get_market_data(addresses)
    logger.info(
        "Second lookup served from cache: %d/%d prices fresh",
        sum(1 for a in addresses if cache.prices.is_fresh(a.lower())),
        len(addresses),
    )
    return 0


def main() -> int:
    parser = ArgumentParser(description=__doc__)
    parser.add_argument(
        "--provider",
        choices=[kind.value for kind in ProviderKind],
        default=ProviderKind.STATIC.value,
    )
    parser.add_argument(
        "addresses",
        nargs="*",
        help="Token addresses (defaults to the known mainnet tokens)",
    )
    args = parser.parse_args()
    addresses = args.addresses or list(MAINNET_TOKENS.values())
    return asyncio.run(check_market_data(args.provider, addresses))


if __name__ == "__main__":
    sys.exit(main())
