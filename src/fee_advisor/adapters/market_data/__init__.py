from __future__ import annotations

from .base import BaseMarketDataProvider, ProviderError
from .coingecko import CoinGeckoProvider
from .static import StaticMarketDataProvider

PROVIDER_REGISTRY: dict[str, type[BaseMarketDataProvider]] = {
    "static": StaticMarketDataProvider,
    "coingecko": CoinGeckoProvider,
}


def get_provider_class(provider_name: str) -> type[BaseMarketDataProvider]:
    """Get provider class by name.

    Args:
        provider_name: Name of the provider (case-insensitive)

    Returns:
        Provider class

    Raises:
        ValueError: If provider_name is not recognized
    """
    provider_name_normalized = provider_name.lower()
    if provider_name_normalized not in PROVIDER_REGISTRY:
        raise ValueError(
            f"Unknown provider '{provider_name}'. "
            f"Available: {', '.join(PROVIDER_REGISTRY.keys())}"
        )
    return PROVIDER_REGISTRY[provider_name_normalized]


__all__ = [
    "PROVIDER_REGISTRY",
    "BaseMarketDataProvider",
    "CoinGeckoProvider",
    "ProviderError",
    "StaticMarketDataProvider",
    "get_provider_class",
]
