from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from ...domain import Asset
from ...settings import AdvisorSettings


class BaseEligibilityFilter(ABC):
    """Decides which tokens the fee sponsorship layer accepts."""

    def __init__(self, config: AdvisorSettings):
        """Initialize the filter with configuration."""
        self.config = config

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this filter."""
        pass

    @abstractmethod
    async def supported_addresses(self) -> set[str]:
        """Return the lowercase addresses currently accepted for fee payment."""
        pass

    async def is_supported(self, address: str) -> bool:
        return address.lower() in await self.supported_addresses()

    async def filter_supported(self, assets: Sequence[Asset]) -> list[Asset]:
        """Keep the supported assets, preserving their order."""
        supported = await self.supported_addresses()
        return [asset for asset in assets if asset.address.lower() in supported]
