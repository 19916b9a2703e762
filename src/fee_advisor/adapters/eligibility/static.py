from __future__ import annotations

from ...settings import AdvisorSettings
from .base import BaseEligibilityFilter


class StaticEligibilityFilter(BaseEligibilityFilter):
    """Accepts the tokens listed in ``supported_tokens``."""

    def __init__(self, config: AdvisorSettings):
        super().__init__(config)
        self._supported = {address.lower() for address in config.supported_tokens}

    @property
    def name(self) -> str:
        return "static"

    async def supported_addresses(self) -> set[str]:
        return set(self._supported)
