from __future__ import annotations

from dataclasses import dataclass, field

from ..domain import Asset, MarketSnapshot, Recommendation
from ..state import AppState


@dataclass
class RecommendationContext:
    state: AppState
    assets: list[Asset]
    supported: list[Asset] | None = None
    market_data: dict[str, MarketSnapshot] | None = None
    recommendation: Recommendation | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def supported_required(self) -> list[Asset]:
        if self.supported is None:
            raise RuntimeError(
                "Supported assets have not been set. Ensure filter_assets() is called before accessing this property."
            )
        return self.supported

    @property
    def market_data_required(self) -> dict[str, MarketSnapshot]:
        if self.market_data is None:
            raise RuntimeError(
                "Market data has not been set. Ensure load_market_data() is called before accessing this property."
            )
        return self.market_data
