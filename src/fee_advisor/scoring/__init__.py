from __future__ import annotations

from .engine import (
    DEFAULT_CONFIG,
    NO_PRICE_REASON,
    ZERO_BALANCE_REASON,
    ScoringConfig,
    build_reasons,
    normalize_balance,
    recommend,
    score_asset,
    score_assets,
    slippage_score,
    volatility_score,
)

__all__ = [
    "DEFAULT_CONFIG",
    "NO_PRICE_REASON",
    "ZERO_BALANCE_REASON",
    "ScoringConfig",
    "build_reasons",
    "normalize_balance",
    "recommend",
    "score_asset",
    "score_assets",
    "slippage_score",
    "volatility_score",
]
