"""Ranks candidate tokens by how well they suit paying gas fees.

Every function here is pure: the same assets and market data always produce
the same scores and ordering.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from ..domain import Asset, MarketSnapshot, Recommendation, ScoredAsset
from ..settings import AdvisorSettings, ScoringWeights

ZERO_BALANCE_REASON = "Zero balance"
NO_PRICE_REASON = "No price data available"

HIGH_BALANCE_USD = Decimal(100)
MODERATE_BALANCE_USD = Decimal(20)
VERY_STABLE_VOLATILITY = Decimal(1)
STABLE_VOLATILITY = Decimal(5)
HIGH_VOLATILITY = Decimal(20)
MINIMAL_SLIPPAGE = Decimal("0.5")
HIGH_SLIPPAGE = Decimal(3)

LOW_BALANCE_CEILING = 0.3
CENT = Decimal("0.01")


@dataclass(frozen=True)
class ScoringConfig:
    """Constants driving the composite score."""

    weights: ScoringWeights = field(default_factory=ScoringWeights)
    min_balance_usd: float = 5.0
    log_divisor: float = 5.0
    default_volatility: Decimal = Decimal(100)
    default_slippage: Decimal = Decimal(10)

    def __post_init__(self) -> None:
        if self.min_balance_usd <= 0:
            raise ValueError(
                f"min_balance_usd must be positive, got {self.min_balance_usd}"
            )
        if self.log_divisor <= 0:
            raise ValueError(f"log_divisor must be positive, got {self.log_divisor}")

    @classmethod
    def from_settings(cls, settings: AdvisorSettings) -> ScoringConfig:
        return cls(
            weights=settings.weights,
            min_balance_usd=settings.min_balance_usd,
            log_divisor=settings.log_divisor,
        )


DEFAULT_CONFIG = ScoringConfig()


def normalize_balance(
    usd_balance: Decimal, config: ScoringConfig = DEFAULT_CONFIG
) -> float:
    """Map a USD balance onto [0, 1].

    Below ``min_balance_usd`` the score grows linearly up to 0.3. From the
    threshold on it follows ``ln(usd) / log_divisor`` capped at 1, so $100
    scores about 0.92 and anything above ~$148 scores 1.
    """
    usd = float(usd_balance)
    if usd <= 0:
        return 0.0
    if usd < config.min_balance_usd:
        return LOW_BALANCE_CEILING * (usd / config.min_balance_usd)
    return min(1.0, math.log(usd) / config.log_divisor)


def volatility_score(
    volatility: Decimal | None, config: ScoringConfig = DEFAULT_CONFIG
) -> float:
    """``1 - volatility / 100``. Not clamped: above 100% the score is negative."""
    if volatility is None:
        volatility = config.default_volatility
    return 1 - float(volatility) / 100


def slippage_score(
    slippage: Decimal | None, config: ScoringConfig = DEFAULT_CONFIG
) -> float:
    """``1 - slippage / 10``. Not clamped: above 10% the score is negative."""
    if slippage is None:
        slippage = config.default_slippage
    return 1 - float(slippage) / 10


def _two_places(value: Decimal) -> str:
    return str(value.quantize(CENT, rounding=ROUND_HALF_UP))


def build_reasons(
    usd_balance: Decimal, volatility: Decimal, slippage: Decimal
) -> tuple[str, ...]:
    """Human readable justification, ordered balance, volatility, slippage."""
    reasons: list[str] = []
    usd = _two_places(usd_balance)
    vol = _two_places(volatility)
    slip = _two_places(slippage)

    if usd_balance >= HIGH_BALANCE_USD:
        reasons.append(f"High balance (${usd}) provides flexibility")
    elif usd_balance >= MODERATE_BALANCE_USD:
        reasons.append(f"Moderate balance (${usd}) is sufficient")
    else:
        reasons.append(f"Low balance (${usd}) may limit options")

    if volatility < VERY_STABLE_VOLATILITY:
        reasons.append(f"Very stable price ({vol}% 24h change)")
    elif volatility < STABLE_VOLATILITY:
        reasons.append(f"Stable price ({vol}% 24h change)")
    elif volatility > HIGH_VOLATILITY:
        reasons.append(f"High price volatility ({vol}% 24h change)")

    if slippage < MINIMAL_SLIPPAGE:
        reasons.append(f"Minimal slippage ({slip}%)")
    elif slippage > HIGH_SLIPPAGE:
        reasons.append(f"High slippage ({slip}%)")

    return tuple(reasons)


def score_asset(
    asset: Asset,
    snapshot: MarketSnapshot | None,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> ScoredAsset:
    """Score a single asset. A missing snapshot is treated as no price data.

    Zero balance wins over missing price: an asset holding nothing reports
    "Zero balance" even when it is also unpriced.
    """
    snapshot = snapshot or MarketSnapshot()
    price = snapshot.price if snapshot.price is not None else Decimal(0)
    usd_balance = asset.balance * price

    # A positive balance with no price must report the missing price, so the
    # balance check looks at the token amount rather than its USD value.
    if asset.balance <= 0:
        return ScoredAsset(
            asset=asset,
            snapshot=snapshot,
            usd_balance=usd_balance,
            score=0.0,
            reasons=(ZERO_BALANCE_REASON,),
        )
    if price <= 0:
        return ScoredAsset(
            asset=asset,
            snapshot=snapshot,
            usd_balance=usd_balance,
            score=0.0,
            reasons=(NO_PRICE_REASON,),
        )

    volatility = (
        snapshot.volatility_24h
        if snapshot.volatility_24h is not None
        else config.default_volatility
    )
    slippage = (
        snapshot.slippage if snapshot.slippage is not None else config.default_slippage
    )

    balance_sub = normalize_balance(usd_balance, config)
    volatility_sub = volatility_score(volatility, config)
    slippage_sub = slippage_score(slippage, config)
    weights = config.weights
    score = math.fsum(
        (
            weights.balance * balance_sub,
            weights.volatility * volatility_sub,
            weights.slippage * slippage_sub,
        )
    )

    return ScoredAsset(
        asset=asset,
        snapshot=snapshot,
        usd_balance=usd_balance,
        score=score,
        reasons=build_reasons(usd_balance, volatility, slippage),
        balance_score=balance_sub,
        volatility_score=volatility_sub,
        slippage_score=slippage_sub,
    )


def score_assets(
    assets: Sequence[Asset],
    market_data: Mapping[str, MarketSnapshot],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> list[ScoredAsset]:
    """Score every asset and sort by descending score.

    The sort is stable, so equal scores keep their input order.
    """
    scored = [
        score_asset(asset, market_data.get(asset.address), config) for asset in assets
    ]
    return sorted(scored, key=lambda item: item.score, reverse=True)


def recommend(
    assets: Sequence[Asset],
    market_data: Mapping[str, MarketSnapshot],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> Recommendation | None:
    """Pick the best asset for paying gas, or ``None`` when there are no assets.

    Callers pass assets that already passed eligibility filtering.
    """
    if not assets:
        return None
    ranked = score_assets(assets, market_data, config)
    return Recommendation(recommended=ranked[0], ranked=tuple(ranked))
