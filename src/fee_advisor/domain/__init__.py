"""Domain models for the fee advisor."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Generic, TypeVar

from web3 import Web3

T = TypeVar("T")


def to_decimal(value: Any) -> Decimal:
    """Convert a caller-supplied number to Decimal without float rounding.

    Floats are routed through ``str`` so ``0.1`` becomes ``Decimal("0.1")``.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value!r}")
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"Invalid numeric value: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value!r}")
    return result


def canonical_address(address: str) -> str:
    """Return the lowercase form of an EVM address.

    Raises:
        ValueError: If ``address`` is not a valid 20-byte hex address
    """
    if not isinstance(address, str) or not Web3.is_address(address):
        raise ValueError(f"Invalid token address: {address!r}")
    return address.lower()


@dataclass(frozen=True)
class Asset:
    """A fungible token balance that could pay for gas."""

    address: str
    balance: Decimal
    symbol: str = ""
    name: str = ""
    decimals: int = 18

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", canonical_address(self.address))
        balance = to_decimal(self.balance)
        if balance < 0:
            raise ValueError(
                f"Balance must be non-negative for {self.address}, got {balance}"
            )
        object.__setattr__(self, "balance", balance)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Asset:
        """Build an asset from a wallet payload entry."""
        if "address" not in data:
            raise ValueError(f"Token entry is missing 'address': {data}")
        return cls(
            address=data["address"],
            balance=data.get("balance", 0),
            symbol=data.get("symbol") or "",
            name=data.get("name") or "",
            decimals=int(data["decimals"]) if data.get("decimals") is not None else 18,
        )


@dataclass(frozen=True)
class SlippageEstimate:
    """Estimated swap slippage (%) and the fee derived from it."""

    slippage: Decimal
    estimated_fee: Decimal


@dataclass(frozen=True)
class MarketSnapshot:
    """External market signals for one asset. ``None`` means no data."""

    price: Decimal | None = None
    volatility_24h: Decimal | None = None
    slippage: Decimal | None = None
    estimated_fee: Decimal | None = None


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value and the clock reading at which it was fetched."""

    value: T
    fetched_at: float

    def is_fresh(self, now: float, ttl: float) -> bool:
        return now - self.fetched_at <= ttl


@dataclass(frozen=True)
class ScoredAsset:
    """An asset with its market data and derived scores.

    Sub-scores are ``None`` when the asset was short-circuited to a zero
    score (zero balance or missing price).
    """

    asset: Asset
    snapshot: MarketSnapshot
    usd_balance: Decimal
    score: float
    reasons: tuple[str, ...]
    balance_score: float | None = None
    volatility_score: float | None = None
    slippage_score: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.asset.address,
            "symbol": self.asset.symbol,
            "name": self.asset.name,
            "decimals": self.asset.decimals,
            "balance": str(self.asset.balance),
            "price": _optional_str(self.snapshot.price),
            "volatility24h": _optional_str(self.snapshot.volatility_24h),
            "slippage": _optional_str(self.snapshot.slippage),
            "usdBalance": str(self.usd_balance),
            "balanceScore": self.balance_score,
            "volatilityScore": self.volatility_score,
            "slippageScore": self.slippage_score,
            "score": self.score,
            "reasons": list(self.reasons),
        }


@dataclass(frozen=True)
class Recommendation:
    """The top-ranked asset plus the full ranking it was chosen from."""

    recommended: ScoredAsset
    ranked: tuple[ScoredAsset, ...] = field(default_factory=tuple)


def _optional_str(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


__all__ = [
    "Asset",
    "CacheEntry",
    "MarketSnapshot",
    "Recommendation",
    "ScoredAsset",
    "SlippageEstimate",
    "canonical_address",
    "to_decimal",
]
