from __future__ import annotations

from .base import BaseEligibilityFilter
from .paymaster import (
    PAYMENT_TYPES,
    PaymasterEligibilityFilter,
    PaymentType,
    SupportedToken,
    get_supported_payment_types,
)
from .static import StaticEligibilityFilter

ELIGIBILITY_REGISTRY: dict[str, type[BaseEligibilityFilter]] = {
    "static": StaticEligibilityFilter,
    "paymaster": PaymasterEligibilityFilter,
}


def get_eligibility_class(filter_name: str) -> type[BaseEligibilityFilter]:
    """Get eligibility filter class by name.

    Raises:
        ValueError: If filter_name is not recognized
    """
    filter_name_normalized = filter_name.lower()
    if filter_name_normalized not in ELIGIBILITY_REGISTRY:
        raise ValueError(
            f"Unknown eligibility filter '{filter_name}'. "
            f"Available: {', '.join(ELIGIBILITY_REGISTRY.keys())}"
        )
    return ELIGIBILITY_REGISTRY[filter_name_normalized]


__all__ = [
    "ELIGIBILITY_REGISTRY",
    "PAYMENT_TYPES",
    "BaseEligibilityFilter",
    "PaymasterEligibilityFilter",
    "PaymentType",
    "StaticEligibilityFilter",
    "SupportedToken",
    "get_eligibility_class",
    "get_supported_payment_types",
]
