from __future__ import annotations

import asyncio
import logging
from typing import Any

import backoff
import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...cache.ttl_cache import Clock, TTLCache
from ...constants import ZERO_ADDRESS
from ...settings import AdvisorSettings
from .base import BaseEligibilityFilter

logger = logging.getLogger(__name__)

SUPPORTED_TOKENS_KEY = "supported_tokens"


class PaymasterRPCError(Exception):
    """Raised when the paymaster answers a JSON-RPC call with an error."""


class SupportedToken(BaseModel):
    """A token the paymaster accepts for gas payment."""

    address: str = Field(alias="token")
    symbol: str = ""
    decimals: int = 18
    type: int | None = None

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RpcResponse(BaseModel):
    """JSON-RPC reply envelope."""

    result: Any = None
    error: dict[str, Any] | None = None

    model_config = ConfigDict(extra="ignore")


class SupportedTokensResult(BaseModel):
    """``pm_supported_tokens`` result body."""

    tokens: list[SupportedToken] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class PaymentType(BaseModel):
    id: int
    name: str
    description: str


PAYMENT_TYPES: tuple[PaymentType, ...] = (
    PaymentType(id=0, name="Sponsored", description="Free gas (developer pays)"),
    PaymentType(id=1, name="Prepay", description="Pay with ERC20 tokens (upfront)"),
    PaymentType(
        id=2, name="Postpay", description="Pay with ERC20 tokens (after execution)"
    ),
)


def get_supported_payment_types() -> list[PaymentType]:
    """Payment modes offered by the paymaster."""
    return list(PAYMENT_TYPES)


def minimal_user_operation() -> dict[str, str]:
    """Placeholder UserOperation accepted by read-only paymaster calls."""
    return {
        "sender": ZERO_ADDRESS,
        "nonce": "0x0",
        "initCode": "0x",
        "callData": "0x",
        "callGasLimit": "0x0",
        "verificationGasLimit": "0x0",
        "preVerificationGas": "0x0",
        "maxFeePerGas": "0x0",
        "maxPriorityFeePerGas": "0x0",
        "paymasterAndData": "0x",
        "signature": "0x",
    }


class PaymasterEligibilityFilter(BaseEligibilityFilter):
    """Eligibility backed by the paymaster's ``pm_supported_tokens`` RPC.

    The token list is cached for ``supported_tokens_ttl`` seconds. If a
    refresh fails the previous list is reused; with no previous list every
    token is treated as unsupported.
    """

    def __init__(self, config: AdvisorSettings, clock: Clock | None = None):
        super().__init__(config)
        self.url = config.paymaster_url
        self.entry_point = config.entry_point_address
        self.timeout = config.request_timeout
        self._cache: TTLCache[list[SupportedToken]] = TTLCache(
            config.supported_tokens_ttl, clock
        )

    @property
    def name(self) -> str:
        return "paymaster"

    @backoff.on_exception(
        backoff.expo,
        (requests.exceptions.ConnectionError, requests.exceptions.Timeout),
        max_tries=3,
        jitter=backoff.full_jitter,
    )
    async def _rpc(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        logger.debug("Calling paymaster %s at %s", method, self.url)
        response = await asyncio.to_thread(
            requests.post, self.url, json=payload, timeout=self.timeout
        )
        response.raise_for_status()
        body = RpcResponse.model_validate(response.json())
        if body.error:
            raise PaymasterRPCError(f"{method} failed: {body.error}")
        return body.result

    async def fetch_supported_tokens(self) -> list[SupportedToken]:
        """Query the paymaster, bypassing the cache."""
        result = await self._rpc(
            "pm_supported_tokens",
            [
                minimal_user_operation(),
                self.config.paymaster_api_key_value,
                self.entry_point,
            ],
        )
        return SupportedTokensResult.model_validate(result or {}).tokens

    async def get_supported_tokens(self) -> list[SupportedToken]:
        cached = self._cache.get_fresh(SUPPORTED_TOKENS_KEY)
        if cached is not None:
            return cached

        try:
            tokens = await self.fetch_supported_tokens()
        except (
            requests.exceptions.RequestException,
            PaymasterRPCError,
            ValidationError,
            ValueError,
        ) as e:
            fallback = self._cache.get_any(SUPPORTED_TOKENS_KEY)
            logger.warning(
                "Failed to fetch supported tokens from paymaster (%s), using %s",
                e,
                "cached list" if fallback is not None else "empty list",
            )
            return fallback if fallback is not None else []

        self._cache.set(SUPPORTED_TOKENS_KEY, tokens)
        logger.info("Paymaster supports %d tokens", len(tokens))
        return tokens

    async def supported_addresses(self) -> set[str]:
        return {token.address.lower() for token in await self.get_supported_tokens()}
