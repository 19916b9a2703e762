from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any

import backoff
import requests
from pydantic import BaseModel, ConfigDict, RootModel, ValidationError, field_validator

from ...constants import REFERENCE_SLIPPAGE
from ...domain import SlippageEstimate
from ...settings import AdvisorSettings
from .base import BaseMarketDataProvider, ProviderError
from .static import estimate_slippage

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def _is_permanent_failure(e: Exception) -> bool:
    """Malformed bodies and non-retryable HTTP statuses are not retried."""
    if isinstance(e, requests.exceptions.JSONDecodeError):
        return True
    return (
        isinstance(e, requests.exceptions.HTTPError)
        and e.response is not None
        and e.response.status_code not in RETRYABLE_STATUS_CODES
    )


class TokenPriceQuote(BaseModel):
    """One entry of the ``simple/token_price`` response."""

    usd: Decimal | None = None
    usd_24h_change: Decimal | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("usd", "usd_24h_change", mode="before")
    @classmethod
    def float_via_str(cls, v: Any) -> Any:
        """Parse JSON floats through their shortest repr, not their binary value."""
        if isinstance(v, float):
            return str(v)
        return v


class TokenPriceResponse(RootModel[dict[str, TokenPriceQuote]]):
    """Response body keyed by contract address."""


class CoinGeckoProvider(BaseMarketDataProvider):
    """Provider querying the CoinGecko ``simple/token_price`` endpoint.

    Volatility is the absolute 24h price change percentage. CoinGecko has no
    slippage feed, so slippage comes from the reference table with a fixed
    fallback for unknown tokens.
    """

    DEFAULT_SLIPPAGE = Decimal("2.0")

    def __init__(self, config: AdvisorSettings):
        super().__init__(config)
        self.api_url = config.coingecko_api_url.rstrip("/")
        self.platform = config.coingecko_platform
        self.timeout = config.request_timeout
        self._api_key = (
            config.coingecko_api_key.get_secret_value()
            if config.coingecko_api_key
            else None
        )

    @property
    def provider_name(self) -> str:
        return "coingecko"

    @backoff.on_exception(
        backoff.expo,
        requests.exceptions.RequestException,
        max_tries=3,
        giveup=_is_permanent_failure,
        jitter=backoff.full_jitter,
    )
    async def _get_token_prices(self, addresses: list[str]) -> TokenPriceResponse:
        url = f"{self.api_url}/simple/token_price/{self.platform}"
        params = {
            "contract_addresses": ",".join(addresses),
            "vs_currencies": "usd",
            "include_24hr_change": "true",
        }
        headers = {"x-cg-demo-api-key": self._api_key} if self._api_key else {}
        logger.debug("Calling %s for %d tokens", url, len(addresses))
        response = await asyncio.to_thread(
            requests.get, url, params=params, headers=headers, timeout=self.timeout
        )
        response.raise_for_status()
        return TokenPriceResponse.model_validate(response.json())

    async def _fetch_quotes(self, addresses: list[str]) -> dict[str, TokenPriceQuote]:
        if not addresses:
            return {}
        try:
            body = await self._get_token_prices(addresses)
        except (
            requests.exceptions.JSONDecodeError,
            ValidationError,
            ValueError,
        ) as e:
            raise ProviderError(f"Invalid CoinGecko response: {e}") from e
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"CoinGecko request failed: {e}") from e
        return {address.lower(): quote for address, quote in body.root.items()}

    async def fetch_prices(self, addresses: list[str]) -> dict[str, Decimal]:
        quotes = await self._fetch_quotes(addresses)
        return {
            address: quote.usd
            for address, quote in quotes.items()
            if quote.usd is not None
        }

    async def fetch_volatility(self, addresses: list[str]) -> dict[str, Decimal]:
        quotes = await self._fetch_quotes(addresses)
        return {
            address: abs(quote.usd_24h_change)
            for address, quote in quotes.items()
            if quote.usd_24h_change is not None
        }

    async def fetch_slippage(
        self, addresses: list[str]
    ) -> dict[str, SlippageEstimate]:
        result: dict[str, SlippageEstimate] = {}
        for address in addresses:
            known = REFERENCE_SLIPPAGE.get(address)
            slippage = Decimal(known) if known is not None else self.DEFAULT_SLIPPAGE
            result[address] = estimate_slippage(slippage)
        return result
