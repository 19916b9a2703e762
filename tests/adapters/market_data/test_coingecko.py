from decimal import Decimal
from unittest.mock import Mock

import pytest
import requests

from fee_advisor.adapters.market_data import coingecko
from fee_advisor.adapters.market_data.base import ProviderError
from fee_advisor.adapters.market_data.coingecko import CoinGeckoProvider
from fee_advisor.constants import MAINNET_TOKENS
from fee_advisor.settings import AdvisorSettings, ProviderKind

DAI = MAINNET_TOKENS["DAI"]
AAVE = MAINNET_TOKENS["AAVE"]
UNKNOWN = "0x0000000000000000000000000000000000000abc"


@pytest.fixture
def config():
    return AdvisorSettings(
        provider=ProviderKind.COINGECKO,
        coingecko_api_url="https://api.example.com/api/v3/",
        coingecko_api_key="cg-key",
    )


@pytest.fixture
def provider(config):
    return CoinGeckoProvider(config)


def _response(payload, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def payload():
    return {
        DAI.upper().replace("0X", "0x"): {"usd": 1.0, "usd_24h_change": -0.2},
        AAVE: {"usd": 85.2, "usd_24h_change": 9.3},
    }


def test_provider_name(provider):
    assert provider.provider_name == "coingecko"


@pytest.mark.asyncio
async def test_fetch_prices(monkeypatch, provider, payload):
    get = Mock(return_value=_response(payload))
    monkeypatch.setattr(coingecko.requests, "get", get)

    prices = await provider.fetch_prices([DAI, AAVE])

    assert prices == {DAI: Decimal("1.0"), AAVE: Decimal("85.2")}
    url = get.call_args.args[0]
    kwargs = get.call_args.kwargs
    assert url == "https://api.example.com/api/v3/simple/token_price/ethereum"
    assert kwargs["params"]["contract_addresses"] == f"{DAI},{AAVE}"
    assert kwargs["params"]["include_24hr_change"] == "true"
    assert kwargs["headers"] == {"x-cg-demo-api-key": "cg-key"}


@pytest.mark.asyncio
async def test_fetch_volatility_uses_absolute_change(monkeypatch, provider, payload):
    monkeypatch.setattr(coingecko.requests, "get", Mock(return_value=_response(payload)))

    volatility = await provider.fetch_volatility([DAI, AAVE])

    assert volatility == {DAI: Decimal("0.2"), AAVE: Decimal("9.3")}


@pytest.mark.asyncio
async def test_tokens_missing_fields_are_omitted(monkeypatch, provider):
    monkeypatch.setattr(
        coingecko.requests, "get", Mock(return_value=_response({DAI: {}}))
    )

    assert await provider.fetch_prices([DAI]) == {}
    assert await provider.fetch_volatility([DAI]) == {}


@pytest.mark.asyncio
async def test_empty_request_skips_http(monkeypatch, provider):
    get = Mock()
    monkeypatch.setattr(coingecko.requests, "get", get)

    assert await provider.fetch_prices([]) == {}
    get.assert_not_called()


@pytest.mark.asyncio
async def test_http_error_raises_provider_error(monkeypatch, provider):
    get = Mock(return_value=_response({}, status_code=404))
    monkeypatch.setattr(coingecko.requests, "get", get)

    with pytest.raises(ProviderError, match="CoinGecko request failed"):
        await provider.fetch_prices([DAI])
    assert get.call_count == 1


@pytest.mark.asyncio
async def test_malformed_body_raises_provider_error(monkeypatch, provider):
    monkeypatch.setattr(
        coingecko.requests, "get", Mock(return_value=_response(["not", "a", "map"]))
    )

    with pytest.raises(ProviderError, match="Invalid CoinGecko response"):
        await provider.fetch_prices([DAI])


@pytest.mark.asyncio
async def test_undecodable_body_is_not_retried(monkeypatch, provider):
    response = _response(None)
    response.json.side_effect = requests.exceptions.JSONDecodeError(
        "Expecting value", "<html>", 0
    )
    get = Mock(return_value=response)
    monkeypatch.setattr(coingecko.requests, "get", get)

    with pytest.raises(ProviderError, match="Invalid CoinGecko response"):
        await provider.fetch_prices([DAI])
    assert get.call_count == 1


@pytest.mark.asyncio
async def test_slippage_from_reference_table(provider):
    estimates = await provider.fetch_slippage([DAI, UNKNOWN])

    assert estimates[DAI].slippage == Decimal("0.1")
    assert estimates[UNKNOWN].slippage == CoinGeckoProvider.DEFAULT_SLIPPAGE
    assert estimates[UNKNOWN].estimated_fee == Decimal("1.0")
