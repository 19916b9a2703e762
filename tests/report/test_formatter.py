import json
from decimal import Decimal

import pytest
from rich.console import Console

from fee_advisor.constants import MAINNET_TOKENS
from fee_advisor.domain import Asset, MarketSnapshot
from fee_advisor.report import (
    format_recommendation_table,
    recommendation_to_dict,
    recommendation_to_json,
)
from fee_advisor.scoring import recommend

DAI = MAINNET_TOKENS["DAI"]
AAVE = MAINNET_TOKENS["AAVE"]


@pytest.fixture
def recommendation():
    result = recommend(
        [
            Asset(address=AAVE, balance=50),
            Asset(address=DAI, balance=1000, symbol="DAI"),
        ],
        {
            DAI: MarketSnapshot(
                price=Decimal("1.0"),
                volatility_24h=Decimal("0.2"),
                slippage=Decimal("0.1"),
                estimated_fee=Decimal("0.05"),
            ),
        },
    )
    assert result is not None
    return result


def test_recommendation_to_dict(recommendation):
    data = recommendation_to_dict(recommendation, supported_count=2)

    assert data["success"] is True
    assert data["supportedCount"] == 2
    assert data["recommendation"]["address"] == DAI
    assert data["recommendation"]["usdBalance"] == "1000.0"
    assert [s["address"] for s in data["allScores"]] == [DAI, AAVE]
    assert data["allScores"][1]["reasons"] == ["No price data available"]
    assert data["allScores"][1]["balanceScore"] is None


def test_no_recommendation_payload():
    data = recommendation_to_dict(None, supported_count=0)

    assert data == {
        "success": False,
        "recommendation": None,
        "allScores": [],
        "supportedCount": 0,
    }


def test_recommendation_to_json_is_valid_json(recommendation):
    parsed = json.loads(recommendation_to_json(recommendation, supported_count=2))
    assert parsed["recommendation"]["score"] == pytest.approx(0.9964)


def test_table_lists_every_token(recommendation):
    console = Console(record=True, width=200)

    format_recommendation_table(recommendation, console=console)

    output = console.export_text()
    assert "Recommended gas token" in output
    assert "DAI" in output
    assert "AAVE" in output  # resolved from the known token table
    assert "High balance ($1000.00) provides flexibility" in output
