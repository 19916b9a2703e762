import json

import pytest
from typer.testing import CliRunner

from fee_advisor.constants import MAINNET_TOKENS
from fee_advisor.main import app, load_wallet

DAI = MAINNET_TOKENS["DAI"]
AAVE = MAINNET_TOKENS["AAVE"]
UNSUPPORTED = "0x0000000000000000000000000000000000000abc"

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("FEE_ADVISOR_CONFIG", raising=False)
    monkeypatch.delenv("FEE_ADVISOR_PROVIDER", raising=False)
    monkeypatch.delenv("FEE_ADVISOR_ELIGIBILITY", raising=False)


@pytest.fixture
def wallet_file(tmp_path):
    path = tmp_path / "wallet.json"
    path.write_text(
        json.dumps(
            {
                "address": "0x0000000000000000000000000000000000000001",
                "tokens": [
                    {"address": AAVE, "symbol": "AAVE", "balance": "50"},
                    {"address": DAI, "symbol": "DAI", "balance": "1000"},
                ],
            }
        )
    )
    return path


def test_load_wallet_accepts_plain_list(tmp_path):
    path = tmp_path / "tokens.json"
    path.write_text(json.dumps([{"address": DAI, "balance": 1}]))

    assets = load_wallet(path)

    assert [a.address for a in assets] == [DAI]


def test_load_wallet_rejects_other_shapes(tmp_path):
    path = tmp_path / "tokens.json"
    path.write_text(json.dumps({"balances": []}))

    with pytest.raises(ValueError, match="must contain a list of tokens"):
        load_wallet(path)


def test_recommend_json(wallet_file):
    result = runner.invoke(
        app, ["recommend", str(wallet_file), "--json", "--log-level", "ERROR"]
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["success"] is True
    assert data["recommendation"]["symbol"] == "DAI"
    assert data["supportedCount"] == 2
    assert [s["symbol"] for s in data["allScores"]] == ["DAI", "AAVE"]


def test_recommend_table(wallet_file):
    result = runner.invoke(app, ["recommend", str(wallet_file), "--log-level", "ERROR"])

    assert result.exit_code == 0, result.output
    assert "Recommended gas token" in result.output
    assert "DAI" in result.output


def test_recommend_empty_wallet(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text("[]")

    result = runner.invoke(app, ["recommend", str(path), "--log-level", "ERROR"])

    assert result.exit_code == 1
    assert "No recommendation" in result.output


def test_recommend_no_supported_tokens(tmp_path):
    path = tmp_path / "wallet.json"
    path.write_text(json.dumps([{"address": UNSUPPORTED, "balance": "1"}]))

    result = runner.invoke(
        app, ["recommend", str(path), "--json", "--log-level", "ERROR"]
    )

    assert result.exit_code == 1
    data = json.loads(result.output)
    assert data["success"] is False
    assert data["supportedCount"] == 0


def test_recommend_invalid_wallet(tmp_path):
    path = tmp_path / "wallet.json"
    path.write_text(json.dumps([{"address": "0xnope", "balance": "1"}]))

    result = runner.invoke(app, ["recommend", str(path), "--log-level", "ERROR"])

    assert result.exit_code != 0


def test_show_config_redacts_secrets(wallet_file, monkeypatch):
    monkeypatch.setenv("FEE_ADVISOR_PAYMASTER_API_KEY", "pm-secret")

    result = runner.invoke(
        app,
        ["recommend", str(wallet_file), "--show-config", "--log-level", "ERROR"],
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["paymaster_api_key"] == "***redacted***"
    assert "pm-secret" not in result.output


def test_payment_types():
    result = runner.invoke(app, ["payment-types"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [p["name"] for p in data["paymentTypes"]] == [
        "Sponsored",
        "Prepay",
        "Postpay",
    ]
