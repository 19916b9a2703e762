"""Tests for settings loading and validation."""

from __future__ import annotations

import math
from textwrap import dedent

import pytest
from pydantic import ValidationError

from fee_advisor.settings import (
    AdvisorSettings,
    EligibilityKind,
    ProviderKind,
    ScoringWeights,
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the developer's environment and config files out of the tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in (
        "FEE_ADVISOR_CONFIG",
        "FEE_ADVISOR_PROVIDER",
        "FEE_ADVISOR_PRICE_CACHE_TTL",
        "FEE_ADVISOR_PAYMASTER_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = AdvisorSettings()

    assert settings.provider is ProviderKind.STATIC
    assert settings.eligibility is EligibilityKind.STATIC
    assert settings.price_cache_ttl == 300
    assert settings.volatility_cache_ttl == 300
    assert settings.weights == ScoringWeights(balance=0.4, volatility=0.3, slippage=0.3)
    assert settings.min_balance_usd == 5
    assert settings.log_divisor == 5


def test_default_weights_sum_to_one():
    weights = ScoringWeights()
    assert math.fsum((weights.balance, weights.volatility, weights.slippage)) == 1.0


def test_weights_must_sum_to_one():
    with pytest.raises(ValidationError, match="must sum to 1.0"):
        ScoringWeights(balance=0.5, volatility=0.3, slippage=0.3)


def test_weights_must_be_non_negative():
    with pytest.raises(ValidationError, match="greater than or equal to 0"):
        ScoringWeights(balance=1.2, volatility=-0.1, slippage=-0.1)


def test_negative_ttl_rejected():
    with pytest.raises(ValidationError, match="greater than or equal to 0"):
        AdvisorSettings(price_cache_ttl=-1)

    with pytest.raises(ValidationError, match="greater than or equal to 0"):
        AdvisorSettings(volatility_cache_ttl=-0.5)


def test_invalid_weights_rejected_by_settings():
    with pytest.raises(ValidationError, match="must sum to 1.0"):
        AdvisorSettings(weights={"balance": 0.2, "volatility": 0.2, "slippage": 0.2})


def test_supported_tokens_are_lowercased():
    settings = AdvisorSettings(
        supported_tokens=["0x6B175474E89094C44Da98b954EedeAC495271d0F"]
    )
    assert settings.supported_tokens == ["0x6b175474e89094c44da98b954eedeac495271d0f"]


def test_env_overrides_config_file(tmp_path, monkeypatch):
    config_path = tmp_path / "advisor.toml"
    config_path.write_text(
        dedent(
            """
            [fee_advisor]
            provider = "coingecko"
            price_cache_ttl = 60
            volatility_cache_ttl = 120
            """
        ).strip()
    )
    monkeypatch.setenv("FEE_ADVISOR_CONFIG", str(config_path))
    monkeypatch.setenv("FEE_ADVISOR_PRICE_CACHE_TTL", "30")

    settings = AdvisorSettings()

    assert settings.provider is ProviderKind.COINGECKO
    assert settings.price_cache_ttl == 30
    assert settings.volatility_cache_ttl == 120


def test_cli_overrides_env(monkeypatch):
    monkeypatch.setenv("FEE_ADVISOR_PROVIDER", "coingecko")

    settings = AdvisorSettings(provider=ProviderKind.STATIC)

    assert settings.provider is ProviderKind.STATIC


def test_local_config_file_is_discovered(tmp_path):
    (tmp_path / "fee-advisor.toml").write_text("min_balance_usd = 10\n")

    settings = AdvisorSettings()

    assert settings.min_balance_usd == 10


def test_secrets_rejected_in_config_file(tmp_path, monkeypatch):
    config_path = tmp_path / "advisor.toml"
    config_path.write_text('paymaster_api_key = "secret"\n')
    monkeypatch.setenv("FEE_ADVISOR_CONFIG", str(config_path))

    with pytest.raises(ValueError, match="Security violation"):
        AdvisorSettings()


def test_as_safe_dict_redacts_secrets():
    settings = AdvisorSettings(paymaster_api_key="pm-secret", coingecko_api_key="cg")

    data = settings.as_safe_dict()

    assert data["paymaster_api_key"] == "***redacted***"
    assert data["coingecko_api_key"] == "***redacted***"
    assert settings.paymaster_api_key_value == "pm-secret"


def test_paymaster_api_key_value_defaults_to_empty():
    assert AdvisorSettings().paymaster_api_key_value == ""
