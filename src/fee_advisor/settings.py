"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

import tomllib

from dotenv import load_dotenv
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .constants import (
    DEFAULT_COINGECKO_API_URL,
    DEFAULT_COINGECKO_PLATFORM,
    DEFAULT_ENTRY_POINT,
    DEFAULT_PAYMASTER_URL,
    MAINNET_TOKENS,
)

load_dotenv()

WEIGHT_SUM_TOLERANCE = 1e-9


class ProviderKind(str, Enum):
    STATIC = "static"
    COINGECKO = "coingecko"


class EligibilityKind(str, Enum):
    STATIC = "static"
    PAYMASTER = "paymaster"


class ScoringWeights(BaseModel):
    """Relative weight of each sub-score in the composite score."""

    balance: float = Field(default=0.4, ge=0)
    volatility: float = Field(default=0.3, ge=0)
    slippage: float = Field(default=0.3, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def validate_sum(self) -> "ScoringWeights":
        total = self.balance + self.volatility + self.slippage
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"scoring weights must sum to 1.0, got {total}")
        return self


class AdvisorSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with FEE_ADVISOR_)
    - Config file (TOML), lowest precedence

    Do not read os.environ or files elsewhere in the codebase.
    """

    # --- collaborators ---
    provider: ProviderKind = ProviderKind.STATIC
    eligibility: EligibilityKind = EligibilityKind.STATIC

    # --- cache ---
    price_cache_ttl: float = Field(default=300.0, ge=0)
    volatility_cache_ttl: float = Field(default=300.0, ge=0)
    supported_tokens_ttl: float = Field(default=600.0, ge=0)

    # --- scoring ---
    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    min_balance_usd: float = Field(default=5.0, gt=0)
    log_divisor: float = Field(default=5.0, gt=0)

    # --- static collaborators ---
    supported_tokens: list[str] = Field(
        default_factory=lambda: list(MAINNET_TOKENS.values())
    )
    static_seed: int | None = None

    # --- coingecko ---
    coingecko_api_url: str = DEFAULT_COINGECKO_API_URL
    coingecko_platform: str = DEFAULT_COINGECKO_PLATFORM
    coingecko_api_key: SecretStr | None = None

    # --- paymaster ---
    paymaster_url: str = DEFAULT_PAYMASTER_URL
    paymaster_api_key: SecretStr | None = None
    entry_point_address: str = DEFAULT_ENTRY_POINT

    # --- timeouts ---
    request_timeout: float = Field(default=10.0, gt=0)
    global_timeout_seconds: float | None = 30.0

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FEE_ADVISOR_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("coingecko_api_key", "paymaster_api_key", mode="before")
    @classmethod
    def wrap_secrets(cls, v: Any) -> SecretStr | None:
        """Wrap string secrets in SecretStr."""
        if v is None or isinstance(v, SecretStr):
            return v
        return SecretStr(v)

    @field_validator("supported_tokens", mode="after")
    @classmethod
    def lowercase_tokens(cls, v: list[str]) -> list[str]:
        return [address.lower() for address in v]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Custom config-file source with explicit precedence: CLI > ENV > FILE."""
        env_cfg = os.environ.get("FEE_ADVISOR_CONFIG")
        cfg_path = Path(env_cfg) if env_cfg else None

        class TomlConfigSource(PydanticBaseSettingsSource):
            def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
                super().__init__(settings_cls)
                self._path = path

            def get_field_value(
                self, field: Any, field_name: str
            ) -> tuple[Any, str, bool]:
                return None, "", False

            def __call__(self) -> dict[str, Any]:
                if not self._path:
                    local_config = Path("fee-advisor.toml")
                    user_config = Path.home() / ".config" / "fee-advisor" / "config.toml"
                    if local_config.exists():
                        self._path = local_config
                    elif user_config.exists():
                        self._path = user_config
                    else:
                        return {}

                if not self._path.exists():
                    return {}

                with self._path.open("rb") as f:
                    data = tomllib.load(f)  # supports top-level or [fee_advisor]
                body = data.get("fee_advisor", data)
                if not isinstance(body, dict):
                    return {}

                secret_fields = {"coingecko_api_key", "paymaster_api_key"}
                for key in secret_fields:
                    if key in body:
                        raise ValueError(
                            f"Security violation: '{key}' found in TOML config file. "
                            f"Secrets must only be provided via environment variables or CLI flags."
                        )

                return body

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            dotenv_settings,  # .env
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,
        )

    def as_safe_dict(self) -> dict[str, Any]:
        """Return the config as a dict with secrets redacted."""
        data = self.model_dump(mode="json")
        if self.coingecko_api_key:
            data["coingecko_api_key"] = "***redacted***"
        if self.paymaster_api_key:
            data["paymaster_api_key"] = "***redacted***"
        return data

    @property
    def paymaster_api_key_value(self) -> str:
        """Get the paymaster API key, or an empty string when unset."""
        if self.paymaster_api_key is None:
            return ""
        return self.paymaster_api_key.get_secret_value()
