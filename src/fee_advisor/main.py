"""CLI entrypoint for the fee advisor."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError

from .adapters.eligibility import (
    PaymasterEligibilityFilter,
    get_supported_payment_types,
)
from .domain import Asset
from .logger import setup_logging
from .pipeline import NoSupportedAssetsError, run_recommendation
from .report import format_recommendation_table, recommendation_to_json
from .settings import AdvisorSettings, EligibilityKind, ProviderKind
from .state import build_state

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Recommend the best ERC20 token for paying gas fees.",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to a TOML config file (can include [fee_advisor] table).",
    ),
]
LogLevelOption = Annotated[
    str | None,
    typer.Option(
        "--log-level",
        help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    ),
]


def _build_logger() -> logging.Logger:
    return logging.getLogger("fee_advisor")


def _load_settings(config_path: Path | None, **overrides: Any) -> AdvisorSettings:
    """Build settings from CLI overrides, environment and config file."""
    if config_path:
        os.environ["FEE_ADVISOR_CONFIG"] = str(config_path)

    init_kwargs = {key: value for key, value in overrides.items() if value is not None}
    if "log_level" in init_kwargs:
        init_kwargs["log_level"] = init_kwargs["log_level"].upper()

    try:
        settings = AdvisorSettings(**init_kwargs)
    except ValidationError as e:
        raise typer.BadParameter(f"Invalid configuration: {e}") from e

    setup_logging(settings.log_level)
    return settings


def load_wallet(path: Path) -> list[Asset]:
    """Read token balances from a JSON file.

    The file holds either a list of token objects or an object with a
    ``tokens`` list, each token having ``address`` and ``balance``.

    Raises:
        ValueError: If the file content is not a valid token list
    """
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("tokens")
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of tokens")
    return [Asset.from_dict(entry) for entry in data]


@app.command()
def recommend(
    wallet_file: Annotated[
        Path,
        typer.Argument(
            help="JSON file with the wallet's token balances.",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    config_path: ConfigOption = None,
    provider: Annotated[
        ProviderKind | None,
        typer.Option("--provider", "-p", help="Market data provider."),
    ] = None,
    eligibility: Annotated[
        EligibilityKind | None,
        typer.Option("--eligibility", "-e", help="Eligibility filter."),
    ] = None,
    global_timeout_seconds: Annotated[
        float | None,
        typer.Option(
            "--global-timeout-seconds",
            help="Abort the recommendation after this many seconds (0 disables).",
        ),
    ] = None,
    log_level: LogLevelOption = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the result as JSON.")
    ] = False,
    show_config: Annotated[
        bool,
        typer.Option(
            "--show-config",
            help="Print effective config (with secrets redacted) and exit.",
        ),
    ] = False,
):
    """Rank the wallet's tokens and recommend one for paying gas."""
    settings = _load_settings(
        config_path,
        provider=provider,
        eligibility=eligibility,
        global_timeout_seconds=global_timeout_seconds,
        log_level=log_level,
    )

    if show_config:
        typer.echo(json.dumps(settings.as_safe_dict(), indent=2))
        raise typer.Exit(code=0)

    try:
        assets = load_wallet(wallet_file)
    except (ValueError, json.JSONDecodeError) as e:
        raise typer.BadParameter(str(e), param_hint="WALLET_FILE") from e

    state = build_state(settings, _build_logger())

    try:
        ctx = asyncio.run(run_recommendation(state, assets))
    except NoSupportedAssetsError as e:
        if as_json:
            typer.echo(
                json.dumps(
                    {"success": False, "error": str(e), "supportedCount": 0}, indent=2
                )
            )
        else:
            typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e

    supported_count = len(ctx.supported or [])
    if as_json:
        typer.echo(recommendation_to_json(ctx.recommendation, supported_count))
    elif ctx.recommendation is None:
        typer.echo("No recommendation: the wallet has no tokens.")
    else:
        format_recommendation_table(ctx.recommendation)

    if ctx.recommendation is None:
        raise typer.Exit(code=1)


@app.command("supported-tokens")
def supported_tokens(
    config_path: ConfigOption = None,
    log_level: LogLevelOption = None,
):
    """List the tokens the paymaster accepts for gas payment."""
    settings = _load_settings(config_path, log_level=log_level)
    paymaster = PaymasterEligibilityFilter(settings)
    tokens = asyncio.run(paymaster.get_supported_tokens())
    typer.echo(
        json.dumps(
            {
                "success": True,
                "tokens": [token.model_dump() for token in tokens],
                "count": len(tokens),
            },
            indent=2,
        )
    )


@app.command("payment-types")
def payment_types():
    """List the payment modes offered by the paymaster."""
    typer.echo(
        json.dumps(
            {
                "success": True,
                "paymentTypes": [p.model_dump() for p in get_supported_payment_types()],
            },
            indent=2,
        )
    )


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
