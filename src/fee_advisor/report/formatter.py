"""Rich console and JSON output for recommendations."""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..constants import MAINNET_TOKENS
from ..domain import Recommendation, ScoredAsset

_ADDRESS_TO_SYMBOL: dict[str, str] = {
    address.lower(): symbol for symbol, address in MAINNET_TOKENS.items()
}


def _get_symbol(scored: ScoredAsset) -> str:
    """Symbol from the wallet payload, known tokens, or a truncated address."""
    if scored.asset.symbol:
        return scored.asset.symbol
    address = scored.asset.address
    return _ADDRESS_TO_SYMBOL.get(address, f"{address[:6]}...{address[-4:]}")


def _format_usd(value: Decimal) -> str:
    return f"${value:,.2f}"


def _format_score(value: float | None) -> str:
    return "-" if value is None else f"{value:.4f}"


def build_ranking_table(recommendation: Recommendation) -> Table:
    table = Table(title="Token ranking", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Token", style="cyan")
    table.add_column("USD balance", justify="right")
    table.add_column("Balance", justify="right")
    table.add_column("Volatility", justify="right")
    table.add_column("Slippage", justify="right")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Reasons")

    top_address = recommendation.recommended.asset.address
    for rank, scored in enumerate(recommendation.ranked, start=1):
        style = "green" if scored.asset.address == top_address else None
        table.add_row(
            str(rank),
            _get_symbol(scored),
            _format_usd(scored.usd_balance),
            _format_score(scored.balance_score),
            _format_score(scored.volatility_score),
            _format_score(scored.slippage_score),
            f"{scored.score:.4f}",
            "\n".join(scored.reasons),
            style=style,
        )
    return table


def format_recommendation_table(
    recommendation: Recommendation, console: Console | None = None
) -> None:
    """Print the recommended token and the full ranking.

    Args:
        recommendation: Result of the scoring engine
        console: Console to print to, a fresh stdout console when omitted
    """
    console = console or Console()
    top = recommendation.recommended

    summary = Table(show_header=False, box=None, padding=(0, 1))
    summary.add_column("Key", style="dim")
    summary.add_column("Value", style="green")
    summary.add_row("Token", _get_symbol(top))
    summary.add_row("Address", top.asset.address)
    summary.add_row("USD balance", _format_usd(top.usd_balance))
    summary.add_row("Score", f"{top.score:.4f}")
    for reason in top.reasons:
        summary.add_row("", reason)

    console.print(
        Panel(summary, title="[bold]Recommended gas token[/]", border_style="green")
    )
    console.print(build_ranking_table(recommendation))


def recommendation_to_dict(
    recommendation: Recommendation | None, supported_count: int
) -> dict[str, Any]:
    """Response payload with the recommended token and every score."""
    if recommendation is None:
        return {
            "success": False,
            "recommendation": None,
            "allScores": [],
            "supportedCount": supported_count,
        }
    return {
        "success": True,
        "recommendation": recommendation.recommended.to_dict(),
        "allScores": [scored.to_dict() for scored in recommendation.ranked],
        "supportedCount": supported_count,
    }


def recommendation_to_json(
    recommendation: Recommendation | None, supported_count: int
) -> str:
    return json.dumps(recommendation_to_dict(recommendation, supported_count), indent=2)
