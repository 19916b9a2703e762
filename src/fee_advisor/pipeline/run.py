"""High-level recommendation pipeline."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from ..domain import Asset, Recommendation
from ..scoring import recommend
from ..state import AppState
from .context import RecommendationContext


class NoSupportedAssetsError(Exception):
    """Raised when none of the wallet's tokens can pay for gas."""

    def __init__(self, checked: int):
        super().__init__(
            f"No supported tokens found in the provided list ({checked} checked)"
        )
        self.checked = checked


async def filter_assets(ctx: RecommendationContext) -> None:
    log = ctx.state.logger
    supported = await ctx.state.eligibility.filter_supported(ctx.assets)
    log.info(
        "%d of %d tokens are supported by %s",
        len(supported),
        len(ctx.assets),
        ctx.state.eligibility.name,
    )
    if not supported:
        raise NoSupportedAssetsError(len(ctx.assets))
    ctx.supported = supported


async def load_market_data(ctx: RecommendationContext) -> None:
    supported = ctx.supported_required
    market_data = await ctx.state.cache.get_market_data(
        asset.address for asset in supported
    )
    for asset in supported:
        if asset.address not in market_data:
            ctx.warnings.append(f"No market data for {asset.symbol or asset.address}")
            ctx.state.logger.warning("No market data for %s", asset.address)
    ctx.market_data = market_data


async def rank_assets(ctx: RecommendationContext) -> None:
    ctx.recommendation = recommend(
        ctx.supported_required, ctx.market_data_required, ctx.state.scoring
    )
    if ctx.recommendation is not None:
        top = ctx.recommendation.recommended
        ctx.state.logger.info(
            "Recommended %s with score %.4f",
            top.asset.symbol or top.asset.address,
            top.score,
        )


async def run_recommendation(
    state: AppState, assets: Sequence[Asset]
) -> RecommendationContext:
    """Execute the recommendation pipeline.

    Steps:
    1. Eligibility filtering
    2. Market data lookup through the cache
    3. Scoring and ranking

    An empty asset list short-circuits with no recommendation.

    Raises:
        NoSupportedAssetsError: If no asset passes the eligibility filter
        asyncio.TimeoutError: If the pipeline exceeds ``global_timeout_seconds``
    """
    s = state.settings
    log = state.logger
    ctx = RecommendationContext(state=state, assets=list(assets))

    if not ctx.assets:
        log.info("No tokens provided, nothing to recommend")
        return ctx

    async def _run_pipeline() -> None:
        await filter_assets(ctx)
        await load_market_data(ctx)
        await rank_assets(ctx)

    timeout_s = s.global_timeout_seconds
    try:
        if timeout_s is None or timeout_s <= 0:
            await _run_pipeline()
        else:
            async with asyncio.timeout(timeout_s):
                await _run_pipeline()
    except asyncio.TimeoutError as exc:
        log.error("Recommendation timed out after %ss", timeout_s)
        raise asyncio.TimeoutError(
            f"Recommendation exceeded global timeout {timeout_s}s\n N.B. This can be "
            "changed via `global_timeout_seconds` or CLI flag `--global-timeout-seconds`."
        ) from exc

    return ctx


async def get_recommendation(
    state: AppState, assets: Sequence[Asset]
) -> Recommendation | None:
    """Convenience wrapper returning only the recommendation."""
    ctx = await run_recommendation(state, assets)
    return ctx.recommendation
