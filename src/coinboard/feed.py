"""PriceFeed — central orchestrator walking ordered provider strategies."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

import requests

from coinboard.assets import DEFAULT_ASSETS, AssetId, parse_asset
from coinboard.config import CoinboardConfig, FeedMode, ProviderType
from coinboard.errors import PriceFeedError, PriceFeedErrorCode
from coinboard.models.series import PriceSeries
from coinboard.models.snapshot import PriceSnapshot
from coinboard.providers import create_provider
from coinboard.providers.base import (
    BasePriceProvider,
    HistoryFetch,
    SnapshotFetch,
    point_count,
)

logger = logging.getLogger(__name__)

MAX_HISTORY_HOURS = 24.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PriceFeed:
    """Central orchestrator: strategy chain -> first success -> normalize.

    Each provider contributes an ordered list of strategies. A strategy that
    fails with a retryable ``PriceFeedError`` hands over to the next one;
    only when every strategy has failed is the last error raised.

    Usage::

        from coinboard import create_feed_from_env
        feed = create_feed_from_env()
        tickers = feed.get_snapshots()
        series = feed.get_history(hours=6)
    """

    def __init__(
        self,
        config: CoinboardConfig | None = None,
        providers: list[BasePriceProvider] | None = None,
        clock: Callable[[], datetime] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or CoinboardConfig()
        self._clock = clock or _utcnow

        if providers is not None:
            self.providers = list(providers)
        else:
            self.providers = [
                create_provider(pt, **self._provider_kwargs(pt, session))
                for pt in self.config.provider_chain()
            ]

    def _provider_kwargs(
        self, provider_type: ProviderType, session: requests.Session | None,
    ) -> dict[str, Any]:
        cfg = self.config
        kwargs: dict[str, Any] = {}
        if provider_type is ProviderType.COINGECKO:
            kwargs["base_url"] = cfg.coingecko_base_url
            kwargs["api_key"] = cfg.coingecko_api_key
            kwargs["key_header"] = cfg.coingecko_key_header
        elif provider_type is ProviderType.COINCAP:
            kwargs["base_url"] = cfg.coincap_base_url
            kwargs["candle_exchange"] = cfg.candle_exchange
            kwargs["candle_quote"] = cfg.candle_quote
        if provider_type is not ProviderType.SYNTHETIC:
            kwargs["timeout"] = cfg.timeout_seconds
            kwargs["session"] = session
        return kwargs

    @property
    def offline(self) -> bool:
        return self.config.mode is FeedMode.OFFLINE

    # ----------------------------------------------------------- strategies

    def snapshot_strategies(self) -> list[tuple[str, SnapshotFetch]]:
        chain: list[tuple[str, SnapshotFetch]] = []
        for provider in self.providers:
            if "snapshots" in provider.capabilities():
                chain.extend(provider.snapshot_strategies())
        return chain

    def history_strategies(self) -> list[tuple[str, HistoryFetch]]:
        chain: list[tuple[str, HistoryFetch]] = []
        for provider in self.providers:
            if "history" in provider.capabilities():
                chain.extend(provider.history_strategies())
        return chain

    # ------------------------------------------------------------ snapshots

    def get_snapshots(
        self, assets: Sequence[AssetId | str] = DEFAULT_ASSETS,
    ) -> list[PriceSnapshot]:
        """Current price and 24h change, one snapshot per asset in input order."""
        ids = [parse_asset(a) for a in assets]
        if not ids:
            raise PriceFeedError(
                "At least one asset is required",
                code=PriceFeedErrorCode.INVALID_REQUEST,
            )
        return self._first_success("snapshots", self.snapshot_strategies(), ids)

    # -------------------------------------------------------------- history

    def get_history(
        self,
        hours: float | None = None,
        asset: AssetId | str = AssetId.BITCOIN,
    ) -> PriceSeries:
        """Chart-ready history covering roughly the last ``hours``.

        The result holds at most ``point_count(hours)`` points, oldest
        first.
        """
        if hours is None:
            hours = self.config.history_hours
        if not 0 < hours <= MAX_HISTORY_HOURS:
            raise PriceFeedError(
                f"hours must be in (0, {MAX_HISTORY_HOURS:g}], got {hours}",
                code=PriceFeedErrorCode.INVALID_REQUEST,
            )
        target = parse_asset(asset)
        now = self._clock()
        series = self._first_success(
            "history", self.history_strategies(), target, hours, now,
        )
        return series.tail(point_count(hours))

    # ------------------------------------------------------------ internal

    def _first_success(
        self,
        label: str,
        strategies: Sequence[tuple[str, Callable[..., Any]]],
        *args: Any,
    ) -> Any:
        """Try strategies in order, returning the first result."""
        last_error: PriceFeedError | None = None
        for attempt, (name, fetch) in enumerate(strategies):
            try:
                result = fetch(*args)
            except PriceFeedError as e:
                if not e.retryable:
                    raise
                logger.warning("%s strategy %s failed: %s", label, name, e)
                last_error = e
                continue
            if attempt:
                logger.info("%s served by fallback strategy %s", label, name)
            return result

        raise last_error or PriceFeedError(
            f"No provider supports '{label}'",
            code=PriceFeedErrorCode.EMPTY_RESULT,
        )
