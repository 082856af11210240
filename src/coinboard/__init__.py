"""coinboard — Crypto price feed and dashboard for BTC, ETH and DOGE.

Multi-provider (CoinGecko, CoinCap), automatic fallback, offline
synthetic data, and a periodic refresh loop.

Quick start::

    from coinboard import create_feed_from_env
    feed = create_feed_from_env()
    tickers = feed.get_snapshots()
    series = feed.get_history(hours=6)
"""

from __future__ import annotations

from pathlib import Path

from coinboard.assets import ASSET_META, DEFAULT_ASSETS, AssetId, AssetMeta
from coinboard.config import (
    CoinboardConfig,
    FeedMode,
    ProviderType,
    load_config_from_env,
)
from coinboard.dashboard import Dashboard, DashboardState
from coinboard.errors import PriceFeedError, PriceFeedErrorCode
from coinboard.feed import PriceFeed
from coinboard.models.series import PricePoint, PriceSeries
from coinboard.models.snapshot import PriceSnapshot
from coinboard.providers.synthetic import SyntheticProvider, SyntheticState

__version__ = "0.1.0"

__all__ = [
    # Feed
    "PriceFeed",
    "create_feed_from_env",
    # Dashboard
    "Dashboard",
    "DashboardState",
    # Config
    "CoinboardConfig",
    "FeedMode",
    "ProviderType",
    "load_config_from_env",
    # Errors
    "PriceFeedError",
    "PriceFeedErrorCode",
    # Assets
    "AssetId",
    "AssetMeta",
    "ASSET_META",
    "DEFAULT_ASSETS",
    # Models
    "PricePoint",
    "PriceSeries",
    "PriceSnapshot",
    # Offline data
    "SyntheticProvider",
    "SyntheticState",
]


def create_feed_from_env(env_file: Path | str | None = None) -> PriceFeed:
    """Zero-config factory — reads mode flags and API key from env vars.

    See ``load_config_from_env`` for the variables read. With no variables
    set the feed runs offline on synthetic data.
    """
    return PriceFeed(load_config_from_env(env_file))
