"""Price feed configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from coinboard.errors import PriceFeedError, PriceFeedErrorCode

DEFAULT_COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"
DEFAULT_COINCAP_BASE_URL = "https://api.coincap.io/v2"

# Free/demo keys use the first header, paid plans the second.
COINGECKO_KEY_HEADERS = ("x-cg-api-key", "x-cg-pro-api-key")

_TRUTHY = {"1", "true", "yes", "on"}


class ProviderType(Enum):
    """Supported price provider backends."""

    COINGECKO = "coingecko"
    COINCAP = "coincap"
    SYNTHETIC = "synthetic"


class FeedMode(Enum):
    """How the feed is allowed to source data."""

    OFFLINE = "offline"
    COINCAP_ONLY = "coincap_only"
    FULL = "full"


@dataclass
class CoinboardConfig:
    """Configuration for PriceFeed and the dashboard.

    Attributes:
        enable_api: Allow network access. When False only synthetic data is served.
        coincap_only: Skip CoinGecko and use CoinCap exclusively.
        coingecko_api_key: Optional CoinGecko API key.
        coingecko_key_header: Header the key is sent in (depends on plan tier).
        coingecko_base_url: CoinGecko REST root.
        coincap_base_url: CoinCap REST root.
        timeout_seconds: Per-request HTTP timeout.
        refresh_seconds: Dashboard refresh interval.
        history_hours: Default history window for the chart.
        candle_exchange: Exchange used for the CoinCap candle fallback.
        candle_quote: Quote asset id used for the CoinCap candle fallback.
    """

    enable_api: bool = False
    coincap_only: bool = False
    coingecko_api_key: str | None = None
    coingecko_key_header: str = COINGECKO_KEY_HEADERS[0]
    coingecko_base_url: str = DEFAULT_COINGECKO_BASE_URL
    coincap_base_url: str = DEFAULT_COINCAP_BASE_URL
    timeout_seconds: float = 10.0
    refresh_seconds: float = 30.0
    history_hours: float = 6.0
    candle_exchange: str = "binance"
    candle_quote: str = "tether"

    @property
    def mode(self) -> FeedMode:
        if not self.enable_api:
            return FeedMode.OFFLINE
        if self.coincap_only:
            return FeedMode.COINCAP_ONLY
        return FeedMode.FULL

    def provider_chain(self) -> list[ProviderType]:
        """Provider backends ordered by priority for the current mode."""
        mode = self.mode
        if mode is FeedMode.OFFLINE:
            return [ProviderType.SYNTHETIC]
        if mode is FeedMode.COINCAP_ONLY:
            return [ProviderType.COINCAP]
        return [ProviderType.COINGECKO, ProviderType.COINCAP]


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise PriceFeedError(
            f"{name} must be a number, got {raw!r}",
            code=PriceFeedErrorCode.INVALID_CONFIG,
        ) from exc


def load_config_from_env(env_file: Path | str | None = None) -> CoinboardConfig:
    """Resolve configuration from environment variables.

    Environment variables:
        COINBOARD_ENABLE_API: Allow live API calls (default: false, offline).
        COINBOARD_USE_COINCAP_ONLY: Use CoinCap exclusively (default: false).
        COINGECKO_API_KEY: CoinGecko API key.
        COINGECKO_API_KEY_HEADER: "x-cg-api-key" (default) or "x-cg-pro-api-key".
        COINGECKO_BASE_URL / COINCAP_BASE_URL: Override REST roots.
        COINBOARD_HTTP_TIMEOUT: Request timeout in seconds (default: 10).
        COINBOARD_REFRESH_SECONDS: Dashboard refresh interval (default: 30).
        COINBOARD_HISTORY_HOURS: Chart window in hours (default: 6).
        COINCAP_CANDLE_EXCHANGE / COINCAP_CANDLE_QUOTE: Candle fallback market.

    Args:
        env_file: Optional ``.env`` file loaded first. Variables already set
            in the process environment take precedence.
    """
    if env_file is not None:
        load_dotenv(env_file, override=False)

    key_header = os.getenv("COINGECKO_API_KEY_HEADER", COINGECKO_KEY_HEADERS[0]).strip()
    if key_header.lower() not in COINGECKO_KEY_HEADERS:
        raise PriceFeedError(
            f"COINGECKO_API_KEY_HEADER must be one of {list(COINGECKO_KEY_HEADERS)}, "
            f"got {key_header!r}",
            code=PriceFeedErrorCode.INVALID_CONFIG,
        )

    return CoinboardConfig(
        enable_api=_env_bool("COINBOARD_ENABLE_API"),
        coincap_only=_env_bool("COINBOARD_USE_COINCAP_ONLY"),
        coingecko_api_key=os.getenv("COINGECKO_API_KEY") or None,
        coingecko_key_header=key_header.lower(),
        coingecko_base_url=os.getenv("COINGECKO_BASE_URL", DEFAULT_COINGECKO_BASE_URL),
        coincap_base_url=os.getenv("COINCAP_BASE_URL", DEFAULT_COINCAP_BASE_URL),
        timeout_seconds=_env_float("COINBOARD_HTTP_TIMEOUT", 10.0),
        refresh_seconds=_env_float("COINBOARD_REFRESH_SECONDS", 30.0),
        history_hours=_env_float("COINBOARD_HISTORY_HOURS", 6.0),
        candle_exchange=os.getenv("COINCAP_CANDLE_EXCHANGE", "binance"),
        candle_quote=os.getenv("COINCAP_CANDLE_QUOTE", "tether"),
    )
