"""Tracked assets and their display metadata."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from coinboard.errors import PriceFeedError, PriceFeedErrorCode


class AssetId(Enum):
    """Assets shown on the dashboard, keyed by provider asset id."""

    BITCOIN = "bitcoin"
    ETHEREUM = "ethereum"
    DOGECOIN = "dogecoin"


@dataclass(frozen=True)
class AssetMeta:
    """Display name and ticker symbol for an asset."""

    name: str
    symbol: str


ASSET_META: dict[AssetId, AssetMeta] = {
    AssetId.BITCOIN: AssetMeta(name="Bitcoin", symbol="BTC"),
    AssetId.ETHEREUM: AssetMeta(name="Ethereum", symbol="ETH"),
    AssetId.DOGECOIN: AssetMeta(name="Dogecoin", symbol="DOGE"),
}

DEFAULT_ASSETS: tuple[AssetId, ...] = (
    AssetId.BITCOIN,
    AssetId.ETHEREUM,
    AssetId.DOGECOIN,
)


def parse_asset(value: AssetId | str) -> AssetId:
    """Accept an AssetId, a provider id ("bitcoin") or a ticker ("BTC")."""
    if isinstance(value, AssetId):
        return value
    key = value.strip()
    for asset, meta in ASSET_META.items():
        if key.lower() == asset.value or key.upper() == meta.symbol:
            return asset
    raise PriceFeedError(
        f"Unknown asset: {value!r}. Valid: {[a.value for a in AssetId]}",
        code=PriceFeedErrorCode.INVALID_REQUEST,
    )
