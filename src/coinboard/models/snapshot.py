"""Price snapshot data model."""

from __future__ import annotations

from dataclasses import dataclass

from coinboard.assets import ASSET_META, AssetId


@dataclass(frozen=True)
class PriceSnapshot:
    """Point-in-time price reading for one asset.

    Attributes:
        asset: Asset the reading belongs to.
        name: Display name (e.g. "Bitcoin").
        symbol: Ticker symbol (e.g. "BTC").
        price_usd: Last price in USD.
        change_24h_pct: Signed percent change reported by the source.
            For synthetic data this is the change since the previous refresh.
        source: Provider that produced the reading.
    """

    asset: AssetId
    name: str
    symbol: str
    price_usd: float
    change_24h_pct: float
    source: str = "unknown"

    @classmethod
    def for_asset(
        cls,
        asset: AssetId,
        price_usd: float,
        change_24h_pct: float,
        source: str,
    ) -> PriceSnapshot:
        """Build a snapshot, filling name and symbol from ``ASSET_META``."""
        meta = ASSET_META[asset]
        return cls(
            asset=asset,
            name=meta.name,
            symbol=meta.symbol,
            price_usd=float(price_usd),
            change_24h_pct=float(change_24h_pct),
            source=source,
        )

    @property
    def is_up(self) -> bool:
        return self.change_24h_pct >= 0
