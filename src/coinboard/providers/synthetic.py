"""Synthetic provider for offline use and CI — never touches the network."""

from __future__ import annotations

import random
import threading
from collections.abc import Mapping, Sequence
from datetime import datetime

from coinboard.assets import AssetId
from coinboard.models.series import PricePoint, PriceSeries
from coinboard.models.snapshot import PriceSnapshot
from coinboard.providers.base import HISTORY_STEP, BasePriceProvider, point_count

BASE_PRICES: dict[AssetId, float] = {
    AssetId.BITCOIN: 65000.0,
    AssetId.ETHEREUM: 3500.0,
    AssetId.DOGECOIN: 0.12,
}

# Max fractional move per refresh.
VOLATILITY: dict[AssetId, float] = {
    AssetId.BITCOIN: 0.008,
    AssetId.ETHEREUM: 0.012,
    AssetId.DOGECOIN: 0.02,
}

HISTORY_VOLATILITY = 0.004
HISTORY_DISCOUNT = 0.98
MIN_PRICE = 1e-7


def random_walk(prev: float, volatility: float, rng: random.Random) -> float:
    """One multiplicative step, uniform in +/- ``volatility``, floored above zero."""
    change = rng.uniform(-volatility, volatility)
    return max(prev * (1 + change), MIN_PRICE)


class SyntheticState:
    """Last synthetic price per asset, shared by every call on one provider.

    Seeded from ``BASE_PRICES`` and kept in memory only.
    """

    def __init__(self, base_prices: Mapping[AssetId, float] | None = None) -> None:
        self._prices: dict[AssetId, float] = dict(base_prices or BASE_PRICES)
        self._lock = threading.Lock()

    def last_price(self, asset: AssetId) -> float:
        with self._lock:
            return self._prices[asset]

    def advance(
        self,
        assets: Sequence[AssetId],
        rng: random.Random,
    ) -> list[tuple[AssetId, float, float]]:
        """Walk each asset one step; return ``(asset, previous, current)``."""
        moves: list[tuple[AssetId, float, float]] = []
        with self._lock:
            for asset in assets:
                prev = self._prices[asset]
                curr = random_walk(prev, VOLATILITY[asset], rng)
                self._prices[asset] = curr
                moves.append((asset, prev, curr))
        return moves


class SyntheticProvider(BasePriceProvider):
    """Random-walk prices and history seeded from fixed base prices.

    Pass ``rng=random.Random(seed)`` for reproducible output.
    """

    name = "synthetic"

    def __init__(
        self,
        state: SyntheticState | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.state = state or SyntheticState()
        self.rng = rng or random.Random()

    def get_snapshots(self, assets: Sequence[AssetId]) -> list[PriceSnapshot]:
        # The reported change is the move since the previous refresh, not 24h.
        return [
            PriceSnapshot.for_asset(
                asset,
                price_usd=curr,
                change_24h_pct=(curr - prev) / prev * 100,
                source=self.name,
            )
            for asset, prev, curr in self.state.advance(assets, self.rng)
        ]

    def get_history(self, asset: AssetId, hours: float, now: datetime) -> PriceSeries:
        count = point_count(hours)
        price = self.state.last_price(asset) * HISTORY_DISCOUNT
        points: list[PricePoint] = []
        for i in range(count - 1, -1, -1):
            price = random_walk(price, HISTORY_VOLATILITY, self.rng)
            points.append(PricePoint(timestamp=now - i * HISTORY_STEP, price=price))
        return PriceSeries(asset=asset, points=tuple(points), source=self.name)
