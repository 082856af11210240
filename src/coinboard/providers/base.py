"""Abstract base class for price providers."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta

from coinboard.assets import AssetId
from coinboard.models.series import PriceSeries
from coinboard.models.snapshot import PriceSnapshot

HISTORY_STEP = timedelta(minutes=15)

SnapshotFetch = Callable[[Sequence[AssetId]], list[PriceSnapshot]]
HistoryFetch = Callable[[AssetId, float, datetime], PriceSeries]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (``2.5 -> 3``)."""
    return math.floor(value + 0.5)


def point_count(hours: float) -> int:
    """Number of 15-minute points that cover ``hours``."""
    return max(1, round_half_up(hours * 60 / 15))


class BasePriceProvider(ABC):
    """Abstract base for all price providers.

    Providers raise ``PriceFeedError`` for every failure. Failures that a
    later strategy might recover from are raised with ``retryable=True``.
    """

    name = "base"

    @abstractmethod
    def get_snapshots(self, assets: Sequence[AssetId]) -> list[PriceSnapshot]:
        """Fetch current price and 24h change.

        Args:
            assets: Assets to fetch.

        Returns:
            One snapshot per asset, in the order of ``assets``.
        """
        ...

    @abstractmethod
    def get_history(self, asset: AssetId, hours: float, now: datetime) -> PriceSeries:
        """Fetch recent price history.

        Args:
            asset: Asset to fetch.
            hours: Window length ending at ``now``.
            now: Reference time (timezone-aware).

        Returns:
            Non-empty series ordered oldest first.
        """
        ...

    def snapshot_strategies(self) -> list[tuple[str, SnapshotFetch]]:
        """Ordered snapshot strategies contributed by this provider."""
        return [(f"{self.name}.snapshots", self.get_snapshots)]

    def history_strategies(self) -> list[tuple[str, HistoryFetch]]:
        """Ordered history strategies contributed by this provider."""
        return [(f"{self.name}.history", self.get_history)]

    def capabilities(self) -> set[str]:
        """Return the set of supported features: ``snapshots``, ``history``."""
        return {"snapshots", "history"}
