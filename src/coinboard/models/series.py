"""Historical price series data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

import pandas as pd

from coinboard.assets import AssetId

LABEL_FORMAT = "%H:%M"


@dataclass(frozen=True)
class PricePoint:
    """Single (timestamp, price) observation.

    Attributes:
        timestamp: Observation time (timezone-aware, UTC).
        price: Price in USD.
    """

    timestamp: datetime
    price: float

    @classmethod
    def from_epoch_ms(cls, epoch_ms: float, price: float | str) -> PricePoint:
        return cls(
            timestamp=datetime.fromtimestamp(float(epoch_ms) / 1000, tz=timezone.utc),
            price=float(price),
        )

    @property
    def label(self) -> str:
        """Local wall-clock hour:minute."""
        return self.timestamp.astimezone().strftime(LABEL_FORMAT)


@dataclass(frozen=True)
class PriceSeries:
    """Chronological price history for one asset, oldest first.

    Consumers that chart the series read the parallel ``labels`` and
    ``prices`` sequences, which always have the same length.
    """

    asset: AssetId
    points: tuple[PricePoint, ...] = field(default_factory=tuple)
    source: str = "unknown"

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.points, key=lambda p: p.timestamp))
        object.__setattr__(self, "points", ordered)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def labels(self) -> list[str]:
        return [p.label for p in self.points]

    @property
    def prices(self) -> list[float]:
        return [p.price for p in self.points]

    @property
    def is_empty(self) -> bool:
        return not self.points

    def tail(self, n: int) -> PriceSeries:
        """Keep only the ``n`` most recent points."""
        if n <= 0:
            return PriceSeries(asset=self.asset, points=(), source=self.source)
        return PriceSeries(asset=self.asset, points=self.points[-n:], source=self.source)

    def to_frame(self) -> pd.DataFrame:
        """Return the series as a DataFrame indexed by timestamp."""
        df = pd.DataFrame(
            {
                "timestamp": [p.timestamp for p in self.points],
                "price": self.prices,
            }
        )
        return df.set_index("timestamp")


def epoch_ms(ts: datetime) -> int:
    """Milliseconds since the Unix epoch for an aware datetime."""
    return int(ts.timestamp() * 1000)
