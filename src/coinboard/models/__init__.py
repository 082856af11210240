"""Price feed models."""

from coinboard.models.series import PricePoint, PriceSeries
from coinboard.models.snapshot import PriceSnapshot

__all__ = [
    "PricePoint",
    "PriceSeries",
    "PriceSnapshot",
]
