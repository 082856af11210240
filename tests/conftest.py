"""Shared fixtures for coinboard tests."""

from __future__ import annotations

import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

# Ensure src/ is on the path for editable-style imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from coinboard.models.series import epoch_ms
from coinboard.providers.synthetic import SyntheticProvider, SyntheticState

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
STEP = timedelta(minutes=15)


class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(self, payload: Any = None, status_code: int = 200, bad_json: bool = False) -> None:
        self.payload = payload
        self.status_code = status_code
        self.bad_json = bad_json

    def json(self) -> Any:
        if self.bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def respond():
    """Build a fake response: ``respond(payload, status)``."""
    def _make(payload: Any = None, status: int = 200, bad_json: bool = False) -> FakeResponse:
        return FakeResponse(payload, status, bad_json)
    return _make


@pytest.fixture
def make_session():
    """Session whose ``get`` returns the given responses in order."""
    def _make(*responses: Any) -> MagicMock:
        session = MagicMock()
        session.get.side_effect = list(responses)
        return session
    return _make


@pytest.fixture
def synthetic_provider() -> SyntheticProvider:
    return SyntheticProvider(state=SyntheticState(), rng=random.Random(42))


@pytest.fixture
def coingecko_prices() -> dict[str, Any]:
    return {
        "bitcoin": {"usd": 64210.5, "usd_24h_change": 1.25},
        "ethereum": {"usd": 3412.1, "usd_24h_change": -0.8},
        "dogecoin": {"usd": 0.118, "usd_24h_change": 3.1},
    }


@pytest.fixture
def coincap_assets() -> dict[str, Any]:
    # CoinCap returns numbers as strings and in its own order.
    return {
        "data": [
            {"id": "dogecoin", "priceUsd": "0.1175", "changePercent24Hr": "2.9"},
            {"id": "bitcoin", "priceUsd": "64190.12", "changePercent24Hr": "1.1"},
            {"id": "ethereum", "priceUsd": "3410.55", "changePercent24Hr": "-0.75"},
        ]
    }


def history_rows(count: int, end: datetime = NOW, start_price: float = 64000.0) -> list[dict[str, Any]]:
    """CoinCap /history rows at 15-minute spacing ending at ``end``."""
    return [
        {"priceUsd": str(start_price + i), "time": epoch_ms(end - (count - 1 - i) * STEP)}
        for i in range(count)
    ]


def candle_rows(count: int, end: datetime = NOW) -> list[dict[str, Any]]:
    return [
        {"period": epoch_ms(end - (count - 1 - i) * STEP), "close": 64000.0 + i}
        for i in range(count)
    ]


def chart_prices(count: int, end: datetime = NOW, step: timedelta = timedelta(hours=1)) -> list[list[float]]:
    """CoinGecko market_chart ``prices`` pairs ending at ``end``."""
    return [
        [epoch_ms(end - (count - 1 - i) * step), 64000.0 + i * 10]
        for i in range(count)
    ]


@pytest.fixture
def history_payload():
    def _make(count: int, end: datetime = NOW) -> dict[str, Any]:
        return {"data": history_rows(count, end)}
    return _make


@pytest.fixture
def candle_payload():
    def _make(count: int, end: datetime = NOW) -> dict[str, Any]:
        return {"data": candle_rows(count, end)}
    return _make


@pytest.fixture
def chart_payload():
    def _make(count: int, end: datetime = NOW, step: timedelta = timedelta(hours=1)) -> dict[str, Any]:
        return {"prices": chart_prices(count, end, step)}
    return _make
