"""Tests for the dashboard load cycle and refresh loop."""

import random
import threading
import time
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from coinboard.config import CoinboardConfig
from coinboard.dashboard import Dashboard
from coinboard.errors import PriceFeedError, PriceFeedErrorCode
from coinboard.feed import PriceFeed
from coinboard.providers.synthetic import SyntheticProvider

STAMP = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def feed() -> PriceFeed:
    return PriceFeed(
        CoinboardConfig(refresh_seconds=0.01),
        providers=[SyntheticProvider(rng=random.Random(11))],
    )


@pytest.fixture
def board(feed):
    with Dashboard(feed, history_hours=6, clock=lambda: STAMP) as dash:
        yield dash


class TestLoad:
    def test_initial_state(self, board):
        assert board.state.loading
        assert board.state.tickers is None

    def test_successful_cycle(self, board):
        state = board.load()
        assert [t.symbol for t in state.tickers] == ["BTC", "ETH", "DOGE"]
        assert len(state.series) == 24
        assert state.error is None
        assert state.last_updated == STAMP
        assert state.cycles == 1

    def test_failure_keeps_previous_data(self, board, monkeypatch):
        board.load()
        previous = board.state.tickers

        def fail(*args, **kwargs):
            raise PriceFeedError("CoinCap chart failed: 502", PriceFeedErrorCode.HTTP_ERROR)

        monkeypatch.setattr(board.feed, "get_history", fail)
        state = board.load()
        assert state.error == "CoinCap chart failed: 502"
        assert state.tickers is previous
        assert state.series is not None

    def test_error_cleared_on_next_success(self, board, monkeypatch):
        original = board.feed.get_snapshots
        monkeypatch.setattr(board.feed, "get_snapshots", MagicMock(side_effect=PriceFeedError("down")))
        assert board.load().error == "down"
        monkeypatch.setattr(board.feed, "get_snapshots", original)
        assert board.load().error is None

    def test_cycle_waits_for_both_requests(self, board, monkeypatch):
        finished = threading.Event()
        original = board.feed.get_history

        def slow_history(*args, **kwargs):
            time.sleep(0.05)
            finished.set()
            return original(*args, **kwargs)

        monkeypatch.setattr(board.feed, "get_snapshots", MagicMock(side_effect=PriceFeedError("down")))
        monkeypatch.setattr(board.feed, "get_history", slow_history)
        board.load()
        assert finished.is_set()

    def test_unexpected_error_is_recorded(self, board, monkeypatch):
        board.load()
        previous = board.state.series
        monkeypatch.setattr(board.feed, "get_snapshots", MagicMock(side_effect=AttributeError("no attribute 'get'")))
        state = board.load()
        assert state.error == "no attribute 'get'"
        assert state.series is previous
        assert state.cycles == 2

    def test_listeners_called(self, board):
        seen = []
        board.subscribe(lambda state: seen.append(state.cycles))
        board.load()
        board.load()
        assert seen == [1, 2]


class TestRun:
    def test_runs_requested_cycles(self, board):
        state = board.run(cycles=3)
        assert state.cycles == 3

    def test_refresh_interval_from_config(self, board):
        assert board.refresh_seconds == 0.01

    def test_stop_from_listener(self, feed):
        with Dashboard(feed, refresh_seconds=60) as board:
            board.subscribe(lambda state: board.stop() if state.cycles >= 2 else board.refresh())
            state = board.run()
        assert state.cycles == 2

    def test_unexpected_error_does_not_end_loop(self, board, monkeypatch):
        seen = []
        board.subscribe(lambda state: seen.append(state.error))
        monkeypatch.setattr(board.feed, "get_snapshots", MagicMock(side_effect=ValueError("bad row")))
        state = board.run(cycles=2)
        assert state.cycles == 2
        assert seen == ["bad row", "bad row"]


class TestSettings:
    def test_defaults_from_config(self, feed):
        with Dashboard(feed) as board:
            assert board.history_hours == feed.config.history_hours

    @pytest.mark.parametrize("hours", [0, -1, 48])
    def test_rejects_hours_out_of_range(self, feed, hours):
        with pytest.raises(PriceFeedError) as exc_info:
            Dashboard(feed, history_hours=hours)
        assert exc_info.value.code == PriceFeedErrorCode.INVALID_REQUEST

    def test_rejects_zero_interval(self, feed):
        with pytest.raises(PriceFeedError) as exc_info:
            Dashboard(feed, refresh_seconds=0)
        assert exc_info.value.code == PriceFeedErrorCode.INVALID_REQUEST

    def test_close_waits_for_running_requests(self, feed):
        finished = threading.Event()

        def slow():
            time.sleep(0.05)
            finished.set()

        board = Dashboard(feed)
        board._executor.submit(slow)
        board.close()
        assert finished.is_set()
