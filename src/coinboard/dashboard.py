"""Dashboard refresh loop: periodic load cycles over a PriceFeed."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import datetime, timezone

from coinboard.assets import DEFAULT_ASSETS, AssetId
from coinboard.errors import PriceFeedError, PriceFeedErrorCode
from coinboard.feed import MAX_HISTORY_HOURS, PriceFeed
from coinboard.models.series import PriceSeries
from coinboard.models.snapshot import PriceSnapshot

logger = logging.getLogger(__name__)


@dataclass
class DashboardState:
    """What the dashboard currently shows.

    Attributes:
        tickers: Latest snapshots, or None before the first successful load.
        series: Latest history series, or None before the first successful load.
        error: Message of the failure from the most recent cycle, if any.
        last_updated: Time of the last successful cycle.
        cycles: Number of load cycles run so far.
    """

    tickers: list[PriceSnapshot] | None = None
    series: PriceSeries | None = None
    error: str | None = None
    last_updated: datetime | None = None
    cycles: int = 0

    @property
    def loading(self) -> bool:
        return self.tickers is None and self.error is None


class Dashboard:
    """Runs load cycles on an initial call, a timer, or an explicit refresh.

    A cycle fetches snapshots and history in parallel and completes only
    when both have finished. A failed cycle records its error and keeps
    the previously loaded data; the next cycle runs regardless.
    """

    def __init__(
        self,
        feed: PriceFeed,
        history_hours: float | None = None,
        refresh_seconds: float | None = None,
        assets: Sequence[AssetId] = DEFAULT_ASSETS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.feed = feed
        if history_hours is None:
            history_hours = feed.config.history_hours
        if refresh_seconds is None:
            refresh_seconds = feed.config.refresh_seconds
        if not 0 < history_hours <= MAX_HISTORY_HOURS:
            raise PriceFeedError(
                f"hours must be in (0, {MAX_HISTORY_HOURS:g}], got {history_hours}",
                code=PriceFeedErrorCode.INVALID_REQUEST,
            )
        if refresh_seconds <= 0:
            raise PriceFeedError(
                f"refresh interval must be positive, got {refresh_seconds}",
                code=PriceFeedErrorCode.INVALID_REQUEST,
            )
        self.history_hours = history_hours
        self.refresh_seconds = refresh_seconds
        self.assets = tuple(assets)
        self.state = DashboardState()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._listeners: list[Callable[[DashboardState], None]] = []
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="coinboard")
        self._wake = threading.Event()
        self._stop = threading.Event()

    def subscribe(self, callback: Callable[[DashboardState], None]) -> None:
        """Call ``callback(state)`` after every load cycle."""
        self._listeners.append(callback)

    def load(self) -> DashboardState:
        """Run one load cycle and return the updated state."""
        self.state.error = None
        snapshots = self._executor.submit(self.feed.get_snapshots, self.assets)
        history = self._executor.submit(self.feed.get_history, self.history_hours)
        wait([snapshots, history])

        try:
            tickers = snapshots.result()
            series = history.result()
        except PriceFeedError as exc:
            logger.error("Load cycle failed: %s", exc)
            self.state.error = str(exc)
        except Exception as exc:
            logger.exception("Load cycle failed unexpectedly")
            self.state.error = str(exc) or type(exc).__name__
        else:
            self.state.tickers = tickers
            self.state.series = series
            self.state.last_updated = self._clock()

        self.state.cycles += 1
        for callback in self._listeners:
            callback(self.state)
        return self.state

    def refresh(self) -> None:
        """Wake the loop and run a cycle now instead of at the next tick."""
        self._wake.set()

    def stop(self) -> None:
        self._stop.set()
        self._wake.set()

    def run(self, cycles: int | None = None) -> DashboardState:
        """Load immediately, then every ``refresh_seconds`` until stopped.

        Args:
            cycles: Stop after this many cycles (None runs until ``stop()``).
        """
        self._stop.clear()
        count = 0
        while not self._stop.is_set():
            self.load()
            count += 1
            if cycles is not None and count >= cycles:
                break
            self._wake.wait(self.refresh_seconds)
            self._wake.clear()
        return self.state

    def close(self) -> None:
        self.stop()
        self._executor.shutdown(wait=True)

    def __enter__(self) -> Dashboard:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
