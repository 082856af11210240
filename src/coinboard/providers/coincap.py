"""CoinCap price provider (secondary source, no API key).

Endpoints used:
    /assets                     bulk price + 24h change (string-typed numbers)
    /assets/{id}/history        15-minute history, optionally ranged
    /candles                    aggregated exchange candles

History is served by two strategies. The history endpoint is tried with an
explicit start/end range first and without one if that request fails. The
candle endpoint is a separate, later strategy that tries 15-minute candles
and then hourly candles.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Any

import requests

from coinboard.assets import AssetId
from coinboard.config import DEFAULT_COINCAP_BASE_URL
from coinboard.errors import PriceFeedError, PriceFeedErrorCode
from coinboard.models.series import PricePoint, PriceSeries, epoch_ms
from coinboard.models.snapshot import PriceSnapshot
from coinboard.providers.base import BasePriceProvider, HistoryFetch
from coinboard.providers.http import HttpClient, records

logger = logging.getLogger(__name__)


class CoinCapProvider(BasePriceProvider):
    """Fetch prices, history and candles from the CoinCap v2 API.

    Capabilities: snapshots, history, candles.
    """

    name = "coincap"

    def __init__(
        self,
        base_url: str = DEFAULT_COINCAP_BASE_URL,
        timeout: float = 10.0,
        session: requests.Session | None = None,
        candle_exchange: str = "binance",
        candle_quote: str = "tether",
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.candle_exchange = candle_exchange
        self.candle_quote = candle_quote
        self.http = HttpClient(self.name, timeout=timeout, session=session)

    def capabilities(self) -> set[str]:
        return {"snapshots", "history", "candles"}

    def history_strategies(self) -> list[tuple[str, HistoryFetch]]:
        return [
            (f"{self.name}.history", self.get_history),
            (f"{self.name}.candles", self.get_candles),
        ]

    # ------------------------------------------------------------ snapshots

    def get_snapshots(self, assets: Sequence[AssetId]) -> list[PriceSnapshot]:
        payload = self.http.get_json(
            f"{self.base_url}/assets",
            params={"ids": ",".join(a.value for a in assets)},
        )
        by_id = {row.get("id"): row for row in records(self.name, payload)}

        snapshots: list[PriceSnapshot] = []
        for asset in assets:
            row = by_id.get(asset.value)
            if row is None:
                raise PriceFeedError(
                    f"CoinCap response has no record for {asset.value}",
                    code=PriceFeedErrorCode.PARSE_ERROR,
                    retryable=True,
                )
            try:
                snapshots.append(PriceSnapshot.for_asset(
                    asset,
                    price_usd=float(row["priceUsd"]),
                    change_24h_pct=float(row["changePercent24Hr"]),
                    source=self.name,
                ))
            except (KeyError, TypeError, ValueError) as exc:
                raise PriceFeedError(
                    f"CoinCap record for {asset.value} is malformed: {exc}",
                    code=PriceFeedErrorCode.PARSE_ERROR,
                    retryable=True,
                ) from exc
        return snapshots

    # -------------------------------------------------------------- history

    def get_history(self, asset: AssetId, hours: float, now: datetime) -> PriceSeries:
        url = f"{self.base_url}/assets/{asset.value}/history"
        start, end = self._range(hours, now)
        try:
            payload = self.http.get_json(
                url, params={"interval": "m15", "start": start, "end": end},
            )
        except PriceFeedError as exc:
            if not exc.retryable:
                raise
            logger.warning("CoinCap ranged history failed (%s), retrying without range", exc)
            payload = self.http.get_json(url, params={"interval": "m15"})

        points = self._parse(payload, time_key="time", price_key="priceUsd")
        if not points:
            raise PriceFeedError(
                f"CoinCap returned no history for {asset.value}",
                code=PriceFeedErrorCode.EMPTY_RESULT,
                retryable=True,
            )
        return PriceSeries(asset=asset, points=tuple(points), source=self.name)

    # -------------------------------------------------------------- candles

    def get_candles(self, asset: AssetId, hours: float, now: datetime) -> PriceSeries:
        """Close prices from exchange candles, 15-minute then hourly."""
        start, end = self._range(hours, now)
        params: dict[str, Any] = {
            "exchange": self.candle_exchange,
            "interval": "m15",
            "baseId": asset.value,
            "quoteId": self.candle_quote,
            "start": start,
            "end": end,
        }
        url = f"{self.base_url}/candles"
        try:
            payload = self.http.get_json(url, params=params)
        except PriceFeedError as exc:
            if not exc.retryable:
                raise
            logger.warning("CoinCap 15-minute candles failed (%s), trying hourly", exc)
            payload = self.http.get_json(url, params={**params, "interval": "h1"})

        points = self._parse(payload, time_key="period", price_key="close")
        if not points:
            raise PriceFeedError(
                f"CoinCap returned no candles for {asset.value}",
                code=PriceFeedErrorCode.EMPTY_RESULT,
                retryable=True,
            )
        return PriceSeries(asset=asset, points=tuple(points), source=f"{self.name}.candles")

    # ------------------------------------------------------------- helpers

    @staticmethod
    def _range(hours: float, now: datetime) -> tuple[int, int]:
        return epoch_ms(now - timedelta(hours=hours)), epoch_ms(now)

    def _parse(self, payload: Any, time_key: str, price_key: str) -> list[PricePoint]:
        try:
            return [
                PricePoint.from_epoch_ms(row[time_key], row[price_key])
                for row in records(self.name, payload)
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise PriceFeedError(
                f"CoinCap {time_key}/{price_key} record is malformed: {exc}",
                code=PriceFeedErrorCode.PARSE_ERROR,
                retryable=True,
            ) from exc
