"""CoinGecko price provider (primary source).

Endpoints used:
    /simple/price                       bulk price + 24h change
    /coins/{id}/market_chart            hourly chart for the last day

An API key is optional for some deployments and is sent in the header
matching the account tier (``x-cg-api-key`` or ``x-cg-pro-api-key``).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta

import requests

from coinboard.assets import AssetId
from coinboard.config import COINGECKO_KEY_HEADERS, DEFAULT_COINGECKO_BASE_URL
from coinboard.errors import PriceFeedError, PriceFeedErrorCode
from coinboard.models.series import PricePoint, PriceSeries
from coinboard.models.snapshot import PriceSnapshot
from coinboard.providers.base import BasePriceProvider, round_half_up
from coinboard.providers.http import HttpClient

logger = logging.getLogger(__name__)


class CoinGeckoProvider(BasePriceProvider):
    """Fetch prices and hourly history from the CoinGecko v3 API.

    Capabilities: snapshots, history.
    """

    name = "coingecko"

    def __init__(
        self,
        base_url: str = DEFAULT_COINGECKO_BASE_URL,
        api_key: str | None = None,
        key_header: str = COINGECKO_KEY_HEADERS[0],
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.key_header = key_header
        self.http = HttpClient(self.name, timeout=timeout, session=session)

    def _headers(self) -> dict[str, str]:
        headers = {"accept": "application/json"}
        if self.api_key:
            headers[self.key_header] = self.api_key
        return headers

    # ------------------------------------------------------------ snapshots

    def get_snapshots(self, assets: Sequence[AssetId]) -> list[PriceSnapshot]:
        data = self.http.get_json(
            f"{self.base_url}/simple/price",
            params={
                "ids": ",".join(a.value for a in assets),
                "vs_currencies": "usd",
                "include_24hr_change": "true",
            },
            headers=self._headers(),
        )
        try:
            return [
                PriceSnapshot.for_asset(
                    asset,
                    price_usd=data[asset.value]["usd"],
                    change_24h_pct=data[asset.value]["usd_24h_change"],
                    source=self.name,
                )
                for asset in assets
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise PriceFeedError(
                f"CoinGecko price response is missing {exc}",
                code=PriceFeedErrorCode.PARSE_ERROR,
                retryable=True,
            ) from exc

    # -------------------------------------------------------------- history

    def get_history(self, asset: AssetId, hours: float, now: datetime) -> PriceSeries:
        data = self.http.get_json(
            f"{self.base_url}/coins/{asset.value}/market_chart",
            params={"vs_currency": "usd", "days": "1", "interval": "hourly"},
            headers=self._headers(),
        )
        try:
            points = [PricePoint.from_epoch_ms(ts, price) for ts, price in data["prices"]]
        except (KeyError, TypeError, ValueError) as exc:
            raise PriceFeedError(
                f"CoinGecko chart response is malformed: {exc}",
                code=PriceFeedErrorCode.PARSE_ERROR,
                retryable=True,
            ) from exc

        if not points:
            raise PriceFeedError(
                f"CoinGecko returned no chart points for {asset.value}",
                code=PriceFeedErrorCode.EMPTY_RESULT,
                retryable=True,
            )

        window_start = now - timedelta(hours=hours)
        recent = [p for p in points if p.timestamp >= window_start]
        if not recent:
            # Stale chart: fall back to the last few hourly points.
            keep = max(1, round_half_up(hours))
            logger.debug(
                "CoinGecko chart has no points after %s, keeping last %d",
                window_start.isoformat(), keep,
            )
            recent = points[-keep:]

        return PriceSeries(asset=asset, points=tuple(recent), source=self.name)
