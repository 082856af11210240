"""Shared HTTP plumbing for the REST providers."""

from __future__ import annotations

import logging
from typing import Any

import requests

from coinboard.errors import PriceFeedError, PriceFeedErrorCode

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"accept": "application/json"}


def new_session() -> requests.Session:
    session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)
    try:
        import certifi
        session.verify = certifi.where()
    except ImportError:
        pass
    return session


class HttpClient:
    """Thin JSON GET wrapper that turns every failure into ``PriceFeedError``.

    All errors raised here are retryable: the feed decides whether another
    strategy is left to try.
    """

    def __init__(
        self,
        provider: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.provider = provider
        self.timeout = timeout
        self.session = session if session is not None else new_session()

    def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        logger.debug("%s GET %s params=%s", self.provider, url, params)
        try:
            resp = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise PriceFeedError(
                f"{self.provider} request failed: {exc}",
                code=PriceFeedErrorCode.NETWORK_ERROR,
                retryable=True,
            ) from exc

        self._check_response(resp)

        try:
            return resp.json()
        except ValueError as exc:
            raise PriceFeedError(
                f"{self.provider} returned malformed JSON: {exc}",
                code=PriceFeedErrorCode.PARSE_ERROR,
                retryable=True,
            ) from exc

    def _check_response(self, resp: Any) -> None:
        status = resp.status_code
        if 200 <= status < 300:
            return
        if status in (401, 403):
            raise PriceFeedError(
                f"{self.provider} authentication failed: {status}",
                code=PriceFeedErrorCode.AUTH_FAILED,
                retryable=True,
                status_code=status,
            )
        if status == 429:
            raise PriceFeedError(
                f"{self.provider} rate limited: {status}",
                code=PriceFeedErrorCode.RATE_LIMITED,
                retryable=True,
                status_code=status,
            )
        raise PriceFeedError(
            f"{self.provider} request failed: {status}",
            code=PriceFeedErrorCode.HTTP_ERROR,
            retryable=True,
            status_code=status,
        )


def records(provider: str, payload: Any, key: str = "data") -> list[dict[str, Any]]:
    """Extract the record array from a ``{"data": [...]}`` envelope."""
    if not isinstance(payload, dict):
        raise PriceFeedError(
            f"{provider} returned unexpected payload type {type(payload).__name__}",
            code=PriceFeedErrorCode.PARSE_ERROR,
            retryable=True,
        )
    rows = payload.get(key) or []
    if not isinstance(rows, list):
        raise PriceFeedError(
            f"{provider} field '{key}' is not a list",
            code=PriceFeedErrorCode.PARSE_ERROR,
            retryable=True,
        )
    for row in rows:
        if not isinstance(row, dict):
            raise PriceFeedError(
                f"{provider} record is not an object: {row!r}",
                code=PriceFeedErrorCode.PARSE_ERROR,
                retryable=True,
            )
    return rows
