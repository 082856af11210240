"""Tests for HTTP status mapping shared by the REST providers."""

from unittest.mock import MagicMock

import pytest
import requests

from coinboard.errors import PriceFeedError, PriceFeedErrorCode
from coinboard.providers.http import HttpClient, records


class TestHttpClient:
    def test_returns_json(self, make_session, respond):
        client = HttpClient("coingecko", session=make_session(respond({"ok": 1})))
        assert client.get_json("https://example.test/x") == {"ok": 1}

    def test_passes_timeout_and_headers(self, make_session, respond):
        session = make_session(respond({}))
        client = HttpClient("coingecko", timeout=3.5, session=session)
        client.get_json("https://example.test/x", params={"a": 1}, headers={"h": "v"})
        _, kwargs = session.get.call_args
        assert kwargs["timeout"] == 3.5
        assert kwargs["params"] == {"a": 1}
        assert kwargs["headers"] == {"h": "v"}

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_failure(self, make_session, respond, status):
        client = HttpClient("coingecko", session=make_session(respond({}, status)))
        with pytest.raises(PriceFeedError) as exc_info:
            client.get_json("https://example.test/x")
        assert exc_info.value.code == PriceFeedErrorCode.AUTH_FAILED
        assert exc_info.value.status_code == status
        assert exc_info.value.retryable

    def test_rate_limited(self, make_session, respond):
        client = HttpClient("coincap", session=make_session(respond({}, 429)))
        with pytest.raises(PriceFeedError) as exc_info:
            client.get_json("https://example.test/x")
        assert exc_info.value.code == PriceFeedErrorCode.RATE_LIMITED

    def test_other_status(self, make_session, respond):
        client = HttpClient("coincap", session=make_session(respond({}, 503)))
        with pytest.raises(PriceFeedError) as exc_info:
            client.get_json("https://example.test/x")
        assert exc_info.value.code == PriceFeedErrorCode.HTTP_ERROR
        assert "503" in str(exc_info.value)

    def test_network_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("connection refused")
        client = HttpClient("coincap", session=session)
        with pytest.raises(PriceFeedError) as exc_info:
            client.get_json("https://example.test/x")
        assert exc_info.value.code == PriceFeedErrorCode.NETWORK_ERROR
        assert exc_info.value.retryable

    def test_bad_json(self, make_session, respond):
        client = HttpClient("coincap", session=make_session(respond(bad_json=True)))
        with pytest.raises(PriceFeedError) as exc_info:
            client.get_json("https://example.test/x")
        assert exc_info.value.code == PriceFeedErrorCode.PARSE_ERROR


class TestRecords:
    def test_missing_data_is_empty(self):
        assert records("coincap", {}) == []
        assert records("coincap", {"data": None}) == []

    def test_non_dict_payload(self):
        with pytest.raises(PriceFeedError) as exc_info:
            records("coincap", ["not", "an", "envelope"])
        assert exc_info.value.code == PriceFeedErrorCode.PARSE_ERROR

    @pytest.mark.parametrize("row", ["oops", None, 42])
    def test_non_dict_record(self, row):
        with pytest.raises(PriceFeedError) as exc_info:
            records("coincap", {"data": [{"id": "bitcoin"}, row]})
        assert exc_info.value.code == PriceFeedErrorCode.PARSE_ERROR
        assert exc_info.value.retryable
