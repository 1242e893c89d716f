"""Tests for sitrep.ingest.fetch_with_retry (requests.get and sleep patched)."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from sitrep.ingest import USER_AGENT, fetch_with_retry


def resp(status, headers=None):
    r = MagicMock()
    r.status_code = status
    r.headers = headers or {}
    if status >= 400:
        r.raise_for_status.side_effect = requests.HTTPError(f"HTTP {status}")
    return r


@pytest.fixture()
def sleep():
    with patch("sitrep.ingest.time.sleep") as s:
        yield s


class TestFetchWithRetry:

    def test_success_sends_user_agent(self, sleep):
        with patch("sitrep.ingest.requests.get", return_value=resp(200)) as get:
            fetch_with_retry("https://example.test/feed", params={"a": 1})
        assert get.call_args.kwargs["headers"] == {"User-Agent": USER_AGENT}
        assert get.call_args.kwargs["params"] == {"a": 1}
        sleep.assert_not_called()

    def test_retries_5xx_then_succeeds(self, sleep):
        with patch("sitrep.ingest.requests.get", side_effect=[resp(503), resp(200)]) as get:
            assert fetch_with_retry("https://example.test", backoff=1.0).status_code == 200
        assert get.call_count == 2
        sleep.assert_called_once_with(1.0)

    def test_honours_retry_after_on_429(self, sleep):
        with patch("sitrep.ingest.requests.get",
                   side_effect=[resp(429, {"Retry-After": "7"}), resp(200)]):
            fetch_with_retry("https://example.test")
        sleep.assert_called_once_with(7.0)

    def test_retry_after_capped(self, sleep):
        with patch("sitrep.ingest.requests.get",
                   side_effect=[resp(429, {"Retry-After": "3600"}), resp(200)]):
            fetch_with_retry("https://example.test")
        sleep.assert_called_once_with(30.0)

    def test_4xx_raises_immediately(self, sleep):
        with patch("sitrep.ingest.requests.get", return_value=resp(404)) as get:
            with pytest.raises(requests.HTTPError):
                fetch_with_retry("https://example.test")
        assert get.call_count == 1

    def test_network_errors_exhaust_retries(self, sleep):
        with patch("sitrep.ingest.requests.get",
                   side_effect=requests.ConnectionError("down")) as get:
            with pytest.raises(requests.ConnectionError):
                fetch_with_retry("https://example.test", retries=2)
        assert get.call_count == 3
        assert sleep.call_count == 2

    def test_persistent_5xx_raises_http_error(self, sleep):
        with patch("sitrep.ingest.requests.get", return_value=resp(502)):
            with pytest.raises(requests.HTTPError):
                fetch_with_retry("https://example.test", retries=1)
