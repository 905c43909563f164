"""Tests for the HTTP feed source."""

import logging

import pytest
import requests

from print_gtfs_rt.config import Config
from print_gtfs_rt.errors import FetchError
from print_gtfs_rt.fetch import FeedFetcher

URL = "https://example.org/gtfs-rt.pbf"


class FakeResponse:
    def __init__(self, content=b"", status_code=200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Server Error")


class FakeSession:
    def __init__(self, *results):
        self.results = list(results)
        self.requests = []

    def get(self, url, timeout=None):
        self.requests.append((url, timeout))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def sleeps(monkeypatch):
    calls = []
    monkeypatch.setattr("print_gtfs_rt.fetch.time.sleep", calls.append)
    return calls


def test_fetch_success(sleeps):
    session = FakeSession(FakeResponse(b"feed"))
    fetcher = FeedFetcher(Config(url=URL, request_timeout_seconds=5.0), session=session)

    assert fetcher.fetch_feed() == b"feed"
    assert session.requests == [(URL, 5.0)]
    assert sleeps == []


def test_fetch_retries_with_backoff(sleeps):
    session = FakeSession(
        requests.exceptions.ConnectionError("refused"),
        FakeResponse(status_code=503),
        FakeResponse(b"feed"),
    )
    fetcher = FeedFetcher(Config(url=URL, max_retries=3), session=session)

    assert fetcher.fetch_feed() == b"feed"
    assert sleeps == [1.0, 2.0]


def test_fetch_gives_up_with_last_error_chained(sleeps):
    last = requests.exceptions.Timeout("still slow")
    session = FakeSession(requests.exceptions.Timeout("slow"), requests.exceptions.Timeout("slow"), last)
    fetcher = FeedFetcher(Config(url=URL, max_retries=3), session=session)

    with pytest.raises(FetchError, match="after 3 attempts: still slow") as exc:
        fetcher.fetch_feed()

    assert exc.value.__cause__ is last
    assert len(session.requests) == 3
    assert sleeps == [1.0, 2.0]


def test_failed_attempts_are_logged_at_debug(sleeps, caplog):
    session = FakeSession(requests.exceptions.ConnectionError("refused"), FakeResponse(b"feed"))
    fetcher = FeedFetcher(Config(url=URL, max_retries=2), session=session)

    with caplog.at_level(logging.DEBUG, logger="print_gtfs_rt.fetch"):
        fetcher.fetch_feed()

    assert "Fetch attempt 1/2 failed: refused" in caplog.text
    assert all(record.levelno == logging.DEBUG for record in caplog.records)
