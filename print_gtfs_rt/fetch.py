"""
HTTP feed source.

Fetches a GTFS-RT feed over HTTP so it can be printed without piping it
through curl first.
"""

import logging
import time
from typing import Optional

import requests

from .config import Config
from .errors import FetchError

logger = logging.getLogger(__name__)


class FeedFetcher:
    """Fetches the raw GTFS-RT feed bytes from a URL, with retries."""

    def __init__(self, config: Config, session: Optional[requests.Session] = None):
        self.config = config
        self._session = session or requests.Session()

    def fetch_feed(self) -> bytes:
        """Fetch the raw feed body.

        Failed attempts are retried with exponential backoff. Only the final
        failure is reported, as a FetchError chained to the last requests
        exception.

        :raises FetchError: once config.max_retries attempts have failed
        """
        url = self.config.url
        last_error: Optional[requests.exceptions.RequestException] = None

        for attempt in range(self.config.max_retries):
            if attempt:
                delay = self.config.retry_backoff_seconds * (2 ** (attempt - 1))
                logger.debug(f"Retrying {url} in {delay:.1f}s")
                time.sleep(delay)
            try:
                response = self._session.get(url, timeout=self.config.request_timeout_seconds)
                response.raise_for_status()
            except requests.exceptions.RequestException as e:
                logger.debug(f"Fetch attempt {attempt + 1}/{self.config.max_retries} failed: {e}")
                last_error = e
                continue

            logger.debug(f"Fetched {len(response.content)} bytes from {url}")
            return response.content

        raise FetchError(
            f"failed to fetch {url} after {self.config.max_retries} attempts: {last_error}"
        ) from last_error
