# stock_watch/scrapers/html_fetcher.py

"""Fetches the in-stock listing page with a fixed-delay retry budget."""

import logging
import time

from curl_cffi import requests as curl_requests

from stock_watch.config.settings import Settings


class FetchError(RuntimeError):
    """Raised when the listing page cannot be fetched within the retry budget."""


class HtmlFetcher:
    """GET the listing page through a browser-impersonating session.

    A failed attempt (transport error or non-200 status) is retried up
    to ``retries`` more times, sleeping ``retry_delay`` seconds between
    attempts. The last failure is raised as :class:`FetchError`.
    """

    def __init__(
        self,
        url: str | None = None,
        retries: int | None = None,
        retry_delay: float | None = None,
    ) -> None:
        self.logger = logging.getLogger("stock_watch.fetcher")
        self.settings = Settings()
        self.url: str = url or self.settings.LISTING_URL
        self.retries: int = (
            self.settings.FETCH_RETRIES if retries is None else retries
        )
        self.retry_delay: float = (
            self.settings.RETRY_DELAY
            if retry_delay is None
            else retry_delay
        )
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _get_once(self) -> str:
        """Perform one GET; raise on transport errors and bad statuses."""
        resp = self.session.get(
            self.url,
            headers=self.settings.DEFAULT_HEADERS,
            timeout=self._request_timeout,
        )
        if resp.status_code != 200:
            raise FetchError(
                f"HTTP {resp.status_code} from {self.url}"
            )
        return resp.text

    def fetch(self) -> str:
        """Return the listing page body as text."""
        attempts = self.retries + 1
        last_error: Exception | None = None
        for attempt in range(attempts):
            if attempt:
                time.sleep(self.retry_delay)
            try:
                html = self._get_once()
            except Exception as exc:
                last_error = exc
                self.logger.warning(
                    "Fetch attempt %d/%d failed: %s",
                    attempt + 1,
                    attempts,
                    exc,
                )
                continue
            self.logger.debug(
                "Fetched %d characters from %s on attempt %d",
                len(html),
                self.url,
                attempt + 1,
            )
            return html

        self.logger.error(
            "Failed to fetch html %d times: %s", attempts, last_error
        )
        if isinstance(last_error, FetchError):
            raise last_error
        raise FetchError(
            f"Network failure: {last_error}"
        ) from last_error
