# tests/test_html_fetcher.py

"""Tests for the fixed-delay retrying listing fetcher."""

import unittest
from unittest.mock import MagicMock, call, patch

from stock_watch.scrapers.html_fetcher import FetchError, HtmlFetcher


def _resp(status: int, text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    return resp


@patch("stock_watch.scrapers.html_fetcher.curl_requests.Session")
class TestFetch(unittest.TestCase):
    """Retry budget and error surfacing."""

    def test_first_attempt_success(self, mock_session_cls: MagicMock) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.get.return_value = _resp(200, "<div class='product'></div>")

        fetcher = HtmlFetcher(url="https://shop.example.com/grid")
        self.assertEqual(fetcher.fetch(), "<div class='product'></div>")
        mock_session.get.assert_called_once()
        self.assertEqual(
            mock_session.get.call_args.args[0], "https://shop.example.com/grid"
        )

    def test_recovers_after_transient_errors(
        self, mock_session_cls: MagicMock,
    ) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.get.side_effect = [
            ConnectionError("reset"),
            _resp(503),
            _resp(200, "ok"),
        ]

        fetcher = HtmlFetcher()
        self.assertEqual(fetcher.fetch(), "ok")
        self.assertEqual(mock_session.get.call_count, 3)

    @patch("stock_watch.scrapers.html_fetcher.time.sleep")
    def test_fixed_delay_between_attempts(
        self,
        mock_sleep: MagicMock,
        mock_session_cls: MagicMock,
    ) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.get.side_effect = ConnectionError("down")

        fetcher = HtmlFetcher()
        with self.assertRaises(FetchError):
            fetcher.fetch()
        self.assertEqual(mock_sleep.call_args_list, [call(5.0)] * 5)

    def test_gives_up_after_five_retries(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """One initial attempt plus five retries, then the error surfaces."""
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        error = ConnectionError("down")
        mock_session.get.side_effect = error

        fetcher = HtmlFetcher()
        with self.assertRaises(FetchError) as ctx:
            fetcher.fetch()
        self.assertEqual(mock_session.get.call_count, 6)
        self.assertIs(ctx.exception.__cause__, error)

    def test_bad_status_surfaces_as_fetch_error(
        self, mock_session_cls: MagicMock,
    ) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.get.return_value = _resp(500)

        fetcher = HtmlFetcher(retries=2)
        with self.assertRaises(FetchError) as ctx:
            fetcher.fetch()
        self.assertIn("HTTP 500", str(ctx.exception))
        self.assertEqual(mock_session.get.call_count, 3)

    def test_zero_retries(self, mock_session_cls: MagicMock) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.get.side_effect = TimeoutError("slow")

        fetcher = HtmlFetcher(retries=0)
        with self.assertRaises(FetchError):
            fetcher.fetch()
        mock_session.get.assert_called_once()

    def test_defaults_from_settings(self, mock_session_cls: MagicMock) -> None:
        mock_session_cls.return_value = MagicMock()
        fetcher = HtmlFetcher()
        self.assertEqual(fetcher.url, fetcher.settings.LISTING_URL)
        self.assertEqual(fetcher.retries, fetcher.settings.FETCH_RETRIES)
        self.assertEqual(fetcher.retry_delay, fetcher.settings.RETRY_DELAY)


if __name__ == "__main__":
    unittest.main()
