# tests/test_document_fetcher.py

"""Tests for DocumentFetcher's transport strategy chain."""

import unittest
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

from pricetrend.config.settings import Settings
from pricetrend.errors import FetchFailure
from pricetrend.scrapers.document_fetcher import (
    DocumentFetcher,
    Transport,
    reader_url,
)

URL = "https://example.com/page"
LONG_BODY = "<html><body>" + "<p>Price was $10 in 2020.</p>" * 20 + "</body></html>"


def _resp(status: int, text: str = "") -> MagicMock:
    """Build a fake HTTP response."""
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    return resp


def _session(*responses: Any) -> MagicMock:
    """Fake curl_cffi AsyncSession whose GETs yield *responses*."""
    session = MagicMock()
    session.get = AsyncMock(side_effect=list(responses))
    session.close = AsyncMock()
    return session


def _settings(**overrides: Any) -> Settings:
    return Settings(retry_delay=0.0, **overrides)


class TestFetchPlan(unittest.TestCase):
    """DocumentFetcher.plan strategy ordering."""

    def test_default_plan_is_two_primary_attempts(self) -> None:
        plan = DocumentFetcher(_settings()).plan(URL)
        self.assertEqual([s.name for s in plan], ["primary#1", "primary#2"])
        self.assertTrue(all(s.target_url == URL for s in plan))

    def test_retry_delay_only_between_primary_attempts(self) -> None:
        plan = DocumentFetcher(Settings(retry_delay=0.25)).plan(URL)
        self.assertEqual([s.delay_before for s in plan], [0.0, 0.25])

    def test_full_plan_order(self) -> None:
        plan = DocumentFetcher(
            _settings(use_reader_fallback=True, use_cloudscraper=True)
        ).plan(URL)
        self.assertEqual(
            [s.name for s in plan],
            ["primary#1", "primary#2", "cloudscraper", "reader"],
        )
        self.assertIs(plan[2].transport, Transport.CHALLENGE_SOLVER)
        self.assertEqual(plan[3].target_url, "https://r.jina.ai/example.com/page")

    def test_reader_url_strips_scheme(self) -> None:
        self.assertEqual(
            reader_url("http://shop.example/item?id=3"),
            "https://r.jina.ai/shop.example/item?id=3",
        )


class TestFetch(unittest.IsolatedAsyncioTestCase):
    """DocumentFetcher.fetch outcomes."""

    async def test_first_attempt_success(self) -> None:
        session = _session(_resp(200, LONG_BODY))
        fetcher = DocumentFetcher(_settings(), session=session)
        body = await fetcher.fetch(URL)
        self.assertEqual(body, LONG_BODY)
        session.get.assert_awaited_once()

    async def test_user_agent_sent(self) -> None:
        session = _session(_resp(200, LONG_BODY))
        fetcher = DocumentFetcher(
            _settings(user_agent="agent/9"), session=session
        )
        await fetcher.fetch(URL)
        headers = session.get.await_args.kwargs["headers"]
        self.assertEqual(headers["User-Agent"], "agent/9")
        self.assertEqual(
            session.get.await_args.kwargs["timeout"],
            Settings.REQUEST_TIMEOUT,
        )

    async def test_short_body_twice_without_fallback_fails(self) -> None:
        """Two 5-byte stub pages and no reader exhaust the plan."""
        session = _session(_resp(200, "tiny!"), _resp(200, "tiny!"))
        fetcher = DocumentFetcher(_settings(), session=session)
        with self.assertRaises(FetchFailure) as ctx:
            await fetcher.fetch(URL)
        self.assertEqual(session.get.await_count, 2)
        self.assertEqual(ctx.exception.url, URL)
        self.assertIn("too short", ctx.exception.reason)

    async def test_error_then_success(self) -> None:
        session = _session(ConnectionError("reset"), _resp(200, LONG_BODY))
        fetcher = DocumentFetcher(_settings(), session=session)
        self.assertEqual(await fetcher.fetch(URL), LONG_BODY)
        self.assertEqual(session.get.await_count, 2)

    async def test_reader_fallback_used_after_primary_fails(self) -> None:
        session = _session(
            _resp(503), _resp(503), _resp(200, "plain reader text " * 30)
        )
        fetcher = DocumentFetcher(
            _settings(use_reader_fallback=True), session=session
        )
        body = await fetcher.fetch(URL)
        self.assertTrue(body.startswith("plain reader text"))
        reader_call = session.get.await_args_list[2]
        self.assertEqual(
            reader_call.args[0], "https://r.jina.ai/example.com/page"
        )

    async def test_reader_not_used_when_primary_succeeds(self) -> None:
        session = _session(_resp(200, LONG_BODY))
        fetcher = DocumentFetcher(
            _settings(use_reader_fallback=True), session=session
        )
        await fetcher.fetch(URL)
        session.get.assert_awaited_once()

    async def test_all_strategies_fail_reports_last_error(self) -> None:
        session = _session(_resp(403), _resp(403), _resp(500))
        fetcher = DocumentFetcher(
            _settings(use_reader_fallback=True), session=session
        )
        with self.assertRaises(FetchFailure) as ctx:
            await fetcher.fetch(URL)
        self.assertEqual(ctx.exception.reason, "reader: HTTP 500")

    async def test_exception_chained_on_failure(self) -> None:
        err = TimeoutError("slow")
        session = _session(ConnectionError("reset"), err)
        fetcher = DocumentFetcher(_settings(), session=session)
        with self.assertRaises(FetchFailure) as ctx:
            await fetcher.fetch(URL)
        self.assertIs(ctx.exception.__cause__, err)

    @patch("pricetrend.scrapers.document_fetcher.cloudscraper.create_scraper")
    async def test_cloudscraper_strategy(
        self, mock_create: MagicMock,
    ) -> None:
        scraper = MagicMock()
        scraper.get.return_value = _resp(200, LONG_BODY)
        mock_create.return_value = scraper
        session = _session(_resp(403), _resp(403))
        fetcher = DocumentFetcher(
            _settings(use_cloudscraper=True), session=session
        )
        self.assertEqual(await fetcher.fetch(URL), LONG_BODY)
        scraper.get.assert_called_once()
        self.assertEqual(scraper.get.call_args.args[0], URL)

    async def test_aclose_leaves_injected_session_open(self) -> None:
        session = _session()
        fetcher = DocumentFetcher(_settings(), session=session)
        await fetcher.aclose()
        session.close.assert_not_awaited()

    @patch("pricetrend.scrapers.document_fetcher.curl_requests.AsyncSession")
    async def test_owned_session_created_and_closed(
        self, mock_session_cls: MagicMock,
    ) -> None:
        session = _session(_resp(200, LONG_BODY))
        mock_session_cls.return_value = session
        async with DocumentFetcher(_settings()) as fetcher:
            await fetcher.fetch(URL)
        mock_session_cls.assert_called_once_with(
            impersonate=Settings.IMPERSONATE_BROWSER
        )
        session.close.assert_awaited_once()


if __name__ == "__main__":
    unittest.main()
