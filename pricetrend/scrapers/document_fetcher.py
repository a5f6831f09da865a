# pricetrend/scrapers/document_fetcher.py

"""Document retrieval with an explicit chain of transport strategies."""

import asyncio
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from curl_cffi import requests as curl_requests

from pricetrend.config.settings import Settings
from pricetrend.errors import FetchFailure

logger = logging.getLogger("pricetrend.fetcher")

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


class Transport(Enum):
    """How a strategy issues its GET."""

    DIRECT = "direct"                # curl_cffi, browser TLS fingerprint
    CHALLENGE_SOLVER = "cloudscraper"  # JS challenge solver, blocking


@dataclass(frozen=True)
class FetchStrategy:
    """One attempt in the fetch plan."""

    name: str
    transport: Transport
    target_url: str
    delay_before: float = 0.0


def reader_url(url: str) -> str:
    """Rewrite *url* for the reader proxy (scheme stripped)."""
    return f"{Settings.READER_BASE_URL}{_SCHEME_RE.sub('', url)}"


class DocumentFetcher:
    """Fetch document text, trying strategies until one yields content.

    The plan is primary direct GET (``FETCH_ATTEMPTS`` times, spaced by
    ``retry_delay``), then the optional cloudscraper attempt, then the
    optional reader proxy. A strategy wins only with a 2xx status and
    a body longer than ``MIN_CONTENT_LENGTH``; anti-bot interstitials
    often answer 200 with a near-empty page.
    """

    def __init__(
        self,
        settings: Settings,
        session: Any | None = None,
    ) -> None:
        self.settings = settings
        self._session: Any | None = session
        self._owns_session = session is None

    async def __aenter__(self) -> "DocumentFetcher":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying session if this fetcher created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    def _get_session(self) -> Any:
        if self._session is None:
            self._session = curl_requests.AsyncSession(
                impersonate=self.settings.IMPERSONATE_BROWSER
            )
        return self._session

    # ── Plan ─────────────────────────────────────────────

    def plan(self, url: str) -> list[FetchStrategy]:
        """Ordered strategies for *url* under the current settings."""
        strategies = [
            FetchStrategy(
                name=f"primary#{attempt + 1}",
                transport=Transport.DIRECT,
                target_url=url,
                delay_before=(
                    self.settings.retry_delay if attempt else 0.0
                ),
            )
            for attempt in range(self.settings.FETCH_ATTEMPTS)
        ]
        if self.settings.use_cloudscraper:
            strategies.append(
                FetchStrategy(
                    name="cloudscraper",
                    transport=Transport.CHALLENGE_SOLVER,
                    target_url=url,
                )
            )
        if self.settings.use_reader_fallback:
            strategies.append(
                FetchStrategy(
                    name="reader",
                    transport=Transport.DIRECT,
                    target_url=reader_url(url),
                )
            )
        return strategies

    # ── Transports ───────────────────────────────────────

    async def _direct_get(self, target_url: str) -> tuple[int, str]:
        resp = await self._get_session().get(
            target_url,
            headers=self.settings.request_headers(),
            timeout=self.settings.REQUEST_TIMEOUT,
        )
        return int(resp.status_code), str(resp.text)

    async def _challenge_get(self, target_url: str) -> tuple[int, str]:
        _cs: Any = cloudscraper
        scraper: Any = _cs.create_scraper()
        resp: Any = await asyncio.to_thread(
            scraper.get,
            target_url,
            headers=self.settings.request_headers(),
            timeout=self.settings.REQUEST_TIMEOUT,
        )
        return int(resp.status_code), str(resp.text)

    async def _request(self, strategy: FetchStrategy) -> tuple[int, str]:
        if strategy.transport is Transport.CHALLENGE_SOLVER:
            return await self._challenge_get(strategy.target_url)
        return await self._direct_get(strategy.target_url)

    # ── Public API ───────────────────────────────────────

    async def fetch(self, url: str) -> str:
        """Return the body of the first strategy that succeeds.

        Raises:
            FetchFailure: every strategy failed or returned too
                little content.
        """
        last_reason = "no fetch strategy configured"
        last_exc: Exception | None = None

        for strategy in self.plan(url):
            if strategy.delay_before > 0:
                await asyncio.sleep(strategy.delay_before)
            try:
                status, body = await self._request(strategy)
            except Exception as exc:
                logger.warning(
                    "[%s] Request error for %s: %s",
                    strategy.name,
                    url,
                    exc,
                )
                last_reason = f"{strategy.name}: {exc}"
                last_exc = exc
                continue

            if not 200 <= status < 300:
                logger.warning(
                    "[%s] HTTP %d for %s", strategy.name, status, url
                )
                last_reason = f"{strategy.name}: HTTP {status}"
                last_exc = None
                continue

            if len(body) <= self.settings.MIN_CONTENT_LENGTH:
                logger.warning(
                    "[%s] Body too short for %s (%d chars)",
                    strategy.name,
                    url,
                    len(body),
                )
                last_reason = (
                    f"{strategy.name}: body too short ({len(body)} chars)"
                )
                last_exc = None
                continue

            logger.info(
                "[%s] Fetched %s (%d chars)", strategy.name, url, len(body)
            )
            return body

        raise FetchFailure(url, last_reason) from last_exc
