# pricetrend/services/scan_orchestrator.py

"""Bounded concurrent scanning of candidate documents for prices."""

import asyncio
import logging
from dataclasses import dataclass, field

from pricetrend.clients.groq_client import GroqClient
from pricetrend.clients.suggester import UrlSuggester, build_url_suggester
from pricetrend.config.settings import Settings
from pricetrend.extraction.extractor import PriceExtractor
from pricetrend.filters.trend_builder import build_trend
from pricetrend.models.price_point import PricePoint, SourceRef
from pricetrend.models.suggestion import SentimentReport
from pricetrend.models.trend import ScrapeResult, TrendResult
from pricetrend.scrapers.document_fetcher import DocumentFetcher
from pricetrend.scrapers.document_reducer import DocumentReducer

logger = logging.getLogger("pricetrend.orchestrator")


@dataclass(frozen=True)
class ScanSuccess:
    """A URL that was fetched and mined (possibly with zero points)."""

    url: str
    points: list[PricePoint] = field(
        default_factory=lambda: list[PricePoint]()
    )


@dataclass(frozen=True)
class ScanFailure:
    """A URL that contributed nothing, and why."""

    url: str
    reason: str


ScanOutcome = ScanSuccess | ScanFailure


def fold_outcomes(outcomes: list[ScanOutcome]) -> list[PricePoint]:
    """Merge the points of every success; failures add nothing."""
    points: list[PricePoint] = []
    for outcome in outcomes:
        if isinstance(outcome, ScanSuccess):
            points.extend(outcome.points)
        else:
            logger.warning(
                "Skipping %s: %s", outcome.url, outcome.reason
            )
    return points


class ScanOrchestrator:
    """Coordinates fetching, reduction, extraction and trend building."""

    def __init__(
        self,
        settings: Settings,
        fetcher: DocumentFetcher | None = None,
        suggester: UrlSuggester | None = None,
        groq: GroqClient | None = None,
    ) -> None:
        self.settings = settings
        self.fetcher = fetcher or DocumentFetcher(settings)
        self._suggester = suggester
        self._groq = groq

    async def aclose(self) -> None:
        """Release every HTTP session this orchestrator holds."""
        await self.fetcher.aclose()
        if self._suggester is not None:
            await self._suggester.aclose()
        if self._groq is not None:
            await self._groq.aclose()

    @property
    def suggester(self) -> UrlSuggester:
        if self._suggester is None:
            self._suggester = build_url_suggester(self.settings)
        return self._suggester

    @property
    def groq(self) -> GroqClient:
        if self._groq is None:
            self._groq = GroqClient(self.settings)
        return self._groq

    # ── Per-URL pipeline ─────────────────────────────────

    async def _mine(self, url: str) -> tuple[list[PricePoint], dict[str, str]]:
        """Fetch, reduce and extract one document.

        Raises whatever the fetcher or reducer raises.
        """
        body = await self.fetcher.fetch(url)
        document = DocumentReducer.reduce(body)
        source = SourceRef(url=url, title=document.title or None)
        points = PriceExtractor.extract(document.text, source)
        return points, document.meta

    async def _scan_one(
        self, url: str, limiter: asyncio.Semaphore,
    ) -> ScanOutcome:
        async with limiter:
            try:
                points, _meta = await self._mine(url)
            except Exception as exc:
                return ScanFailure(url=url, reason=str(exc))
        if not points:
            logger.info("No price signal found at %s", url)
        return ScanSuccess(url=url, points=points)

    def _resolve_concurrency(self, concurrency: int | None) -> int:
        if concurrency is None or concurrency <= 0:
            return self.settings.max_concurrency
        return concurrency

    # ── Public API ───────────────────────────────────────

    async def scan(
        self,
        urls: list[str],
        concurrency: int | None = None,
    ) -> list[PricePoint]:
        """Mine every URL with at most *concurrency* tasks in flight.

        Outcomes are recorded as tasks settle. When ``scan_deadline``
        expires the stragglers are cancelled and count as failures.
        Never raises for per-document problems.
        """
        if not urls:
            return []

        limiter = asyncio.Semaphore(self._resolve_concurrency(concurrency))
        outcomes: list[ScanOutcome] = []

        async def run_one(url: str) -> None:
            outcomes.append(await self._scan_one(url, limiter))

        tasks = {
            asyncio.create_task(run_one(url)): url for url in urls
        }
        _done, pending = await asyncio.wait(
            tasks, timeout=self.settings.scan_deadline
        )
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            outcomes.extend(
                ScanFailure(url=tasks[t], reason="scan deadline exceeded")
                for t in pending
            )

        points = fold_outcomes(outcomes)
        succeeded = sum(isinstance(o, ScanSuccess) for o in outcomes)
        logger.info(
            "Scanned %d URLs (%d ok, %d failed), %d price points",
            len(urls),
            succeeded,
            len(outcomes) - succeeded,
            len(points),
        )
        return points

    async def price_trend_search(
        self,
        query: str,
        max_results: int = Settings.DEFAULT_MAX_RESULTS,
        concurrency: int | None = None,
    ) -> TrendResult:
        """Search for candidate pages and build a trend from them."""
        max_sites = max(1, min(max_results, self.settings.MAX_SITES))
        suggestions = await self.suggester.suggest_urls(query, max_sites)
        urls = [s.url for s in suggestions][:max_sites]
        logger.info(
            "Scanning %d candidate URLs for '%s'", len(urls), query
        )
        points = await self.scan(urls, concurrency)
        return build_trend(points)

    async def scrape_url(self, url: str) -> ScrapeResult:
        """Build a trend from one page.

        Raises:
            FetchFailure: the page could not be retrieved.
        """
        points, meta = await self._mine(url)
        return ScrapeResult(trend=build_trend(points), meta=meta)

    async def analyze_sentiment(self, topic: str) -> SentimentReport:
        """Delegate a demand-sentiment judgment to Groq."""
        return await self.groq.analyze_sentiment(topic)
