# pricetrend/clients/brave_client.py

"""Brave web search client used as an alternative URL source."""

import logging
from typing import Any

from curl_cffi import requests as curl_requests

from pricetrend.config.settings import Settings
from pricetrend.errors import FetchFailure
from pricetrend.models.suggestion import UrlSuggestion

logger = logging.getLogger("pricetrend.brave")


class BraveSearchClient:
    """Query the Brave web search API for candidate documents."""

    def __init__(
        self,
        settings: Settings,
        session: Any | None = None,
    ) -> None:
        self.settings = settings
        self._session: Any | None = session
        self._owns_session = session is None

    def _get_session(self) -> Any:
        if self._session is None:
            self._session = curl_requests.AsyncSession()
        return self._session

    async def aclose(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    async def web_search(
        self,
        query: str,
        count: int = 10,
        offset: int = 0,
        country: str | None = None,
    ) -> list[UrlSuggestion]:
        """Return web results that carry both a URL and a title.

        ``count`` is clamped to 1..20 and ``offset`` to 0..9; results
        are restricted to the last three years.
        """
        api_key = self.settings.require("brave_api_key")
        params: dict[str, str] = {
            "q": query,
            "count": str(max(1, min(count, 20))),
            "offset": str(max(0, min(offset, 9))),
            "country": country or self.settings.default_country,
            "freshness": "pd3y",
            "spellcheck": "1",
        }
        try:
            resp = await self._get_session().get(
                self.settings.BRAVE_API_URL,
                params=params,
                headers={
                    "X-Subscription-Token": api_key,
                    "Accept": "application/json",
                    "User-Agent": self.settings.user_agent,
                },
                timeout=self.settings.REQUEST_TIMEOUT,
            )
        except curl_requests.RequestsError as exc:
            logger.warning("Brave request failed for '%s': %s", query, exc)
            raise FetchFailure(
                self.settings.BRAVE_API_URL, f"Brave request error: {exc}"
            ) from exc
        status = int(resp.status_code)
        if not 200 <= status < 300:
            raise FetchFailure(
                self.settings.BRAVE_API_URL,
                f"Brave API error: HTTP {status} {str(resp.text)[:200]}",
            )

        data: Any = resp.json()
        web = data.get("web") if isinstance(data, dict) else None
        results: list[Any] = (web or {}).get("results") or []
        hits = [
            UrlSuggestion(
                url=str(r["url"]),
                title=str(r["title"]),
                rationale=r.get("description") or None,
            )
            for r in results
            if isinstance(r, dict) and r.get("url") and r.get("title")
        ]
        logger.info("Brave returned %d results for '%s'", len(hits), query)
        return hits

    async def suggest_urls(
        self, query: str, max_results: int = 10,
    ) -> list[UrlSuggestion]:
        """Adapter so Brave can stand in for the Groq suggester."""
        return await self.web_search(query, count=max_results)
