# pricetrend/clients/groq_client.py

"""Groq chat-completions client for URL suggestion and sentiment."""

import json
import logging
import re
from typing import Any

from curl_cffi import requests as curl_requests

from pricetrend.config.settings import Settings
from pricetrend.errors import FetchFailure, ParseFailure
from pricetrend.models.suggestion import (
    SentimentReport,
    SentimentSource,
    UrlSuggestion,
)

logger = logging.getLogger("pricetrend.groq")

_MODEL_GONE_RE = re.compile(
    r"decommissioned|no longer supported|invalid model", re.IGNORECASE
)
_URL_RE = re.compile(r"https?://[^\s\"'<>]+")

SENTIMENTS: frozenset[str] = frozenset(
    {"positive", "negative", "mixed", "neutral"}
)
DEMAND_LEVELS: frozenset[str] = frozenset({"high", "medium", "low"})

_SUGGEST_SYSTEM_PROMPT = " ".join([
    "You help find URLs that likely contain historical price trends "
    "for a product/category.",
    "Return strict JSON only, no extra text.",
    'JSON shape: {"results":[{"url":"...","title":"...",'
    '"rationale":"..."}]}',
    "Prefer pages with explicit year-by-year prices, charts, or "
    "'price history' tables.",
    "Avoid paywalled or login-only sources.",
    "Prefer extractable sources such as reputable news sites, "
    "price trackers, manufacturer pages and blogs.",
])

_SENTIMENT_SYSTEM_PROMPT = " ".join([
    "You are a market analyst. Analyze public sentiment regarding "
    "demand for the given topic.",
    "Return strictly a JSON object with fields:",
    '{ "topic": string, "overallSentiment": '
    '"positive|negative|mixed|neutral",',
    '"demandLevel": "high|medium|low" (optional), '
    '"confidence": number 0-1 (optional),',
    '"timeWindow": string (optional), "keyDrivers": string[] (optional),',
    '"summary": string, "sources": [{"url": string, "note"?: string}] '
    "(optional) }",
])


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class GroqClient:
    """Thin async wrapper over the Groq chat-completions endpoint."""

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

    async def _complete(
        self,
        system: str,
        user: str,
        temperature: float,
    ) -> str:
        """Run one chat completion and return the message content.

        A decommissioned primary model is retried once with
        ``GROQ_FALLBACK_MODEL``.
        """
        api_key = self.settings.require("groq_api_key")
        models = [self.settings.groq_model]
        if self.settings.groq_model != self.settings.GROQ_FALLBACK_MODEL:
            models.append(self.settings.GROQ_FALLBACK_MODEL)

        last_reason = "no model attempted"
        for model in models:
            try:
                resp = await self._get_session().post(
                    self.settings.GROQ_API_URL,
                    headers={
                        "Authorization": f"Bearer {api_key}",
                        "Content-Type": "application/json",
                        "User-Agent": self.settings.user_agent,
                    },
                    json={
                        "model": model,
                        "messages": [
                            {"role": "system", "content": system},
                            {"role": "user", "content": user},
                        ],
                        "temperature": temperature,
                        "response_format": {"type": "json_object"},
                    },
                    timeout=self.settings.REQUEST_TIMEOUT,
                )
            except curl_requests.RequestsError as exc:
                logger.warning("Groq request failed (%s): %s", model, exc)
                raise FetchFailure(
                    self.settings.GROQ_API_URL, f"Groq request error: {exc}"
                ) from exc
            status = int(resp.status_code)
            if 200 <= status < 300:
                data: Any = resp.json()
                try:
                    content = data["choices"][0]["message"]["content"]
                except (KeyError, IndexError, TypeError):
                    return ""
                return str(content or "")

            body = str(resp.text)
            last_reason = f"Groq API error: HTTP {status} {body[:200]}"
            if _MODEL_GONE_RE.search(body):
                logger.warning(
                    "Groq model '%s' unavailable, trying fallback", model
                )
                continue
            break

        raise FetchFailure(self.settings.GROQ_API_URL, last_reason)

    # ── URL suggestion ───────────────────────────────────

    @staticmethod
    def parse_suggestions(
        content: str, max_results: int,
    ) -> list[UrlSuggestion]:
        """Read the model's JSON, or scrape bare URLs if it is not JSON."""
        try:
            parsed: Any = json.loads(content)
        except json.JSONDecodeError:
            parsed = None

        if isinstance(parsed, dict) and isinstance(
            parsed.get("results"), list
        ):
            suggestions: list[UrlSuggestion] = []
            for item in parsed["results"]:
                if not isinstance(item, dict) or not item.get("url"):
                    continue
                suggestions.append(
                    UrlSuggestion(
                        url=str(item["url"]),
                        title=item.get("title") or None,
                        rationale=item.get("rationale") or None,
                    )
                )
            return suggestions[:max_results]

        logger.warning("Groq suggestion content was not JSON, scanning URLs")
        urls = _URL_RE.findall(content)
        return [UrlSuggestion(url=u) for u in urls[:max_results]]

    async def suggest_urls(
        self, query: str, max_results: int = 10,
    ) -> list[UrlSuggestion]:
        """Ask the model for pages likely to hold price history."""
        limit = _clamp(max_results, 1, 20)
        content = await self._complete(
            _SUGGEST_SYSTEM_PROMPT,
            f"Query: {query}\nReturn up to {limit} results.",
            temperature=0.3,
        )
        suggestions = self.parse_suggestions(content, limit)
        logger.info(
            "Groq suggested %d URLs for '%s'", len(suggestions), query
        )
        return suggestions

    # ── Sentiment ────────────────────────────────────────

    @staticmethod
    def parse_sentiment(content: str, topic: str) -> SentimentReport:
        """Validate the model's sentiment JSON.

        Raises:
            ParseFailure: content is not a JSON object or lacks a
                valid ``overallSentiment``/``summary``.
        """
        try:
            data: Any = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ParseFailure(f"Sentiment response is not JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ParseFailure("Sentiment response is not a JSON object")

        overall = str(data.get("overallSentiment", "")).lower()
        if overall not in SENTIMENTS:
            raise ParseFailure(f"Invalid overallSentiment: {overall!r}")
        summary = data.get("summary")
        if not isinstance(summary, str):
            raise ParseFailure("Sentiment response lacks a summary")

        demand = data.get("demandLevel")
        demand_level = (
            str(demand).lower()
            if isinstance(demand, str) and demand.lower() in DEMAND_LEVELS
            else None
        )
        confidence = data.get("confidence")
        if isinstance(confidence, (int, float)):
            confidence = float(max(0.0, min(float(confidence), 1.0)))
        else:
            confidence = None

        sources = [
            SentimentSource(url=str(s["url"]), note=s.get("note"))
            for s in data.get("sources") or []
            if isinstance(s, dict) and s.get("url")
        ]
        return SentimentReport(
            topic=str(data.get("topic") or topic),
            overall_sentiment=overall,
            summary=summary,
            demand_level=demand_level,
            confidence=confidence,
            time_window=data.get("timeWindow") or None,
            key_drivers=[
                str(d) for d in data.get("keyDrivers") or []
            ],
            sources=sources,
        )

    async def analyze_sentiment(self, topic: str) -> SentimentReport:
        """Judge public demand sentiment for *topic*."""
        content = await self._complete(
            _SENTIMENT_SYSTEM_PROMPT,
            f"Topic: {topic}\nBe concise but complete.",
            temperature=0.2,
        )
        return self.parse_sentiment(content or "{}", topic)
