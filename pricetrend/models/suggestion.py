# pricetrend/models/suggestion.py

"""Models returned by the search and sentiment collaborators."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UrlSuggestion:
    """A candidate document that may hold historic prices."""

    url: str
    title: str | None = None
    rationale: str | None = None


@dataclass(frozen=True)
class SentimentSource:
    url: str
    note: str | None = None


@dataclass(frozen=True)
class SentimentReport:
    """Structured demand-sentiment judgment for a topic."""

    topic: str
    overall_sentiment: str
    summary: str
    demand_level: str | None = None
    confidence: float | None = None
    time_window: str | None = None
    key_drivers: list[str] = field(
        default_factory=lambda: list[str]()
    )
    sources: list[SentimentSource] = field(
        default_factory=lambda: list[SentimentSource]()
    )

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "topic": self.topic,
            "overallSentiment": self.overall_sentiment,
            "summary": self.summary,
        }
        if self.demand_level is not None:
            data["demandLevel"] = self.demand_level
        if self.confidence is not None:
            data["confidence"] = self.confidence
        if self.time_window is not None:
            data["timeWindow"] = self.time_window
        if self.key_drivers:
            data["keyDrivers"] = list(self.key_drivers)
        if self.sources:
            data["sources"] = [
                {"url": s.url, **({"note": s.note} if s.note else {})}
                for s in self.sources
            ]
        return data
