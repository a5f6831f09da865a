# pricetrend/models/trend.py

"""Trend summary and result bundle models."""

from dataclasses import dataclass, field
from enum import Enum

from pricetrend.models.price_point import PricePoint, SourceRef


class Direction(str, Enum):
    """Net price movement across a series."""

    INCREASE = "increase"
    DECREASE = "decrease"
    FLAT = "flat"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TrendSummary:
    """Scalar view of a canonical series; absent fields are ``None``."""

    direction: Direction = Direction.UNKNOWN
    currency: str | None = None
    start: float | None = None
    end: float | None = None
    absolute_change: float | None = None
    pct_change: float | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialise, omitting absent fields."""
        pairs: list[tuple[str, object]] = [
            ("currency", self.currency),
            ("start", self.start),
            ("end", self.end),
            ("absoluteChange", self.absolute_change),
            ("pctChange", self.pct_change),
        ]
        data: dict[str, object] = {
            k: v for k, v in pairs if v is not None
        }
        data["direction"] = self.direction.value
        return data


@dataclass(frozen=True)
class TrendResult:
    """Series, summary and contributing sources for one request."""

    series: list[PricePoint] = field(
        default_factory=lambda: list[PricePoint]()
    )
    summary: TrendSummary = field(default_factory=TrendSummary)
    sources: list[SourceRef] = field(
        default_factory=lambda: list[SourceRef]()
    )

    def to_dict(self) -> dict[str, object]:
        return {
            "series": [p.to_dict() for p in self.series],
            "summary": self.summary.to_dict(),
            "sources": [s.to_dict() for s in self.sources],
        }


@dataclass(frozen=True)
class ScrapeResult:
    """Trend for a single scraped page plus its title/date metadata."""

    trend: TrendResult
    meta: dict[str, str] = field(
        default_factory=lambda: dict[str, str]()
    )

    def to_dict(self) -> dict[str, object]:
        return {**self.trend.to_dict(), "meta": dict(self.meta)}
