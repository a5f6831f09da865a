# pricetrend/filters/trend_builder.py

"""Aggregate, summarise and attribute a bag of price points."""

from pricetrend.filters.series_aggregator import SeriesAggregator
from pricetrend.filters.trend_summarizer import TrendSummarizer
from pricetrend.models.price_point import PricePoint, SourceRef
from pricetrend.models.trend import TrendResult


def collect_sources(series: list[PricePoint]) -> list[SourceRef]:
    """One ref per distinct URL, in order of first appearance.

    The title comes from the last point seen for that URL.
    """
    titles: dict[str, str | None] = {}
    for point in series:
        titles[point.source_url] = point.title
    return [SourceRef(url=url, title=title) for url, title in titles.items()]


def build_trend(points: list[PricePoint]) -> TrendResult:
    """Build the full :class:`TrendResult` for *points*."""
    series = SeriesAggregator.aggregate(points)
    return TrendResult(
        series=series,
        summary=TrendSummarizer.summarize(series),
        sources=collect_sources(series),
    )
