# pricetrend/filters/series_aggregator.py

"""Collapse raw price points from many sources into one series."""

import logging

from pricetrend.models.price_point import PricePoint

logger = logging.getLogger("pricetrend.filters")


class SeriesAggregator:
    """Deduplicate and chronologically order price points."""

    @staticmethod
    def aggregate(points: list[PricePoint]) -> list[PricePoint]:
        """Return the canonical series for *points*.

        Dedup strategy:
        1. Exact ``(date, price, source_url)`` match.
        2. First-seen wins, so input order decides which title and
           snippet survive.

        The result is stably sorted by date string; ties keep input
        order. No magnitude or currency filtering is applied.
        """
        if not points:
            return []

        seen: set[tuple[str, float, str]] = set()
        kept: list[PricePoint] = []
        for point in points:
            key = point.dedup_key()
            if key in seen:
                continue
            seen.add(key)
            kept.append(point)

        removed = len(points) - len(kept)
        if removed:
            logger.info(
                "Aggregation removed %d duplicate price points", removed
            )

        return sorted(kept, key=lambda p: p.date)
