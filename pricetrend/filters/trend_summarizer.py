# pricetrend/filters/trend_summarizer.py

"""Direction and magnitude of price movement across a series."""

from pricetrend.models.price_point import PricePoint
from pricetrend.models.trend import Direction, TrendSummary

# Below this absolute percentage the series counts as flat
FLAT_THRESHOLD_PCT: float = 0.01


class TrendSummarizer:
    """Summarise a canonical series into a :class:`TrendSummary`."""

    @staticmethod
    def classify(pct_change: float | None) -> Direction:
        """Map an unrounded percentage change to a direction."""
        if pct_change is None:
            return Direction.UNKNOWN
        if abs(pct_change) < FLAT_THRESHOLD_PCT:
            return Direction.FLAT
        return Direction.INCREASE if pct_change > 0 else Direction.DECREASE

    @staticmethod
    def summarize(series: list[PricePoint]) -> TrendSummary:
        """Compare the chronologically first and last points.

        A zero starting price yields no percentage and an unknown
        direction; there is never a division by zero.
        """
        if not series:
            return TrendSummary(direction=Direction.UNKNOWN)

        first, last = series[0], series[-1]
        start, end = first.price, last.price
        absolute_change = end - start
        pct_change = (
            absolute_change / start * 100 if start != 0 else None
        )

        return TrendSummary(
            direction=TrendSummarizer.classify(pct_change),
            currency=last.currency or first.currency,
            start=start,
            end=end,
            absolute_change=absolute_change,
            pct_change=(
                round(pct_change, 2) if pct_change is not None else None
            ),
        )
