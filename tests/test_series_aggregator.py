# tests/test_series_aggregator.py

"""Tests for SeriesAggregator deduplication and ordering."""

import unittest

from pricetrend.filters.series_aggregator import SeriesAggregator
from pricetrend.models.price_point import PricePoint


def _make(
    date: str,
    price: float = 10.0,
    url: str = "a",
    title: str | None = None,
) -> PricePoint:
    """Create a minimal PricePoint."""
    return PricePoint(date=date, price=price, source_url=url, title=title)


class TestAggregate(unittest.TestCase):
    """SeriesAggregator.aggregate behaviour."""

    def test_empty_list(self) -> None:
        self.assertEqual(SeriesAggregator.aggregate([]), [])

    def test_same_triple_collapses_across_sources(self) -> None:
        """Two identical a-points and one b-point leave two entries."""
        points = [
            _make("2021-01-01", 10, "a"),
            _make("2021-01-01", 10, "a"),
            _make("2021-01-01", 10, "b"),
        ]
        series = SeriesAggregator.aggregate(points)
        self.assertEqual(len(series), 2)
        self.assertEqual([p.source_url for p in series], ["a", "b"])

    def test_first_seen_wins(self) -> None:
        points = [
            _make("2021-01-01", 10, "a", title="first"),
            _make("2021-01-01", 10, "a", title="second"),
        ]
        (kept,) = SeriesAggregator.aggregate(points)
        self.assertEqual(kept.title, "first")

    def test_different_price_kept(self) -> None:
        points = [_make("2021-01-01", 10), _make("2021-01-01", 11)]
        self.assertEqual(len(SeriesAggregator.aggregate(points)), 2)

    def test_sorted_by_date(self) -> None:
        points = [
            _make("2023-05-01", 3),
            _make("2019-01-01", 1),
            _make("2021-07-01", 2),
        ]
        series = SeriesAggregator.aggregate(points)
        self.assertEqual(
            [p.date for p in series],
            ["2019-01-01", "2021-07-01", "2023-05-01"],
        )

    def test_ties_keep_insertion_order(self) -> None:
        points = [
            _make("2022-01-01", 30, "x"),
            _make("2020-01-01", 5, "y"),
            _make("2022-01-01", 20, "z"),
        ]
        series = SeriesAggregator.aggregate(points)
        self.assertEqual([p.price for p in series], [5, 30, 20])

    def test_no_duplicate_triples_in_output(self) -> None:
        points = [
            _make(f"20{10 + i % 5}-01-01", float(i % 3), str(i % 2))
            for i in range(40)
        ]
        series = SeriesAggregator.aggregate(points)
        keys = [p.dedup_key() for p in series]
        self.assertEqual(len(keys), len(set(keys)))
        dates = [p.date for p in series]
        self.assertEqual(dates, sorted(dates))

    def test_idempotent_on_canonical_series(self) -> None:
        points = [
            _make("2023-05-01", 3, "a"),
            _make("2019-01-01", 1, "b"),
            _make("2019-01-01", 1, "b"),
        ]
        once = SeriesAggregator.aggregate(points)
        self.assertEqual(SeriesAggregator.aggregate(once), once)

    def test_no_outlier_filtering(self) -> None:
        points = [_make("2020-01-01", 1), _make("2020-02-01", 1_000_000)]
        self.assertEqual(len(SeriesAggregator.aggregate(points)), 2)


if __name__ == "__main__":
    unittest.main()
