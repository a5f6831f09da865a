# tests/test_models.py

"""Tests for the serialisable data models."""

import unittest

from pricetrend.models.price_point import PricePoint, SourceRef
from pricetrend.models.trend import (
    Direction,
    ScrapeResult,
    TrendResult,
    TrendSummary,
)


class TestPricePoint(unittest.TestCase):
    """PricePoint serialisation and identity."""

    def test_to_dict_omits_absent_fields(self) -> None:
        p = PricePoint(date="2020-01-01", price=5.0, source_url="u")
        self.assertEqual(
            p.to_dict(),
            {"date": "2020-01-01", "price": 5.0, "sourceUrl": "u"},
        )

    def test_to_dict_full(self) -> None:
        p = PricePoint(
            date="2020-01-01", price=5.0, source_url="u",
            currency="EUR", title="T", snippet="€5",
        )
        data = p.to_dict()
        self.assertEqual(data["currency"], "EUR")
        self.assertEqual(data["title"], "T")
        self.assertEqual(data["snippet"], "€5")

    def test_dedup_key_ignores_currency(self) -> None:
        a = PricePoint(date="2020-01-01", price=5, source_url="u", currency="USD")
        b = PricePoint(date="2020-01-01", price=5, source_url="u")
        self.assertEqual(a.dedup_key(), b.dedup_key())

    def test_source_ref(self) -> None:
        self.assertEqual(SourceRef("u").to_dict(), {"url": "u"})


class TestTrendModels(unittest.TestCase):
    """TrendSummary, TrendResult and ScrapeResult serialisation."""

    def test_unknown_summary_only_direction(self) -> None:
        self.assertEqual(TrendSummary().to_dict(), {"direction": "unknown"})

    def test_summary_camel_case(self) -> None:
        s = TrendSummary(
            direction=Direction.DECREASE, currency="USD",
            start=10.0, end=5.0, absolute_change=-5.0, pct_change=-50.0,
        )
        self.assertEqual(
            s.to_dict(),
            {
                "currency": "USD", "start": 10.0, "end": 5.0,
                "absoluteChange": -5.0, "pctChange": -50.0,
                "direction": "decrease",
            },
        )

    def test_empty_result(self) -> None:
        self.assertEqual(
            TrendResult().to_dict(),
            {"series": [], "summary": {"direction": "unknown"}, "sources": []},
        )

    def test_scrape_result_adds_meta(self) -> None:
        data = ScrapeResult(TrendResult(), {"title": "x"}).to_dict()
        self.assertEqual(data["meta"], {"title": "x"})
        self.assertIn("series", data)


if __name__ == "__main__":
    unittest.main()
