# pricetrend/extraction/extractor.py

"""Turns a block of free text into dated price observations."""

import logging
from datetime import date

from pricetrend.extraction.price_parser import parse_price
from pricetrend.extraction.tokenizer import tokenize_dates, tokenize_prices
from pricetrend.models.price_point import PricePoint, SourceRef

logger = logging.getLogger("pricetrend.extraction")


class PriceExtractor:
    """Mine ``PricePoint`` objects from text.

    Date resolution is coarse: the first date mention anywhere in the
    text is shared by every price in it, so a block listing several
    years of prices collapses onto one date.
    """

    @staticmethod
    def resolve_date(text: str, today: date | None = None) -> str:
        """Return the ``YYYY-MM-DD`` date assigned to *text*."""
        dates = tokenize_dates(text)
        if dates:
            return dates[0].resolved_date.isoformat()
        return (today or date.today()).isoformat()

    @staticmethod
    def extract(
        text: str,
        source: SourceRef,
        today: date | None = None,
    ) -> list[PricePoint]:
        """Return one point per recognised price token in *text*."""
        tokens = tokenize_prices(text)
        if not tokens:
            return []

        when = PriceExtractor.resolve_date(text, today)
        points: list[PricePoint] = []
        for token in tokens:
            parsed = parse_price(token)
            if parsed is None:
                logger.debug(
                    "Discarding unparsable price token %r from %s",
                    token.raw,
                    source.url,
                )
                continue
            price, currency = parsed
            points.append(
                PricePoint(
                    date=when,
                    price=price,
                    currency=currency,
                    source_url=source.url,
                    title=source.title,
                    snippet=text,
                )
            )

        logger.debug(
            "Extracted %d price points from %s", len(points), source.url
        )
        return points
