# pricetrend/models/price_point.py

"""Price observation model for inter-module data flow."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PricePoint:
    """A single price sighting mined from a document.

    ``date`` is always ``YYYY-MM-DD`` so string order is date order.
    """

    date: str
    price: float
    source_url: str
    currency: str | None = None
    title: str | None = None
    snippet: str = ""

    def dedup_key(self) -> tuple[str, float, str]:
        """Identity used when collapsing duplicate sightings."""
        return (self.date, self.price, self.source_url)

    def to_dict(self) -> dict[str, object]:
        """Serialise with the external camelCase field names."""
        data: dict[str, object] = {
            "date": self.date,
            "price": self.price,
            "sourceUrl": self.source_url,
        }
        if self.currency is not None:
            data["currency"] = self.currency
        if self.title is not None:
            data["title"] = self.title
        if self.snippet:
            data["snippet"] = self.snippet
        return data


@dataclass(frozen=True)
class SourceRef:
    """A document that contributed at least one point to a series."""

    url: str
    title: str | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"url": self.url}
        if self.title is not None:
            data["title"] = self.title
        return data
