# pricetrend/errors.py

"""Exception taxonomy for the price trend engine."""


class PriceTrendError(Exception):
    """Base class for all pricetrend errors."""


class ConfigError(PriceTrendError):
    """A required configuration value is missing."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Missing required configuration value: {name}"
        )
        self.name = name


class FetchFailure(PriceTrendError):
    """A document could not be retrieved by any transport strategy."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Fetch failed for {url}: {reason}")
        self.url = url
        self.reason = reason


class ParseFailure(PriceTrendError):
    """A document or structured response could not be parsed."""
