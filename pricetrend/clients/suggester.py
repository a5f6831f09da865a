# pricetrend/clients/suggester.py

"""Select the candidate-URL provider configured for this process."""

from typing import Protocol

from pricetrend.clients.brave_client import BraveSearchClient
from pricetrend.clients.groq_client import GroqClient
from pricetrend.config.settings import Settings
from pricetrend.models.suggestion import UrlSuggestion


class UrlSuggester(Protocol):
    """Anything that can propose documents for a price query."""

    async def suggest_urls(
        self, query: str, max_results: int = 10,
    ) -> list[UrlSuggestion]: ...

    async def aclose(self) -> None: ...


def build_url_suggester(settings: Settings) -> UrlSuggester:
    """Return the Brave client when configured, otherwise Groq."""
    if settings.search_provider == "brave":
        return BraveSearchClient(settings)
    return GroqClient(settings)
