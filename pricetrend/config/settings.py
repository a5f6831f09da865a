# pricetrend/config/settings.py

"""Central configuration for the pricetrend engine."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

from pricetrend.errors import ConfigError

DEFAULT_USER_AGENT = "pricetrend/0.1 (+https://github.com/pricetrend)"


def _coerce_concurrency(raw: str | None, default: int = 2) -> int:
    """Parse a concurrency bound, falling back on bad or non-positive input."""
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def _coerce_float(raw: str | None, default: float) -> float:
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once and passed to collaborators."""

    # --- Fetching ---
    REQUEST_TIMEOUT: ClassVar[int] = 15     # Seconds per outbound request
    FETCH_ATTEMPTS: ClassVar[int] = 2       # Primary transport attempts
    RETRY_DELAY: ClassVar[float] = 0.5      # Seconds between primary attempts
    MIN_CONTENT_LENGTH: ClassVar[int] = 200  # Shorter bodies are stub pages
    READER_BASE_URL: ClassVar[str] = "https://r.jina.ai/"

    # --- Reduction / extraction ---
    MIN_BLOCK_LENGTH: ClassVar[int] = 10
    BLOCK_SEPARATOR: ClassVar[str] = " • "
    MARKUP_SNIFF_CHARS: ClassVar[int] = 4096

    # --- Search ---
    MAX_SITES: ClassVar[int] = 8            # Hard cap on scanned URLs
    DEFAULT_MAX_RESULTS: ClassVar[int] = 20
    SEARCH_PROVIDERS: ClassVar[tuple[str, ...]] = ("groq", "brave")

    # --- Collaborator APIs ---
    GROQ_API_URL: ClassVar[str] = (
        "https://api.groq.com/openai/v1/chat/completions"
    )
    GROQ_FALLBACK_MODEL: ClassVar[str] = "openai/gpt-oss-20b"
    BRAVE_API_URL: ClassVar[str] = (
        "https://api.search.brave.com/res/v1/web/search"
    )

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: ClassVar[BrowserTypeLiteral] = "chrome131"
    DEFAULT_HEADERS: ClassVar[dict[str, str]] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Paths ---
    BASE_DIR: ClassVar[Path] = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: ClassVar[Path] = BASE_DIR / "logs"

    # --- Environment-supplied values ---
    user_agent: str = DEFAULT_USER_AGENT
    max_concurrency: int = 2
    use_reader_fallback: bool = False
    use_cloudscraper: bool = False
    scan_deadline: float = 60.0
    retry_delay: float = RETRY_DELAY
    groq_api_key: str | None = None
    groq_model: str = "llama-3.1-8b-instant"
    brave_api_key: str | None = None
    default_country: str = "US"
    search_provider: str = "groq"

    @classmethod
    def from_env(
        cls, env: Mapping[str, str] | None = None,
    ) -> "Settings":
        """Build settings from the process environment (and ``.env``).

        Passing *env* explicitly skips ``.env`` loading, which keeps
        tests independent of the developer's shell.
        """
        if env is None:
            load_dotenv()
            env = os.environ

        provider = env.get("SEARCH_PROVIDER", "groq").strip().lower()
        if provider not in cls.SEARCH_PROVIDERS:
            provider = "groq"

        return cls(
            user_agent=env.get("USER_AGENT") or DEFAULT_USER_AGENT,
            max_concurrency=_coerce_concurrency(
                env.get("MAX_CONCURRENCY")
            ),
            use_reader_fallback=env.get("USE_READER_FALLBACK") == "1",
            use_cloudscraper=env.get("USE_CLOUDSCRAPER") == "1",
            scan_deadline=_coerce_float(
                env.get("SCAN_DEADLINE"), 60.0
            ),
            groq_api_key=env.get("GROQ_API_KEY") or None,
            groq_model=env.get("GROQ_MODEL") or "llama-3.1-8b-instant",
            brave_api_key=env.get("BRAVE_API_KEY") or None,
            default_country=env.get("DEFAULT_COUNTRY") or "US",
            search_provider=provider,
        )

    def require(self, name: str) -> Any:
        """Return a configured value or raise :class:`ConfigError`."""
        value = getattr(self, name, None)
        if value is None or value == "":
            raise ConfigError(name.upper())
        return value

    def request_headers(self) -> dict[str, str]:
        """Default outbound headers carrying the configured user agent."""
        return {
            **self.DEFAULT_HEADERS,
            "User-Agent": self.user_agent,
        }
