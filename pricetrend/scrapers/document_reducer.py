# pricetrend/scrapers/document_reducer.py

"""Flatten a fetched document into text blocks plus light metadata."""

import logging
import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, Tag

from pricetrend.config.settings import Settings
from pricetrend.errors import ParseFailure

logger = logging.getLogger("pricetrend.reducer")

_MARKUP_RE = re.compile(r"<!doctype\s+html|<html[\s>]", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")

# Elements whose text usually carries prices and dates
_BLOCK_SELECTOR = "p, li, h1, h2, h3, h4, td, th, caption"
_DATE_META_MARKERS: tuple[str, ...] = ("published", "date")


@dataclass(frozen=True)
class ReducedDocument:
    """Text blocks, page title and date-like meta tags of a document."""

    text_blocks: list[str]
    title: str | None = None
    date_metadata: dict[str, str] = field(
        default_factory=lambda: dict[str, str]()
    )

    @property
    def text(self) -> str:
        """All blocks joined with the visible block separator."""
        return Settings.BLOCK_SEPARATOR.join(self.text_blocks)

    @property
    def meta(self) -> dict[str, str]:
        """Title and date metadata as one flat mapping."""
        return {"title": self.title or "", **self.date_metadata}


def looks_like_markup(text: str) -> bool:
    """True when *text* opens like an HTML document."""
    return bool(_MARKUP_RE.search(text[: Settings.MARKUP_SNIFF_CHARS]))


def _clean(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


class DocumentReducer:
    """Reduce HTML (or pass through plain text) for the extractor."""

    @staticmethod
    def reduce(text: str) -> ReducedDocument:
        """Return the blocks, title and date metadata of *text*.

        Plain text (reader proxy output, search snippets) becomes a
        single block without title or metadata.
        """
        if not looks_like_markup(text):
            return ReducedDocument(text_blocks=[text])

        try:
            soup = BeautifulSoup(text, "lxml")
        except Exception as exc:
            raise ParseFailure(f"Unparsable markup: {exc}") from exc

        title_tag = soup.find("title")
        title = (
            _clean(title_tag.get_text())
            if isinstance(title_tag, Tag)
            else None
        )

        date_metadata: dict[str, str] = {}
        for meta in soup.find_all("meta"):
            if not isinstance(meta, Tag):
                continue
            name = meta.get("name") or meta.get("property")
            content = meta.get("content")
            if not isinstance(name, str) or not isinstance(content, str):
                continue
            if not name or not content:
                continue
            lowered = name.lower()
            if any(marker in lowered for marker in _DATE_META_MARKERS):
                date_metadata[name] = content

        blocks: list[str] = []
        for element in soup.select(_BLOCK_SELECTOR):
            block = _clean(element.get_text())
            if len(block) >= Settings.MIN_BLOCK_LENGTH:
                blocks.append(block)

        logger.debug(
            "Reduced document '%s' to %d blocks (%d date meta tags)",
            title or "",
            len(blocks),
            len(date_metadata),
        )
        return ReducedDocument(
            text_blocks=blocks,
            title=title,
            date_metadata=date_metadata,
        )
