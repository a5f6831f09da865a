# pricetrend/extraction/tokenizer.py

"""Lexer for price and date mentions in free text.

Produces typed tokens that the extractor resolves:

    PriceToken → symbol-prefixed amount   ($1,234.50, A$ 99, ₹500)
               | code-suffixed amount     (1.234,50 EUR, 99 usd)
    DateToken  → "MonthName YYYY"         (March 2020 → 2020-03-01)
               | bare year 19xx / 20xx    (2021 → 2021-01-01)
"""

import re
from dataclasses import dataclass
from datetime import date

# ── Vocabulary ───────────────────────────────────────────

CURRENCY_SYMBOLS: dict[str, str] = {
    "$": "USD",
    "£": "GBP",
    "€": "EUR",
    "₹": "INR",
    "¥": "JPY",
    "A$": "AUD",
    "C$": "CAD",
    "₩": "KRW",
}

CURRENCY_CODES: tuple[str, ...] = (
    "USD", "EUR", "GBP", "INR", "JPY", "AUD", "CAD", "KRW",
)

MONTH_NAMES: tuple[str, ...] = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)


# ── Token types ──────────────────────────────────────────


@dataclass(frozen=True)
class PriceToken:
    """A matched currency amount before numeric resolution."""

    raw: str
    amount: str
    symbol: str | None
    code: str | None

    @property
    def currency_hint(self) -> str | None:
        """Currency implied by the symbol, ignoring any code."""
        if self.symbol is None:
            return None
        return CURRENCY_SYMBOLS.get(self.symbol.upper())


@dataclass(frozen=True)
class DateToken:
    """A matched date mention resolved to day granularity."""

    raw: str
    resolved_date: date


# ── Patterns ─────────────────────────────────────────────

# Longest symbols first so "A$" is not read as "$"
_SYMBOL_ALT = "|".join(
    re.escape(s)
    for s in sorted(CURRENCY_SYMBOLS, key=len, reverse=True)
)
_CODE_ALT = "|".join(CURRENCY_CODES)
_NUMERAL = r"[0-9]{1,3}(?:[,.\s][0-9]{3})*(?:[.,][0-9]{1,2})?"

_PRICE_RE = re.compile(
    rf"""
    (?P<symbol>{_SYMBOL_ALT})\s?(?P<symbol_amount>{_NUMERAL})
    |
    (?P<code_amount>{_NUMERAL})\s?(?P<code>{_CODE_ALT})
    """,
    re.IGNORECASE | re.VERBOSE,
)

_MONTH_YEAR_RE = re.compile(
    rf"\b(?P<month>{'|'.join(MONTH_NAMES)})\s+(?P<year>20\d{{2}}|19\d{{2}})\b",
    re.IGNORECASE,
)

_YEAR_RE = re.compile(r"\b(?P<year>20\d{2}|19\d{2})\b")


# ── Tokenizers ───────────────────────────────────────────


def tokenize_prices(text: str) -> list[PriceToken]:
    """Return every price mention in *text*, in order of appearance."""
    tokens: list[PriceToken] = []
    for match in _PRICE_RE.finditer(text):
        if match.group("symbol") is not None:
            tokens.append(
                PriceToken(
                    raw=match.group(0),
                    amount=match.group("symbol_amount"),
                    symbol=match.group("symbol"),
                    code=None,
                )
            )
        else:
            tokens.append(
                PriceToken(
                    raw=match.group(0),
                    amount=match.group("code_amount"),
                    symbol=None,
                    code=match.group("code").upper(),
                )
            )
    return tokens


def tokenize_dates(text: str) -> list[DateToken]:
    """Return date mentions, month-year forms before bare years.

    The ordering encodes resolution priority: the first token is the
    date the extractor assigns to the whole text.
    """
    tokens: list[DateToken] = []
    for match in _MONTH_YEAR_RE.finditer(text):
        month = MONTH_NAMES.index(match.group("month").lower()) + 1
        tokens.append(
            DateToken(
                raw=match.group(0),
                resolved_date=date(int(match.group("year")), month, 1),
            )
        )
    for match in _YEAR_RE.finditer(text):
        tokens.append(
            DateToken(
                raw=match.group(0),
                resolved_date=date(int(match.group("year")), 1, 1),
            )
        )
    return tokens
