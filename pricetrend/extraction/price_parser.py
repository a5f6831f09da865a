# pricetrend/extraction/price_parser.py

"""Resolution rules turning price tokens into numbers and currencies."""

import math
import re

from pricetrend.extraction.tokenizer import CURRENCY_CODES, PriceToken

_NON_NUMERIC_RE = re.compile(r"[^0-9.,]")
_THOUSANDS_COMMA_RE = re.compile(r"(?<=[0-9]),(?=[0-9]{3}\b)")
_LEADING_NUMBER_RE = re.compile(r"[0-9]+(?:\.[0-9]+)?")


def resolve_currency(token: PriceToken) -> str | None:
    """Pick the currency for a token.

    A code literal anywhere in the matched span beats the symbol
    mapping, even when the symbol appears first.
    """
    upper = token.raw.upper()
    for code in CURRENCY_CODES:
        if code in upper:
            return code
    return token.currency_hint


def normalize_numeral(raw: str) -> str:
    """Rewrite a localised numeral as a dot-decimal string.

    >>> normalize_numeral("$1,234.50")
    '1234.50'
    >>> normalize_numeral("1.234,50 EUR")
    '1234.50'
    >>> normalize_numeral("12,5")
    '12.5'
    """
    numeric = _NON_NUMERIC_RE.sub("", raw)
    numeric = _THOUSANDS_COMMA_RE.sub("", numeric)

    if "." in numeric and "," in numeric:
        # Whichever separator comes last is the decimal mark
        if numeric.rfind(",") > numeric.rfind("."):
            return numeric.replace(".", "").replace(",", ".")
        return numeric.replace(",", "")
    if "." in numeric:
        return numeric
    return numeric.replace(",", ".")


def parse_amount(raw: str) -> float | None:
    """Parse the leading number of a normalised numeral.

    Returns ``None`` when nothing finite can be read; callers drop
    the token rather than defaulting to zero.
    """
    match = _LEADING_NUMBER_RE.match(normalize_numeral(raw))
    if match is None:
        return None
    value = float(match.group(0))
    if not math.isfinite(value):
        return None
    return value


def parse_price(token: PriceToken) -> tuple[float, str | None] | None:
    """Resolve a token to ``(price, currency)`` or ``None``."""
    value = parse_amount(token.amount)
    if value is None:
        return None
    return value, resolve_currency(token)
