"""Decoding of currency-prefixed amount tokens such as ``€1,234.56`` or ``$-12.30``."""

import math
import re

from app.core.errors import MalformedAmount
from app.core.models import CURRENCY_GLYPHS, AmountRecord, Currency

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_SIGNS = ("+", "-")


def resolve_currency(glyph: str) -> Currency:
    """Map a currency glyph to its code, falling back to ``Currency.UNKNOWN``."""
    return CURRENCY_GLYPHS.get(glyph.strip(), Currency.UNKNOWN)


def parse_number(text: str) -> float:
    """Parse a decimal number, ignoring ``,`` thousands separators."""
    cleaned = text.strip().replace(",", "")
    if not _NUMBER_RE.fullmatch(cleaned):
        raise MalformedAmount(text)
    value = float(cleaned)
    if not math.isfinite(value):
        raise MalformedAmount(text)
    return value


def is_currency_prefixed(token: str) -> bool:
    """Return True when the token starts with a glyph rather than a digit, sign or point."""
    body = token.strip()
    if body[:1] in _SIGNS:
        body = body[1:]
    return bool(body) and not (body[0].isdigit() or body[0] == ".")


def parse_amount(token: str) -> AmountRecord:
    """Split a glyph-prefixed token into its currency and magnitude.

    The glyph is a single leading character. A sign may appear before the glyph
    (``-€5``) or after it (``€-5``).
    """
    body = token.strip()
    sign = ""
    if body[:1] in _SIGNS and is_currency_prefixed(body):
        sign, body = body[0], body[1:]
    if not body:
        raise MalformedAmount(token)
    glyph, number = body[0], body[1:]
    try:
        magnitude = parse_number(sign + number)
    except MalformedAmount:
        raise MalformedAmount(token) from None
    return AmountRecord(magnitude=magnitude, currency=resolve_currency(glyph))


def parse_number_or_amount(token: str) -> AmountRecord:
    """Parse either a bare number (unknown currency) or a glyph-prefixed amount."""
    if is_currency_prefixed(token):
        return parse_amount(token)
    return AmountRecord(magnitude=parse_number(token))
