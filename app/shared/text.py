"""
Text normalization helpers: whitespace cleanup and BRL currency parsing.
"""
import math
import re
from typing import Any, Optional

_WHITESPACE = re.compile(r'\s+')
_NON_NUMERIC = re.compile(r'[^\d,.\-]')
# "." seguido de exatamente três dígitos = separador de milhar
_THOUSANDS_DOT = re.compile(r'\.(?=\d{3}\b)')
_FLOAT_PREFIX = re.compile(r'-?(?:\d+(?:\.\d*)?|\.\d+)')


def normalize_whitespace(text: Optional[str]) -> str:
    """Collapse whitespace runs into a single space and trim. None yields ''."""
    if text is None:
        return ""
    return _WHITESPACE.sub(" ", str(text)).strip()


def parse_currency_number(text: Any) -> Optional[float]:
    """
    Parse a pt-BR currency string into a float.

    Steps (order matters): keep digits, comma, period and minus; drop
    thousands-separator periods; turn the decimal comma into a period;
    parse the leading float.

    Example:
        >>> parse_currency_number("R$ 1.234,56")
        1234.56
        >>> parse_currency_number("") is None
        True
    """
    if text is None or isinstance(text, bool):
        return None
    if isinstance(text, (int, float)):
        value = float(text)
        return value if math.isfinite(value) else None

    only = _NON_NUMERIC.sub("", str(text))
    only = _THOUSANDS_DOT.sub("", only)
    norm = only.replace(",", ".", 1)

    match = _FLOAT_PREFIX.match(norm)
    if not match:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def to_amount(value: Any) -> Optional[float]:
    """Coerce a candidate price into a finite, non-negative float (or None)."""
    number = parse_currency_number(value)
    if number is None or number < 0:
        return None
    return number


def positive_amount(value: Any) -> Optional[float]:
    """Like to_amount, but zero also counts as missing."""
    number = to_amount(value)
    return number if number else None


def format_brl(value: float) -> str:
    """Format a number as Brazilian Real, e.g. 'R$ 1.234,56'."""
    return f"R$ {value:,.2f}".replace(',', 'X').replace('.', ',').replace('X', '.')
