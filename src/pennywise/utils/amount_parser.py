"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
from typing import Optional
import re

# Longest leading number, the way a lenient float parser reads a string.
_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+))")
_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def parse_leading_number(text: Optional[str]) -> Optional[Decimal]:
    """Parse the number at the start of ``text``.

    Trailing garbage is ignored ("12.50 USD" -> 12.50, "1.2.3" -> 1.2);
    a string that does not start with a number yields None ("$5", "abc").
    """
    if text is None:
        return None
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return None
    try:
        return Decimal(match.group(1))
    except InvalidOperation:
        return None


def strip_to_number(text: str) -> Optional[Decimal]:
    """Drop everything but digits, '.' and '-' and parse what is left.

    "$1,234.56" -> 1234.56, "-$45.00" -> -45.00, "EUR" -> None.
    """
    return parse_leading_number(_NON_NUMERIC.sub("", text))


def parse_amount(amount_str: str) -> Decimal:
    """Parse a user-entered amount string into a Decimal.

    Handles "123.45", "$123.45", "-123.45", "1,234.56" and the accounting
    form "(123.45)" for negatives.

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()
    is_negative = text.startswith("(") and text.endswith(")")
    if is_negative:
        text = text[1:-1]

    text = re.sub(r"[$€£¥,\s]", "", text)
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str.strip()}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str.strip()}'")
    return -amount if is_negative else amount
