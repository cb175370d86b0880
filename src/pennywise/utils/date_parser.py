"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser


def parse_date(date_str: str, allow_relative: bool = True) -> date:
    """Parse a date string into a date object.

    Accepts anything ``dateutil`` understands ("2025-01-15", "01/15/2025",
    "Jan 15 2025", ISO timestamps) plus, when ``allow_relative`` is set,
    "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string
        allow_relative: Whether relative day names are accepted

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if date_str is None or not date_str.strip():
        raise ValueError("Empty date string")

    text = date_str.strip()

    if allow_relative:
        today = date.today()
        relative_dates = {
            "today": today,
            "yesterday": today - timedelta(days=1),
            "tomorrow": today + timedelta(days=1),
        }
        if text.lower() in relative_dates:
            return relative_dates[text.lower()]

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{text}': {e}")
