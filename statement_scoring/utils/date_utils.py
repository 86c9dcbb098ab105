"""Date manipulation utilities"""

import re
from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser

UNKNOWN_DATE = "unknown"

# Month-first before day-first: "03/04/2024" is March 4th
_STATEMENT_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%m-%d-%Y",
    "%m-%d-%y",
    "%d/%m/%Y",
    "%d/%m/%y",
    "%d-%m-%Y",
    "%d-%m-%y",
    "%Y/%m/%d",
    "%d %b %Y",
    "%d %B %Y",
    "%d-%b-%Y",
    "%d-%b-%y",
    "%b %d, %Y",
    "%B %d, %Y",
)

_FOUR_DIGIT_YEAR = re.compile(r"\d{4}")


def parse_statement_date(value: str | None) -> Optional[date]:
    """
    Best-effort parse of a statement date string.

    Returns None for blanks, the "unknown" marker, and yearless strings
    such as "10/02" so no implicit current year leaks into the result.
    """
    if not value:
        return None
    text = value.strip()
    if not text or text.lower() in (UNKNOWN_DATE, "n/a"):
        return None

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in _STATEMENT_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    if not _FOUR_DIGIT_YEAR.search(text):
        return None
    try:
        return date_parser.parse(text, default=datetime(2000, 1, 1)).date()
    except (ValueError, OverflowError):
        return None


def month_key(day: date) -> str:
    """Calendar month bucket key, YYYY-MM"""
    return f"{day.year:04d}-{day.month:02d}"
