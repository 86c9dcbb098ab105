"""Lenient numeric parsing for statement cells"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

_CURRENCY = re.compile(r"^(?:[$€£₹¥]|INR|USD|EUR|GBP|Rs\.?)\s*", re.IGNORECASE)
_NUMBER = re.compile(r"^[+-]?\d+(?:\.\d+)?$")


def parse_amount(value: object) -> Optional[Decimal]:
    """
    Parse a cell into a signed Decimal.

    Strips thousands separators, whitespace and a leading currency marker.
    "(12.50)", "12.50-" and "12.50 DR" are negative; a "CR" suffix is dropped.
    Returns None when the cell is not a plain number.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    negative = False
    if text.startswith("(") and text.endswith(")"):
        negative = True
        text = text[1:-1].strip()

    upper = text.upper()
    if upper.endswith("DR"):
        negative = True
        text = text[:-2].strip()
    elif upper.endswith("CR"):
        text = text[:-2].strip()

    if text.endswith("-"):
        negative = True
        text = text[:-1].strip()

    sign = ""
    if text and text[0] in "+-":
        sign, text = text[0], text[1:].strip()

    text = _CURRENCY.sub("", text).replace(",", "").replace(" ", "")
    text = sign + text
    if not _NUMBER.match(text):
        return None

    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    return -abs(amount) if negative else amount
