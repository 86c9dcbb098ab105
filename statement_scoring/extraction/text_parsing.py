"""Token patterns and line helpers shared by the text-based extractors"""

import re
from typing import Iterable, List, Optional

# Typed statements carry a year; photographed ones often drop it
DOCUMENT_DATE = re.compile(r"(?<!\d)(\d{4}-\d{2}-\d{2}|\d{1,2}[/-]\d{1,2}[/-]\d{2,4})(?!\d)")
IMAGE_DATE = re.compile(r"(?<!\d)(\d{1,2}[/-]\d{1,2}(?:[/-]\d{2,4})?)(?!\d)")

SIGNED_AMOUNT = re.compile(r"(?<!\w)[+-]?\d[\d,]*(?:\.\d+)?")
UNSIGNED_AMOUNT = re.compile(r"(?<!\w)\d[\d,]*(?:\.\d+)?")

HEADER_WORDS = ("date", "description", "amount", "balance")

_WHITESPACE = re.compile(r"\s+")


def split_lines(text: str) -> List[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def find_date(line: str, pattern: re.Pattern) -> Optional[str]:
    match = pattern.search(line)
    return match.group(1) if match else None


def remove_token(text: str, token: Optional[str]) -> str:
    """Drop the first occurrence of token so it is not read as an amount"""
    if not token:
        return text
    return text.replace(token, " ", 1)


def is_label_line(line: str) -> bool:
    lower = line.lower()
    return any(word in lower for word in HEADER_WORDS)


def describe(text: str, tokens: Iterable[str]) -> str:
    """Whatever is left once the date and amount tokens are removed"""
    for token in tokens:
        text = remove_token(text, token)
    return collapse_whitespace(text)
