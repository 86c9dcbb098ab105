"""Image-text (photographed / scanned statement) extractor"""

import logging
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from statement_scoring.domain.classifier import keyword_kind
from statement_scoring.domain.exceptions import ExtractionFailureError, RecognitionFailureError
from statement_scoring.domain.models import RawRecord, TransactionKind
from statement_scoring.domain.policy import DEFAULT_CLASSIFIER_POLICY, ClassifierPolicy
from statement_scoring.extraction.text_parsing import (
    IMAGE_DATE,
    UNSIGNED_AMOUNT,
    describe,
    find_date,
    remove_token,
    split_lines,
)
from statement_scoring.infrastructure.clients.ocr import TextRecognizer, build_recognizer
from statement_scoring.utils.numbers import parse_amount

logger = logging.getLogger(__name__)

HEADER_SCAN_LINES = 10
MIN_ROW_LENGTH = 10
DEFAULT_DESCRIPTION = "Transaction"


def detect_columns(lines: Sequence[str]) -> Tuple[bool, int]:
    """
    Look for debit/credit headers in the first lines.

    Returns (has both columns, index of the header line or -1). The two
    headers may sit on separate lines, in which case no header index is known.
    """
    has_debit = has_credit = False
    for index, line in enumerate(lines[:HEADER_SCAN_LINES]):
        lower = line.lower()
        if "debit" in lower and "credit" in lower:
            return True, index
        if "debit" in lower:
            has_debit = True
        elif "credit" in lower:
            has_credit = True
    return has_debit and has_credit, -1


def is_header_row(line: str) -> bool:
    lower = line.lower()
    return "date" in lower and any(word in lower for word in ("description", "debit", "credit"))


def positive_amounts(tokens: Sequence[str]) -> List[Decimal]:
    values = (parse_amount(token) for token in tokens)
    return [v for v in values if v is not None and v > 0]


def split_debit_credit(
    amounts: Sequence[Decimal],
    description: str,
    has_columns: bool,
    policy: ClassifierPolicy = DEFAULT_CLASSIFIER_POLICY,
) -> Tuple[Decimal, Decimal]:
    """
    Decide (debit, credit) for one row.

    Layout "Date | Description | Debit | Credit | Balance": with three or more
    figures the last is the balance and the two before it are debit and
    credit. Otherwise the description keywords pick a side, debit by default.
    """
    zero = Decimal(0)
    if has_columns and len(amounts) >= 3:
        return amounts[-3], amounts[-2]

    if keyword_kind(description, policy) is TransactionKind.INCOME:
        return zero, amounts[0]
    return amounts[0], zero


def _records(date: str, description: str, debit: Decimal, credit: Decimal) -> List[RawRecord]:
    records: List[RawRecord] = []
    if debit > 0:
        records.append({"date": date, "description": description, "amount": str(debit), "type": "debit"})
    if credit > 0:
        records.append({"date": date, "description": description, "amount": str(credit), "type": "credit"})
    return records


def parse_row(line: str, has_columns: bool, policy: ClassifierPolicy) -> List[RawRecord]:
    if is_header_row(line) or len(line) < MIN_ROW_LENGTH:
        return []
    date = find_date(line, IMAGE_DATE)
    if date is None:
        return []

    remainder = remove_token(line, date)
    tokens = UNSIGNED_AMOUNT.findall(remainder)
    amounts = positive_amounts(tokens)
    if not amounts:
        return []

    description = describe(remainder, tokens) or DEFAULT_DESCRIPTION
    debit, credit = split_debit_credit(amounts, description, has_columns, policy)
    return _records(date, description, debit, credit)


def parse_loose_row(line: str, policy: ClassifierPolicy) -> Optional[RawRecord]:
    """Fallback: first figure on any dated line, credit only on income wording"""
    date = find_date(line, IMAGE_DATE)
    if date is None:
        return None
    remainder = remove_token(line, date)
    tokens = UNSIGNED_AMOUNT.findall(remainder)
    amounts = positive_amounts(tokens[:1])
    if not amounts:
        return None

    lower = line.lower()
    is_credit = any(keyword in lower for keyword in policy.income_keywords)
    return {
        "date": date,
        "description": describe(remainder, tokens) or DEFAULT_DESCRIPTION,
        "amount": str(amounts[0]),
        "type": "credit" if is_credit else "debit",
    }


def parse_image_text(text: str, policy: ClassifierPolicy = DEFAULT_CLASSIFIER_POLICY) -> List[RawRecord]:
    lines = split_lines(text)
    has_columns, header_index = detect_columns(lines)

    records: List[RawRecord] = []
    for line in lines[header_index + 1:]:
        records.extend(parse_row(line, has_columns, policy))

    if not records:
        records = [r for r in (parse_loose_row(line, policy) for line in lines) if r is not None]
    return records


class ImageTextExtractor:
    def __init__(
        self,
        recognizer: TextRecognizer | None = None,
        policy: ClassifierPolicy = DEFAULT_CLASSIFIER_POLICY,
    ):
        self.recognizer = recognizer or build_recognizer()
        self.policy = policy

    def extract(self, file_bytes: bytes) -> List[RawRecord]:
        """
        Raises:
            ExtractionFailureError: Recognition failed, produced no text, or
                no transaction rows could be read
        """
        try:
            text = self.recognizer.recognize(file_bytes)
        except RecognitionFailureError as e:
            raise ExtractionFailureError(f"Failed to parse image: {e}") from e

        if not text or not text.strip():
            raise ExtractionFailureError(
                "No text could be extracted from the image. "
                "Please ensure the image is clear and contains readable text."
            )

        records = parse_image_text(text, self.policy)
        if not records:
            raise ExtractionFailureError("No transactions could be read from the image text")

        debits = sum(1 for r in records if r["type"] == "debit")
        logger.info(
            "Parsed %d transactions from image (%d debits, %d credits)",
            len(records), debits, len(records) - debits,
        )
        return records
