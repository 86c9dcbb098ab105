"""Document-text (PDF) statement extractor"""

import logging
from decimal import Decimal
from typing import List, Optional

from statement_scoring.domain.exceptions import EmptyInputError, ExtractionFailureError
from statement_scoring.domain.models import RawRecord
from statement_scoring.extraction.base import EMPTY_INPUT_HINT
from statement_scoring.extraction.text_parsing import (
    DOCUMENT_DATE,
    SIGNED_AMOUNT,
    describe,
    find_date,
    is_label_line,
    remove_token,
    split_lines,
)
from statement_scoring.infrastructure.clients.pdf import DocumentTextReader, PdfPlumberTextReader
from statement_scoring.utils.date_utils import UNKNOWN_DATE
from statement_scoring.utils.numbers import parse_amount

logger = logging.getLogger(__name__)

MIN_LINE_LENGTH = 5
MAX_LINE_AMOUNT = Decimal(10_000_000)
DEFAULT_DESCRIPTION = "Transaction"


def _rightmost_amount(text: str) -> tuple[Optional[Decimal], List[str]]:
    tokens = SIGNED_AMOUNT.findall(text)
    if not tokens:
        return None, tokens
    amount = parse_amount(tokens[-1])
    if amount is None or amount == 0 or abs(amount) >= MAX_LINE_AMOUNT:
        return None, tokens
    return amount, tokens


def parse_transaction_line(line: str) -> Optional[RawRecord]:
    """
    Read one statement line.

    Short lines and label lines are skipped, dated or not, so opening and
    closing balance rows never count as transactions. The rightmost amount
    token is taken as the transaction amount; a trailing running balance on
    the same line would be read instead.
    """
    if len(line) < MIN_LINE_LENGTH or is_label_line(line):
        return None
    date = find_date(line, DOCUMENT_DATE)

    remainder = remove_token(line, date)
    amount, tokens = _rightmost_amount(remainder)
    if amount is None:
        return None

    description = describe(remainder, tokens)
    if not description:
        return None

    return {"date": date or UNKNOWN_DATE, "description": description, "amount": str(amount)}


def parse_dated_line(line: str) -> Optional[RawRecord]:
    """Looser pass: any dated line with an amount counts"""
    date = find_date(line, DOCUMENT_DATE)
    if date is None:
        return None
    remainder = remove_token(line, date)
    amount, tokens = _rightmost_amount(remainder)
    if amount is None:
        return None
    return {
        "date": date,
        "description": describe(remainder, tokens) or DEFAULT_DESCRIPTION,
        "amount": str(amount),
    }


def parse_document_text(text: str) -> List[RawRecord]:
    lines = split_lines(text)
    records = [r for r in (parse_transaction_line(line) for line in lines) if r is not None]
    if not records:
        records = [r for r in (parse_dated_line(line) for line in lines) if r is not None]
    return records


class DocumentTextExtractor:
    def __init__(self, reader: DocumentTextReader | None = None):
        self.reader = reader or PdfPlumberTextReader()

    def extract(self, file_bytes: bytes) -> List[RawRecord]:
        try:
            text = self.reader.extract_text(file_bytes)
        except ExtractionFailureError:
            raise
        except Exception as e:  # third-party readers are wrapped uniformly
            raise ExtractionFailureError(f"Failed to parse PDF: {e}") from e

        records = parse_document_text(text or "")
        if not records:
            raise EmptyInputError(EMPTY_INPUT_HINT)

        logger.info("Parsed %d transaction lines from document text", len(records))
        return records
