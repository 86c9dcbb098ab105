"""Delimited-text (CSV/TSV) statement extractor"""

import csv
import io
import logging
from typing import List

import pandas as pd

from statement_scoring.domain.exceptions import EmptyInputError, ExtractionFailureError
from statement_scoring.domain.models import RawRecord
from statement_scoring.extraction.base import EMPTY_INPUT_HINT, records_from_frame

logger = logging.getLogger(__name__)

# latin-1 maps every byte, so the loop only falls through on parser errors
ENCODINGS = ("utf-8-sig", "cp1252", "latin-1")


def read_frame(file_bytes: bytes) -> pd.DataFrame:
    """Load delimited bytes with a sniffed delimiter, trying each encoding in turn"""
    for encoding in ENCODINGS:
        try:
            return pd.read_csv(
                io.BytesIO(file_bytes),
                sep=None,
                engine="python",
                encoding=encoding,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                on_bad_lines="skip",
            )
        except UnicodeDecodeError:
            logger.debug("Delimited text is not %s, trying next encoding", encoding)
            continue

    raise ExtractionFailureError(f"Could not decode delimited text with any of: {', '.join(ENCODINGS)}")


class DelimitedTextExtractor:
    """Rows keyed by header; malformed lines are skipped rather than fatal"""

    def extract(self, file_bytes: bytes) -> List[RawRecord]:
        if not file_bytes.strip():
            raise EmptyInputError(EMPTY_INPUT_HINT)
        if b"\x00" in file_bytes:
            raise ExtractionFailureError("Delimited text contains binary data")

        try:
            frame = read_frame(file_bytes)
        except pd.errors.EmptyDataError as e:
            raise EmptyInputError(EMPTY_INPUT_HINT) from e
        except (pd.errors.ParserError, csv.Error, ValueError) as e:
            raise ExtractionFailureError(f"Failed to parse delimited text: {e}") from e

        records = records_from_frame(frame)
        if not records:
            raise EmptyInputError(EMPTY_INPUT_HINT)

        logger.info("Parsed %d rows from delimited text", len(records))
        return records
