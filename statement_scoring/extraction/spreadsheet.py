"""Spreadsheet (xlsx/xls) statement extractor - first sheet only"""

import io
import logging
from typing import List

import pandas as pd

from statement_scoring.domain.exceptions import EmptyInputError, ExtractionFailureError
from statement_scoring.domain.models import RawRecord
from statement_scoring.extraction.base import EMPTY_INPUT_HINT, records_from_frame

logger = logging.getLogger(__name__)


class SpreadsheetExtractor:
    def extract(self, file_bytes: bytes) -> List[RawRecord]:
        """
        Read the first worksheet with every cell as a string.

        Raises:
            ExtractionFailureError: Corrupt workbook or no sheets
            EmptyInputError: Sheet holds no non-blank rows
        """
        try:
            with pd.ExcelFile(io.BytesIO(file_bytes)) as workbook:
                if not workbook.sheet_names:
                    raise ExtractionFailureError("Excel file has no sheets")
                frame = workbook.parse(workbook.sheet_names[0], dtype=str, keep_default_na=False)
        except ExtractionFailureError:
            raise
        except Exception as e:  # openpyxl / xlrd / zipfile each raise their own types on corrupt input
            raise ExtractionFailureError(f"Failed to parse spreadsheet: {e}") from e

        records = records_from_frame(frame)
        if not records:
            raise EmptyInputError(EMPTY_INPUT_HINT)

        logger.info("Parsed %d rows from spreadsheet", len(records))
        return records
