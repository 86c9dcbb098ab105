"""Format dispatch: pick the extractor for a statement file"""

import logging
from typing import Dict, List, Mapping, Tuple

from statement_scoring.domain.exceptions import EmptyInputError
from statement_scoring.domain.models import RawRecord
from statement_scoring.extraction.base import EMPTY_INPUT_HINT, Extractor
from statement_scoring.extraction.delimited import DelimitedTextExtractor
from statement_scoring.extraction.document import DocumentTextExtractor
from statement_scoring.extraction.formats import StatementFormat, resolve_format
from statement_scoring.extraction.image import ImageTextExtractor
from statement_scoring.extraction.spreadsheet import SpreadsheetExtractor

logger = logging.getLogger(__name__)

Extractors = Mapping[StatementFormat, Extractor]


def default_extractors() -> Dict[StatementFormat, Extractor]:
    """One extractor per format; the image recognizer follows settings"""
    return {
        StatementFormat.DELIMITED: DelimitedTextExtractor(),
        StatementFormat.SPREADSHEET: SpreadsheetExtractor(),
        StatementFormat.DOCUMENT: DocumentTextExtractor(),
        StatementFormat.IMAGE: ImageTextExtractor(),
    }


def extract(
    file_bytes: bytes,
    format_hint: str | None,
    extractors: Extractors | None = None,
) -> Tuple[StatementFormat, List[RawRecord]]:
    """
    Resolve the format and run its extractor.

    Raises:
        UnsupportedFormatError: Hint and content both unrecognised
        EmptyInputError: No bytes, or no usable rows
        ExtractionFailureError: The underlying reader failed
    """
    statement_format = resolve_format(format_hint, file_bytes)
    if not file_bytes:
        raise EmptyInputError(EMPTY_INPUT_HINT)

    extractor = (extractors or {}).get(statement_format)
    if extractor is None:
        extractor = default_extractors()[statement_format]

    logger.debug("Extracting %s statement (%d bytes)", statement_format.value, len(file_bytes))
    return statement_format, extractor.extract(file_bytes)
