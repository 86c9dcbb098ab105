"""PDF text extraction backed by pdfplumber"""

import io
from typing import Protocol

import pdfplumber

from statement_scoring.domain.exceptions import ExtractionFailureError


class DocumentTextReader(Protocol):
    def extract_text(self, pdf_bytes: bytes) -> str:
        ...


class PdfPlumberTextReader:
    """Concatenate the text layer of every page"""

    def extract_text(self, pdf_bytes: bytes) -> str:
        """
        Raises:
            ExtractionFailureError: On corrupt or unreadable PDF bytes
        """
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as e:  # pdfminer surfaces corrupt input through many exception types
            raise ExtractionFailureError(f"Failed to parse PDF: {e}") from e

        return "\n".join(pages)
