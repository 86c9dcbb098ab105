"""Optical text recognition clients: local tesseract or a remote OCR service"""

import io
from typing import Protocol

import httpx
import pytesseract
from PIL import Image, UnidentifiedImageError

from statement_scoring.config import Settings, settings
from statement_scoring.domain.exceptions import RecognitionFailureError


class TextRecognizer(Protocol):
    def recognize(self, image_bytes: bytes) -> str:
        ...


class TesseractRecognizer:
    """Run tesseract in-process with a hard timeout"""

    def __init__(self, language: str | None = None, timeout: float | None = None):
        self.language = language or settings.ocr_language
        self.timeout = timeout or settings.ocr_timeout_seconds

    def recognize(self, image_bytes: bytes) -> str:
        """
        Raises:
            RecognitionFailureError: On timeout, missing binary, or unreadable image
        """
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                return pytesseract.image_to_string(image, lang=self.language, timeout=self.timeout)
        except pytesseract.TesseractNotFoundError as e:
            raise RecognitionFailureError("Tesseract binary is not installed") from e
        except pytesseract.TesseractError as e:
            raise RecognitionFailureError(f"Tesseract failed: {e.message}") from e
        except (UnidentifiedImageError, OSError) as e:
            raise RecognitionFailureError(f"Image bytes could not be decoded: {e}") from e
        except RuntimeError as e:
            # pytesseract signals its timeout with a bare RuntimeError
            raise RecognitionFailureError(f"Text recognition timeout after {self.timeout}s") from e


class HttpTextRecognizer:
    """Client for an external OCR service returning {"text": ...}"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url or settings.ocr_service_url
        self.timeout = timeout or settings.ocr_timeout_seconds
        self.transport = transport

    def recognize(self, image_bytes: bytes) -> str:
        """
        Raises:
            RecognitionFailureError: On timeout, HTTP errors, or invalid response
        """
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = client.post(
                    f"{self.base_url}/recognize",
                    files={"image": ("statement", image_bytes, "application/octet-stream")},
                )
                response.raise_for_status()
                text = response.json()["text"]
                if not isinstance(text, str):
                    raise TypeError(f"expected text to be a string, got {type(text).__name__}")
                return text

            except httpx.TimeoutException as e:
                raise RecognitionFailureError(f"OCR service timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise RecognitionFailureError(f"OCR service error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise RecognitionFailureError(f"OCR service unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise RecognitionFailureError(f"Invalid response from OCR service: {e}") from e


def build_recognizer(config: Settings | None = None) -> TextRecognizer:
    """Remote service when configured, local tesseract otherwise"""
    config = config or settings
    if config.ocr_service_url:
        return HttpTextRecognizer(base_url=config.ocr_service_url, timeout=config.ocr_timeout_seconds)
    return TesseractRecognizer(language=config.ocr_language, timeout=config.ocr_timeout_seconds)
