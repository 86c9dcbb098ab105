"""Unit tests for PDF and OCR clients"""

import httpx
import pytest

from statement_scoring.config import Settings
from statement_scoring.domain.exceptions import ExtractionFailureError, RecognitionFailureError
from statement_scoring.infrastructure.clients.ocr import (
    HttpTextRecognizer,
    TesseractRecognizer,
    build_recognizer,
)
from statement_scoring.infrastructure.clients.pdf import PdfPlumberTextReader

OCR_URL = "http://ocr.test"


def recognizer_for(handler) -> HttpTextRecognizer:
    return HttpTextRecognizer(base_url=OCR_URL, timeout=5.0, transport=httpx.MockTransport(handler))


def test_http_recognizer_returns_text():
    """Test image bytes are posted and the text field returned"""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/recognize"
        assert b"image-bytes" in request.content
        return httpx.Response(200, json={"text": "10/02 Coffee 4.50"})

    assert recognizer_for(handler).recognize(b"image-bytes") == "10/02 Coffee 4.50"


def test_http_recognizer_status_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"detail": "busy"})

    with pytest.raises(RecognitionFailureError) as exc_info:
        recognizer_for(handler).recognize(b"image-bytes")

    assert "503" in str(exc_info.value)


def test_http_recognizer_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(RecognitionFailureError) as exc_info:
        recognizer_for(handler).recognize(b"image-bytes")

    assert "timeout" in str(exc_info.value)


def test_http_recognizer_unreachable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RecognitionFailureError):
        recognizer_for(handler).recognize(b"image-bytes")


@pytest.mark.parametrize("payload", [{"words": []}, {"text": 42}])
def test_http_recognizer_invalid_response(payload):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    with pytest.raises(RecognitionFailureError) as exc_info:
        recognizer_for(handler).recognize(b"image-bytes")

    assert "Invalid response" in str(exc_info.value)


def test_tesseract_recognizer_rejects_undecodable_image():
    """Test bytes that are not an image fail before tesseract runs"""
    with pytest.raises(RecognitionFailureError):
        TesseractRecognizer(language="eng", timeout=1.0).recognize(b"definitely not an image")


def test_build_recognizer_follows_settings():
    remote = build_recognizer(Settings(ocr_service_url=OCR_URL, ocr_timeout_seconds=12.0))
    local = build_recognizer(Settings(ocr_service_url=None, ocr_language="deu"))

    assert isinstance(remote, HttpTextRecognizer)
    assert remote.base_url == OCR_URL
    assert remote.timeout == 12.0
    assert isinstance(local, TesseractRecognizer)
    assert local.language == "deu"


def test_pdf_reader_corrupt_bytes():
    with pytest.raises(ExtractionFailureError):
        PdfPlumberTextReader().extract_text(b"%PDF-1.4 truncated garbage")
