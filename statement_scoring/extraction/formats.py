"""Statement format resolution from a caller hint or the file's magic bytes"""

from enum import Enum

from statement_scoring.domain.exceptions import UnsupportedFormatError


class StatementFormat(str, Enum):
    DELIMITED = "delimited"
    SPREADSHEET = "spreadsheet"
    DOCUMENT = "document"
    IMAGE = "image"


_EXTENSIONS = {
    "csv": StatementFormat.DELIMITED,
    "tsv": StatementFormat.DELIMITED,
    "txt": StatementFormat.DELIMITED,
    "xlsx": StatementFormat.SPREADSHEET,
    "xlsm": StatementFormat.SPREADSHEET,
    "xls": StatementFormat.SPREADSHEET,
    "pdf": StatementFormat.DOCUMENT,
    "jpg": StatementFormat.IMAGE,
    "jpeg": StatementFormat.IMAGE,
    "png": StatementFormat.IMAGE,
    "gif": StatementFormat.IMAGE,
    "bmp": StatementFormat.IMAGE,
    "webp": StatementFormat.IMAGE,
    "tif": StatementFormat.IMAGE,
    "tiff": StatementFormat.IMAGE,
}

_MIME_TYPES = {
    "text/csv": StatementFormat.DELIMITED,
    "text/tab-separated-values": StatementFormat.DELIMITED,
    "text/plain": StatementFormat.DELIMITED,
    "application/vnd.ms-excel": StatementFormat.SPREADSHEET,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": StatementFormat.SPREADSHEET,
    "application/pdf": StatementFormat.DOCUMENT,
}

_FORMAT_NAMES = frozenset(fmt.value for fmt in StatementFormat)

_MAGIC_BYTES = (
    (b"%PDF", StatementFormat.DOCUMENT),
    (b"PK\x03\x04", StatementFormat.SPREADSHEET),
    (b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1", StatementFormat.SPREADSHEET),
    (b"\x89PNG\r\n\x1a\n", StatementFormat.IMAGE),
    (b"\xff\xd8\xff", StatementFormat.IMAGE),
    (b"GIF87a", StatementFormat.IMAGE),
    (b"GIF89a", StatementFormat.IMAGE),
    (b"BM", StatementFormat.IMAGE),
    (b"II*\x00", StatementFormat.IMAGE),
    (b"MM\x00*", StatementFormat.IMAGE),
)


def sniff_format(file_bytes: bytes) -> StatementFormat | None:
    """Recognise binary formats by signature"""
    if file_bytes[:4] == b"RIFF" and file_bytes[8:12] == b"WEBP":
        return StatementFormat.IMAGE
    for signature, fmt in _MAGIC_BYTES:
        if file_bytes.startswith(signature):
            return fmt
    return None


def resolve_format(hint: str | None, file_bytes: bytes = b"") -> StatementFormat:
    """
    Map a file name, extension, format name or MIME type to a StatementFormat.

    The content signature decides when there is no hint or the hint is not
    recognised (e.g. application/octet-stream). Raises
    UnsupportedFormatError carrying the caller's hint otherwise.
    """
    if hint:
        token = hint.strip().lower()
        if token in _MIME_TYPES:
            return _MIME_TYPES[token]
        if token.startswith("image/"):
            return StatementFormat.IMAGE
        extension = token.rsplit(".", 1)[-1]
        if extension in _EXTENSIONS:
            return _EXTENSIONS[extension]
        if token in _FORMAT_NAMES:
            return StatementFormat(token)

    sniffed = sniff_format(file_bytes)
    if sniffed is None:
        raise UnsupportedFormatError(hint)
    return sniffed
