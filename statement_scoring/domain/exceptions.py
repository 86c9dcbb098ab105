"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class UnsupportedFormatError(DomainException):
    """File extension or content is not a recognised statement format"""

    def __init__(self, hint: str | None):
        self.hint = hint
        super().__init__(f"Unsupported file format: {hint or 'unknown'}")


class EmptyInputError(DomainException):
    """File parsed but yielded no usable rows or lines"""

    pass


class ExtractionFailureError(DomainException):
    """Underlying reader failed, text recognition failed, or bytes are corrupt"""

    pass


class RecognitionFailureError(DomainException):
    """Optical text recognition engine failed or timed out"""

    pass
