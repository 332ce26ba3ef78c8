"""Errors raised by the collaborators around the extraction core.

Identifier recognition never raises: a missing order or tracking
number is a ``NotFound`` value. Only PDF rendering, OCR, and the
fulfillment API fail with exceptions, all derived from ``UpstreamError``.
"""

from typing import Any


class UpstreamError(RuntimeError):
    """Base class for failures of PDF, OCR, or network collaborators.

    Attributes:
        message: Human-readable error message.
        details: Additional context for the operator.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class PDFConversionError(UpstreamError):
    """Raised when a PDF cannot be rendered to images."""


class OCRError(UpstreamError):
    """Raised when Tesseract fails to recognize a page."""


class FulfillmentError(UpstreamError):
    """Raised when the fulfillment API rejects or cannot complete an update."""
