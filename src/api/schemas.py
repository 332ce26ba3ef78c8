"""Pydantic request/response schemas for the FastAPI endpoints."""

from pydantic import BaseModel


class TextExtractionRequest(BaseModel):
    """Request schema for extraction from already-OCR'd text."""

    text: str
    file_name: str = ""


class IdentifierResponse(BaseModel):
    """Response schema for one recognized or missing identifier."""

    found: bool
    value: str | None = None
    matched_by: str | None = None
    family: str | None = None


class DiagnosticsResponse(BaseModel):
    """Response schema for the trace of a failed recognition."""

    kind: str
    normalized_text: str
    attempted_patterns: list[str]
    rejected: list[dict[str, str]]
    file_stem: str | None = None


class ExtractionResponse(BaseModel):
    """Response schema for a label extraction request."""

    success: bool
    file_name: str
    message: str
    order_number: str | None = None
    tracking_number: str | None = None
    order: IdentifierResponse
    tracking: IdentifierResponse
    diagnostics: list[DiagnosticsResponse] = []
    ocr_confidence: float | None = None
    raw_text: str | None = None
    processing_time_ms: float = 0.0


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool
    pdftoppm_available: bool
