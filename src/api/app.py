"""FastAPI application for the shipping label processor.

Provides REST endpoints for extracting order and tracking numbers from
uploaded label PDFs or from already-OCR'd text, plus a health check.
"""

import shutil
import time
from typing import Annotated

from fastapi import FastAPI, File, HTTPException, UploadFile

from src import __version__
from src.extraction.label_extractor import LabelExtractor
from src.extraction.report import ExtractionReport, Found
from src.ocr.document_processor import DocumentProcessor, DocumentResult
from src.utils.config import load_config
from src.utils.errors import UpstreamError
from src.utils.logger import get_logger

from .schemas import (
    DiagnosticsResponse,
    ExtractionResponse,
    HealthResponse,
    IdentifierResponse,
    TextExtractionRequest,
)

logger = get_logger(__name__)

app = FastAPI(
    title="Shipping Label Processor API",
    description="Extract order and tracking numbers from shipping label PDFs",
    version=__version__,
)

_ALLOWED_CONTENT_TYPES = {
    "application/pdf",
    "application/octet-stream",
}


def _get_components() -> tuple[DocumentProcessor, LabelExtractor]:
    """Initialize and return the processing components.

    Returns:
        Tuple of (document_processor, label_extractor).
    """
    config = load_config()
    return DocumentProcessor(config), LabelExtractor(config.extraction)


def _to_response(
    report: ExtractionReport,
    start_time: float,
    doc_result: DocumentResult | None = None,
) -> ExtractionResponse:
    def identifier(recognition) -> IdentifierResponse:
        if isinstance(recognition, Found):
            return IdentifierResponse(
                found=True,
                value=recognition.value,
                matched_by=recognition.matched_by,
                family=recognition.family,
            )
        return IdentifierResponse(found=False)

    return ExtractionResponse(
        success=report.success,
        file_name=report.file_name,
        message=report.message,
        order_number=report.order_number,
        tracking_number=report.tracking_number,
        order=identifier(report.order),
        tracking=identifier(report.tracking),
        diagnostics=[DiagnosticsResponse(**d.to_dict()) for d in report.diagnostics],
        ocr_confidence=doc_result.confidence if doc_result is not None else None,
        raw_text=doc_result.combined_text if doc_result is not None else None,
        processing_time_ms=(time.time() - start_time) * 1000,
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return system health status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        tesseract_available=shutil.which("tesseract") is not None,
        pdftoppm_available=shutil.which("pdftoppm") is not None,
    )


@app.post("/extract/text", response_model=ExtractionResponse)
async def extract_text(request: TextExtractionRequest) -> ExtractionResponse:
    """Extract identifiers from OCR text supplied by the caller."""
    start_time = time.time()
    _, extractor = _get_components()
    report = extractor.extract(request.text, request.file_name)
    return _to_response(report, start_time)


@app.post("/extract", response_model=ExtractionResponse)
async def extract_document(
    file: Annotated[UploadFile, File(...)],
) -> ExtractionResponse:
    """OCR an uploaded label PDF and extract its identifiers.

    Args:
        file: Uploaded label PDF.

    Returns:
        Extraction report including the raw OCR text.
    """
    start_time = time.time()

    if file.content_type and file.content_type not in _ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: {file.content_type}",
        )

    processor, extractor = _get_components()
    content = await file.read()
    file_name = file.filename or "label.pdf"

    try:
        doc_result = processor.process(content, file_name)
    except UpstreamError as exc:
        logger.error("OCR failed for %s: %s", file_name, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    report = extractor.extract(doc_result.combined_text, file_name)
    return _to_response(report, start_time, doc_result)
