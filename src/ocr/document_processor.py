"""Label document processing pipeline.

Combines PDF rendering and OCR into a single interface that turns a
label file into the text the identifier extractors consume.
"""

import io
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image

from src.utils.config import AppConfig
from src.utils.logger import get_logger

from .pdf_handler import PDFHandler
from .tesseract_engine import OCRResult, TesseractEngine

logger = get_logger(__name__)

PAGE_SEPARATOR = "\n\n--- Page Break ---\n\n"


@dataclass
class PageResult:
    """OCR result for a single document page."""

    page_number: int
    ocr_result: OCRResult


@dataclass
class DocumentResult:
    """Complete OCR results for a document."""

    source_file: str
    page_count: int
    pages: list[PageResult]
    combined_text: str

    @property
    def confidence(self) -> float:
        """Mean OCR confidence over all pages, 0.0 when no page was read."""
        if not self.pages:
            return 0.0
        return sum(p.ocr_result.confidence for p in self.pages) / len(self.pages)


class DocumentProcessor:
    """Renders label documents and runs OCR on each page.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.pdf_handler = PDFHandler(dpi=config.ocr.pdf_dpi)
        self.ocr_engine = TesseractEngine(
            tesseract_cmd=config.ocr.tesseract_cmd,
            default_lang=config.ocr.default_lang,
            tessdata_dir=config.ocr.tessdata_dir,
        )

    def process(
        self, source: Path | bytes, filename: str = "document"
    ) -> DocumentResult:
        """Process a document from file path or bytes.

        Args:
            source: Path to a document file, or raw file bytes.
            filename: Display name for the source document.

        Returns:
            OCR results for every rendered page.

        Raises:
            FileNotFoundError: If ``source`` is a missing path.
            PDFConversionError: If the PDF cannot be rendered.
            OCRError: If Tesseract fails.
        """
        logger.info("Processing document: %s", filename)
        images = self._load_images(source)
        pages: list[PageResult] = []

        for i, image in enumerate(images):
            ocr_result = self.ocr_engine.extract_text(
                image,
                psm=self.config.ocr.psm,
                oem=self.config.ocr.oem,
            )
            pages.append(PageResult(page_number=i + 1, ocr_result=ocr_result))

        combined_text = PAGE_SEPARATOR.join(p.ocr_result.text for p in pages)

        logger.info("OCR completed for %d pages from %s", len(pages), filename)
        return DocumentResult(
            source_file=filename,
            page_count=len(pages),
            pages=pages,
            combined_text=combined_text,
        )

    def _load_images(self, source: Path | bytes) -> list[np.ndarray]:
        """Load document images from a file path or bytes.

        Supports PDF files and common image formats (PNG, JPEG, TIFF).

        Args:
            source: Path or raw bytes of the document.

        Returns:
            List of images as numpy arrays.
        """
        first_page_only = self.config.ocr.first_page_only
        if isinstance(source, bytes):
            if source[:4] == b"%PDF":
                return self._render_pdf(source, first_page_only)
            img = Image.open(io.BytesIO(source))
            return [np.array(img)]

        path = Path(source)
        if path.suffix.lower() == ".pdf":
            return self._render_pdf(path, first_page_only)

        img = Image.open(path)
        return [np.array(img)]

    def _render_pdf(self, source: Path | bytes, first_page_only: bool) -> list[np.ndarray]:
        images = self.pdf_handler.pdf_to_images(source, first_page_only)
        if first_page_only:
            total = self.pdf_handler.get_page_count(source)
            if total > len(images):
                logger.warning(
                    "Document has %d pages, only the first %d OCR'd",
                    total,
                    len(images),
                )
        return images
