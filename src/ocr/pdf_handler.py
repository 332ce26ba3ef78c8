"""PDF to image conversion for label OCR.

Renders label PDFs to numpy arrays with poppler (through pdf2image),
from either file paths or raw bytes.
"""

from pathlib import Path
from typing import Any

import numpy as np
from pdf2image import convert_from_bytes, convert_from_path
from pdf2image.pdf2image import pdfinfo_from_bytes, pdfinfo_from_path

from src.utils.errors import PDFConversionError
from src.utils.logger import get_logger

logger = get_logger(__name__)


class PDFHandler:
    """Handles PDF to image conversion for OCR processing.

    Args:
        dpi: Resolution for PDF rendering. Higher values produce
            better OCR results but use more memory.
    """

    def __init__(self, dpi: int = 300) -> None:
        self.dpi = dpi

    @staticmethod
    def _page_range(first_page_only: bool) -> dict[str, Any]:
        return {"first_page": 1, "last_page": 1} if first_page_only else {}

    def pdf_to_images(
        self, pdf_source: Path | bytes, first_page_only: bool = False
    ) -> list[np.ndarray]:
        """Convert a PDF to a list of images.

        Args:
            pdf_source: Path to a PDF file or raw PDF bytes.
            first_page_only: Render only the first page. Shipping labels
                carry both identifiers on page one.

        Returns:
            List of images as numpy arrays (RGB format).

        Raises:
            FileNotFoundError: If a path is given and the file does not exist.
            PDFConversionError: If PDF conversion fails.
        """
        pages = self._page_range(first_page_only)
        try:
            if isinstance(pdf_source, str | Path):
                path = Path(pdf_source)
                if not path.exists():
                    raise FileNotFoundError(f"PDF file not found: {path}")
                pil_images = convert_from_path(str(path), dpi=self.dpi, **pages)
            else:
                pil_images = convert_from_bytes(pdf_source, dpi=self.dpi, **pages)

            images = [np.array(img) for img in pil_images]
            logger.info("Converted PDF to %d images at %d DPI", len(images), self.dpi)
            return images

        except FileNotFoundError:
            raise
        except Exception as exc:
            raise PDFConversionError(
                "PDF conversion failed", {"reason": str(exc)}
            ) from exc

    def get_page_count(self, pdf_source: Path | bytes) -> int:
        """Get the number of pages in a PDF without rendering it.

        Args:
            pdf_source: Path to a PDF file or raw PDF bytes.

        Returns:
            Number of pages in the PDF.
        """
        try:
            if isinstance(pdf_source, str | Path):
                info = pdfinfo_from_path(str(pdf_source))
            else:
                info = pdfinfo_from_bytes(pdf_source)
        except Exception as exc:
            raise PDFConversionError(
                "Failed to read PDF info", {"reason": str(exc)}
            ) from exc

        count = info["Pages"]
        logger.debug("PDF has %d pages", count)
        return count
