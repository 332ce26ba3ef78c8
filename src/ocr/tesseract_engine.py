"""Tesseract OCR engine wrapper.

Runs Tesseract over rendered label pages and reports the recognized
text with an average word confidence.
"""

from dataclasses import dataclass

import numpy as np
import pytesseract
from PIL import Image

from src.utils.errors import OCRError
from src.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class OCRResult:
    """OCR result for a single page."""

    text: str
    language: str
    confidence: float


class TesseractEngine:
    """Wrapper around Tesseract OCR for label text extraction.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        default_lang: Default OCR language code.
        tessdata_dir: Directory holding the trained language data.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        default_lang: str = "eng",
        tessdata_dir: str | None = None,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.default_lang = default_lang
        self.tessdata_dir = tessdata_dir

    def build_config(self, psm: int = 3, oem: int = 1) -> str:
        """Build the Tesseract command-line configuration string."""
        config = f"--oem {oem} --psm {psm}"
        if self.tessdata_dir:
            config += f' --tessdata-dir "{self.tessdata_dir}"'
        return config

    def extract_text(
        self,
        image: np.ndarray,
        lang: str | None = None,
        psm: int = 3,
        oem: int = 1,
    ) -> OCRResult:
        """Extract text from an image.

        Args:
            image: Input image as a numpy array.
            lang: OCR language code. Defaults to the engine default.
            psm: Tesseract page segmentation mode.
            oem: Tesseract OCR engine mode (1 is LSTM only).

        Returns:
            OCRResult containing the full text and average confidence.

        Raises:
            OCRError: If Tesseract is missing or fails on the image.
        """
        lang = lang or self.default_lang
        config = self.build_config(psm=psm, oem=oem)

        pil_image = Image.fromarray(image)
        try:
            text = pytesseract.image_to_string(pil_image, lang=lang, config=config)
            data = pytesseract.image_to_data(
                pil_image,
                lang=lang,
                config=config,
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
            raise OCRError("Tesseract OCR failed", {"reason": str(exc)}) from exc

        total_conf = 0.0
        word_count = 0
        for conf, word_text in zip(data["conf"], data["text"]):
            if float(conf) > 0 and word_text.strip():
                total_conf += float(conf)
                word_count += 1

        avg_conf = (total_conf / word_count / 100.0) if word_count > 0 else 0.0

        logger.info(
            "OCR extracted %d words with average confidence %.2f",
            word_count,
            avg_conf,
        )
        return OCRResult(
            text=text,
            language=lang,
            confidence=avg_conf,
        )
