"""Identifier extraction for a single shipping label.

Runs the order number and tracking number recognizers independently
over the same OCR text and combines their outcomes into one report.
"""

from src.utils.config import ExtractionConfig
from src.utils.logger import get_logger

from .order_number import OrderNumberRecognizer
from .report import ExtractionReport
from .tracking_number import TrackingNumberRecognizer

logger = get_logger(__name__)


class LabelExtractor:
    """Extracts the order and tracking numbers from label text.

    Holds no per-document state, so one instance can serve any number of
    labels, from any number of threads.

    Args:
        config: Extraction configuration.
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()
        self.order_recognizer = OrderNumberRecognizer()
        self.tracking_recognizer = TrackingNumberRecognizer(
            filename_fallback=self.config.filename_fallback,
        )

    def extract(self, text: str, file_name: str = "") -> ExtractionReport:
        """Recognize both identifiers in one label's OCR text.

        Args:
            text: OCR text of the label.
            file_name: Name of the label PDF, used as tracking fallback.

        Returns:
            Report with both outcomes and any failure diagnostics.
        """
        report = ExtractionReport(
            file_name=file_name,
            order=self.order_recognizer.recognize(text),
            tracking=self.tracking_recognizer.recognize(text, file_name),
        )
        if report.success:
            logger.info(
                "Extracted order %s and tracking %s from %s",
                report.order_number,
                report.tracking_number,
                file_name or "text",
            )
        else:
            logger.info("Extraction incomplete for %s: %s", file_name or "text", report.message)
        return report
