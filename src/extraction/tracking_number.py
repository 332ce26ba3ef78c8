"""Carrier tracking number recognition.

The label text is searched first. Some labels lose the tracking block
to OCR, but the source system saves each label PDF under its tracking
number, so the file name serves as a fallback.
"""

import re
from pathlib import PurePath

from src.utils.logger import get_logger

from .normalizer import normalize_dashes, strip_whitespace
from .patterns import IdentifierPattern, build_patterns
from .report import Diagnostics, Found, IdentifierKind, NotFound, Recognition

logger = get_logger(__name__)

FILENAME_SOURCE = "filename"

# USPS IMpb tracking numbers are 22 digits: 9205 XXXX XXXX XXXX XXXX XX.
# The trailing pair is part of the number, not a separate field.
TRACKING_PATTERNS: tuple[IdentifierPattern, ...] = build_patterns(
    [("usps_9205", r"\b(9205\s*\d{4}\s*\d{4}\s*\d{4}\s*\d{4}\s*\d{2})\b", 0)]
)

TRACKING_NUMBER_FORMAT = re.compile(r"\d{20,22}", re.ASCII)

_PDF_SUFFIX = re.compile(r"\.pdf$", re.IGNORECASE)


def file_stem(file_name: str) -> str:
    """Return the base name of ``file_name`` without a ``.pdf`` extension."""
    return _PDF_SUFFIX.sub("", PurePath(file_name).name)


def is_valid_tracking_number(value: str) -> bool:
    return TRACKING_NUMBER_FORMAT.fullmatch(value) is not None


class TrackingNumberRecognizer:
    """Text search with file name fallback for tracking numbers.

    Args:
        patterns: Tracking patterns searched in the label text, in order.
        filename_fallback: Whether to accept an all-digit file name.
    """

    def __init__(
        self,
        patterns: tuple[IdentifierPattern, ...] = TRACKING_PATTERNS,
        filename_fallback: bool = True,
    ) -> None:
        self.patterns = patterns
        self.filename_fallback = filename_fallback

    def recognize(self, text: str, file_name: str | None = None) -> Recognition:
        """Locate a tracking number in ``text`` or, failing that, ``file_name``.

        Args:
            text: Raw or normalized OCR text.
            file_name: Name or path of the source PDF.

        Returns:
            ``Found`` with the tracking number stripped of whitespace, or
            ``NotFound`` naming both sources that were tried.
        """
        normalized = normalize_dashes(text)
        attempted: list[str] = []

        for pattern in self.patterns:
            attempted.append(pattern.name)
            match = pattern.regex.search(normalized)
            if match is None:
                continue
            value = strip_whitespace(pattern.capture(match))
            if is_valid_tracking_number(value):
                logger.debug("Found tracking number in PDF: %s", value)
                return Found(
                    kind=IdentifierKind.TRACKING_NUMBER,
                    value=value,
                    matched_by=pattern.name,
                )

        stem: str | None = None
        if self.filename_fallback and file_name:
            attempted.append(FILENAME_SOURCE)
            stem = file_stem(file_name)
            if is_valid_tracking_number(stem):
                logger.debug("Found tracking number in filename: %s", stem)
                return Found(
                    kind=IdentifierKind.TRACKING_NUMBER,
                    value=stem,
                    matched_by=FILENAME_SOURCE,
                )

        return NotFound(
            Diagnostics(
                kind=IdentifierKind.TRACKING_NUMBER,
                normalized_text=normalized,
                attempted_patterns=tuple(attempted),
                file_stem=stem,
            )
        )
