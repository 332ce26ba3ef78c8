"""Text canonicalization applied to OCR output before pattern matching.

Tesseract renders the hyphen in identifiers like ``R3817-1`` as whichever
dash glyph it believes it saw, so every dash variant is folded to an
ASCII hyphen before any recognizer looks at the text.
"""

import re

DASH_VARIANTS = (
    "‐"  # hyphen
    "‑"  # non-breaking hyphen
    "‒"  # figure dash
    "–"  # en dash
    "—"  # em dash
    "―"  # horizontal bar
    "−"  # minus sign
)

_DASH_TABLE = str.maketrans({char: "-" for char in DASH_VARIANTS})
_WHITESPACE = re.compile(r"\s+")


def normalize_dashes(text: str) -> str:
    """Map every dash variant in ``text`` to ``-``.

    All other characters pass through unchanged, so the function is
    total and idempotent.
    """
    return text.translate(_DASH_TABLE)


def strip_whitespace(text: str) -> str:
    """Remove all whitespace, including whitespace inside the string."""
    return _WHITESPACE.sub("", text)
