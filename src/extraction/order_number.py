"""Order number recognition from shipping label OCR text.

Order numbers come from several storefronts and legacy systems, each
with its own format. A table of patterns is tried in priority order,
most specific first, because the permissive bare-digit patterns would
otherwise claim substrings a labeled pattern should own. Every hit is
cleaned, prefix-canonicalized, and validated; an invalid hit moves the
cascade on to the next pattern.
"""

import re
from dataclasses import dataclass

from src.utils.logger import get_logger

from .normalizer import normalize_dashes, strip_whitespace
from .patterns import Candidate, IdentifierPattern, build_patterns
from .report import Diagnostics, Found, IdentifierKind, NotFound, Recognition

logger = get_logger(__name__)

LONG_PREFIXES: tuple[str, ...] = ("EJR", "EJC", "MH")
SHORT_PREFIXES: tuple[str, ...] = ("R", "AL")

_LONG = "(?:" + "|".join(LONG_PREFIXES) + ")"
_SHORT = "(?:" + "|".join(SHORT_PREFIXES) + ")"
_LABEL = r"(?:Order\s*#?\s*|Order\s*Number\s*[:\"']?\s*)"
_I = re.IGNORECASE

# (name, regex, flags) in cascade order
_ORDER_PATTERN_DEFS: list[tuple[str, str, int]] = [
    # 000235334-1-3
    ("nine_digit_multi_segment", r"\b(\d{9}(?:\s*-\s*\d){2,})\b", 0),
    # Order #EJR123456-1, Order Number: 000232569 - 1
    ("order_label_long", _LABEL + r"((?:" + _LONG + r")?\d{6,9}\s*-?\s*\d?)", _I),
    # Order #R3817-1
    ("order_label_short", _LABEL + r"((?:" + _SHORT + r")?\d{4}\s*-?\s*\d?)", _I),
    # Order #EL649453EL-1
    ("order_label_el", _LABEL + r"(EL\d{6}EL\s*-?\s*\d?)", _I),
    ("hash_prefixed", r"#\s*((?:" + _LONG + "|" + _SHORT + r")?\d{4,9}\s*-?\s*\d?)", _I),
    ("hash_el", r"#\s*(EL\d{6}EL\s*-?\s*\d?)", _I),
    # 2000000289-1
    ("leading_two", r"\b(2\d{9}(?:-\d)?)\b", 0),
    # EL649453EL-1
    ("el_wrapped", r"\b(EL\d{6}EL(?:-\d)?)\b", _I),
    # R3817-1, AL5862-1
    ("short_prefix", r"\b(" + _SHORT + r"\d{4}(?:-\d)?)\b", _I),
    # EJR123456-1, EJC123456-1, MH123456-1
    ("long_prefix", r"\b(" + _LONG + r"\d{6}(?:-\d)?)\b", _I),
    ("nine_digit_spaced_dash", r"\b(\d{9}\s*-\s*\d)\b", 0),
    ("nine_digit", r"\b(\d{9}(?:-\d)?)\b", 0),
    ("six_digit_spaced_dash", r"\b(\d{6}\s*-\s*\d)\b", 0),
    ("six_digit_dash", r"\b(\d{6}-\d)\b", 0),
    # OCR often glues a stray character to the end of the identifier,
    # which defeats the trailing \b of the patterns above.
    ("standalone_el", r"(?:^|\s|#)(EL\d{6}EL(?:-\d)?)", _I),
    ("standalone_short_prefix", r"(?:^|\s|#)(" + _SHORT + r"\d{4}(?:-\d)?)", _I),
    ("standalone_long_prefix", r"(?:^|\s|#)(" + _LONG + r"\d{6}(?:-\d)?)", _I),
]

ORDER_PATTERNS: tuple[IdentifierPattern, ...] = build_patterns(_ORDER_PATTERN_DEFS)


@dataclass(frozen=True)
class OrderNumberFormat:
    """A format family and the full-match regex its canonical values obey."""

    family: str
    regex: re.Pattern[str]

    def matches(self, value: str) -> bool:
        return self.regex.fullmatch(value) is not None


def _format(family: str, regex: str) -> OrderNumberFormat:
    return OrderNumberFormat(family, re.compile(regex, re.ASCII))


# Every family requires at least one -digit segment.
ORDER_NUMBER_FORMATS: tuple[OrderNumberFormat, ...] = (
    _format("leading_two", r"2\d{9}(?:-\d)+"),
    _format("el_wrapped", r"EL\d{6}EL(?:-\d)+"),
    _format("short_prefix", _SHORT + r"\d{4}(?:-\d)+"),
    _format("long_prefix", _LONG + r"\d{6}(?:-\d)+"),
    _format("nine_digit", r"\d{9}(?:-\d)+"),
    _format("six_digit", r"\d{6}(?:-\d)+"),
)

_EL_TOKEN = re.compile("el", re.IGNORECASE)


def canonicalize_prefix(value: str) -> str:
    """Rewrite a known prefix to its canonical casing.

    EL-wrapped values (``el649453el-1``) get every ``el`` uppercased. For
    the other prefixes only the prefix characters are rewritten, so
    ``r3817-1`` becomes ``R3817-1``.
    """
    upper = value.upper()
    if upper.startswith("EL") and "EL-" in upper:
        return _EL_TOKEN.sub("EL", value)
    for prefix in LONG_PREFIXES + SHORT_PREFIXES:
        if upper.startswith(prefix):
            return prefix + value[len(prefix):]
    return value


def clean_candidate(raw: str) -> str:
    """Strip whitespace, fold dashes, and canonicalize the prefix of a match."""
    return canonicalize_prefix(normalize_dashes(strip_whitespace(raw)))


class OrderNumberRecognizer:
    """Ordered pattern cascade for order numbers.

    Args:
        patterns: Pattern table in priority order.
        formats: Format families a cleaned candidate must satisfy.
    """

    def __init__(
        self,
        patterns: tuple[IdentifierPattern, ...] = ORDER_PATTERNS,
        formats: tuple[OrderNumberFormat, ...] = ORDER_NUMBER_FORMATS,
    ) -> None:
        names = [p.name for p in patterns]
        if len(set(names)) != len(names):
            raise ValueError("Order number patterns must have unique names")
        self.patterns = patterns
        self.formats = formats

    def match_format(self, value: str) -> str | None:
        """Return the family ``value`` belongs to, or ``None`` if invalid."""
        for fmt in self.formats:
            if fmt.matches(value):
                return fmt.family
        return None

    def recognize(self, text: str) -> Recognition:
        """Find the most plausible order number in ``text``.

        Args:
            text: Raw or normalized OCR text.

        Returns:
            ``Found`` with the canonical order number, or ``NotFound``
            listing every attempted pattern and rejected candidate.
        """
        normalized = normalize_dashes(text)
        rejected: list[Candidate] = []

        for pattern in self.patterns:
            match = pattern.regex.search(normalized)
            if match is None:
                continue

            raw = pattern.capture(match)
            cleaned = clean_candidate(raw)
            family = self.match_format(cleaned)
            if family is None:
                logger.debug(
                    "Found potential order number but invalid format: %s (pattern: %s)",
                    cleaned,
                    pattern.name,
                )
                rejected.append(Candidate(raw=raw, cleaned=cleaned, pattern=pattern))
                continue

            logger.debug("Found order number: %s (pattern: %s)", cleaned, pattern.name)
            return Found(
                kind=IdentifierKind.ORDER_NUMBER,
                value=cleaned,
                matched_by=pattern.name,
                family=family,
            )

        return NotFound(
            Diagnostics(
                kind=IdentifierKind.ORDER_NUMBER,
                normalized_text=normalized,
                attempted_patterns=tuple(p.name for p in self.patterns),
                rejected=tuple(rejected),
            )
        )
