"""Structured outcomes of identifier recognition.

Recognition failures are values, not exceptions: a batch of labels keeps
going when one label yields nothing, and the ``NotFound`` diagnostics
carry enough detail to inspect the label without re-running OCR.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ClassVar

from .patterns import Candidate


class IdentifierKind(StrEnum):
    """The identifiers read from a shipping label."""

    ORDER_NUMBER = "order_number"
    TRACKING_NUMBER = "tracking_number"


_MISSING_MESSAGES: dict[IdentifierKind, str] = {
    IdentifierKind.ORDER_NUMBER: "Order number not found in PDF",
    IdentifierKind.TRACKING_NUMBER: "Tracking number not found",
}


@dataclass(frozen=True)
class Diagnostics:
    """Trace of a failed recognition."""

    kind: IdentifierKind
    normalized_text: str
    attempted_patterns: tuple[str, ...]
    rejected: tuple[Candidate, ...] = ()
    file_stem: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": str(self.kind),
            "normalized_text": self.normalized_text,
            "attempted_patterns": list(self.attempted_patterns),
            "rejected": [c.to_dict() for c in self.rejected],
            "file_stem": self.file_stem,
        }

    def format_lines(self) -> list[str]:
        """Render the trace as log lines for an operator."""
        lines = [
            f"No {self.kind.value.replace('_', ' ')} found. Text content:",
            "---Begin Text Content---",
            self.normalized_text,
            "---End Text Content---",
        ]
        for candidate in self.rejected:
            lines.append(
                f"Rejected candidate {candidate.cleaned!r} "
                f"(pattern: {candidate.pattern.name})"
            )
        if self.file_stem is not None:
            lines.append(f"File name tried: {self.file_stem}")
        lines.append("Attempted patterns:")
        lines.extend(f"- {name}" for name in self.attempted_patterns)
        return lines


@dataclass(frozen=True)
class Found:
    """A validated, canonical identifier.

    Only recognizers construct this, and only after the value passed the
    validator for its kind.
    """

    found: ClassVar[bool] = True

    kind: IdentifierKind
    value: str
    matched_by: str
    family: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "found": True,
            "value": self.value,
            "matched_by": self.matched_by,
            "family": self.family,
        }


@dataclass(frozen=True)
class NotFound:
    """No valid identifier of ``diagnostics.kind`` was recognized."""

    found: ClassVar[bool] = False

    diagnostics: Diagnostics

    @property
    def kind(self) -> IdentifierKind:
        return self.diagnostics.kind

    def to_dict(self) -> dict[str, Any]:
        return {"found": False, "diagnostics": self.diagnostics.to_dict()}


Recognition = Found | NotFound


@dataclass(frozen=True)
class ExtractionReport:
    """Combined order and tracking outcome for one label."""

    file_name: str
    order: Recognition
    tracking: Recognition

    @property
    def success(self) -> bool:
        return self.order.found and self.tracking.found

    @property
    def order_number(self) -> str | None:
        return self.order.value if isinstance(self.order, Found) else None

    @property
    def tracking_number(self) -> str | None:
        return self.tracking.value if isinstance(self.tracking, Found) else None

    @property
    def missing(self) -> list[IdentifierKind]:
        """Kinds that were not recognized, order number first."""
        return [r.kind for r in (self.order, self.tracking) if isinstance(r, NotFound)]

    @property
    def diagnostics(self) -> list[Diagnostics]:
        return [
            r.diagnostics for r in (self.order, self.tracking) if isinstance(r, NotFound)
        ]

    @property
    def message(self) -> str:
        if self.success:
            return "Identifiers extracted"
        return "; ".join(_MISSING_MESSAGES[kind] for kind in self.missing)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_name": self.file_name,
            "success": self.success,
            "message": self.message,
            "order_number": self.order_number,
            "tracking_number": self.tracking_number,
            "order": self.order.to_dict(),
            "tracking": self.tracking.to_dict(),
        }
