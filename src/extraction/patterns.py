"""Pattern table primitives shared by the identifier recognizers."""

import re
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class IdentifierPattern:
    """A named regular expression in a recognizer's ordered cascade.

    ``group`` is the capture rule: the group holding the identifier, or
    ``0`` for the whole match. When the group did not participate in the
    match the whole match is used instead.
    """

    name: str
    priority: int
    regex: re.Pattern[str]
    group: int = 1

    def capture(self, match: re.Match[str]) -> str:
        """Return the identifier text captured by ``match``."""
        if 0 < self.group <= self.regex.groups:
            value = match.group(self.group)
            if value:
                return value
        return match.group(0)


@dataclass(frozen=True)
class Candidate:
    """A matched substring that a recognizer considered."""

    raw: str
    cleaned: str
    pattern: IdentifierPattern

    def to_dict(self) -> dict[str, str]:
        return {"raw": self.raw, "cleaned": self.cleaned, "pattern": self.pattern.name}


def build_patterns(
    definitions: Iterable[tuple[str, str, int]],
) -> tuple[IdentifierPattern, ...]:
    """Compile ``(name, regex, flags)`` definitions into an ordered table.

    Priority follows definition order. ``re.ASCII`` is always added so
    ``\\d`` and ``\\b`` only consider ASCII digits and word characters.

    Raises:
        ValueError: If two definitions share a name.
        re.error: If a regex does not compile.
    """
    patterns: list[IdentifierPattern] = []
    seen: set[str] = set()
    for priority, (name, regex, flags) in enumerate(definitions):
        if name in seen:
            raise ValueError(f"Duplicate pattern name: {name}")
        seen.add(name)
        patterns.append(
            IdentifierPattern(
                name=name,
                priority=priority,
                regex=re.compile(regex, flags | re.ASCII),
            )
        )
    return tuple(patterns)
