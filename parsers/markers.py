"""Marker scanner for ranged elements (Notes and Boneyards).

Finds every open/close token of every ``RangeKind`` in a single forward
scan per line.  Tokens are fixed two-character literals, so no regular
expressions are needed.
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple, Sequence

from core.models import MarkerRole, RangeKind

logger = logging.getLogger(__name__)

TOKEN_WIDTH = 2
ESCAPE_CHAR = "\\"

# token -> (kind, role); Fountain's tokens are pairwise distinct
_TOKENS: dict[str, tuple[RangeKind, MarkerRole]] = {
    token: (kind, role)
    for kind in RangeKind
    for token, role in (
        (kind.open_token, MarkerRole.OPEN),
        (kind.close_token, MarkerRole.CLOSE),
    )
}


class Position(NamedTuple):
    """A raw document coordinate. Orders by line, then column."""

    line: int
    column: int


@dataclass(frozen=True, slots=True)
class MarkerOccurrence:
    """A single open or close token found in the raw text."""

    kind: RangeKind
    role: MarkerRole
    line: int
    column: int

    @property
    def position(self) -> Position:
        return Position(self.line, self.column)

    @property
    def end_column(self) -> int:
        return self.column + TOKEN_WIDTH


def scan_line(
    text: str, line: int, *, honor_escapes: bool = True
) -> list[MarkerOccurrence]:
    """Return the marker occurrences on one line, in column order."""
    found: list[MarkerOccurrence] = []
    col = 0
    length = len(text)
    while col < length:
        if honor_escapes and text[col] == ESCAPE_CHAR:
            col += 2
            continue
        match = _TOKENS.get(text[col : col + TOKEN_WIDTH])
        if match is None:
            col += 1
            continue
        kind, role = match
        found.append(MarkerOccurrence(kind=kind, role=role, line=line, column=col))
        col += TOKEN_WIDTH
    return found


def scan(
    raw_lines: Sequence[str], *, honor_escapes: bool = True
) -> list[MarkerOccurrence]:
    """Scan every line and return all occurrences ordered by ``(line, column)``."""
    occurrences: list[MarkerOccurrence] = []
    for idx, text in enumerate(raw_lines):
        occurrences.extend(scan_line(text, idx, honor_escapes=honor_escapes))
    logger.debug("Scanned %d lines, %d markers", len(raw_lines), len(occurrences))
    return occurrences
