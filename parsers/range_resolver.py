"""Pairing of open and close markers into resolved ranges.

Each ``RangeKind`` is resolved on its own with a single pending-open slot,
since same-kind nesting is not part of Fountain.  Markers that never find
a partner become orphaned ranges rather than errors:

- a close with nothing pending covers its line from the start-of-scan (the
  line start, or the end of the last same-kind range on that line);
- an open still pending at end of document runs to the end of the document.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from core.exceptions import SameKindNestingException
from core.models import MarkerRole, NestingPolicy, RangeKind, RangeStatus
from parsers.markers import TOKEN_WIDTH, MarkerOccurrence, Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedRange:
    """A ranged element; ``start`` is inclusive and ``end`` exclusive."""

    kind: RangeKind
    start: Position
    end: Position
    status: RangeStatus
    open_marker: MarkerOccurrence | None = None
    close_marker: MarkerOccurrence | None = None

    @property
    def sort_key(self) -> tuple[Position, int]:
        return (self.start, self.kind.priority)

    @property
    def is_multiline(self) -> bool:
        return self.end.line > self.start.line

    def intersects_line(self, line: int) -> bool:
        return self.start.line <= line <= self.end.line

    def columns_on(self, line: int, line_length: int) -> tuple[int, int]:
        """Clip the range to *line* and return ``(start_col, end_col)``."""
        start = self.start.column if self.start.line == line else 0
        end = self.end.column if self.end.line == line else line_length
        return start, min(end, line_length)

    def opens_past(self, line: int) -> bool:
        """True if an open marker on *line* is not closed on that line."""
        if self.open_marker is None or self.start.line != line:
            return False
        return self.status is RangeStatus.ORPHANED_OPEN or self.end.line > line

    def closes_from_before(self, line: int) -> bool:
        """True if a close marker on *line* belongs to an earlier (or implied) open."""
        if self.close_marker is None or self.end.line != line:
            return False
        return self.status is RangeStatus.ORPHANED_CLOSE or self.start.line < line

    def is_within_line(self, line: int) -> bool:
        return self.start.line == line and self.end.line == line

    def content(self, lines: Sequence[str]) -> str:
        """Return the text between the tokens (tokens themselves excluded)."""
        start = self.start
        end = self.end
        if self.open_marker is not None:
            start = Position(start.line, start.column + TOKEN_WIDTH)
        if self.close_marker is not None:
            end = Position(end.line, end.column - TOKEN_WIDTH)
        if start.line == end.line:
            return lines[start.line][start.column : end.column]
        parts = [lines[start.line][start.column :]]
        parts.extend(lines[start.line + 1 : end.line])
        parts.append(lines[end.line][: end.column])
        return "\n".join(parts)


def resolve(
    occurrences: Iterable[MarkerOccurrence],
    lines: Sequence[str],
    *,
    nesting_policy: NestingPolicy = NestingPolicy.LITERAL,
) -> tuple[list[ResolvedRange], frozenset[MarkerOccurrence]]:
    """Pair markers into ranges.

    Returns ``(ranges, unmatched)`` where *ranges* is ordered by start
    position (ties broken by kind priority) and *unmatched* holds the
    markers of orphaned ranges.

    Raises ``SameKindNestingException`` under ``NestingPolicy.REJECT`` when
    an open marker appears while a same-kind open is pending.
    """
    pending: dict[RangeKind, MarkerOccurrence] = {}
    last_end: dict[RangeKind, Position] = {}
    ranges: list[ResolvedRange] = []
    unmatched: set[MarkerOccurrence] = set()

    for occ in sorted(occurrences, key=lambda o: o.position):
        if occ.role is MarkerRole.OPEN:
            held = pending.get(occ.kind)
            if held is None:
                pending[occ.kind] = occ
                continue
            if nesting_policy is NestingPolicy.REJECT:
                raise SameKindNestingException(
                    f"{occ.kind.value} opened at line {occ.line + 1} while another "
                    f"{occ.kind.value} opened at line {held.line + 1} is still open",
                    details={
                        "kind": occ.kind.value,
                        "line": occ.line,
                        "column": occ.column,
                        "open_line": held.line,
                        "open_column": held.column,
                    },
                )
            logger.warning(
                "Nested %s open at %d:%d treated as literal text",
                occ.kind.value,
                occ.line,
                occ.column,
            )
            continue

        end = Position(occ.line, occ.end_column)
        opener = pending.pop(occ.kind, None)
        if opener is not None:
            rng = ResolvedRange(
                kind=occ.kind,
                start=opener.position,
                end=end,
                status=RangeStatus.CLOSED,
                open_marker=opener,
                close_marker=occ,
            )
        else:
            scan_start = Position(occ.line, 0)
            previous = last_end.get(occ.kind)
            if previous is not None and previous.line == occ.line:
                scan_start = max(scan_start, previous)
            rng = ResolvedRange(
                kind=occ.kind,
                start=scan_start,
                end=end,
                status=RangeStatus.ORPHANED_CLOSE,
                close_marker=occ,
            )
            unmatched.add(occ)
        ranges.append(rng)
        last_end[occ.kind] = end

    if pending:
        last_line = len(lines) - 1
        doc_end = Position(last_line, len(lines[last_line]))
        for kind, opener in pending.items():
            ranges.append(
                ResolvedRange(
                    kind=kind,
                    start=opener.position,
                    end=doc_end,
                    status=RangeStatus.ORPHANED_OPEN,
                    open_marker=opener,
                )
            )
            unmatched.add(opener)

    ranges.sort(key=lambda r: r.sort_key)
    if unmatched:
        logger.info("Resolved %d ranges, %d unmatched markers", len(ranges), len(unmatched))
    else:
        logger.debug("Resolved %d ranges", len(ranges))
    return ranges, frozenset(unmatched)


def literal_markers(
    occurrences: Iterable[MarkerOccurrence], ranges: Iterable[ResolvedRange]
) -> list[MarkerOccurrence]:
    """Return the occurrences that no range claimed (nested opens kept as text)."""
    claimed: set[MarkerOccurrence] = set()
    for rng in ranges:
        if rng.open_marker is not None:
            claimed.add(rng.open_marker)
        if rng.close_marker is not None:
            claimed.add(rng.close_marker)
    return [occ for occ in occurrences if occ not in claimed]
