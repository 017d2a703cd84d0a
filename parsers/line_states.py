"""Per-line classification against resolved ranges."""

import logging
from collections import defaultdict
from typing import Sequence

from core.models import LineState
from parsers.range_resolver import ResolvedRange

logger = logging.getLogger(__name__)


def ranges_by_line(
    line_count: int, ranges: Sequence[ResolvedRange]
) -> dict[int, list[ResolvedRange]]:
    """Index *ranges* by every line they intersect, keeping range order."""
    index: dict[int, list[ResolvedRange]] = defaultdict(list)
    for rng in ranges:
        last = min(rng.end.line, line_count - 1)
        for line in range(rng.start.line, last + 1):
            index[line].append(rng)
    return index


def has_printable_outside(text: str, ranges: Sequence[ResolvedRange], line: int) -> bool:
    """True if a non-whitespace character of *text* lies outside every range."""
    covered = [False] * len(text)
    for rng in ranges:
        start, end = rng.columns_on(line, len(text))
        for col in range(start, end):
            covered[col] = True
    return any(not covered[col] and not ch.isspace() for col, ch in enumerate(text))


def classify_state(text: str, line: int, ranges: Sequence[ResolvedRange]) -> LineState:
    """Return the ``LineState`` of one line given the ranges intersecting it."""
    if not ranges:
        return LineState.PLAIN

    opens = any(rng.opens_past(line) for rng in ranges)
    closes = any(rng.closes_from_before(line) for rng in ranges)

    if opens and closes:
        return LineState.PARTIAL_ORPHANED_OPEN_AND_CLOSE
    if opens:
        return LineState.PARTIAL_ORPHANED_OPEN
    if closes:
        return LineState.PARTIAL_ORPHANED_CLOSE

    # Remaining ranges are either contained in this line or span across it.
    if has_printable_outside(text, ranges, line):
        return LineState.PARTIAL_SELF_CONTAINED
    return LineState.RANGE_ONLY


def classify(lines: Sequence[str], ranges: Sequence[ResolvedRange]) -> dict[int, LineState]:
    """Assign exactly one ``LineState`` to every line index."""
    index = ranges_by_line(len(lines), ranges)
    states = {
        idx: classify_state(text, idx, index.get(idx, ())) for idx, text in enumerate(lines)
    }
    logger.debug(
        "Classified %d lines, %d not plain",
        len(states),
        sum(1 for state in states.values() if state is not LineState.PLAIN),
    )
    return states
