"""Produce stripped lines (ranged content and emphasis markers removed).

Every stripped line keeps its raw twin and an ``IndexMap`` between them, so
the raw document can always be rebuilt from the stripped one.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Sequence

from core.exceptions import IndexMapInconsistencyError
from core.models import EmphasisStyle, LineState, RangeKind, RangeStatus
from parsers.index_map import IndexMap
from parsers.line_states import ranges_by_line
from parsers.range_resolver import ResolvedRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RangeSegment:
    """The part of a resolved range that falls on one line."""

    resolved: ResolvedRange
    start_column: int
    end_column: int

    @property
    def kind(self) -> RangeKind:
        return self.resolved.kind

    @property
    def status(self) -> RangeStatus:
        return self.resolved.status


@dataclass(frozen=True, slots=True)
class EmphasisSpan:
    """An emphasis span in raw columns, markers included; end is exclusive."""

    style: EmphasisStyle
    raw_start: int
    raw_end: int


@dataclass(frozen=True, slots=True)
class StrippedLine:
    raw_line: int
    raw_text: str
    text: str
    index_map: IndexMap
    state: LineState = LineState.PLAIN
    segments: tuple[RangeSegment, ...] = ()
    emphasis: tuple[EmphasisSpan, ...] = ()

    @property
    def has_printable_text(self) -> bool:
        return bool(self.text.strip())

    def raw_extent(self) -> tuple[int, int] | None:
        """Raw columns from the first to just past the last retained character."""
        if not self.text:
            return None
        first = self.index_map.to_raw(0)
        last = self.index_map.to_raw(len(self.text) - 1)
        return first, last + 1

    def removed_text(self) -> list[tuple[int, int, str]]:
        """Return ``(raw_start, raw_end, text)`` of every removed span."""
        return [
            (start, end, self.raw_text[start:end])
            for start, end, _ in self.index_map.removed_spans()
        ]

    def reconstruct(self) -> str:
        """Re-insert the removed spans into the stripped text."""
        parts: list[str] = []
        for seg in self.index_map.segments():
            length = seg.raw_end - seg.raw_start
            if seg.retained:
                parts.append(self.text[seg.stripped_start : seg.stripped_start + length])
            else:
                parts.append(self.raw_text[seg.raw_start : seg.raw_end])
        return "".join(parts)


# ---------------------------------------------------------------------------
# Emphasis markers
# ---------------------------------------------------------------------------

_EMPHASIS_MARKERS: list[tuple[EmphasisStyle, str]] = [
    (EmphasisStyle.BOLD_ITALIC, "***"),
    (EmphasisStyle.BOLD, "**"),
    (EmphasisStyle.ITALIC, "*"),
    (EmphasisStyle.UNDERLINE, "_"),
]


@lru_cache
def _emphasis_patterns(honor_escapes: bool) -> list[tuple[EmphasisStyle, int, re.Pattern[str]]]:
    """Compile one pattern per style, longest marker first."""
    patterns = []
    for style, marker in _EMPHASIS_MARKERS:
        ch = re.escape(marker[0])
        token = re.escape(marker)
        before = rf"(?<![\\{ch}])" if honor_escapes else rf"(?<!{ch})"
        inner_end = rf"(?<=[^\s\\{ch}])" if honor_escapes else rf"(?<=[^\s{ch}])"
        regex = rf"{before}{token}(?=[^\s{ch}])(.+?){inner_end}{token}(?!{ch})"
        patterns.append((style, len(marker), re.compile(regex)))
    return patterns


def _strip_emphasis(
    text: str, keep: list[bool], honor_escapes: bool
) -> tuple[EmphasisSpan, ...]:
    """Clear *keep* for paired emphasis markers and return the spans found."""
    spans: list[EmphasisSpan] = []
    for style, width, pattern in _emphasis_patterns(honor_escapes):
        cols = [col for col, kept in enumerate(keep) if kept]
        visible = "".join(text[col] for col in cols)
        for match in pattern.finditer(visible):
            start, end = match.start(), match.end()
            for pos in (*range(start, start + width), *range(end - width, end)):
                keep[cols[pos]] = False
            spans.append(EmphasisSpan(style, raw_start=cols[start], raw_end=cols[end - 1] + 1))
    spans.sort(key=lambda span: span.raw_start)
    return tuple(spans)


# ---------------------------------------------------------------------------
# Stripping
# ---------------------------------------------------------------------------


def _verify(line: StrippedLine) -> None:
    """Check that the stripped text inverts losslessly to the raw line."""
    index_map = line.index_map
    consistent = (
        index_map.raw_length == len(line.raw_text)
        and index_map.stripped_length == len(line.text)
        and all(
            line.text[seg.stripped_start : seg.stripped_start + seg.raw_end - seg.raw_start]
            == line.raw_text[seg.raw_start : seg.raw_end]
            for seg in index_map.segments()
            if seg.retained
        )
        and line.reconstruct() == line.raw_text
    )
    if not consistent:
        raise IndexMapInconsistencyError(
            f"Stripped line {line.raw_line} does not invert to its raw text",
            details={"raw_line": line.raw_line, "raw": line.raw_text, "stripped": line.text},
        )


def strip_line(
    text: str,
    line: int,
    ranges: Sequence[ResolvedRange] = (),
    state: LineState = LineState.PLAIN,
    *,
    strip_emphasis: bool = True,
    honor_escapes: bool = True,
) -> StrippedLine:
    """Strip one raw line."""
    keep = [True] * len(text)
    segments: list[RangeSegment] = []
    for rng in sorted(ranges, key=lambda r: r.sort_key):
        start, end = rng.columns_on(line, len(text))
        for col in range(start, end):
            keep[col] = False
        segments.append(RangeSegment(rng, start, end))

    emphasis: tuple[EmphasisSpan, ...] = ()
    if strip_emphasis:
        emphasis = _strip_emphasis(text, keep, honor_escapes)

    stripped = StrippedLine(
        raw_line=line,
        raw_text=text,
        text="".join(ch for ch, kept in zip(text, keep) if kept),
        index_map=IndexMap.from_mask(keep),
        state=state,
        segments=tuple(segments),
        emphasis=emphasis,
    )
    _verify(stripped)
    return stripped


def strip(
    lines: Sequence[str],
    ranges: Sequence[ResolvedRange],
    line_states: Mapping[int, LineState],
    *,
    strip_emphasis: bool = True,
    honor_escapes: bool = True,
) -> list[StrippedLine]:
    """Strip every line; the result is parallel to *lines*."""
    index = ranges_by_line(len(lines), ranges)
    stripped = [
        strip_line(
            text,
            idx,
            index.get(idx, ()),
            line_states.get(idx, LineState.PLAIN),
            strip_emphasis=strip_emphasis,
            honor_escapes=honor_escapes,
        )
        for idx, text in enumerate(lines)
    ]
    logger.debug(
        "Stripped %d lines, %d characters removed",
        len(stripped),
        sum(s.index_map.raw_length - s.index_map.stripped_length for s in stripped),
    )
    return stripped
