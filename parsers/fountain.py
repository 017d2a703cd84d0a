"""Fountain (.fountain) screenplay parser.

Runs the ranged-element pipeline over a raw document::

    split_lines -> scan -> resolve -> classify -> strip -> run

and returns a ``ParsedDocument`` holding the raw and stripped lines side
by side, the resolved Notes/Boneyards and the element sequence.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Mapping, Sequence

from core.exceptions import ParsingException
from core.models import (
    Element,
    ElementType,
    LineState,
    ParserOptions,
    RangeKind,
    RawSpan,
)
from parsers.line_states import classify
from parsers.line_types import apply_block_context, classify_line
from parsers.lines import line_offsets, split_lines
from parsers.markers import MarkerOccurrence, Position, scan
from parsers.range_resolver import ResolvedRange, literal_markers, resolve
from parsers.stripper import StrippedLine, strip

logger = logging.getLogger(__name__)

# 10 MB
MAX_DOCUMENT_SIZE = 10 * 1024 * 1024

LineClassifier = Callable[[str], ElementType]

_ANNOTATION_TYPES: dict[RangeKind, ElementType] = {
    RangeKind.NOTE: ElementType.NOTE,
    RangeKind.BONEYARD: ElementType.BONEYARD,
}


def range_span(rng: ResolvedRange) -> RawSpan:
    return RawSpan(
        start_line=rng.start.line,
        start_column=rng.start.column,
        end_line=rng.end.line,
        end_column=rng.end.column,
    )


def _emits_printable(line: StrippedLine) -> bool:
    if line.state is LineState.RANGE_ONLY:
        return False
    if line.state is LineState.PLAIN:
        return True
    # Leftover whitespace around a range must not end a dialogue block
    return line.has_printable_text


def run(
    stripped_lines: Sequence[StrippedLine],
    *,
    classify_line: LineClassifier = classify_line,
    block_context: bool = True,
) -> list[Element]:
    """Turn stripped lines into the ordered element sequence.

    *classify_line* is called exactly once per stripped line and never sees
    range markers.  Each resolved range is emitted once, as a NOTE or
    BONEYARD element right after the printable element of its start line.
    """
    kinds = [classify_line(line.text) for line in stripped_lines]
    printable = [idx for idx, line in enumerate(stripped_lines) if _emits_printable(line)]
    if block_context:
        refined = apply_block_context(
            [kinds[idx] for idx in printable],
            [stripped_lines[idx].text for idx in printable],
        )
        for idx, kind in zip(printable, refined):
            kinds[idx] = kind

    raw_lines = [line.raw_text for line in stripped_lines]
    printable_set = set(printable)
    elements: list[Element] = []

    for idx, line in enumerate(stripped_lines):
        if idx in printable_set:
            raw_span = None
            extent = line.raw_extent()
            if line.state is not LineState.PLAIN and extent is not None:
                raw_span = RawSpan(
                    start_line=idx, start_column=extent[0], end_line=idx, end_column=extent[1]
                )
            elements.append(
                Element(
                    kind=kinds[idx],
                    stripped_text=line.text,
                    raw_line=idx,
                    state=line.state,
                    raw_span=raw_span,
                )
            )

        for segment in line.segments:
            rng = segment.resolved
            if rng.start.line != idx:
                continue
            elements.append(
                Element(
                    kind=_ANNOTATION_TYPES[rng.kind],
                    raw_line=idx,
                    state=line.state,
                    raw_span=range_span(rng),
                    status=rng.status,
                    content=rng.content(raw_lines),
                )
            )

    return elements


@dataclass(frozen=True, slots=True)
class ParsedDocument:
    """Build-once result of a parse. Raw and stripped lines are parallel."""

    raw_lines: tuple[str, ...]
    stripped_lines: tuple[StrippedLine, ...]
    ranges: tuple[ResolvedRange, ...]
    unmatched: frozenset[MarkerOccurrence]
    line_states: Mapping[int, LineState]
    elements: tuple[Element, ...]
    warnings: tuple[str, ...] = ()
    parsing_time_seconds: float = 0.0
    _offsets: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_offsets", tuple(line_offsets(list(self.raw_lines))))

    @property
    def line_count(self) -> int:
        return len(self.raw_lines)

    @property
    def printable_elements(self) -> list[Element]:
        return [el for el in self.elements if not el.is_annotation]

    @property
    def annotations(self) -> list[Element]:
        return [el for el in self.elements if el.is_annotation]

    def raw_position(self, line: int, stripped_column: int) -> Position:
        """Map a column of stripped line *line* back into the raw document."""
        return Position(line, self.stripped_lines[line].index_map.to_raw(stripped_column))

    def stripped_position(self, line: int, raw_column: int) -> int:
        """Map a raw column of *line* to its stripped column."""
        return self.stripped_lines[line].index_map.to_stripped(raw_column)

    def document_offset(self, position: Position) -> int:
        """Absolute character offset of *position* in the ``\\n``-joined document."""
        return self._offsets[position.line] + position.column

    def reconstruct(self) -> str:
        """Rebuild the raw document from the stripped lines."""
        return "\n".join(line.reconstruct() for line in self.stripped_lines)


def _collect_warnings(
    unmatched: frozenset[MarkerOccurrence], literal: Sequence[MarkerOccurrence]
) -> list[str]:
    warnings = [
        f"Unmatched {occ.kind.value} {occ.role.value} marker at line {occ.line + 1}, "
        f"column {occ.column + 1}"
        for occ in sorted(unmatched, key=lambda o: o.position)
    ]
    warnings.extend(
        f"Nested {occ.kind.value} open at line {occ.line + 1}, column {occ.column + 1} "
        "treated as literal text"
        for occ in literal
    )
    return warnings


def parse_fountain(
    text: str,
    options: ParserOptions | None = None,
    *,
    classify_line: LineClassifier = classify_line,
) -> ParsedDocument:
    """Parse Fountain *text* into a ``ParsedDocument``.

    Orphaned markers never fail the parse; they are reported in
    ``warnings``.  Raises ``SameKindNestingException`` only when
    ``options.nesting_policy`` is ``REJECT``.
    """
    opts = options or ParserOptions()
    t0 = time.monotonic()

    lines = split_lines(text)
    occurrences = scan(lines, honor_escapes=opts.honor_escapes)
    ranges, unmatched = resolve(occurrences, lines, nesting_policy=opts.nesting_policy)
    states = classify(lines, ranges)
    stripped = strip(
        lines,
        ranges,
        states,
        strip_emphasis=opts.strip_emphasis,
        honor_escapes=opts.honor_escapes,
    )
    elements = run(stripped, classify_line=classify_line)
    warnings = _collect_warnings(unmatched, literal_markers(occurrences, ranges))

    elapsed = time.monotonic() - t0
    logger.info(
        "Fountain parsed: %d lines, %d elements, %d ranges (%d unmatched markers) in %.3fs",
        len(lines),
        len(elements),
        len(ranges),
        len(unmatched),
        elapsed,
    )

    return ParsedDocument(
        raw_lines=tuple(lines),
        stripped_lines=tuple(stripped),
        ranges=tuple(ranges),
        unmatched=unmatched,
        line_states=states,
        elements=tuple(elements),
        warnings=tuple(warnings),
        parsing_time_seconds=round(elapsed, 3),
    )


class FountainParser:
    """Parser for Fountain screenplay files."""

    def __init__(
        self,
        options: ParserOptions | None = None,
        *,
        max_size: int = MAX_DOCUMENT_SIZE,
    ) -> None:
        self.options = options or ParserOptions()
        self.max_size = max_size

    def parse(self, content: bytes | str) -> ParsedDocument:
        """Parse raw file bytes (UTF-8) or already decoded text."""
        text = self._decode(content) if isinstance(content, bytes) else content
        if len(text) > self.max_size:
            raise ParsingException(
                f"Document exceeds size limit ({len(text)} > {self.max_size} characters)",
                details={"size": len(text), "max_size": self.max_size},
            )
        if "\x00" in text:
            raise ParsingException(
                "Document contains null bytes",
                details={"reason": "null_bytes"},
            )
        return parse_fountain(text, self.options)

    def _decode(self, content: bytes) -> str:
        if len(content) > self.max_size:
            raise ParsingException(
                f"Document exceeds size limit ({len(content)} > {self.max_size} bytes)",
                details={"size": len(content), "max_size": self.max_size},
            )
        try:
            # utf-8-sig drops a leading byte order mark
            return content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParsingException(
                f"Document is not valid UTF-8: {exc.reason}",
                details={"reason": "invalid_utf8", "position": exc.start},
            )
