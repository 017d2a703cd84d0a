"""Bidirectional column map between a raw line and its stripped copy.

The map is a tuple of ``(raw_column, stripped_column)`` breakpoints, one
at column 0, one at every start and end of a contiguous removed span, and
one at the end of the line.  Between two breakpoints the line is either
retained (both coordinates advance together) or removed (only the raw
coordinate advances).  Lookups bisect the breakpoints.
"""

from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from typing import Iterator, NamedTuple, Sequence


class MapSegment(NamedTuple):
    """A run of raw columns that is either retained or removed."""

    raw_start: int
    raw_end: int
    stripped_start: int
    retained: bool


@dataclass(frozen=True, slots=True)
class IndexMap:
    breakpoints: tuple[tuple[int, int], ...]
    raw_length: int
    stripped_length: int
    _raw_coords: tuple[int, ...] = field(init=False, repr=False, compare=False)
    _stripped_coords: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_raw_coords", tuple(r for r, _ in self.breakpoints))
        object.__setattr__(self, "_stripped_coords", tuple(s for _, s in self.breakpoints))

    @classmethod
    def from_mask(cls, keep: Sequence[bool]) -> "IndexMap":
        """Build the map from a per-raw-column keep mask."""
        points: list[tuple[int, int]] = [(0, 0)]
        stripped = 0
        for col, kept in enumerate(keep):
            if col > 0 and kept != keep[col - 1]:
                points.append((col, stripped))
            if kept:
                stripped += 1
        if keep:
            points.append((len(keep), stripped))
        return cls(tuple(points), raw_length=len(keep), stripped_length=stripped)

    @classmethod
    def identity(cls, length: int) -> "IndexMap":
        return cls.from_mask([True] * length)

    @property
    def is_identity(self) -> bool:
        return self.raw_length == self.stripped_length

    def segments(self) -> Iterator[MapSegment]:
        for (r0, s0), (r1, s1) in zip(self.breakpoints, self.breakpoints[1:]):
            yield MapSegment(r0, r1, s0, retained=s1 > s0)

    def _segment_at_raw(self, raw_column: int) -> int:
        return bisect_right(self._raw_coords, raw_column) - 1

    def to_raw(self, stripped_column: int) -> int:
        """Return the raw column of the character at *stripped_column*.

        ``stripped_length`` maps to ``raw_length``.
        """
        if not 0 <= stripped_column <= self.stripped_length:
            raise IndexError(f"stripped column {stripped_column} out of range")
        if stripped_column == self.stripped_length:
            return self.raw_length
        idx = bisect_right(self._stripped_coords, stripped_column) - 1
        raw_start, stripped_start = self.breakpoints[idx]
        return raw_start + (stripped_column - stripped_start)

    def to_stripped(self, raw_column: int) -> int:
        """Return the stripped column of *raw_column*.

        A removed raw column maps to the stripped boundary where its span
        was cut out.
        """
        if not 0 <= raw_column <= self.raw_length:
            raise IndexError(f"raw column {raw_column} out of range")
        if raw_column == self.raw_length:
            return self.stripped_length
        idx = self._segment_at_raw(raw_column)
        raw_start, stripped_start = self.breakpoints[idx]
        if self.breakpoints[idx + 1][1] > stripped_start:
            return stripped_start + (raw_column - raw_start)
        return stripped_start

    def is_retained(self, raw_column: int) -> bool:
        if not 0 <= raw_column < self.raw_length:
            return False
        idx = self._segment_at_raw(raw_column)
        return self.breakpoints[idx + 1][1] > self.breakpoints[idx][1]

    def removed_span_at(self, stripped_column: int) -> tuple[int, int] | None:
        """Return the raw ``(start, end)`` of the span removed at a stripped boundary."""
        idx = bisect_left(self._stripped_coords, stripped_column)
        while idx + 1 < len(self.breakpoints) and self._stripped_coords[idx] == stripped_column:
            (r0, s0), (r1, s1) = self.breakpoints[idx], self.breakpoints[idx + 1]
            if s1 == s0 and r1 > r0:
                return r0, r1
            idx += 1
        return None

    def removed_spans(self) -> list[tuple[int, int, int]]:
        """Return ``(raw_start, raw_end, stripped_column)`` for every removed span."""
        return [
            (seg.raw_start, seg.raw_end, seg.stripped_start)
            for seg in self.segments()
            if not seg.retained
        ]
