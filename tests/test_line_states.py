"""Tests for per-line state classification."""

import pytest

from core.models import LineState
from parsers.line_states import classify
from parsers.markers import scan
from parsers.range_resolver import resolve


def _states(lines):
    ranges, _ = resolve(scan(lines), lines)
    states = classify(lines, ranges)
    return [states[idx] for idx in range(len(lines))]


class TestLineStates:
    """Decision table of the line classifier."""

    def test_plain_line(self):
        assert _states(["INT. HOUSE - DAY"]) == [LineState.PLAIN]

    def test_range_only(self):
        assert _states(["[[just a note]]"]) == [LineState.RANGE_ONLY]

    def test_whitespace_around_range_is_not_printable(self):
        assert _states(["  /* gone */  "]) == [LineState.RANGE_ONLY]

    def test_two_ranges_without_text(self):
        assert _states(["[[a]][[b]]"]) == [LineState.RANGE_ONLY]

    def test_self_contained_with_text(self):
        assert _states(["[[Line with]] printable text"]) == [LineState.PARTIAL_SELF_CONTAINED]

    def test_text_between_ranges(self):
        assert _states(["[[a]] x [[b]]"]) == [LineState.PARTIAL_SELF_CONTAINED]

    def test_orphan_symmetry(self):
        assert _states(["[[Orphaned open", "", "Orphaned close]]"]) == [
            LineState.PARTIAL_ORPHANED_OPEN,
            LineState.RANGE_ONLY,
            LineState.PARTIAL_ORPHANED_CLOSE,
        ]

    def test_open_and_close_on_its_own(self):
        assert _states(["]]Orphaned open and close[["]) == [
            LineState.PARTIAL_ORPHANED_OPEN_AND_CLOSE
        ]

    def test_open_and_close_between_ranges(self):
        lines = ["[[start", "]]Orphaned open and close[[", "end]]"]
        assert _states(lines) == [
            LineState.PARTIAL_ORPHANED_OPEN,
            LineState.PARTIAL_ORPHANED_OPEN_AND_CLOSE,
            LineState.PARTIAL_ORPHANED_CLOSE,
        ]

    def test_multiline_boneyard_middle_is_range_only(self):
        lines = ["/* The whole", "lost scene", "goes here */"]
        assert _states(lines) == [
            LineState.PARTIAL_ORPHANED_OPEN,
            LineState.RANGE_ONLY,
            LineState.PARTIAL_ORPHANED_CLOSE,
        ]

    def test_open_wins_over_self_contained(self):
        assert _states(["[[a]] text [[b"]) == [LineState.PARTIAL_ORPHANED_OPEN]

    def test_unmatched_close_alone(self):
        assert _states(["Stray close]]"]) == [LineState.PARTIAL_ORPHANED_CLOSE]

    def test_open_and_close_across_kinds(self):
        lines = ["/* a", "b */ text [[c", "d]]"]
        assert _states(lines)[1] is LineState.PARTIAL_ORPHANED_OPEN_AND_CLOSE

    @pytest.mark.parametrize(
        "document",
        [
            [],
            ["", "", ""],
            ["[[a", "b", "c]] d /* e", "f */", "g"],
            ["]]", "[[", "/*", "*/", "x"],
        ],
    )
    def test_every_line_gets_exactly_one_state(self, document):
        ranges, _ = resolve(scan(document), document)
        states = classify(document, ranges)
        assert sorted(states) == list(range(len(document)))
        assert all(isinstance(state, LineState) for state in states.values())
