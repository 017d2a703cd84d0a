"""Tests for line splitting and the marker scanner."""

from core.models import MarkerRole, RangeKind
from parsers.lines import line_offsets, split_lines
from parsers.markers import MarkerOccurrence, Position, scan, scan_line


# ===================================================================
# Line splitting
# ===================================================================


class TestSplitLines:
    """Tests for parsers.lines.split_lines and line_offsets."""

    def test_empty_text(self):
        assert split_lines("") == []
        assert split_lines(None) == []

    def test_trailing_newline_adds_no_line(self):
        assert split_lines("A\nB\n") == ["A", "B"]
        assert split_lines("A\nB") == ["A", "B"]

    def test_blank_lines_are_kept(self):
        assert split_lines("A\n\nB") == ["A", "", "B"]

    def test_windows_and_mac_line_breaks(self):
        assert split_lines("A\r\nB\rC") == ["A", "B", "C"]

    def test_form_feed_does_not_split(self):
        assert split_lines("A\x0cB") == ["A\x0cB"]

    def test_line_offsets(self):
        assert line_offsets(["INT. HOUSE", "", "BOB"]) == [0, 11, 12]


# ===================================================================
# Marker scanner
# ===================================================================


class TestScanner:
    """Tests for parsers.markers.scan."""

    def test_single_note(self):
        found = scan_line("[[a]]", 0)
        assert found == [
            MarkerOccurrence(RangeKind.NOTE, MarkerRole.OPEN, 0, 0),
            MarkerOccurrence(RangeKind.NOTE, MarkerRole.CLOSE, 0, 3),
        ]

    def test_boneyard_tokens(self):
        found = scan_line("a /* b */", 4)
        assert [(o.kind, o.role, o.line, o.column) for o in found] == [
            (RangeKind.BONEYARD, MarkerRole.OPEN, 4, 2),
            (RangeKind.BONEYARD, MarkerRole.CLOSE, 4, 7),
        ]

    def test_tokens_do_not_overlap(self):
        # "*/" at column 1 shares the "*" of the open token
        found = scan_line("/*/", 0)
        assert len(found) == 1
        assert found[0].role is MarkerRole.OPEN

    def test_runs_of_brackets(self):
        found = scan_line("]]]", 0)
        assert [o.column for o in found] == [0]

    def test_plain_text_has_no_markers(self):
        assert scan_line("INT. HOUSE - DAY [ ] / *", 0) == []

    def test_escaped_marker_is_skipped(self):
        assert scan_line(r"\[[ not a note", 0) == []

    def test_escape_can_be_disabled(self):
        found = scan_line(r"\[[ note", 0, honor_escapes=False)
        assert [(o.kind, o.column) for o in found] == [(RangeKind.NOTE, 1)]

    def test_scan_orders_by_line_then_column(self):
        found = scan(["x ]] /*", "", "[[ */"])
        positions = [o.position for o in found]
        assert positions == sorted(positions)
        assert positions == [
            Position(0, 2),
            Position(0, 5),
            Position(2, 0),
            Position(2, 3),
        ]

    def test_occurrence_end_column(self):
        occ = scan_line("ab[[", 0)[0]
        assert occ.column == 2
        assert occ.end_column == 4
