"""Tests for screenplay line-type classification."""

import pytest

from core.models import ElementType
from parsers.line_types import apply_block_context, classify_line, title_page_key


def _context(texts):
    return apply_block_context([classify_line(text) for text in texts], texts)


# ===================================================================
# Single line classification
# ===================================================================


class TestClassifyLine:
    """Tests for parsers.line_types.classify_line."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("", ElementType.EMPTY),
            ("  ", ElementType.ACTION),
            ("INT. HOUSE - DAY", ElementType.HEADING),
            ("ext. garden - night", ElementType.HEADING),
            ("I/E CAR - MOVING", ElementType.HEADING),
            ("EST PARIS", ElementType.HEADING),
            (".FLASHBACK", ElementType.HEADING),
            ("Internal monologue.", ElementType.ACTION),
            ("...and then", ElementType.ACTION),
            ("CUT TO:", ElementType.TRANSITION),
            (">FADE OUT.", ElementType.TRANSITION),
            (">THE END<", ElementType.CENTERED),
            ("BOB", ElementType.CHARACTER),
            ("BOB (V.O.)", ElementType.CHARACTER),
            ("BOB ^", ElementType.DUAL_DIALOGUE_CHARACTER),
            ("@McCLANE", ElementType.CHARACTER),
            ("~Willy Wonka! Willy Wonka!", ElementType.LYRICS),
            ("= He finds the key.", ElementType.SYNOPSIS),
            ("# Act One", ElementType.SECTION),
            ("===", ElementType.PAGE_BREAK),
            ("!!CLOSE ON HIS HAND", ElementType.SHOT),
            ("!SCREAMS OUTSIDE", ElementType.ACTION),
            ("He walks in.", ElementType.ACTION),
        ],
    )
    def test_classify_line(self, text, expected):
        assert classify_line(text) is expected

    def test_never_returns_annotation_types(self):
        for text in ["[[note]]", "/* bone */", "", "X"]:
            assert not classify_line(text).is_annotation


class TestTitlePageKey:
    """Tests for parsers.line_types.title_page_key."""

    def test_key_is_lowercased(self):
        assert title_page_key("Draft Date: 1 May") == "draft date"

    def test_transition_is_not_a_key(self):
        assert title_page_key("SMASH CUT TO:") == ""

    def test_no_colon(self):
        assert title_page_key("Title") == ""


# ===================================================================
# Block context
# ===================================================================


class TestBlockContext:
    """Tests for parsers.line_types.apply_block_context."""

    def test_dialogue_block(self):
        assert _context(["", "BOB", "(quietly)", "Hello."]) == [
            ElementType.EMPTY,
            ElementType.CHARACTER,
            ElementType.PARENTHETICAL,
            ElementType.DIALOGUE,
        ]

    def test_dialogue_ends_at_empty_line(self):
        kinds = _context(["BOB", "Hello.", "", "He leaves."])
        assert kinds[1] is ElementType.DIALOGUE
        assert kinds[3] is ElementType.ACTION

    def test_cue_needs_following_line(self):
        assert _context(["", "BOB", ""])[1] is ElementType.ACTION
        assert _context(["BOB"]) == [ElementType.ACTION]

    def test_cue_needs_preceding_empty_line(self):
        assert _context(["He runs.", "BOB", "Hi."]) == [
            ElementType.ACTION,
            ElementType.ACTION,
            ElementType.ACTION,
        ]

    def test_first_line_counts_as_after_empty(self):
        assert _context(["INT. HOUSE - DAY"]) == [ElementType.HEADING]

    def test_heading_needs_preceding_empty_line(self):
        assert _context(["He runs.", "INT. HOUSE - DAY"])[1] is ElementType.ACTION

    def test_forced_heading_ignores_context(self):
        assert _context(["He runs.", ".FLASHBACK"])[1] is ElementType.HEADING

    def test_transition_needs_preceding_empty_line(self):
        assert _context(["", "CUT TO:"])[1] is ElementType.TRANSITION
        assert _context(["He runs.", "CUT TO:"])[1] is ElementType.ACTION

    def test_dual_dialogue(self):
        kinds = _context(["", "BOB", "Hi.", "", "ALICE ^", "(smiling)", "Hello."])
        assert kinds[4:] == [
            ElementType.DUAL_DIALOGUE_CHARACTER,
            ElementType.DUAL_DIALOGUE_PARENTHETICAL,
            ElementType.DUAL_DIALOGUE,
        ]

    def test_forced_line_ends_dialogue(self):
        kinds = _context(["", "BOB", "Hi.", "!LOUD BANG"])
        assert kinds[3] is ElementType.ACTION

    def test_title_page(self):
        texts = [
            "Title: Big Fish",
            "Credit: Written by",
            "Author: John August",
            "Draft date: 1/1",
            "",
            "INT. HOUSE - DAY",
        ]
        assert _context(texts) == [
            ElementType.TITLE_PAGE_TITLE,
            ElementType.TITLE_PAGE_CREDIT,
            ElementType.TITLE_PAGE_AUTHOR,
            ElementType.TITLE_PAGE_DRAFT_DATE,
            ElementType.EMPTY,
            ElementType.HEADING,
        ]

    def test_title_page_indented_continuation(self):
        kinds = _context(["Title:", "    The Big One", ""])
        assert kinds[:2] == [ElementType.TITLE_PAGE_TITLE, ElementType.TITLE_PAGE_TITLE]

    def test_unknown_title_page_key(self):
        assert _context(["Revision: blue", ""])[0] is ElementType.TITLE_PAGE_UNKNOWN

    def test_title_page_only_at_document_start(self):
        assert _context(["He runs.", "", "Title: nope"])[2] is ElementType.ACTION
