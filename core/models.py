"""Enumerations and Pydantic models shared by the parser and the API."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RangeKind(str, Enum):
    """Ranged element kinds and their fixed two-character tokens."""

    NOTE = "note"
    BONEYARD = "boneyard"

    @property
    def open_token(self) -> str:
        return _RANGE_TOKENS[self][0]

    @property
    def close_token(self) -> str:
        return _RANGE_TOKENS[self][1]

    @property
    def priority(self) -> int:
        """Tie-break rank when two kinds start at the same position (lower first)."""
        return _RANGE_PRIORITY[self]


_RANGE_TOKENS: dict[RangeKind, tuple[str, str]] = {
    RangeKind.NOTE: ("[[", "]]"),
    RangeKind.BONEYARD: ("/*", "*/"),
}

_RANGE_PRIORITY: dict[RangeKind, int] = {kind: i for i, kind in enumerate(RangeKind)}


class MarkerRole(str, Enum):
    """Whether a marker opens or closes a range."""

    OPEN = "open"
    CLOSE = "close"


class RangeStatus(str, Enum):
    """Resolution outcome of a ranged element."""

    CLOSED = "closed"
    ORPHANED_OPEN = "orphaned_open"
    ORPHANED_CLOSE = "orphaned_close"


class LineState(str, Enum):
    """How a raw line relates to ranged content. Exactly one per line."""

    PLAIN = "plain"
    RANGE_ONLY = "range_only"
    PARTIAL_SELF_CONTAINED = "partial_self_contained"
    PARTIAL_ORPHANED_OPEN = "partial_orphaned_open"
    PARTIAL_ORPHANED_CLOSE = "partial_orphaned_close"
    PARTIAL_ORPHANED_OPEN_AND_CLOSE = "partial_orphaned_open_and_close"


class NestingPolicy(str, Enum):
    """What to do when a range opens inside an open range of the same kind."""

    LITERAL = "literal"  # inner open token is plain text
    REJECT = "reject"  # raise SameKindNestingException


class EmphasisStyle(str, Enum):
    """Emphasis marker styles recognised by the stripper."""

    BOLD_ITALIC = "bold_italic"
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"


class ElementType(str, Enum):
    """Screenplay element types."""

    EMPTY = "empty"
    SECTION = "section"
    SYNOPSIS = "synopsis"
    TITLE_PAGE_TITLE = "title_page_title"
    TITLE_PAGE_AUTHOR = "title_page_author"
    TITLE_PAGE_CREDIT = "title_page_credit"
    TITLE_PAGE_SOURCE = "title_page_source"
    TITLE_PAGE_CONTACT = "title_page_contact"
    TITLE_PAGE_DRAFT_DATE = "title_page_draft_date"
    TITLE_PAGE_UNKNOWN = "title_page_unknown"
    HEADING = "heading"
    ACTION = "action"
    CHARACTER = "character"
    PARENTHETICAL = "parenthetical"
    DIALOGUE = "dialogue"
    DUAL_DIALOGUE_CHARACTER = "dual_dialogue_character"
    DUAL_DIALOGUE_PARENTHETICAL = "dual_dialogue_parenthetical"
    DUAL_DIALOGUE = "dual_dialogue"
    TRANSITION = "transition"
    LYRICS = "lyrics"
    PAGE_BREAK = "page_break"
    CENTERED = "centered"
    SHOT = "shot"
    # Side-channel annotations, never produced by line classification
    NOTE = "note"
    BONEYARD = "boneyard"

    @property
    def is_title_page(self) -> bool:
        return self.value.startswith("title_page_")

    @property
    def is_annotation(self) -> bool:
        return self in (ElementType.NOTE, ElementType.BONEYARD)


# ---------------------------------------------------------------------------
# Parser options
# ---------------------------------------------------------------------------


class ParserOptions(BaseModel):
    """Options for a single parse. Passed explicitly, never read globally."""

    model_config = ConfigDict(frozen=True)

    nesting_policy: NestingPolicy = Field(
        default=NestingPolicy.LITERAL,
        description="Handling of a range opened inside a same-kind open range",
    )
    strip_emphasis: bool = Field(
        default=True, description="Remove paired emphasis markers from stripped text"
    )
    honor_escapes: bool = Field(
        default=True, description="Backslash protects the following character from being a marker"
    )


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------


class RawSpan(BaseModel):
    """A raw document range; end is exclusive."""

    model_config = ConfigDict(frozen=True)

    start_line: int = Field(..., ge=0)
    start_column: int = Field(..., ge=0)
    end_line: int = Field(..., ge=0)
    end_column: int = Field(..., ge=0)


class Element(BaseModel):
    """A single parsed screenplay element."""

    model_config = ConfigDict(frozen=True)

    kind: ElementType = Field(..., description="Element type")
    stripped_text: str = Field(default="", description="Printable text of the line")
    raw_line: int = Field(..., ge=0, description="Raw line the element originates from")
    state: LineState = Field(default=LineState.PLAIN, description="Line state of raw_line")
    raw_span: RawSpan | None = Field(
        None, description="Raw extent for non-plain lines and annotations"
    )
    status: RangeStatus | None = Field(None, description="Range status for annotations")
    content: str | None = Field(None, description="Text between the tokens for annotations")

    @property
    def is_annotation(self) -> bool:
        return self.kind.is_annotation


# ---------------------------------------------------------------------------
# API models
# ---------------------------------------------------------------------------


class ParseRequest(BaseModel):
    """Request body for the parse endpoint."""

    text: str = Field(..., description="Fountain document text")
    options: ParserOptions | None = Field(
        None, description="Per-request parser options; defaults come from settings"
    )


class RangeInfo(BaseModel):
    """A resolved range as exposed by the API."""

    kind: RangeKind
    status: RangeStatus
    span: RawSpan


class ParseResponse(BaseModel):
    """Response body for the parse endpoint."""

    line_count: int = Field(..., description="Number of raw lines")
    elements: list[Element] = Field(default_factory=list)
    line_states: list[LineState] = Field(default_factory=list)
    ranges: list[RangeInfo] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    parsing_time_seconds: float = Field(..., description="Time taken to parse")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Check timestamp")
    version: str = Field(..., description="API version")


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(None, description="Field that caused the error")
    message: str = Field(..., description="Error message")
    error_code: str | None = Field(None, description="Error code for programmatic handling")


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(default_factory=list, description="Detailed error info")
    request_id: str | None = Field(None, description="Request tracking ID")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Error timestamp")
