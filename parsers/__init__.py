"""Fountain screenplay parser with Note/Boneyard range resolution."""

from parsers.fountain import FountainParser, ParsedDocument, parse_fountain, run
from parsers.line_states import classify
from parsers.line_types import apply_block_context, classify_line
from parsers.markers import MarkerOccurrence, Position, scan
from parsers.range_resolver import ResolvedRange, resolve
from parsers.stripper import StrippedLine, strip

__all__ = [
    "FountainParser",
    "MarkerOccurrence",
    "ParsedDocument",
    "Position",
    "ResolvedRange",
    "StrippedLine",
    "apply_block_context",
    "classify",
    "classify_line",
    "parse_fountain",
    "resolve",
    "run",
    "scan",
    "strip",
]
