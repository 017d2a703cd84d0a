"""Fountain parse endpoints."""

import logging

from fastapi import APIRouter, Depends, Request, status

from api.config import Settings
from api.dependencies import get_fountain_parser, get_settings_dependency
from core.models import ParseRequest, ParseResponse, RangeInfo
from parsers.fountain import FountainParser, ParsedDocument, range_span

logger = logging.getLogger(__name__)

router = APIRouter()


def to_response(document: ParsedDocument) -> ParseResponse:
    """Convert a ``ParsedDocument`` into the API response schema."""
    return ParseResponse(
        line_count=document.line_count,
        elements=list(document.elements),
        line_states=[document.line_states[idx] for idx in range(document.line_count)],
        ranges=[
            RangeInfo(kind=rng.kind, status=rng.status, span=range_span(rng))
            for rng in document.ranges
        ],
        warnings=list(document.warnings),
        parsing_time_seconds=document.parsing_time_seconds,
    )


@router.post(
    "",
    response_model=ParseResponse,
    status_code=status.HTTP_200_OK,
    summary="Parse a Fountain document",
    description="Parse Fountain text given as JSON and return elements, line states and ranges.",
)
async def parse_document(
    request: ParseRequest,
    parser: FountainParser = Depends(get_fountain_parser),
    settings: Settings = Depends(get_settings_dependency),
) -> ParseResponse:
    """Parse a JSON-wrapped document. Per-request options override the defaults."""
    if request.options is not None:
        parser = FountainParser(request.options, max_size=settings.max_document_bytes)
    document = parser.parse(request.text)
    return to_response(document)


@router.post(
    "/raw",
    response_model=ParseResponse,
    status_code=status.HTTP_200_OK,
    summary="Parse a raw Fountain file",
    description="Parse the request body as a UTF-8 encoded .fountain file.",
)
async def parse_raw_document(
    request: Request,
    parser: FountainParser = Depends(get_fountain_parser),
) -> ParseResponse:
    """Parse the raw request body."""
    content = await request.body()
    logger.debug("Raw parse request: %d bytes", len(content))
    return to_response(parser.parse(content))
