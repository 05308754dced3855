"""
Parse API routes.

Provides the endpoint that runs the extraction engine on text (and optional
word positions) produced by an upstream OCR step.
"""
from typing import List, Optional, Union

import structlog
from fastapi import APIRouter

from filingparser.config import get_settings
from filingparser.engine.legacy import convert_to_legacy_format
from filingparser.engine.models import ParseResult, PositionedWord
from filingparser.engine.orchestrator import ParseOptions, parse
from filingparser.exceptions import DocumentTooLargeError, InvalidParseRequestError
from filingparser.middleware.logging import log_performance
from filingparser.schemas.parse import (
    ErrorResponse,
    LegacyParseResponse,
    ParseRequest,
    ParseResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter()


def validate_parse_request(request: ParseRequest) -> None:
    """
    Enforce request size limits.

    Raises:
        InvalidParseRequestError: If there is nothing to parse.
        DocumentTooLargeError: If the text or word list exceeds the configured limit.
    """
    settings = get_settings()

    if not request.raw_text.strip() and not request.positioned_words:
        raise InvalidParseRequestError("Request has no raw_text and no positioned_words")

    if len(request.raw_text) > settings.max_text_chars:
        raise DocumentTooLargeError("raw_text", len(request.raw_text), settings.max_text_chars)

    word_count = len(request.positioned_words or [])
    if word_count > settings.max_positioned_words:
        raise DocumentTooLargeError("positioned_words", word_count, settings.max_positioned_words)


@log_performance("filing_parse")
def run_parse(request: ParseRequest) -> ParseResult:
    words: Optional[List[PositionedWord]] = None
    if request.positioned_words:
        words = [w.to_domain() for w in request.positioned_words]
    return parse(request.raw_text, words, ParseOptions.from_settings())


@router.post(
    "/parse",
    response_model=Union[ParseResponse, LegacyParseResponse],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        413: {"model": ErrorResponse, "description": "Document too large"},
    },
    summary="Parse a financial filing",
    description="Extract metadata and confidence-scored financials from filing text.",
)
def parse_filing(request: ParseRequest) -> Union[ParseResponse, LegacyParseResponse]:
    """
    Parse one filing.

    Runs in a worker thread; the engine is CPU-bound and holds no shared state.
    """
    validate_parse_request(request)

    result = run_parse(request)

    logger.info(
        "Filing parsed",
        company=result.metadata.company_name or None,
        document_type=result.metadata.document_type or None,
        tables=len(result.tables_detected),
        confidence=result.extraction_confidence,
        warnings=len(result.validation_warnings),
        legacy=request.legacy,
    )

    if request.legacy:
        return LegacyParseResponse(**convert_to_legacy_format(result))
    return ParseResponse(**result.to_dict())
