"""
Orchestrator for the filing parser engine.

Main entry point that runs the fixed, forward-only pipeline:
Stage 1: Scale detection
Stage 2: Table reconstruction (only when positioned words are supplied)
Stage 3: Metadata extraction
Stage 4: Field extraction (tables, consolidated sections, full text)
Stage 5: Plausibility filtering
Stage 6: Derivation from accounting identities
Stage 7: Validation warnings
Stage 8: Confidence scoring
"""

import time
from dataclasses import dataclass, field
from typing import Optional, Sequence

import structlog

from filingparser.engine.audit_log import ExtractionLog
from filingparser.engine.derivation import RelationshipDeriver
from filingparser.engine.extraction import FieldExtractor
from filingparser.engine.field_catalog import FIELD_CATALOG, FieldSpec
from filingparser.engine.metadata import MetadataExtractor
from filingparser.engine.models import FinancialSchema, ParseResult, PositionedWord
from filingparser.engine.scale import ScaleDetector
from filingparser.engine.scoring import ConfidenceScorer
from filingparser.services.table_builder import TableBuilder, TableBuilderOptions
from filingparser.services.validators import AccountingEquationValidator, PlausibilityFilter

logger = structlog.get_logger(__name__)


@dataclass
class ParseOptions:
    """Configuration options for one parse."""
    # Table reconstruction tolerances
    table: TableBuilderOptions = field(default_factory=TableBuilderOptions)
    # Target fields
    catalog: Sequence[FieldSpec] = FIELD_CATALOG

    @classmethod
    def from_settings(cls) -> "ParseOptions":
        return cls(table=TableBuilderOptions.from_settings())


def parse(
    raw_text: str,
    positioned_words: Optional[Sequence[PositionedWord]] = None,
    options: Optional[ParseOptions] = None,
) -> ParseResult:
    """
    Parse one financial filing into a confidence-scored schema.

    Every stage is total over its input: empty text, missing words or an
    unrecognisable document produce an empty, low-confidence result rather than
    an exception.

    Args:
        raw_text: Full extracted text of the filing (may be empty).
        positioned_words: OCR words with positions; None runs in pure text mode.
        options: Tolerances and field catalog; built from settings when omitted.

    Returns:
        An immutable ParseResult with a frozen financial schema.
    """
    options = options or ParseOptions.from_settings()
    raw_text = raw_text or ""
    words = list(positioned_words or [])
    log = ExtractionLog()
    started = time.perf_counter()

    logger.info(
        "Starting filing parse",
        text_chars=len(raw_text),
        positioned_words=len(words),
    )
    log.step("Starting advanced financial document parsing")

    # Stage 1: scale
    scale = ScaleDetector().detect(raw_text, log)

    # Stage 2: tables
    if words:
        tables = TableBuilder(options.table).build_tables(words)
        log.step(f"Detected {len(tables)} tables from positioned words")
    else:
        tables = []
        log.step("No positioned words supplied, using text extraction only")

    # Stage 3: metadata
    metadata = MetadataExtractor(raw_text, log).extract()

    # Stage 4: fields
    schema = FinancialSchema()
    FieldExtractor(raw_text, tables, scale, log).extract_all(schema, options.catalog)

    # Stage 5-6: filter before derivation so derived fields only see sane inputs
    PlausibilityFilter().apply(schema, log)
    RelationshipDeriver(log).derive(schema)

    # Stage 7-8: warnings and score
    warnings = AccountingEquationValidator().warnings(schema, log)
    confidence = ConfidenceScorer().score(schema, len(warnings), log)

    schema.freeze()

    logger.info(
        "Filing parse complete",
        company=metadata.company_name or None,
        scale=scale.unit,
        tables=len(tables),
        fields=sum(1 for _ in schema.filled()),
        warnings=len(warnings),
        confidence=confidence,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )

    return ParseResult(
        metadata=metadata,
        financials=schema,
        tables_detected=tuple(tables),
        extraction_confidence=confidence,
        validation_warnings=tuple(warnings),
        extraction_log=log.lines(),
    )
