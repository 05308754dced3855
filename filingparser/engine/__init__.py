"""
Filing extraction engine.

Turns the text of a 10-K/10-Q filing (plus optional OCR word positions) into a
confidence-scored financial schema:

1. Scale detection ("in millions")
2. Table reconstruction from word geometry
3. Metadata extraction
4. Multi-strategy field extraction with ranked candidates
5. Plausibility filtering, derivation from accounting identities
6. Validation warnings and an overall confidence score

Entry point: ``filingparser.engine.orchestrator.parse``.
"""

from filingparser.engine.models import (
    DetectedTable,
    DocumentScale,
    ExtractionCandidate,
    FinancialSchema,
    Metadata,
    ParseResult,
    PositionedWord,
    TableType,
)

__version__ = "1.0.0"
__all__ = [
    "DetectedTable",
    "DocumentScale",
    "ExtractionCandidate",
    "FinancialSchema",
    "Metadata",
    "ParseResult",
    "PositionedWord",
    "TableType",
]
