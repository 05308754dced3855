"""
Pydantic schemas for the parse API endpoint.

Defines request and response models for filing parsing.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from filingparser.engine.models import BoundingBox, PositionedWord


class BoundingBoxIn(BaseModel):
    """Word bounding box in OCR pixel coordinates."""

    x: float = Field(..., description="Left edge")
    y: float = Field(..., description="Top edge")
    width: float = Field(..., ge=0, description="Box width")
    height: float = Field(..., ge=0, description="Box height")


class PositionedWordIn(BaseModel):
    """A single OCR word with its location."""

    text: str = Field(..., description="Recognised word text")
    bbox: BoundingBoxIn = Field(..., description="Word bounding box")
    confidence: float = Field(100.0, ge=0, le=100, description="OCR confidence (0-100)")
    line: int = Field(0, ge=0, description="Line index on the page")
    page: int = Field(1, ge=1, description="Page number (1-indexed)")

    def to_domain(self) -> PositionedWord:
        return PositionedWord(
            text=self.text,
            bbox=BoundingBox(
                x=self.bbox.x,
                y=self.bbox.y,
                width=self.bbox.width,
                height=self.bbox.height,
            ),
            confidence=self.confidence,
            line=self.line,
            page=self.page,
        )


class ParseRequest(BaseModel):
    """Request model for parsing one filing."""

    raw_text: str = Field("", description="Full extracted text of the filing")
    positioned_words: Optional[List[PositionedWordIn]] = Field(
        None, description="OCR words with positions; omit for text-only parsing"
    )
    legacy: bool = Field(False, description="Return the flat legacy projection")


class ParseResponse(BaseModel):
    """Response model for a parsed filing."""

    metadata: Dict[str, str] = Field(..., description="Filing metadata (empty string when absent)")
    financials: Dict[str, Dict[str, Dict[str, Any]]] = Field(
        ..., description="Category -> slot -> candidate; absent slots omitted"
    )
    tables_detected: List[Dict[str, Any]] = Field(..., description="Reconstructed tables")
    extraction_confidence: int = Field(..., ge=0, le=100, description="Overall confidence (0-100)")
    validation_warnings: List[str] = Field(..., description="Soft inconsistency warnings")
    extraction_log: List[str] = Field(..., description="Timestamped extraction trail")


class LegacyParseResponse(BaseModel):
    """Flat response model for older clients."""

    metadata: Dict[str, str] = Field(..., description="Filing metadata")
    financials: Dict[str, Dict[str, Optional[float]]] = Field(
        ..., description="Category -> slot -> bare value"
    )
    tables_found: List[str] = Field(..., description="Detected table types")
    extraction_confidence: int = Field(..., ge=0, le=100, description="Overall confidence (0-100)")
    errors: List[str] = Field(..., description="Validation warnings")


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: bool = Field(True, description="Always true for errors")
    error_code: str = Field(..., description="Error code, e.g. FP-101")
    message: str = Field(..., description="Error message")
    details: Dict[str, Any] = Field(default_factory=dict, description="Additional error details")
