"""
Data structures for the filing extraction engine.

Implements the document model flowing through the pipeline:
- PositionedWord (OCR token + bbox), TableCell, DetectedTable
- ExtractionCandidate records with provenance and confidence
- DocumentScale, Metadata
- FinancialSchema: fixed categories of replace-only candidate slots
- ParseResult: the immutable artifact returned by a parse
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from filingparser.exceptions import SchemaFrozenError, UnknownFieldError


class TableType(str, Enum):
    """Financial statement types a reconstructed table can be classified as."""
    BALANCE_SHEET = "balance_sheet"
    INCOME_STATEMENT = "income_statement"
    CASH_FLOW = "cash_flow"
    UNKNOWN = "unknown"


# =============================================================================
# Positional Evidence
# =============================================================================

@dataclass(frozen=True)
class BoundingBox:
    """Bounding box in OCR pixel coordinates (top-left origin)."""
    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoundingBox":
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )

    @classmethod
    def union(cls, boxes: Iterable["BoundingBox"]) -> "BoundingBox":
        """Smallest box enclosing all boxes; a zero box when there are none."""
        boxes = list(boxes)
        if not boxes:
            return cls(x=0.0, y=0.0, width=0.0, height=0.0)
        min_x = min(b.x for b in boxes)
        min_y = min(b.y for b in boxes)
        max_x = max(b.x + b.width for b in boxes)
        max_y = max(b.y + b.height for b in boxes)
        return cls(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)


@dataclass(frozen=True)
class PositionedWord:
    """A single OCR word with its location."""
    text: str
    bbox: BoundingBox
    confidence: float = 100.0
    line: int = 0
    page: int = 1


@dataclass(frozen=True)
class TableCell:
    """A single cell of a reconstructed table."""
    text: str
    bbox: BoundingBox
    row: int
    column: int
    is_header: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "bbox": self.bbox.to_dict(),
            "row": self.row,
            "col": self.column,
            "is_header": self.is_header,
        }


@dataclass(frozen=True)
class DetectedTable:
    """A table reconstructed from word geometry on one page."""
    title: str
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[TableCell, ...], ...]
    bbox: BoundingBox
    page: int
    table_type: TableType = TableType.UNKNOWN

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return max((c.column + 1 for r in self.rows for c in r), default=0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "headers": list(self.headers),
            "rows": [[c.to_dict() for c in row] for row in self.rows],
            "bbox": self.bbox.to_dict(),
            "page": self.page,
            "type": self.table_type.value,
        }


# =============================================================================
# Extraction Results
# =============================================================================

@dataclass(frozen=True)
class ExtractionCandidate:
    """
    A located (or derived) value for one schema field.

    ``value`` is always in absolute currency units; the document scale has
    already been applied.
    """
    value: float
    source: str
    confidence: float
    page: int = 0
    bbox: Optional[BoundingBox] = None
    context: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "value": self.value,
            "source": self.source,
            "confidence": self.confidence,
            "page": self.page,
        }
        if self.bbox is not None:
            data["bbox"] = self.bbox.to_dict()
        if self.context is not None:
            data["context"] = self.context
        return data


@dataclass(frozen=True)
class DocumentScale:
    """Scale that undecorated numerals in the filing are expressed in."""
    unit: str
    multiplier: int
    detected: bool = False


DEFAULT_SCALE = DocumentScale(unit="millions", multiplier=1_000_000, detected=False)


@dataclass(frozen=True)
class Metadata:
    """Filing metadata; absent fields are empty strings."""
    company_name: str = ""
    ticker: str = ""
    cik: str = ""
    period_end: str = ""
    filing_date: str = ""
    document_type: str = ""
    fiscal_year: str = ""
    fiscal_quarter: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


# =============================================================================
# Financial Schema
# =============================================================================

SCHEMA_LAYOUT: Dict[str, Tuple[str, ...]] = {
    "assets": (
        "total",
        "current",
        "cash",
        "marketable_securities",
        "accounts_receivable",
        "property_equipment",
        "goodwill",
    ),
    "liabilities": ("total", "current", "long_term_debt", "accounts_payable"),
    "equity": ("total", "retained_earnings"),
    "revenues": ("total", "cost_of_revenue", "gross_profit"),
    "expenses": (
        "research_development",
        "sales_marketing",
        "general_administrative",
        "total_operating",
    ),
    "income": ("operating_income", "net_income", "earnings_per_share"),
    "cash_flow": ("operating", "investing", "financing", "capex", "free_cash_flow"),
}


class FinancialSchema:
    """
    Seven fixed categories of optional candidate slots.

    Slots are replace-only: a slot holds a whole ExtractionCandidate or nothing.
    Once frozen (when the parse returns), any mutation raises SchemaFrozenError.
    """

    def __init__(self):
        self._slots: Dict[str, Dict[str, Optional[ExtractionCandidate]]] = {
            category: {slot: None for slot in slots}
            for category, slots in SCHEMA_LAYOUT.items()
        }
        self._frozen = False

    def _check(self, category: str, slot: str) -> None:
        if category not in self._slots:
            raise UnknownFieldError(category)
        if slot not in self._slots[category]:
            raise UnknownFieldError(category, slot)

    def get(self, category: str, slot: str) -> Optional[ExtractionCandidate]:
        self._check(category, slot)
        return self._slots[category][slot]

    def value(self, category: str, slot: str) -> Optional[float]:
        """Numeric value of a slot, or None when absent."""
        candidate = self.get(category, slot)
        return candidate.value if candidate is not None else None

    def has(self, category: str, slot: str) -> bool:
        return self.get(category, slot) is not None

    def set(self, category: str, slot: str, candidate: ExtractionCandidate) -> None:
        self._check(category, slot)
        if self._frozen:
            raise SchemaFrozenError(category, slot)
        if not isinstance(candidate, ExtractionCandidate):
            raise TypeError(f"Expected ExtractionCandidate, got {type(candidate).__name__}")
        self._slots[category][slot] = candidate

    def unset(self, category: str, slot: str) -> Optional[ExtractionCandidate]:
        """Remove a slot's candidate and return it."""
        self._check(category, slot)
        if self._frozen:
            raise SchemaFrozenError(category, slot)
        removed = self._slots[category][slot]
        self._slots[category][slot] = None
        return removed

    def freeze(self) -> "FinancialSchema":
        self._frozen = True
        return self

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def filled(self) -> Iterator[Tuple[str, str, ExtractionCandidate]]:
        """Iterate over populated slots in schema order."""
        for category, slots in self._slots.items():
            for slot, candidate in slots.items():
                if candidate is not None:
                    yield category, slot, candidate

    def to_dict(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        """Nested dict; absent slots are omitted."""
        return {
            category: {
                slot: candidate.to_dict()
                for slot, candidate in slots.items()
                if candidate is not None
            }
            for category, slots in self._slots.items()
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FinancialSchema):
            return NotImplemented
        return self._slots == other._slots

    def __repr__(self) -> str:
        filled = [f"{c}.{s}" for c, s, _ in self.filled()]
        return f"FinancialSchema(filled={filled})"


# =============================================================================
# Parse Result
# =============================================================================

@dataclass(frozen=True)
class ParseResult:
    """The sole externally visible artifact of a parse."""
    metadata: Metadata
    financials: FinancialSchema
    tables_detected: Tuple[DetectedTable, ...] = field(default_factory=tuple)
    extraction_confidence: int = 0
    validation_warnings: Tuple[str, ...] = field(default_factory=tuple)
    extraction_log: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "financials": self.financials.to_dict(),
            "tables_detected": [t.to_dict() for t in self.tables_detected],
            "extraction_confidence": self.extraction_confidence,
            "validation_warnings": list(self.validation_warnings),
            "extraction_log": list(self.extraction_log),
        }

    def table_types(self) -> List[str]:
        return [t.table_type.value for t in self.tables_detected]
