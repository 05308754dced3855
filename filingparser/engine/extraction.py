"""
Field extraction layer.

For every target field in the catalog, candidates are gathered from:
1. Reconstructed tables: find the label cell, read the row to its right
2. Raw text: consolidated statement sections first, then the full document,
   line by line (same-line numerals, falling back to the next line)

Candidates are pooled, bounded by field magnitude, ranked, and the best one
is returned. Absence is logged, never raised.
"""

import re
from functools import cmp_to_key
from typing import List, Optional, Sequence, Tuple

import structlog

from filingparser.engine.audit_log import ExtractionLog
from filingparser.engine.field_catalog import FIELD_CATALOG, FieldSpec
from filingparser.engine.models import (
    DEFAULT_SCALE,
    DetectedTable,
    DocumentScale,
    ExtractionCandidate,
    FinancialSchema,
    TableCell,
)
from filingparser.services.numeric_parser import NumericParser, get_numeric_parser
from filingparser.utils.formatting import format_money

logger = structlog.get_logger(__name__)


class FieldExtractor:
    """
    Multi-strategy extractor for catalog fields.

    Confidence values are tunable heuristics; only their ordering matters:
    table rows > consolidated same-line > document same-line > next-line.
    """

    # Table strategy
    TABLE_SINGLE_VALUE_CONFIDENCE = 95
    TABLE_MULTI_VALUE_CONFIDENCE = 90
    TABLE_PROXIMITY_BONUS = 3
    TABLE_PROXIMITY_COLUMNS = 3

    # Text strategy
    SAME_LINE_CONSOLIDATED_CONFIDENCE = 90
    SAME_LINE_DOCUMENT_CONFIDENCE = 80
    NEXT_LINE_CONSOLIDATED_CONFIDENCE = 75
    NEXT_LINE_DOCUMENT_CONFIDENCE = 65
    LARGE_VALUE_THRESHOLD = 10_000_000_000
    LARGE_VALUE_BONUS = 5
    TABULAR_SPACING_BONUS = 5
    TABULAR_SPACING_PATTERN = re.compile(r"\t| {3,}")

    # Consolidated statements shorter than this are too sparse to trust alone
    MIN_CONSOLIDATED_CHARS = 500

    # Critical fields prefer the larger value when candidates differ by more than this
    CRITICAL_VALUE_GAP = 0.5

    SECTION_STOP = (
        r"(?:See\s+accompanying|Notes\s+to\s+(?:the\s+)?consolidated|The\s+accompanying"
        r"|CONSOLIDATED\s+STATEMENTS?\s+OF|CONSOLIDATED\s+BALANCE|$)"
    )
    CONSOLIDATED_SECTION_PATTERNS = [
        re.compile(r"CONSOLIDATED\s+BALANCE\s+SHEETS?([\s\S]{0,10000}?)" + SECTION_STOP, re.I),
        re.compile(
            r"CONSOLIDATED\s+STATEMENTS?\s+OF\s+(?:INCOME|OPERATIONS)([\s\S]{0,10000}?)" + SECTION_STOP,
            re.I,
        ),
        re.compile(
            r"CONSOLIDATED\s+STATEMENTS?\s+OF\s+CASH\s+FLOWS?([\s\S]{0,10000}?)" + SECTION_STOP,
            re.I,
        ),
    ]

    def __init__(
        self,
        raw_text: str,
        tables: Sequence[DetectedTable] = (),
        scale: DocumentScale = DEFAULT_SCALE,
        log: Optional[ExtractionLog] = None,
    ):
        self.raw_text = raw_text or ""
        self.tables = list(tables)
        self.scale = scale
        self.log = log if log is not None else ExtractionLog()
        self._parser: NumericParser = get_numeric_parser()
        self.consolidated_text = self._locate_consolidated_sections(self.raw_text)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def extract_all(
        self,
        schema: FinancialSchema,
        catalog: Sequence[FieldSpec] = FIELD_CATALOG,
    ) -> FinancialSchema:
        """Fill every catalog slot that yields a surviving candidate."""
        self.log.step("Extracting financial fields with multi-strategy approach")
        for spec in catalog:
            best = self.extract_field(spec)
            if best is not None:
                schema.set(spec.category, spec.slot, best)
        return schema

    def extract_field(self, spec: FieldSpec) -> Optional[ExtractionCandidate]:
        """Return the best-ranked candidate for one field, or None."""
        candidates = self.candidates_for(spec)

        if not candidates:
            self.log.step(f"ERROR: {spec.name}: No candidates found")
            return None

        best = self.rank(candidates, spec.is_critical)[0]
        self.log.step(
            f"SUCCESS: {spec.name}: {format_money(best.value)} "
            f"(confidence: {best.confidence:.0f}%)"
        )
        logger.debug(
            "Field extracted",
            field=spec.name,
            value=best.value,
            confidence=best.confidence,
            candidates=len(candidates),
        )
        return best

    def candidates_for(self, spec: FieldSpec) -> List[ExtractionCandidate]:
        """Pooled candidates (tables first, then text) within the field's bounds."""
        pooled: List[ExtractionCandidate] = []
        if self.tables:
            pooled.extend(self.extract_from_tables(spec))
        pooled.extend(self.extract_from_text(spec))
        return [c for c in pooled if spec.within_bounds(c.value)]

    @classmethod
    def rank(
        cls, candidates: Sequence[ExtractionCandidate], critical: bool
    ) -> List[ExtractionCandidate]:
        """
        Order candidates best-first.

        Critical totals sort by value when two candidates differ by more than half
        of the larger one (a footnote figure is smaller than the consolidated
        total); everything else sorts by confidence. Sorting is stable, so ties
        keep pool order.
        """
        if not critical or len(candidates) < 2:
            return sorted(candidates, key=lambda c: -c.confidence)

        def compare(a: ExtractionCandidate, b: ExtractionCandidate) -> float:
            value_diff = b.value - a.value
            if abs(value_diff) > cls.CRITICAL_VALUE_GAP * max(abs(a.value), abs(b.value)):
                return value_diff
            return b.confidence - a.confidence

        return sorted(candidates, key=cmp_to_key(compare))

    # -------------------------------------------------------------------------
    # Table strategy
    # -------------------------------------------------------------------------

    def extract_from_tables(self, spec: FieldSpec) -> List[ExtractionCandidate]:
        """Read each row left to right: label cell, then the first numeric cell after it."""
        results: List[ExtractionCandidate] = []

        for table in self.tables:
            for row in table.rows:
                cells = sorted(row, key=lambda c: c.column)
                label = self._find_label(cells, spec)
                if label is None:
                    continue
                label_index, label_text = label
                label_cell = cells[label_index]

                numeric_cells = [
                    c for c in cells[label_index + 1:]
                    if self._parser.is_numeric_token(c.text)
                ]
                if not numeric_cells:
                    continue

                # Leftmost value is the current period in multi-column statements
                num_cell = numeric_cells[0]
                value = self._parse(num_cell.text, spec)
                if value is None:
                    continue

                if len(numeric_cells) == 1:
                    confidence = self.TABLE_SINGLE_VALUE_CONFIDENCE
                else:
                    confidence = self.TABLE_MULTI_VALUE_CONFIDENCE
                if num_cell.column - label_cell.column < self.TABLE_PROXIMITY_COLUMNS:
                    confidence += self.TABLE_PROXIMITY_BONUS

                results.append(
                    ExtractionCandidate(
                        value=value,
                        source=(
                            f"Table: {table.title or 'Unnamed'} "
                            f"(page {table.page}, row {label_cell.row})"
                        ),
                        confidence=confidence,
                        page=table.page,
                        bbox=num_cell.bbox,
                        context=f"{label_text} | {num_cell.text}",
                    )
                )

        return results

    def _find_label(
        self, cells: List[TableCell], spec: FieldSpec
    ) -> Optional[Tuple[int, str]]:
        """
        Index and text of the label cell in a column-sorted row.

        Falls back to the joined leading run of non-numeric cells, since OCR can
        split one label over several columns.
        """
        for index, cell in enumerate(cells):
            text = cell.text.strip()
            if any(p.search(text) for p in spec.patterns):
                return index, text

        leading: List[TableCell] = []
        for cell in cells:
            if self._parser.is_numeric_token(cell.text):
                break
            leading.append(cell)
        if len(leading) > 1:
            joined = " ".join(c.text.strip() for c in leading)
            if any(p.search(joined) for p in spec.patterns):
                return len(leading) - 1, joined

        return None

    # -------------------------------------------------------------------------
    # Text strategy
    # -------------------------------------------------------------------------

    def _locate_consolidated_sections(self, text: str) -> str:
        """
        Concatenate the primary statement sections.

        Headings also appear in the table of contents and in notes, so the
        longest capture per heading is taken as the statement itself.
        """
        sections: List[str] = []
        for pattern in self.CONSOLIDATED_SECTION_PATTERNS:
            captures = [m.group(1) for m in pattern.finditer(text) if m.group(1)]
            if captures:
                sections.append(max(captures, key=len))
        return "".join(section + "\n\n" for section in sections)

    def extract_from_text(self, spec: FieldSpec) -> List[ExtractionCandidate]:
        """
        Consolidated sections first; the full document only when they are
        sparse or yield nothing. Same-line consolidated matches win outright.
        """
        if len(self.consolidated_text) >= self.MIN_CONSOLIDATED_CHARS:
            same_line, next_line = self._scan_lines(self.consolidated_text, spec, consolidated=True)
            if same_line:
                return same_line
            if next_line:
                return next_line

        same_line, next_line = self._scan_lines(self.raw_text, spec, consolidated=False)
        return same_line + next_line

    def _scan_lines(
        self, text: str, spec: FieldSpec, consolidated: bool
    ) -> Tuple[List[ExtractionCandidate], List[ExtractionCandidate]]:
        """Line-by-line label search; returns (same-line, next-line) candidates."""
        same_line: List[ExtractionCandidate] = []
        next_line: List[ExtractionCandidate] = []
        origin = "Consolidated statement" if consolidated else "Text extraction"
        lines = text.splitlines()

        for index, line in enumerate(lines):
            match = next((m for m in (p.search(line) for p in spec.patterns) if m), None)
            if match is None:
                continue

            numerals = self._parser.find_numerals(line[match.end():])
            if numerals:
                for token in numerals:
                    value = self._parse(token, spec)
                    if value is None or not spec.within_bounds(value):
                        continue
                    confidence = (
                        self.SAME_LINE_CONSOLIDATED_CONFIDENCE
                        if consolidated
                        else self.SAME_LINE_DOCUMENT_CONFIDENCE
                    )
                    confidence += self._size_bonus(value)
                    if self.TABULAR_SPACING_PATTERN.search(line):
                        confidence += self.TABULAR_SPACING_BONUS
                    same_line.append(
                        ExtractionCandidate(
                            value=value,
                            source=f"{origin} (same line)",
                            confidence=confidence,
                            page=0,
                            context=line[:200],
                        )
                    )
                continue

            following = lines[index + 1] if index + 1 < len(lines) else ""
            numerals = self._parser.find_numerals(following)
            if not numerals:
                continue
            value = self._parse(numerals[0], spec)
            if value is None or not spec.within_bounds(value):
                continue
            confidence = (
                self.NEXT_LINE_CONSOLIDATED_CONFIDENCE
                if consolidated
                else self.NEXT_LINE_DOCUMENT_CONFIDENCE
            )
            confidence += self._size_bonus(value)
            next_line.append(
                ExtractionCandidate(
                    value=value,
                    source=f"{origin} (next line)",
                    confidence=confidence,
                    page=0,
                    context=f"{line} {following}"[:200],
                )
            )

        return same_line, next_line

    def _size_bonus(self, value: float) -> int:
        # Signed: large outflows in parentheses get no bonus
        return self.LARGE_VALUE_BONUS if value > self.LARGE_VALUE_THRESHOLD else 0

    def _parse(self, token: str, spec: FieldSpec) -> Optional[float]:
        multiplier = 1 if spec.per_share else self.scale.multiplier
        return self._parser.parse_value(token, multiplier)
