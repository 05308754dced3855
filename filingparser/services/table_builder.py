"""
Table reconstruction service for OCR word positions.

SEC statements put the line-item label in the first column and period values in
aligned columns to its right. Column positions vary by filing and font, so the
columns are recovered from the actual glyph geometry instead of fixed offsets.
"""
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from filingparser.config import get_settings
from filingparser.engine.models import (
    BoundingBox,
    DetectedTable,
    PositionedWord,
    TableCell,
    TableType,
)
from filingparser.services.numeric_parser import NumericParser, get_numeric_parser

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TableBuilderOptions:
    """Clustering tolerances (pixels) and run thresholds."""

    column_tolerance_px: float = 20.0
    column_assign_tolerance_px: float = 30.0
    min_table_rows: int = 3
    min_numeric_tokens_per_row: int = 2

    @classmethod
    def from_settings(cls) -> "TableBuilderOptions":
        settings = get_settings()
        return cls(
            column_tolerance_px=settings.column_tolerance_px,
            column_assign_tolerance_px=settings.column_assign_tolerance_px,
            min_table_rows=settings.min_table_rows,
            min_numeric_tokens_per_row=settings.min_numeric_tokens_per_row,
        )


class TableBuilder:
    """
    Rebuilds tables from positioned words.

    1. Group words by page and line index
    2. A line with 2+ numeric tokens is "numeric-dense"
    3. A run of 3+ consecutive dense lines is a table
    4. Cluster x-positions into column anchors; assign words to anchors
    5. The first row is the title/header and classifies the table
    """

    TITLE_PATTERNS: List[Tuple[re.Pattern, TableType]] = [
        (re.compile(r"balance.*sheet", re.I), TableType.BALANCE_SHEET),
        (re.compile(r"income|operations", re.I), TableType.INCOME_STATEMENT),
        (re.compile(r"cash.*flow", re.I), TableType.CASH_FLOW),
    ]

    def __init__(self, options: Optional[TableBuilderOptions] = None):
        """Initialize table builder."""
        self.options = options or TableBuilderOptions()
        self._numeric_parser: NumericParser = get_numeric_parser()

    def build_tables(self, words: Sequence[PositionedWord]) -> List[DetectedTable]:
        """
        Reconstruct all tables from a document's words.

        Args:
            words: OCR words with positions (any order).

        Returns:
            Tables ordered by page, then by position on the page.
        """
        if not words:
            return []

        pages = self._group_words(words)
        tables: List[DetectedTable] = []

        for page_num in sorted(pages):
            page_tables = self._find_table_regions(pages[page_num], page_num)
            tables.extend(page_tables)

        logger.info(
            "Table detection complete",
            pages=len(pages),
            word_count=len(words),
            table_count=len(tables),
        )
        return tables

    def _group_words(
        self, words: Sequence[PositionedWord]
    ) -> Dict[int, Dict[int, List[PositionedWord]]]:
        """Bucket words page -> line -> words, keeping input order."""
        pages: Dict[int, Dict[int, List[PositionedWord]]] = {}
        for word in words:
            pages.setdefault(word.page, {}).setdefault(word.line, []).append(word)
        return pages

    def is_numeric_dense(self, line_words: Sequence[PositionedWord]) -> bool:
        """A line with several numeric tokens is likely a statement row."""
        numeric = sum(1 for w in line_words if self._numeric_parser.is_numeric_token(w.text))
        return numeric >= self.options.min_numeric_tokens_per_row

    def _find_table_regions(
        self, lines: Dict[int, List[PositionedWord]], page_num: int
    ) -> List[DetectedTable]:
        """Find maximal runs of numeric-dense lines on one page."""
        tables: List[DetectedTable] = []
        run: List[List[PositionedWord]] = []

        for line_num in sorted(lines):
            line_words = lines[line_num]
            if self.is_numeric_dense(line_words):
                run.append(line_words)
                continue
            if len(run) >= self.options.min_table_rows:
                tables.append(self._build_table(run, page_num))
            run = []

        # A run that reaches the bottom of the page is still a table
        if len(run) >= self.options.min_table_rows:
            tables.append(self._build_table(run, page_num))

        return tables

    def _build_table(
        self, run: List[List[PositionedWord]], page_num: int
    ) -> DetectedTable:
        """Turn a run of dense lines into a DetectedTable."""
        all_words = [w for line in run for w in line]
        columns = self.detect_column_positions(sorted(w.bbox.x for w in all_words))

        rows = tuple(
            self._build_row(line_words, row_idx, columns)
            for row_idx, line_words in enumerate(run)
        )

        title = " ".join(w.text for w in sorted(run[0], key=lambda w: w.bbox.x))
        table_type = self.classify_title(title)

        logger.debug(
            "Table reconstructed",
            page=page_num,
            rows=len(rows),
            columns=len(columns),
            table_type=table_type.value,
        )

        return DetectedTable(
            title=title,
            headers=tuple(c.text for c in rows[0]) if rows else (),
            rows=rows,
            bbox=BoundingBox.union(w.bbox for w in all_words),
            page=page_num,
            table_type=table_type,
        )

    def _build_row(
        self,
        line_words: List[PositionedWord],
        row_idx: int,
        columns: List[float],
    ) -> Tuple[TableCell, ...]:
        """Assign a line's words to columns; words sharing a column form one cell."""
        by_column: Dict[int, List[PositionedWord]] = {}
        for word in sorted(line_words, key=lambda w: w.bbox.x):
            col = self.assign_column(word.bbox.x, columns)
            by_column.setdefault(col, []).append(word)

        return tuple(
            TableCell(
                text=" ".join(w.text for w in by_column[col]),
                bbox=BoundingBox.union(w.bbox for w in by_column[col]),
                row=row_idx,
                column=col,
                is_header=row_idx == 0,
            )
            for col in sorted(by_column)
        )

    def detect_column_positions(self, x_positions: Sequence[float]) -> List[float]:
        """
        Greedily cluster sorted x-positions into column anchors.

        A new column starts whenever a position is farther than the tolerance
        from the last anchor.
        """
        columns: List[float] = []
        for x in x_positions:
            if not columns or x - columns[-1] > self.options.column_tolerance_px:
                columns.append(x)
        return columns

    def assign_column(self, x: float, columns: Sequence[float]) -> int:
        """Nearest anchor within the assignment tolerance, else a new trailing column."""
        best_index: Optional[int] = None
        best_distance = self.options.column_assign_tolerance_px
        for index, anchor in enumerate(columns):
            distance = abs(x - anchor)
            if distance < best_distance:
                best_index = index
                best_distance = distance
        return best_index if best_index is not None else len(columns)

    @classmethod
    def classify_title(cls, title: str) -> TableType:
        for pattern, table_type in cls.TITLE_PATTERNS:
            if pattern.search(title):
                return table_type
        return TableType.UNKNOWN


# Singleton instance
_builder_instance: Optional[TableBuilder] = None


def get_table_builder() -> TableBuilder:
    """Get singleton TableBuilder instance configured from settings."""
    global _builder_instance
    if _builder_instance is None:
        _builder_instance = TableBuilder(TableBuilderOptions.from_settings())
    return _builder_instance
