"""
Diagnostic script for filing parsing.

Checks:
1. Declared scale and metadata found in the text.
2. Tables rebuilt from OCR words (when a words JSON file is given).
3. Extracted fields, warnings and the full extraction log.

Usage:
    python scripts/debug_parse.py filing.txt [words.json]
"""
import json
import os
import sys
from pathlib import Path

import structlog

# Setup simple logging
structlog.configure(
    processors=[
        structlog.processors.JSONRenderer(sort_keys=True)
    ]
)

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from filingparser.engine.models import BoundingBox, PositionedWord
from filingparser.engine.orchestrator import parse
from filingparser.utils.formatting import format_money


def load_words(path: Path):
    with open(path, encoding="utf-8") as fh:
        return [
            PositionedWord(
                text=w["text"],
                bbox=BoundingBox.from_dict(w["bbox"]),
                confidence=w.get("confidence", 100.0),
                line=w.get("line", 0),
                page=w.get("page", 1),
            )
            for w in json.load(fh)
        ]


def diagnose(text_path: Path, words_path: Path = None):
    print(f"\n--- Diagnosing: {text_path.name} ---")

    if not text_path.exists():
        print(f"File not found: {text_path}")
        return

    raw_text = text_path.read_text(encoding="utf-8", errors="replace")
    words = load_words(words_path) if words_path else None
    print(f"  Text Length: {len(raw_text)}")
    print(f"  Positioned Words: {len(words) if words else 0}")

    result = parse(raw_text, words)

    print("\nMetadata:")
    for key, value in result.metadata.to_dict().items():
        print(f"  {key}: {value or '-'}")

    print(f"\nTables Found: {len(result.tables_detected)}")
    for i, table in enumerate(result.tables_detected):
        print(f"    Table {i+1}: {table.row_count} rows, Type: {table.table_type.value}, Page: {table.page}")

    print("\nFields:")
    for category, slot, candidate in result.financials.filled():
        print(
            f"  {category}.{slot}: {format_money(candidate.value)} "
            f"({candidate.confidence:.0f}%, {candidate.source})"
        )

    print(f"\nWarnings: {len(result.validation_warnings)}")
    for warning in result.validation_warnings:
        print(f"  {warning}")

    print(f"\nConfidence: {result.extraction_confidence}%")
    print("\nExtraction Log:")
    for line in result.extraction_log:
        print(f"  {line}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    diagnose(Path(sys.argv[1]), Path(sys.argv[2]) if len(sys.argv) > 2 else None)
