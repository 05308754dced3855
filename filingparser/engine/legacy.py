"""
Flat projection of a ParseResult for older clients.

Every slot collapses to its bare numeric value (or None); table types and
warnings are surfaced under their historical keys.
"""

from typing import Any, Dict, Optional

from filingparser.engine.models import SCHEMA_LAYOUT, ParseResult


def convert_to_legacy_format(result: ParseResult) -> Dict[str, Any]:
    financials = result.financials

    flat: Dict[str, Dict[str, Optional[float]]] = {
        category: {slot: financials.value(category, slot) for slot in slots}
        for category, slots in SCHEMA_LAYOUT.items()
    }

    operating = financials.value("cash_flow", "operating")
    capex = financials.value("cash_flow", "capex")
    flat["cash_flow"]["free_cash_flow"] = (
        operating - abs(capex) if operating is not None and capex is not None else None
    )

    return {
        "metadata": result.metadata.to_dict(),
        "financials": flat,
        "tables_found": result.table_types(),
        "extraction_confidence": result.extraction_confidence,
        "errors": list(result.validation_warnings),
    }
