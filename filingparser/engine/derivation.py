"""
Derivation of aggregate fields from accounting identities.

Runs after the plausibility filter. Each identity is gated so a derived value
is committed only when both inputs are present and the result is sane.
"""

from typing import Optional

import structlog

from filingparser.engine.audit_log import ExtractionLog
from filingparser.engine.models import ExtractionCandidate, FinancialSchema
from filingparser.utils.formatting import format_money

logger = structlog.get_logger(__name__)


class RelationshipDeriver:
    """
    Identities:
    - equity = assets - liabilities            (only when equity is missing)
    - gross profit = revenue - cost of revenue (only when gross profit is missing)
    - free cash flow = operating CF - |capex|  (always, capex sign varies by filer)
    """

    DERIVED_CONFIDENCE = 90
    FREE_CASH_FLOW_CONFIDENCE = 95

    def __init__(self, log: Optional[ExtractionLog] = None):
        self.log = log if log is not None else ExtractionLog()

    def derive(self, schema: FinancialSchema) -> FinancialSchema:
        self.log.step("Deriving missing fields from financial relationships")
        self.derive_equity(schema)
        self.derive_gross_profit(schema)
        self.derive_free_cash_flow(schema)
        return schema

    def derive_equity(self, schema: FinancialSchema) -> Optional[float]:
        assets = schema.value("assets", "total")
        liabilities = schema.value("liabilities", "total")
        if schema.has("equity", "total") or assets is None or liabilities is None:
            return None

        equity = assets - liabilities
        if equity <= 0:
            return None

        schema.set("equity", "total", ExtractionCandidate(
            value=equity,
            source="Derived from assets − liabilities",
            confidence=self.DERIVED_CONFIDENCE,
            page=0,
            context="Calculated from balance sheet",
        ))
        self._committed("equity", equity)
        return equity

    def derive_gross_profit(self, schema: FinancialSchema) -> Optional[float]:
        revenue = schema.value("revenues", "total")
        cost = schema.value("revenues", "cost_of_revenue")
        if schema.has("revenues", "gross_profit") or revenue is None or cost is None:
            return None

        gross_profit = revenue - cost
        if not 0 < gross_profit < revenue:
            self.log.step(
                "WARNING: Gross profit calculation failed (negative or > revenue) - "
                "likely extraction error in revenue or COGS"
            )
            return None

        schema.set("revenues", "gross_profit", ExtractionCandidate(
            value=gross_profit,
            source="Derived from revenue − cost of revenue",
            confidence=self.DERIVED_CONFIDENCE,
            page=0,
            context="Calculated from income statement",
        ))
        self._committed("gross profit", gross_profit)
        return gross_profit

    def derive_free_cash_flow(self, schema: FinancialSchema) -> Optional[float]:
        operating = schema.value("cash_flow", "operating")
        capex = schema.value("cash_flow", "capex")
        if operating is None or capex is None:
            return None

        free_cash_flow = operating - abs(capex)
        schema.set("cash_flow", "free_cash_flow", ExtractionCandidate(
            value=free_cash_flow,
            source="Derived from operating cash flow − |capital expenditures|",
            confidence=self.FREE_CASH_FLOW_CONFIDENCE,
            page=0,
            context="Calculated from cash flow statement",
        ))
        self._committed("free cash flow", free_cash_flow)
        return free_cash_flow

    def _committed(self, name: str, value: float) -> None:
        self.log.step(f"SUCCESS: Derived {name}: {format_money(value)}")
        logger.debug("Field derived", field=name, value=value)
