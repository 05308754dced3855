"""
Plausibility filter.

Hard accounting sanity rules applied right after extraction. An offending value
is unset (never corrected) so that derivation and validation only ever see
values that passed these rules.
"""
from typing import List, Optional, Tuple

import structlog

from filingparser.engine.audit_log import ExtractionLog
from filingparser.engine.models import FinancialSchema
from filingparser.utils.formatting import format_money

logger = structlog.get_logger(__name__)


class PlausibilityFilter:
    """
    Rules:
    1. Total liabilities within 1% of total assets (equity cannot be ~0)
    2. Cash or marketable securities larger than total assets
    3. Operating or net income above 1.2x revenue
    4. R&D above revenue
    """

    LIABILITY_ASSET_TOLERANCE = 0.01
    INCOME_REVENUE_RATIO = 1.2

    def apply(
        self, schema: FinancialSchema, log: Optional[ExtractionLog] = None
    ) -> List[Tuple[str, str]]:
        """
        Unset implausible values in place.

        Returns:
            The (category, slot) pairs that were removed, in rule order.
        """
        log = log if log is not None else ExtractionLog()
        log.step("Cleaning up impossible values")
        removed: List[Tuple[str, str]] = []

        assets = schema.value("assets", "total")
        revenue = schema.value("revenues", "total")

        liabilities = schema.value("liabilities", "total")
        if assets is not None and liabilities is not None:
            if abs(assets - liabilities) < abs(assets) * self.LIABILITY_ASSET_TOLERANCE:
                self._reject(
                    schema, log, removed, "liabilities", "total",
                    f"Total Assets = Total Liabilities ({format_money(assets)}) - rejecting liabilities",
                )

        if assets is not None:
            for slot, label in (("cash", "Cash"), ("marketable_securities", "Marketable Securities")):
                value = schema.value("assets", slot)
                if value is not None and value > assets:
                    self._reject(
                        schema, log, removed, "assets", slot,
                        f"{label} > Total Assets - rejecting {label.lower()}",
                    )

        if revenue is not None:
            limit = revenue * self.INCOME_REVENUE_RATIO
            for slot, label in (("operating_income", "Operating Income"), ("net_income", "Net Income")):
                value = schema.value("income", slot)
                if value is not None and value > limit:
                    self._reject(
                        schema, log, removed, "income", slot,
                        f"{label} > Revenue - rejecting {label.lower()}",
                    )

            rd = schema.value("expenses", "research_development")
            if rd is not None and rd > revenue:
                self._reject(
                    schema, log, removed, "expenses", "research_development",
                    "R&D > Revenue - rejecting R&D",
                )

        return removed

    def _reject(
        self,
        schema: FinancialSchema,
        log: ExtractionLog,
        removed: List[Tuple[str, str]],
        category: str,
        slot: str,
        reason: str,
    ) -> None:
        schema.unset(category, slot)
        removed.append((category, slot))
        log.step(f"WARNING: {reason}")
        logger.warning("Implausible value rejected", field=f"{category}.{slot}", reason=reason)
