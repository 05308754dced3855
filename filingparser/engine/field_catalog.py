"""
Target field catalog.

Each entry is (field name, schema slot, ordered label patterns, magnitude bounds).
The generic extraction routine in ``extraction.py`` consumes this table; nothing
about an individual line item is hard-coded there.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

DEFAULT_MIN_VALUE = 100.0
DEFAULT_MAX_VALUE = 1e12

CRITICAL_FIELD_PATTERN = re.compile(r"revenue|assets|liabilities|equity")


@dataclass(frozen=True)
class FieldSpec:
    """How to locate one financial line item."""
    name: str
    category: str
    slot: str
    patterns: Tuple[re.Pattern, ...]
    min_value: float = DEFAULT_MIN_VALUE
    max_value: float = DEFAULT_MAX_VALUE
    per_share: bool = False

    @property
    def is_critical(self) -> bool:
        """Major totals, where the largest plausible figure is usually the real one."""
        return bool(CRITICAL_FIELD_PATTERN.search(self.name))

    def within_bounds(self, value: float) -> bool:
        return self.min_value <= abs(value) <= self.max_value


def _patterns(*sources: str) -> Tuple[re.Pattern, ...]:
    return tuple(re.compile(source, re.IGNORECASE) for source in sources)


def field_spec(
    name: str,
    target: str,
    patterns: Iterable[str],
    min_value: float = DEFAULT_MIN_VALUE,
    max_value: float = DEFAULT_MAX_VALUE,
    per_share: bool = False,
) -> FieldSpec:
    """Build a FieldSpec from a "category.slot" target and raw regex sources."""
    category, slot = target.split(".")
    return FieldSpec(
        name=name,
        category=category,
        slot=slot,
        patterns=_patterns(*patterns),
        min_value=min_value,
        max_value=max_value,
        per_share=per_share,
    )


FIELD_CATALOG: Tuple[FieldSpec, ...] = (
    # Balance sheet - assets
    field_spec("total_assets", "assets.total", [r"^\s*Total\s+assets\b"], min_value=5e9),
    field_spec("current_assets", "assets.current", [r"^\s*Total\s+current\s+assets\b"]),
    field_spec("cash", "assets.cash", [
        r"Cash\s+and\s+cash\s+equivalents",
        r"^\s*Cash\b",
    ]),
    field_spec("marketable_securities", "assets.marketable_securities", [
        r"Marketable\s+securities",
        r"Short-term\s+investments",
    ]),
    field_spec("accounts_receivable", "assets.accounts_receivable", [
        r"Accounts\s+receivable",
        r"Trade\s+receivables",
    ]),
    field_spec("property_equipment", "assets.property_equipment", [
        r"^\s*Property\s+and\s+equipment,?\s+net",
        r"^\s*Property,?\s+plant\s+and\s+equipment",
    ]),
    field_spec("goodwill", "assets.goodwill", [r"^\s*Goodwill\b"]),
    # Balance sheet - liabilities
    field_spec("total_liabilities", "liabilities.total", [
        r"^\s*Total\s+liabilities\b(?!\s+and\s+(?:stockholders|shareholders|equity))",
    ], min_value=1e9),
    field_spec("current_liabilities", "liabilities.current", [
        r"^\s*Total\s+current\s+liabilities\b",
    ]),
    field_spec("long_term_debt", "liabilities.long_term_debt", [r"Long[-\s]term\s+debt"]),
    field_spec("accounts_payable", "liabilities.accounts_payable", [r"Accounts\s+payable"]),
    # Balance sheet - equity
    field_spec("total_equity", "equity.total", [
        r"^\s*Total\s+(?:stockholders|shareholders)['’]?\s+equity\b",
        r"^\s*Total\s+equity\b",
    ], min_value=1e9),
    field_spec("retained_earnings", "equity.retained_earnings", [
        r"Retained\s+earnings",
        r"Accumulated\s+(?:deficit|earnings)",
    ]),
    # Income statement
    field_spec("total_revenue", "revenues.total", [
        r"^\s*Total\s+(?:net\s+)?revenues?\b",
        r"^\s*(?:Net\s+)?revenues?\b",
        r"^\s*(?:Total\s+)?net\s+sales\b",
    ], min_value=1e9),
    field_spec("cost_of_revenue", "revenues.cost_of_revenue", [
        r"Cost\s+of\s+revenues?",
        r"Cost\s+of\s+sales",
    ]),
    field_spec("gross_profit", "revenues.gross_profit", [
        r"Gross\s+profit",
        r"Gross\s+(?:income|margin)\b",
    ]),
    field_spec("rd", "expenses.research_development", [
        r"Research\s+and\s+development",
        r"\bR&D\b",
    ]),
    field_spec("sales_marketing", "expenses.sales_marketing", [
        r"Sales\s+and\s+marketing",
        r"Selling\s+and\s+marketing",
        r"Selling,?\s+general\s+and\s+administrative",
    ]),
    field_spec("ga", "expenses.general_administrative", [
        r"^\s*General\s+and\s+administrative",
    ]),
    field_spec("total_operating_expenses", "expenses.total_operating", [
        r"^\s*Total\s+operating\s+expenses\b",
        r"^\s*Total\s+costs\s+and\s+expenses\b",
    ]),
    field_spec("operating_income", "income.operating_income", [
        r"Income\s+from\s+operations",
        r"Operating\s+income",
    ]),
    field_spec("net_income", "income.net_income", [
        r"Net\s+income\s+\(loss\)",
        r"^\s*Net\s+income\b",
    ]),
    field_spec("eps", "income.earnings_per_share", [
        r"Basic\s+(?:net\s+)?(?:earnings|income)\s+per\s+share",
    ], min_value=0.01, max_value=10_000, per_share=True),
    # Cash flow statement
    field_spec("ocf", "cash_flow.operating", [
        r"Net\s+cash\b.{0,40}?operating\s+activities",
        r"^\s*Cash\s+(?:generated|provided)\s+(?:by|from)\s+operating\s+activities",
    ]),
    field_spec("investing_cash_flow", "cash_flow.investing", [
        r"Net\s+cash\b.{0,40}?investing\s+activities",
        r"^\s*Cash\s+(?:generated|provided|used)\b.{0,20}?investing\s+activities",
    ]),
    field_spec("financing_cash_flow", "cash_flow.financing", [
        r"Net\s+cash\b.{0,40}?financing\s+activities",
        r"^\s*Cash\s+(?:generated|provided|used)\b.{0,20}?financing\s+activities",
    ]),
    field_spec("capex", "cash_flow.capex", [
        r"Capital\s+expenditures",
        r"Purchases?\s+of\s+property(?:,\s+plant)?\s+and\s+equipment",
        r"Property\s+and\s+equipment\s+additions",
    ]),
)

FIELDS_BY_NAME: Dict[str, FieldSpec] = {spec.name: spec for spec in FIELD_CATALOG}
