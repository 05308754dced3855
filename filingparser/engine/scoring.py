"""Overall extraction confidence."""

from typing import Optional, Sequence, Tuple

import structlog

from filingparser.engine.audit_log import ExtractionLog
from filingparser.engine.models import FinancialSchema

logger = structlog.get_logger(__name__)

# (category, slot, weight)
CRITICAL_FIELDS: Tuple[Tuple[str, str, int], ...] = (
    ("revenues", "total", 3),
    ("income", "net_income", 3),
    ("assets", "total", 3),
    ("liabilities", "total", 3),
    ("equity", "total", 3),
)
IMPORTANT_FIELDS: Tuple[Tuple[str, str, int], ...] = (
    ("income", "operating_income", 2),
    ("revenues", "gross_profit", 2),
    ("assets", "cash", 2),
    ("cash_flow", "operating", 2),
)
OPTIONAL_FIELDS: Tuple[Tuple[str, str, int], ...] = (
    ("expenses", "research_development", 1),
    ("expenses", "sales_marketing", 1),
    ("cash_flow", "capex", 1),
    ("assets", "marketable_securities", 1),
)
WEIGHTED_FIELDS = CRITICAL_FIELDS + IMPORTANT_FIELDS + OPTIONAL_FIELDS


class ConfidenceScorer:
    """Weighted field coverage minus a capped per-warning penalty."""

    WARNING_PENALTY = 5
    MAX_WARNING_PENALTY = 20

    def __init__(self, weighted_fields: Sequence[Tuple[str, str, int]] = WEIGHTED_FIELDS):
        self.weighted_fields = tuple(weighted_fields)

    def score(
        self,
        schema: FinancialSchema,
        warning_count: int = 0,
        log: Optional[ExtractionLog] = None,
    ) -> int:
        """
        Compute the 0-100 confidence for a parse.

        Args:
            schema: Final financials (after filtering and derivation).
            warning_count: Number of validation warnings raised.
            log: Audit log receiving the final score line.
        """
        total = sum(weight for _, _, weight in self.weighted_fields)
        achieved = sum(
            weight
            for category, slot, weight in self.weighted_fields
            if schema.has(category, slot)
        )

        coverage = round(100 * achieved / total) if total else 0
        penalty = min(self.MAX_WARNING_PENALTY, self.WARNING_PENALTY * warning_count)
        score = max(0, min(100, coverage - penalty))

        if log is not None:
            log.step(f"Final confidence score: {score}%")
        logger.info(
            "Confidence scored",
            score=score,
            achieved_weight=achieved,
            total_weight=total,
            warnings=warning_count,
        )
        return score
