"""
Accounting consistency validator.

Checks relationships between the final extracted values. Failures become
warnings on the parse result; values are never modified here.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import structlog

from filingparser.engine.audit_log import ExtractionLog
from filingparser.engine.models import FinancialSchema
from filingparser.utils.formatting import format_money

logger = structlog.get_logger(__name__)


@dataclass
class ValidationResult:
    """Result of a validation check."""

    is_valid: bool
    message: str
    severity: str  # critical, high, medium
    details: Dict[str, Any] = field(default_factory=dict)


class AccountingEquationValidator:
    """
    Validator for statement-level relationships.

    Checks:
    1. Assets = Liabilities + Equity (within 5% of assets)
    2. 0 <= Gross Profit <= Revenue
    3. Operating Income <= Gross Profit
    4. Net Income <= 1.5x Operating Income
    5. Cash + Marketable Securities <= Total Assets
    """

    BALANCE_TOLERANCE = 0.05
    NET_TO_OPERATING_RATIO = 1.5

    def validate(self, schema: FinancialSchema) -> List[ValidationResult]:
        """
        Run every check whose inputs are present.

        Args:
            schema: Extracted (and derived) financials.

        Returns:
            Failed checks only, in check order.
        """
        results: List[ValidationResult] = []

        for check in (
            self._validate_balance_sheet,
            self._validate_gross_profit,
            self._validate_operating_income,
            self._validate_net_income,
            self._validate_liquid_assets,
        ):
            results.extend(check(schema))

        return results

    def warnings(
        self, schema: FinancialSchema, log: Optional[ExtractionLog] = None
    ) -> List[str]:
        """Validation messages for the parse result, with a summary log line."""
        log = log if log is not None else ExtractionLog()
        log.step("Validating extracted data")

        messages = [result.message for result in self.validate(schema)]

        if messages:
            log.step(f"WARNING: Found {len(messages)} validation warnings")
            logger.warning("Validation warnings", count=len(messages), warnings=messages)
        else:
            log.step("SUCCESS: All validation checks passed")
        return messages

    def _validate_balance_sheet(self, schema: FinancialSchema) -> List[ValidationResult]:
        assets = schema.value("assets", "total")
        liabilities = schema.value("liabilities", "total")
        equity = schema.value("equity", "total")
        if assets is None or liabilities is None or equity is None:
            return []

        expected = liabilities + equity
        diff = abs(assets - expected)
        if diff <= abs(assets) * self.BALANCE_TOLERANCE:
            return []

        return [ValidationResult(
            is_valid=False,
            message=(
                f"Balance sheet doesn't balance: Assets ({format_money(assets)}) != "
                f"Liabilities ({format_money(liabilities)}) + Equity ({format_money(equity)})"
            ),
            severity="critical",
            details={
                "assets": assets,
                "liabilities": liabilities,
                "equity": equity,
                "difference": diff,
            },
        )]

    def _validate_gross_profit(self, schema: FinancialSchema) -> List[ValidationResult]:
        revenue = schema.value("revenues", "total")
        gross_profit = schema.value("revenues", "gross_profit")
        if revenue is None or gross_profit is None:
            return []

        if gross_profit < 0:
            return [ValidationResult(
                is_valid=False,
                message=f"Gross profit is negative: {format_money(gross_profit)}",
                severity="high",
                details={"gross_profit": gross_profit},
            )]
        if gross_profit > revenue:
            return [ValidationResult(
                is_valid=False,
                message=(
                    f"Gross profit ({format_money(gross_profit)}) exceeds "
                    f"revenue ({format_money(revenue)})"
                ),
                severity="high",
                details={"gross_profit": gross_profit, "revenue": revenue},
            )]
        return []

    def _validate_operating_income(self, schema: FinancialSchema) -> List[ValidationResult]:
        operating_income = schema.value("income", "operating_income")
        gross_profit = schema.value("revenues", "gross_profit")
        if operating_income is None or gross_profit is None:
            return []

        if operating_income <= gross_profit:
            return []
        return [ValidationResult(
            is_valid=False,
            message=(
                f"Operating income ({format_money(operating_income)}) exceeds "
                f"gross profit ({format_money(gross_profit)})"
            ),
            severity="medium",
            details={"operating_income": operating_income, "gross_profit": gross_profit},
        )]

    def _validate_net_income(self, schema: FinancialSchema) -> List[ValidationResult]:
        net_income = schema.value("income", "net_income")
        operating_income = schema.value("income", "operating_income")
        if net_income is None or operating_income is None:
            return []

        if net_income <= operating_income * self.NET_TO_OPERATING_RATIO:
            return []
        return [ValidationResult(
            is_valid=False,
            message=(
                f"Net income ({format_money(net_income)}) significantly exceeds "
                f"operating income ({format_money(operating_income)})"
            ),
            severity="medium",
            details={"net_income": net_income, "operating_income": operating_income},
        )]

    def _validate_liquid_assets(self, schema: FinancialSchema) -> List[ValidationResult]:
        assets = schema.value("assets", "total")
        cash = schema.value("assets", "cash")
        if assets is None or cash is None:
            return []

        securities = schema.value("assets", "marketable_securities") or 0.0
        liquid = cash + securities
        if liquid <= assets:
            return []
        return [ValidationResult(
            is_valid=False,
            message=(
                f"Cash + securities ({format_money(liquid)}) exceeds "
                f"total assets ({format_money(assets)})"
            ),
            severity="high",
            details={"cash": cash, "marketable_securities": securities, "assets": assets},
        )]


# Singleton instance
_validator_instance: Optional[AccountingEquationValidator] = None


def get_accounting_validator() -> AccountingEquationValidator:
    """Get singleton AccountingEquationValidator instance."""
    global _validator_instance
    if _validator_instance is None:
        _validator_instance = AccountingEquationValidator()
    return _validator_instance
