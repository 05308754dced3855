"""Validators package."""
from filingparser.services.validators.accounting_equation import (
    AccountingEquationValidator,
    ValidationResult,
    get_accounting_validator,
)
from filingparser.services.validators.plausibility import PlausibilityFilter

__all__ = [
    "AccountingEquationValidator",
    "PlausibilityFilter",
    "ValidationResult",
    "get_accounting_validator",
]
