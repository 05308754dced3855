"""
Custom exceptions for the filing parser.

Provides a hierarchy of exceptions with error codes for consistent error handling.
The extraction core never raises for document content; these cover request
validation at the HTTP boundary and contract violations against the schema builder.
"""
from typing import Any, Dict, Optional


class FilingParserError(Exception):
    """
    Base exception for all filing parser errors.

    Attributes:
        error_code: Unique error code (e.g., FP-001)
        message: Human-readable error message
        details: Additional error context
    """
    error_code: str = "FP-000"
    http_status: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ):
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        return {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


# Request Errors (FP-1XX)
class InvalidParseRequestError(FilingParserError):
    """Parse request is structurally invalid."""
    error_code = "FP-100"
    http_status = 400

    def __init__(self, message: str = "Invalid parse request", **kwargs):
        super().__init__(message, **kwargs)


class DocumentTooLargeError(FilingParserError):
    """Extracted text or word list exceeds the configured limit."""
    error_code = "FP-101"
    http_status = 413

    def __init__(self, what: str, size: int, max_size: int, **kwargs):
        message = f"{what} too large: {size} exceeds limit of {max_size}"
        super().__init__(
            message,
            details={"what": what, "size": size, "max_size": max_size},
            **kwargs,
        )


# Schema Errors (FP-2XX)
class SchemaFrozenError(FilingParserError):
    """Attempt to modify a financial schema after the parse returned it."""
    error_code = "FP-200"
    http_status = 500

    def __init__(self, category: str, slot: str, **kwargs):
        message = f"Cannot modify {category}.{slot}: schema is frozen"
        super().__init__(message, details={"category": category, "slot": slot}, **kwargs)


class UnknownFieldError(FilingParserError):
    """Category or slot is not part of the fixed financial schema."""
    error_code = "FP-201"
    http_status = 500

    def __init__(self, category: str, slot: Optional[str] = None, **kwargs):
        target = f"{category}.{slot}" if slot else category
        message = f"Unknown schema field: {target}"
        super().__init__(message, details={"category": category, "slot": slot}, **kwargs)
