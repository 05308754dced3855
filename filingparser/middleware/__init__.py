"""
Middleware module initialization.
"""
from filingparser.middleware.logging import (
    CorrelationIdMiddleware,
    RequestLoggingMiddleware,
    add_correlation_id_processor,
    get_correlation_id,
    log_performance,
)

__all__ = [
    "CorrelationIdMiddleware",
    "RequestLoggingMiddleware",
    "add_correlation_id_processor",
    "get_correlation_id",
    "log_performance",
]
