"""
Logging middleware and utilities.

Provides correlation ID tracking, request/response logging, and performance timing
for the parse API.
"""
import asyncio
import functools
import time
import uuid
from contextvars import ContextVar
from typing import Any, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# Context variable for correlation ID (per request)
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger(__name__)

# Parses slower than this are logged as warnings
SLOW_REQUEST_MS = 2000


def get_correlation_id() -> str:
    """Get the current request's correlation ID."""
    return correlation_id.get()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware that adds correlation ID to each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        correlation_id.set(request_id)

        response = await call_next(request)

        response.headers["X-Correlation-ID"] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs all requests with timing information."""

    SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()

        # Request bodies carry whole filings; only the size is logged
        request_info = {
            "method": request.method,
            "path": request.url.path,
            "content_length": request.headers.get("Content-Length"),
            "client_ip": request.client.host if request.client else None,
            "correlation_id": get_correlation_id(),
        }

        logger.info("request_started", **request_info)

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "request_failed",
                **request_info,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round(duration_ms, 2),
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "request_completed",
            **request_info,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        if duration_ms > SLOW_REQUEST_MS:
            logger.warning(
                "slow_request",
                **request_info,
                duration_ms=round(duration_ms, 2),
            )

        return response


def log_performance(operation_name: str):
    """
    Decorator to log performance timing for functions.

    Usage:
        @log_performance("filing_parse")
        def run_parse(request):
            ...
    """
    def decorator(func: Callable) -> Callable:
        def _started() -> float:
            logger.debug(
                "operation_started",
                operation=operation_name,
                correlation_id=get_correlation_id(),
            )
            return time.perf_counter()

        def _completed(start_time: float) -> None:
            logger.info(
                "operation_completed",
                operation=operation_name,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                correlation_id=get_correlation_id(),
            )

        def _failed(start_time: float, e: Exception) -> None:
            logger.error(
                "operation_failed",
                operation=operation_name,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                correlation_id=get_correlation_id(),
            )

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> Any:
            start_time = _started()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _failed(start_time, e)
                raise
            _completed(start_time)
            return result

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs) -> Any:
            start_time = _started()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _failed(start_time, e)
                raise
            _completed(start_time)
            return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def add_correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict
) -> dict:
    """Structlog processor that adds correlation ID to all log entries."""
    request_id = get_correlation_id()
    if request_id:
        event_dict["correlation_id"] = request_id
    return event_dict
