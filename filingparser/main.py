"""
FastAPI application entry point.

Configures the application with routes, middleware, and settings.
"""
import logging
import traceback

import sentry_sdk
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from filingparser.api.routes import monitoring, parse
from filingparser.config import get_settings
from filingparser.engine import __version__
from filingparser.exceptions import FilingParserError
from filingparser.middleware.logging import (
    CorrelationIdMiddleware,
    RequestLoggingMiddleware,
    add_correlation_id_processor,
)

settings = get_settings()

# Initialize Sentry for error tracking (must be done early)
if settings.sentry_dsn:
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=__version__,
        traces_sample_rate=0.1,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            LoggingIntegration(level=None, event_level="ERROR"),
        ],
        # Filing text is customer data
        send_default_pii=False,
        max_request_body_size="never",
    )

# Configure structured logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        add_correlation_id_processor,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Filing Parser API",
    description="""
## Financial Filing Extraction API

Turns the text of a 10-K / 10-Q filing, plus optional OCR word positions, into a
confidence-scored financial schema.

### Pipeline

| Stage | Description |
|-------|-------------|
| Scale | Detects "(in millions)" style declarations |
| Tables | Rebuilds statement tables from word geometry |
| Fields | Ranks candidates from tables, consolidated statements and full text |
| Checks | Rejects impossible values, derives missing totals, warns on inconsistencies |
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Parse", "description": "Filing extraction"},
        {"name": "Monitoring", "description": "Health checks"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID"],
)

# Add logging middleware (order matters: correlation ID first)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)

# Parse responses carry the full extraction log
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.include_router(parse.router, prefix="/api/v1", tags=["Parse"])
app.include_router(monitoring.router, tags=["Monitoring"])


@app.exception_handler(FilingParserError)
async def filing_parser_exception_handler(request: Request, exc: FilingParserError):
    """Handle all filing parser exceptions."""
    logger.error(
        "filing_parser_error",
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details,
        path=str(request.url.path),
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with consistent format."""
    sentry_sdk.capture_exception(exc)

    logger.error(
        "unhandled_error",
        error_type=type(exc).__name__,
        message=str(exc),
        path=str(request.url.path),
        traceback=traceback.format_exc(),
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": True,
            "error_code": "FP-999",
            "message": "An unexpected error occurred. Please try again.",
            "details": {"error_type": type(exc).__name__} if settings.debug else {},
        },
    )


@app.on_event("startup")
async def startup_event() -> None:
    """Log configuration on startup."""
    logger.info("Starting Filing Parser API", debug=settings.debug, environment=settings.environment)
    if settings.sentry_dsn:
        logger.info("Sentry error tracking enabled", environment=settings.environment)
    else:
        logger.warning("Sentry error tracking not configured (SENTRY_DSN not set)")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """Cleanup on application shutdown."""
    logger.info("Shutting down Filing Parser API")
