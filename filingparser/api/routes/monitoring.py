"""
Monitoring endpoints.

Provides the health check used by container orchestration and load balancers.
"""
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from filingparser.engine import __version__

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str
    version: str = __version__


@router.get("/health", response_model=HealthResponse, tags=["Monitoring"])
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the server is running.
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
