"""
Ordered, timestamped extraction log for a single parse run.

Every line is returned to the caller in ``ParseResult.extraction_log`` and also
forwarded to structlog so operators see the same trail.
"""

from datetime import datetime, timezone
from typing import List, Tuple

import structlog

logger = structlog.get_logger(__name__)


class ExtractionLog:
    """Append-only audit trail owned by exactly one pipeline run."""

    def __init__(self):
        self._lines: List[str] = []

    def step(self, message: str) -> None:
        timestamp = datetime.now(timezone.utc).isoformat()
        self._lines.append(f"[{timestamp}] {message}")
        logger.debug("extraction_step", message=message)

    def lines(self) -> Tuple[str, ...]:
        return tuple(self._lines)

    def __len__(self) -> int:
        return len(self._lines)
