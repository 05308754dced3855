"""
Scale detection.

Most SEC filings declare "(in millions)" once per statement rather than on every
figure, so the scale is detected up front and applied to every numeral that
carries no B/M/K suffix of its own.
"""

import re
from typing import List, Optional, Tuple

import structlog

from filingparser.engine.audit_log import ExtractionLog
from filingparser.engine.models import DEFAULT_SCALE, DocumentScale

logger = structlog.get_logger(__name__)


class ScaleDetector:
    """Detects the document-wide scale from its declarations; first match wins."""

    SCALE_PATTERNS: List[Tuple[re.Pattern, str, int]] = [
        (re.compile(r"\((?:in|except\s+per\s+share\s+amounts\s+in)\s+millions\b", re.I), "millions", 1_000_000),
        (re.compile(r"\(in\s+thousands\b", re.I), "thousands", 1_000),
        (re.compile(r"\(in\s+billions\b", re.I), "billions", 1_000_000_000),
        (re.compile(r"amounts\s+in\s+millions", re.I), "millions", 1_000_000),
        (re.compile(r"amounts\s+in\s+thousands", re.I), "thousands", 1_000),
        (re.compile(r"amounts\s+in\s+billions", re.I), "billions", 1_000_000_000),
    ]

    def detect(self, raw_text: str, log: Optional[ExtractionLog] = None) -> DocumentScale:
        """
        Detect the scale declared in the text.

        Args:
            raw_text: Full document text (may be empty).
            log: Audit log receiving one line naming the detected or assumed scale.

        Returns:
            The detected DocumentScale, or millions when nothing is declared.
        """
        text = raw_text or ""
        for pattern, unit, multiplier in self.SCALE_PATTERNS:
            if pattern.search(text):
                scale = DocumentScale(unit=unit, multiplier=multiplier, detected=True)
                if log is not None:
                    log.step(f"Detected document scale: {unit} ({multiplier}x)")
                logger.info("Scale detected", unit=unit, multiplier=multiplier)
                return scale

        if log is not None:
            log.step(
                f"No explicit scale found, assuming {DEFAULT_SCALE.unit} "
                f"({DEFAULT_SCALE.multiplier}x)"
            )
        return DEFAULT_SCALE
