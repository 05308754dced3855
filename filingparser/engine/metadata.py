"""
Filing metadata extraction.

Cover-page facts (company, ticker, CIK, dates, form type) are searched in
bounded windows at the start of the document; footnotes later in a filing are a
rich source of false positives. Every field degrades to an empty string.
"""

import re
from typing import Optional, Sequence

import structlog

from filingparser.engine.audit_log import ExtractionLog
from filingparser.engine.models import Metadata

logger = structlog.get_logger(__name__)


class MetadataExtractor:
    """Ordered pattern lists per field; first accepted capture wins."""

    HEADER_WINDOW = 3000
    DOCUMENT_TYPE_WINDOW = 1000

    # Boilerplate that OCR often surfaces as a "company name"
    NAME_BLACKLIST = re.compile(
        r"SECURITIES|EXCHANGE|ACT OF|UNITED STATES|WASHINGTON|COMMISSION", re.I
    )

    COMPANY_NAME_PATTERNS = [
        re.compile(
            r"^([A-Z][A-Za-z0-9\s&\.,'-]+?(?:Inc\.|Corp\.|Corporation|Company|LLC|Ltd\.|Limited|Co\.?))"
            r"\s+Commission\s+file\s+number",
            re.I | re.M,
        ),
        re.compile(
            r"^\s*([A-Z][A-Za-z0-9&\.,' -]{1,60}?\s(?:Inc\.|Corp\.|Corporation|Company|LLC|Ltd\.|Limited))\s*$",
            re.M,
        ),
        re.compile(
            r"\d{5}[\s\S]{0,300}?([A-Z][A-Za-z0-9\s&\.,'-]{3,50}?(?:Inc\.|Corp\.|Corporation|Company|LLC))",
            re.I,
        ),
        re.compile(r"^([A-Z][A-Z\s&]{3,40}(?:INC|CORP|LLC)\.?)", re.M),
    ]

    DOCUMENT_TYPE_PATTERNS = [
        (re.compile(r"FORM\s+10-K\b", re.I), "10-K"),
        (re.compile(r"FORM\s+10-Q\b", re.I), "10-Q"),
        (re.compile(r"FORM\s+8-K\b", re.I), "8-K"),
    ]

    TICKER_PATTERNS = [
        re.compile(r"Trading\s+Symbol\(?s?\)?[:\s]+([A-Z]{1,5})\b"),
        re.compile(r"(?:NASDAQ|NYSE)[:\s]+([A-Z]{1,5})\b"),
    ]

    CIK_PATTERNS = [
        re.compile(r"CIK[:\s#]+(\d{10})\b", re.I),
    ]

    DATE = r"([A-Z][a-z]+\s+\d{1,2},?\s+\d{4})"

    PERIOD_END_PATTERNS = [
        re.compile(r"(?:fiscal\s+year|period|quarter(?:ly\s+period)?)\s+ended?\s+" + DATE, re.I),
        re.compile(r"(?:three|six|nine|twelve)\s+months\s+ended\s+" + DATE, re.I),
        re.compile(r"As\s+of\s+" + DATE, re.I),
    ]

    FILING_DATE_PATTERNS = [
        re.compile(r"(?:Filed|Filing\s+Date|Date)[:\s]+" + DATE, re.I),
    ]

    FISCAL_YEAR_PATTERNS = [
        re.compile(r"fiscal\s+year\s+(?:ended?\s+)?(\d{4})\b", re.I),
    ]

    FISCAL_QUARTER_PATTERNS = [
        (re.compile(r"first\s+quarter|\bQ1\b", re.I), "Q1"),
        (re.compile(r"second\s+quarter|\bQ2\b", re.I), "Q2"),
        (re.compile(r"third\s+quarter|\bQ3\b", re.I), "Q3"),
        (re.compile(r"fourth\s+quarter|\bQ4\b", re.I), "Q4"),
    ]

    def __init__(self, raw_text: str, log: Optional[ExtractionLog] = None):
        self.raw_text = raw_text or ""
        self.log = log if log is not None else ExtractionLog()

    def extract(self) -> Metadata:
        """Extract all metadata fields."""
        period_end = self.extract_period_end()
        return Metadata(
            company_name=self.extract_company_name(),
            ticker=self.extract_ticker(),
            cik=self.extract_cik(),
            period_end=period_end,
            filing_date=self.extract_filing_date(),
            document_type=self.extract_document_type(),
            fiscal_year=self.extract_fiscal_year(period_end),
            fiscal_quarter=self.extract_fiscal_quarter(),
        )

    @property
    def header(self) -> str:
        return self.raw_text[: self.HEADER_WINDOW]

    def extract_company_name(self) -> str:
        for pattern in self.COMPANY_NAME_PATTERNS:
            for match in pattern.finditer(self.header):
                name = re.sub(r"\s+", " ", match.group(1)).strip()
                if 3 < len(name) < 100 and not self.NAME_BLACKLIST.search(name):
                    self.log.step(f"Extracted company name: {name}")
                    return name

        self.log.step("Could not extract company name")
        return ""

    def extract_document_type(self) -> str:
        window = self.raw_text[: self.DOCUMENT_TYPE_WINDOW]
        for pattern, document_type in self.DOCUMENT_TYPE_PATTERNS:
            if pattern.search(window):
                self.log.step(f"Document type: {document_type}")
                return document_type

        self.log.step("Document type unknown")
        return ""

    def extract_ticker(self) -> str:
        return self._first_capture(self.TICKER_PATTERNS)

    def extract_cik(self) -> str:
        return self._first_capture(self.CIK_PATTERNS)

    def extract_period_end(self) -> str:
        period_end = self._first_capture(self.PERIOD_END_PATTERNS)
        if period_end:
            self.log.step(f"Period end: {period_end}")
        return period_end

    def extract_filing_date(self) -> str:
        return self._first_capture(self.FILING_DATE_PATTERNS)

    def extract_fiscal_year(self, period_end: str = "") -> str:
        fiscal_year = self._first_capture(self.FISCAL_YEAR_PATTERNS)
        if fiscal_year:
            return fiscal_year

        year = re.search(r"(\d{4})", period_end)
        return year.group(1) if year else ""

    def extract_fiscal_quarter(self) -> str:
        for pattern, quarter in self.FISCAL_QUARTER_PATTERNS:
            if pattern.search(self.header):
                return quarter
        return ""

    def _first_capture(self, patterns: Sequence[re.Pattern]) -> str:
        """First capture in the header window that survives the blacklist."""
        for pattern in patterns:
            for match in pattern.finditer(self.header):
                captured = match.group(1).strip()
                if captured and not self.NAME_BLACKLIST.search(captured):
                    return captured
        return ""
