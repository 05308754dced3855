"""
Tests for filing metadata extraction.
"""
from filingparser.engine.audit_log import ExtractionLog
from filingparser.engine.metadata import MetadataExtractor
from filingparser.engine.models import Metadata


class TestMetadataExtractor:
    """Tests for MetadataExtractor."""

    def test_cover_page(self, sample_header: str):
        """Test every field is read from a 10-K cover page."""
        metadata = MetadataExtractor(sample_header).extract()

        assert metadata.company_name == "Apple Inc."
        assert metadata.document_type == "10-K"
        assert metadata.ticker == "AAPL"
        assert metadata.cik == "0000320193"
        assert metadata.period_end == "September 28, 2024"
        assert metadata.filing_date == "November 1, 2024"
        assert metadata.fiscal_year == "2024"
        assert metadata.fiscal_quarter == ""

    def test_empty_text(self):
        """Test empty text yields empty strings, never errors."""
        assert MetadataExtractor("").extract() == Metadata()

    def test_boilerplate_is_not_a_company(self):
        """Test government boilerplate lines are never taken as the company name."""
        text = "UNITED STATES SECURITIES AND EXCHANGE COMMISSION INC.\nFORM 10-Q\n"
        assert MetadataExtractor(text).extract_company_name() == ""

    def test_quarterly_report(self):
        """Test a 10-Q cover page with an explicit quarter."""
        text = (
            "FORM 10-Q\n"
            "For the quarterly period ended March 30, 2024\n"
            "Second Quarter Report\n"
            "Microsoft Corporation\n"
            "NASDAQ: MSFT\n"
        )
        metadata = MetadataExtractor(text).extract()

        assert metadata.document_type == "10-Q"
        assert metadata.company_name == "Microsoft Corporation"
        assert metadata.ticker == "MSFT"
        assert metadata.period_end == "March 30, 2024"
        assert metadata.fiscal_quarter == "Q2"
        assert metadata.fiscal_year == "2024"

    def test_explicit_fiscal_year(self):
        """Test an explicit fiscal year wins over the period-end year."""
        text = "Annual report for fiscal year 2023\nAs of January 31, 2024\n"
        metadata = MetadataExtractor(text).extract()

        assert metadata.fiscal_year == "2023"
        assert metadata.period_end == "January 31, 2024"

    def test_document_type_window(self):
        """Test the form type is only read near the start of the document."""
        text = ("x" * 1200) + "FORM 10-K"
        assert MetadataExtractor(text).extract_document_type() == ""

    def test_log_lines(self, sample_header: str):
        """Test metadata steps are logged."""
        log = ExtractionLog()
        MetadataExtractor(sample_header, log).extract()
        lines = "\n".join(log.lines())

        assert "Extracted company name: Apple Inc." in lines
        assert "Document type: 10-K" in lines
        assert "Period end: September 28, 2024" in lines

    def test_log_when_missing(self):
        """Test absences are logged."""
        log = ExtractionLog()
        MetadataExtractor("nothing here", log).extract()
        lines = "\n".join(log.lines())

        assert "Could not extract company name" in lines
        assert "Document type unknown" in lines
