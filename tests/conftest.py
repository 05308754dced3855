"""
Pytest configuration and fixtures.
"""
from typing import Generator, List, Sequence, Tuple

import pytest
from fastapi.testclient import TestClient

from filingparser.engine.models import BoundingBox, PositionedWord
from filingparser.main import app


@pytest.fixture(scope="function")
def client() -> Generator[TestClient, None, None]:
    """Create a test client for the API."""
    with TestClient(app) as test_client:
        yield test_client


def make_words(
    rows: Sequence[Sequence[Tuple[str, float]]],
    page: int = 1,
    first_line: int = 0,
) -> List[PositionedWord]:
    """
    Build positioned words from rows of (text, x) pairs.

    Each row becomes one OCR line; y follows the line index.
    """
    words: List[PositionedWord] = []
    for offset, row in enumerate(rows):
        line = first_line + offset
        for text, x in row:
            words.append(
                PositionedWord(
                    text=text,
                    bbox=BoundingBox(x=x, y=100.0 + 20.0 * line, width=8.0 * len(text), height=12.0),
                    confidence=95.0,
                    line=line,
                    page=page,
                )
            )
    return words


@pytest.fixture
def word_builder():
    """Expose make_words to tests."""
    return make_words


@pytest.fixture
def balance_sheet_words() -> List[PositionedWord]:
    """Three numeric-dense balance sheet rows: label, current year, prior year."""
    return make_words([
        [("Total", 50), ("assets", 64), ("98,500", 300), ("91,000", 450)],
        [("Total", 50), ("liabilities", 64), ("45,200", 300), ("2024", 450)],
        [("Total", 50), ("equity", 64), ("53,300", 300), ("49,100", 450)],
    ])


@pytest.fixture
def sample_header() -> str:
    """Cover page of a 10-K filing."""
    return (
        "UNITED STATES\n"
        "SECURITIES AND EXCHANGE COMMISSION\n"
        "Washington, D.C. 20549\n"
        "FORM 10-K\n"
        "ANNUAL REPORT PURSUANT TO SECTION 13 OR 15(d) OF THE SECURITIES EXCHANGE ACT OF 1934\n"
        "For the fiscal year ended September 28, 2024\n"
        "Commission File Number: 001-36743\n"
        "Apple Inc.\n"
        "Trading Symbol: AAPL\n"
        "CIK: 0000320193\n"
        "Filed: November 1, 2024\n"
    )


@pytest.fixture
def sample_filing_text(sample_header: str) -> str:
    """A small but complete filing: header plus the three primary statements."""
    return sample_header + (
        "\n"
        "CONSOLIDATED STATEMENTS OF OPERATIONS\n"
        "(In millions, except per share amounts)\n"
        "Net sales                                   391,035    383,285\n"
        "Cost of sales                               210,352    214,137\n"
        "Gross margin                                180,683    169,148\n"
        "Research and development                     31,370     29,915\n"
        "Selling, general and administrative          26,097     24,932\n"
        "Total operating expenses                     57,467     54,847\n"
        "Operating income                            123,216    114,301\n"
        "Net income                                   93,736     96,995\n"
        "Basic earnings per share                       6.11       6.16\n"
        "\n"
        "CONSOLIDATED BALANCE SHEETS\n"
        "(In millions)\n"
        "Cash and cash equivalents                    29,943     29,965\n"
        "Marketable securities                        35,228     31,590\n"
        "Accounts receivable, net                     33,410     29,508\n"
        "Total current assets                        152,987    143,566\n"
        "Property, plant and equipment, net           45,680     43,715\n"
        "Total assets                                364,980    352,583\n"
        "Accounts payable                             68,960     62,611\n"
        "Total current liabilities                   176,392    145,308\n"
        "Long-term debt                               85,750     95,281\n"
        "Total liabilities                           308,030    290,437\n"
        "Retained earnings                           (19,154)      (214)\n"
        "Total shareholders' equity                   56,950     62,146\n"
        "\n"
        "CONSOLIDATED STATEMENTS OF CASH FLOWS\n"
        "(In millions)\n"
        "Cash generated by operating activities      118,254    110,543\n"
        "Capital expenditures                          (9,447)    (10,959)\n"
        "Cash used in investing activities              2,935     (3,705)\n"
        "Cash used in financing activities           (121,983)  (108,488)\n"
        "\n"
        "See accompanying Notes to Consolidated Financial Statements.\n"
    )
