"""
Tests for money formatting.
"""
import pytest

from filingparser.utils import format_money


@pytest.mark.parametrize("value,expected", [
    (2.5e12, "$2.50T"),
    (125_843_000_000, "$125.84B"),
    (1_500_000, "$1.50M"),
    (45_000, "$45.00K"),
    (6.11, "$6.11"),
    (-9_447_000_000, "-$9.45B"),
])
def test_format_money(value: float, expected: str):
    assert format_money(value) == expected
