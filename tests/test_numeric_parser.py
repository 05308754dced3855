"""
Unit tests for NumericParser service.
"""
import pytest

from filingparser.services.numeric_parser import NumericParser, ParsedNumber

MILLIONS = 1_000_000


class TestNumericParser:
    """Tests for NumericParser class."""

    @pytest.fixture
    def parser(self) -> NumericParser:
        """Create parser instance."""
        return NumericParser()

    # Standard number tests
    def test_parse_integer(self, parser: NumericParser):
        """Test parsing simple integer."""
        result = parser.parse("1234")
        assert result.value == 1234.0
        assert result.is_negative is False

    def test_parse_decimal(self, parser: NumericParser):
        """Test parsing decimal number."""
        assert parser.parse("6.11").value == 6.11

    def test_parse_with_commas(self, parser: NumericParser):
        """Test parsing number with thousand separators."""
        assert parser.parse("1,234,567").value == 1234567.0

    # Scale tests
    def test_document_scale_applied(self, parser: NumericParser):
        """Test undecorated numerals take the document scale."""
        assert parser.parse("125,843", MILLIONS).value == 125_843_000_000

    def test_negative_parentheses_with_scale(self, parser: NumericParser):
        """Test (1,234) in millions is exactly -1,234,000,000."""
        result = parser.parse("(1,234)", MILLIONS)
        assert result.value == -1_234_000_000
        assert result.is_negative is True

    # Currency tests
    def test_parse_usd(self, parser: NumericParser):
        """Test parsing USD currency."""
        result = parser.parse("$1,234.56")
        assert result.value == 1234.56
        assert result.currency == "$"

    def test_negative_parentheses_with_currency(self, parser: NumericParser):
        """Test parsing negative with currency inside or outside the parentheses."""
        assert parser.parse("$(500)").value == -500.0
        assert parser.parse("($500)").value == -500.0

    # Unit suffix tests
    @pytest.mark.parametrize("token,expected", [
        ("$2.5B", 2_500_000_000),
        ("120M", 120_000_000),
        ("45K", 45_000),
        ("3.2b", 3_200_000_000),
    ])
    def test_explicit_unit(self, parser: NumericParser, token: str, expected: float):
        """Test B/M/K suffixes apply their own multiplier."""
        result = parser.parse(token)
        assert result.value == expected
        assert result.has_explicit_unit is True

    @pytest.mark.parametrize("scale", [1, 1_000, 1_000_000, 1_000_000_000])
    def test_explicit_unit_ignores_document_scale(self, parser: NumericParser, scale: int):
        """Test a suffixed token's magnitude does not depend on the document scale."""
        assert parser.parse("$2.5B", scale).value == 2_500_000_000
        assert parser.parse("(45K)", scale).value == -45_000

    # Rejection tests
    @pytest.mark.parametrize("token", ["", "   ", "0", "0.00", "(0)", "abc", "1.2.3", "NaN", "Infinity"])
    def test_rejected_tokens(self, parser: NumericParser, token: str):
        """Test zero, empty and unparseable tokens yield no value."""
        result = parser.parse(token, MILLIONS)
        assert isinstance(result, ParsedNumber)
        assert result.value is None

    def test_parse_value_shortcut(self, parser: NumericParser):
        """Test parse_value returns the bare value."""
        assert parser.parse_value("1,000", 1_000) == 1_000_000
        assert parser.parse_value("zero") is None


class TestNumericTokens:
    """Tests for token shape detection and inline numeral search."""

    @pytest.mark.parametrize("text", ["45,200", "$1,234", "(1,234)", "2.5B", "2024", "$(500)"])
    def test_numeric_tokens(self, text: str):
        """Test currency/number shaped tokens are recognised."""
        assert NumericParser.is_numeric_token(text) is True

    @pytest.mark.parametrize("text", ["Total", "liabilities", "10-K", "Q4", "", "$"])
    def test_non_numeric_tokens(self, text: str):
        """Test labels and identifiers are not numeric tokens."""
        assert NumericParser.is_numeric_token(text) is False

    def test_find_numerals_in_line(self):
        """Test numerals are found left to right with their decorations."""
        numerals = NumericParser.find_numerals("   391,035    (3,705)   $2.5B")
        assert numerals == ["391,035", "(3,705)", "$2.5B"]

    def test_find_numerals_does_not_eat_words(self):
        """Test a unit letter that starts a word is not taken as a suffix."""
        assert NumericParser.find_numerals("100 Main Street") == ["100"]
