"""
Numeric parser service for financial value extraction.

Converts a numeral token found next to a line-item label into a signed value
in absolute currency units:
- Negative: (1,234) accounting notation
- Currency: $1,234
- Units: 2.5B, 120M, 45K (an explicit suffix overrides the document scale)
- Undecorated numerals are multiplied by the document-wide scale
"""
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import List, Optional

import structlog

logger = structlog.get_logger(__name__)

# A whole cell/word shaped like a currency figure: $1,234  (1,234)  2.5B  45,200
NUMERIC_TOKEN_PATTERN = re.compile(r"^[\$\(]{0,2}\s?\(?\d[\d,]*(?:\.\d+)?(?:[BMKbmk]|\))?\)?$")

# Numerals embedded in a line of free text
INLINE_NUMERAL_PATTERN = re.compile(
    r"\(?\$?\s*(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d+)?(?:\s?[BMKbmk](?![A-Za-z]))?\)?"
)


@dataclass
class ParsedNumber:
    """Result of parsing a numeral token."""

    value: Optional[float]
    raw_value: str
    is_negative: bool = False
    unit_multiplier: float = 1
    has_explicit_unit: bool = False
    currency: Optional[str] = None


class NumericParser:
    """
    Parser for numerals in SEC filings.

    The single source of truth for sign and magnitude: both the table-based and
    the text-based extraction strategies route every numeral through here.
    """

    CURRENCY_SYMBOLS = ("$", "€", "£")

    UNIT_MULTIPLIERS = {
        "K": 1_000,
        "M": 1_000_000,
        "B": 1_000_000_000,
    }

    PARENTHESES_PATTERN = re.compile(r"^\s*\$?\s*\(([^()]+)\)\s*$")
    UNIT_PATTERN = re.compile(r"\s*([BMKbmk])$")

    def parse(self, value_str: str, scale_multiplier: float = 1) -> ParsedNumber:
        """
        Parse a numeral token into an absolute, signed value.

        Args:
            value_str: The raw token, e.g. "(1,234)" or "$2.5B".
            scale_multiplier: Document-wide scale applied when the token has no
                B/M/K suffix of its own.

        Returns:
            ParsedNumber; ``value`` is None for zero, empty or unparseable input.
        """
        if not value_str or not value_str.strip():
            return ParsedNumber(value=None, raw_value=value_str or "")

        original = value_str
        value_str = value_str.strip()

        is_negative = False
        paren_match = self.PARENTHESES_PATTERN.match(value_str)
        if paren_match:
            value_str = paren_match.group(1).strip()
            is_negative = True

        currency = None
        for symbol in self.CURRENCY_SYMBOLS:
            if value_str.startswith(symbol):
                currency = symbol
                value_str = value_str[len(symbol):].strip()
                break

        has_explicit_unit = False
        unit_match = self.UNIT_PATTERN.search(value_str)
        if unit_match:
            unit_multiplier = self.UNIT_MULTIPLIERS[unit_match.group(1).upper()]
            has_explicit_unit = True
            value_str = value_str[: unit_match.start()]
        else:
            unit_multiplier = scale_multiplier

        cleaned = value_str.replace(",", "").replace(" ", "").strip("()")

        try:
            number = Decimal(cleaned)
        except (InvalidOperation, ValueError):
            logger.debug("Failed to parse number", value=original)
            return ParsedNumber(value=None, raw_value=original, currency=currency)

        if not number.is_finite() or number == 0:
            return ParsedNumber(value=None, raw_value=original, currency=currency)

        scaled = number * Decimal(str(unit_multiplier))
        if is_negative:
            scaled = -scaled

        return ParsedNumber(
            value=float(scaled),
            raw_value=original,
            is_negative=is_negative,
            unit_multiplier=unit_multiplier,
            has_explicit_unit=has_explicit_unit,
            currency=currency,
        )

    def parse_value(self, value_str: str, scale_multiplier: float = 1) -> Optional[float]:
        """Parse a token and return only its value (None when rejected)."""
        return self.parse(value_str, scale_multiplier).value

    @staticmethod
    def is_numeric_token(text: str) -> bool:
        """True when the whole token has a currency/number shape."""
        return bool(NUMERIC_TOKEN_PATTERN.match(text.strip()))

    @staticmethod
    def find_numerals(text: str) -> List[str]:
        """Return numeral tokens embedded in free text, left to right."""
        return [m.group(0).strip() for m in INLINE_NUMERAL_PATTERN.finditer(text)]


# Singleton instance
_parser_instance: Optional[NumericParser] = None


def get_numeric_parser() -> NumericParser:
    """Get singleton NumericParser instance."""
    global _parser_instance
    if _parser_instance is None:
        _parser_instance = NumericParser()
    return _parser_instance
