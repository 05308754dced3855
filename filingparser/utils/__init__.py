"""Utilities package."""
from filingparser.utils.formatting import format_money

__all__ = ["format_money"]
