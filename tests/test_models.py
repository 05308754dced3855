"""
Tests for engine data models.
"""
import dataclasses

import pytest

from filingparser.engine.models import (
    SCHEMA_LAYOUT,
    BoundingBox,
    ExtractionCandidate,
    FinancialSchema,
    Metadata,
    ParseResult,
)
from filingparser.exceptions import SchemaFrozenError, UnknownFieldError


def make_candidate(value: float = 1e9) -> ExtractionCandidate:
    return ExtractionCandidate(value=value, source="test", confidence=90)


class TestBoundingBox:
    """Tests for BoundingBox."""

    def test_dict_conversion(self):
        bbox = BoundingBox(x=10.0, y=20.0, width=30.0, height=5.0)
        assert BoundingBox.from_dict(bbox.to_dict()) == bbox

    def test_union(self):
        union = BoundingBox.union([
            BoundingBox(x=10, y=10, width=10, height=10),
            BoundingBox(x=50, y=5, width=20, height=10),
        ])
        assert union == BoundingBox(x=10, y=5, width=60, height=15)

    def test_union_of_nothing(self):
        assert BoundingBox.union([]) == BoundingBox(x=0, y=0, width=0, height=0)


class TestExtractionCandidate:
    """Tests for ExtractionCandidate."""

    def test_immutable(self):
        """Test candidates cannot be edited after construction."""
        candidate = make_candidate()
        with pytest.raises(dataclasses.FrozenInstanceError):
            candidate.value = 2e9

    def test_to_dict_omits_missing_optionals(self):
        assert make_candidate().to_dict() == {
            "value": 1e9,
            "source": "test",
            "confidence": 90,
            "page": 0,
        }


class TestFinancialSchema:
    """Tests for FinancialSchema."""

    def test_seven_categories(self):
        assert list(SCHEMA_LAYOUT) == [
            "assets", "liabilities", "equity", "revenues", "expenses", "income", "cash_flow",
        ]

    def test_starts_empty(self):
        schema = FinancialSchema()
        assert list(schema.filled()) == []
        assert schema.to_dict() == {category: {} for category in SCHEMA_LAYOUT}

    def test_set_and_get(self):
        schema = FinancialSchema()
        schema.set("assets", "total", make_candidate(5e9))

        assert schema.has("assets", "total")
        assert schema.value("assets", "total") == 5e9
        assert schema.value("assets", "cash") is None

    def test_slots_replace_whole_candidates(self):
        schema = FinancialSchema()
        schema.set("assets", "total", make_candidate(5e9))
        schema.set("assets", "total", make_candidate(6e9))
        assert schema.value("assets", "total") == 6e9

    def test_unset_returns_removed(self):
        schema = FinancialSchema()
        candidate = make_candidate()
        schema.set("liabilities", "total", candidate)

        assert schema.unset("liabilities", "total") is candidate
        assert not schema.has("liabilities", "total")

    def test_only_candidates_accepted(self):
        """Test a slot never holds a bare number."""
        with pytest.raises(TypeError):
            FinancialSchema().set("assets", "total", 5e9)

    @pytest.mark.parametrize("category,slot", [("assets", "shares"), ("balance", "total")])
    def test_unknown_fields(self, category: str, slot: str):
        with pytest.raises(UnknownFieldError):
            FinancialSchema().get(category, slot)

    def test_frozen_schema_rejects_changes(self):
        schema = FinancialSchema()
        schema.set("assets", "total", make_candidate())
        schema.freeze()

        assert schema.is_frozen
        with pytest.raises(SchemaFrozenError):
            schema.set("assets", "cash", make_candidate())
        with pytest.raises(SchemaFrozenError):
            schema.unset("assets", "total")
        assert schema.value("assets", "total") == 1e9

    def test_to_dict_omits_absent(self):
        schema = FinancialSchema()
        schema.set("income", "net_income", make_candidate(3e9))

        data = schema.to_dict()

        assert data["income"] == {"net_income": make_candidate(3e9).to_dict()}
        assert data["assets"] == {}

    def test_equality(self):
        first, second = FinancialSchema(), FinancialSchema()
        first.set("assets", "total", make_candidate())
        second.set("assets", "total", make_candidate())
        assert first == second


class TestParseResult:
    """Tests for ParseResult serialization."""

    def test_to_dict_shape(self):
        result = ParseResult(metadata=Metadata(ticker="AAPL"), financials=FinancialSchema())

        data = result.to_dict()

        assert set(data) == {
            "metadata",
            "financials",
            "tables_detected",
            "extraction_confidence",
            "validation_warnings",
            "extraction_log",
        }
        assert data["metadata"]["ticker"] == "AAPL"
        assert data["metadata"]["company_name"] == ""
        assert data["tables_detected"] == []
