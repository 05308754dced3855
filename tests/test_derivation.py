"""
Tests for field derivation from accounting identities.
"""
import pytest

from filingparser.engine.audit_log import ExtractionLog
from filingparser.engine.derivation import RelationshipDeriver
from filingparser.engine.models import ExtractionCandidate, FinancialSchema


def filled(**values: float) -> FinancialSchema:
    """Schema from category__slot keyword values."""
    schema = FinancialSchema()
    for key, value in values.items():
        category, slot = key.split("__")
        schema.set(category, slot, ExtractionCandidate(value=value, source="extracted", confidence=85))
    return schema


class TestRelationshipDeriver:
    """Tests for RelationshipDeriver."""

    @pytest.fixture
    def deriver(self) -> RelationshipDeriver:
        return RelationshipDeriver()

    def test_equity_from_assets_and_liabilities(self, deriver: RelationshipDeriver):
        """Test equity = assets - liabilities when equity is missing."""
        schema = filled(assets__total=100e9, liabilities__total=40e9)

        deriver.derive(schema)

        equity = schema.get("equity", "total")
        assert equity.value == 60e9
        assert equity.confidence == 90
        assert "derived" in equity.source.lower()
        assert "assets" in equity.source and "liabilities" in equity.source

    def test_extracted_equity_is_kept(self, deriver: RelationshipDeriver):
        """Test an extracted equity value is not overwritten."""
        schema = filled(assets__total=100e9, liabilities__total=40e9, equity__total=58e9)

        deriver.derive(schema)

        assert schema.value("equity", "total") == 58e9

    def test_non_positive_equity_not_derived(self, deriver: RelationshipDeriver):
        """Test a deficit is never committed as equity."""
        schema = filled(assets__total=40e9, liabilities__total=45e9)
        deriver.derive(schema)
        assert not schema.has("equity", "total")

    def test_equity_needs_both_inputs(self, deriver: RelationshipDeriver):
        schema = filled(assets__total=100e9)
        deriver.derive(schema)
        assert not schema.has("equity", "total")

    def test_gross_profit(self, deriver: RelationshipDeriver):
        """Test gross profit = revenue - cost of revenue."""
        schema = filled(revenues__total=391e9, revenues__cost_of_revenue=210e9)

        deriver.derive(schema)

        gross_profit = schema.get("revenues", "gross_profit")
        assert gross_profit.value == 181e9
        assert gross_profit.confidence == 90

    def test_implausible_gross_profit_logged(self, deriver: RelationshipDeriver):
        """Test a negative result is skipped with a warning line."""
        log = ExtractionLog()
        schema = filled(revenues__total=10e9, revenues__cost_of_revenue=12e9)

        RelationshipDeriver(log).derive(schema)

        assert not schema.has("revenues", "gross_profit")
        assert any("WARNING: Gross profit calculation failed" in line for line in log.lines())

    def test_free_cash_flow_uses_absolute_capex(self, deriver: RelationshipDeriver):
        """Test capex reduces free cash flow whatever its reported sign."""
        negative = filled(cash_flow__operating=110e9, cash_flow__capex=-10e9)
        positive = filled(cash_flow__operating=110e9, cash_flow__capex=10e9)

        deriver.derive(negative)
        deriver.derive(positive)

        for schema in (negative, positive):
            fcf = schema.get("cash_flow", "free_cash_flow")
            assert fcf.value == 100e9
            assert fcf.confidence == 95
        assert negative.value("cash_flow", "capex") == -10e9

    def test_negative_free_cash_flow_allowed(self, deriver: RelationshipDeriver):
        """Test free cash flow has no sign gate."""
        schema = filled(cash_flow__operating=5e9, cash_flow__capex=-8e9)
        deriver.derive(schema)
        assert schema.value("cash_flow", "free_cash_flow") == -3e9

    def test_free_cash_flow_needs_both_inputs(self, deriver: RelationshipDeriver):
        schema = filled(cash_flow__operating=110e9)
        deriver.derive(schema)
        assert not schema.has("cash_flow", "free_cash_flow")

    def test_success_logged(self):
        log = ExtractionLog()
        RelationshipDeriver(log).derive(filled(assets__total=100e9, liabilities__total=40e9))
        assert log.lines()[-1].endswith("SUCCESS: Derived equity: $60.00B")
