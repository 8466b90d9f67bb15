"""
Unit tests for StatementValidator.
"""

import logging
import pytest
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from finhealth.analysis.ratio_engine import FinancialRatios
from finhealth.data.models import FinancialStatement
from finhealth.data.validator import StatementValidator


class TestStatementValidator:
    """Test cases for StatementValidator."""

    @pytest.fixture
    def validator(self, settings):
        return StatementValidator(settings)

    def test_consistent_statement_has_no_warnings(self, validator, healthy_statement):
        assert validator.validate(healthy_statement) == []

    def test_soft_invariants(self, validator, caplog):
        statement = FinancialStatement(revenue=100000, gross_profit=120000, net_income=130000,
                                       total_assets=50000, total_liabilities=80000)

        with caplog.at_level(logging.WARNING):
            warnings = validator.validate(statement)

        assert "Gross profit exceeds revenue" in warnings
        assert "Net income exceeds gross profit" in warnings
        assert "Liabilities exceed total assets" in warnings
        assert "Data quality" in caplog.text

    def test_extreme_margins(self, validator):
        high_margin = FinancialStatement(revenue=100000, gross_profit=98000, net_income=10000)
        deep_loss = FinancialStatement(revenue=100000, gross_profit=30000, net_income=-80000)

        assert any("unusually high" in w for w in validator.validate(high_margin))
        assert any("unusually deep" in w for w in validator.validate(deep_loss))

    def test_cash_flow_divergence(self, validator):
        statement = FinancialStatement(revenue=1000000, gross_profit=400000, net_income=50000,
                                       total_assets=500000, cash_flow=400000)

        assert any("Cash flow differs" in w for w in validator.validate(statement))

    def test_zero_statement_has_no_warnings(self, validator):
        assert validator.validate(FinancialStatement()) == []

    def test_ratio_warnings(self, validator):
        assert validator.ratio_warnings(FinancialRatios(gross_profit_margin=0.4, net_profit_margin=0.1)) == []
        assert validator.ratio_warnings(FinancialRatios(gross_profit_margin=0.97)) == [
            "Gross margin of 97.0% is unusually high"
        ]
        assert "Net income exceeds gross profit" in validator.ratio_warnings(
            FinancialRatios(gross_profit_margin=0.2, net_profit_margin=0.3))
