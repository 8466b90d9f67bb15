"""
Unit tests for RatioEngine.
"""

import math
import pytest
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from finhealth.analysis.ratio_engine import RatioEngine, FinancialRatios
from finhealth.data.models import FinancialStatement, StatementHistory


class TestRatioEngine:
    """Test cases for RatioEngine."""

    @pytest.fixture
    def engine(self, settings):
        """Create RatioEngine instance."""
        return RatioEngine(settings)

    def test_profitability_ratios(self, engine, healthy_statement):
        ratios = engine.compute(healthy_statement)

        assert ratios.gross_profit_margin == pytest.approx(0.40)
        assert ratios.operating_margin == pytest.approx(0.15)
        assert ratios.net_profit_margin == pytest.approx(0.10)
        assert ratios.return_on_assets == pytest.approx(0.125)
        assert ratios.return_on_equity == pytest.approx(0.20)

    def test_liquidity_ratios_use_modeled_balances(self, engine, healthy_statement):
        ratios = engine.compute(healthy_statement)

        # Current liabilities are 70% of 300k
        assert ratios.current_ratio == pytest.approx(480000 / 210000)
        assert ratios.quick_ratio == pytest.approx(320000 / 210000)
        assert ratios.cash_ratio == pytest.approx(24000 / 210000)

    def test_modeled_balances_follow_configured_shares(self, settings, healthy_statement):
        settings.estimation['balance_sheet']['current_asset_share'] = 0.3

        ratios = RatioEngine(settings).compute(healthy_statement)

        assert ratios.current_ratio == pytest.approx(240000 / 210000)

    def test_efficiency_ratios(self, engine, healthy_statement):
        ratios = engine.compute(healthy_statement)

        assert ratios.asset_turnover == pytest.approx(1.25)
        assert ratios.inventory_turnover == pytest.approx(600000 / 160000)
        assert ratios.receivables_turnover == pytest.approx(1000000 / 120000)

    def test_leverage_ratios(self, engine, healthy_statement):
        ratios = engine.compute(healthy_statement)

        assert ratios.debt_to_equity == pytest.approx(0.6)
        assert ratios.debt_to_assets == pytest.approx(0.375)
        assert ratios.interest_coverage == pytest.approx(10.0)

    def test_growth_is_zero_without_prior_period(self, engine, healthy_statement):
        ratios = engine.compute(healthy_statement)

        assert ratios.revenue_growth_rate == 0
        assert ratios.profit_growth_rate == 0
        assert ratios.asset_growth_rate == 0

    def test_growth_against_previous_statement_in_history(self, engine, healthy_statement, prior_statement):
        history = StatementHistory([prior_statement])

        ratios = engine.compute(healthy_statement, history)

        assert ratios.revenue_growth_rate == pytest.approx(0.25)
        assert ratios.profit_growth_rate == pytest.approx(0.25)
        assert ratios.asset_growth_rate == pytest.approx(100000 / 700000)

    def test_growth_when_statement_already_in_history(self, engine, healthy_statement, prior_statement):
        history = StatementHistory([prior_statement, healthy_statement])

        ratios = engine.compute(healthy_statement, history)

        assert ratios.revenue_growth_rate == pytest.approx(0.25)

    def test_growth_from_prior_revenue(self, engine):
        statement = FinancialStatement(revenue=1200000, total_assets=1000000, prior_revenue=1000000)

        ratios = engine.compute(statement)

        assert ratios.revenue_growth_rate == pytest.approx(0.2)
        assert ratios.profit_growth_rate == 0

    def test_zero_revenue_gives_zero_ratios(self, engine):
        """A statement of zeros yields zero for every ratio, never NaN or an exception."""
        ratios = engine.compute(FinancialStatement())

        for name, value in ratios.to_dict().items():
            assert value == 0, name

    def test_negative_equity_zeroes_equity_ratios(self, engine):
        statement = FinancialStatement(revenue=500000, net_income=20000, total_assets=300000,
                                       total_liabilities=450000, operating_income=30000)

        ratios = engine.compute(statement)

        assert ratios.return_on_equity == 0
        assert ratios.debt_to_equity == 0
        assert ratios.debt_to_assets == pytest.approx(1.5)

    def test_every_ratio_is_finite(self, engine, healthy_statement):
        degenerate = [
            healthy_statement,
            FinancialStatement(revenue=0, net_income=-50000, total_assets=0, total_liabilities=10000),
            FinancialStatement(revenue=1e12, gross_profit=1e12, total_assets=1e-3),
        ]

        for statement in degenerate:
            for value in engine.compute(statement).to_dict().values():
                assert math.isfinite(value)

    def test_to_dict_has_every_ratio(self, engine, healthy_statement):
        data = engine.compute(healthy_statement).to_dict()

        assert len(data) == 17
        assert isinstance(FinancialRatios(**data), FinancialRatios)
