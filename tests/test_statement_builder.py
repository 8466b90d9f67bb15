"""
Unit tests for StatementBuilder.
"""

import logging
import math
import pytest
import sys
from datetime import date
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from finhealth.config.settings import Settings
from finhealth.data.models import FinancialStatement, StatementHistory
from finhealth.data.statement_builder import StatementBuilder, record_from_statement


class TestStatementBuilder:
    """Test cases for StatementBuilder."""

    @pytest.fixture
    def settings(self):
        """Create test settings."""
        return Settings()

    @pytest.fixture
    def builder(self, settings):
        """Create StatementBuilder instance."""
        return StatementBuilder(settings)

    def test_monthly_profit_is_annualized(self, builder):
        """Monthly profit without net income becomes twelve months of net income."""
        statement = builder.build({'annualRevenue': 1200000, 'monthlyProfit': 50000})

        assert statement.net_income == pytest.approx(600000)
        assert statement.revenue == pytest.approx(1200000)

    def test_monthly_profit_without_revenue(self, builder):
        statement = builder.build({'monthlyProfit': 50000})

        assert statement.net_income == 600000
        assert statement.revenue == 0

    def test_explicit_net_income_wins_over_monthly_profit(self, builder):
        statement = builder.build({'revenue': 1000000, 'netIncome': 90000, 'monthlyProfit': 50000})

        assert statement.net_income == pytest.approx(90000)

    def test_gross_profit_from_reported_margin(self, builder):
        """A 50% margin on 1.2M revenue gives 600k gross profit."""
        statement = builder.build({'annualRevenue': 1200000, 'grossMargin': 50})

        assert statement.gross_profit == pytest.approx(600000)
        assert statement.cost_of_goods_sold == pytest.approx(600000)

    def test_gross_margin_accepts_fraction_and_percent_string(self, builder):
        as_fraction = builder.build({'annualRevenue': 1000000, 'grossMargin': 0.25})
        as_string = builder.build({'annualRevenue': 1000000, 'grossMargin': '25%'})

        assert as_fraction.gross_profit == pytest.approx(250000)
        assert as_string.gross_profit == pytest.approx(250000)

    def test_small_percent_string_margins(self, builder):
        one_percent = builder.build({'annualRevenue': 1000000, 'grossMargin': '1%'})
        half_percent = builder.build({'annualRevenue': 1000000, 'grossMargin': '0.5%'})

        assert one_percent.gross_profit == pytest.approx(10000)
        assert half_percent.gross_profit == pytest.approx(5000)

    def test_gross_profit_from_business_profile(self, builder):
        services = builder.build({'annualRevenue': 1000000, 'businessType': 'Consulting services'})
        other = builder.build({'annualRevenue': 1000000, 'businessType': 'Boat charter'})
        unknown = builder.build({'annualRevenue': 1000000})

        assert services.gross_profit == pytest.approx(400000)
        assert other.gross_profit == pytest.approx(300000)
        assert unknown.gross_profit == pytest.approx(300000)

    def test_missing_figures_are_estimated(self, builder):
        statement = builder.build({'annualRevenue': 1200000, 'monthlyProfit': 10000, 'businessType': 'services'})

        assert statement.total_assets == pytest.approx(1200000)
        assert statement.total_liabilities == pytest.approx(480000)
        assert statement.operating_expenses == pytest.approx(360000)
        assert statement.cash_flow == pytest.approx(144000)
        assert statement.gross_profit == pytest.approx(480000)
        assert statement.operating_income == pytest.approx(120000)
        assert statement.equity == pytest.approx(720000)

    def test_monthly_revenue_used_without_annual_revenue(self, builder):
        statement = builder.build({'monthlyRevenue': '$95,000', 'monthlyProfit': '$6,500'})

        assert statement.revenue == pytest.approx(1140000)
        assert statement.net_income == pytest.approx(78000)

    def test_currency_strings_are_parsed(self, builder):
        statement = builder.build({'annualRevenue': '$1,200,000', 'totalAssets': '900,000'})

        assert statement.revenue == pytest.approx(1200000)
        assert statement.total_assets == pytest.approx(900000)

    def test_unparseable_values_resolve_to_zero(self, builder):
        statement = builder.build({'annualRevenue': 'n/a', 'netIncome': None, 'totalAssets': float('nan')})

        assert statement.revenue == 0
        assert statement.net_income == 0
        assert statement.total_assets == 0
        for metric in ['revenue', 'gross_profit', 'operating_income', 'net_income', 'total_assets',
                       'total_liabilities', 'operating_expenses', 'cost_of_goods_sold', 'cash_flow']:
            assert math.isfinite(statement.get_metric(metric))

    def test_empty_record_builds_zero_statement(self, builder):
        statement = builder.build({})

        assert statement.revenue == 0
        assert statement.gross_profit == 0
        assert statement.net_income == 0
        assert statement.period == "Annual"
        assert statement.as_of == date.today()

    def test_negative_money_fields_are_floored(self, builder, caplog):
        with caplog.at_level(logging.WARNING):
            statement = builder.build({'annualRevenue': -5000, 'totalLiabilities': -100, 'netIncome': -2000})

        assert statement.revenue == 0
        assert statement.total_liabilities == 0
        # Net income is signed
        assert statement.net_income == -2000
        assert "coerced to 0" in caplog.text

    def test_snake_case_keys(self, builder):
        statement = builder.build({
            'annual_revenue': 500000, 'net_income': 40000, 'total_assets': 300000,
            'total_liabilities': 100000, 'cash_flow': 55000, 'period': 'FY2024', 'as_of': '2024-12-31'
        })

        assert statement.revenue == 500000
        assert statement.cash_flow == 55000
        assert statement.period == 'FY2024'
        assert statement.as_of == date(2024, 12, 31)

    def test_build_appends_to_history(self, builder):
        history = StatementHistory()
        first = builder.build({'annualRevenue': 1000000, 'period': 'FY2023'}, history)
        second = builder.build({'annualRevenue': 1200000, 'period': 'FY2024'}, history)

        assert len(history) == 2
        assert history.previous is first
        assert history.latest is second
        assert history[0].revenue == 1000000

    def test_build_without_history_has_no_side_effect(self, builder):
        history = StatementHistory()
        builder.build({'annualRevenue': 1000000})

        assert len(history) == 0

    def test_statement_is_immutable(self, builder):
        statement = builder.build({'annualRevenue': 1000000})

        with pytest.raises(AttributeError):
            statement.revenue = 5

    def test_build_history_keeps_record_order(self, builder):
        history = builder.build_history([
            {'annualRevenue': 800000, 'period': 'FY2022'},
            {'annualRevenue': 900000, 'period': 'FY2023'},
            {'annualRevenue': 1000000, 'period': 'FY2024'},
        ])

        assert [s.period for s in history] == ['FY2022', 'FY2023', 'FY2024']
        assert list(history.series('revenue')) == [800000, 900000, 1000000]

    def test_record_from_statement_rebuilds_same_figures(self, builder):
        original = FinancialStatement(revenue=1000000, gross_profit=400000, operating_income=100000,
                                      net_income=80000, total_assets=900000, total_liabilities=300000,
                                      operating_expenses=300000, cost_of_goods_sold=600000,
                                      cash_flow=95000, period='FY2024', as_of=date(2024, 12, 31))

        rebuilt = builder.build(record_from_statement(original))

        assert rebuilt == original
