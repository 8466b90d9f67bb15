"""
Conversion of loosely-typed business records into financial statements.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

import pandas as pd

from finhealth.config.settings import Settings
from finhealth.config.business_profiles import BusinessProfileMapper
from finhealth.data.models import FinancialStatement, StatementHistory
from finhealth.utils.calculations import to_number, to_fraction

# Accepted spellings for each record field, checked in order
FIELD_ALIASES = {
    'annual_revenue': ['annual_revenue', 'annualRevenue', 'revenue'],
    'monthly_revenue': ['monthly_revenue', 'monthlyRevenue'],
    'monthly_profit': ['monthly_profit', 'monthlyProfit'],
    'net_income': ['net_income', 'netIncome', 'profit', 'annual_profit', 'annualProfit'],
    'gross_profit': ['gross_profit', 'grossProfit'],
    'gross_margin': ['gross_margin', 'grossMargin'],
    'total_assets': ['total_assets', 'totalAssets', 'assets'],
    'total_liabilities': ['total_liabilities', 'totalLiabilities', 'liabilities'],
    'operating_expenses': ['operating_expenses', 'operatingExpenses', 'opex'],
    'cash_flow': ['cash_flow', 'cashFlow'],
    'business_type': ['business_type', 'businessType', 'category', 'industry'],
    'prior_revenue': ['prior_revenue', 'priorRevenue', 'previous_revenue', 'previousRevenue'],
    'period': ['period', 'period_label', 'periodLabel'],
    'as_of': ['as_of', 'asOf', 'date'],
}


class StatementBuilder:
    """Builds a FinancialStatement from a raw business record."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.profile_mapper = BusinessProfileMapper()
        self.logger = logging.getLogger(__name__)

    def build(self, record: Mapping[str, Any], history: Optional[StatementHistory] = None) -> FinancialStatement:
        """
        Build a statement from a business record.

        Missing numeric fields resolve to 0 or to a modeled estimate; a
        monthly profit is annualized when no annual net income is supplied.

        Args:
            record: Business record with optional fields in camelCase or snake_case
            history: Optional caller-owned history the new statement is appended to

        Returns:
            Immutable FinancialStatement
        """
        revenue = self._non_negative(record, 'annual_revenue')
        if revenue == 0 and self._has(record, 'monthly_revenue'):
            revenue = max(to_number(self._get(record, 'monthly_revenue')) * 12, 0.0)

        if self._has(record, 'net_income'):
            net_income = to_number(self._get(record, 'net_income'))
        else:
            net_income = to_number(self._get(record, 'monthly_profit')) * 12

        gross_profit = self._gross_profit(record, revenue)

        if self._has(record, 'total_assets'):
            total_assets = self._non_negative(record, 'total_assets')
        else:
            total_assets = revenue * self.settings.get_estimate('statement', 'asset_to_revenue')

        if self._has(record, 'total_liabilities'):
            total_liabilities = self._non_negative(record, 'total_liabilities')
        else:
            total_liabilities = total_assets * self.settings.get_estimate('statement', 'liability_to_asset')

        if self._has(record, 'operating_expenses'):
            operating_expenses = self._non_negative(record, 'operating_expenses')
        else:
            operating_expenses = revenue * self.settings.get_estimate('statement', 'opex_to_revenue')

        if self._has(record, 'cash_flow'):
            cash_flow = to_number(self._get(record, 'cash_flow'))
        else:
            cash_flow = net_income * self.settings.get_estimate('statement', 'cash_flow_to_net_income')

        prior_revenue = None
        if self._has(record, 'prior_revenue'):
            prior_revenue = self._non_negative(record, 'prior_revenue')

        statement = FinancialStatement(
            revenue=revenue,
            gross_profit=gross_profit,
            operating_income=gross_profit - operating_expenses,
            net_income=net_income,
            total_assets=total_assets,
            total_liabilities=total_liabilities,
            operating_expenses=operating_expenses,
            cost_of_goods_sold=max(revenue - gross_profit, 0.0),
            cash_flow=cash_flow,
            period=str(self._get(record, 'period') or "Annual"),
            as_of=self._as_of(record),
            prior_revenue=prior_revenue
        )

        self.logger.debug(f"Built statement for period {statement.period}: revenue={revenue:,.0f}, "
                          f"net_income={net_income:,.0f}")

        if history is not None:
            history.add(statement)

        return statement

    def build_history(self, records) -> StatementHistory:
        """Build a history from chronologically ordered records."""
        history = StatementHistory()
        for record in records:
            self.build(record, history)
        self.logger.info(f"Built statement history with {len(history)} periods")
        return history

    def _gross_profit(self, record: Mapping[str, Any], revenue: float) -> float:
        """Explicit gross profit, else revenue times a reported or profile margin."""
        if self._has(record, 'gross_profit'):
            return to_number(self._get(record, 'gross_profit'))
        if self._has(record, 'gross_margin'):
            return revenue * to_fraction(self._get(record, 'gross_margin'))
        return revenue * self.profile_mapper.get_gross_margin(self._get(record, 'business_type'))

    def _non_negative(self, record: Mapping[str, Any], field_name: str) -> float:
        value = to_number(self._get(record, field_name))
        if value < 0:
            self.logger.warning(f"Negative {field_name} ({value:,.0f}) coerced to 0")
            return 0.0
        return value

    def _as_of(self, record: Mapping[str, Any]) -> date:
        raw = self._get(record, 'as_of')
        if isinstance(raw, datetime):
            return raw.date()
        if isinstance(raw, date):
            return raw
        if raw is not None and not (isinstance(raw, float) and pd.isna(raw)):
            parsed = pd.to_datetime(str(raw), errors='coerce')
            if not pd.isna(parsed):
                return parsed.date()
            self.logger.warning(f"Unparseable date {raw!r}, using today")
        return date.today()

    def _get(self, record: Mapping[str, Any], field_name: str) -> Any:
        """Get the first present alias of a field."""
        for alias in FIELD_ALIASES[field_name]:
            value = record.get(alias)
            if value is None:
                continue
            if isinstance(value, float) and pd.isna(value):
                continue
            if isinstance(value, str) and not value.strip():
                continue
            return value
        return None

    def _has(self, record: Mapping[str, Any], field_name: str) -> bool:
        return self._get(record, field_name) is not None


def record_from_statement(statement: FinancialStatement) -> Dict[str, Any]:
    """Express a statement as a business record the builder reproduces exactly."""
    return {
        'annual_revenue': statement.revenue,
        'gross_profit': statement.gross_profit,
        'net_income': statement.net_income,
        'total_assets': statement.total_assets,
        'total_liabilities': statement.total_liabilities,
        'operating_expenses': statement.operating_expenses,
        'cash_flow': statement.cash_flow,
        'prior_revenue': statement.prior_revenue,
        'period': statement.period,
        'as_of': statement.as_of,
    }
