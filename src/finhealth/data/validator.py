"""
Data quality validation for financial statements.

Validation never fails a statement: every check produces an advisory
warning that callers surface alongside the analysis.
"""

import logging
from typing import List, TYPE_CHECKING

from finhealth.config.settings import Settings
from finhealth.data.models import FinancialStatement
from finhealth.utils.calculations import safe_divide

if TYPE_CHECKING:
    from finhealth.analysis.ratio_engine import FinancialRatios


class StatementValidator:
    """Financial statement data quality checks."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.limits = settings.get_data_quality_limits()
        self.logger = logging.getLogger(__name__)

    def validate(self, statement: FinancialStatement) -> List[str]:
        """
        Check a statement for soft invariant violations.

        Args:
            statement: Statement to check

        Returns:
            List of advisory warnings, empty when the statement looks consistent
        """
        warnings = []

        if statement.revenue > 0 and statement.gross_profit > statement.revenue:
            warnings.append("Gross profit exceeds revenue")

        if statement.net_income > statement.gross_profit and statement.revenue > 0:
            warnings.append("Net income exceeds gross profit")

        if statement.total_liabilities > statement.total_assets:
            warnings.append("Liabilities exceed total assets")

        gross_margin = safe_divide(statement.gross_profit, statement.revenue)
        if gross_margin > self.limits['max_gross_margin'] and statement.gross_profit <= statement.revenue:
            warnings.append(f"Gross margin of {gross_margin:.1%} is unusually high")

        net_margin = safe_divide(statement.net_income, statement.revenue)
        if statement.revenue > 0 and net_margin < self.limits['min_net_margin']:
            warnings.append(f"Net loss margin of {net_margin:.1%} is unusually deep")

        if statement.net_income != 0 and statement.cash_flow != 0:
            divergence = abs(statement.cash_flow - statement.net_income) / abs(statement.net_income)
            if divergence > self.limits['max_cash_flow_divergence']:
                warnings.append("Cash flow differs from net income by more than "
                                f"{self.limits['max_cash_flow_divergence']:.0%}")

        for warning in warnings:
            self.logger.warning(f"Data quality ({statement.period}): {warning}")

        return warnings

    def ratio_warnings(self, ratios: 'FinancialRatios') -> List[str]:
        """
        Check the data quality issues that are visible from ratios alone.

        Args:
            ratios: Computed ratios

        Returns:
            List of advisory warnings
        """
        warnings = []

        if ratios.gross_profit_margin > 1:
            warnings.append("Gross profit exceeds revenue")
        elif ratios.gross_profit_margin > self.limits['max_gross_margin']:
            warnings.append(f"Gross margin of {ratios.gross_profit_margin:.1%} is unusually high")

        if ratios.net_profit_margin > ratios.gross_profit_margin and ratios.net_profit_margin > 0:
            warnings.append("Net income exceeds gross profit")

        if ratios.debt_to_assets > 1:
            warnings.append("Liabilities exceed total assets")

        return warnings
