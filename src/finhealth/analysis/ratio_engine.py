"""
Financial ratio computation.
"""

import logging
from typing import Dict, Optional
from dataclasses import dataclass, asdict

from finhealth.config.settings import Settings
from finhealth.data.models import FinancialStatement, StatementHistory
from finhealth.utils.calculations import safe_divide


@dataclass
class FinancialRatios:
    """Container for computed financial ratios (fractions unless a multiple)."""
    # Profitability
    gross_profit_margin: float = 0.0
    operating_margin: float = 0.0
    net_profit_margin: float = 0.0
    return_on_assets: float = 0.0
    return_on_equity: float = 0.0
    # Liquidity
    current_ratio: float = 0.0
    quick_ratio: float = 0.0
    cash_ratio: float = 0.0
    # Efficiency
    asset_turnover: float = 0.0
    inventory_turnover: float = 0.0
    receivables_turnover: float = 0.0
    # Leverage
    debt_to_equity: float = 0.0
    debt_to_assets: float = 0.0
    interest_coverage: float = 0.0
    # Growth
    revenue_growth_rate: float = 0.0
    profit_growth_rate: float = 0.0
    asset_growth_rate: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


class RatioEngine:
    """Derives profitability, liquidity, efficiency, leverage and growth ratios."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    def compute(self, statement: FinancialStatement,
                history: Optional[StatementHistory] = None) -> FinancialRatios:
        """
        Compute all ratios for a statement.

        Balance sheet detail the statement does not carry (current assets,
        inventory, receivables, interest) is modeled from configured shares
        of total assets and liabilities.

        Args:
            statement: Statement to analyze
            history: Optional history used to find the preceding period for growth rates

        Returns:
            FinancialRatios with every value finite
        """
        revenue = statement.revenue
        assets = statement.total_assets
        liabilities = statement.total_liabilities
        equity = statement.equity
        equity_base = equity if equity > 0 else 0.0

        current_assets = assets * self._estimate('current_asset_share')
        quick_assets = assets * self._estimate('quick_asset_share')
        cash_on_hand = statement.cash_flow * self._estimate('cash_to_cash_flow')
        current_liabilities = liabilities * self._estimate('current_liability_share')
        inventory = assets * self._estimate('inventory_share')
        receivables = assets * self._estimate('receivables_share')
        interest_expense = liabilities * self._estimate('interest_rate')

        ratios = FinancialRatios(
            gross_profit_margin=safe_divide(statement.gross_profit, revenue),
            operating_margin=safe_divide(statement.operating_income, revenue),
            net_profit_margin=safe_divide(statement.net_income, revenue),
            return_on_assets=safe_divide(statement.net_income, assets),
            return_on_equity=safe_divide(statement.net_income, equity_base),
            current_ratio=safe_divide(current_assets, current_liabilities),
            quick_ratio=safe_divide(quick_assets, current_liabilities),
            cash_ratio=safe_divide(cash_on_hand, current_liabilities),
            asset_turnover=safe_divide(revenue, assets),
            inventory_turnover=safe_divide(statement.cost_of_goods_sold, inventory),
            receivables_turnover=safe_divide(revenue, receivables),
            debt_to_equity=safe_divide(liabilities, equity_base),
            debt_to_assets=safe_divide(liabilities, assets),
            interest_coverage=safe_divide(statement.operating_income, interest_expense),
        )

        previous = self._previous_statement(statement, history)
        if previous is not None:
            ratios.revenue_growth_rate = self._growth(revenue, previous.revenue)
            ratios.profit_growth_rate = self._growth(statement.net_income, previous.net_income)
            ratios.asset_growth_rate = self._growth(assets, previous.total_assets)
        elif statement.prior_revenue:
            ratios.revenue_growth_rate = self._growth(revenue, statement.prior_revenue)

        self.logger.debug(f"Computed ratios for {statement.period}: "
                          f"net margin {ratios.net_profit_margin:.2%}, current ratio {ratios.current_ratio:.2f}")

        return ratios

    def _previous_statement(self, statement: FinancialStatement,
                            history: Optional[StatementHistory]) -> Optional[FinancialStatement]:
        """Find the statement preceding this one in the history."""
        if not history:
            return None
        statements = history.statements
        # The statement may already have been appended to the history
        for index in range(len(statements) - 1, -1, -1):
            if statements[index] is statement:
                return statements[index - 1] if index > 0 else None
        return statements[-1]

    def _estimate(self, key: str) -> float:
        return self.settings.get_estimate('balance_sheet', key)

    @staticmethod
    def _growth(current: float, previous: float) -> float:
        return safe_divide(current - previous, abs(previous))
