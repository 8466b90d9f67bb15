"""
Cash flow analysis for a single statement.
"""

import logging
from typing import Dict, List, Optional
from dataclasses import dataclass, asdict

from finhealth.config.settings import Settings
from finhealth.data.models import FinancialStatement, StatementHistory
from finhealth.utils.calculations import safe_divide, coefficient_of_variation

DAYS_IN_YEAR = 365


@dataclass
class CashFlowAnalysis:
    """Container for cash flow analysis results."""
    operating_cash_flow: float
    investing_cash_flow: float
    financing_cash_flow: float
    free_cash_flow: float
    cash_flow_margin: float
    cash_conversion_cycle: float
    cash_flow_predictability: str
    burn_rate: Optional[float] = None
    months_of_cash_remaining: Optional[float] = None

    def to_dict(self) -> Dict:
        return asdict(self)


class CashFlowAnalyzer:
    """Derives cash flow components, burn and predictability."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    def analyze(self, statement: FinancialStatement,
                history: Optional[StatementHistory] = None) -> CashFlowAnalysis:
        """
        Analyze cash flow for a statement.

        Args:
            statement: Statement to analyze
            history: Optional history used for predictability

        Returns:
            CashFlowAnalysis results
        """
        operating_cash_flow = statement.cash_flow
        if operating_cash_flow == 0:
            # Net income plus non-cash charges
            operating_cash_flow = statement.net_income * (1 + self._estimate('non_cash_addback'))

        free_cash_flow = operating_cash_flow * (1 - self._estimate('capex_share'))

        burn_rate = None
        months_remaining = None
        if operating_cash_flow < 0:
            burn_rate = -operating_cash_flow / 12
            cash_on_hand = statement.total_assets * self.settings.get_estimate('balance_sheet', 'cash_to_assets')
            months_remaining = safe_divide(cash_on_hand, burn_rate)
            self.logger.warning(f"Negative operating cash flow for {statement.period}: "
                                f"burning {burn_rate:,.0f} per month, {months_remaining:.1f} months of cash")

        statements = history.chronology(statement) if history is not None else [statement]

        analysis = CashFlowAnalysis(
            operating_cash_flow=operating_cash_flow,
            investing_cash_flow=-self._estimate('investing_to_revenue') * statement.revenue,
            financing_cash_flow=self._estimate('financing_to_liabilities') * statement.total_liabilities,
            free_cash_flow=free_cash_flow,
            cash_flow_margin=safe_divide(operating_cash_flow, statement.revenue),
            cash_conversion_cycle=self._cash_conversion_cycle(statement),
            cash_flow_predictability=self.assess_predictability([s.cash_flow for s in statements]),
            burn_rate=burn_rate,
            months_of_cash_remaining=months_remaining
        )

        self.logger.debug(f"Cash flow analysis for {statement.period}: OCF {operating_cash_flow:,.0f}, "
                          f"predictability {analysis.cash_flow_predictability}")

        return analysis

    def assess_predictability(self, cash_flows: List[float]) -> str:
        """
        Classify cash flow predictability from the coefficient of variation.

        Args:
            cash_flows: Chronological cash flows

        Returns:
            'Stable', 'Variable' or 'Volatile'
        """
        bands = self.settings.get_predictability_bands()
        cv = coefficient_of_variation(cash_flows)

        if cv is None or cv < bands['stable']:
            return 'Stable'
        if cv < bands['variable']:
            return 'Variable'
        return 'Volatile'

    def _cash_conversion_cycle(self, statement: FinancialStatement) -> float:
        """Inventory days plus receivable days less payable days."""
        inventory = statement.total_assets * self.settings.get_estimate('balance_sheet', 'inventory_share')
        receivables = statement.total_assets * self.settings.get_estimate('balance_sheet', 'receivables_share')

        inventory_turnover = safe_divide(statement.cost_of_goods_sold, inventory)
        receivables_turnover = safe_divide(statement.revenue, receivables)

        inventory_days = safe_divide(DAYS_IN_YEAR, inventory_turnover)
        receivable_days = safe_divide(DAYS_IN_YEAR, receivables_turnover)

        return inventory_days + receivable_days - self._estimate('payable_days')

    def _estimate(self, key: str) -> float:
        return self.settings.get_estimate('cash_flow', key)
