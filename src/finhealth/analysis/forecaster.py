"""
Forward revenue, profit and cash flow forecasting with scenario bands.
"""

import logging
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field

import numpy as np

from finhealth.config.settings import Settings
from finhealth.data.models import FinancialStatement, StatementHistory
from finhealth.analysis.trend_analyzer import TrendAnalyzer
from finhealth.utils.calculations import safe_divide, clamp, period_growth_rates


@dataclass
class ScenarioBand:
    """Revenue and profit under one scenario."""
    revenue: float
    profit: float


@dataclass
class Forecast:
    """Container for forecast results."""
    period: int
    projected_revenue: float
    projected_profit: float
    projected_cash_flow: float
    growth_rate: float
    confidence: float
    assumptions: List[str] = field(default_factory=list)
    scenario_analysis: Dict[str, ScenarioBand] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'period': self.period,
            'projected_revenue': self.projected_revenue,
            'projected_profit': self.projected_profit,
            'projected_cash_flow': self.projected_cash_flow,
            'growth_rate': self.growth_rate,
            'confidence': self.confidence,
            'assumptions': list(self.assumptions),
            'scenario_analysis': {
                name: {'revenue': band.revenue, 'profit': band.profit}
                for name, band in self.scenario_analysis.items()
            },
        }


class Forecaster:
    """Projects the latest statement forward over a horizon."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.config = settings.get_forecast_config()
        self.trend_analyzer = TrendAnalyzer(settings)
        self.logger = logging.getLogger(__name__)

    def forecast(self, latest: FinancialStatement, history: Optional[StatementHistory] = None,
                 horizon_months: Optional[int] = None) -> Forecast:
        """
        Forecast revenue, profit and cash flow.

        Args:
            latest: Most recent statement
            history: Optional history of earlier statements
            horizon_months: Forecast horizon in months (default from settings)

        Returns:
            Forecast with scenario bands and assumptions
        """
        horizon = self._resolve_horizon(horizon_months)
        statements = history.chronology(latest) if history is not None else [latest]

        growth_rate, basis = self._growth_rate(latest, statements)

        projected_revenue = max(latest.revenue * (1 + growth_rate * horizon / 12), 0.0)
        net_margin = safe_divide(latest.net_income, latest.revenue)
        projected_profit = projected_revenue * net_margin
        projected_cash_flow = projected_profit * self.config['cash_flow_multiplier']

        assumptions = [
            basis,
            f"Net profit margin held at {net_margin * 100:.1f}%",
            f"Forecast horizon of {horizon} months",
            "No major market disruptions",
            "Current operational efficiency maintained",
        ]

        forecast = Forecast(
            period=horizon,
            projected_revenue=projected_revenue,
            projected_profit=projected_profit,
            projected_cash_flow=projected_cash_flow,
            growth_rate=growth_rate,
            confidence=self._confidence(latest, statements, horizon),
            assumptions=assumptions,
            scenario_analysis=self._scenarios(projected_revenue, projected_profit)
        )

        self.logger.info(f"Forecast over {horizon} months: revenue {projected_revenue:,.0f} "
                         f"at {growth_rate:.1%} growth, confidence {forecast.confidence:.0f}")

        return forecast

    def _resolve_horizon(self, horizon_months: Optional[int]) -> int:
        default = int(self.config['default_horizon_months'])
        if horizon_months is None:
            return default
        if horizon_months <= 0:
            self.logger.warning(f"Invalid forecast horizon {horizon_months}, using {default} months")
            return default
        return int(horizon_months)

    def _growth_rate(self, latest: FinancialStatement,
                     statements: List[FinancialStatement]) -> Tuple[float, str]:
        """Pick the annual growth rate and describe where it came from."""
        rates = period_growth_rates([s.revenue for s in statements]) if len(statements) >= 2 else []

        if rates:
            rate = float(np.mean(rates))
            template = "Based on historical growth rate of {:.1f}%"
        elif latest.prior_revenue:
            rate = safe_divide(latest.revenue - latest.prior_revenue, abs(latest.prior_revenue))
            template = "Based on historical growth rate of {:.1f}%"
        else:
            rate = float(self.config['default_growth_rate'])
            template = "Using industry-average growth assumption of {:.1f}%"

        rate = clamp(rate, self.config['min_growth_rate'], self.config['max_growth_rate'])
        return rate, template.format(rate * 100)

    def _confidence(self, latest: FinancialStatement, statements: List[FinancialStatement],
                    horizon: int) -> float:
        scoring = self.config['confidence']
        confidence = scoring['base']

        missing = sum(1 for value in (latest.revenue, latest.net_income, latest.total_assets) if value == 0)
        if missing == 0:
            confidence += scoring['complete_data_bonus']
        else:
            confidence -= scoring['missing_field_penalty'] * missing

        if len(statements) >= 3:
            confidence += scoring['multi_period_bonus']
        elif len(statements) == 2:
            confidence += scoring['two_period_bonus']

        rates = period_growth_rates([s.revenue for s in statements])
        if rates:
            volatility = self.trend_analyzer.classify_volatility(float(np.mean(np.abs(rates))) * 100)
            if volatility == 'low':
                confidence += scoring['low_volatility_bonus']
            elif volatility == 'high':
                confidence -= scoring['high_volatility_penalty']

        years_beyond_first = max(0, (horizon - 1) // 12)
        confidence -= scoring['horizon_penalty_per_year'] * years_beyond_first

        return clamp(confidence, scoring['min'], scoring['max'])

    def _scenarios(self, revenue: float, profit: float) -> Dict[str, ScenarioBand]:
        """Scale the projection per scenario, keeping optimistic >= pessimistic."""
        multipliers = self.config['scenarios']

        def scaled(base: float, scenario: str, key: str) -> float:
            if base < 0:
                # A larger multiple of a loss is worse
                scenario = {'optimistic': 'pessimistic', 'pessimistic': 'optimistic'}.get(scenario, scenario)
            return base * multipliers[scenario][key]

        return {
            scenario: ScenarioBand(
                revenue=scaled(revenue, scenario, 'revenue'),
                profit=scaled(profit, scenario, 'profit')
            )
            for scenario in ('optimistic', 'realistic', 'pessimistic')
        }
