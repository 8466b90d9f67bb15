"""
Assembly of the full financial analysis report.
"""

import logging
from typing import Dict, List, Optional
from dataclasses import dataclass, field

from finhealth.config.settings import Settings
from finhealth.data.models import FinancialStatement, StatementHistory
from finhealth.data.validator import StatementValidator
from finhealth.analysis.ratio_engine import FinancialRatios, RatioEngine
from finhealth.analysis.health_scorer import HealthScore, HealthScorer
from finhealth.analysis.cash_flow_analyzer import CashFlowAnalysis, CashFlowAnalyzer
from finhealth.analysis.forecaster import Forecast, Forecaster
from finhealth.analysis.trend_analyzer import TrendAnalysis, TrendAnalyzer

TREND_METRICS = ['revenue', 'net_income', 'cash_flow']


@dataclass
class FinancialReport:
    """Every analysis of one statement."""
    statement: FinancialStatement
    ratios: FinancialRatios
    health_score: HealthScore
    cash_flow_analysis: CashFlowAnalysis
    forecast: Forecast
    trends: List[TrendAnalysis] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    history: StatementHistory = field(default_factory=StatementHistory)

    def to_dict(self) -> Dict:
        return {
            'statement': self.statement.to_dict(),
            'ratios': self.ratios.to_dict(),
            'health_score': self.health_score.to_dict(),
            'cash_flow_analysis': self.cash_flow_analysis.to_dict(),
            'forecast': self.forecast.to_dict(),
            'trends': [trend.to_dict() for trend in self.trends],
            'warnings': list(self.warnings),
        }


class ReportAssembler:
    """Runs every analysis over a statement and its history."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.validator = StatementValidator(settings)
        self.ratio_engine = RatioEngine(settings)
        self.health_scorer = HealthScorer(settings)
        self.cash_flow_analyzer = CashFlowAnalyzer(settings)
        self.forecaster = Forecaster(settings)
        self.trend_analyzer = TrendAnalyzer(settings)
        self.logger = logging.getLogger(__name__)

    def build(self, statement: FinancialStatement, history: Optional[StatementHistory] = None,
              horizon_months: Optional[int] = None) -> FinancialReport:
        """
        Build a complete report.

        Args:
            statement: Statement under analysis
            history: Optional earlier statements, oldest first; may already end with the statement
            horizon_months: Forecast horizon (default from settings)

        Returns:
            FinancialReport with every section populated
        """
        self.logger.info(f"Building financial report for {statement.period}")

        history = history if history is not None else StatementHistory()
        chronology = StatementHistory(history.chronology(statement))

        warnings = self.validator.validate(statement)
        ratios = self.ratio_engine.compute(statement, chronology)
        health_score = self.health_scorer.score(ratios)
        cash_flow_analysis = self.cash_flow_analyzer.analyze(statement, chronology)
        forecast = self.forecaster.forecast(statement, chronology, horizon_months)

        trends = []
        if len(chronology) >= 2:
            trends = [self.trend_analyzer.analyze(chronology.statements, metric) for metric in TREND_METRICS]
        else:
            self.logger.debug("Single statement, skipping trend analysis")

        self.logger.info(f"Report complete: score {health_score.overall_score:.1f}, "
                         f"{len(trends)} trends, {len(warnings)} warnings")

        return FinancialReport(
            statement=statement,
            ratios=ratios,
            health_score=health_score,
            cash_flow_analysis=cash_flow_analysis,
            forecast=forecast,
            trends=trends,
            warnings=warnings,
            history=chronology
        )
