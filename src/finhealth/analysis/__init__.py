"""
Ratio, health score, cash flow, forecast and trend analysis.
"""

from .ratio_engine import FinancialRatios, RatioEngine
from .health_scorer import HealthScore, HealthScorer, RiskLevel
from .cash_flow_analyzer import CashFlowAnalysis, CashFlowAnalyzer
from .forecaster import Forecast, Forecaster, ScenarioBand
from .trend_analyzer import InsufficientHistoryError, TrendAnalysis, TrendAnalyzer

__all__ = [
    'FinancialRatios', 'RatioEngine',
    'HealthScore', 'HealthScorer', 'RiskLevel',
    'CashFlowAnalysis', 'CashFlowAnalyzer',
    'Forecast', 'Forecaster', 'ScenarioBand',
    'InsufficientHistoryError', 'TrendAnalysis', 'TrendAnalyzer',
]
