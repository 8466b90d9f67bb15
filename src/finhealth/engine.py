"""
Module-level entry points over a shared default configuration.

Each function builds no hidden state: callers own and pass any statement
history. The default Settings object is created on first use and only read
afterwards, so the functions are safe to call from several threads.
"""

import threading
from typing import Any, Iterable, Mapping, Optional, Union

from finhealth.config.settings import Settings
from finhealth.data.models import FinancialStatement, StatementHistory
from finhealth.data.statement_builder import StatementBuilder
from finhealth.analysis.ratio_engine import FinancialRatios, RatioEngine
from finhealth.analysis.health_scorer import HealthScore, HealthScorer
from finhealth.analysis.cash_flow_analyzer import CashFlowAnalysis, CashFlowAnalyzer
from finhealth.analysis.forecaster import Forecast, Forecaster
from finhealth.analysis.trend_analyzer import TrendAnalysis, TrendAnalyzer
from finhealth.reports.report_assembler import FinancialReport, ReportAssembler

_settings: Optional[Settings] = None
_settings_lock = threading.Lock()

StatementsLike = Union[StatementHistory, Iterable[FinancialStatement]]


def get_settings() -> Settings:
    """Get the default settings, loading them on first use."""
    global _settings
    if _settings is None:
        with _settings_lock:
            if _settings is None:
                _settings = Settings()
    return _settings


def _as_history(statements: Optional[StatementsLike]) -> Optional[StatementHistory]:
    if statements is None or isinstance(statements, StatementHistory):
        return statements
    return StatementHistory(statements)


def build_statement(record: Mapping[str, Any], history: Optional[StatementHistory] = None) -> FinancialStatement:
    """Build a statement from a business record, appending it to history when given."""
    return StatementBuilder(get_settings()).build(record, history)


def compute_ratios(statement: FinancialStatement, history: Optional[StatementsLike] = None) -> FinancialRatios:
    return RatioEngine(get_settings()).compute(statement, _as_history(history))


def score_health(ratios: FinancialRatios) -> HealthScore:
    return HealthScorer(get_settings()).score(ratios)


def analyze_cash_flow(statement: FinancialStatement,
                      history: Optional[StatementsLike] = None) -> CashFlowAnalysis:
    return CashFlowAnalyzer(get_settings()).analyze(statement, _as_history(history))


def forecast(latest_statement: FinancialStatement, historical_statements: Optional[StatementsLike] = None,
             horizon_months: int = 12) -> Forecast:
    return Forecaster(get_settings()).forecast(latest_statement, _as_history(historical_statements),
                                               horizon_months)


def analyze_trend(statements: StatementsLike, metric_name: str) -> TrendAnalysis:
    """
    Analyze a metric over the last two statements.

    Raises:
        InsufficientHistoryError: Fewer than two statements were given
    """
    return TrendAnalyzer(get_settings()).analyze(list(statements), metric_name)


def build_report(statement: FinancialStatement, historical_statements: Optional[StatementsLike] = None,
                 horizon_months: Optional[int] = None) -> FinancialReport:
    return ReportAssembler(get_settings()).build(statement, _as_history(historical_statements), horizon_months)
