"""
Period-over-period trend analysis for statement metrics.
"""

import logging
from typing import Dict, Sequence
from dataclasses import dataclass, asdict

from finhealth.config.settings import Settings
from finhealth.data.models import FinancialStatement, STATEMENT_METRICS
from finhealth.utils.calculations import calculate_change_amount, calculate_change_percentage, clamp


class InsufficientHistoryError(ValueError):
    """Raised when an analysis needs more periods than were supplied."""


@dataclass
class TrendAnalysis:
    """Container for trend analysis results."""
    metric: str
    current_value: float
    previous_value: float
    change_amount: float
    change_percent: float
    trend: str
    volatility: str
    projection: float
    confidence: float

    def to_dict(self) -> Dict:
        return asdict(self)


class TrendAnalyzer:
    """Compares the latest two periods of a metric."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.trend_config = settings.get_trend_config()
        self.logger = logging.getLogger(__name__)

    def analyze(self, statements: Sequence[FinancialStatement], metric: str) -> TrendAnalysis:
        """
        Analyze the trend of a metric.

        Args:
            statements: Chronological statements, most recent last
            metric: Statement metric name (e.g. 'revenue', 'net_income')

        Returns:
            TrendAnalysis for the latest period

        Raises:
            InsufficientHistoryError: Fewer than two statements were given
            ValueError: Unknown metric
        """
        statements = list(statements)
        if metric not in STATEMENT_METRICS and metric != 'equity':
            raise ValueError(f"Unknown metric: {metric}")
        if len(statements) < 2:
            raise InsufficientHistoryError(
                f"insufficient history: trend analysis of {metric} needs at least 2 statements, got {len(statements)}"
            )

        current_value = statements[-1].get_metric(metric)
        previous_value = statements[-2].get_metric(metric)

        change_amount = calculate_change_amount(current_value, previous_value)
        change_percent = calculate_change_percentage(current_value, previous_value)

        trend = self.classify_trend(change_percent)
        volatility = self.classify_volatility(change_percent)

        result = TrendAnalysis(
            metric=metric,
            current_value=current_value,
            previous_value=previous_value,
            change_amount=change_amount,
            change_percent=change_percent,
            trend=trend,
            volatility=volatility,
            projection=current_value * (1 + change_percent / 100),
            confidence=self._confidence(len(statements), volatility)
        )

        self.logger.debug(f"Trend for {metric}: {trend} ({change_percent:+.1f}%), volatility {volatility}")

        return result

    def classify_trend(self, change_percent: float) -> str:
        """Classify direction, treating small moves as stable."""
        if abs(change_percent) < self.trend_config['stable_band_percent']:
            return 'stable'
        return 'increasing' if change_percent > 0 else 'decreasing'

    def classify_volatility(self, change_percent: float) -> str:
        """Classify the magnitude of a percentage change."""
        bands = self.settings.get_volatility_bands()
        magnitude = abs(change_percent)
        if magnitude < bands['low']:
            return 'low'
        if magnitude < bands['medium']:
            return 'medium'
        return 'high'

    def _confidence(self, periods: int, volatility: str) -> float:
        config = self.trend_config['confidence']
        confidence = config['base']
        if periods >= self.trend_config['long_history_periods']:
            confidence += config['long_history_bonus']
        if volatility == 'low':
            confidence += config['low_volatility_bonus']
        elif volatility == 'high':
            confidence -= config['high_volatility_penalty']
        return clamp(confidence, config['min'], config['max'])
