"""
Weighted health scoring over five financial categories.
"""

import logging
from enum import Enum
from typing import Dict, List
from dataclasses import dataclass, field

from finhealth.config.settings import Settings, CATEGORIES
from finhealth.analysis.ratio_engine import FinancialRatios
from finhealth.data.validator import StatementValidator
from finhealth.utils.calculations import band_points, clamp


class RiskLevel(Enum):
    """Risk tier derived from the overall score."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


@dataclass
class HealthScore:
    """Container for a health score and its qualitative insights."""
    overall_score: float
    category_scores: Dict[str, float]
    risk_level: RiskLevel
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'overall_score': self.overall_score,
            'category_scores': dict(self.category_scores),
            'risk_level': self.risk_level.value,
            'strengths': list(self.strengths),
            'weaknesses': list(self.weaknesses),
            'recommendations': list(self.recommendations),
        }


CATEGORY_STRENGTHS = {
    'profitability': 'Strong profitability metrics',
    'liquidity': 'Excellent liquidity position',
    'efficiency': 'High operational efficiency',
    'leverage': 'Conservative debt management',
    'growth': 'Robust growth trajectory',
}

CATEGORY_WEAKNESSES = {
    'profitability': 'Low profitability metrics',
    'liquidity': 'Poor liquidity position',
    'efficiency': 'Operational inefficiencies',
    'leverage': 'High debt burden',
    'growth': 'Weak growth performance',
}

CATEGORY_RECOMMENDATIONS = {
    'profitability': 'Focus on improving profit margins through cost optimization or pricing strategy',
    'liquidity': 'Improve cash management and working capital efficiency',
    'efficiency': 'Optimize asset utilization and operational processes',
    'leverage': 'Consider debt reduction to improve financial stability',
    'growth': 'Develop growth strategies to improve market position',
}


class HealthScorer:
    """Scores financial health from ratios."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.validator = StatementValidator(settings)
        self.logger = logging.getLogger(__name__)

    def score(self, ratios: FinancialRatios) -> HealthScore:
        """
        Score financial health.

        Args:
            ratios: Computed financial ratios

        Returns:
            HealthScore with overall score, category scores, risk level and insights
        """
        category_scores = {
            'profitability': self._score_bands('profitability', ratios),
            'liquidity': self._score_bands('liquidity', ratios),
            'efficiency': self._score_bands('efficiency', ratios),
            'leverage': self._score_leverage(ratios),
            'growth': self._score_bands('growth', ratios),
        }

        weights = self.settings.get_category_weights()
        weighted = sum(weights[category] * category_scores[category] for category in CATEGORIES)
        overall_score = round(clamp(weighted), 1)

        risk_level = self.assess_risk_level(overall_score)

        strengths = self._identify_strengths(category_scores, ratios)
        weaknesses = self._identify_weaknesses(category_scores, ratios)
        recommendations = self._generate_recommendations(category_scores, ratios)

        for warning in self.validator.ratio_warnings(ratios):
            weaknesses.append(f"Data quality concern: {warning}")
            recommendations.append(f"Verify the reported figures ({warning.lower()})")

        self.logger.info(f"Health score {overall_score:.1f} ({risk_level.value} risk)")

        return HealthScore(
            overall_score=overall_score,
            category_scores=category_scores,
            risk_level=risk_level,
            strengths=strengths,
            weaknesses=weaknesses,
            recommendations=recommendations
        )

    def assess_risk_level(self, overall_score: float) -> RiskLevel:
        """Map an overall score onto the configured risk tiers."""
        for tier in self.settings.get_risk_tiers():
            if overall_score >= tier['min_score']:
                return RiskLevel(tier['level'])
        return RiskLevel.CRITICAL

    def _score_bands(self, category: str, ratios: FinancialRatios) -> float:
        """Sum band points for every ratio in a category."""
        points = 0.0
        for metric, bands in self.settings.get_category_bands(category).items():
            points += band_points(getattr(ratios, metric), bands)
        return clamp(points)

    def _score_leverage(self, ratios: FinancialRatios) -> float:
        """Start at 100 and deduct points for leverage risk."""
        score = 100.0
        for metric, rule in self.settings.get_leverage_deductions().items():
            # No debt means no interest to cover
            if metric == 'interest_coverage' and ratios.debt_to_assets == 0:
                continue
            score -= band_points(self._leverage_value(ratios, metric), rule['bands'], rule.get('direction', 'above'))
        return clamp(score)

    @staticmethod
    def _leverage_value(ratios: FinancialRatios, metric: str) -> float:
        # Debt-to-equity is reported as 0 once equity is gone; score it as unbounded
        if metric == 'debt_to_equity' and ratios.debt_to_assets >= 1:
            return float('inf')
        return getattr(ratios, metric)

    def _identify_strengths(self, scores: Dict[str, float], ratios: FinancialRatios) -> List[str]:
        threshold = self.settings.get_insight_thresholds()['strength_min_score']
        strengths = [CATEGORY_STRENGTHS[category] for category in CATEGORIES if scores[category] >= threshold]

        if ratios.gross_profit_margin > 0.40:
            strengths.append('High gross profit margins')
        if ratios.current_ratio > 2:
            strengths.append('Strong working capital position')
        if ratios.return_on_equity > 0.15:
            strengths.append('Excellent returns to shareholders')

        return strengths

    def _identify_weaknesses(self, scores: Dict[str, float], ratios: FinancialRatios) -> List[str]:
        threshold = self.settings.get_insight_thresholds()['weakness_below_score']
        weaknesses = [CATEGORY_WEAKNESSES[category] for category in CATEGORIES if scores[category] < threshold]

        if ratios.net_profit_margin < 0.05:
            weaknesses.append('Low net profit margins')
        if ratios.current_ratio < 1:
            weaknesses.append('Working capital concerns')
        if ratios.debt_to_equity > 2 or ratios.debt_to_assets >= 1:
            weaknesses.append('High financial leverage')

        return weaknesses

    def _generate_recommendations(self, scores: Dict[str, float], ratios: FinancialRatios) -> List[str]:
        threshold = self.settings.get_insight_thresholds()['recommendation_below_score']
        recommendations = [CATEGORY_RECOMMENDATIONS[category] for category in CATEGORIES
                           if scores[category] < threshold]

        if ratios.current_ratio < 1.2:
            recommendations.append('Increase current assets or reduce short-term liabilities')
        if ratios.gross_profit_margin < 0.30:
            recommendations.append('Review pricing strategy and cost structure')

        return recommendations
