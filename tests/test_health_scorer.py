"""
Unit tests for HealthScorer.
"""

import pytest
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from finhealth.analysis.health_scorer import HealthScorer, HealthScore, RiskLevel
from finhealth.analysis.ratio_engine import RatioEngine, FinancialRatios
from finhealth.data.models import FinancialStatement

CATEGORIES = {'profitability', 'liquidity', 'efficiency', 'leverage', 'growth'}


class TestHealthScorer:
    """Test cases for HealthScorer."""

    @pytest.fixture
    def scorer(self, settings):
        """Create HealthScorer instance."""
        return HealthScorer(settings)

    @pytest.fixture
    def healthy_ratios(self, settings, healthy_statement):
        return RatioEngine(settings).compute(healthy_statement)

    def test_category_scores(self, scorer, healthy_ratios):
        score = scorer.score(healthy_ratios)

        assert set(score.category_scores) == CATEGORIES
        assert score.category_scores['profitability'] == pytest.approx(80)
        assert score.category_scores['liquidity'] == pytest.approx(80)
        assert score.category_scores['efficiency'] == pytest.approx(50)
        assert score.category_scores['leverage'] == pytest.approx(95)
        assert score.category_scores['growth'] == pytest.approx(0)

    def test_overall_score_is_weighted_sum(self, scorer, healthy_ratios):
        score = scorer.score(healthy_ratios)

        # 0.30*80 + 0.25*80 + 0.15*50 + 0.15*95 + 0.15*0 = 65.75
        assert score.overall_score == pytest.approx(65.8, abs=0.06)
        assert score.risk_level == RiskLevel.MEDIUM

    def test_overall_score_rounded_to_one_decimal(self, scorer, healthy_ratios):
        score = scorer.score(healthy_ratios)

        assert score.overall_score == round(score.overall_score, 1)

    def test_insights(self, scorer, healthy_ratios):
        score = scorer.score(healthy_ratios)

        assert 'Strong profitability metrics' in score.strengths
        assert 'Excellent liquidity position' in score.strengths
        assert 'Conservative debt management' in score.strengths
        assert 'Strong working capital position' in score.strengths
        assert 'Excellent returns to shareholders' in score.strengths
        assert score.weaknesses == ['Weak growth performance']
        assert score.recommendations == ['Develop growth strategies to improve market position']

    def test_zero_statement_scores_critical(self, scorer, settings):
        ratios = RatioEngine(settings).compute(FinancialStatement())

        score = scorer.score(ratios)

        # Only leverage scores: no debt, so nothing is deducted
        assert score.category_scores['leverage'] == 100
        assert score.overall_score == pytest.approx(15.0)
        assert score.risk_level == RiskLevel.CRITICAL
        assert 'Low profitability metrics' in score.weaknesses
        assert 'Low net profit margins' in score.weaknesses

    def test_no_debt_is_not_penalized_for_interest_coverage(self, scorer):
        ratios = FinancialRatios(debt_to_equity=0, debt_to_assets=0, interest_coverage=0)

        assert scorer.score(ratios).category_scores['leverage'] == 100

    def test_heavy_leverage_is_a_weakness(self, scorer):
        ratios = FinancialRatios(debt_to_equity=3.0, debt_to_assets=0.75, interest_coverage=1.0,
                                 current_ratio=0.8)

        score = scorer.score(ratios)

        # 100 - 40 - 30 - 30
        assert score.category_scores['leverage'] == 0
        assert 'High debt burden' in score.weaknesses
        assert 'High financial leverage' in score.weaknesses
        assert 'Working capital concerns' in score.weaknesses
        assert 'Consider debt reduction to improve financial stability' in score.recommendations
        assert 'Increase current assets or reduce short-term liabilities' in score.recommendations

    def test_negative_equity_takes_full_debt_to_equity_deduction(self, scorer):
        ratios = FinancialRatios(debt_to_equity=0, debt_to_assets=1.8, interest_coverage=2.2)

        score = scorer.score(ratios)

        # 100 - 40 - 30 - 15
        assert score.category_scores['leverage'] == 15
        assert 'High financial leverage' in score.weaknesses

    def test_insolvent_scores_below_leveraged(self, scorer, settings):
        engine = RatioEngine(settings)
        insolvent = FinancialStatement(revenue=1000000, operating_income=100000,
                                       total_assets=500000, total_liabilities=900000)
        leveraged = FinancialStatement(revenue=1000000, operating_income=100000,
                                       total_assets=500000, total_liabilities=320000)

        insolvent_score = scorer.score(engine.compute(insolvent)).category_scores['leverage']
        leveraged_score = scorer.score(engine.compute(leveraged)).category_scores['leverage']

        assert insolvent_score < leveraged_score

    def test_scores_stay_in_range(self, scorer):
        extreme = FinancialRatios(**{name: 1e9 for name in FinancialRatios().to_dict()})
        negative = FinancialRatios(**{name: -1e9 for name in FinancialRatios().to_dict()})

        for ratios in (extreme, negative):
            score = scorer.score(ratios)
            assert 0 <= score.overall_score <= 100
            for value in score.category_scores.values():
                assert 0 <= value <= 100

    @pytest.mark.parametrize("overall, expected", [
        (100, RiskLevel.LOW),
        (80, RiskLevel.LOW),
        (79.9, RiskLevel.MEDIUM),
        (60, RiskLevel.MEDIUM),
        (59.9, RiskLevel.HIGH),
        (40, RiskLevel.HIGH),
        (39.9, RiskLevel.CRITICAL),
        (0, RiskLevel.CRITICAL),
    ])
    def test_risk_tiers(self, scorer, overall, expected):
        assert scorer.assess_risk_level(overall) == expected

    def test_risk_never_increases_with_score(self, scorer):
        order = [RiskLevel.CRITICAL, RiskLevel.HIGH, RiskLevel.MEDIUM, RiskLevel.LOW]
        ranks = [order.index(scorer.assess_risk_level(s / 10)) for s in range(0, 1001)]

        assert ranks == sorted(ranks)

    def test_data_quality_warnings_become_advisories(self, scorer):
        ratios = FinancialRatios(gross_profit_margin=1.2, net_profit_margin=0.5, debt_to_assets=1.4)

        score = scorer.score(ratios)

        advisories = [w for w in score.weaknesses if w.startswith('Data quality concern')]
        assert len(advisories) == 2
        assert any('Gross profit exceeds revenue' in w for w in advisories)
        assert any('Liabilities exceed total assets' in w for w in advisories)
        assert any(r.startswith('Verify the reported figures') for r in score.recommendations)

    def test_to_dict(self, scorer, healthy_ratios):
        data = scorer.score(healthy_ratios).to_dict()

        assert data['risk_level'] == 'Medium'
        assert set(data['category_scores']) == CATEGORIES
        assert isinstance(data['strengths'], list)
