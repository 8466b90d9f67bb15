"""
Application settings and scoring policy management.
"""

import os
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional
import yaml
from dotenv import load_dotenv

load_dotenv()

CATEGORIES = ['profitability', 'liquidity', 'efficiency', 'leverage', 'growth']
RISK_LEVELS = ['Low', 'Medium', 'High', 'Critical']


class Settings:
    """Application settings and scoring policy."""

    def __init__(self, config_dir: Optional[str] = None):
        self.project_root = Path(__file__).parent.parent.parent.parent
        self.config_dir = Path(config_dir or os.getenv("FINHEALTH_CONFIG_DIR", self.project_root / "config"))
        self.data_dir = self.project_root / "data"
        self.output_dir = self.data_dir / "output"
        self.logger = logging.getLogger(__name__)

        # Initialize configuration containers
        self.scoring_policy = {}
        self.estimation = {}

        # Load configuration files
        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Load configuration from YAML files with error handling."""
        # Scoring weights, bands and tiers
        self.scoring_policy = self._load_yaml_config(
            self.config_dir / "scoring_policy.yaml",
            self._default_scoring_policy,
            "scoring policy"
        )

        # Estimation ratios for missing statement figures
        self.estimation = self._load_yaml_config(
            self.config_dir / "estimation.yaml",
            self._default_estimation,
            "estimation ratios"
        )

    def _load_yaml_config(self, file_path: Path, default_func, config_name: str) -> Dict[str, Any]:
        """Load a YAML config file, layering its top-level sections over the defaults."""
        defaults = default_func()
        try:
            if file_path.exists():
                with open(file_path, 'r', encoding='utf-8') as f:
                    config = yaml.safe_load(f)
                    if config is None:
                        self.logger.warning(f"Empty {config_name} file, using defaults")
                        return defaults
                    if not isinstance(config, dict):
                        self.logger.error(f"{config_name} file must contain a mapping, using defaults")
                        return defaults
                    self.logger.info(f"Loaded {config_name} from {file_path}")
                    return {**defaults, **config}
            else:
                self.logger.debug(f"{config_name} file not found at {file_path}, using defaults")
                return defaults
        except yaml.YAMLError as e:
            self.logger.error(f"Error parsing {config_name} YAML: {e}, using defaults")
            return defaults
        except OSError as e:
            self.logger.error(f"Error loading {config_name}: {e}, using defaults")
            return defaults

    def _validate_config(self):
        """Validate loaded configuration."""
        try:
            self._validate_weights()
            self._validate_risk_tiers()
            self._validate_bands()
            self._validate_forecast()

            self.logger.debug("Configuration validation completed successfully")

        except Exception as e:
            self.logger.error(f"Configuration validation failed: {e}")
            raise

    def _validate_weights(self):
        """Category weights must cover exactly the five categories and sum to 1."""
        weights = self.scoring_policy.get('category_weights', {})
        if sorted(weights.keys()) != sorted(CATEGORIES):
            raise ValueError(f"category_weights must define exactly {CATEGORIES}")
        for category, weight in weights.items():
            if not isinstance(weight, (int, float)) or weight < 0:
                raise ValueError(f"Weight for {category} must be a non-negative number")
        if abs(sum(weights.values()) - 1.0) > 1e-6:
            raise ValueError(f"category_weights must sum to 1.0 (got {sum(weights.values()):.4f})")

    def _validate_risk_tiers(self):
        """Risk tiers must partition [0, 100] into four contiguous bands."""
        tiers = self.scoring_policy.get('risk_tiers', [])
        levels = [tier.get('level') for tier in tiers]
        if levels != RISK_LEVELS:
            raise ValueError(f"risk_tiers must be ordered {RISK_LEVELS}, got {levels}")

        cut_points = [tier.get('min_score') for tier in tiers]
        for cut in cut_points:
            if not isinstance(cut, (int, float)) or not 0 <= cut <= 100:
                raise ValueError(f"Risk tier cut point {cut} must be a number in [0, 100]")
        if any(a <= b for a, b in zip(cut_points, cut_points[1:])):
            raise ValueError("Risk tier cut points must be strictly descending")
        if cut_points[-1] != 0:
            raise ValueError("The last risk tier must start at 0")

    def _validate_bands(self):
        """Validate classification bands."""
        volatility = self.scoring_policy['volatility_bands']
        if not 0 <= volatility['low'] < volatility['medium']:
            raise ValueError("volatility_bands must satisfy 0 <= low < medium")

        predictability = self.scoring_policy['predictability_bands']
        if not 0 <= predictability['stable'] < predictability['variable']:
            raise ValueError("predictability_bands must satisfy 0 <= stable < variable")

        for category, metrics in self.scoring_policy['category_bands'].items():
            for metric, bands in metrics.items():
                thresholds = [band[0] for band in bands]
                if thresholds != sorted(thresholds, reverse=True):
                    raise ValueError(f"Bands for {category}.{metric} must be ordered by descending threshold")

    def _validate_forecast(self):
        """Validate forecast confidence bounds."""
        confidence = self.scoring_policy['forecast']['confidence']
        if not 0 <= confidence['min'] <= confidence['base'] <= confidence['max'] <= 100:
            raise ValueError("Forecast confidence must satisfy 0 <= min <= base <= max <= 100")

    def _default_scoring_policy(self) -> Dict[str, Any]:
        """Default scoring policy.

        Ratio thresholds are fractions (0.40 = 40%) except turnover and
        coverage multiples. Each band is [threshold, points]; the first band
        whose threshold the ratio exceeds awards its points.
        """
        return {
            # Profitability and liquidity carry the most weight for distress detection
            "category_weights": {
                "profitability": 0.30,
                "liquidity": 0.25,
                "efficiency": 0.15,
                "leverage": 0.15,
                "growth": 0.15
            },
            "risk_tiers": [
                {"level": "Low", "min_score": 80},
                {"level": "Medium", "min_score": 60},
                {"level": "High", "min_score": 40},
                {"level": "Critical", "min_score": 0}
            ],
            "category_bands": {
                "profitability": {
                    "gross_profit_margin": [[0.40, 25], [0.20, 15], [0.10, 5]],
                    "net_profit_margin": [[0.15, 25], [0.08, 15], [0.03, 5]],
                    "return_on_assets": [[0.10, 25], [0.05, 15], [0.02, 5]],
                    "return_on_equity": [[0.15, 25], [0.10, 15], [0.05, 5]]
                },
                "liquidity": {
                    "current_ratio": [[2.0, 40], [1.5, 30], [1.0, 15]],
                    "quick_ratio": [[1.5, 30], [1.0, 20], [0.5, 10]],
                    "cash_ratio": [[0.5, 30], [0.2, 20], [0.1, 10]]
                },
                "efficiency": {
                    "asset_turnover": [[2.0, 35], [1.5, 25], [1.0, 15]],
                    "inventory_turnover": [[10.0, 35], [6.0, 25], [3.0, 15]],
                    "receivables_turnover": [[12.0, 30], [8.0, 20], [4.0, 10]]
                },
                "growth": {
                    "revenue_growth_rate": [[0.20, 40], [0.10, 30], [0.05, 20], [0.0, 10]],
                    "profit_growth_rate": [[0.15, 30], [0.08, 20], [0.0, 10]],
                    "asset_growth_rate": [[0.10, 30], [0.05, 20], [0.0, 10]]
                }
            },
            # Leverage starts at 100 and loses points per band
            "leverage_deductions": {
                "debt_to_equity": {"direction": "above", "bands": [[2.0, 40], [1.5, 25], [1.0, 10]]},
                "debt_to_assets": {"direction": "above", "bands": [[0.60, 30], [0.40, 15], [0.30, 5]]},
                "interest_coverage": {"direction": "below", "bands": [[2.0, 30], [5.0, 15], [10.0, 5]]}
            },
            "insights": {
                "strength_min_score": 75,
                "weakness_below_score": 40,
                "recommendation_below_score": 50
            },
            "trend": {
                "stable_band_percent": 5.0,
                "long_history_periods": 4,
                "confidence": {
                    "base": 50,
                    "min": 20,
                    "max": 95,
                    "long_history_bonus": 20,
                    "low_volatility_bonus": 20,
                    "high_volatility_penalty": 20
                }
            },
            "volatility_bands": {"low": 10.0, "medium": 30.0},
            "predictability_bands": {"stable": 0.15, "variable": 0.35},
            "forecast": {
                "default_horizon_months": 12,
                "default_growth_rate": float(os.getenv("FINHEALTH_DEFAULT_GROWTH", "0.05")),
                "min_growth_rate": -0.9,
                "max_growth_rate": 5.0,
                "cash_flow_multiplier": 1.2,
                "confidence": {
                    "base": 50,
                    "min": 20,
                    "max": 95,
                    "complete_data_bonus": 10,
                    "missing_field_penalty": 10,
                    "two_period_bonus": 5,
                    "multi_period_bonus": 15,
                    "low_volatility_bonus": 10,
                    "high_volatility_penalty": 15,
                    "horizon_penalty_per_year": 5
                },
                "scenarios": {
                    "optimistic": {"revenue": 1.2, "profit": 1.3},
                    "realistic": {"revenue": 1.0, "profit": 1.0},
                    "pessimistic": {"revenue": 0.8, "profit": 0.6}
                }
            },
            "data_quality": {
                "max_gross_margin": 0.95,
                "min_net_margin": -0.5,
                "max_cash_flow_divergence": 2.0
            }
        }

    def _default_estimation(self) -> Dict[str, Any]:
        """Default ratios used to model figures a business record does not supply."""
        return {
            "statement": {
                "asset_to_revenue": 1.0,
                "liability_to_asset": 0.4,
                "opex_to_revenue": 0.3,
                "cash_flow_to_net_income": 1.2
            },
            "balance_sheet": {
                "current_asset_share": 0.6,
                "quick_asset_share": 0.4,
                "cash_to_cash_flow": 0.2,
                "current_liability_share": 0.7,
                "inventory_share": 0.2,
                "receivables_share": 0.15,
                "interest_rate": 0.05,
                "cash_to_assets": 0.1
            },
            "cash_flow": {
                "non_cash_addback": 0.2,
                "capex_share": 0.15,
                "investing_to_revenue": 0.05,
                "financing_to_liabilities": 0.1,
                "payable_days": 30
            }
        }

    @property
    def default_output_file(self) -> str:
        """Default output file path."""
        return str(self.output_dir / "financial_health_report.xlsx")

    @property
    def log_level(self) -> str:
        """Logging level."""
        return os.getenv("LOG_LEVEL", "INFO")

    def get_category_weights(self) -> Dict[str, float]:
        """Get overall score weights per category."""
        return self.scoring_policy["category_weights"]

    def get_risk_tiers(self) -> List[Dict[str, Any]]:
        """Get risk tiers ordered from lowest to highest risk."""
        return self.scoring_policy["risk_tiers"]

    def get_category_bands(self, category: str) -> Dict[str, List[List[float]]]:
        """Get scoring bands for a category."""
        return self.scoring_policy["category_bands"].get(category, {})

    def get_leverage_deductions(self) -> Dict[str, Dict[str, Any]]:
        """Get leverage deduction rules."""
        return self.scoring_policy["leverage_deductions"]

    def get_insight_thresholds(self) -> Dict[str, float]:
        """Get category score thresholds for strengths, weaknesses and recommendations."""
        return self.scoring_policy["insights"]

    def get_trend_config(self) -> Dict[str, Any]:
        """Get trend classification settings."""
        return self.scoring_policy["trend"]

    def get_volatility_bands(self) -> Dict[str, float]:
        """Get volatility bands on absolute change percent."""
        return self.scoring_policy["volatility_bands"]

    def get_predictability_bands(self) -> Dict[str, float]:
        """Get cash flow predictability bands on the coefficient of variation."""
        return self.scoring_policy["predictability_bands"]

    def get_forecast_config(self) -> Dict[str, Any]:
        """Get forecast settings."""
        return self.scoring_policy["forecast"]

    def get_data_quality_limits(self) -> Dict[str, float]:
        """Get data quality warning limits."""
        return self.scoring_policy["data_quality"]

    def get_estimate(self, section: str, key: str) -> float:
        """Get a single estimation ratio."""
        return float(self.estimation.get(section, {}).get(key, 0.0))
