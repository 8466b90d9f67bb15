"""
Shared fixtures for the financial health test suite.
"""

import pytest
import sys
from datetime import date
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from finhealth.config.settings import Settings
from finhealth.data.models import FinancialStatement


@pytest.fixture
def settings(monkeypatch):
    """Create test settings from the shipped configuration."""
    monkeypatch.delenv("FINHEALTH_CONFIG_DIR", raising=False)
    return Settings()


@pytest.fixture
def healthy_statement():
    """Profitable business with moderate leverage."""
    return FinancialStatement(
        revenue=1000000,
        gross_profit=400000,
        operating_income=150000,
        net_income=100000,
        total_assets=800000,
        total_liabilities=300000,
        operating_expenses=250000,
        cost_of_goods_sold=600000,
        cash_flow=120000,
        period='FY2024',
        as_of=date(2024, 12, 31)
    )


@pytest.fixture
def prior_statement():
    """Same business one year earlier."""
    return FinancialStatement(
        revenue=800000,
        gross_profit=300000,
        operating_income=100000,
        net_income=80000,
        total_assets=700000,
        total_liabilities=280000,
        operating_expenses=200000,
        cost_of_goods_sold=500000,
        cash_flow=100000,
        period='FY2023',
        as_of=date(2023, 12, 31)
    )
