"""
GoodBuy HQ Financial Health Engine

Financial statement building, ratio analysis, weighted health scoring,
cash flow analysis, forecasting and trend analysis for business listings.
"""

__version__ = "1.0.0"
__author__ = "GoodBuy HQ"
