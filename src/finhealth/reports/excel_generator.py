"""
Excel report generation for financial health reports.
"""

import logging
import pandas as pd
from pathlib import Path
from datetime import datetime

from finhealth.config.settings import Settings
from finhealth.reports.formatter import ReportFormatter
from finhealth.reports.report_assembler import FinancialReport

RATIO_LABELS = {
    'gross_profit_margin': ('Profitability', 'Gross Profit Margin', 'percentage'),
    'operating_margin': ('Profitability', 'Operating Margin', 'percentage'),
    'net_profit_margin': ('Profitability', 'Net Profit Margin', 'percentage'),
    'return_on_assets': ('Profitability', 'Return on Assets', 'percentage'),
    'return_on_equity': ('Profitability', 'Return on Equity', 'percentage'),
    'current_ratio': ('Liquidity', 'Current Ratio', 'multiple'),
    'quick_ratio': ('Liquidity', 'Quick Ratio', 'multiple'),
    'cash_ratio': ('Liquidity', 'Cash Ratio', 'multiple'),
    'asset_turnover': ('Efficiency', 'Asset Turnover', 'multiple'),
    'inventory_turnover': ('Efficiency', 'Inventory Turnover', 'multiple'),
    'receivables_turnover': ('Efficiency', 'Receivables Turnover', 'multiple'),
    'debt_to_equity': ('Leverage', 'Debt to Equity', 'multiple'),
    'debt_to_assets': ('Leverage', 'Debt to Assets', 'percentage'),
    'interest_coverage': ('Leverage', 'Interest Coverage', 'multiple'),
    'revenue_growth_rate': ('Growth', 'Revenue Growth', 'percentage'),
    'profit_growth_rate': ('Growth', 'Profit Growth', 'percentage'),
    'asset_growth_rate': ('Growth', 'Asset Growth', 'percentage'),
}

HISTORY_COLUMNS = {
    'period': 'Period',
    'revenue': 'Revenue',
    'gross_profit': 'Gross Profit',
    'net_income': 'Net Income',
    'total_assets': 'Total Assets',
    'total_liabilities': 'Total Liabilities',
    'cash_flow': 'Cash Flow',
}


class ExcelReportGenerator:
    """Writes a FinancialReport to a formatted workbook."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.formatter = ReportFormatter()
        self.logger = logging.getLogger(__name__)

    def generate_report(self, report: FinancialReport, output_file: str) -> str:
        """
        Write the report workbook.

        Args:
            report: Assembled financial report
            output_file: Path of the .xlsx file to create

        Returns:
            Path of the written file
        """
        Path(output_file).parent.mkdir(parents=True, exist_ok=True)
        self.logger.info(f"Writing financial health report: {output_file}")

        with pd.ExcelWriter(output_file, engine='xlsxwriter') as writer:
            self.formatter.add_formats(writer.book)

            self._write_summary(writer, report)
            self._write_ratios(writer, report)
            self._write_cash_flow(writer, report)
            self._write_forecast(writer, report)
            self._write_trends(writer, report)
            self._write_insights(writer, report)

        self.logger.info(f"Report written: {output_file}")
        return output_file

    def _write_summary(self, writer: pd.ExcelWriter, report: FinancialReport) -> None:
        worksheet = writer.book.add_worksheet('Summary')
        score = report.health_score
        statement = report.statement

        worksheet.write(0, 0, 'Financial Health Report', self.formatter.formats['title'])
        worksheet.write(1, 0, f"Period: {statement.period} (as of {statement.as_of.isoformat()})")
        worksheet.write(2, 0, f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

        worksheet.write(4, 0, 'Overall Score', self.formatter.formats['header'])
        worksheet.write(4, 1, score.overall_score, self.formatter.formats['score'])
        worksheet.write(5, 0, 'Risk Level', self.formatter.formats['header'])
        worksheet.write(5, 1, score.risk_level.value, self.formatter.risk_format(score.risk_level.value))

        categories = pd.DataFrame({
            'Category': [category.title() for category in score.category_scores],
            'Score': list(score.category_scores.values()),
        })
        self.formatter.write_frame(worksheet, categories, {'Score': 'score'}, start_row=7)
        self.formatter.add_data_bars(worksheet, 8, 7 + len(categories), 1)

        figures = pd.DataFrame({
            'Figure': ['Revenue', 'Gross Profit', 'Operating Income', 'Net Income', 'Total Assets',
                       'Total Liabilities', 'Equity', 'Operating Expenses', 'Cost of Goods Sold', 'Cash Flow'],
            'Amount': [statement.revenue, statement.gross_profit, statement.operating_income,
                       statement.net_income, statement.total_assets, statement.total_liabilities,
                       statement.equity, statement.operating_expenses, statement.cost_of_goods_sold,
                       statement.cash_flow],
        })
        self.formatter.write_frame(worksheet, figures, {'Amount': 'currency'}, start_row=15)
        worksheet.set_column(0, 0, 24)
        worksheet.set_column(1, 1, 18)

    def _write_ratios(self, writer: pd.ExcelWriter, report: FinancialReport) -> None:
        worksheet = writer.book.add_worksheet('Ratios')
        ratios = report.ratios.to_dict()

        rows = [[category, label, ratios[name]] for name, (category, label, _) in RATIO_LABELS.items()]
        df = pd.DataFrame(rows, columns=['Category', 'Ratio', 'Value'])
        self.formatter.write_frame(worksheet, df)

        # Value formats differ per row
        for i, (_, _, number_format) in enumerate(RATIO_LABELS.values()):
            worksheet.write(i + 1, 2, rows[i][2], self.formatter.formats[number_format])

    def _write_cash_flow(self, writer: pd.ExcelWriter, report: FinancialReport) -> None:
        worksheet = writer.book.add_worksheet('Cash Flow')
        analysis = report.cash_flow_analysis

        df = pd.DataFrame({
            'Measure': ['Operating Cash Flow', 'Investing Cash Flow', 'Financing Cash Flow',
                        'Free Cash Flow', 'Cash Flow Margin', 'Cash Conversion Cycle (days)',
                        'Monthly Burn Rate', 'Months of Cash Remaining', 'Predictability'],
            'Value': [analysis.operating_cash_flow, analysis.investing_cash_flow,
                      analysis.financing_cash_flow, analysis.free_cash_flow, analysis.cash_flow_margin,
                      analysis.cash_conversion_cycle, analysis.burn_rate,
                      analysis.months_of_cash_remaining, analysis.cash_flow_predictability],
        })
        self.formatter.write_frame(worksheet, df)

        number_formats = ['currency'] * 4 + ['percentage', 'multiple', 'currency', 'multiple']
        for i, number_format in enumerate(number_formats):
            value = df['Value'].iloc[i]
            if value is not None:
                worksheet.write(i + 1, 1, value, self.formatter.formats[number_format])

    def _write_forecast(self, writer: pd.ExcelWriter, report: FinancialReport) -> None:
        worksheet = writer.book.add_worksheet('Forecast')
        forecast = report.forecast

        worksheet.write(0, 0, f"{forecast.period}-month forecast", self.formatter.formats['title'])
        worksheet.write(1, 0, 'Growth Rate', self.formatter.formats['header'])
        worksheet.write(1, 1, forecast.growth_rate, self.formatter.formats['percentage'])
        worksheet.write(2, 0, 'Confidence', self.formatter.formats['header'])
        worksheet.write(2, 1, forecast.confidence, self.formatter.formats['score'])

        scenarios = pd.DataFrame([
            {'Scenario': 'Projected', 'Revenue': forecast.projected_revenue,
             'Profit': forecast.projected_profit, 'Cash Flow': forecast.projected_cash_flow}
        ] + [
            {'Scenario': name.title(), 'Revenue': band.revenue, 'Profit': band.profit, 'Cash Flow': None}
            for name, band in forecast.scenario_analysis.items()
        ])
        self.formatter.write_frame(worksheet, scenarios,
                                   {'Revenue': 'currency', 'Profit': 'currency', 'Cash Flow': 'currency'},
                                   start_row=4)

        assumptions = pd.DataFrame({'Assumption': forecast.assumptions})
        self.formatter.write_frame(worksheet, assumptions, {'Assumption': 'wrap'}, start_row=6 + len(scenarios))
        worksheet.set_column(0, 0, 60)

    def _write_trends(self, writer: pd.ExcelWriter, report: FinancialReport) -> None:
        worksheet = writer.book.add_worksheet('Trends')

        if report.trends:
            df = pd.DataFrame([{
                'Metric': trend.metric.replace('_', ' ').title(),
                'Current': trend.current_value,
                'Previous': trend.previous_value,
                'Change': trend.change_amount,
                'Change %': trend.change_percent,
                'Trend': trend.trend,
                'Volatility': trend.volatility,
                'Projection': trend.projection,
                'Confidence': trend.confidence,
            } for trend in report.trends])

            self.formatter.write_frame(worksheet, df, {
                'Current': 'currency', 'Previous': 'currency', 'Change': 'currency',
                'Projection': 'currency', 'Confidence': 'score'
            })
            self.formatter.apply_change_formatting(worksheet, df, 'Change %')
            history_row = len(df) + 3
        else:
            worksheet.write(0, 0, 'Trend analysis needs at least two periods of data.')
            history_row = 2

        periods = report.history.to_frame()
        if periods.empty:
            return
        periods = periods[list(HISTORY_COLUMNS)].rename(columns=HISTORY_COLUMNS)
        worksheet.write(history_row, 0, 'Period History', self.formatter.formats['title'])
        self.formatter.write_frame(worksheet, periods,
                                   {label: 'currency' for label in periods.columns if label != 'Period'},
                                   start_row=history_row + 1)

    def _write_insights(self, writer: pd.ExcelWriter, report: FinancialReport) -> None:
        worksheet = writer.book.add_worksheet('Insights')
        score = report.health_score

        rows = ([('Strength', text) for text in score.strengths] +
                [('Weakness', text) for text in score.weaknesses] +
                [('Recommendation', text) for text in score.recommendations] +
                [('Data Warning', text) for text in report.warnings])
        df = pd.DataFrame(rows, columns=['Type', 'Insight'])
        self.formatter.write_frame(worksheet, df, {'Insight': 'wrap'})
