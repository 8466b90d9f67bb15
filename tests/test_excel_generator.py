"""
Unit tests for ExcelReportGenerator.
"""

import pytest
import pandas as pd
import sys
from pathlib import Path
from openpyxl import load_workbook

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from finhealth.data.models import FinancialStatement, StatementHistory
from finhealth.reports.excel_generator import ExcelReportGenerator
from finhealth.reports.report_assembler import ReportAssembler

EXPECTED_SHEETS = ['Summary', 'Ratios', 'Cash Flow', 'Forecast', 'Trends', 'Insights']


class TestExcelReportGenerator:
    """Test cases for ExcelReportGenerator."""

    @pytest.fixture
    def generator(self, settings):
        return ExcelReportGenerator(settings)

    @pytest.fixture
    def report(self, settings, healthy_statement, prior_statement):
        return ReportAssembler(settings).build(healthy_statement, StatementHistory([prior_statement]))

    def test_writes_all_sheets(self, generator, report, tmp_path):
        output_file = tmp_path / "out" / "report.xlsx"

        generator.generate_report(report, str(output_file))

        assert output_file.exists()
        assert load_workbook(output_file).sheetnames == EXPECTED_SHEETS

    def test_summary_has_score_and_risk(self, generator, report, tmp_path):
        output_file = tmp_path / "report.xlsx"
        generator.generate_report(report, str(output_file))

        summary = load_workbook(output_file)['Summary']

        assert summary['B5'].value == pytest.approx(report.health_score.overall_score)
        assert summary['B6'].value == report.health_score.risk_level.value

    def test_ratios_sheet_lists_every_ratio(self, generator, report, tmp_path):
        output_file = tmp_path / "report.xlsx"
        generator.generate_report(report, str(output_file))

        ratios = pd.read_excel(output_file, sheet_name='Ratios', engine='openpyxl')

        assert len(ratios) == 17
        assert list(ratios.columns) == ['Category', 'Ratio', 'Value']

    def test_trends_sheet(self, generator, report, tmp_path):
        output_file = tmp_path / "report.xlsx"
        generator.generate_report(report, str(output_file))

        trends = pd.read_excel(output_file, sheet_name='Trends', engine='openpyxl', nrows=3)

        assert list(trends['Metric']) == ['Revenue', 'Net Income', 'Cash Flow']
        assert trends['Change %'].iloc[0] == pytest.approx(0.25)

    def test_trends_sheet_lists_period_history(self, generator, report, tmp_path):
        output_file = tmp_path / "report.xlsx"
        generator.generate_report(report, str(output_file))

        trends = load_workbook(output_file)['Trends']

        # Trend table in rows 1-4, history title in row 7
        assert trends['A7'].value == 'Period History'
        assert [trends.cell(row=8, column=col).value for col in range(1, 8)] == [
            'Period', 'Revenue', 'Gross Profit', 'Net Income', 'Total Assets', 'Total Liabilities', 'Cash Flow'
        ]
        assert [trends['A9'].value, trends['A10'].value] == ['FY2023', 'FY2024']
        assert trends['B10'].value == 1000000

    def test_single_period_report(self, generator, settings, tmp_path):
        report = ReportAssembler(settings).build(FinancialStatement(revenue=500000, net_income=-80000,
                                                                    total_assets=400000, cash_flow=-60000))
        output_file = tmp_path / "report.xlsx"

        generator.generate_report(report, str(output_file))

        workbook = load_workbook(output_file)
        assert workbook['Trends']['A1'].value.startswith('Trend analysis needs')
        assert workbook['Trends']['A3'].value == 'Period History'
        insights = pd.read_excel(output_file, sheet_name='Insights', engine='openpyxl')
        assert 'Weakness' in set(insights['Type'])
