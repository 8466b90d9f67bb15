"""
Excel formatting for financial health reports.
"""

import xlsxwriter
import pandas as pd
from typing import Dict, Optional

RISK_FORMATS = {
    'Low': 'risk_low',
    'Medium': 'risk_medium',
    'High': 'risk_high',
    'Critical': 'risk_critical',
}


class ReportFormatter:
    """Cell formats and conditional formatting for report sheets."""

    def __init__(self):
        self.formats = {}

    def add_formats(self, workbook: xlsxwriter.Workbook) -> None:
        """Add standard formats to workbook."""
        self.formats = {
            'header': workbook.add_format({
                'bold': True,
                'bg_color': '#1f4e79',
                'font_color': 'white',
                'align': 'center',
                'valign': 'vcenter',
                'border': 1
            }),
            'title': workbook.add_format({
                'bold': True,
                'font_size': 14
            }),
            'risk_critical': workbook.add_format({
                'bg_color': '#ff4d4d',
                'font_color': 'white',
                'bold': True,
                'border': 1
            }),
            'risk_high': workbook.add_format({
                'bg_color': '#ff9999',
                'border': 1
            }),
            'risk_medium': workbook.add_format({
                'bg_color': '#ffff99',
                'border': 1
            }),
            'risk_low': workbook.add_format({
                'bg_color': '#ccffcc',
                'border': 1
            }),
            'normal': workbook.add_format({
                'border': 1
            }),
            'wrap': workbook.add_format({
                'border': 1,
                'text_wrap': True,
                'valign': 'top'
            }),
            'percentage': workbook.add_format({
                'num_format': '0.0%',
                'border': 1
            }),
            'currency': workbook.add_format({
                'num_format': '#,##0',
                'border': 1
            }),
            'multiple': workbook.add_format({
                'num_format': '0.00',
                'border': 1
            }),
            'score': workbook.add_format({
                'num_format': '0.0',
                'border': 1
            }),
            'positive_change': workbook.add_format({
                'bg_color': '#e6ffe6',
                'num_format': '0.0%',
                'border': 1
            }),
            'negative_change': workbook.add_format({
                'bg_color': '#ffe6e6',
                'num_format': '0.0%',
                'border': 1
            })
        }

    def risk_format(self, risk_level: str):
        """Get the cell format for a risk tier."""
        return self.formats[RISK_FORMATS.get(risk_level, 'risk_high')]

    def write_frame(self, worksheet: xlsxwriter.worksheet.Worksheet, df: pd.DataFrame,
                    column_formats: Optional[Dict[str, str]] = None, start_row: int = 0) -> None:
        """
        Write a DataFrame with a formatted header row.

        Args:
            worksheet: Target worksheet
            df: Data to write
            column_formats: Format name per column; unlisted columns use 'normal'
            start_row: Row of the header
        """
        column_formats = column_formats or {}

        for col_num, column in enumerate(df.columns):
            worksheet.write(start_row, col_num, column, self.formats['header'])

        for i, (_, row) in enumerate(df.iterrows()):
            row_num = start_row + 1 + i
            for col_num, column in enumerate(df.columns):
                value = row.iloc[col_num]
                cell_format = self.formats[column_formats.get(column, 'normal')]
                if value is None or (not isinstance(value, str) and pd.isna(value)):
                    worksheet.write_blank(row_num, col_num, None, cell_format)
                else:
                    worksheet.write(row_num, col_num, value, cell_format)

        self.adjust_column_widths(worksheet, df)

    def apply_change_formatting(self, worksheet: xlsxwriter.worksheet.Worksheet,
                                df: pd.DataFrame, column: str, start_row: int = 1) -> None:
        """Shade percentage changes by sign; values are in percent."""
        col_num = list(df.columns).index(column)
        for i, value in enumerate(df[column]):
            if pd.isna(value):
                continue
            style = self.formats['positive_change'] if value >= 0 else self.formats['negative_change']
            worksheet.write(start_row + i, col_num, value / 100, style)

    def adjust_column_widths(self, worksheet: xlsxwriter.worksheet.Worksheet,
                             df: pd.DataFrame) -> None:
        """Adjust column widths based on content."""
        for i, column in enumerate(df.columns):
            max_length = len(str(column))

            for value in df.iloc[:, i]:
                if value is not None and (isinstance(value, str) or pd.notna(value)):
                    max_length = max(max_length, len(str(value)))

            width = min(max_length + 2, 80)
            worksheet.set_column(i, i, width)

    def add_data_bars(self, worksheet: xlsxwriter.worksheet.Worksheet,
                      start_row: int, end_row: int, col: int) -> None:
        """Add data bars to a range of cells."""
        worksheet.conditional_format(
            start_row, col, end_row, col,
            {
                'type': 'data_bar',
                'bar_color': '#4472c4',
                'bar_solid': True,
                'min_type': 'num',
                'min_value': 0,
                'max_type': 'num',
                'max_value': 100
            }
        )
