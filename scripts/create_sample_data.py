#!/usr/bin/env python3
"""
Create sample business records for trying out the financial health engine.
"""

import pandas as pd
from pathlib import Path


def create_sample_data():
    """Create sample business record files, one row per fiscal year."""
    raw_dir = Path(__file__).parent.parent / "data" / "raw"
    raw_dir.mkdir(parents=True, exist_ok=True)

    # Growing service business with full figures
    services = pd.DataFrame({
        'Period': ['FY2022', 'FY2023', 'FY2024'],
        'As Of': ['2022-12-31', '2023-12-31', '2024-12-31'],
        'Business Type': ['Consulting services'] * 3,
        'Annual Revenue': [850000, 1000000, 1200000],
        'Gross Profit': [340000, 410000, 500000],
        'Net Income': [90000, 120000, 156000],
        'Total Assets': [700000, 780000, 900000],
        'Total Liabilities': [300000, 310000, 330000],
        'Operating Expenses': [220000, 260000, 300000],
        'Cash Flow': [105000, 140000, 190000],
    })

    # Listing-style record with only monthly figures
    restaurant = pd.DataFrame({
        'Period': ['FY2024'],
        'Business Type': ['Restaurant'],
        'Monthly Revenue': ['$95,000'],
        'Monthly Profit': ['$6,500'],
    })

    # Loss-making retailer with shrinking sales
    retail = pd.DataFrame({
        'Period': ['FY2023', 'FY2024'],
        'Business Type': ['Retail store'] * 2,
        'Annual Revenue': [2400000, 1900000],
        'Gross Margin': ['28%', '24%'],
        'Net Income': [-40000, -210000],
        'Total Assets': [1500000, 1350000],
        'Total Liabilities': [1100000, 1250000],
        'Cash Flow': [-20000, -180000],
    })

    outputs = []
    for name, frame in [('consulting', services), ('restaurant', restaurant), ('retail', retail)]:
        output_path = raw_dir / f"sample_{name}.xlsx"
        with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
            frame.to_excel(writer, sheet_name='Records', index=False)
        outputs.append(str(output_path))
        print(f"Sample data created: {output_path}")

    return outputs


if __name__ == "__main__":
    create_sample_data()
