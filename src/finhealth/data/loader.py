"""
Business record loading from Excel, CSV and YAML files.
"""

import logging
import re
import pandas as pd
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional

from finhealth.config.settings import Settings

EXCEL_EXTENSIONS = {'.xlsx', '.xlsm'}
CSV_EXTENSIONS = {'.csv'}
YAML_EXTENSIONS = {'.yaml', '.yml'}

_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])(?=[A-Z])')
_NON_WORD = re.compile(r'[^a-z0-9]+')


def normalize_header(header: Any) -> str:
    """
    Normalize a column header to a snake_case field name.

    "Annual Revenue", "annualRevenue" and "annual-revenue" all become
    "annual_revenue".
    """
    text = _CAMEL_BOUNDARY.sub('_', str(header).strip())
    return _NON_WORD.sub('_', text.lower()).strip('_')


class BusinessDataLoader:
    """Loads business records, one per period, in chronological order."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    def load(self, file_path: str, sheet_name: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Load business records from a file.

        Args:
            file_path: Path to an .xlsx, .csv or .yaml file
            sheet_name: Worksheet to read from an Excel file (default: first sheet)

        Returns:
            List of records with normalized field names
        """
        path = Path(file_path)
        self.logger.info(f"Loading business records: {file_path}")

        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        extension = path.suffix.lower()
        if extension in EXCEL_EXTENSIONS:
            frame = pd.read_excel(path, sheet_name=sheet_name or 0, engine='openpyxl')
            records = self._records_from_frame(frame)
        elif extension in CSV_EXTENSIONS:
            frame = pd.read_csv(path)
            records = self._records_from_frame(frame)
        elif extension in YAML_EXTENSIONS:
            records = self._records_from_yaml(path)
        else:
            raise ValueError(f"Unsupported file type '{extension}'. "
                             f"Expected one of {sorted(EXCEL_EXTENSIONS | CSV_EXTENSIONS | YAML_EXTENSIONS)}")

        if not records:
            self.logger.warning(f"No business records found in {file_path}")
        else:
            self.logger.info(f"Loaded {len(records)} records from {path.name}")

        return records

    def _records_from_frame(self, frame: pd.DataFrame) -> List[Dict[str, Any]]:
        """Convert a sheet with one row per period to records."""
        frame = frame.dropna(how='all')
        frame = frame.loc[:, [not str(column).startswith('Unnamed') for column in frame.columns]]
        frame.columns = [normalize_header(column) for column in frame.columns]

        self.logger.debug(f"Record columns: {list(frame.columns)}")

        frame = frame.astype(object).where(pd.notna(frame), None)
        return frame.to_dict(orient='records')

    def _records_from_yaml(self, path: Path) -> List[Dict[str, Any]]:
        """Read a list of records, a mapping with a 'records' list, or a single record."""
        with open(path, 'r', encoding='utf-8') as f:
            try:
                content = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e

        if content is None:
            return []
        if isinstance(content, dict):
            content = content.get('records', [content])
        if not isinstance(content, list) or not all(isinstance(item, dict) for item in content):
            raise ValueError(f"{path} must contain a record mapping or a list of record mappings")

        return [{normalize_header(key): value for key, value in item.items()} for item in content]
