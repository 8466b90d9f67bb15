"""
Data models for the financial health engine.
"""

import pandas as pd
from datetime import date
from typing import Dict, Iterator, List, Optional, Iterable, Any
from dataclasses import dataclass, field, asdict, fields

STATEMENT_METRICS = [
    'revenue', 'gross_profit', 'operating_income', 'net_income',
    'total_assets', 'total_liabilities', 'operating_expenses',
    'cost_of_goods_sold', 'cash_flow'
]


@dataclass(frozen=True)
class FinancialStatement:
    """Snapshot of one business's financials for one period."""
    revenue: float = 0.0
    gross_profit: float = 0.0
    operating_income: float = 0.0
    net_income: float = 0.0
    total_assets: float = 0.0
    total_liabilities: float = 0.0
    operating_expenses: float = 0.0
    cost_of_goods_sold: float = 0.0
    cash_flow: float = 0.0
    period: str = "Annual"
    as_of: date = field(default_factory=date.today)
    prior_revenue: Optional[float] = None

    @property
    def equity(self) -> float:
        """Book equity (assets less liabilities)."""
        return self.total_assets - self.total_liabilities

    def get_metric(self, metric: str) -> float:
        """Get a numeric metric by name."""
        if metric == 'equity':
            return self.equity
        if metric not in STATEMENT_METRICS:
            raise ValueError(f"Unknown metric: {metric}. Expected one of {STATEMENT_METRICS + ['equity']}")
        return getattr(self, metric)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['as_of'] = self.as_of.isoformat()
        data['equity'] = self.equity
        return data


class StatementHistory:
    """
    Caller-owned, chronologically ordered sequence of statements.

    The most recent statement is last. Adding a statement never mutates the
    statements already held.
    """

    def __init__(self, statements: Optional[Iterable[FinancialStatement]] = None):
        self._statements: List[FinancialStatement] = list(statements or [])

    def add(self, statement: FinancialStatement) -> FinancialStatement:
        """Append a statement as the most recent period."""
        self._statements.append(statement)
        return statement

    @property
    def latest(self) -> Optional[FinancialStatement]:
        return self._statements[-1] if self._statements else None

    @property
    def previous(self) -> Optional[FinancialStatement]:
        return self._statements[-2] if len(self._statements) >= 2 else None

    @property
    def statements(self) -> List[FinancialStatement]:
        """Copy of the held statements."""
        return list(self._statements)

    def chronology(self, statement: Optional[FinancialStatement] = None) -> List[FinancialStatement]:
        """
        Get the held statements followed by a statement under analysis.

        The statement is not repeated when it is already the most recent one.
        """
        statements = list(self._statements)
        if statement is not None and (not statements or statements[-1] is not statement):
            statements.append(statement)
        return statements

    def series(self, metric: str) -> pd.Series:
        """Get one metric across all periods, oldest first."""
        values = [statement.get_metric(metric) for statement in self._statements]
        index = [statement.period for statement in self._statements]
        return pd.Series(values, index=index, name=metric, dtype=float)

    def to_frame(self) -> pd.DataFrame:
        """Get all statements as a DataFrame, one row per period."""
        columns = [f.name for f in fields(FinancialStatement)]
        if not self._statements:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame([asdict(statement) for statement in self._statements], columns=columns)

    def __len__(self) -> int:
        return len(self._statements)

    def __iter__(self) -> Iterator[FinancialStatement]:
        return iter(list(self._statements))

    def __getitem__(self, index):
        return self._statements[index]

    def __repr__(self) -> str:
        return f"StatementHistory({len(self._statements)} statements)"
