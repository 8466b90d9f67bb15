"""
Mathematical and statistical calculation utilities.
"""

import math
import re
import warnings
from typing import Any, List, Optional, Sequence

import numpy as np
import pandas as pd
from scipy import stats

_NUMBER_CLEANUP = re.compile(r'[\s,$€£]')


def to_number(value: Any) -> float:
    """
    Coerce a loosely-typed input value to a finite float.

    Accepts numbers and strings such as "$1,200,000" or "25%". Missing,
    unparseable and non-finite values resolve to 0.0.

    Args:
        value: Raw input value

    Returns:
        Finite float value
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        cleaned = _NUMBER_CLEANUP.sub('', value).rstrip('%')
        if not cleaned:
            return 0.0
        value = cleaned
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if pd.isna(number) or math.isinf(number):
        return 0.0
    return number


def to_fraction(value: Any) -> float:
    """
    Coerce a margin given either as a fraction (0.4) or a percentage (40) to a fraction.

    Strings with a percent sign are always read as percentages.
    """
    number = to_number(value)
    if isinstance(value, str) and value.strip().endswith('%'):
        return number / 100
    return number / 100 if abs(number) > 1 else number


def safe_divide(numerator: float, denominator: float) -> float:
    """
    Divide two values, returning 0.0 instead of NaN or Infinity.

    Args:
        numerator: Dividend
        denominator: Divisor

    Returns:
        Quotient, or 0.0 when the divisor is zero or the result is not finite
    """
    if denominator == 0:
        return 0.0
    result = numerator / denominator
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def clamp(value: float, minimum: float = 0.0, maximum: float = 100.0) -> float:
    """Clamp a value between bounds."""
    return min(max(value, minimum), maximum)


def calculate_change_amount(current: float, previous: float) -> float:
    """Calculate absolute change between two values."""
    return current - previous


def calculate_change_percentage(current: float, previous: float) -> float:
    """
    Calculate percentage change between two values.

    Args:
        current: Current period value
        previous: Previous period value

    Returns:
        Change percentage relative to the previous value, or 0.0 when the
        previous value is zero
    """
    if previous == 0:
        return 0.0
    return ((current - previous) / previous) * 100


def band_points(value: float, bands: Sequence[Sequence[float]], direction: str = 'above') -> float:
    """
    Award points for the first band a value falls into.

    Args:
        value: Ratio value
        bands: [threshold, points] pairs. For 'above' they are ordered by
            descending threshold and a band matches when value > threshold.
            For 'below' they are ordered by ascending threshold and a band
            matches when value < threshold.
        direction: 'above' or 'below'

    Returns:
        Points of the matching band, or 0.0 when none matches
    """
    for threshold, points in bands:
        if direction == 'above' and value > threshold:
            return float(points)
        if direction == 'below' and value < threshold:
            return float(points)
    return 0.0


def coefficient_of_variation(values: Sequence[float]) -> Optional[float]:
    """
    Calculate the coefficient of variation (population std / |mean|).

    Args:
        values: Series of values

    Returns:
        Coefficient of variation, 0.0 for constant series, infinity when the
        mean is zero but values differ, or None for fewer than two values
    """
    values_array = np.asarray(values, dtype=float)
    values_array = values_array[np.isfinite(values_array)]

    if len(values_array) < 2:
        return None

    if np.all(values_array == values_array[0]):
        return 0.0

    mean = np.mean(values_array)
    if mean == 0:
        return float('inf')

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        return float(abs(stats.variation(values_array)))


def period_growth_rates(values: Sequence[float]) -> List[float]:
    """
    Calculate period-over-period growth rates as fractions.

    Periods whose previous value is zero are skipped.

    Args:
        values: Chronological series of values

    Returns:
        List of growth rates
    """
    series = pd.Series(list(values), dtype=float)
    if len(series) < 2:
        return []
    growth = (series - series.shift(1)) / series.shift(1).abs()
    growth = growth.replace([np.inf, -np.inf], np.nan).dropna()
    return [float(rate) for rate in growth]
