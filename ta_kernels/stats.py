"""
Statistics helpers for windowed indicators.
"""

from typing import Any

import numpy as np


def variance(values: Any, mean: float) -> float:
    """
    Population variance of values around a given mean.

    Args:
        values: Window of values (the whole slice is used).
        mean: Mean to measure deviations from.

    Returns:
        Mean squared deviation, or 0.0 for an empty slice.
    """
    values = np.asarray(values, dtype=np.float64)
    if values.size == 0:
        return 0.0

    deviations = values - mean
    return float(np.mean(deviations * deviations))


def stddev(values: Any, mean: float) -> float:
    """Population standard deviation of values around a given mean."""
    return float(np.sqrt(variance(values, mean)))
