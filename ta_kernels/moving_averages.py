"""
Moving Average Kernels.

SMA, EMA and WMA over a price series. Every kernel returns an array of the
same length as its input, with NaN over the warm-up prefix
(indices 0 .. period-2) where the window is not yet full.
"""

from typing import Any, Optional

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from ta_kernels.buffers import (
    as_series,
    check_period,
    check_window,
    fill_undefined,
    prepare_output,
)


def sma(prices: Any, period: int, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Calculate Simple Moving Average.

    Args:
        prices: Price series.
        period: Window size.
        out: Optional caller buffer of the same length as prices.

    Returns:
        SMA series; NaN for insufficient lookback. A NaN input only
        affects the windows that contain it.

    Raises:
        InvalidBufferError: If prices or out is unusable.
        InvalidPeriodError: If period is not a positive integer.
        InvalidLengthError: If period exceeds the series length.
    """
    series = as_series(prices, "prices")
    check_period(period, "period")
    check_window(period, len(series), "period")
    result = prepare_output(out, len(series), "out")

    fill_undefined(result, period - 1)
    result[period - 1:] = sliding_window_view(series, period).mean(axis=1)

    return result


def ema(prices: Any, period: int, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Calculate Exponential Moving Average.

    Smoothing factor alpha = 2 / (period + 1). The first defined value, at
    index period-1, is the mean of the first `period` prices; each later
    value is alpha * price + (1 - alpha) * previous. A NaN reaching the
    recurrence stays in every later value.

    Args:
        prices: Price series.
        period: Smoothing span.
        out: Optional caller buffer of the same length as prices.

    Returns:
        EMA series with NaN before index period-1.

    Raises:
        InvalidBufferError: If prices or out is unusable.
        InvalidPeriodError: If period is not a positive integer.
        InvalidLengthError: If period exceeds the series length.
    """
    series = as_series(prices, "prices")
    check_period(period, "period")
    check_window(period, len(series), "period")
    result = prepare_output(out, len(series), "out")

    alpha = 2.0 / (period + 1.0)

    fill_undefined(result, period - 1)
    value = float(series[:period].sum() / period)
    result[period - 1] = value

    for i, price in enumerate(series[period:].tolist(), start=period):
        value = alpha * price + (1.0 - alpha) * value
        result[i] = value

    return result


def wma(prices: Any, period: int, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Calculate Weighted Moving Average.

    The oldest sample in the window has weight 1 and the newest has weight
    `period`; the weighted sum is divided by period * (period + 1) / 2.

    Args:
        prices: Price series.
        period: Window size.
        out: Optional caller buffer of the same length as prices.

    Returns:
        WMA series with NaN before index period-1.

    Raises:
        InvalidBufferError: If prices or out is unusable.
        InvalidPeriodError: If period is not a positive integer.
        InvalidLengthError: If period exceeds the series length.
    """
    series = as_series(prices, "prices")
    check_period(period, "period")
    check_window(period, len(series), "period")
    result = prepare_output(out, len(series), "out")

    weights = np.arange(1, period + 1, dtype=np.float64)
    weight_sum = period * (period + 1) / 2.0

    fill_undefined(result, period - 1)
    result[period - 1:] = sliding_window_view(series, period) @ weights / weight_sum

    return result
