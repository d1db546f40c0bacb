"""
Derived Indicator Kernels.

Indicators built from the moving averages and statistics helpers:
    - Bollinger Bands: SMA plus/minus a multiple of the window stddev
    - RSI: Wilder-smoothed relative strength
    - MACD: difference of two EMAs with an EMA signal line
    - Stochastic Oscillator: %K range position and its SMA %D

Composite kernels return a NamedTuple holding one array per output series.
"""

import math
import numbers
from typing import Any, NamedTuple, Optional, Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from ta_kernels.buffers import (
    as_series,
    check_period,
    check_window,
    fill_undefined,
    prepare_output,
    prepare_outputs,
    require_same_length,
)
from ta_kernels.exceptions import (
    InvalidLengthError,
    InvalidParameterError,
    InvalidPeriodError,
)
from ta_kernels.moving_averages import ema, sma
from ta_kernels.stats import stddev

# %K reported when the window's high equals its low
STOCHASTIC_NEUTRAL = 50.0


class BollingerBands(NamedTuple):
    upper: np.ndarray
    middle: np.ndarray
    lower: np.ndarray


class MACDResult(NamedTuple):
    macd: np.ndarray
    signal: np.ndarray
    histogram: np.ndarray


class StochasticResult(NamedTuple):
    k: np.ndarray
    d: np.ndarray


# =============================================================================
# Bollinger Bands
# =============================================================================


def bollinger_bands(
    prices: Any,
    period: int = 20,
    multiplier: float = 2.0,
    out: Optional[Sequence[np.ndarray]] = None,
) -> BollingerBands:
    """
    Calculate Bollinger Bands.

    The middle band is the SMA. The deviation at each index is the
    population stddev of the raw price window around that SMA value.

    Args:
        prices: Close price series.
        period: SMA period (default 20).
        multiplier: Standard deviation multiplier (default 2).
        out: Optional (upper, middle, lower) caller buffers.

    Returns:
        BollingerBands(upper, middle, lower).

    Raises:
        InvalidParameterError: If multiplier is not a finite positive number.
    """
    series = as_series(prices, "prices")
    check_period(period, "period")
    check_window(period, len(series), "period")
    if isinstance(multiplier, bool) or not isinstance(multiplier, numbers.Real):
        raise InvalidParameterError("multiplier", f"must be a number, got {multiplier!r}")
    if not math.isfinite(multiplier) or multiplier <= 0:
        raise InvalidParameterError(
            "multiplier", f"must be a finite positive number, got {multiplier}"
        )
    upper, middle, lower = prepare_outputs(out, len(series), ("upper", "middle", "lower"))

    sma(series, period, out=middle)

    for i in range(period - 1, len(series)):
        deviation = stddev(series[i - period + 1:i + 1], middle[i])
        upper[i] = middle[i] + multiplier * deviation
        lower[i] = middle[i] - multiplier * deviation

    fill_undefined(upper, period - 1)
    fill_undefined(lower, period - 1)

    return BollingerBands(upper, middle, lower)


# =============================================================================
# RSI (Relative Strength Index)
# =============================================================================


def _relative_strength_index(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0.0:
        return 100.0
    return 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)


def rsi(prices: Any, period: int = 14, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Calculate Relative Strength Index using Wilder's smoothing.

    RSI = 100 - (100 / (1 + RS)), RS = average gain / average loss.

    The averages are seeded with the plain mean of the first `period`
    price changes, so the first value lands at index `period`. After that
    avg = (avg * (period - 1) + current) / period. RSI is 100 while the
    average loss is zero.

    Unlike the moving averages, the series must be strictly longer than
    the period: the first change needs one extra price.

    Args:
        prices: Close price series.
        period: Lookback period (default 14).
        out: Optional caller buffer of the same length as prices.

    Returns:
        RSI series (0-100 scale), NaN for indices below `period`.

    Raises:
        InvalidLengthError: If period >= series length.
    """
    series = as_series(prices, "prices")
    check_period(period, "period")
    if period >= len(series):
        raise InvalidLengthError(
            f"'period' ({period}) must be less than series length ({len(series)})"
        )
    result = prepare_output(out, len(series), "out")

    changes = np.diff(series)
    gains = np.where(changes > 0, changes, 0.0)
    losses = np.where(changes < 0, -changes, 0.0)

    avg_gain = float(gains[:period].sum() / period)
    avg_loss = float(losses[:period].sum() / period)

    fill_undefined(result, period)
    result[period] = _relative_strength_index(avg_gain, avg_loss)

    # changes[i - 1] is the move from prices[i - 1] to prices[i]
    for i in range(period + 1, len(series)):
        avg_gain = (avg_gain * (period - 1) + gains[i - 1]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i - 1]) / period
        result[i] = _relative_strength_index(avg_gain, avg_loss)

    return result


# =============================================================================
# MACD (Moving Average Convergence Divergence)
# =============================================================================


def macd(
    prices: Any,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
    out: Optional[Sequence[np.ndarray]] = None,
) -> MACDResult:
    """
    Calculate MACD indicator components.

    The signal line is an EMA of the MACD line. Because EMA seeds itself
    from the first `period` values it receives, it is run on the MACD line
    starting at its first defined index and written back at that offset.
    With 12/26/9 the signal is first defined at index 25 + 8 = 33.

    Args:
        prices: Close price series.
        fast_period: Fast EMA period (default 12).
        slow_period: Slow EMA period (default 26).
        signal_period: Signal line EMA period (default 9).
        out: Optional (macd, signal, histogram) caller buffers.

    Returns:
        MACDResult(macd, signal, histogram).

    Raises:
        InvalidPeriodError: If a period is not positive or fast >= slow.
        InvalidLengthError: If slow or signal period exceeds the series length.
    """
    series = as_series(prices, "prices")
    n = len(series)
    check_period(fast_period, "fast_period")
    check_period(slow_period, "slow_period")
    check_period(signal_period, "signal_period")
    if fast_period >= slow_period:
        raise InvalidPeriodError(
            "fast_period",
            f"({fast_period}) must be less than slow_period ({slow_period})",
        )
    check_window(slow_period, n, "slow_period")
    check_window(signal_period, n, "signal_period")
    macd_line, signal, histogram = prepare_outputs(
        out, n, ("macd", "signal", "histogram")
    )

    fast_ema = ema(series, fast_period)
    slow_ema = ema(series, slow_period)

    # NaN in either EMA carries into the difference
    start = slow_period - 1
    fill_undefined(macd_line, start)
    macd_line[start:] = fast_ema[start:] - slow_ema[start:]

    fill_undefined(signal, n)
    defined = np.flatnonzero(~np.isnan(macd_line))
    if defined.size > 0 and n - defined[0] >= signal_period:
        first = defined[0]
        ema(macd_line[first:], signal_period, out=signal[first:])

    histogram[:] = macd_line - signal

    return MACDResult(macd_line, signal, histogram)


# =============================================================================
# Stochastic Oscillator
# =============================================================================


def stochastic(
    high: Any,
    low: Any,
    close: Any,
    k_period: int = 14,
    d_period: int = 3,
    out: Optional[Sequence[np.ndarray]] = None,
) -> StochasticResult:
    """
    Calculate the Stochastic Oscillator.

    %K = 100 * (close - lowest low) / (highest high - lowest low) over the
    last k_period bars, or 50 when the window has no range. %D is the SMA
    of %K, so it is defined only once d_period consecutive %K values are.

    Args:
        high: High price series.
        low: Low price series.
        close: Close price series.
        k_period: %K lookback (default 14).
        d_period: %D smoothing period (default 3).
        out: Optional (k, d) caller buffers.

    Returns:
        StochasticResult(k, d).

    Raises:
        InvalidLengthError: If the series differ in length or a period
            exceeds it.
    """
    high = as_series(high, "high")
    low = as_series(low, "low")
    close = as_series(close, "close")
    n = require_same_length(high=high, low=low, close=close)
    check_period(k_period, "k_period")
    check_period(d_period, "d_period")
    check_window(k_period, n, "k_period")
    check_window(d_period, n, "d_period")
    k, d = prepare_outputs(out, n, ("k", "d"))

    highest = sliding_window_view(high, k_period).max(axis=1)
    lowest = sliding_window_view(low, k_period).min(axis=1)
    price_range = highest - lowest

    with np.errstate(divide="ignore", invalid="ignore"):
        position = 100.0 * (close[k_period - 1:] - lowest) / price_range

    fill_undefined(k, k_period - 1)
    k[k_period - 1:] = np.where(price_range == 0.0, STOCHASTIC_NEUTRAL, position)

    sma(k, d_period, out=d)

    return StochasticResult(k, d)
