"""
Volume Indicator Kernels.

VWAP and OBV are cumulative from the first bar and have no warm-up
period.
"""

from typing import Any, Optional

import numpy as np

from ta_kernels.buffers import as_series, prepare_output, require_same_length


def vwap(
    high: Any,
    low: Any,
    close: Any,
    volume: Any,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Calculate cumulative Volume Weighted Average Price.

    VWAP[i] = sum(typical_price * volume) / sum(volume) over bars 0..i,
    with typical_price = (high + low + close) / 3.

    Args:
        high: High price series.
        low: Low price series.
        close: Close price series.
        volume: Volume series.
        out: Optional caller buffer.

    Returns:
        VWAP series; NaN while the cumulative volume is exactly zero.

    Raises:
        InvalidBufferError: If a series or out is unusable.
        InvalidLengthError: If the series differ in length.
    """
    high = as_series(high, "high")
    low = as_series(low, "low")
    close = as_series(close, "close")
    volume = as_series(volume, "volume")
    n = require_same_length(high=high, low=low, close=close, volume=volume)
    result = prepare_output(out, n, "out")

    typical_price = (high + low + close) / 3.0
    cumulative_price_volume = np.cumsum(typical_price * volume)
    cumulative_volume = np.cumsum(volume)

    with np.errstate(divide="ignore", invalid="ignore"):
        result[:] = np.where(
            cumulative_volume == 0.0,
            np.nan,
            cumulative_price_volume / cumulative_volume,
        )

    return result


def obv(close: Any, volume: Any, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Calculate On-Balance Volume.

    OBV starts at the first bar's volume, then adds volume on up closes,
    subtracts it on down closes and carries forward otherwise.

    Args:
        close: Close price series.
        volume: Volume series.
        out: Optional caller buffer.

    Returns:
        OBV series.

    Raises:
        InvalidBufferError: If a series or out is unusable.
        InvalidLengthError: If the series differ in length.
    """
    close = as_series(close, "close")
    volume = as_series(volume, "volume")
    n = require_same_length(close=close, volume=volume)
    result = prepare_output(out, n, "out")

    # Direction: +1 if price up, -1 if down, 0 if unchanged or not comparable
    price_change = np.diff(close)
    direction = np.empty(n, dtype=np.float64)
    direction[0] = 1.0
    direction[1:] = np.where(price_change > 0, 1.0, np.where(price_change < 0, -1.0, 0.0))

    signed_volume = np.where(direction == 0.0, 0.0, direction * volume)
    np.cumsum(signed_volume, out=result)

    return result
