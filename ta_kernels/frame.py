"""
Frame Builder Module.

Runs every kernel over the columns of an OHLCV DataFrame and appends the
results as new columns aligned with the input rows.

Columns added (names use the configured parameters, defaults shown):
    Moving averages: sma_20, ema_20, wma_20
    Bands:           bb_upper_20_2, bb_mid_20_2, bb_lower_20_2
    Momentum:        rsi_14, macd_12_26_9, macd_signal_12_26_9,
                     macd_hist_12_26_9, stoch_k_14_3, stoch_d_14_3
    Volume:          vwap, obv
"""

import logging
from typing import Callable, Dict, List, Optional

import numpy as np
import pandas as pd

from ta_kernels.cache import CalculationCache
from ta_kernels.config import IndicatorConfig
from ta_kernels.derived import bollinger_bands, macd, rsi, stochastic
from ta_kernels.exceptions import InvalidLengthError
from ta_kernels.moving_averages import ema, sma, wma
from ta_kernels.volume import obv, vwap

logger = logging.getLogger(__name__)


def indicator_columns(config: Optional[IndicatorConfig] = None) -> List[str]:
    """
    List the columns add_all_indicators appends, in order.

    Args:
        config: Indicator parameters (defaults if None).

    Returns:
        Column names.
    """
    config = config or IndicatorConfig()
    bb = config.bollinger_label
    mc = config.macd_label
    st = config.stochastic_label

    return [
        f"sma_{config.sma_period}",
        f"ema_{config.ema_period}",
        f"wma_{config.wma_period}",
        f"bb_upper_{bb}",
        f"bb_mid_{bb}",
        f"bb_lower_{bb}",
        f"rsi_{config.rsi_period}",
        f"macd_{mc}",
        f"macd_signal_{mc}",
        f"macd_hist_{mc}",
        f"stoch_k_{st}",
        f"stoch_d_{st}",
        "vwap",
        "obv",
    ]


def _run_kernel(
    name: str,
    columns: List[str],
    compute: Callable[[], object],
    inputs: List[np.ndarray],
    params: Dict[str, object],
    cache: Optional[CalculationCache],
) -> Dict[str, np.ndarray]:
    """
    Run one kernel, through the cache if given, and name its outputs.

    A series too short for the kernel's window yields all-NaN columns;
    any other kernel error propagates.
    """
    length = len(inputs[0])

    try:
        if cache is None:
            result = compute()
        else:
            key = cache.make_key(name, *inputs, **params)
            result = cache.get_or_compute(key, compute)
    except InvalidLengthError as e:
        logger.warning(f"Not enough rows for {name} ({length}): {e}")
        return {col: np.full(length, np.nan) for col in columns}

    outputs = (result,) if isinstance(result, np.ndarray) else tuple(result)
    return dict(zip(columns, outputs))


def add_all_indicators(
    df: pd.DataFrame,
    config: Optional[IndicatorConfig] = None,
    cache: Optional[CalculationCache] = None,
) -> pd.DataFrame:
    """
    Calculate and add all indicators to the DataFrame.

    Args:
        df: DataFrame with High, Low, Close, Volume columns.
        config: Indicator parameters (defaults if None).
        cache: Optional calculation cache shared across calls.

    Returns:
        Copy of the DataFrame with all indicator columns added.
    """
    config = config or IndicatorConfig()
    df = df.copy()

    high = df["High"].to_numpy(dtype=np.float64)
    low = df["Low"].to_numpy(dtype=np.float64)
    close = df["Close"].to_numpy(dtype=np.float64)
    volume = df["Volume"].to_numpy(dtype=np.float64)

    columns = iter(indicator_columns(config))

    def take(count: int) -> List[str]:
        return [next(columns) for _ in range(count)]

    results: Dict[str, np.ndarray] = {}

    # --- Moving averages ---

    results.update(_run_kernel(
        "sma", take(1), lambda: sma(close, config.sma_period),
        [close], {"period": config.sma_period}, cache,
    ))
    results.update(_run_kernel(
        "ema", take(1), lambda: ema(close, config.ema_period),
        [close], {"period": config.ema_period}, cache,
    ))
    results.update(_run_kernel(
        "wma", take(1), lambda: wma(close, config.wma_period),
        [close], {"period": config.wma_period}, cache,
    ))

    # --- Bands ---

    results.update(_run_kernel(
        "bollinger", take(3),
        lambda: bollinger_bands(close, config.bollinger_period, config.bollinger_multiplier),
        [close],
        {"period": config.bollinger_period, "multiplier": config.bollinger_multiplier},
        cache,
    ))

    # --- Momentum ---

    results.update(_run_kernel(
        "rsi", take(1), lambda: rsi(close, config.rsi_period),
        [close], {"period": config.rsi_period}, cache,
    ))
    results.update(_run_kernel(
        "macd", take(3),
        lambda: macd(
            close,
            config.macd_fast_period,
            config.macd_slow_period,
            config.macd_signal_period,
        ),
        [close],
        {
            "fast": config.macd_fast_period,
            "slow": config.macd_slow_period,
            "signal": config.macd_signal_period,
        },
        cache,
    ))
    results.update(_run_kernel(
        "stochastic", take(2),
        lambda: stochastic(
            high, low, close, config.stochastic_k_period, config.stochastic_d_period
        ),
        [high, low, close],
        {"k": config.stochastic_k_period, "d": config.stochastic_d_period},
        cache,
    ))

    # --- Volume ---

    results.update(_run_kernel(
        "vwap", take(1), lambda: vwap(high, low, close, volume),
        [high, low, close, volume], {}, cache,
    ))
    results.update(_run_kernel(
        "obv", take(1), lambda: obv(close, volume),
        [close, volume], {}, cache,
    ))

    for name, values in results.items():
        df[name] = pd.Series(values, index=df.index)

    logger.debug(f"Added {len(results)} indicator columns to {len(df)} rows")
    return df
