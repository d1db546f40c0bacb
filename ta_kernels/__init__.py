"""
Technical Indicator Kernels.

Numeric kernels for standard technical indicators over fixed-length price
series. Every kernel returns series of the same length as its input, with
NaN where the indicator is not yet defined.

Modules:
    - stats: variance and standard deviation helpers
    - moving_averages: SMA, EMA, WMA
    - derived: Bollinger Bands, RSI, MACD, Stochastic Oscillator
    - volume: VWAP, OBV
    - frame: all indicators over an OHLCV DataFrame
    - main: CSV-to-indicators API and CLI
"""

from ta_kernels.derived import (
    BollingerBands,
    MACDResult,
    StochasticResult,
    bollinger_bands,
    macd,
    rsi,
    stochastic,
)
from ta_kernels.exceptions import ErrorKind, IndicatorError, KernelError
from ta_kernels.main import build_indicators
from ta_kernels.moving_averages import ema, sma, wma
from ta_kernels.stats import stddev, variance
from ta_kernels.volume import obv, vwap

__all__ = [
    "BollingerBands",
    "ErrorKind",
    "IndicatorError",
    "KernelError",
    "MACDResult",
    "StochasticResult",
    "bollinger_bands",
    "build_indicators",
    "ema",
    "macd",
    "obv",
    "rsi",
    "sma",
    "stddev",
    "stochastic",
    "variance",
    "vwap",
    "wma",
]
__version__ = "1.0.0"
