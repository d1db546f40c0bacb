"""
Indicator parameter configuration.

Default periods for every indicator the frame builder computes, with an
optional YAML override file:

    indicators:
      sma_period: 50
      rsi_period: 7
      bollinger_multiplier: 2.5
"""

import logging
import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

import yaml

from ta_kernels.exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndicatorConfig:
    """
    Parameters for the indicators computed over an OHLCV frame.

    Attributes:
        sma_period: SMA window (default: 20)
        ema_period: EMA span (default: 20)
        wma_period: WMA window (default: 20)
        bollinger_period: Bollinger SMA window (default: 20)
        bollinger_multiplier: Bollinger stddev multiplier (default: 2.0)
        rsi_period: RSI lookback (default: 14)
        macd_fast_period: MACD fast EMA (default: 12)
        macd_slow_period: MACD slow EMA (default: 26)
        macd_signal_period: MACD signal EMA (default: 9)
        stochastic_k_period: Stochastic %K lookback (default: 14)
        stochastic_d_period: Stochastic %D smoothing (default: 3)
    """
    sma_period: int = 20
    ema_period: int = 20
    wma_period: int = 20
    bollinger_period: int = 20
    bollinger_multiplier: float = 2.0
    rsi_period: int = 14
    macd_fast_period: int = 12
    macd_slow_period: int = 26
    macd_signal_period: int = 9
    stochastic_k_period: int = 14
    stochastic_d_period: int = 3

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if field.name == "bollinger_multiplier":
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ConfigError(field.name, f"must be a number, got {value!r}")
                if not math.isfinite(value) or value <= 0:
                    raise ConfigError(field.name, f"must be a finite positive number, got {value}")
            elif isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(field.name, f"must be a positive integer, got {value!r}")

        if self.macd_fast_period >= self.macd_slow_period:
            raise ConfigError(
                "macd_fast_period",
                f"({self.macd_fast_period}) must be less than "
                f"macd_slow_period ({self.macd_slow_period})",
            )

    @property
    def bollinger_label(self) -> str:
        """Column suffix for the Bollinger settings, e.g. '20_2'."""
        return f"{self.bollinger_period}_{self.bollinger_multiplier:g}"

    @property
    def macd_label(self) -> str:
        return f"{self.macd_fast_period}_{self.macd_slow_period}_{self.macd_signal_period}"

    @property
    def stochastic_label(self) -> str:
        return f"{self.stochastic_k_period}_{self.stochastic_d_period}"


def config_from_dict(values: Dict[str, Any], source: str = "dict") -> IndicatorConfig:
    """
    Build an IndicatorConfig from a mapping of overrides.

    Args:
        values: Field name to value; omitted fields keep their defaults.
        source: Where the mapping came from, for error messages.

    Raises:
        ConfigError: If a key is unknown or a value is invalid.
    """
    if not isinstance(values, dict):
        raise ConfigError(source, f"expected a mapping, got {type(values).__name__}")

    known = {field.name for field in fields(IndicatorConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(source, f"unknown keys: {', '.join(unknown)}")

    return IndicatorConfig(**values)


def load_indicator_config(file_path: str) -> IndicatorConfig:
    """
    Load indicator parameters from a YAML file.

    Args:
        file_path: Path to YAML file with an 'indicators' mapping.

    Returns:
        IndicatorConfig with the file's overrides applied.

    Raises:
        ConfigError: If the file is missing, unparsable or invalid.
    """
    path = Path(file_path)
    if not path.exists():
        raise ConfigError(file_path, "file not found")

    try:
        with open(path, "r") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(file_path, f"YAML parsing error: {e}")

    if not content:
        raise ConfigError(file_path, "file is empty")

    if not isinstance(content, dict) or "indicators" not in content:
        raise ConfigError(file_path, "missing 'indicators' key")

    section = content["indicators"] or {}
    config = config_from_dict(section, source=file_path)
    logger.info(f"Loaded indicator config from {file_path}")
    return config
