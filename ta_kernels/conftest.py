"""
Pytest configuration and fixtures for ta_kernels tests.

This module provides shared price series, OHLCV frames and CSV/YAML files
for all test modules.
"""

import tempfile
from pathlib import Path

import numpy as np
import pandas as pd
import pytest


def _bars_from_close(dates, close, volume) -> pd.DataFrame:
    """Build an OHLCV frame whose bars bracket the given closes."""
    close = np.asarray(close, dtype=float)
    return pd.DataFrame(
        {
            "Date": dates,
            "Open": close - 0.25,
            "High": close + 0.75,
            "Low": close - 1.0,
            "Close": close,
            "Volume": volume,
        }
    )


@pytest.fixture
def sample_ohlcv_data() -> pd.DataFrame:
    """100 business days of random-walk OHLCV data."""
    rng = np.random.default_rng(42)
    close = 100 + np.cumsum(rng.normal(0, 0.5, 100))
    upper_wick = np.abs(rng.normal(0, 0.5, 100))
    lower_wick = np.abs(rng.normal(0, 0.5, 100))

    df = pd.DataFrame(
        {
            "Date": pd.bdate_range("2023-01-02", periods=100),
            "Close": close,
            "High": close + upper_wick,
            "Low": close - lower_wick,
            "Volume": rng.integers(1_000_000, 5_000_000, 100).astype(float),
        }
    )
    df.insert(1, "Open", df["Low"] + (df["High"] - df["Low"]) * rng.random(100))
    return df[["Date", "Open", "High", "Low", "Close", "Volume"]]


@pytest.fixture
def minimal_ohlcv_data() -> pd.DataFrame:
    """Ten bars, fewer than most default periods need."""
    return _bars_from_close(
        pd.bdate_range("2023-01-02", periods=10),
        [100.5, 101.2, 100.8, 102.1, 101.7, 102.9, 103.4, 102.6, 104.0, 103.1],
        [850_000, 920_000, 1_040_000, 780_000, 1_310_000,
         990_000, 1_120_000, 870_000, 1_450_000, 1_020_000],
    )


@pytest.fixture
def random_prices() -> np.ndarray:
    """Random-walk close prices (60 points)."""
    rng = np.random.default_rng(7)
    return 50 + np.cumsum(rng.normal(0, 1.0, 60))


@pytest.fixture
def temp_dir():
    """Scratch directory removed after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _write(temp_dir: Path, name: str, text: str) -> Path:
    path = temp_dir / name
    path.write_text(text)
    return path


@pytest.fixture
def valid_csv_file(temp_dir, sample_ohlcv_data) -> Path:
    """The 100-bar sample written as CSV."""
    path = temp_dir / "prices.csv"
    sample_ohlcv_data.to_csv(path, index=False)
    return path


@pytest.fixture
def minimal_csv_file(temp_dir, minimal_ohlcv_data) -> Path:
    """The ten-bar sample written as CSV."""
    path = temp_dir / "short.csv"
    minimal_ohlcv_data.to_csv(path, index=False)
    return path


@pytest.fixture
def empty_file(temp_dir) -> Path:
    """A zero-byte CSV file."""
    return _write(temp_dir, "empty.csv", "")


@pytest.fixture
def headers_only_file(temp_dir) -> Path:
    """A CSV file with a header row and no bars."""
    return _write(temp_dir, "header_row.csv", "Date,Open,High,Low,Close,Volume\n")


@pytest.fixture
def missing_column_file(temp_dir) -> Path:
    """A CSV file without the Volume column."""
    return _write(
        temp_dir,
        "no_volume.csv",
        "Date,Open,High,Low,Close\n"
        "2023-01-02,100,101,99,100.5\n",
    )


@pytest.fixture
def lowercase_columns_file(temp_dir) -> Path:
    """A CSV file with lower-case, padded headers and rows out of order."""
    return _write(
        temp_dir,
        "lowercase.csv",
        " date , open , high , low , close , volume \n"
        "2023-01-03,102,103,101,102.5,1200000\n"
        "2023-01-01,100,101,99,100.5,1000000\n"
        "2023-01-02,101,102,100,101.5,1100000\n",
    )


@pytest.fixture
def config_file(temp_dir) -> Path:
    """A YAML config overriding a few indicator parameters."""
    return _write(
        temp_dir,
        "params.yaml",
        "indicators:\n"
        "  sma_period: 5\n"
        "  rsi_period: 7\n"
        "  bollinger_multiplier: 2.5\n",
    )
