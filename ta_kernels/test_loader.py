"""
Tests for the loader module.

This module tests CSV loading and parsing including:
- Valid CSV loading
- Missing and empty file handling
- Column name normalization
- Date parsing and sorting
"""

import pandas as pd
import pytest

from ta_kernels.exceptions import EmptyFileError
from ta_kernels.exceptions import FileNotFoundError as CustomFileNotFoundError
from ta_kernels.exceptions import LoaderError
from ta_kernels.loader import (
    load_and_prepare,
    normalize_column_names,
    parse_dates,
    read_price_csv,
)


class TestReadPriceCsv:
    """Tests for read_price_csv function."""

    def test_load_valid_csv(self, valid_csv_file):
        """Test loading a valid CSV file."""
        df = read_price_csv(str(valid_csv_file))
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 100
        assert "Close" in df.columns

    def test_load_missing_file(self, temp_dir):
        """Test loading a non-existent file raises FileNotFoundError."""
        with pytest.raises(CustomFileNotFoundError) as exc_info:
            read_price_csv(str(temp_dir / "nonexistent.csv"))
        assert "nonexistent.csv" in str(exc_info.value)

    def test_load_empty_file(self, empty_file):
        """Test loading an empty file raises EmptyFileError."""
        with pytest.raises(EmptyFileError) as exc_info:
            read_price_csv(str(empty_file))
        assert "empty.csv" in str(exc_info.value)

    def test_load_headers_only_file(self, headers_only_file):
        """Test loading a file with headers only raises EmptyFileError."""
        with pytest.raises(EmptyFileError):
            read_price_csv(str(headers_only_file))

    def test_errors_share_loader_base(self, temp_dir):
        """Test loader errors can be caught as LoaderError."""
        with pytest.raises(LoaderError):
            read_price_csv(str(temp_dir / "nonexistent.csv"))


class TestNormalizeColumnNames:
    """Tests for normalize_column_names function."""

    def test_canonical_case(self):
        """Test OHLCV headers map to canonical case."""
        df = pd.DataFrame(columns=["date", "OPEN", "High", "low", "close", "VOLUME"])
        result = normalize_column_names(df)
        assert list(result.columns) == ["Date", "Open", "High", "Low", "Close", "Volume"]

    def test_strips_whitespace(self):
        """Test surrounding whitespace is removed."""
        df = pd.DataFrame(columns=[" Close ", " Adj Close "])
        result = normalize_column_names(df)
        assert list(result.columns) == ["Close", "Adj Close"]

    def test_does_not_modify_input(self):
        """Test the original frame keeps its headers."""
        df = pd.DataFrame(columns=["close"])
        normalize_column_names(df)
        assert list(df.columns) == ["close"]


class TestParseDates:
    """Tests for parse_dates function."""

    def test_parse_valid_dates(self, sample_ohlcv_data):
        """Test parsing string dates."""
        df = sample_ohlcv_data.copy()
        df["Date"] = df["Date"].astype(str)

        result = parse_dates(df)
        assert pd.api.types.is_datetime64_any_dtype(result["Date"])

    def test_sorts_ascending(self):
        """Test rows are sorted oldest first with a fresh index."""
        df = pd.DataFrame({"Date": ["2023-01-03", "2023-01-01", "2023-01-02"], "Close": [3, 1, 2]})
        result = parse_dates(df)
        assert list(result["Close"]) == [1, 2, 3]
        assert list(result.index) == [0, 1, 2]

    def test_invalid_dates(self):
        """Test unparsable dates raise LoaderError."""
        df = pd.DataFrame({"Date": ["not a date", "2023-01-01"]})
        with pytest.raises(LoaderError):
            parse_dates(df)

    def test_missing_date_column(self):
        """Test frames without a date column pass through."""
        df = pd.DataFrame({"Close": [1.0]})
        result = parse_dates(df)
        assert list(result.columns) == ["Close"]


class TestLoadAndPrepare:
    """Tests for load_and_prepare function."""

    def test_valid_file(self, valid_csv_file):
        """Test a well-formed file loads with datetime dates."""
        df = load_and_prepare(str(valid_csv_file))
        assert len(df) == 100
        assert pd.api.types.is_datetime64_any_dtype(df["Date"])
        assert df["Date"].is_monotonic_increasing

    def test_lowercase_unsorted_file(self, lowercase_columns_file):
        """Test lower-case padded headers and unsorted rows are normalized."""
        df = load_and_prepare(str(lowercase_columns_file))
        assert list(df.columns) == ["Date", "Open", "High", "Low", "Close", "Volume"]
        assert list(df["Close"]) == [100.5, 101.5, 102.5]
