"""
CSV Data Loader Module.

Reads OHLCV price history from CSV into a DataFrame whose columns the
frame builder can hand to the kernels.
"""

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from ta_kernels.exceptions import EmptyFileError
from ta_kernels.exceptions import FileNotFoundError as CustomFileNotFoundError
from ta_kernels.exceptions import LoaderError

logger = logging.getLogger(__name__)

DATE_COLUMN = "Date"

# Lower-case header -> canonical column name
CANONICAL_COLUMNS = {
    "date": "Date",
    "open": "Open",
    "high": "High",
    "low": "Low",
    "close": "Close",
    "volume": "Volume",
}


def read_price_csv(file_path: Union[str, Path]) -> pd.DataFrame:
    """
    Read a price history CSV as-is.

    Args:
        file_path: CSV with a header row and one bar per line.

    Returns:
        DataFrame exactly as pandas parsed it.

    Raises:
        FileNotFoundError: If nothing exists at file_path.
        EmptyFileError: If the file has no bytes or no data rows.
        LoaderError: If pandas cannot parse the file.
    """
    path = Path(file_path)
    if not path.exists():
        raise CustomFileNotFoundError(str(file_path))
    if path.stat().st_size == 0:
        raise EmptyFileError(str(file_path))

    try:
        df = pd.read_csv(path)
    except pd.errors.EmptyDataError:
        raise EmptyFileError(str(file_path))
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
        raise LoaderError(f"Cannot read {file_path} as CSV: {e}")

    if df.empty:
        raise EmptyFileError(str(file_path))

    logger.debug(f"Read {len(df)} rows, columns {list(df.columns)} from {file_path}")
    return df


def normalize_column_names(df: pd.DataFrame) -> pd.DataFrame:
    """
    Strip whitespace from headers and map OHLCV names to canonical case.

    'close', ' CLOSE ' and 'Close' all become 'Close'; other columns only
    lose surrounding whitespace.
    """
    df = df.copy()
    df.columns = [
        CANONICAL_COLUMNS.get(str(col).strip().lower(), str(col).strip())
        for col in df.columns
    ]
    return df


def parse_dates(df: pd.DataFrame, date_column: str = DATE_COLUMN) -> pd.DataFrame:
    """
    Convert the date column to datetime and order rows oldest first.

    Frames without the date column come back unchanged so that the
    validators can name what is missing.

    Raises:
        LoaderError: If a date cannot be parsed.
    """
    if date_column not in df.columns:
        return df

    df = df.copy()
    try:
        df[date_column] = pd.to_datetime(df[date_column])
    except (TypeError, ValueError) as e:
        raise LoaderError(f"Unparsable value in '{date_column}': {e}")

    return df.sort_values(date_column, kind="stable").reset_index(drop=True)


def load_and_prepare(file_path: Union[str, Path]) -> pd.DataFrame:
    """
    Read a price CSV and bring it into the shape the validators expect.

    Returns:
        DataFrame with canonical column names, sorted by date.
    """
    df = read_price_csv(file_path)
    df = normalize_column_names(df)
    return parse_dates(df)
