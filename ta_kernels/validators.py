"""
Frame Validation Module.

Checks an OHLCV DataFrame before its columns are passed to the kernels.
The kernels themselves only check buffers and periods; everything about
data quality is decided here.
"""

import pandas as pd

from ta_kernels.exceptions import (
    DuplicateDateError,
    EmptyDataError,
    InvalidDataTypeError,
    MissingColumnError,
    NonMonotonicDateError,
)

# Columns handed to the kernels as float64 series
PRICE_COLUMNS = ["Open", "High", "Low", "Close", "Volume"]
REQUIRED_COLUMNS = ["Date"] + PRICE_COLUMNS


def validate_not_empty(df: pd.DataFrame) -> None:
    """Raise EmptyDataError for a frame without rows."""
    if df.shape[0] == 0:
        raise EmptyDataError()


def validate_required_columns(df: pd.DataFrame) -> None:
    """Raise MissingColumnError naming every absent OHLCV column."""
    absent = [name for name in REQUIRED_COLUMNS if name not in df.columns]
    if absent:
        raise MissingColumnError(absent)


def validate_numeric_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Coerce the price and volume columns to float64.

    Returns:
        Copy of the frame with float64 price columns.

    Raises:
        InvalidDataTypeError: If a cell is not a number or is empty.
    """
    df = df.copy()

    for name in PRICE_COLUMNS:
        raw = df[name]
        values = pd.to_numeric(raw, errors="coerce")

        # present in the file but not a number
        rejected = values.isna() & raw.notna()
        if rejected.any():
            raise InvalidDataTypeError(
                name, f"Cannot convert '{raw[rejected].iloc[0]}' to numeric"
            )

        gaps = int(values.isna().sum())
        if gaps:
            raise InvalidDataTypeError(name, f"Contains {gaps} missing value(s)")

        df[name] = values.astype("float64")

    return df


def validate_dates(df: pd.DataFrame) -> None:
    """
    Require unique, strictly increasing dates.

    Raises:
        InvalidDataTypeError: If the date column cannot be parsed.
        DuplicateDateError: If a date repeats.
        NonMonotonicDateError: If a date is not after the one before it.
    """
    try:
        dates = pd.to_datetime(df["Date"]).reset_index(drop=True)
    except (TypeError, ValueError) as e:
        raise InvalidDataTypeError("Date", str(e))

    repeated = dates[dates.duplicated(keep=False)].unique()
    if len(repeated) > 0:
        raise DuplicateDateError(list(repeated))

    steps = dates.diff().iloc[1:]
    not_increasing = steps[steps <= pd.Timedelta(0)]
    if not not_increasing.empty:
        position = not_increasing.index[0]
        raise NonMonotonicDateError(
            f"Date {dates[position]} <= previous date {dates[position - 1]}"
        )


def validate_all(df: pd.DataFrame) -> pd.DataFrame:
    """
    Run every frame check in order.

    Args:
        df: Frame as returned by the loader.

    Returns:
        Validated frame with float64 price columns.

    Raises:
        ValidationError: The first failing check's subclass.
    """
    validate_not_empty(df)
    validate_required_columns(df)
    df = validate_numeric_columns(df)
    validate_dates(df)
    return df
