"""
Shared Buffer Handling Module.

Input coercion, precondition checks and NaN-fill helpers used by every
kernel. All checks run before a kernel writes anything, so a rejected call
never leaves a caller-supplied output buffer half written.
"""

from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from ta_kernels.exceptions import (
    InvalidBufferError,
    InvalidLengthError,
    InvalidPeriodError,
)


def as_series(values: Any, name: str) -> np.ndarray:
    """
    Coerce an array-like input to a float64 array.

    Kernels only read from the returned array.

    Args:
        values: List, numpy array or pandas Series of numbers.
        name: Argument name used in error messages.

    Returns:
        One-dimensional float64 array (no copy when already float64).

    Raises:
        InvalidBufferError: If values is None, non-numeric or not 1-D.
        InvalidLengthError: If values is empty.
    """
    if values is None:
        raise InvalidBufferError(name, "is missing")

    try:
        series = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidBufferError(name, f"is not numeric: {e}") from e

    if series.ndim != 1:
        raise InvalidBufferError(
            name, f"must be one-dimensional, got {series.ndim} dimensions"
        )

    if series.size == 0:
        raise InvalidLengthError(f"'{name}' is empty")

    return series


def check_period(period: Any, name: str) -> None:
    """Reject periods that are not positive integers."""
    if isinstance(period, bool) or not isinstance(period, (int, np.integer)):
        raise InvalidPeriodError(name, f"must be an integer, got {period!r}")
    if period <= 0:
        raise InvalidPeriodError(name, f"must be positive, got {period}")


def check_window(period: int, length: int, name: str) -> None:
    """Reject a window longer than the series it slides over."""
    if period > length:
        raise InvalidLengthError(
            f"'{name}' ({period}) exceeds series length ({length})"
        )


def require_same_length(**series: np.ndarray) -> int:
    """
    Check that all aligned series have the same length.

    Returns:
        The common length.

    Raises:
        InvalidLengthError: If the lengths differ.
    """
    lengths = {name: len(values) for name, values in series.items()}
    if len(set(lengths.values())) > 1:
        details = ", ".join(f"{name}={length}" for name, length in lengths.items())
        raise InvalidLengthError(f"series lengths differ: {details}")
    return next(iter(lengths.values()))


def prepare_output(out: Optional[np.ndarray], length: int, name: str) -> np.ndarray:
    """
    Allocate an output buffer, or check the one supplied by the caller.

    Args:
        out: Caller buffer or None.
        length: Required length (the input length).
        name: Argument name used in error messages.

    Returns:
        A writeable 1-D floating array of the given length.

    Raises:
        InvalidBufferError: If the supplied buffer cannot hold the result.
    """
    if out is None:
        return np.empty(length, dtype=np.float64)

    if not isinstance(out, np.ndarray):
        raise InvalidBufferError(name, f"must be a numpy array, got {type(out).__name__}")
    if out.ndim != 1 or out.shape[0] != length:
        raise InvalidBufferError(name, f"must have shape ({length},), got {out.shape}")
    if not np.issubdtype(out.dtype, np.floating):
        raise InvalidBufferError(name, f"must have a floating dtype, got {out.dtype}")
    if not out.flags.writeable:
        raise InvalidBufferError(name, "is read-only")

    return out


def prepare_outputs(
    out: Optional[Sequence[np.ndarray]],
    length: int,
    names: Tuple[str, ...],
) -> List[np.ndarray]:
    """Prepare one buffer per output series of a composite kernel."""
    if out is None:
        return [prepare_output(None, length, name) for name in names]

    if len(out) != len(names):
        raise InvalidBufferError(
            "out", f"must hold {len(names)} buffers ({', '.join(names)}), got {len(out)}"
        )

    buffers = [prepare_output(buf, length, name) for buf, name in zip(out, names)]
    if len({id(buf) for buf in buffers}) != len(buffers):
        raise InvalidBufferError("out", "buffers must be distinct")
    return buffers


def fill_undefined(out: np.ndarray, stop: int, start: int = 0) -> None:
    """Mark out[start:stop] as not yet available."""
    out[start:stop] = np.nan


def to_nullable(values: Any) -> List[Optional[float]]:
    """
    Convert a series to a list with None in place of NaN.

    Used where results leave Python as JSON, which has no NaN.
    """
    return [None if np.isnan(value) else float(value) for value in np.asarray(values, dtype=np.float64)]
