"""
Custom exceptions for the ta_kernels package.

Kernel precondition failures carry an ErrorKind so callers can branch on the
category of failure without matching on exception classes. Loader, frame
validation and configuration errors share the same IndicatorError base.
"""

from enum import Enum
from typing import List


class ErrorKind(Enum):
    """Category of a kernel precondition failure."""

    INVALID_BUFFER = "invalid_buffer"
    INVALID_PERIOD = "invalid_period"
    INVALID_LENGTH = "invalid_length"
    INVALID_PARAMETER = "invalid_parameter"


class IndicatorError(Exception):
    """Base exception for all indicator-related errors."""

    pass


# =============================================================================
# Kernel errors
# =============================================================================


class KernelError(IndicatorError):
    """Exception raised when a kernel rejects its inputs."""

    kind: ErrorKind

    def __init__(self, kind: ErrorKind, details: str = "") -> None:
        self.kind = kind
        message = kind.value.replace("_", " ")
        if details:
            message += f": {details}"
        super().__init__(message)


class InvalidBufferError(KernelError):
    """Exception raised when an input or output buffer is missing or malformed."""

    def __init__(self, name: str, details: str = "") -> None:
        self.name = name
        message = f"'{name}'"
        if details:
            message += f" {details}"
        super().__init__(ErrorKind.INVALID_BUFFER, message)


class InvalidPeriodError(KernelError):
    """Exception raised when a period parameter is not usable."""

    def __init__(self, name: str, details: str = "") -> None:
        self.name = name
        message = f"'{name}'"
        if details:
            message += f" {details}"
        super().__init__(ErrorKind.INVALID_PERIOD, message)


class InvalidLengthError(KernelError):
    """Exception raised when series lengths do not fit the requested window."""

    def __init__(self, details: str) -> None:
        super().__init__(ErrorKind.INVALID_LENGTH, details)


class InvalidParameterError(KernelError):
    """Exception raised when a non-period numeric parameter is out of range."""

    def __init__(self, name: str, details: str = "") -> None:
        self.name = name
        message = f"'{name}'"
        if details:
            message += f" {details}"
        super().__init__(ErrorKind.INVALID_PARAMETER, message)


# =============================================================================
# Host errors
# =============================================================================


class LoaderError(IndicatorError):
    """Raised when a price CSV cannot be read into bars."""

    pass


class ValidationError(IndicatorError):
    """Raised when a price frame is unfit for indicator calculation."""

    pass


class ConfigError(IndicatorError):
    """Raised when indicator parameters fail validation."""

    def __init__(self, source: str, details: str = "") -> None:
        self.source = source
        message = f"Invalid indicator configuration ({source})"
        if details:
            message += f": {details}"
        super().__init__(message)


class MissingColumnError(ValidationError):
    """Raised when the frame lacks one of the OHLCV columns."""

    def __init__(self, missing_columns: List[str]) -> None:
        self.missing_columns = missing_columns
        message = f"Price data is missing required OHLCV columns: {', '.join(missing_columns)}"
        super().__init__(message)


class InvalidDataTypeError(ValidationError):
    """Raised when a price or volume column holds non-numeric values."""

    def __init__(self, column: str, details: str = "") -> None:
        self.column = column
        message = f"Column '{column}' cannot be used as a numeric series"
        if details:
            message += f": {details}"
        super().__init__(message)


class DuplicateDateError(ValidationError):
    """Raised when two bars share a date."""

    def __init__(self, duplicate_dates: list) -> None:
        self.duplicate_dates = duplicate_dates
        message = f"Duplicate bar dates: {duplicate_dates[:5]}"
        if len(duplicate_dates) > 5:
            message += f" (and {len(duplicate_dates) - 5} more)"
        super().__init__(message)


class NonMonotonicDateError(ValidationError):
    """Raised when bars are not in chronological order."""

    def __init__(self, details: str = "") -> None:
        message = "Bar dates must be strictly increasing"
        if details:
            message += f": {details}"
        super().__init__(message)


class EmptyDataError(ValidationError):
    """Raised when the frame holds no bars."""

    def __init__(self) -> None:
        super().__init__("Price data has no bars")


class FileNotFoundError(LoaderError):
    """Raised when the price CSV does not exist."""

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        super().__init__(f"Price file not found: {file_path}")


class EmptyFileError(LoaderError):
    """Raised when the price CSV holds no data."""

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        super().__init__(f"Price file has no data: {file_path}")
