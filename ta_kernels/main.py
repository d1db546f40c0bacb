#!/usr/bin/env python3
"""
Technical Indicator Builder.

Loads OHLCV history from CSV and runs every indicator kernel over it.

Usage (Python API):
    from ta_kernels import build_indicators
    df = build_indicators("SPY.csv")

    # Custom parameters and a train/test split
    train_df, test_df = build_indicators("SPY.csv", config="params.yaml", test_days=60)

Usage (CLI):
    python -m ta_kernels --input_file SPY.csv --output_file SPY_ind.csv
    python -m ta_kernels -i SPY.csv -c params.yaml --json
    python -m ta_kernels -i SPY.csv -o SPY --test 60  # Creates SPY_train.csv and SPY_test.csv
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import pandas as pd

from ta_kernels.buffers import to_nullable
from ta_kernels.cache import CalculationCache
from ta_kernels.config import IndicatorConfig, load_indicator_config
from ta_kernels.exceptions import IndicatorError
from ta_kernels.frame import add_all_indicators, indicator_columns
from ta_kernels.loader import load_and_prepare
from ta_kernels.validators import validate_all

logger = logging.getLogger(__name__)


def split_train_test(
    df: pd.DataFrame,
    test_days: int,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Hold out the last test_days rows.

    Indicators are calculated on the full frame first, so test rows carry
    values warmed up on the train rows.

    Returns:
        (train_df, test_df), both copies.

    Raises:
        ValueError: If test_days leaves either side empty.
    """
    if not 0 < test_days < len(df):
        raise ValueError(
            f"test_days must be between 1 and {len(df) - 1} for {len(df)} rows, got {test_days}"
        )

    cut = len(df) - test_days
    return df.iloc[:cut].copy(), df.iloc[cut:].copy()


def split_output_paths(output_file: Union[str, Path]) -> Tuple[Path, Path]:
    """Name the _train and _test files next to a base output path."""
    base = Path(output_file)
    suffix = base.suffix or ".csv"
    return (
        base.with_name(f"{base.stem}_train{suffix}"),
        base.with_name(f"{base.stem}_test{suffix}"),
    )


def save_to_csv(df: pd.DataFrame, output_file: Union[str, Path]) -> None:
    """Write a frame without its index, creating parent directories."""
    path = Path(output_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    logger.info(f"Wrote {len(df)} rows to {path}")


def build_indicators(
    input_file: str,
    output_file: Optional[str] = None,
    config: Optional[Union[IndicatorConfig, str]] = None,
    test_days: Optional[int] = None,
    cache: Optional[CalculationCache] = None,
) -> Union[pd.DataFrame, Tuple[pd.DataFrame, pd.DataFrame]]:
    """
    Calculate every indicator for the bars in a CSV file.

    Args:
        input_file: CSV with Date, Open, High, Low, Close and Volume columns.
        output_file: Where to write the result. With test_days, the base
            name for the _train and _test files.
        config: Indicator parameters, or the path of a YAML file
            overriding them. Defaults if None.
        test_days: Number of trailing rows to return as a test set.
        cache: Calculation cache shared across calls.

    Returns:
        The input bars plus indicator columns, or a (train_df, test_df)
        tuple when test_days is given.

    Raises:
        LoaderError: If the file is missing, empty or not CSV.
        ValidationError: If the bars fail validation.
        ConfigError: If the config file is invalid.
        ValueError: If test_days is out of range.
    """
    if isinstance(config, str):
        config = load_indicator_config(config)

    df = validate_all(load_and_prepare(input_file))
    df = add_all_indicators(df, config, cache=cache)
    logger.info(f"Calculated indicators for {len(df)} rows from {input_file}")

    if test_days is None:
        if output_file:
            save_to_csv(df, output_file)
        return df

    train_df, test_df = split_train_test(df, test_days)
    if output_file:
        for part, path in zip((train_df, test_df), split_output_paths(output_file)):
            save_to_csv(part, path)
    return train_df, test_df


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="ta_kernels",
        description="Calculate technical indicators from OHLCV CSV data.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m ta_kernels --input_file SPY.csv
  python -m ta_kernels --input_file SPY.csv --output_file SPY_indicators.csv
  python -m ta_kernels -i data.csv -c params.yaml --json

Indicators calculated (default parameters):
  Moving averages: sma_20, ema_20, wma_20
  Bands:           bb_upper_20_2, bb_mid_20_2, bb_lower_20_2
  Momentum:        rsi_14, macd_12_26_9, macd_signal_12_26_9, macd_hist_12_26_9,
                   stoch_k_14_3, stoch_d_14_3
  Volume:          vwap, obv
""",
    )

    parser.add_argument(
        "--input_file", "-i", required=True, help="CSV file with Date and OHLCV columns"
    )
    parser.add_argument(
        "--output_file", "-o", default=None,
        help="Where to write the result (prints a summary when omitted)",
    )
    parser.add_argument(
        "--config", "-c", default=None, help="YAML file overriding indicator parameters"
    )
    parser.add_argument(
        "--test", "-t", type=int, default=None, metavar="N",
        help="Hold out the last N rows as a test set (writes _train and _test files)",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Print indicator series as JSON (NaN as null) instead of a summary",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable info logging")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    return parser


def _date_span(df: pd.DataFrame) -> str:
    return f"{df['Date'].iloc[0]} to {df['Date'].iloc[-1]}"


def _print_summary(df: pd.DataFrame, columns: List[str], input_file: str) -> None:
    print(f"Processed {len(df)} rows from {input_file}")
    print(f"Date range: {_date_span(df)}")
    print(f"Indicators added: {len(columns)}")
    print("\nLatest indicator values:")

    latest = df.iloc[-1]
    for col in columns:
        value = latest[col]
        print(f"  {col}: {value:.4f}" if pd.notna(value) else f"  {col}: n/a")


def _print_split(train_df: pd.DataFrame, test_df: pd.DataFrame, input_file: str) -> None:
    print(f"Processed {len(train_df) + len(test_df)} rows from {input_file}")
    for label, part in (("Train", train_df), ("Test", test_df)):
        print(f"{label} set: {len(part)} rows")
        print(f"  Date range: {_date_span(part)}")


def _json_payload(df: pd.DataFrame, columns: List[str]) -> Dict[str, Any]:
    return {
        "rows": len(df),
        "dates": [d.isoformat() for d in df["Date"]],
        "indicators": {col: to_nullable(df[col]) for col in columns},
    }


def _print_json(df: pd.DataFrame, columns: List[str]) -> None:
    print(json.dumps(_json_payload(df, columns), indent=2))


def _print_split_json(train_df: pd.DataFrame, test_df: pd.DataFrame, columns: List[str]) -> None:
    output = {
        "train": _json_payload(train_df, columns),
        "test": _json_payload(test_df, columns),
    }
    print(json.dumps(output, indent=2))


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for CLI.

    Args:
        args: Command line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    parsed_args = create_parser().parse_args(args)
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        config = (
            load_indicator_config(parsed_args.config)
            if parsed_args.config
            else IndicatorConfig()
        )

        result = build_indicators(
            input_file=parsed_args.input_file,
            output_file=parsed_args.output_file,
            config=config,
            test_days=parsed_args.test,
        )
    except IndicatorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("Unexpected error while building indicators")
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1

    columns = indicator_columns(config)
    if parsed_args.test is not None:
        if parsed_args.json:
            _print_split_json(*result, columns)
        else:
            _print_split(*result, parsed_args.input_file)
        written = split_output_paths(parsed_args.output_file) if parsed_args.output_file else ()
    else:
        if parsed_args.json:
            _print_json(result, columns)
        else:
            _print_summary(result, columns, parsed_args.input_file)
        written = (parsed_args.output_file,) if parsed_args.output_file else ()

    if not parsed_args.json:
        for path in written:
            print(f"Output saved to: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
