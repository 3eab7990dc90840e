"""Command-line interface: forecast errors for the columns of a CSV file.

Usage:
    python main.py --input data.csv --target gdp_growth
    python main.py --input data.csv --target y --predictors spread term --horizon 4
    python main.py --input data.csv --target y --index-col date --output errors.csv

All non-target columns are candidate predictors unless ``--predictors``
is given.  Defaults for ``--pi0``, ``--horizon`` and ``--n-jobs`` come
from ``config/global_config.yml``.
"""

from __future__ import annotations

import argparse
import logging
import sys

import pandas as pd

from rlsforecast.config_loader import get_forecast_defaults, get_global_config
from rlsforecast.models.recursive_forecaster import recursive_hstep_fast
from rlsforecast.models.recursive_ls import SingularDesignError
from rlsforecast.quality.input_validation import InputValidationError

logger = logging.getLogger("rlsforecast.cli")


def _configure_logging(verbose: bool) -> None:
    level_name = "INFO"
    try:
        level_name = str(get_global_config().get("logging", {}).get("level", "INFO"))
    except FileNotFoundError:
        pass
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def build_parser() -> argparse.ArgumentParser:
    defaults = get_forecast_defaults()
    parser = argparse.ArgumentParser(
        description="Out-of-sample h-step-ahead forecast errors by recursive least squares",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--input", "-i", type=str, required=True,
        help="CSV file holding the outcome and predictor columns",
    )
    parser.add_argument(
        "--target", "-t", type=str, required=True,
        help="Name of the outcome column",
    )
    parser.add_argument(
        "--predictors", "-p", type=str, nargs="+", default=None,
        help="Predictor columns (default: every column except the target)",
    )
    parser.add_argument(
        "--index-col", type=str, default=None,
        help="Column to use as row labels (e.g. a date column)",
    )
    parser.add_argument(
        "--pi0", type=float, default=float(defaults["pi0"]),
        help="Fraction of the sample in the first estimation window (default: %(default)s)",
    )
    parser.add_argument(
        "--horizon", "-H", type=int, default=int(defaults["horizon"]),
        help="Forecast horizon h (default: %(default)s)",
    )
    parser.add_argument(
        "--n-jobs", type=int, default=int(defaults["n_jobs"]),
        help="Worker threads across sub-models (default: %(default)s)",
    )
    parser.add_argument(
        "--output", "-o", type=str, default="",
        help="Write the error table to this CSV file instead of stdout",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        df = pd.read_csv(args.input, index_col=args.index_col)
    except (OSError, ValueError) as exc:
        logger.error("Could not read %s: %s", args.input, exc)
        return 1

    if args.target not in df.columns:
        logger.error("Target column %r not found in %s", args.target, args.input)
        return 1

    predictors = args.predictors or [c for c in df.columns if c != args.target]
    missing = [c for c in predictors if c not in df.columns]
    if missing:
        logger.error("Predictor column(s) not found: %s", ", ".join(missing))
        return 1
    if not predictors:
        logger.error("No predictor columns available")
        return 1

    try:
        result = recursive_hstep_fast(
            df[args.target], df[predictors], args.pi0, args.horizon,
            n_jobs=args.n_jobs,
        )
    except (InputValidationError, SingularDesignError) as exc:
        logger.error("%s", exc)
        return 1

    table = result.to_frame()
    if args.output:
        table.to_csv(args.output)
        logger.info("Wrote %d x %d error table to %s", *table.shape, args.output)
    else:
        table.to_csv(sys.stdout)
    return 0
