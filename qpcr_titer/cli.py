"""Command line interface for standard curve fitting and titer calculation.

Usage:
    qpcr-titer fit [--data standards.csv | --point CQ SQ ...]
    qpcr-titer predict --cq 20
    qpcr-titer titer --cq 20 --genome-length 33000 --dilution-factor 400
    qpcr-titer titer --sq 0.05 --genome-length 33000 --dilution-factor 400

Without --data/--point the built-in 4-point standard curve is used.
Exit code 0 on success, 1 on an analysis error, 2 on a usage error.
"""

import argparse
import logging
import sys

import pandas as pd

from qpcr_titer.constants import (
    DEFAULT_DILUTION_FACTOR,
    DEFAULT_GENOME_LENGTH_BP,
    DEFAULT_UNKNOWN_CQ,
)
from qpcr_titer.curve import CurveFitter
from qpcr_titer.errors import InvalidDataError, QPCRAnalysisError
from qpcr_titer.prediction import TiterPredictor
from qpcr_titer.quality_control import CurveQualityControl
from qpcr_titer.session import default_dataset
from qpcr_titer.table import StandardCurveTable
from qpcr_titer.utils import (
    format_predicted_sq,
    format_regression_report,
    format_titer,
)

logger = logging.getLogger("qpcr_titer")


def read_standards_csv(path) -> pd.DataFrame:
    """Read a CSV with a Cq/Ct column and an SQ/Quantity column.

    Instrument exports with a preamble above the header row are accepted.
    """
    try:
        return StandardCurveTable.read(path)
    except InvalidDataError as e:
        raise InvalidDataError(f"{path}: {e}") from e


def _load_dataset(args) -> pd.DataFrame:
    if args.data:
        return read_standards_csv(args.data)
    if args.point:
        return CurveFitter.coerce_dataset([tuple(p) for p in args.point])
    return default_dataset()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qpcr-titer",
        description="qPCR standard curve analysis and virus titer calculation",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")

    data_args = argparse.ArgumentParser(add_help=False)
    source = data_args.add_mutually_exclusive_group()
    source.add_argument("--data", help="CSV file with Cq and SQ columns")
    source.add_argument(
        "--point", action="append", nargs=2, type=float, metavar=("CQ", "SQ"),
        help="one standard point; repeat for each point",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "fit", parents=[data_args], help="fit the standard curve and report efficiency"
    )

    predict = subparsers.add_parser(
        "predict", parents=[data_args], help="predict SQ of an unknown sample from its Cq"
    )
    predict.add_argument("--cq", type=float, default=DEFAULT_UNKNOWN_CQ,
                         help="Cq value of the unknown sample")

    titer = subparsers.add_parser(
        "titer", parents=[data_args], help="convert a predicted SQ into a virus titer"
    )
    given = titer.add_mutually_exclusive_group()
    given.add_argument("--cq", type=float, help="Cq value of the unknown sample")
    given.add_argument("--sq", type=float, help="use this SQ instead of predicting one")
    titer.add_argument("--genome-length", type=float, default=DEFAULT_GENOME_LENGTH_BP,
                       help="viral genome length (bp)")
    titer.add_argument("--dilution-factor", type=float, default=DEFAULT_DILUTION_FACTOR,
                       help="dilution factor")
    return parser


def run_fit(args) -> None:
    fitted = CurveFitter.fit(_load_dataset(args))
    print(format_regression_report(fitted))
    for row in CurveQualityControl.assess(fitted):
        if row["severity"] != "ok":
            logger.warning("%s: %s", row["metric"], row["status"])


def run_predict(args) -> None:
    fitted = CurveFitter.fit(_load_dataset(args))
    print(format_predicted_sq(TiterPredictor.predict_sq(fitted, args.cq)))


def run_titer(args) -> None:
    if args.sq is not None:
        predicted_sq = args.sq
    else:
        cq = args.cq if args.cq is not None else DEFAULT_UNKNOWN_CQ
        fitted = CurveFitter.fit(_load_dataset(args))
        predicted_sq = TiterPredictor.predict_sq(fitted, cq)
        print(format_predicted_sq(predicted_sq))
    titer = TiterPredictor.compute_titer(predicted_sq, args.genome_length, args.dilution_factor)
    print(format_titer(titer))


COMMANDS = {"fit": run_fit, "predict": run_predict, "titer": run_titer}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        COMMANDS[args.command](args)
    except QPCRAnalysisError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
