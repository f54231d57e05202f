"""
critscore CLI — Score collected signals.

Usage:
    critscore --config CONFIG [FLAGS] IN_CSV OUT_CSV

IN_CSV must be a csv file or - to read from stdin.
OUT_CSV must be a csv file or - to write to stdout.

Every row of IN_CSV is written to OUT_CSV with its score appended as a
new last column, ordered by descending score. Rows with equal scores
keep their input order.

Exit status is 0 on success and 2 on any error. All fatal checks on
the config and header run before the first row is scored.
"""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from typing import Optional

from .. import __version__
from ..config import load_config
from ..domain import ScorerError
from ..log import ENV_DEV, ENVS, LEVELS, configure_logging
from ..ranking.scorer import build_algorithm
from .outfile import STDIO_NAME, open_input, open_output
from .pipeline import generate_column_name, run_pipeline

logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_ERROR = 2


# =============================================================================
# PARSER
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="critscore",
        description="Scores collected signals for each record in IN_CSV.",
    )
    parser.add_argument(
        "in_csv",
        metavar="IN_CSV",
        help="input csv file, or - to read from stdin",
    )
    parser.add_argument(
        "out_csv",
        metavar="OUT_CSV",
        help="output csv file, or - to write to stdout",
    )
    parser.add_argument(
        "--config",
        default="",
        help="the filename of the config (required)",
    )
    parser.add_argument(
        "--column",
        default="",
        help="the name of the output column",
    )
    parser.add_argument(
        "--log",
        default="INFO",
        type=str.upper,
        choices=LEVELS,
        metavar="LEVEL",
        help="set the level of logging (default: INFO)",
    )
    parser.add_argument(
        "--log-env",
        default=ENV_DEV,
        choices=ENVS,
        help="set the logging format: dev (text) or json (default: dev)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="overwrite OUT_CSV if it already exists",
    )
    parser.add_argument(
        "--append",
        action="store_true",
        help="append to OUT_CSV if it already exists",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


# =============================================================================
# COMMAND
# =============================================================================

def cmd_score(args: argparse.Namespace) -> int:
    """Load the config, then score IN_CSV into OUT_CSV."""
    if not args.config:
        logger.error("Must have a config file set")
        return EXIT_ERROR

    try:
        config = load_config(args.config)
        algorithm = build_algorithm(config)
    except ScorerError as e:
        logger.error("Failed to prepare the algorithm from %s: %s", args.config, e)
        return EXIT_ERROR

    column = generate_column_name(args.config, args.column)

    if args.in_csv == STDIO_NAME:
        logger.info("Reading from stdin")
    else:
        logger.debug("Reading from file %s", args.in_csv)

    try:
        with open_input(args.in_csv) as in_file, \
                open_output(args.out_csv, force=args.force, append=args.append) as out_file:
            result = run_pipeline(
                reader=csv.reader(in_file),
                writer=csv.writer(out_file, lineterminator="\n"),
                algorithm=algorithm,
                column=column,
            )
    except ScorerError as e:
        logger.error("Failed to score %s: %s", args.in_csv, e)
        return EXIT_ERROR
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        logger.error("I/O failure: %s", e)
        return EXIT_ERROR

    logger.debug("Wrote %d rows with column %s", result.rows_scored, column)
    return EXIT_OK


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log, env=args.log_env)
    return cmd_score(args)


if __name__ == "__main__":
    sys.exit(main())
