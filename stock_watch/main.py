# stock_watch/main.py

"""Entry point for the stock_watch command line."""

import argparse
import logging
import sys
from pathlib import Path

from stock_watch.config.logging_config import setup_logging

logger = logging.getLogger("stock_watch.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="stock_watch",
        description="Track new and restocked items on a retailer's in-stock listing.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Also show progress (INFO) messages on stderr.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    run = commands.add_parser(
        "run",
        help=(
            "Check for new merchandise, storing the item data "
            "and timestamp for this check."
        ),
    )
    run.add_argument(
        "-d",
        "--db",
        required=True,
        type=Path,
        dest="db_path",
        help=(
            "Path to the database file. The first run creates it; "
            "later runs compare the current stock against it."
        ),
    )
    run.add_argument(
        "--debug-html",
        default=None,
        type=Path,
        dest="debug_html",
        help="Directory to write time-stamped html into when new items are found.",
    )

    export = commands.add_parser(
        "current-as-csv",
        help="Print all known items seen in the last 30 days as CSV.",
    )
    export.add_argument(
        "-d",
        "--db",
        required=True,
        type=Path,
        dest="db_path",
        help="Path to a database created by the 'run' command.",
    )
    export.add_argument(
        "-o",
        "--out",
        default=None,
        type=Path,
        help="Output file (default: stdout).",
    )
    return parser


def main() -> None:
    """Dispatch to the requested subcommand and exit with its status."""
    args = _build_parser().parse_args()

    log_file = setup_logging(logging.INFO if args.verbose else None)
    logger.info("stock_watch %s starting, log file: %s", args.command, log_file)

    from stock_watch.cli.runner import run_current_as_csv, run_daily_check

    if args.command == "run":
        exit_code = run_daily_check(args.db_path, args.debug_html)
    else:
        exit_code = run_current_as_csv(args.db_path, args.out)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
