# stock_watch/cli/runner.py

"""Headless command implementations for the ``run`` and CSV commands."""

import logging
import sys
import time
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.text import Text

from stock_watch.scrapers.html_fetcher import FetchError, HtmlFetcher
from stock_watch.scrapers.item_extractor import ItemExtractor
from stock_watch.services.change_detector import ChangeDetector, RefreshReport
from stock_watch.storage.csv_exporter import export_current
from stock_watch.storage.file_manager import FileManager
from stock_watch.storage.item_store import ItemStore

logger = logging.getLogger("stock_watch.cli")

# Stderr console for status messages so stdout carries only the report/CSV
_err = Console(stderr=True)


def _write_debug_html(
    file_manager: FileManager, text: str, debug_dir: Path, started_at: datetime
) -> None:
    try:
        path = file_manager.write_debug_html(text, debug_dir, started_at)
    except OSError as exc:
        logger.error("error writing debug html %s", exc)
        return
    _err.print(f"[dim]html available at 'file://{path.resolve()}'[/dim]")


def daily_new_item_check(
    db_path: Path,
    debug_dir: Path | None = None,
    fetcher: HtmlFetcher | None = None,
    extractor: ItemExtractor | None = None,
    detector: ChangeDetector | None = None,
    file_manager: FileManager | None = None,
    report: RefreshReport | None = None,
) -> RefreshReport:
    """Fetch, extract, compare, and persist; return the run's report.

    Notices land in ``report`` (created when not given) as items commit,
    so a caller holding it still sees them if the store fails part way.
    The debug HTML dump is written whenever the report has notices, even
    on such a failure; a failure to write it is only logged.
    """
    if report is None:
        report = RefreshReport(started_at=datetime.now().astimezone())
    file_manager = file_manager or FileManager()

    text = (fetcher or HtmlFetcher()).fetch()
    new_items = (extractor or ItemExtractor(file_manager=file_manager)).extract(text)

    try:
        with ItemStore(db_path) as store:
            now = int(time.time())
            (detector or ChangeDetector()).process(
                new_items, store, now, report=report
            )
    finally:
        if report.lines and debug_dir is not None:
            _write_debug_html(file_manager, text, debug_dir, report.started_at)
    return report


def _print_report(report: RefreshReport) -> None:
    for line in report.render():
        sys.stdout.write(line + "\n")
    sys.stdout.flush()


def _report_failure(exc: Exception) -> int:
    """Log a failed command and tell the user unless it was the network."""
    if isinstance(exc, FetchError):
        logger.info("Network failure suppressed: %s", exc)
        return 1
    logger.error("Command failed: %s", exc, exc_info=True)
    _err.print(Text(str(exc), style="red"))
    return 1


def run_daily_check(db_path: Path, debug_dir: Path | None) -> int:
    """Run one check cycle and print the report (0=ok, 1=fail).

    Notices for items committed before a failure are printed ahead of
    the error.
    """
    report = RefreshReport(started_at=datetime.now().astimezone())
    try:
        daily_new_item_check(db_path, debug_dir, report=report)
    except (RuntimeError, OSError) as exc:
        _print_report(report)
        return _report_failure(exc)
    _print_report(report)
    return 0


def run_current_as_csv(db_path: Path, out_path: Path | None) -> int:
    """Export the last 30 days of items as CSV (0=ok, 1=fail)."""
    try:
        with ItemStore(db_path) as store:
            count = export_current(store, int(time.time()), out_path)
    except (RuntimeError, OSError) as exc:
        return _report_failure(exc)
    if out_path is not None:
        _err.print(f"[green]✓ Exported {count:,} items to {out_path}[/green]")
    return 0
