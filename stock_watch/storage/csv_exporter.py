# stock_watch/storage/csv_exporter.py

"""Exports recently seen items to CSV and reads such CSV back."""

import csv
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import IO

from stock_watch.config.settings import Settings
from stock_watch.models.item import FIELD_NAMES, Item
from stock_watch.storage.item_store import ItemStore

logger = logging.getLogger("stock_watch.export")


class ExportError(RuntimeError):
    """Raised when the CSV destination cannot be opened or written."""


def _fmt_ts(ts: int) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def write_csv(items: list[Item], stream: IO[str]) -> int:
    """Write a header row and one row per item; return the row count."""
    writer = csv.DictWriter(stream, fieldnames=list(FIELD_NAMES))
    writer.writeheader()
    count = 0
    for item in items:
        try:
            writer.writerow(item.to_row())
        except (csv.Error, OSError) as exc:
            logger.error(
                "Failed to write item as csv %s: %s", item.name, exc
            )
            raise ExportError(
                f"CSV Data failure for {item.name!r}: {exc}"
            ) from exc
        count += 1
    try:
        stream.flush()
    except OSError as exc:
        raise ExportError(f"cannot flush CSV output: {exc}") from exc
    return count


def read_csv(stream: IO[str]) -> list[Item]:
    """Parse CSV produced by :func:`write_csv` back into items."""
    return [Item.from_row(row) for row in csv.DictReader(stream)]


def export_current(
    store: ItemStore,
    now: int,
    out_path: Path | None = None,
    window: int | None = None,
) -> int:
    """Export items seen in ``[now - window, now)`` as CSV.

    Writes to ``out_path`` when given, otherwise to stdout. Returns the
    number of rows written.
    """
    span = Settings.EXPORT_WINDOW if window is None else window
    start = now - span
    logger.debug(
        "Looking up items between %s and %s. total: %d",
        _fmt_ts(start),
        _fmt_ts(now),
        store.count(),
    )
    items = store.items_seen_between(start, now)

    if out_path is None:
        try:
            count = write_csv(items, sys.stdout)
        except OSError as exc:
            logger.error("Failed to write CSV to stdout: %s", exc)
            raise ExportError(f"cannot write CSV to stdout: {exc}") from exc
    else:
        try:
            f = open(out_path, "w", newline="", encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to create file at %s: %s", out_path, exc)
            raise ExportError(f"cannot create {out_path}: {exc}") from exc
        with f:
            count = write_csv(items, f)

    logger.info(
        "Exported %d items seen since %s to %s",
        count,
        _fmt_ts(start),
        out_path or "stdout",
    )
    return count
