# stock_watch/services/change_detector.py

"""Compares freshly scraped items with the store and records notices."""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from stock_watch.config.settings import Settings
from stock_watch.models.item import Item, format_price
from stock_watch.storage.item_store import ItemStore

logger = logging.getLogger("stock_watch.detector")


@dataclass
class RefreshReport:
    """Notices collected during one pass over the scraped items."""

    started_at: datetime
    lines: list[str] = field(default_factory=list)
    inserted: int = 0
    updated: int = 0

    @property
    def header(self) -> str:
        """Report title stamped with the run start time."""
        return f"Restock report for {self.started_at:%Y-%m-%d %H:%M:%S %z}".rstrip()

    def render(self) -> list[str]:
        """Header plus notice lines, or nothing when there is no notice."""
        if not self.lines:
            return []
        return [self.header, *self.lines]


def notice_line(item: Item) -> str:
    """Format the report line announcing a new or refreshed item."""
    return f"new item: {item.name}: {format_price(item.price)} ({item.link})"


class ChangeDetector:
    """Detect items that are new or back after a long absence.

    An item is reported when its id is unknown, or when it was last seen
    more than ``threshold`` seconds before ``now``. Known items are
    overwritten with the new observation either way.
    """

    def __init__(self, threshold: int | None = None) -> None:
        self.threshold: int = (
            Settings.REFRESH_THRESHOLD if threshold is None else threshold
        )

    def process(
        self,
        new_items: dict[str, Item],
        store: ItemStore,
        now: int,
        started_at: datetime | None = None,
        report: RefreshReport | None = None,
    ) -> RefreshReport:
        """Stamp, compare, and persist ``new_items``; return the notices.

        Each insert or update commits on its own, and its notice is added
        to ``report`` once committed. A :class:`StoreError` propagates and
        leaves earlier commits in place; pass a caller-owned ``report`` to
        keep the notices collected before the failure.
        """
        if report is None:
            report = RefreshReport(
                started_at=started_at or datetime.now().astimezone()
            )

        for new_id, new_item in new_items.items():
            new_item.last_seen = now
            old_item = store.get(new_id)

            if old_item is None:
                store.insert(new_item)
                report.inserted += 1
                report.lines.append(notice_line(new_item))
                continue

            elapsed = now - old_item.last_seen
            refreshed = elapsed > self.threshold
            if elapsed < 0:
                # Clock went backwards; never move last_seen back.
                logger.warning(
                    "Item %s last seen %d seconds in the future",
                    new_id,
                    -elapsed,
                )
                new_item.last_seen = old_item.last_seen
            store.update(new_item)
            report.updated += 1
            if refreshed:
                logger.info(
                    "Item %s back after %d seconds", new_id, elapsed
                )
                report.lines.append(notice_line(new_item))

        logger.info(
            "Processed %d items: %d new, %d updated, %d reported",
            len(new_items),
            report.inserted,
            report.updated,
            len(report.lines),
        )
        return report
