# stock_watch/storage/item_store.py

"""SQLite-backed store of every item ever seen on the listing."""

import logging
import sqlite3
from pathlib import Path
from types import TracebackType

from stock_watch.models.item import Item

logger = logging.getLogger("stock_watch.item_store")

# ``price`` is declared without a type so SQLite keeps a REAL single
# value and a TEXT range as-is.
_SCHEMA = """\
CREATE TABLE IF NOT EXISTS items (
    id            TEXT    PRIMARY KEY,
    name          TEXT    NOT NULL,
    price,
    category      TEXT    NOT NULL DEFAULT '',
    brand         TEXT    NOT NULL DEFAULT '',
    position      TEXT    NOT NULL DEFAULT '',
    list          TEXT    NOT NULL DEFAULT '',
    link          TEXT    NOT NULL DEFAULT '',
    last_seen     INTEGER NOT NULL DEFAULT 0,
    back_in_stock INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_items_last_seen
    ON items(last_seen);
"""

_COLUMNS = (
    "id, name, price, category, brand, position, "
    "list, link, last_seen, back_in_stock"
)


class StoreError(RuntimeError):
    """Raised when the item database cannot be read or written."""


def _row_to_item(row: tuple[object, ...]) -> Item:
    price = row[2]
    return Item(
        id=str(row[0]),
        name=str(row[1]),
        price=price if isinstance(price, str) else float(price or 0.0),  # type: ignore[arg-type]
        category=str(row[3]),
        brand=str(row[4]),
        position=str(row[5]),
        list_name=str(row[6]),
        link=str(row[7]),
        last_seen=int(row[8]),  # type: ignore[call-overload]
        back_in_stock=bool(row[9]),
    )


def _item_params(item: Item) -> tuple[object, ...]:
    return (
        item.id,
        item.name,
        item.price,
        item.category,
        item.brand,
        item.position,
        item.list_name,
        item.link,
        item.last_seen,
        int(item.back_in_stock),
    )


class ItemStore:
    """Items keyed by product id, with a ``last_seen`` range index.

    Every write runs in its own transaction and is committed before the
    call returns.
    """

    def __init__(self, db_path: Path) -> None:
        try:
            if str(db_path) != ":memory:":
                db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(db_path))
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(_SCHEMA)
        except (sqlite3.Error, OSError) as exc:
            raise StoreError(
                f"cannot open item database {db_path}: {exc}"
            ) from exc
        logger.debug("ItemStore opened at %s", db_path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> "ItemStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ── Lookups ──────────────────────────────────────────

    def get(self, item_id: str) -> Item | None:
        """Return the stored item with ``item_id``, if any."""
        try:
            row = self._conn.execute(
                f"SELECT {_COLUMNS} FROM items WHERE id = ?",
                (item_id,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"lookup of {item_id!r} failed: {exc}") from exc
        return _row_to_item(row) if row else None

    def items_seen_between(self, start: int, end: int) -> list[Item]:
        """Items with ``start <= last_seen < end``, oldest first."""
        try:
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM items "
                "WHERE last_seen >= ? AND last_seen < ? "
                "ORDER BY last_seen ASC, id ASC",
                (start, end),
            ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"range query failed: {exc}") from exc
        return [_row_to_item(r) for r in rows]

    def count(self) -> int:
        """Total number of stored items."""
        try:
            row = self._conn.execute(
                "SELECT COUNT(*) FROM items"
            ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"count failed: {exc}") from exc
        return int(row[0])

    # ── Writes ───────────────────────────────────────────

    def insert(self, item: Item) -> None:
        """Insert a new item; an existing id is an error."""
        try:
            with self._conn:
                self._conn.execute(
                    f"INSERT INTO items ({_COLUMNS}) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    _item_params(item),
                )
        except sqlite3.Error as exc:
            raise StoreError(f"insert of {item.id!r} failed: {exc}") from exc
        logger.debug("Inserted item %s", item.id)

    def update(self, item: Item) -> None:
        """Overwrite every field of the stored item with the same id."""
        params = _item_params(item)
        try:
            with self._conn:
                cur = self._conn.execute(
                    "UPDATE items SET name = ?, price = ?, category = ?, "
                    "brand = ?, position = ?, list = ?, link = ?, "
                    "last_seen = ?, back_in_stock = ? WHERE id = ?",
                    params[1:] + params[:1],
                )
        except sqlite3.Error as exc:
            raise StoreError(f"update of {item.id!r} failed: {exc}") from exc
        if cur.rowcount == 0:
            raise StoreError(f"update of {item.id!r} failed: no such item")
        logger.debug("Updated item %s", item.id)
