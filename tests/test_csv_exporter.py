# tests/test_csv_exporter.py

"""Tests for the 30-day CSV export."""

import csv
import io
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from stock_watch.models.item import FIELD_NAMES, Item
from stock_watch.storage.csv_exporter import (
    ExportError,
    export_current,
    read_csv,
    write_csv,
)
from stock_watch.storage.item_store import ItemStore

T = 1_700_000_000
DAY = 86_400


def _item(item_id: str, last_seen: int, price: float | str = 10.0) -> Item:
    return Item(
        id=item_id,
        name=f"Item {item_id}",
        price=price,
        category="Racks",
        brand="Titan Fitness",
        position="1",
        list_name="in-stock-items",
        link=f"https://shop.example.com/p/{item_id}.html",
        last_seen=last_seen,
    )


class TestExportCurrent(unittest.TestCase):
    """Window selection and destinations."""

    def setUp(self) -> None:
        self.tmp_dir = Path(tempfile.mkdtemp())
        self.addCleanup(shutil.rmtree, self.tmp_dir, ignore_errors=True)
        self.store = ItemStore(self.tmp_dir / "items.db")
        for item in (
            _item("recent", T - 29 * DAY),
            _item("edge", T - 30 * DAY),
            _item("stale", T - 31 * DAY),
            _item("now", T),
        ):
            self.store.insert(item)

    def tearDown(self) -> None:
        self.store.close()

    def _exported_ids(self, path: Path) -> list[str]:
        with open(path, newline="", encoding="utf-8") as f:
            return [row["id"] for row in csv.DictReader(f)]

    def test_window_bounds(self) -> None:
        """29 days back is in, 31 days back is out, now is excluded."""
        out = self.tmp_dir / "out.csv"
        count = export_current(self.store, T, out)
        ids = self._exported_ids(out)
        self.assertEqual(count, 2)
        self.assertIn("recent", ids)
        self.assertIn("edge", ids)
        self.assertNotIn("stale", ids)
        self.assertNotIn("now", ids)

    def test_header_in_field_order(self) -> None:
        out = self.tmp_dir / "out.csv"
        export_current(self.store, T, out)
        with open(out, newline="", encoding="utf-8") as f:
            header = next(csv.reader(f))
        self.assertEqual(tuple(header), FIELD_NAMES)

    def test_writes_to_stdout_without_path(self) -> None:
        with patch("sys.stdout", new_callable=io.StringIO) as fake_out:
            count = export_current(self.store, T)
        self.assertEqual(count, 2)
        rows = list(csv.DictReader(io.StringIO(fake_out.getvalue())))
        self.assertEqual({r["id"] for r in rows}, {"recent", "edge"})

    def test_unwritable_destination_raises(self) -> None:
        missing = self.tmp_dir / "no-such-dir" / "out.csv"
        with self.assertRaises(ExportError):
            export_current(self.store, T, missing)

    def test_empty_window_writes_header_only(self) -> None:
        out = self.tmp_dir / "out.csv"
        count = export_current(self.store, T + 365 * DAY, out)
        self.assertEqual(count, 0)
        self.assertEqual(self._exported_ids(out), [])


class TestCsvRoundTrip(unittest.TestCase):
    """Reading exported rows back."""

    def test_round_trip_preserves_fields(self) -> None:
        items = [
            _item("1", T, price=19.5),
            _item("2", T - 5, price="$10 - $20"),
            _item("3", T - 9, price=20.0),
        ]
        items[1].name = 'Rack, "Pro" edition'
        items[2].back_in_stock = True

        buf = io.StringIO()
        write_csv(items, buf)
        buf.seek(0)
        self.assertEqual(read_csv(buf), items)

    def test_row_serialisation_failure_is_fatal(self) -> None:
        """A writer error aborts the export instead of skipping the row."""

        class _BrokenStream(io.StringIO):
            def write(self, s: str) -> int:
                if "Item 2" in s:
                    raise OSError("device full")
                return super().write(s)

        with self.assertRaises(ExportError):
            write_csv([_item("1", T), _item("2", T)], _BrokenStream())


if __name__ == "__main__":
    unittest.main()
