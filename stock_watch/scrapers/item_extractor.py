# stock_watch/scrapers/item_extractor.py

"""Turns the listing HTML into Item records keyed by product id."""

import json
import logging
from typing import Any

from bs4 import BeautifulSoup
from bs4.element import Tag

from stock_watch.config.settings import Settings
from stock_watch.models.item import Item, ItemDecodeError
from stock_watch.storage.file_manager import FileManager


def load_layout(name: str | None = None) -> dict[str, str]:
    """Load the node selectors for a listing layout from selectors.json."""
    with open(Settings.SELECTORS_PATH) as f:
        all_layouts: dict[str, Any] = json.load(f)
    result: dict[str, str] = all_layouts.get(
        name or Settings.LISTING_LAYOUT, {}
    )
    return result


class ItemExtractor:
    """Extract products from the retailer's listing grid.

    Each product node carries a JSON payload attribute (analytics data)
    and a separate anchor with a relative product link. Nodes missing
    either are skipped. Nodes whose payload cannot be decoded are logged,
    dumped through :class:`FileManager`, and skipped.
    """

    def __init__(
        self,
        layout: dict[str, str] | None = None,
        base_origin: str | None = None,
        file_manager: FileManager | None = None,
    ) -> None:
        self.logger = logging.getLogger("stock_watch.extractor")
        self.selectors: dict[str, str] = (
            layout if layout is not None else load_layout()
        )
        self.base_origin: str = (
            base_origin
            if base_origin is not None
            else Settings.BASE_ORIGIN
        ).rstrip("/")
        self.file_manager = file_manager or FileManager()

    def _find_item_parts(self, node: Tag) -> tuple[str, str] | None:
        """Return ``(payload, absolute_link)`` or ``None`` if incomplete."""
        payload_el = node.select_one(self.selectors["payload"])
        if payload_el is None:
            return None
        payload = payload_el.get(self.selectors["payload_attr"])
        if not isinstance(payload, str):
            return None

        link_el = node.select_one(self.selectors["link"])
        if link_el is None:
            return None
        href = link_el.get("href")
        if not isinstance(href, str):
            return None
        return payload, f"{self.base_origin}{href}"

    def _dump_payload(self, index: int, payload: str) -> None:
        try:
            self.file_manager.write_item_payload(index, payload)
        except OSError as exc:
            self.logger.error(
                "Could not save payload %d: %s", index, exc
            )

    def extract(self, html_text: str) -> dict[str, Item]:
        """Parse ``html_text`` and return items indexed by id.

        When the page lists the same id twice, the later node wins.
        """
        soup = BeautifulSoup(html_text, "lxml")
        nodes = soup.select(self.selectors["product"])
        items: dict[str, Item] = {}
        skipped = 0

        for index, node in enumerate(nodes):
            parts = self._find_item_parts(node)
            if parts is None:
                skipped += 1
                continue
            payload, link = parts
            try:
                item = Item.from_json(payload)
            except ItemDecodeError as exc:
                self.logger.error(
                    "Error parsing item %d: %s", index, exc
                )
                self._dump_payload(index, payload)
                continue
            item.link = link
            items[item.id] = item

        self.logger.info(
            "Extracted %d items from %d product nodes (%d incomplete)",
            len(items),
            len(nodes),
            skipped,
        )
        return items
