# stock_watch/models/item.py

"""Item data model shared by the extractor, store, and exporter."""

import json
import math
from dataclasses import dataclass
from typing import Any

# A single numeric value, or a textual range such as "$10 - $20"
Price = float | str

# Column / payload keys in record order
FIELD_NAMES: tuple[str, ...] = (
    "id",
    "name",
    "price",
    "category",
    "brand",
    "position",
    "list",
    "link",
    "last_seen",
    "back_in_stock",
)

_REQUIRED_TEXT_KEYS: tuple[str, ...] = (
    "id", "name", "category", "brand", "position", "list",
)


class ItemDecodeError(RuntimeError):
    """Raised when a product payload cannot be turned into an Item."""


@dataclass
class Item:
    """A single product listing as scraped and persisted."""

    id: str
    name: str
    price: Price = 0.0
    category: str = ""
    brand: str = ""
    position: str = ""
    list_name: str = ""
    link: str = ""
    last_seen: int = 0
    back_in_stock: bool = False

    @classmethod
    def from_json(cls, payload: str) -> "Item":
        """Decode the embedded JSON product payload.

        ``link`` and ``last_seen`` are not part of the payload proper;
        they are taken if present and otherwise left at their defaults.
        """
        try:
            data: Any = json.loads(payload)
        except ValueError as exc:
            # JSONDecodeError, or an integer past the int-digit limit
            raise ItemDecodeError(f"invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ItemDecodeError(
                f"expected a JSON object, got {type(data).__name__}"
            )

        values: dict[str, str] = {}
        for key in _REQUIRED_TEXT_KEYS:
            if key not in data:
                raise ItemDecodeError(f"missing field '{key}'")
            values[key] = _text_field(key, data[key])

        last_seen = data.get("last_seen", 0)
        if isinstance(last_seen, bool) or not isinstance(last_seen, int):
            raise ItemDecodeError("field 'last_seen' must be an integer")

        back_in_stock = data.get("back_in_stock", False)
        if not isinstance(back_in_stock, bool):
            raise ItemDecodeError("field 'back_in_stock' must be a boolean")

        link = data.get("link", "")
        if not isinstance(link, str):
            raise ItemDecodeError("field 'link' must be a string")

        return cls(
            id=values["id"],
            name=values["name"],
            price=decode_price(data.get("price")),
            category=values["category"],
            brand=values["brand"],
            position=values["position"],
            list_name=values["list"],
            link=link,
            last_seen=last_seen,
            back_in_stock=back_in_stock,
        )

    def to_row(self) -> dict[str, str]:
        """Flatten to text columns keyed by FIELD_NAMES."""
        return {
            "id": self.id,
            "name": self.name,
            "price": format_price(self.price),
            "category": self.category,
            "brand": self.brand,
            "position": self.position,
            "list": self.list_name,
            "link": self.link,
            "last_seen": str(self.last_seen),
            "back_in_stock": "true" if self.back_in_stock else "false",
        }

    @classmethod
    def from_row(cls, row: dict[str, str]) -> "Item":
        """Rebuild an Item from text columns produced by :meth:`to_row`."""
        try:
            return cls(
                id=row["id"],
                name=row["name"],
                price=parse_price_text(row["price"]),
                category=row["category"],
                brand=row["brand"],
                position=row["position"],
                list_name=row["list"],
                link=row["link"],
                last_seen=int(row["last_seen"]),
                back_in_stock=row["back_in_stock"].strip().lower() == "true",
            )
        except (KeyError, ValueError) as exc:
            raise ItemDecodeError(f"bad item row: {exc}") from exc


def _text_field(key: str, value: Any) -> str:
    """Return a payload string field, accepting integer positions."""
    if isinstance(value, str):
        return value
    if key == "position" and isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise ItemDecodeError(f"field '{key}' must be a string")


def decode_price(value: Any) -> Price:
    """Decode a JSON price value: number first, then range text.

    ``None`` (JSON null or a missing key) becomes ``0.0``.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ItemDecodeError("field 'price' must be a number or string")
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError as exc:
            raise ItemDecodeError(f"price out of range: {exc}") from exc
    if isinstance(value, str):
        return value
    raise ItemDecodeError("field 'price' must be a number or string")


def parse_price_text(text: str) -> Price:
    """Decode a price read back from text, numeric when it parses."""
    try:
        number = float(text)
    except ValueError:
        return text
    return number if math.isfinite(number) else text


def format_price(price: Price) -> str:
    """Render a price the way report lines and CSV rows show it."""
    if isinstance(price, str):
        return price
    if price.is_integer():
        return str(int(price))
    return repr(price)
