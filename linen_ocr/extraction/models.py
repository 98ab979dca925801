"""Inventory record types produced by the parser."""

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any

ITEM_COLUMNS = [
    "sr_no",
    "item",
    "opening_balance",
    "clean_received",
    "total",
    "soil_sent",
    "closing_balance",
    "remark",
]


def _today() -> str:
    return date.today().isoformat()


@dataclass
class InventoryHeader:
    """Sheet-level details printed above the item table."""

    company: str = ""
    sr_no: str = ""
    contractor_name: str = ""
    date: str = field(default_factory=_today)
    contact_no: str = ""


@dataclass
class LineItem:
    """One row of the linen or uniform table.

    Counts are kept as the strings read from the sheet, so a misread digit
    is preserved for the reviewer instead of being rejected.
    """

    sr_no: int
    item: str
    opening_balance: str = "0"
    clean_received: str = "0"
    total: str = "0"
    soil_sent: str = "0"
    closing_balance: str = "0"
    remark: str = ""


@dataclass
class InventoryRecord:
    """Structured result of parsing one inventory sheet."""

    header: InventoryHeader = field(default_factory=InventoryHeader)
    linen_items: list[LineItem] = field(default_factory=list)
    uniform_items: list[LineItem] = field(default_factory=list)

    @property
    def item_count(self) -> int:
        return len(self.linen_items) + len(self.uniform_items)

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form suitable for ``json.dumps``."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InventoryRecord":
        """Rebuild a record from :meth:`to_dict` output."""
        return cls(
            header=InventoryHeader(**data.get("header", {})),
            linen_items=[LineItem(**item) for item in data.get("linen_items", [])],
            uniform_items=[
                LineItem(**item) for item in data.get("uniform_items", [])
            ],
        )
