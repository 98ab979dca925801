"""CSV and JSON export of parsed inventory records.

A single record is written as a human-readable report (title, header block,
one table per item category) that opens cleanly in Excel. Batch runs use
:func:`records_to_rows` instead, which flattens many records into one table.
"""

import csv
import io
import json
from pathlib import Path

from linen_ocr.extraction.models import ITEM_COLUMNS, InventoryRecord, LineItem

REPORT_TITLE = "Linen Inventory Report"
ITEM_HEADINGS = [
    "Sr No",
    "Item",
    "Opening Balance",
    "Clean Received",
    "Total",
    "Soil Sent",
    "Closing Balance",
    "Remark",
]
BATCH_COLUMNS = [
    "filename",
    "category",
    *ITEM_COLUMNS,
    "company",
    "contractor_name",
    "date",
    "contact_no",
]


def _item_row(item: LineItem) -> list[object]:
    return [getattr(item, column) for column in ITEM_COLUMNS]


def record_to_csv(record: InventoryRecord) -> str:
    """Render a record as a CSV report.

    Sections without items are left out.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")

    writer.writerow([REPORT_TITLE])
    writer.writerow([])
    header = record.header
    writer.writerow(["Company", header.company])
    writer.writerow(["Date", header.date])
    writer.writerow(["Contractor", header.contractor_name])
    writer.writerow(["Contact No", header.contact_no])
    writer.writerow([])

    for title, items in (
        ("Linen Items", record.linen_items),
        ("Uniform Items", record.uniform_items),
    ):
        if not items:
            continue
        writer.writerow([title])
        writer.writerow(ITEM_HEADINGS)
        writer.writerows(_item_row(item) for item in items)
        writer.writerow([])

    return buf.getvalue()


def write_csv(record: InventoryRecord, path: Path) -> None:
    """Write :func:`record_to_csv` output to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="") as f:
        f.write(record_to_csv(record))


def record_to_json(record: InventoryRecord, indent: int = 2) -> str:
    return json.dumps(record.to_dict(), indent=indent)


def records_to_rows(
    named_records: list[tuple[str, InventoryRecord]],
) -> list[dict[str, object]]:
    """Flatten records into one row per item for batch CSV export.

    Args:
        named_records: ``(filename, record)`` pairs.

    Returns:
        Row dicts keyed by :data:`BATCH_COLUMNS`.
    """
    rows: list[dict[str, object]] = []
    for filename, record in named_records:
        header = record.header
        for category, items in (
            ("linen", record.linen_items),
            ("uniform", record.uniform_items),
        ):
            for item in items:
                row: dict[str, object] = {"filename": filename, "category": category}
                row.update(zip(ITEM_COLUMNS, _item_row(item), strict=True))
                row.update(
                    company=header.company,
                    contractor_name=header.contractor_name,
                    date=header.date,
                    contact_no=header.contact_no,
                )
                rows.append(row)
    return rows


def write_rows_csv(rows: list[dict[str, object]], path: Path) -> None:
    """Write flattened batch rows with a fixed column order."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=BATCH_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)
