"""Keyword-driven parser for OCR text of linen inventory sheets.

The sheets are hand-filled tables with a header block (hotel, contractor,
date, phone) and one row per linen or uniform item followed by five counts:
opening balance, clean received, total, soil sent, closing balance. OCR
output of such tables is noisy, so rows are found by item-name keywords and
the counts are taken as the digit runs on the same line, left to right.
When no keyword matches anywhere, any line that mixes words and numbers is
kept as a linen row so the reviewer still has something to correct.
"""

import re

from linen_ocr.utils.logger import get_logger

from .models import InventoryHeader, InventoryRecord, LineItem

logger = get_logger(__name__)

# Order matters: the item name is taken from the last matching term.
ITEM_VOCABULARY: tuple[str, ...] = (
    "bed sheet",
    "bedsheet",
    "pillow",
    "towel",
    "bath towel",
    "hand towel",
    "face towel",
    "blanket",
    "duvet",
    "mattress",
    "curtain",
    "napkin",
    "table cloth",
    "bath mat",
    "bed cover",
    "quilt",
    "comforter",
    "pillow cover",
    "cushion",
    "runner",
    "apron",
    "chef coat",
    "uniform",
)

UNIFORM_MARKERS: tuple[str, ...] = ("uniform", "chef", "apron")

_DATE_KEYWORDS = ("date", "dt")
_COMPANY_KEYWORDS = ("company", "hotel")
_CONTRACTOR_KEYWORDS = ("contractor", "vendor")
_CONTACT_KEYWORDS = ("contact", "phone", "mobile")

_DATE_RE = re.compile(r"\d{1,2}[-/]\d{1,2}[-/]\d{2,4}", re.ASCII)
_PHONE_RE = re.compile(r"\d{10,}", re.ASCII)
_DIGITS_RE = re.compile(r"\d+", re.ASCII)
_DIGIT_RE = re.compile(r"\d", re.ASCII)
_WORD_RE = re.compile(r"[a-zA-Z]{3,}")
_NEWLINE_RE = re.compile(r"\r?\n")

_NAME_WINDOW = 20
_COUNT_FIELDS = (
    "opening_balance",
    "clean_received",
    "total",
    "soil_sent",
    "closing_balance",
)


def split_lines(raw_text: str) -> list[str]:
    """Split OCR text on newlines (LF or CRLF), dropping blank lines."""
    return [line for line in _NEWLINE_RE.split(raw_text) if line.strip()]


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def _after_last_colon(line: str) -> str | None:
    """Trimmed text after the last colon, or ``None`` without a colon."""
    if ":" not in line:
        return None
    return line.rsplit(":", 1)[1].strip()


def extract_header(lines: list[str]) -> InventoryHeader:
    """Pick header fields out of the sheet lines.

    Every line is checked against every field and a later match overwrites
    an earlier one.
    """
    header = InventoryHeader()

    for line in lines:
        lower = line.lower()

        if _contains_any(lower, _DATE_KEYWORDS):
            match = _DATE_RE.search(line)
            if match:
                header.date = match.group(0)

        if _contains_any(lower, _COMPANY_KEYWORDS):
            header.company = _after_last_colon(line) or line.strip()

        if _contains_any(lower, _CONTRACTOR_KEYWORDS):
            # Unlike company, a contractor line without a colon yields nothing.
            header.contractor_name = _after_last_colon(line) or ""

        if _contains_any(lower, _CONTACT_KEYWORDS):
            match = _PHONE_RE.search(line)
            if match:
                header.contact_no = match.group(0)

    return header


def _build_item(sr_no: int, name: str, line: str) -> LineItem:
    counts = _DIGITS_RE.findall(line)
    values = {
        field_name: counts[i] if i < len(counts) else "0"
        for i, field_name in enumerate(_COUNT_FIELDS)
    }
    return LineItem(sr_no=sr_no, item=name, **values)


def _strip_digits(line: str) -> str:
    return _DIGITS_RE.sub("", line).strip()


def item_name(line: str) -> str:
    """Derive the item name for a line containing a vocabulary term.

    Takes the last term in vocabulary order found in the line and reads from
    its position up to 20 characters past the term, stopping at the first
    digit. Falls back to the whole line without digits.
    """
    lower = line.lower()
    name = ""
    for term in ITEM_VOCABULARY:
        idx = lower.find(term)
        if idx != -1:
            window = line[idx : idx + len(term) + _NAME_WINDOW]
            name = _DIGIT_RE.split(window, maxsplit=1)[0].strip()
    return name or _strip_digits(line)


def is_uniform_line(line: str) -> bool:
    """Whether a matched row belongs to the uniform table."""
    return _contains_any(line.lower(), UNIFORM_MARKERS)


def _fallback_items(lines: list[str]) -> list[LineItem]:
    candidates = [
        line
        for line in lines
        if _DIGIT_RE.search(line) and _WORD_RE.search(line) and len(line.strip()) > 5
    ]
    items: list[LineItem] = []
    for position, line in enumerate(candidates, 1):
        name = _strip_digits(line)
        if len(name) > 2:
            items.append(_build_item(position, name, line))
    return items


class InventoryParser:
    """Turns raw OCR text into an :class:`InventoryRecord`.

    Parsing never fails: text with nothing recognisable gives a record with
    empty item lists and a default header.
    """

    def parse(self, raw_text: str) -> InventoryRecord:
        """Parse recognised sheet text.

        Args:
            raw_text: Text returned by the OCR engine, possibly multi-line.

        Returns:
            A freshly built inventory record.
        """
        lines = split_lines(raw_text or "")
        record = InventoryRecord(header=extract_header(lines))

        sr_no = 1
        for line in lines:
            if not _contains_any(line.lower(), ITEM_VOCABULARY):
                continue
            item = _build_item(sr_no, item_name(line), line)
            if is_uniform_line(line):
                record.uniform_items.append(item)
            else:
                record.linen_items.append(item)
            sr_no += 1

        if record.item_count == 0:
            record.linen_items = _fallback_items(lines)
            if record.linen_items:
                logger.info(
                    "No known items found; kept %d generic rows",
                    len(record.linen_items),
                )

        logger.info(
            "Parsed %d lines into %d linen and %d uniform items",
            len(lines),
            len(record.linen_items),
            len(record.uniform_items),
        )
        return record


def parse(raw_text: str) -> InventoryRecord:
    """Module-level shortcut for :meth:`InventoryParser.parse`."""
    return InventoryParser().parse(raw_text)
