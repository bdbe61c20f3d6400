"""CSV source reader: id + availability columns from a delimited feed."""

from __future__ import annotations

import csv
import io
import logging

from errors import TabularError
from models import NormalizedRecord

LOGGER = logging.getLogger(__name__)

# Header aliases, compared after trim + lowercase. First match wins.
ID_COLUMN_ALIASES: tuple[str, ...] = (
    "id",
    "g:id",
    "item_id",
    "item id",
    "product_id",
    "product id",
)
AVAILABILITY_COLUMN_ALIASES: tuple[str, ...] = (
    "availability",
    "g:availability",
    "availability_status",
    "availability status",
    "stock_status",
    "stock status",
)


def detect_delimiter(first_line: str) -> str:
    """Pick ``;`` or ``,`` by raw character count in the first line.

    This is a plain count, not a quoting-aware sniff: separators inside
    quoted cells are counted too. Semicolon wins only on a strict majority.
    """
    return ";" if first_line.count(";") > first_line.count(",") else ","


def normalize_header(header: list[str]) -> list[str]:
    return [cell.strip().lower() for cell in header]


def find_column(header: list[str], aliases: tuple[str, ...]) -> int | None:
    """Return the index of the first header cell that is one of ``aliases``."""
    for index, name in enumerate(header):
        if name in aliases:
            return index
    return None


def parse_tabular(data: bytes) -> list[NormalizedRecord]:
    """Parse CSV bytes into normalized records.

    Raises:
        TabularError: if the content is empty or malformed, has no header, or
            lacks an id or availability column.
    """
    text = data.decode("utf-8-sig", errors="replace")
    if not text:
        raise TabularError("empty", "CSV seems to be empty")

    # Only \n ends the sniffed line, matching what the csv reader treats as a row break.
    first_line = text.split("\n", 1)[0]
    delimiter = detect_delimiter(first_line)

    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    try:
        header = next(reader, None)
    except csv.Error as exc:
        raise _malformed(exc) from exc
    if not header or not any(cell.strip() for cell in header):
        raise TabularError("missing header", "CSV header row could not be read")

    columns = normalize_header(header)
    id_index = find_column(columns, ID_COLUMN_ALIASES)
    if id_index is None:
        raise TabularError(
            "no id column",
            "CSV header does not contain an ID column (expected e.g. id, g:id, item_id)",
        )

    availability_index = find_column(columns, AVAILABILITY_COLUMN_ALIASES)
    if availability_index is None:
        raise TabularError(
            "no availability column",
            "CSV header does not contain an availability column "
            "(expected e.g. availability, g:availability)",
        )

    records: list[NormalizedRecord] = []
    skipped = 0
    try:
        for row in reader:
            if id_index >= len(row):
                skipped += 1
                continue

            product_id = row[id_index].strip()
            if not product_id:
                skipped += 1
                continue

            availability = row[availability_index].strip() if availability_index < len(row) else ""
            records.append(NormalizedRecord(id=product_id, availability_raw=availability))
    except csv.Error as exc:
        raise _malformed(exc) from exc

    LOGGER.info(
        "CSV parse: delimiter=%r id_column=%s availability_column=%s records=%s skipped=%s",
        delimiter,
        header[id_index].strip(),
        header[availability_index].strip(),
        len(records),
        skipped,
    )
    return records


def _malformed(exc: csv.Error) -> TabularError:
    return TabularError("malformed", f"CSV could not be parsed: {exc}")
