"""Supplemental feed writer (RSS 2.0 with Google Shopping fields)."""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from pathlib import Path

from errors import WriteError
from models import ClassifiedRecord, RunResult, SourceMode
from xml_source import GOOGLE_NS

FEED_TITLE = "Availability Supplemental Feed"
FEED_DESCRIPTION = "Automatically generated supplemental feed for availability_date"

LOGGER = logging.getLogger(__name__)

# Characters outside the XML 1.0 Char production.
_INVALID_XML_CHARS = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def xml_safe(value: str) -> str:
    """Drop characters that cannot appear in an XML 1.0 document."""
    return _INVALID_XML_CHARS.sub("", value)


def build_feed(
    records: Iterable[ClassifiedRecord],
    availability_date: str,
    shop_base_url: str,
) -> tuple[bytes, int]:
    """Serialize included records to an indented UTF-8 RSS document.

    Returns the document bytes and the number of items written.
    """
    # Prefixed tag names plus an explicit xmlns:g keep the declaration on the
    # root even when the channel ends up with no items.
    rss = ET.Element("rss", {"version": "2.0", "xmlns:g": GOOGLE_NS})
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = FEED_TITLE
    ET.SubElement(channel, "link").text = xml_safe(shop_base_url)
    ET.SubElement(channel, "description").text = FEED_DESCRIPTION

    count = 0
    for record in records:
        if not record.include:
            continue
        product_id = xml_safe(record.id).strip()
        availability = xml_safe(record.availability).strip()
        if product_id != record.id or availability != record.availability:
            LOGGER.warning("Removed characters not allowed in XML from id=%r", record.id)
        if not product_id or not availability:
            continue
        item = ET.SubElement(channel, "item")
        ET.SubElement(item, "g:id").text = product_id
        ET.SubElement(item, "g:availability").text = availability
        ET.SubElement(item, "g:availability_date").text = availability_date
        count += 1

    ET.indent(rss, space="  ")
    document = ET.tostring(rss, encoding="utf-8", xml_declaration=True) + b"\n"
    return document, count


def write_atomic(target: Path, payload: bytes) -> None:
    """Write ``payload`` to a sibling temp file, then rename it over ``target``."""
    tmp = target.with_name(f".{target.name}.tmp")
    try:
        tmp.write_bytes(payload)
        tmp.replace(target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def write_feed(
    records: Iterable[ClassifiedRecord],
    availability_date: str,
    shop_base_url: str,
    target_location: str,
    mode: SourceMode,
) -> RunResult:
    """Write the supplemental feed and return the run summary.

    Raises:
        WriteError: if the target cannot be written. An existing target file
            is left as it was.
    """
    document, count = build_feed(records, availability_date, shop_base_url)
    target = Path(target_location).expanduser()

    try:
        write_atomic(target, document)
    except OSError as exc:
        raise WriteError(
            f"Error: Could not write target feed {target_location}: {exc.strerror or exc}"
        ) from exc

    LOGGER.info("Wrote %s items to %s (availability_date=%s)", count, target, availability_date)
    return RunResult(
        mode=mode,
        emitted_count=count,
        target_location=target_location,
        availability_date=availability_date,
    )
