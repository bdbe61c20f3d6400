"""XML source reader for Google Shopping style RSS / Atom feeds."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterable

from models import NormalizedRecord, StructuredParse

GOOGLE_NS = "http://base.google.com/ns/1.0"
NAMESPACES = {"g": GOOGLE_NS}

LOGGER = logging.getLogger(__name__)

ItemFinder = Callable[[ET.Element], list[ET.Element]]


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag


def _children_named(parent: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in parent if local_name(child.tag) == name]


def _rss_items(root: ET.Element) -> list[ET.Element]:
    channels = _children_named(root, "channel")
    if not channels:
        return []
    return _children_named(channels[0], "item")


def _atom_entries(root: ET.Element) -> list[ET.Element]:
    return _children_named(root, "entry")


def _any_items(root: ET.Element) -> list[ET.Element]:
    return [node for node in root.iter() if local_name(node.tag) in {"item", "entry"}]


# Root local name -> item discovery. Unknown roots use the document-wide search.
ITEM_STRATEGIES: tuple[tuple[str, ItemFinder], ...] = (
    ("rss", _rss_items),
    ("feed", _atom_entries),
)


def find_items(root: ET.Element) -> list[ET.Element]:
    root_name = local_name(root.tag)
    for name, finder in ITEM_STRATEGIES:
        if root_name == name:
            return finder(root)
    return _any_items(root)


def _field_text(item: ET.Element, name: str) -> str:
    node = item.find(f"g:{name}", NAMESPACES)
    if node is None:
        return ""
    return (node.text or "").strip()


def records_from_items(items: Iterable[ET.Element]) -> list[NormalizedRecord]:
    records: list[NormalizedRecord] = []
    for item in items:
        product_id = _field_text(item, "id")
        if not product_id:
            continue
        records.append(
            NormalizedRecord(id=product_id, availability_raw=_field_text(item, "availability"))
        )
    return records


def parse_structured(data: bytes) -> StructuredParse:
    """Parse XML bytes into normalized records.

    Parse errors are returned as diagnostics instead of raised so the caller
    can combine them with the CSV reader's error if that fails as well.
    """
    try:
        root = ET.fromstring(data)
    except (ET.ParseError, LookupError) as exc:
        # LookupError: the XML declaration names an encoding expat cannot decode.
        LOGGER.info("XML parse failed: %s", exc)
        return StructuredParse(diagnostics=[str(exc)])

    items = find_items(root)
    records = records_from_items(items)
    LOGGER.info(
        "XML parse: root=%s items=%s records=%s",
        local_name(root.tag),
        len(items),
        len(records),
    )
    return StructuredParse(records=records)
