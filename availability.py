"""Availability classification: which products need an availability_date."""

from __future__ import annotations

from collections.abc import Iterable

from models import ClassifiedRecord, NormalizedRecord

# Products in stock need no availability_date and are left out entirely.
_IN_STOCK_VALUES: frozenset[str] = frozenset({"in stock", "instock"})

DEFAULT_AVAILABILITY = "preorder"


def classify(record: NormalizedRecord) -> ClassifiedRecord:
    """Map a raw record to its output availability and include decision.

    - ``in stock`` / ``instock`` (any case) -> excluded.
    - blank availability -> ``preorder``.
    - anything else -> lowercased value, passed through.
    A blank id is always excluded.
    """
    product_id = record.id.strip()
    availability = record.availability_raw.strip().lower()

    if not product_id:
        return ClassifiedRecord(id=product_id, availability=availability, include=False)

    if availability in _IN_STOCK_VALUES:
        return ClassifiedRecord(id=product_id, availability=availability, include=False)

    return ClassifiedRecord(
        id=product_id,
        availability=availability or DEFAULT_AVAILABILITY,
        include=True,
    )


def classify_all(records: Iterable[NormalizedRecord]) -> list[ClassifiedRecord]:
    return [classify(record) for record in records]
