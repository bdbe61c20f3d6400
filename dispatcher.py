"""Source format dispatch: try XML first, fall back to CSV."""

from __future__ import annotations

import logging

from csv_source import parse_tabular
from errors import DispatchError, SourceUnavailableError, StructuredError, TabularError
from models import NormalizedRecord, SourceMode, StructuredParse
from source_io import read_source
from xml_source import parse_structured

LOGGER = logging.getLogger(__name__)


def resolve_records(source_location: str) -> tuple[list[NormalizedRecord], SourceMode]:
    """Read the source and return its records plus the format that worked.

    An XML document that parses but yields no usable items is treated like a
    failed XML parse, so the CSV reader still gets its turn.

    Raises:
        DispatchError: if neither reader accepts the source.
    """
    try:
        data = read_source(source_location)
    except SourceUnavailableError as exc:
        raise _combined_error(
            source_location,
            StructuredError([str(exc)]),
            TabularError("cannot open", f"Could not open CSV source: {source_location}"),
        ) from exc

    structured = parse_structured(data)
    if structured.succeeded:
        LOGGER.info("Source parsed as XML: records=%s", len(structured.records))
        return structured.records, "xml"

    LOGGER.warning(
        "XML parse did not yield items (diagnostics=%s), trying CSV",
        len(structured.diagnostics),
    )

    try:
        records = parse_tabular(data)
    except TabularError as exc:
        raise _combined_error(source_location, _structured_error(structured), exc) from exc

    LOGGER.info("Source parsed as CSV: records=%s", len(records))
    return records, "csv"


def _structured_error(parse: StructuredParse) -> StructuredError | None:
    return StructuredError(parse.diagnostics) if parse.failed else None


def _combined_error(
    source_location: str,
    structured: StructuredError | None,
    tabular: TabularError,
) -> DispatchError:
    lines = [
        "Error: Could not parse source feed as XML or CSV.",
        f"Source: {source_location}",
    ]
    if structured is not None and structured.diagnostics:
        lines.append("XML errors:")
        lines.extend(f" - {message}" for message in structured.diagnostics)
    lines.append("CSV error:")
    lines.append(f" - {tabular}")
    return DispatchError("\n".join(lines), structured=structured, tabular=tabular)
