"""Pipeline entry point: source feed in, supplemental availability feed out."""

from __future__ import annotations

import logging
from datetime import datetime

from availability import classify_all
from dates import compute_availability_date, utc_now
from dispatcher import resolve_records
from feed_writer import write_feed
from models import RunConfig, RunResult

LOGGER = logging.getLogger(__name__)


def run_pipeline(config: RunConfig, now: datetime | None = None) -> RunResult:
    """Run one full regeneration of the supplemental feed.

    The availability date is computed once and shared by every item. Runs are
    not serialized against each other: when two overlap, whichever finishes
    its write last determines the target file.

    Raises:
        DispatchError: the source is neither usable XML nor CSV.
        WriteError: the target file could not be written.
        ConfigError: days_offset is too large to produce a date.
    """
    records, mode = resolve_records(config.source_location)
    classified = classify_all(records)

    included = sum(1 for record in classified if record.include)
    LOGGER.info(
        "Classified records: mode=%s total=%s included=%s skipped=%s",
        mode,
        len(classified),
        included,
        len(classified) - included,
    )

    availability_date = compute_availability_date(config.days_offset, now or utc_now())

    return write_feed(
        classified,
        availability_date=availability_date,
        shop_base_url=config.shop_base_url,
        target_location=config.target_location,
        mode=mode,
    )


def format_summary(result: RunResult) -> str:
    """One-line plain-text summary of a successful run."""
    return (
        f"OK ({result.mode}): {result.emitted_count} products -> {result.target_location} "
        f"(availability_date = {result.availability_date})"
    )
