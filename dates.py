"""availability_date calculation."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from errors import ConfigError

AVAILABILITY_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now() -> datetime:
    return datetime.now(UTC)


def compute_availability_date(days_offset: int, now: datetime) -> str:
    """Return ``now + days_offset`` days as a UTC timestamp string.

    Naive datetimes are taken to be UTC. Zero and negative offsets are
    accepted as-is; range checks belong to whoever edits the configuration.

    Raises:
        ConfigError: if the offset pushes the date past what datetime can hold.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    try:
        target = now.astimezone(UTC) + timedelta(days=int(days_offset))
    except OverflowError as exc:
        raise ConfigError(
            f"Error: days_offset={days_offset} puts availability_date out of range"
        ) from exc
    return target.strftime(AVAILABILITY_DATE_FORMAT)
