from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from dates import compute_availability_date
from errors import ConfigError


def test_offset_added_in_utc() -> None:
    now = datetime(2024, 1, 1, 0, 0, 0, tzinfo=UTC)
    assert compute_availability_date(3, now) == "2024-01-04T00:00:00Z"


def test_zero_offset_is_now() -> None:
    now = datetime(2024, 6, 30, 13, 45, 9, 123456, tzinfo=UTC)
    assert compute_availability_date(0, now) == "2024-06-30T13:45:09Z"


def test_negative_offset_gives_past_date() -> None:
    now = datetime(2024, 3, 1, 12, 0, 0, tzinfo=UTC)
    assert compute_availability_date(-1, now) == "2024-02-29T12:00:00Z"


def test_non_utc_input_is_converted() -> None:
    berlin_winter = timezone(timedelta(hours=1))
    now = datetime(2024, 1, 1, 0, 30, 0, tzinfo=berlin_winter)
    assert compute_availability_date(1, now) == "2024-01-01T23:30:00Z"


def test_naive_input_is_treated_as_utc() -> None:
    assert compute_availability_date(5, datetime(2024, 12, 30, 8, 0, 0)) == "2025-01-04T08:00:00Z"


def test_offset_beyond_datetime_range_raises_config_error() -> None:
    now = datetime(2024, 1, 1, tzinfo=UTC)

    with pytest.raises(ConfigError, match="days_offset=100000000"):
        compute_availability_date(100_000_000, now)
