from datetime import datetime, timedelta, timezone

import pytest

from hr_payroll.common.datetime_utils import parse_iso_datetime
from hr_payroll.core.exceptions import ValidationError


def test_naive_timestamp_is_kept():
    assert parse_iso_datetime("2025-03-03T08:55:00") == datetime(2025, 3, 3, 8, 55)


def test_offset_timestamp_becomes_naive_local_time():
    parsed = parse_iso_datetime("2025-03-03T08:55:00+00:00")

    assert parsed.tzinfo is None
    assert parsed == datetime(2025, 3, 3, 8, 55, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)


def test_offset_timestamp_compares_with_naive_values():
    parsed = parse_iso_datetime("2025-03-03T08:55:00-03:00")

    assert parsed - datetime(2025, 3, 1) > timedelta(0)


@pytest.mark.parametrize("raw", ["", "03/03/2025 08:55", None])
def test_malformed_timestamp_is_rejected(raw):
    with pytest.raises(ValidationError):
        parse_iso_datetime(raw)
