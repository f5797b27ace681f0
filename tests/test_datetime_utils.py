from datetime import datetime, timedelta, timezone

import pytest

from utils.datetime_utils import epoch_millis, parse_rfc3339, to_rfc3339_utc


def test_created_at_format():
    local = datetime(2024, 5, 15, 12, 0, 0, 123456, tzinfo=timezone(timedelta(hours=-3)))
    assert to_rfc3339_utc(local) == "2024-05-15T15:00:00.123Z"
    assert to_rfc3339_utc(datetime(2024, 5, 15, 15, 0)) == "2024-05-15T15:00:00.000Z"


@pytest.mark.parametrize(
    "raw",
    [
        "2024-05-15T15:00:00Z",
        "2024-05-15T15:00:00.0Z",
        "2024-05-15T12:00:00-03:00",
        "2024-05-15T15:00:00.000000000+00:00",
    ],
)
def test_parse_rfc3339_variants(raw):
    assert parse_rfc3339(raw) == datetime(2024, 5, 15, 15, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("raw", [None, "", "   ", "yesterday", 1715785200])
def test_parse_rfc3339_unreadable(raw):
    assert parse_rfc3339(raw) is None


def test_epoch_millis():
    assert epoch_millis(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)) == 1000
