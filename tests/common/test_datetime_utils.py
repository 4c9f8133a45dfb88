from datetime import date, datetime, timezone

import pytest

from src.attendance_engine.attendance_engine.common.datetime_utils import (
    minutes_between,
    night_minutes,
    parse_iso_date,
    require_uniform_awareness,
)
from src.attendance_engine.attendance_engine.core.exceptions import ValidationError


def test_night_minutes_across_midnight():
    assert night_minutes(datetime(2024, 1, 15, 20, 0), datetime(2024, 1, 16, 2, 0)) == 240


def test_night_minutes_early_morning():
    assert night_minutes(datetime(2024, 1, 15, 5, 0), datetime(2024, 1, 15, 7, 0)) == 60


def test_night_minutes_daytime_shift():
    assert night_minutes(datetime(2024, 1, 15, 8, 0), datetime(2024, 1, 15, 18, 0)) == 0


def test_night_minutes_full_night():
    assert night_minutes(datetime(2024, 1, 15, 21, 0), datetime(2024, 1, 16, 7, 0)) == 480


def test_minutes_between_never_negative():
    assert minutes_between(datetime(2024, 1, 15, 9), datetime(2024, 1, 15, 8)) == 0


def test_parse_iso_date():
    assert parse_iso_date("2024-01-15") == date(2024, 1, 15)
    with pytest.raises(ValidationError):
        parse_iso_date("15/01/2024")


def test_uniform_awareness():
    naive = datetime(2024, 1, 15, 8)
    aware = datetime(2024, 1, 15, 8, tzinfo=timezone.utc)

    require_uniform_awareness([naive, naive])
    require_uniform_awareness([aware, aware])
    require_uniform_awareness([])
    with pytest.raises(ValidationError):
        require_uniform_awareness([naive, aware])
