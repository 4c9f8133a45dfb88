from __future__ import annotations

from datetime import date, datetime, time, timedelta

from ..core.constants import NIGHT_END, NIGHT_START
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid date: {value!r}") from exc


def parse_iso_datetime(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid timestamp: {value!r}") from exc


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, never below 0."""
    if end <= start:
        return 0
    return int((end - start).total_seconds() // 60)


def overlap_minutes(start: datetime, end: datetime, window_start: datetime, window_end: datetime) -> int:
    lo = max(start, window_start)
    hi = min(end, window_end)
    return minutes_between(lo, hi)


def night_minutes(
    start: datetime,
    end: datetime,
    *,
    night_start: time = NIGHT_START,
    night_end: time = NIGHT_END,
) -> int:
    """Minutes of [start, end) falling inside the nightly window.

    The window wraps midnight (22:00 -> 06:00 by default), so every calendar
    day touched by the interval contributes one window starting the evening
    before.
    """
    if end <= start:
        return 0

    total = 0
    day = start.date() - timedelta(days=1)
    while day <= end.date():
        window_start = datetime.combine(day, night_start, tzinfo=start.tzinfo)
        window_end = datetime.combine(day + timedelta(days=1), night_end, tzinfo=start.tzinfo)
        total += overlap_minutes(start, end, window_start, window_end)
        day += timedelta(days=1)
    return total


def start_of_day(day: date, *, tzinfo=None) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tzinfo)


def require_uniform_awareness(values, field_name: str = "timestamps") -> None:
    """Reject a batch that mixes naive and offset-aware datetimes."""
    if len({v.utcoffset() is None for v in values}) > 1:
        raise ValidationError(f"{field_name} mix naive and offset-aware values")
