from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Protocol

from ..common.datetime_utils import parse_iso_date


class HolidayCalendar(Protocol):
    def is_holiday(self, day: date) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class FixedHolidayCalendar:
    """Holiday oracle backed by a fixed set of dates."""

    holidays: frozenset[date] = field(default_factory=frozenset)

    def is_holiday(self, day: date) -> bool:
        return day in self.holidays

    @classmethod
    def from_iso(cls, values: Iterable[str]) -> "FixedHolidayCalendar":
        return cls(frozenset(parse_iso_date(v.strip()) for v in values if v and v.strip()))
