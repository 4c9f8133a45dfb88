from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import is_weekend
from ..common.validators import require_date, require_non_negative, require_range
from ..core.constants import (
    DEFAULT_EXTRAORDINARY_RATE,
    DEFAULT_MINIMUM_HOURS,
    DEFAULT_NIGHT_RATE,
    DEFAULT_SCHEDULED_HOURS,
    DEFAULT_SUPPLEMENTARY_RATE,
    DEFAULT_SURCHARGE_RATE,
    MAX_EXTRAORDINARY_RATE,
    MAX_SCHEDULED_HOURS,
    MAX_TIER_RATE,
)
from ..core.enums import EmployeeType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class DayContext:
    """Attributes of a calendar day that select the overtime rules."""

    work_date: date
    is_weekend: bool
    is_holiday: bool
    employee_type: EmployeeType
    scheduled_hours: float = DEFAULT_SCHEDULED_HOURS
    minimum_hours: float = DEFAULT_MINIMUM_HOURS

    def __post_init__(self) -> None:
        require_date(self.work_date, "work_date")
        try:
            object.__setattr__(self, "employee_type", EmployeeType(self.employee_type))
        except ValueError as exc:
            raise ValidationError(f"Unknown employee type: {self.employee_type!r}") from exc
        require_range(self.scheduled_hours, "scheduled_hours", 0, MAX_SCHEDULED_HOURS)
        require_non_negative(self.minimum_hours, "minimum_hours")

    @property
    def is_special_pay_day(self) -> bool:
        return self.is_weekend or self.is_holiday

    @classmethod
    def for_date(
        cls,
        work_date: date,
        employee_type: EmployeeType,
        *,
        is_holiday: bool = False,
        scheduled_hours: float = DEFAULT_SCHEDULED_HOURS,
        minimum_hours: float = DEFAULT_MINIMUM_HOURS,
    ) -> "DayContext":
        return cls(
            work_date=work_date,
            is_weekend=is_weekend(work_date),
            is_holiday=is_holiday,
            employee_type=employee_type,
            scheduled_hours=scheduled_hours,
            minimum_hours=minimum_hours,
        )


@dataclass(frozen=True)
class OvertimeRates:
    """Surcharge on top of the base wage per tier (0.25 == +25%)."""

    surcharge: float = DEFAULT_SURCHARGE_RATE
    supplementary: float = DEFAULT_SUPPLEMENTARY_RATE
    extraordinary: float = DEFAULT_EXTRAORDINARY_RATE
    night: float = DEFAULT_NIGHT_RATE

    def __post_init__(self) -> None:
        require_range(self.surcharge, "surcharge rate", 0, MAX_TIER_RATE)
        require_range(self.supplementary, "supplementary rate", 0, MAX_TIER_RATE)
        require_range(self.extraordinary, "extraordinary rate", 0, MAX_EXTRAORDINARY_RATE)
        require_range(self.night, "night rate", 0, MAX_TIER_RATE)

    @classmethod
    def from_mapping(cls, data: Optional[dict]) -> "OvertimeRates":
        if not data:
            return cls()
        known = {"surcharge", "supplementary", "extraordinary", "night"}
        return cls(**{k: float(v) for k, v in data.items() if k in known})


@dataclass(frozen=True)
class OvertimeBreakdown:
    """Tiered hours of one day, or of a period once combined.

    Monetary fields are None unless an hourly wage was supplied.
    """

    regular_hours: float = 0.0
    surcharge_25_hours: float = 0.0
    supplementary_50_hours: float = 0.0
    extraordinary_100_hours: float = 0.0
    night_hours: float = 0.0
    total_overtime_hours: float = 0.0
    worked_hours: float = 0.0
    days_counted: int = 0

    regular_amount: Optional[float] = None
    surcharge_25_amount: Optional[float] = None
    supplementary_50_amount: Optional[float] = None
    extraordinary_100_amount: Optional[float] = None
    night_amount: Optional[float] = None
    total_amount: Optional[float] = None

    @property
    def paid_hours(self) -> float:
        return self.regular_hours + self.total_overtime_hours

    @property
    def has_overtime(self) -> bool:
        return self.total_overtime_hours > 0

    @property
    def has_amounts(self) -> bool:
        return self.total_amount is not None

    @property
    def counted(self) -> bool:
        return self.days_counted > 0
