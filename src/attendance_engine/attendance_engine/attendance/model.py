from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import minutes_between, night_minutes, require_uniform_awareness
from ..common.validators import require_date, require_non_empty, require_non_negative, require_range
from ..core.conflicts import Conflict
from ..core.constants import DEFAULT_SCHEDULED_HOURS, MAX_LUNCH_MINUTES, MAX_SCHEDULED_HOURS
from ..core.enums import AttendanceStatus, EmployeeType, MovementSource, WorkCode
from ..core.exceptions import ValidationError
from ..policies.employee_type import to_employee_type
from ..sequencing.work_codes import describe, to_work_code
from .status import LEAVE_STATUSES, derive_status

_HOUR_FIELDS = (
    "regular_hours",
    "surcharge_25_hours",
    "supplementary_50_hours",
    "extraordinary_100_hours",
    "night_hours",
    "overtime_hours",
)


@dataclass(frozen=True)
class EmployeeProfile:
    employee_id: str
    employee_type: EmployeeType = EmployeeType.REGULAR
    scheduled_hours: float = DEFAULT_SCHEDULED_HOURS
    hourly_wage: Optional[float] = None
    assigned_branches: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "employee_id", require_non_empty(self.employee_id, "employee_id"))
        object.__setattr__(self, "employee_type", to_employee_type(self.employee_type))
        require_range(self.scheduled_hours, "scheduled_hours", 0, MAX_SCHEDULED_HOURS)
        if self.hourly_wage is not None:
            require_non_negative(self.hourly_wage, "hourly_wage")
        object.__setattr__(self, "assigned_branches", tuple(self.assigned_branches))


@dataclass(frozen=True)
class Movement:
    """One punch stored on a day record, biometric or manual."""

    timestamp: datetime
    work_code: WorkCode
    source: MovementSource = MovementSource.BIOMETRIC
    device_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.timestamp, datetime):
            raise ValidationError("Movement timestamp must be a datetime")
        object.__setattr__(self, "work_code", to_work_code(self.work_code))
        object.__setattr__(self, "source", MovementSource(self.source))

    @property
    def description(self) -> str:
        return describe(self.work_code)

    @property
    def is_manual(self) -> bool:
        return self.source == MovementSource.MANUAL


@dataclass(frozen=True)
class DaySummary:
    employee_id: str
    work_date: date
    status: AttendanceStatus
    entry: Optional[datetime]
    exit: Optional[datetime]
    worked_hours: float
    overtime_hours: float
    movements: int
    conflicts: int


@dataclass(frozen=True)
class AttendanceRecord:
    """Snapshot of one employee's day. Transitions return new snapshots.

    Construction rejects structurally impossible days: negative hours, lunch
    outside [0, 240] minutes, an entry that does not come before its exit.
    Movements are kept sorted by timestamp.
    """

    employee_id: str
    work_date: date
    entry: Optional[datetime] = None
    exit: Optional[datetime] = None
    entry2: Optional[datetime] = None
    exit2: Optional[datetime] = None
    lunch_minutes: int = 0
    break_minutes: int = 0

    regular_hours: float = 0.0
    surcharge_25_hours: float = 0.0
    supplementary_50_hours: float = 0.0
    extraordinary_100_hours: float = 0.0
    night_hours: float = 0.0
    overtime_hours: float = 0.0

    leave_status: Optional[AttendanceStatus] = None
    is_manual: bool = False
    manually_modified: bool = False
    review_required: bool = False
    sequence_valid: bool = True
    carried_over: Optional[WorkCode] = None
    modified_by: Optional[str] = None
    modified_at: Optional[datetime] = None
    notes: Optional[str] = None

    movements: tuple[Movement, ...] = field(default_factory=tuple)
    conflicts: tuple[Conflict, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "employee_id", require_non_empty(self.employee_id, "employee_id"))
        require_date(self.work_date, "work_date")

        require_range(self.lunch_minutes, "lunch_minutes", 0, MAX_LUNCH_MINUTES)
        require_non_negative(self.break_minutes, "break_minutes")
        for name in _HOUR_FIELDS:
            require_non_negative(getattr(self, name), name)

        if self.entry is not None and self.exit is not None and self.entry >= self.exit:
            raise ValidationError("Entry time must be before exit time")
        if self.entry2 is not None and self.exit2 is not None and self.entry2 >= self.exit2:
            raise ValidationError("Second entry time must be before second exit time")

        if self.leave_status is not None:
            status = AttendanceStatus(self.leave_status)
            if status not in LEAVE_STATUSES:
                raise ValidationError(f"{status.value} is not a leave status")
            object.__setattr__(self, "leave_status", status)
        if self.carried_over is not None:
            object.__setattr__(self, "carried_over", to_work_code(self.carried_over))

        movements = tuple(self.movements)
        require_uniform_awareness([m.timestamp for m in movements], "Movement timestamps")
        object.__setattr__(self, "movements", tuple(sorted(movements, key=lambda m: m.timestamp)))
        object.__setattr__(self, "conflicts", tuple(self.conflicts))

    @property
    def status(self) -> AttendanceStatus:
        return derive_status(
            has_entry=self.entry is not None,
            has_exit=self.exit is not None,
            sequence_valid=self.sequence_valid,
            leave_status=self.leave_status,
            manually_modified=self.manually_modified,
            review_required=self.review_required,
        )

    @property
    def is_complete(self) -> bool:
        return self.entry is not None and self.exit is not None

    @property
    def is_split_shift(self) -> bool:
        return self.entry2 is not None and self.exit2 is not None

    @property
    def was_modified(self) -> bool:
        return self.modified_by is not None and self.modified_at is not None

    @property
    def total_hours(self) -> float:
        return self.regular_hours + self.overtime_hours

    def worked_minutes(self) -> int:
        """Presence minus lunch, plus the second period when there is one."""
        total = 0
        if self.is_complete:
            total += max(0, minutes_between(self.entry, self.exit) - self.lunch_minutes)
        if self.is_split_shift:
            total += minutes_between(self.entry2, self.exit2)
        return total

    def night_minutes(self) -> int:
        total = 0
        if self.is_complete:
            total += night_minutes(self.entry, self.exit)
        if self.is_split_shift:
            total += night_minutes(self.entry2, self.exit2)
        return total

    def day_summary(self) -> DaySummary:
        return DaySummary(
            employee_id=self.employee_id,
            work_date=self.work_date,
            status=self.status,
            entry=self.entry,
            exit=self.exit,
            worked_hours=self.worked_minutes() / 60,
            overtime_hours=self.overtime_hours,
            movements=len(self.movements),
            conflicts=len(self.conflicts),
        )
