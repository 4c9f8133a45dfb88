"""Per-category rules for how a day is measured and which overtime tiers apply."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional, Sequence

from ..core.constants import DEFAULT_MINIMUM_HOURS, REGULAR_HOURS_CAP
from ..core.enums import CalculationMethod, EmployeeType, OvertimeMethod
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class OvertimeRules:
    daily_threshold: int
    weekly_threshold: int
    applies_surcharge: bool
    applies_supplementary: bool
    applies_extraordinary: bool
    max_overtime_per_day: int
    effective_hours_only: bool = False


@dataclass(frozen=True)
class DefaultSchedule:
    start_time: time
    end_time: time
    break_minutes: int
    flexibility_minutes: int


@dataclass(frozen=True)
class EmployeeTypePolicy:
    employee_type: EmployeeType
    has_fixed_schedule: bool
    can_work_multiple_branches: bool
    calculation_method: CalculationMethod
    minimum_hours_per_day: float
    requires_exact_time_tracking: bool
    allows_manual_time_adjustment: bool
    overtime_method: OvertimeMethod
    overtime: OvertimeRules
    schedule: DefaultSchedule
    max_branches: int

    @property
    def is_regular(self) -> bool:
        return self.employee_type == EmployeeType.REGULAR

    @property
    def is_administrative(self) -> bool:
        return self.employee_type == EmployeeType.ADMINISTRATIVE

    def meets_daily_requirements(self, hours_worked: float) -> bool:
        return hours_worked >= self.minimum_hours_per_day

    def should_process_attendance_record(self, hours_worked: float, work_date: Optional[date] = None) -> bool:
        """Administrative days under the minimum do not count; regular days always do."""
        if self.overtime.effective_hours_only:
            return self.meets_daily_requirements(hours_worked)
        return True

    def can_access_branch(self, branch_id: str, assigned_branches: Sequence[str]) -> bool:
        if not self.can_work_multiple_branches:
            return branch_id in assigned_branches
        return len(assigned_branches) <= self.max_branches

    def key_features(self) -> list[str]:
        features = [
            "Fixed schedule" if self.has_fixed_schedule else "Flexible schedule",
            "Multi-branch" if self.can_work_multiple_branches else "Single branch",
            f"Method: {self.calculation_method.value}",
            f"Minimum: {self.minimum_hours_per_day:g}h/day",
        ]
        if self.overtime.applies_surcharge:
            features.append("Surcharge 25%")
        if self.overtime.applies_supplementary:
            features.append("Supplementary 50%")
        if self.overtime.applies_extraordinary:
            features.append("Extraordinary 100%")
        return features


REGULAR_POLICY = EmployeeTypePolicy(
    employee_type=EmployeeType.REGULAR,
    has_fixed_schedule=True,
    can_work_multiple_branches=False,
    calculation_method=CalculationMethod.ENTRY_EXIT,
    minimum_hours_per_day=0,
    requires_exact_time_tracking=True,
    allows_manual_time_adjustment=True,
    overtime_method=OvertimeMethod.STANDARD,
    overtime=OvertimeRules(
        daily_threshold=REGULAR_HOURS_CAP,
        weekly_threshold=40,
        applies_surcharge=True,
        applies_supplementary=True,
        applies_extraordinary=True,
        max_overtime_per_day=4,
    ),
    schedule=DefaultSchedule(start_time=time(8, 0), end_time=time(17, 0), break_minutes=60, flexibility_minutes=15),
    max_branches=1,
)

ADMINISTRATIVE_POLICY = EmployeeTypePolicy(
    employee_type=EmployeeType.ADMINISTRATIVE,
    has_fixed_schedule=False,
    can_work_multiple_branches=True,
    calculation_method=CalculationMethod.FIRST_LAST_MOVEMENT,
    minimum_hours_per_day=DEFAULT_MINIMUM_HOURS,
    requires_exact_time_tracking=False,
    allows_manual_time_adjustment=False,
    overtime_method=OvertimeMethod.EFFECTIVE_HOURS,
    overtime=OvertimeRules(
        daily_threshold=REGULAR_HOURS_CAP,
        weekly_threshold=40,
        applies_surcharge=False,
        applies_supplementary=False,
        applies_extraordinary=True,
        max_overtime_per_day=6,
        effective_hours_only=True,
    ),
    schedule=DefaultSchedule(start_time=time(9, 0), end_time=time(18, 0), break_minutes=60, flexibility_minutes=120),
    max_branches=10,
)

POLICIES: dict[EmployeeType, EmployeeTypePolicy] = {
    EmployeeType.REGULAR: REGULAR_POLICY,
    EmployeeType.ADMINISTRATIVE: ADMINISTRATIVE_POLICY,
}


def to_employee_type(value) -> EmployeeType:
    if isinstance(value, EmployeeType):
        return value
    raw = str(value or "").strip().upper()
    # ADMINISTRATIVO is an accepted alias.
    if raw == "ADMINISTRATIVO":
        raw = EmployeeType.ADMINISTRATIVE.value
    try:
        return EmployeeType(raw)
    except ValueError as exc:
        raise ValidationError(f"Unknown employee type: {value!r}") from exc


def policy_for(employee_type) -> EmployeeTypePolicy:
    return POLICIES[to_employee_type(employee_type)]
