"""State changes of a day record.

Every function takes a snapshot and returns a new one; a failed validation
raises before anything is returned, so the caller's snapshot is never left
half-updated. Hours are recomputed after each change that can move them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Iterable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.conflicts import Conflict
from ..core.constants import DEFAULT_REVIEW_CONFLICT_THRESHOLD
from ..core.enums import AttendanceStatus, ConflictKind, MovementSource, WorkCode
from ..core.exceptions import ValidationError
from ..overtime.model import DayContext, OvertimeBreakdown, OvertimeRates
from ..overtime.service import compute_overtime_minutes
from ..policies.employee_type import EmployeeTypePolicy, policy_for
from ..sequencing.bounds import summarize_punches
from .model import AttendanceRecord, Movement
from .status import LEAVE_STATUSES

_KEEP = object()

_ZERO_HOURS = dict(
    regular_hours=0.0,
    surcharge_25_hours=0.0,
    supplementary_50_hours=0.0,
    extraordinary_100_hours=0.0,
    night_hours=0.0,
    overtime_hours=0.0,
)


@dataclass(frozen=True)
class CalculationContext:
    """What a record needs from outside to compute its hours."""

    day: DayContext
    policy: Optional[EmployeeTypePolicy] = None
    rates: OvertimeRates = field(default_factory=OvertimeRates)
    hourly_wage: Optional[float] = None
    review_conflict_threshold: int = DEFAULT_REVIEW_CONFLICT_THRESHOLD

    def __post_init__(self) -> None:
        if self.policy is None:
            object.__setattr__(self, "policy", policy_for(self.day.employee_type))
        if self.review_conflict_threshold < 1:
            raise ValidationError("review_conflict_threshold must be at least 1")


def empty_record(employee_id: str, work_date: date) -> AttendanceRecord:
    return AttendanceRecord(employee_id=employee_id, work_date=work_date)


def hours_breakdown(record: AttendanceRecord, ctx: CalculationContext) -> OvertimeBreakdown:
    """Tiered hours for the record as it stands (zero until entry and exit exist)."""
    if record.leave_status is not None or not record.is_complete:
        return OvertimeBreakdown()
    return compute_overtime_minutes(
        record.worked_minutes(),
        ctx.day,
        ctx.policy,
        ctx.hourly_wage,
        night_minutes=record.night_minutes(),
        rates=ctx.rates,
    )


def _stamp(record: AttendanceRecord, modified_by: Optional[str], now: Optional[datetime]) -> dict:
    if modified_by is None:
        return {}
    return {
        "modified_by": require_non_empty(modified_by, "modified_by"),
        "modified_at": now or now_local(),
    }


def _rederive(record: AttendanceRecord, ctx: CalculationContext) -> AttendanceRecord:
    summary = summarize_punches(
        [(m.timestamp, m.work_code) for m in record.movements],
        ctx.policy.calculation_method,
        carried_over=record.carried_over,
    )
    kept = tuple(c for c in record.conflicts if c.is_ingestion)
    return replace(
        record,
        entry=summary.entry,
        exit=summary.exit,
        lunch_minutes=summary.lunch_minutes,
        break_minutes=summary.break_minutes,
        sequence_valid=summary.is_consistent,
        conflicts=kept + summary.conflicts,
    )


def _apply_hours(record: AttendanceRecord, ctx: CalculationContext) -> AttendanceRecord:
    conflicts = tuple(c for c in record.conflicts if c.kind != ConflictKind.BELOW_MINIMUM_HOURS)
    if not record.is_complete:
        return replace(record, conflicts=conflicts, **_ZERO_HOURS)

    breakdown = hours_breakdown(record, ctx)
    if not breakdown.counted:
        worked = record.worked_minutes() / 60
        conflicts += (
            Conflict(
                ConflictKind.BELOW_MINIMUM_HOURS,
                f"{worked:.2f}h worked is below the {ctx.day.minimum_hours:g}h daily minimum; day not counted",
            ),
        )
    return replace(
        record,
        regular_hours=breakdown.regular_hours,
        surcharge_25_hours=breakdown.surcharge_25_hours,
        supplementary_50_hours=breakdown.supplementary_50_hours,
        extraordinary_100_hours=breakdown.extraordinary_100_hours,
        night_hours=breakdown.night_hours,
        overtime_hours=breakdown.total_overtime_hours,
        conflicts=conflicts,
    )


def _settle(record: AttendanceRecord, ctx: CalculationContext) -> AttendanceRecord:
    if record.leave_status is not None:
        return replace(record, entry=None, exit=None, entry2=None, exit2=None, **_ZERO_HOURS)
    if not record.manually_modified:
        record = _rederive(record, ctx)
    anomalies = sum(1 for c in record.conflicts if c.is_ingestion)
    if anomalies >= ctx.review_conflict_threshold:
        record = replace(record, review_required=True)
    return _apply_hours(record, ctx)


def recalculate(record: AttendanceRecord, ctx: CalculationContext, *, clear_modification: bool = False) -> AttendanceRecord:
    """Recompute bounds and hours. clear_modification drops the manual pin first."""
    if clear_modification:
        record = replace(record, manually_modified=False)
    return _settle(record, ctx)


def add_movements(
    record: AttendanceRecord,
    movements: Iterable[Movement],
    ctx: CalculationContext,
    *,
    conflicts: Iterable[Conflict] = (),
) -> AttendanceRecord:
    updated = replace(
        record,
        movements=record.movements + tuple(movements),
        conflicts=record.conflicts + tuple(conflicts),
    )
    return _settle(updated, ctx)


def add_movement(record: AttendanceRecord, movement: Movement, ctx: CalculationContext) -> AttendanceRecord:
    return add_movements(record, [movement], ctx)


def replace_biometric_movements(
    record: AttendanceRecord,
    movements: Iterable[Movement],
    ctx: CalculationContext,
    *,
    conflicts: Iterable[Conflict] = (),
    carried_over: Optional[WorkCode] = None,
) -> AttendanceRecord:
    """Swap in a fresh set of device punches, keeping manual ones.

    Ingestion conflicts are replaced too, so reprocessing the same raw
    punches lands on the same record.
    """
    manual = tuple(m for m in record.movements if m.source != MovementSource.BIOMETRIC)
    derived = tuple(c for c in record.conflicts if not c.is_ingestion)
    updated = replace(
        record,
        movements=manual + tuple(movements),
        conflicts=derived + tuple(conflicts),
        carried_over=carried_over,
    )
    return _settle(updated, ctx)


def register_entry(
    record: AttendanceRecord,
    at: datetime,
    ctx: CalculationContext,
    *,
    modified_by: Optional[str] = None,
    now: Optional[datetime] = None,
) -> AttendanceRecord:
    if record.exit is not None and at >= record.exit:
        raise ValidationError("Entry time must be before exit time")
    changes = dict(movements=record.movements + (Movement(at, WorkCode.ENTRY, MovementSource.MANUAL),), is_manual=True)
    if record.manually_modified:
        changes["entry"] = at
    return _settle(replace(record, **changes, **_stamp(record, modified_by, now)), ctx)


def register_exit(
    record: AttendanceRecord,
    at: datetime,
    ctx: CalculationContext,
    *,
    modified_by: Optional[str] = None,
    now: Optional[datetime] = None,
) -> AttendanceRecord:
    if record.entry is not None and at <= record.entry:
        raise ValidationError("Exit time must be after entry time")
    changes = dict(movements=record.movements + (Movement(at, WorkCode.EXIT, MovementSource.MANUAL),), is_manual=True)
    if record.manually_modified:
        changes["exit"] = at
    return _settle(replace(record, **changes, **_stamp(record, modified_by, now)), ctx)


def register_second_period(
    record: AttendanceRecord,
    entry2: datetime,
    exit2: datetime,
    ctx: CalculationContext,
    *,
    modified_by: Optional[str] = None,
    now: Optional[datetime] = None,
) -> AttendanceRecord:
    if record.exit is not None and entry2 < record.exit:
        raise ValidationError("Second period must start after the first exit")
    updated = replace(record, entry2=entry2, exit2=exit2, is_manual=True, **_stamp(record, modified_by, now))
    return _settle(updated, ctx)


def apply_correction(
    record: AttendanceRecord,
    ctx: CalculationContext,
    *,
    modified_by: str,
    entry=_KEEP,
    exit=_KEEP,
    lunch_minutes: Optional[int] = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> AttendanceRecord:
    """Human edit of the day. Pins entry/exit until recalculated with clear_modification."""
    changes = dict(manually_modified=True, is_manual=True, **_stamp(record, require_non_empty(modified_by, "modified_by"), now))
    if entry is not _KEEP:
        changes["entry"] = entry
    if exit is not _KEEP:
        changes["exit"] = exit
    if lunch_minutes is not None:
        changes["lunch_minutes"] = lunch_minutes
    if notes is not None:
        changes["notes"] = notes
    return _settle(replace(record, **changes), ctx)


def mark_leave(
    record: AttendanceRecord,
    leave_status: AttendanceStatus,
    *,
    modified_by: Optional[str] = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> AttendanceRecord:
    """Put the day on leave: hours zeroed, entry/exit cleared, movements kept.

    Any manual pin is dropped with the cleared times, so clearing the leave
    derives the day from its movements again.
    """
    try:
        status = AttendanceStatus(leave_status)
    except ValueError as exc:
        raise ValidationError(f"Unknown status: {leave_status!r}") from exc
    if status not in LEAVE_STATUSES:
        raise ValidationError(f"{status.value} is not a leave status")
    return replace(
        record,
        leave_status=status,
        manually_modified=False,
        entry=None,
        exit=None,
        entry2=None,
        exit2=None,
        notes=notes if notes is not None else record.notes,
        **_ZERO_HOURS,
        **_stamp(record, modified_by, now),
    )


def clear_leave(
    record: AttendanceRecord,
    ctx: CalculationContext,
    *,
    modified_by: Optional[str] = None,
    now: Optional[datetime] = None,
) -> AttendanceRecord:
    return _settle(replace(record, leave_status=None, manually_modified=False, **_stamp(record, modified_by, now)), ctx)


def flag_for_review(record: AttendanceRecord, *, notes: Optional[str] = None) -> AttendanceRecord:
    return replace(record, review_required=True, notes=notes if notes is not None else record.notes)


def clear_review(
    record: AttendanceRecord,
    ctx: CalculationContext,
    *,
    modified_by: Optional[str] = None,
    now: Optional[datetime] = None,
) -> AttendanceRecord:
    """Acknowledge a review: the flag and the ingestion conflicts behind it are dropped."""
    updated = replace(
        record,
        review_required=False,
        conflicts=tuple(c for c in record.conflicts if not c.is_ingestion),
        **_stamp(record, modified_by, now),
    )
    return _settle(updated, ctx)
