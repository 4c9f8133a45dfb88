from datetime import date, datetime

import pytest

from src.attendance_engine.attendance_engine.attendance import transitions
from src.attendance_engine.attendance_engine.attendance.model import Movement
from src.attendance_engine.attendance_engine.attendance.transitions import CalculationContext
from src.attendance_engine.attendance_engine.core.conflicts import Conflict
from src.attendance_engine.attendance_engine.core.enums import (
    AttendanceStatus,
    ConflictKind,
    EmployeeType,
    MovementSource,
    WorkCode,
)
from src.attendance_engine.attendance_engine.core.exceptions import ValidationError
from src.attendance_engine.attendance_engine.overtime.model import DayContext

MONDAY = date(2024, 1, 15)
NOW = datetime(2024, 1, 16, 9, 0)


def at(hour, minute=0, day=15):
    return datetime(2024, 1, day, hour, minute)


def regular_ctx(**kwargs):
    return CalculationContext(day=DayContext.for_date(MONDAY, EmployeeType.REGULAR), **kwargs)


def admin_ctx():
    return CalculationContext(day=DayContext.for_date(MONDAY, EmployeeType.ADMINISTRATIVE))


def worked_day(ctx, entry=at(8), exit=at(16)):
    record = transitions.empty_record("E-1", MONDAY)
    return transitions.add_movements(record, [Movement(entry, WorkCode.ENTRY), Movement(exit, WorkCode.EXIT)], ctx)


def test_new_record_is_absent():
    assert transitions.empty_record("E-1", MONDAY).status == AttendanceStatus.AUSENTE


def test_entry_only_is_pending():
    record = transitions.add_movement(transitions.empty_record("E-1", MONDAY), Movement(at(8), WorkCode.ENTRY), regular_ctx())

    assert record.status == AttendanceStatus.PENDIENTE
    assert record.entry == at(8)
    assert record.regular_hours == 0


def test_entry_and_exit_is_complete_with_hours():
    record = worked_day(regular_ctx(), exit=at(18))

    assert record.status == AttendanceStatus.COMPLETO
    assert record.regular_hours == 8
    assert record.surcharge_25_hours == 2
    assert record.overtime_hours == 2


def test_exit_without_entry_is_inconsistent():
    record = transitions.add_movement(transitions.empty_record("E-1", MONDAY), Movement(at(17), WorkCode.EXIT), regular_ctx())

    assert record.status == AttendanceStatus.INCONSISTENTE
    assert record.regular_hours == 0


def test_manual_exit_before_entry_fails_and_leaves_record_alone():
    ctx = regular_ctx()
    record = transitions.register_entry(transitions.empty_record("E-1", MONDAY), at(9), ctx)

    with pytest.raises(ValidationError):
        transitions.register_exit(record, at(9), ctx)
    assert record.exit is None
    assert record.status == AttendanceStatus.PENDIENTE


def test_manual_entry_and_exit_are_movements():
    ctx = regular_ctx()
    record = transitions.register_entry(transitions.empty_record("E-1", MONDAY), at(8), ctx, modified_by="hr", now=NOW)
    record = transitions.register_exit(record, at(16, 30), ctx)

    assert record.is_manual
    assert all(m.source == MovementSource.MANUAL for m in record.movements)
    assert record.status == AttendanceStatus.COMPLETO
    assert record.regular_hours == 8
    assert record.surcharge_25_hours == 0.5
    assert record.was_modified


def test_correction_pins_entry_and_exit():
    ctx = regular_ctx()
    record = worked_day(ctx)

    corrected = transitions.apply_correction(record, ctx, modified_by="hr", exit=at(18), now=NOW)
    later = transitions.add_movement(corrected, Movement(at(19), WorkCode.EXIT), ctx)

    assert corrected.status == AttendanceStatus.MODIFICADO
    assert corrected.overtime_hours == 2
    assert corrected.modified_at == NOW
    assert later.exit == at(18)


def test_recalculate_clearing_modification_rederives_from_movements():
    ctx = regular_ctx()
    corrected = transitions.apply_correction(worked_day(ctx), ctx, modified_by="hr", exit=at(18))
    corrected = transitions.add_movement(corrected, Movement(at(19), WorkCode.EXIT), ctx)

    record = transitions.recalculate(corrected, ctx, clear_modification=True)

    assert record.status == AttendanceStatus.COMPLETO
    assert record.exit == at(19)
    assert record.overtime_hours == 3


def test_correction_with_entry_after_exit_fails():
    ctx = regular_ctx()
    with pytest.raises(ValidationError):
        transitions.apply_correction(worked_day(ctx), ctx, modified_by="hr", entry=at(17))


def test_correction_requires_author():
    ctx = regular_ctx()
    with pytest.raises(ValidationError):
        transitions.apply_correction(worked_day(ctx), ctx, modified_by=" ")


def test_leave_zeroes_hours_and_keeps_movements():
    ctx = regular_ctx()
    record = worked_day(ctx, exit=at(18))

    on_leave = transitions.mark_leave(record, AttendanceStatus.VACACIONES, modified_by="hr", now=NOW)

    assert on_leave.status == AttendanceStatus.VACACIONES
    assert (on_leave.entry, on_leave.exit) == (None, None)
    assert on_leave.total_hours == 0
    assert on_leave.overtime_hours == 0
    assert on_leave.movements == record.movements


def test_leave_is_sticky_until_cleared():
    ctx = regular_ctx()
    on_leave = transitions.mark_leave(worked_day(ctx), AttendanceStatus.INCAPACIDAD)

    still = transitions.add_movement(on_leave, Movement(at(20), WorkCode.EXIT), ctx)
    back = transitions.clear_leave(still, ctx)

    assert still.status == AttendanceStatus.INCAPACIDAD
    assert still.regular_hours == 0
    assert back.status == AttendanceStatus.COMPLETO
    assert back.exit == at(20)


def test_leave_drops_manual_pin_so_clearing_rederives():
    ctx = regular_ctx()
    corrected = transitions.apply_correction(worked_day(ctx), ctx, modified_by="hr", exit=at(18), now=NOW)

    on_leave = transitions.mark_leave(corrected, AttendanceStatus.PERMISO, modified_by="hr", now=NOW)
    back = transitions.clear_leave(on_leave, ctx)

    assert corrected.status == AttendanceStatus.MODIFICADO
    assert on_leave.manually_modified is False
    assert back.status == AttendanceStatus.COMPLETO
    assert (back.entry, back.exit) == (at(8), at(16))
    assert back.regular_hours == 8


def test_non_leave_status_cannot_be_marked_as_leave():
    with pytest.raises(ValidationError):
        transitions.mark_leave(transitions.empty_record("E-1", MONDAY), AttendanceStatus.COMPLETO)


def test_review_flag_round_trip():
    ctx = regular_ctx()
    flagged = transitions.flag_for_review(worked_day(ctx), notes="badge shared")

    assert flagged.status == AttendanceStatus.REVISION
    assert transitions.clear_review(flagged, ctx).status == AttendanceStatus.COMPLETO


def test_repeated_ingestion_anomalies_require_review():
    ctx = regular_ctx()
    duplicates = [Conflict(ConflictKind.DUPLICATE, "duplicate punch") for _ in range(3)]

    record = transitions.add_movements(
        transitions.empty_record("E-1", MONDAY),
        [Movement(at(8), WorkCode.ENTRY), Movement(at(16), WorkCode.EXIT)],
        ctx,
        conflicts=duplicates,
    )

    assert record.status == AttendanceStatus.REVISION
    assert record.regular_hours == 8


def test_two_anomalies_stay_below_review_threshold():
    ctx = regular_ctx()
    low = [Conflict(ConflictKind.LOW_CONFIDENCE, "low confidence") for _ in range(2)]

    record = transitions.add_movements(transitions.empty_record("E-1", MONDAY), [Movement(at(8), WorkCode.ENTRY)], ctx, conflicts=low)

    assert record.status == AttendanceStatus.PENDIENTE


def test_second_period_adds_hours():
    ctx = regular_ctx()
    record = worked_day(ctx, entry=at(8), exit=at(12))

    record = transitions.register_second_period(record, at(14), at(18, 30), ctx)

    assert record.is_split_shift
    assert record.regular_hours == 8
    assert record.surcharge_25_hours == 0.5


def test_second_period_must_follow_first_exit():
    ctx = regular_ctx()
    with pytest.raises(ValidationError):
        transitions.register_second_period(worked_day(ctx), at(11), at(13), ctx)


def test_night_hours_across_midnight():
    ctx = regular_ctx()
    record = worked_day(ctx, entry=at(20), exit=at(2, day=16))

    assert record.regular_hours == 6
    assert record.night_hours == 4
    assert record.status == AttendanceStatus.COMPLETO


def test_administrative_day_under_minimum_is_flagged_not_counted():
    ctx = admin_ctx()
    record = worked_day(ctx, entry=at(9), exit=at(12))
    again = transitions.recalculate(record, ctx)

    assert record.status == AttendanceStatus.COMPLETO
    assert record.total_hours == 0
    assert [c.kind for c in again.conflicts] == [ConflictKind.BELOW_MINIMUM_HOURS]
    assert transitions.hours_breakdown(record, ctx).days_counted == 0


def test_administrative_nine_hours():
    record = worked_day(admin_ctx(), entry=at(9), exit=at(18))

    assert record.regular_hours == 8
    assert record.extraordinary_100_hours == 1


def test_breakdown_includes_amounts_with_wage():
    ctx = regular_ctx(hourly_wage=10.0)

    breakdown = transitions.hours_breakdown(worked_day(ctx, exit=at(18)), ctx)

    assert breakdown.total_amount == pytest.approx(105)


def test_lunch_is_subtracted():
    ctx = regular_ctx()
    record = transitions.add_movements(
        transitions.empty_record("E-1", MONDAY),
        [
            Movement(at(8), WorkCode.ENTRY),
            Movement(at(12), WorkCode.LUNCH_START),
            Movement(at(13), WorkCode.LUNCH_END),
            Movement(at(18), WorkCode.EXIT),
        ],
        ctx,
    )

    assert record.lunch_minutes == 60
    assert record.regular_hours == 8
    assert record.surcharge_25_hours == 1
