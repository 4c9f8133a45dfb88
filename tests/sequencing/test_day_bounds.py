from datetime import datetime

from src.attendance_engine.attendance_engine.core.enums import CalculationMethod, ConflictKind, WorkCode
from src.attendance_engine.attendance_engine.sequencing.bounds import (
    derive_day_bounds,
    lunch_minutes,
    summarize_punches,
)


def at(hour, minute=0, day=15):
    return datetime(2024, 1, day, hour, minute)


def test_entry_exit_uses_earliest_entry_and_latest_exit():
    punches = [
        (at(18), WorkCode.EXIT),
        (at(8), WorkCode.ENTRY),
        (at(12), WorkCode.LUNCH_START),
        (at(13), WorkCode.LUNCH_END),
    ]

    bounds = derive_day_bounds(punches, CalculationMethod.ENTRY_EXIT)

    assert bounds.entry == at(8)
    assert bounds.exit == at(18)


def test_first_last_movement_uses_any_code():
    punches = [(at(9), WorkCode.LUNCH_END), (at(17), WorkCode.BREAK_END)]

    bounds = derive_day_bounds(punches, CalculationMethod.FIRST_LAST_MOVEMENT)

    assert bounds.entry == at(9)
    assert bounds.exit == at(17)


def test_single_movement_only_opens_the_day():
    bounds = derive_day_bounds([(at(9), WorkCode.ENTRY)], CalculationMethod.FIRST_LAST_MOVEMENT)

    assert bounds.entry == at(9)
    assert bounds.exit is None


def test_exit_before_entry_is_dropped():
    punches = [(at(7), WorkCode.EXIT), (at(9), WorkCode.ENTRY)]

    bounds = derive_day_bounds(punches, CalculationMethod.ENTRY_EXIT)

    assert bounds.entry == at(9)
    assert bounds.exit is None
    assert bounds.exit_before_entry


def test_exit_at_entry_time_makes_summary_inconsistent():
    summary = summarize_punches([(at(8), WorkCode.ENTRY), (at(8), WorkCode.EXIT)], CalculationMethod.ENTRY_EXIT)

    assert summary.sequence.is_valid
    assert summary.exit_before_entry
    assert not summary.is_consistent
    assert summary.exit is None
    assert [c.kind for c in summary.conflicts] == [ConflictKind.EXIT_BEFORE_ENTRY]


def test_lunch_minutes_pairs_start_and_end():
    punches = [(at(12), WorkCode.LUNCH_START), (at(12, 45), WorkCode.LUNCH_END)]

    assert lunch_minutes(punches) == 45


def test_long_lunch_is_capped_with_conflict():
    punches = [
        (at(7), WorkCode.ENTRY),
        (at(9), WorkCode.LUNCH_START),
        (at(14), WorkCode.LUNCH_END),
        (at(18), WorkCode.EXIT),
    ]

    summary = summarize_punches(punches, CalculationMethod.ENTRY_EXIT)

    assert summary.lunch_minutes == 240
    assert [c.kind for c in summary.conflicts] == [ConflictKind.LUNCH_TOO_LONG]


def test_open_shift_from_previous_day_starts_at_midnight():
    summary = summarize_punches([(at(6), WorkCode.EXIT)], CalculationMethod.ENTRY_EXIT, carried_over=WorkCode.ENTRY)

    assert summary.entry == at(0)
    assert summary.exit == at(6)
    assert summary.sequence.is_valid
    assert [c.kind for c in summary.conflicts] == [ConflictKind.CARRY_OVER]


def test_closed_previous_day_does_not_carry_over():
    summary = summarize_punches([(at(6), WorkCode.EXIT)], CalculationMethod.ENTRY_EXIT, carried_over=WorkCode.EXIT)

    assert summary.entry is None
    assert summary.exit == at(6)
    assert not summary.sequence.is_valid
