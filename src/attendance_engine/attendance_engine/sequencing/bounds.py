from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import minutes_between, start_of_day
from ..core.conflicts import Conflict
from ..core.constants import MAX_LUNCH_MINUTES
from ..core.enums import CalculationMethod, ConflictKind, WorkCode
from .work_codes import SequenceValidation, is_entry, is_exit, validate_sequence

Punch = tuple[datetime, WorkCode]


@dataclass(frozen=True)
class DayBounds:
    entry: Optional[datetime]
    exit: Optional[datetime]
    exit_before_entry: bool = False


@dataclass(frozen=True)
class PunchSummary:
    """Everything a day's punches say about its shape."""

    entry: Optional[datetime]
    exit: Optional[datetime]
    lunch_minutes: int
    break_minutes: int
    sequence: SequenceValidation
    conflicts: tuple[Conflict, ...] = field(default_factory=tuple)
    exit_before_entry: bool = False

    @property
    def is_consistent(self) -> bool:
        return self.sequence.is_valid and not self.exit_before_entry


def derive_day_bounds(punches: Sequence[Punch], method: CalculationMethod) -> DayBounds:
    """Entry/exit of a day from its punches (in any order).

    ENTRY_EXIT takes the earliest entry-type punch and the latest exit-type
    punch. FIRST_LAST_MOVEMENT takes the first and last punch of any kind; a
    single punch only opens the day. An exit that does not come after the
    entry is dropped and reported through ``exit_before_entry``.
    """
    ordered = sorted(punches, key=lambda p: p[0])
    if not ordered:
        return DayBounds(entry=None, exit=None)

    if method == CalculationMethod.FIRST_LAST_MOVEMENT:
        entry = ordered[0][0]
        exit_ = ordered[-1][0] if len(ordered) > 1 else None
    else:
        entries = [ts for ts, code in ordered if is_entry(code)]
        exits = [ts for ts, code in ordered if is_exit(code)]
        entry = entries[0] if entries else None
        exit_ = exits[-1] if exits else None

    if entry is not None and exit_ is not None and exit_ <= entry:
        return DayBounds(entry=entry, exit=None, exit_before_entry=True)
    return DayBounds(entry=entry, exit=exit_)


def paired_minutes(punches: Sequence[Punch], start_code: WorkCode, end_code: WorkCode) -> int:
    """Sum of minutes between each start_code punch and the next end_code punch."""
    total = 0
    opened: Optional[datetime] = None
    for ts, code in sorted(punches, key=lambda p: p[0]):
        if code == start_code and opened is None:
            opened = ts
        elif code == end_code and opened is not None:
            total += minutes_between(opened, ts)
            opened = None
    return total


def lunch_minutes(punches: Sequence[Punch]) -> int:
    return paired_minutes(punches, WorkCode.LUNCH_START, WorkCode.LUNCH_END)


def break_minutes(punches: Sequence[Punch]) -> int:
    return paired_minutes(punches, WorkCode.BREAK_START, WorkCode.BREAK_END)


def summarize_punches(
    punches: Sequence[Punch],
    method: CalculationMethod,
    *,
    carried_over: Optional[WorkCode] = None,
) -> PunchSummary:
    """Bounds, lunch/break minutes and sequence check for one day.

    ``carried_over`` is the previous day's last code. When it left a shift open
    and today starts with an exit-type punch, that punch closes the carried
    shift: the day opens at midnight and the sequence check treats the
    carried code as already seen.
    """
    ordered = sorted(punches, key=lambda p: p[0])
    conflicts: list[Conflict] = []

    open_shift = carried_over is not None and is_entry(carried_over) and bool(ordered) and is_exit(ordered[0][1])
    measured = list(ordered)
    if open_shift:
        first_ts = ordered[0][0]
        midnight = start_of_day(first_ts.date(), tzinfo=first_ts.tzinfo)
        measured.insert(0, (midnight, carried_over))
        conflicts.append(
            Conflict(
                ConflictKind.CARRY_OVER,
                f"Shift carried over from the previous day ({carried_over.name}); day opens at midnight",
                midnight,
                carried_over,
            )
        )

    bounds = derive_day_bounds(measured, method)
    if bounds.exit_before_entry:
        conflicts.append(Conflict(ConflictKind.EXIT_BEFORE_ENTRY, "Latest exit does not follow the earliest entry; exit ignored"))

    lunch = lunch_minutes(measured)
    if lunch > MAX_LUNCH_MINUTES:
        conflicts.append(Conflict(ConflictKind.LUNCH_TOO_LONG, f"Lunch of {lunch} minutes capped at {MAX_LUNCH_MINUTES}"))
        lunch = MAX_LUNCH_MINUTES

    sequence = validate_sequence([code for _, code in ordered], carried_over=carried_over if open_shift else None)
    conflicts.extend(Conflict(ConflictKind.SEQUENCE, violation) for violation in sequence.violations)

    return PunchSummary(
        entry=bounds.entry,
        exit=bounds.exit,
        lunch_minutes=lunch,
        break_minutes=break_minutes(measured),
        sequence=sequence,
        conflicts=tuple(conflicts),
        exit_before_entry=bounds.exit_before_entry,
    )
