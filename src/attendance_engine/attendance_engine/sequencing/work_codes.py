"""Work-code rules and the advisory sequence validator.

Each movement code carries its entry/exit/break semantics, the codes that must
have appeared earlier in the day for it to make sense, and a priority
(1 = main movement, 2 = break or lunch).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from ..core.enums import WorkCode
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class WorkCodeRule:
    is_entry: bool
    is_exit: bool
    is_break: bool
    required_predecessors: frozenset[WorkCode]
    counts_as_work_time: bool
    priority: int


@dataclass(frozen=True)
class SequenceValidation:
    is_valid: bool
    violations: tuple[str, ...] = field(default_factory=tuple)


WORK_CODE_DESCRIPTIONS: dict[WorkCode, str] = {
    WorkCode.ENTRY: "Entry",
    WorkCode.EXIT: "Exit",
    WorkCode.BREAK_START: "Break start",
    WorkCode.BREAK_END: "Break end",
    WorkCode.LUNCH_START: "Lunch start",
    WorkCode.LUNCH_END: "Lunch end",
}

WORK_CODE_RULES: dict[WorkCode, WorkCodeRule] = {
    WorkCode.ENTRY: WorkCodeRule(
        is_entry=True,
        is_exit=False,
        is_break=False,
        required_predecessors=frozenset(),
        counts_as_work_time=True,
        priority=1,
    ),
    WorkCode.EXIT: WorkCodeRule(
        is_entry=False,
        is_exit=True,
        is_break=False,
        required_predecessors=frozenset({WorkCode.ENTRY}),
        counts_as_work_time=True,
        priority=1,
    ),
    WorkCode.BREAK_START: WorkCodeRule(
        is_entry=False,
        is_exit=True,
        is_break=True,
        required_predecessors=frozenset({WorkCode.ENTRY, WorkCode.LUNCH_END}),
        counts_as_work_time=False,
        priority=2,
    ),
    WorkCode.BREAK_END: WorkCodeRule(
        is_entry=True,
        is_exit=False,
        is_break=True,
        required_predecessors=frozenset({WorkCode.BREAK_START}),
        counts_as_work_time=True,
        priority=2,
    ),
    WorkCode.LUNCH_START: WorkCodeRule(
        is_entry=False,
        is_exit=True,
        is_break=True,
        required_predecessors=frozenset({WorkCode.ENTRY, WorkCode.BREAK_END}),
        counts_as_work_time=False,
        priority=2,
    ),
    WorkCode.LUNCH_END: WorkCodeRule(
        is_entry=True,
        is_exit=False,
        is_break=True,
        required_predecessors=frozenset({WorkCode.LUNCH_START}),
        counts_as_work_time=True,
        priority=2,
    ),
}

# Legal follow-ups of the last movement of the day.
EXPECTED_NEXT: dict[WorkCode, tuple[WorkCode, ...]] = {
    WorkCode.ENTRY: (WorkCode.EXIT, WorkCode.BREAK_START, WorkCode.LUNCH_START),
    WorkCode.EXIT: (WorkCode.ENTRY,),
    WorkCode.BREAK_START: (WorkCode.BREAK_END,),
    WorkCode.BREAK_END: (WorkCode.EXIT, WorkCode.LUNCH_START),
    WorkCode.LUNCH_START: (WorkCode.LUNCH_END,),
    WorkCode.LUNCH_END: (WorkCode.EXIT, WorkCode.BREAK_START),
}


def to_work_code(value) -> WorkCode:
    """Coerce a raw code (int, numeric string or member name) into a WorkCode."""
    if isinstance(value, WorkCode):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if raw.upper() in WorkCode.__members__:
            return WorkCode[raw.upper()]
        if raw.isdigit():
            value = int(raw)
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return WorkCode(value)
        except ValueError:
            pass
    raise ValidationError(f"Unrecognized work code: {value!r}")


def describe(code: WorkCode) -> str:
    return WORK_CODE_DESCRIPTIONS[code]


def is_entry(code: WorkCode) -> bool:
    return WORK_CODE_RULES[code].is_entry


def is_exit(code: WorkCode) -> bool:
    return WORK_CODE_RULES[code].is_exit


def is_break(code: WorkCode) -> bool:
    return WORK_CODE_RULES[code].is_break


def counts_as_work_time(code: WorkCode) -> bool:
    return WORK_CODE_RULES[code].counts_as_work_time


def required_predecessors(code: WorkCode) -> frozenset[WorkCode]:
    return WORK_CODE_RULES[code].required_predecessors


def priority(code: WorkCode) -> int:
    return WORK_CODE_RULES[code].priority


def expected_next_codes(last_code: Optional[WorkCode] = None) -> tuple[WorkCode, ...]:
    if last_code is None:
        return (WorkCode.ENTRY,)
    return EXPECTED_NEXT[last_code]


def is_valid_transition(previous: WorkCode, current: WorkCode) -> bool:
    """Pairwise check used for 'unusual sequence' warnings between two punches."""
    return current in EXPECTED_NEXT[previous]


def _join_codes(codes: Iterable[WorkCode]) -> str:
    return " or ".join(code.name for code in sorted(codes))


def validate_sequence(codes: Sequence[WorkCode], *, carried_over: Optional[WorkCode] = None) -> SequenceValidation:
    """Check an ordered list of a day's codes.

    The first code must be ENTRY, and every later code needs at least one of
    its required predecessors somewhere before it. Violations are collected,
    never raised. ``carried_over`` is the open movement left by the previous
    day; when given it counts as already seen, and the first-code rule is
    waived.
    """
    codes = [to_work_code(c) for c in codes]
    if not codes:
        return SequenceValidation(is_valid=True)

    violations: list[str] = []
    seen: set[WorkCode] = set()
    if carried_over is not None:
        seen.add(to_work_code(carried_over))
    elif codes[0] != WorkCode.ENTRY:
        violations.append(f"Day must start with ENTRY, got {codes[0].name} at position 1")

    for index, code in enumerate(codes):
        if index > 0 or carried_over is not None:
            needed = required_predecessors(code)
            if needed and not (needed & seen):
                violations.append(
                    f"{code.name} at position {index + 1} requires an earlier {_join_codes(needed)}"
                )
        seen.add(code)

    return SequenceValidation(is_valid=not violations, violations=tuple(violations))
