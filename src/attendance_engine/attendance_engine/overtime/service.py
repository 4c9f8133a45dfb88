"""Overtime entry points: tier computation, day context and period totals."""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import date
from fractions import Fraction
from typing import Iterable, Optional

from ..common.validators import require_non_negative, require_range
from ..core.constants import DEFAULT_SCHEDULED_HOURS, MAX_TOTAL_HOURS
from ..core.enums import EmployeeType
from ..policies.employee_type import EmployeeTypePolicy, policy_for
from .calculator.base import TierSplit
from .calculator.factory import OvertimeStrategyFactory
from .calendar import HolidayCalendar
from .model import DayContext, OvertimeBreakdown, OvertimeRates

_HOUR_FIELDS = (
    "regular_hours",
    "surcharge_25_hours",
    "supplementary_50_hours",
    "extraordinary_100_hours",
    "night_hours",
    "total_overtime_hours",
    "worked_hours",
)
_AMOUNT_FIELDS = (
    "regular_amount",
    "surcharge_25_amount",
    "supplementary_50_amount",
    "extraordinary_100_amount",
    "night_amount",
    "total_amount",
)


def build_day_context(
    work_date: date,
    employee_type: EmployeeType,
    *,
    scheduled_hours: float = DEFAULT_SCHEDULED_HOURS,
    calendar: Optional[HolidayCalendar] = None,
    minimum_hours: Optional[float] = None,
) -> DayContext:
    if minimum_hours is None:
        minimum_hours = policy_for(employee_type).minimum_hours_per_day
    return DayContext.for_date(
        work_date,
        employee_type,
        is_holiday=calendar is not None and calendar.is_holiday(work_date),
        scheduled_hours=scheduled_hours,
        minimum_hours=minimum_hours,
    )


def compute_overtime(
    total_hours: float,
    day_context: DayContext,
    policy: Optional[EmployeeTypePolicy] = None,
    hourly_wage: Optional[float] = None,
    *,
    night_hours: float = 0.0,
    rates: Optional[OvertimeRates] = None,
    factory: Optional[OvertimeStrategyFactory] = None,
) -> OvertimeBreakdown:
    """Split a day's worked hours into regular and overtime tiers.

    Raises ValidationError when total_hours is outside [0, 24] or the wage is
    negative. Night hours are reported alongside the tiers, never subtracted
    from them.
    """
    require_range(total_hours, "total_hours", 0, MAX_TOTAL_HOURS)
    require_range(night_hours, "night_hours", 0, MAX_TOTAL_HOURS)
    return _compute(Fraction(total_hours), Fraction(night_hours), day_context, policy, hourly_wage, rates, factory)


def compute_overtime_minutes(
    worked_minutes: int,
    day_context: DayContext,
    policy: Optional[EmployeeTypePolicy] = None,
    hourly_wage: Optional[float] = None,
    *,
    night_minutes: int = 0,
    rates: Optional[OvertimeRates] = None,
    factory: Optional[OvertimeStrategyFactory] = None,
) -> OvertimeBreakdown:
    """Same as compute_overtime, from whole minutes as measured on a record."""
    require_range(worked_minutes, "worked_minutes", 0, MAX_TOTAL_HOURS * 60)
    require_range(night_minutes, "night_minutes", 0, MAX_TOTAL_HOURS * 60)
    return _compute(
        Fraction(int(worked_minutes), 60),
        Fraction(int(night_minutes), 60),
        day_context,
        policy,
        hourly_wage,
        rates,
        factory,
    )


def _compute(
    total: Fraction,
    night: Fraction,
    context: DayContext,
    policy: Optional[EmployeeTypePolicy],
    hourly_wage: Optional[float],
    rates: Optional[OvertimeRates],
    factory: Optional[OvertimeStrategyFactory],
) -> OvertimeBreakdown:
    policy = policy or policy_for(context.employee_type)
    rates = rates or OvertimeRates()
    if hourly_wage is not None:
        require_non_negative(hourly_wage, "hourly_wage")

    split = (factory or OvertimeStrategyFactory()).for_policy(policy).split(total, context, policy)
    if not split.counted:
        split, night, total = TierSplit(counted=False), Fraction(0), Fraction(0)

    breakdown = OvertimeBreakdown(
        regular_hours=float(split.regular),
        surcharge_25_hours=float(split.surcharge),
        supplementary_50_hours=float(split.supplementary),
        extraordinary_100_hours=float(split.extraordinary),
        night_hours=float(night),
        total_overtime_hours=float(split.overtime),
        worked_hours=float(total),
        days_counted=1 if split.counted else 0,
    )
    if hourly_wage is None:
        return breakdown
    return _with_amounts(breakdown, split, night, Fraction(hourly_wage), rates)


def _with_amounts(
    breakdown: OvertimeBreakdown,
    split: TierSplit,
    night: Fraction,
    wage: Fraction,
    rates: OvertimeRates,
) -> OvertimeBreakdown:
    regular = split.regular * wage
    surcharge = split.surcharge * wage * (1 + Fraction(rates.surcharge))
    supplementary = split.supplementary * wage * (1 + Fraction(rates.supplementary))
    extraordinary = split.extraordinary * wage * (1 + Fraction(rates.extraordinary))
    night_premium = night * wage * Fraction(rates.night)

    return replace(
        breakdown,
        regular_amount=float(regular),
        surcharge_25_amount=float(surcharge),
        supplementary_50_amount=float(supplementary),
        extraordinary_100_amount=float(extraordinary),
        night_amount=float(night_premium),
        total_amount=float(regular + surcharge + supplementary + extraordinary + night_premium),
    )


def combine_overtime(breakdowns: Iterable[OvertimeBreakdown]) -> OvertimeBreakdown:
    """Sum per-day breakdowns into a period total.

    Uses math.fsum so the result does not depend on the order of the days.
    Monetary fields are summed when at least one day carries them.
    """
    items = list(breakdowns)
    values: dict = {name: math.fsum(getattr(b, name) for b in items) for name in _HOUR_FIELDS}
    values["days_counted"] = sum(b.days_counted for b in items)

    if any(b.has_amounts for b in items):
        for name in _AMOUNT_FIELDS:
            values[name] = math.fsum(getattr(b, name) or 0.0 for b in items)
    return OvertimeBreakdown(**values)


def average_multiplier(breakdown: OvertimeBreakdown, rates: Optional[OvertimeRates] = None) -> float:
    """Pay-weighted hours per worked hour (1.0 when nothing is overtime)."""
    rates = rates or OvertimeRates()
    tier_hours = breakdown.regular_hours + breakdown.total_overtime_hours
    if tier_hours == 0:
        return 1.0
    weighted = (
        breakdown.regular_hours
        + breakdown.surcharge_25_hours * (1 + rates.surcharge)
        + breakdown.supplementary_50_hours * (1 + rates.supplementary)
        + breakdown.extraordinary_100_hours * (1 + rates.extraordinary)
    )
    return weighted / tier_hours


def summary_lines(breakdown: OvertimeBreakdown, *, label: str = "") -> list[str]:
    lines = [f"Hours summary {label}".rstrip()]
    if breakdown.regular_hours > 0:
        lines.append(f"Regular: {breakdown.regular_hours:.2f}h")
    if breakdown.surcharge_25_hours > 0:
        lines.append(f"Surcharge (25%): {breakdown.surcharge_25_hours:.2f}h")
    if breakdown.supplementary_50_hours > 0:
        lines.append(f"Supplementary (50%): {breakdown.supplementary_50_hours:.2f}h")
    if breakdown.extraordinary_100_hours > 0:
        lines.append(f"Extraordinary (100%): {breakdown.extraordinary_100_hours:.2f}h")
    if breakdown.night_hours > 0:
        lines.append(f"Night: {breakdown.night_hours:.2f}h")
    lines.append(f"Total overtime: {breakdown.total_overtime_hours:.2f}h")
    if breakdown.has_amounts:
        lines.append(f"Total amount: {breakdown.total_amount:.2f}")
    return lines

