import itertools
from datetime import date, datetime

import pytest

from src.attendance_engine.attendance_engine.core.enums import EmployeeType
from src.attendance_engine.attendance_engine.core.exceptions import ValidationError
from src.attendance_engine.attendance_engine.overtime.calculator.administrative_strategy import (
    AdministrativeOvertimeStrategy,
)
from src.attendance_engine.attendance_engine.overtime.calculator.factory import OvertimeStrategyFactory
from src.attendance_engine.attendance_engine.overtime.calculator.regular_strategy import RegularOvertimeStrategy
from src.attendance_engine.attendance_engine.overtime.calendar import FixedHolidayCalendar
from src.attendance_engine.attendance_engine.overtime.model import DayContext, OvertimeBreakdown, OvertimeRates
from src.attendance_engine.attendance_engine.overtime.service import (
    average_multiplier,
    build_day_context,
    combine_overtime,
    compute_overtime,
    compute_overtime_minutes,
    summary_lines,
)
from src.attendance_engine.attendance_engine.policies.employee_type import ADMINISTRATIVE_POLICY, REGULAR_POLICY

MONDAY = date(2024, 1, 15)
SATURDAY = date(2024, 1, 20)


def weekday(employee_type=EmployeeType.REGULAR, **kwargs):
    return DayContext.for_date(MONDAY, employee_type, **kwargs)


def tiers(b: OvertimeBreakdown):
    return (b.regular_hours, b.surcharge_25_hours, b.supplementary_50_hours, b.extraordinary_100_hours)


def test_regular_ten_hours():
    b = compute_overtime(10, weekday())

    assert tiers(b) == (8, 2, 0, 0)
    assert b.total_overtime_hours == 2


def test_regular_thirteen_hours():
    b = compute_overtime(13, weekday())

    assert tiers(b) == (8, 2, 2, 1)
    assert b.total_overtime_hours == 5


def test_regular_short_day_is_all_regular():
    assert tiers(compute_overtime(6.5, weekday())) == (6.5, 0, 0, 0)


def test_shorter_schedule_lowers_the_regular_cap():
    b = compute_overtime(10, weekday(scheduled_hours=6))

    assert tiers(b) == (6, 2, 2, 0)


def test_weekend_hours_are_all_extraordinary():
    context = DayContext.for_date(SATURDAY, EmployeeType.REGULAR)

    b = compute_overtime(6, context)

    assert context.is_weekend
    assert tiers(b) == (0, 0, 0, 6)


def test_holiday_from_calendar_is_all_extraordinary():
    calendar = FixedHolidayCalendar.from_iso(["2024-01-15"])
    context = build_day_context(MONDAY, EmployeeType.REGULAR, calendar=calendar)

    b = compute_overtime(9, context)

    assert context.is_holiday
    assert tiers(b) == (0, 0, 0, 9)


def test_day_context_minimum_follows_policy():
    assert build_day_context(MONDAY, EmployeeType.REGULAR).minimum_hours == 0
    assert build_day_context(MONDAY, EmployeeType.ADMINISTRATIVE).minimum_hours == ADMINISTRATIVE_POLICY.minimum_hours_per_day
    assert build_day_context(MONDAY, EmployeeType.REGULAR, minimum_hours=2).minimum_hours == 2


def test_administrative_under_minimum_is_not_counted():
    b = compute_overtime(3, weekday(EmployeeType.ADMINISTRATIVE), ADMINISTRATIVE_POLICY, 12.0, night_hours=1)

    assert tiers(b) == (0, 0, 0, 0)
    assert b.night_hours == 0
    assert b.days_counted == 0
    assert b.total_amount == 0


def test_administrative_nine_hours():
    b = compute_overtime(9, weekday(EmployeeType.ADMINISTRATIVE), ADMINISTRATIVE_POLICY)

    assert tiers(b) == (8, 0, 0, 1)
    assert b.days_counted == 1


@pytest.mark.parametrize("quarter_hours", range(0, 97))
def test_tiers_add_up_to_total(quarter_hours):
    total = quarter_hours / 4
    for context in (weekday(), weekday(EmployeeType.ADMINISTRATIVE, minimum_hours=0)):
        b = compute_overtime(total, context)

        assert sum(tiers(b)) == pytest.approx(total)
        assert b.total_overtime_hours == pytest.approx(b.surcharge_25_hours + b.supplementary_50_hours + b.extraordinary_100_hours)
        assert min(tiers(b)) >= 0


def test_minutes_entry_point_matches_hours():
    assert compute_overtime_minutes(600, weekday()) == compute_overtime(10, weekday())


def test_amounts_with_hourly_wage():
    b = compute_overtime(10, weekday(), REGULAR_POLICY, 10.0, night_hours=2)

    assert b.regular_amount == pytest.approx(80)
    assert b.surcharge_25_amount == pytest.approx(25)
    assert b.night_amount == pytest.approx(5)
    assert b.total_amount == pytest.approx(110)


def test_custom_rates():
    rates = OvertimeRates(surcharge=0.5)

    b = compute_overtime(9, weekday(), REGULAR_POLICY, 10.0, rates=rates)

    assert b.surcharge_25_amount == pytest.approx(15)


def test_no_wage_means_no_amounts():
    b = compute_overtime(9, weekday())

    assert b.total_amount is None
    assert not b.has_amounts


@pytest.mark.parametrize("hours", [-0.5, 24.5, float("nan")])
def test_out_of_range_hours_are_rejected(hours):
    with pytest.raises(ValidationError):
        compute_overtime(hours, weekday())


def test_negative_wage_is_rejected():
    with pytest.raises(ValidationError):
        compute_overtime(8, weekday(), REGULAR_POLICY, -1)


def test_rates_above_ceiling_are_rejected():
    with pytest.raises(ValidationError):
        OvertimeRates(extraordinary=3.5)


def test_combine_is_order_independent():
    days = [
        compute_overtime(9.1, weekday(), REGULAR_POLICY, 13.7),
        compute_overtime(12.3, weekday(), REGULAR_POLICY, 13.7, night_hours=0.7),
        compute_overtime(10.9, weekday(), REGULAR_POLICY, 13.7),
        compute_overtime(5.5, DayContext.for_date(SATURDAY, EmployeeType.REGULAR), REGULAR_POLICY, 13.7),
    ]

    totals = {combine_overtime(order) for order in itertools.permutations(days)}

    assert len(totals) == 1
    total = totals.pop()
    assert total.days_counted == 4
    assert total.worked_hours == pytest.approx(37.8)


def test_combine_with_and_without_amounts():
    total = combine_overtime([compute_overtime(10, weekday(), REGULAR_POLICY, 10.0), compute_overtime(9, weekday())])

    assert total.total_amount == pytest.approx(105)
    assert total.surcharge_25_hours == 3


def test_combine_of_nothing_is_zero():
    total = combine_overtime([])

    assert total.paid_hours == 0
    assert total.days_counted == 0


def test_average_multiplier():
    assert average_multiplier(compute_overtime(10, weekday())) == pytest.approx(1.05)
    assert average_multiplier(OvertimeBreakdown()) == 1.0


def test_summary_lines():
    lines = summary_lines(compute_overtime(13, weekday(), REGULAR_POLICY, 10.0), label="2024-01-15")

    assert lines[0] == "Hours summary 2024-01-15"
    assert "Extraordinary (100%): 1.00h" in lines


def test_factory_selects_strategy_by_policy():
    factory = OvertimeStrategyFactory()

    assert isinstance(factory.for_policy(REGULAR_POLICY), RegularOvertimeStrategy)
    assert isinstance(factory.for_policy(ADMINISTRATIVE_POLICY), AdministrativeOvertimeStrategy)


def test_day_context_rejects_datetime():
    with pytest.raises(ValidationError):
        DayContext.for_date(datetime(2024, 1, 15, 8), EmployeeType.REGULAR)
