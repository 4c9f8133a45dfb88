from datetime import date

import pytest

from src.attendance_engine.attendance_engine.core.enums import CalculationMethod, EmployeeType, OvertimeMethod
from src.attendance_engine.attendance_engine.core.exceptions import ValidationError
from src.attendance_engine.attendance_engine.policies.employee_type import (
    ADMINISTRATIVE_POLICY,
    REGULAR_POLICY,
    policy_for,
    to_employee_type,
)


def test_regular_policy_tracks_entry_and_exit():
    assert REGULAR_POLICY.calculation_method == CalculationMethod.ENTRY_EXIT
    assert REGULAR_POLICY.overtime_method == OvertimeMethod.STANDARD
    assert REGULAR_POLICY.has_fixed_schedule
    assert REGULAR_POLICY.is_regular


def test_administrative_policy_uses_first_and_last_movement():
    assert ADMINISTRATIVE_POLICY.calculation_method == CalculationMethod.FIRST_LAST_MOVEMENT
    assert ADMINISTRATIVE_POLICY.minimum_hours_per_day == 4
    assert not ADMINISTRATIVE_POLICY.overtime.applies_surcharge
    assert ADMINISTRATIVE_POLICY.is_administrative


def test_administrative_days_under_minimum_are_not_processed():
    assert not ADMINISTRATIVE_POLICY.should_process_attendance_record(3.5, date(2024, 1, 15))
    assert ADMINISTRATIVE_POLICY.should_process_attendance_record(4, date(2024, 1, 15))


def test_regular_days_are_always_processed():
    assert REGULAR_POLICY.should_process_attendance_record(0.5, date(2024, 1, 15))


def test_branch_access():
    assert REGULAR_POLICY.can_access_branch("B1", ["B1"])
    assert not REGULAR_POLICY.can_access_branch("B2", ["B1"])
    assert ADMINISTRATIVE_POLICY.can_access_branch("B7", ["B1", "B2"])


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("regular", EmployeeType.REGULAR),
        ("ADMINISTRATIVE", EmployeeType.ADMINISTRATIVE),
        ("Administrativo", EmployeeType.ADMINISTRATIVE),
        (EmployeeType.REGULAR, EmployeeType.REGULAR),
    ],
)
def test_to_employee_type(raw, expected):
    assert to_employee_type(raw) == expected


def test_unknown_employee_type_is_rejected():
    with pytest.raises(ValidationError):
        policy_for("contractor")


def test_key_features_mention_tiers():
    features = REGULAR_POLICY.key_features()

    assert "Fixed schedule" in features
    assert "Surcharge 25%" in features
