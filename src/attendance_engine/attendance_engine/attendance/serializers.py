"""JSON shapes for records, breakdowns and request payloads."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_iso_date
from ..core.conflicts import Conflict
from ..core.exceptions import ValidationError
from ..overtime.model import DayContext, OvertimeBreakdown
from ..policies.employee_type import to_employee_type
from ..sequencing.work_codes import SequenceValidation
from .model import AttendanceRecord, EmployeeProfile, Movement
from .status import describe_status


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def conflict_to_dict(conflict: Conflict) -> dict:
    return {
        "kind": conflict.kind.value,
        "message": conflict.message,
        "timestamp": _iso(conflict.timestamp),
        "workCode": int(conflict.work_code) if conflict.work_code is not None else None,
    }


def movement_to_dict(movement: Movement) -> dict:
    return {
        "timestamp": movement.timestamp.isoformat(),
        "workCode": int(movement.work_code),
        "description": movement.description,
        "source": movement.source.value,
        "deviceId": movement.device_id,
    }


def sequence_to_dict(validation: SequenceValidation) -> dict:
    return {"isValid": validation.is_valid, "violations": list(validation.violations)}


def breakdown_to_dict(breakdown: OvertimeBreakdown) -> dict:
    data = asdict(breakdown)
    if not breakdown.has_amounts:
        data = {k: v for k, v in data.items() if not k.endswith("_amount")}
    return data


def record_to_dict(record: AttendanceRecord) -> dict:
    return {
        "employeeId": record.employee_id,
        "workDate": record.work_date.isoformat(),
        "status": describe_status(record.status),
        "entry": _iso(record.entry),
        "exit": _iso(record.exit),
        "entry2": _iso(record.entry2),
        "exit2": _iso(record.exit2),
        "lunchMinutes": record.lunch_minutes,
        "breakMinutes": record.break_minutes,
        "hours": {
            "regular": record.regular_hours,
            "surcharge25": record.surcharge_25_hours,
            "supplementary50": record.supplementary_50_hours,
            "extraordinary100": record.extraordinary_100_hours,
            "night": record.night_hours,
            "overtime": record.overtime_hours,
            "total": record.total_hours,
        },
        "isManual": record.is_manual,
        "manuallyModified": record.manually_modified,
        "reviewRequired": record.review_required,
        "sequenceValid": record.sequence_valid,
        "modifiedBy": record.modified_by,
        "modifiedAt": _iso(record.modified_at),
        "notes": record.notes,
        "movements": [movement_to_dict(m) for m in record.movements],
        "conflicts": [conflict_to_dict(c) for c in record.conflicts],
    }


def _date_field(data: Mapping[str, Any], *keys: str) -> date:
    for key in keys:
        if data.get(key):
            return parse_iso_date(str(data[key]))
    raise ValidationError(f"{keys[0]} is required")


def work_date_from(data: Mapping[str, Any]) -> date:
    return _date_field(data, "workDate", "work_date", "date")


def profile_from(employee_id: str, data: Optional[Mapping[str, Any]]) -> EmployeeProfile:
    data = data or {}
    kwargs: dict = {"employee_id": employee_id}
    if data.get("employeeType") or data.get("employee_type"):
        kwargs["employee_type"] = to_employee_type(data.get("employeeType") or data.get("employee_type"))
    for key, name in (("scheduledHours", "scheduled_hours"), ("hourlyWage", "hourly_wage")):
        value = data.get(key, data.get(name))
        if value is not None:
            kwargs[name] = _number(value, key)
    return EmployeeProfile(**kwargs)


def day_context_from(data: Mapping[str, Any]) -> DayContext:
    """DayContext from a request body; weekend is taken from the date unless given."""
    work_date = work_date_from(data)
    employee_type = to_employee_type(data.get("employeeType") or data.get("employee_type") or "REGULAR")
    context = DayContext.for_date(
        work_date,
        employee_type,
        is_holiday=bool(data.get("isHoliday", data.get("is_holiday", False))),
        scheduled_hours=_number(data.get("scheduledHours", data.get("scheduled_hours", 8)), "scheduledHours"),
        minimum_hours=_number(data.get("minimumHours", data.get("minimum_hours", 4)), "minimumHours"),
    )
    weekend = data.get("isWeekend", data.get("is_weekend"))
    if weekend is None:
        return context
    return DayContext(
        work_date=context.work_date,
        is_weekend=bool(weekend),
        is_holiday=context.is_holiday,
        employee_type=context.employee_type,
        scheduled_hours=context.scheduled_hours,
        minimum_hours=context.minimum_hours,
    )


def breakdown_from(data: Mapping[str, Any]) -> OvertimeBreakdown:
    if not isinstance(data, Mapping):
        raise ValidationError("Each breakdown must be an object")
    known = OvertimeBreakdown.__dataclass_fields__
    values = {k: v for k, v in data.items() if k in known}
    try:
        return OvertimeBreakdown(**values)
    except TypeError as exc:
        raise ValidationError(f"Invalid breakdown: {exc}") from exc


def _number(value, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field_name} must be a number") from exc
