from __future__ import annotations

import math
from datetime import date, datetime

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_date(value, field_name: str) -> date:
    # datetime is a date subclass; a record day must be a plain calendar date
    if not isinstance(value, date) or isinstance(value, datetime):
        raise ValidationError(f"{field_name} must be a valid date")
    return value


def require_number(value, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        raise ValidationError(f"{field_name} must be a number")
    return value


def require_non_negative(value, field_name: str) -> float:
    require_number(value, field_name)
    if value < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return value


def require_range(value, field_name: str, low: float, high: float):
    require_number(value, field_name)
    if value < low or value > high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return value
