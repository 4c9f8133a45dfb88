from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import require_non_empty, require_range
from ..core.constants import MAX_CONFIDENCE_SCORE, MIN_CONFIDENCE_SCORE
from ..core.conflicts import Conflict
from ..core.enums import VerificationType, WorkCode
from ..core.exceptions import ValidationError
from ..sequencing.work_codes import SequenceValidation, describe, to_work_code


def _pick(data: Mapping[str, Any], *keys: str, default=None):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class BiometricEvent:
    """A raw punch as delivered by device ingestion. Never mutated."""

    employee_id: str
    device_id: str
    timestamp: datetime
    work_code: WorkCode
    verification_type: VerificationType = VerificationType.FACE
    confidence_score: float = MAX_CONFIDENCE_SCORE

    def __post_init__(self) -> None:
        object.__setattr__(self, "employee_id", require_non_empty(self.employee_id, "employee_id"))
        object.__setattr__(self, "device_id", require_non_empty(self.device_id, "device_id"))
        if not isinstance(self.timestamp, datetime):
            raise ValidationError("timestamp must be a datetime")
        object.__setattr__(self, "work_code", to_work_code(self.work_code))
        try:
            object.__setattr__(self, "verification_type", VerificationType(self.verification_type))
        except ValueError as exc:
            raise ValidationError(f"Unknown verification type: {self.verification_type!r}") from exc
        require_range(self.confidence_score, "confidence_score", 0, MAX_CONFIDENCE_SCORE)

    @property
    def is_reliable(self) -> bool:
        return self.confidence_score >= MIN_CONFIDENCE_SCORE

    @property
    def description(self) -> str:
        return describe(self.work_code)

    @classmethod
    def from_raw(cls, data: Mapping[str, Any]) -> "BiometricEvent":
        """Build an event from a raw punch dict (camelCase or snake_case keys)."""
        code = _pick(data, "workCode", "work_code")
        if code is None:
            raise ValidationError("workCode is required")
        return cls(
            employee_id=str(_pick(data, "employeeId", "employee_id", default="")),
            device_id=str(_pick(data, "deviceId", "device_id", default="")),
            timestamp=parse_iso_datetime(_pick(data, "timestamp")),
            work_code=to_work_code(code),
            verification_type=_pick(data, "verificationType", "verification_type", default=VerificationType.FACE),
            confidence_score=_pick(data, "confidenceScore", "confidence_score", default=MAX_CONFIDENCE_SCORE),
        )


@dataclass(frozen=True)
class ProcessedEvent:
    """An event annotated by the processor."""

    event: BiometricEvent
    is_duplicate: bool = False
    is_effective: bool = False
    note: Optional[str] = None


@dataclass(frozen=True)
class ProcessingResult:
    events: tuple[ProcessedEvent, ...]
    entry: Optional[datetime]
    exit: Optional[datetime]
    sequence: SequenceValidation
    conflicts: tuple[Conflict, ...] = field(default_factory=tuple)
    lunch_minutes: int = 0
    break_minutes: int = 0

    @property
    def effective_events(self) -> tuple[BiometricEvent, ...]:
        return tuple(p.event for p in self.events if p.is_effective)

    @property
    def codes(self) -> tuple[WorkCode, ...]:
        return tuple(e.work_code for e in self.effective_events)


@dataclass(frozen=True)
class EventStats:
    total: int
    effective: int
    discarded: int
    duplicates: int
    average_confidence: float
    unique_devices: int
    unique_employees: int
    first_timestamp: Optional[datetime] = None
    last_timestamp: Optional[datetime] = None
