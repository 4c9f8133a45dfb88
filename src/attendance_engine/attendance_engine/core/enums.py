from __future__ import annotations

from enum import Enum, IntEnum


class WorkCode(IntEnum):
    """Movement code reported by a biometric terminal (0..5 on the wire)."""

    ENTRY = 0
    EXIT = 1
    BREAK_START = 2
    BREAK_END = 3
    LUNCH_START = 4
    LUNCH_END = 5


class AttendanceStatus(str, Enum):
    """Day status of an attendance record."""

    COMPLETO = "COMPLETO"
    PENDIENTE = "PENDIENTE"
    INCONSISTENTE = "INCONSISTENTE"
    AUSENTE = "AUSENTE"
    VACACIONES = "VACACIONES"
    PERMISO = "PERMISO"
    INCAPACIDAD = "INCAPACIDAD"
    FERIADO = "FERIADO"
    MODIFICADO = "MODIFICADO"
    REVISION = "REVISION"


class EmployeeType(str, Enum):
    REGULAR = "REGULAR"
    ADMINISTRATIVE = "ADMINISTRATIVE"


class CalculationMethod(str, Enum):
    """How a day's bounds are derived from its movements."""

    ENTRY_EXIT = "ENTRY_EXIT"
    FIRST_LAST_MOVEMENT = "FIRST_LAST_MOVEMENT"


class OvertimeMethod(str, Enum):
    STANDARD = "STANDARD"
    EFFECTIVE_HOURS = "EFFECTIVE_HOURS"


class VerificationType(str, Enum):
    FACE = "FACE"
    FINGERPRINT = "FINGERPRINT"
    CARD = "CARD"
    PASSWORD = "PASSWORD"
    COMBINED = "COMBINED"


class MovementSource(str, Enum):
    BIOMETRIC = "BIOMETRIC"
    MANUAL = "MANUAL"


class ConflictKind(str, Enum):
    """Non-fatal anomaly attached to a reconciliation result."""

    DUPLICATE = "DUPLICATE"
    LOW_CONFIDENCE = "LOW_CONFIDENCE"
    SEQUENCE = "SEQUENCE"
    EXIT_BEFORE_ENTRY = "EXIT_BEFORE_ENTRY"
    LUNCH_TOO_LONG = "LUNCH_TOO_LONG"
    BELOW_MINIMUM_HOURS = "BELOW_MINIMUM_HOURS"
    CARRY_OVER = "CARRY_OVER"
