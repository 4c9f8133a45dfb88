"""Attendance status derivation and the display/workflow maps for each status."""

from __future__ import annotations

from typing import Optional

from ..core.enums import AttendanceStatus

S = AttendanceStatus

LEAVE_STATUSES = frozenset({S.VACACIONES, S.PERMISO, S.INCAPACIDAD, S.FERIADO})

STATUS_DESCRIPTIONS = {
    S.COMPLETO: "Complete attendance",
    S.PENDIENTE: "Waiting for the exit punch",
    S.INCONSISTENTE: "Punches are inconsistent",
    S.AUSENTE: "No attendance registered",
    S.VACACIONES: "On vacation",
    S.PERMISO: "On authorized leave",
    S.INCAPACIDAD: "On medical leave",
    S.FERIADO: "Public holiday",
    S.MODIFICADO: "Manually modified",
    S.REVISION: "Requires review",
}

STATUS_COLORS = {
    S.COMPLETO: "#28a745",
    S.PENDIENTE: "#ffc107",
    S.INCONSISTENTE: "#dc3545",
    S.AUSENTE: "#6c757d",
    S.VACACIONES: "#17a2b8",
    S.PERMISO: "#6f42c1",
    S.INCAPACIDAD: "#fd7e14",
    S.FERIADO: "#20c997",
    S.MODIFICADO: "#007bff",
    S.REVISION: "#e83e8c",
}

STATUS_ICONS = {
    S.COMPLETO: "check-circle",
    S.PENDIENTE: "clock",
    S.INCONSISTENTE: "alert-triangle",
    S.AUSENTE: "x-circle",
    S.VACACIONES: "sun",
    S.PERMISO: "file-text",
    S.INCAPACIDAD: "heart",
    S.FERIADO: "calendar",
    S.MODIFICADO: "edit",
    S.REVISION: "search",
}

# Lower sorts first in review queues.
STATUS_PRIORITY = {
    S.INCONSISTENTE: 1,
    S.REVISION: 2,
    S.PENDIENTE: 3,
    S.AUSENTE: 4,
    S.MODIFICADO: 5,
    S.INCAPACIDAD: 6,
    S.PERMISO: 7,
    S.VACACIONES: 8,
    S.FERIADO: 9,
    S.COMPLETO: 10,
}

STATUS_ACTIONS = {
    S.COMPLETO: ("view", "edit"),
    S.PENDIENTE: ("register_exit", "edit"),
    S.INCONSISTENTE: ("review", "correct"),
    S.AUSENTE: ("register_entry", "mark_leave"),
    S.VACACIONES: ("view", "clear_leave"),
    S.PERMISO: ("view", "clear_leave"),
    S.INCAPACIDAD: ("view", "clear_leave"),
    S.FERIADO: ("view", "clear_leave"),
    S.MODIFICADO: ("view", "edit", "recalculate"),
    S.REVISION: ("review", "approve", "correct"),
}

STATUS_GROUPS = {
    S.COMPLETO: "worked",
    S.PENDIENTE: "worked",
    S.MODIFICADO: "worked",
    S.INCONSISTENTE: "attention",
    S.REVISION: "attention",
    S.AUSENTE: "absence",
    S.VACACIONES: "justified_absence",
    S.PERMISO: "justified_absence",
    S.INCAPACIDAD: "justified_absence",
    S.FERIADO: "justified_absence",
}

_LEAVE_EXITS = (S.AUSENTE, S.COMPLETO, S.PENDIENTE)

VALID_TRANSITIONS = {
    S.AUSENTE: (S.PENDIENTE, S.COMPLETO, S.INCONSISTENTE, S.VACACIONES, S.PERMISO, S.INCAPACIDAD, S.FERIADO, S.MODIFICADO, S.REVISION),
    S.PENDIENTE: (S.COMPLETO, S.INCONSISTENTE, S.MODIFICADO, S.REVISION, S.VACACIONES, S.PERMISO, S.INCAPACIDAD, S.FERIADO),
    S.COMPLETO: (S.INCONSISTENTE, S.MODIFICADO, S.REVISION, S.VACACIONES, S.PERMISO, S.INCAPACIDAD, S.FERIADO),
    S.INCONSISTENTE: (S.COMPLETO, S.PENDIENTE, S.MODIFICADO, S.REVISION, S.VACACIONES, S.PERMISO, S.INCAPACIDAD, S.FERIADO),
    S.REVISION: (S.COMPLETO, S.PENDIENTE, S.INCONSISTENTE, S.MODIFICADO, S.VACACIONES, S.PERMISO, S.INCAPACIDAD, S.FERIADO),
    S.MODIFICADO: (S.COMPLETO, S.PENDIENTE, S.INCONSISTENTE, S.AUSENTE, S.REVISION, S.VACACIONES, S.PERMISO, S.INCAPACIDAD, S.FERIADO),
    S.VACACIONES: _LEAVE_EXITS,
    S.PERMISO: _LEAVE_EXITS,
    S.INCAPACIDAD: _LEAVE_EXITS,
    S.FERIADO: _LEAVE_EXITS,
}


def derive_status(
    *,
    has_entry: bool,
    has_exit: bool,
    sequence_valid: bool = True,
    leave_status: Optional[AttendanceStatus] = None,
    manually_modified: bool = False,
    review_required: bool = False,
) -> AttendanceStatus:
    """Status of a day from its flags.

    Precedence: leave, manual modification, inconsistency, review, then the
    punch-derived states (absent, pending, complete).
    """
    if leave_status is not None:
        return leave_status
    if manually_modified:
        return S.MODIFICADO
    if (has_exit and not has_entry) or not sequence_valid:
        return S.INCONSISTENTE
    if review_required:
        return S.REVISION
    if not has_entry:
        return S.AUSENTE
    if not has_exit:
        return S.PENDIENTE
    return S.COMPLETO


def is_leave(status: AttendanceStatus) -> bool:
    return status in LEAVE_STATUSES


def counts_as_worked(status: AttendanceStatus) -> bool:
    return STATUS_GROUPS[status] == "worked"


def requires_attention(status: AttendanceStatus) -> bool:
    return STATUS_GROUPS[status] == "attention"


def allows_hours(status: AttendanceStatus) -> bool:
    return not is_leave(status) and status != S.AUSENTE


def can_transition(current: AttendanceStatus, target: AttendanceStatus) -> bool:
    return current == target or target in VALID_TRANSITIONS[current]


def describe_status(status: AttendanceStatus) -> dict:
    return {
        "status": status.value,
        "description": STATUS_DESCRIPTIONS[status],
        "color": STATUS_COLORS[status],
        "icon": STATUS_ICONS[status],
        "priority": STATUS_PRIORITY[status],
        "actions": list(STATUS_ACTIONS[status]),
        "group": STATUS_GROUPS[status],
    }
