from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Mapping, Optional, Union

from ..biometrics.model import BiometricEvent, ProcessingResult
from ..biometrics.processor import BiometricEventProcessor
from ..common.datetime_utils import require_uniform_awareness
from ..common.logging_utils import get_logger
from ..common.validators import require_date, require_non_empty
from ..core.conflicts import Conflict
from ..core.constants import DEFAULT_REVIEW_CONFLICT_THRESHOLD
from ..core.enums import AttendanceStatus, MovementSource, WorkCode
from ..core.exceptions import ValidationError
from ..overtime.calendar import HolidayCalendar
from ..overtime.model import OvertimeBreakdown, OvertimeRates
from ..overtime.service import build_day_context, combine_overtime
from ..policies.employee_type import policy_for
from ..sequencing.work_codes import to_work_code
from . import transitions
from .model import AttendanceRecord, EmployeeProfile, Movement
from .repository import AttendanceRepository, EmployeeDirectory
from .transitions import CalculationContext

RawEvent = Union[BiometricEvent, Mapping[str, Any]]


@dataclass(frozen=True)
class ReconciliationResult:
    record: AttendanceRecord
    breakdown: OvertimeBreakdown
    processing: ProcessingResult

    @property
    def status(self) -> AttendanceStatus:
        return self.record.status

    @property
    def conflicts(self) -> tuple[Conflict, ...]:
        return self.record.conflicts


class ReconciliationService:
    """Reconciles a day of punches into an attendance record with hours.

    Repositories are optional. Without them every call works on the
    snapshots passed in and nothing is stored.
    """

    def __init__(
        self,
        processor: BiometricEventProcessor,
        *,
        calendar: Optional[HolidayCalendar] = None,
        employees: Optional[EmployeeDirectory] = None,
        records: Optional[AttendanceRepository] = None,
        rates: Optional[OvertimeRates] = None,
        review_conflict_threshold: int = DEFAULT_REVIEW_CONFLICT_THRESHOLD,
        logger: Optional[logging.Logger] = None,
    ):
        self._processor = processor
        self._calendar = calendar
        self._employees = employees
        self._records = records
        self._rates = rates or OvertimeRates()
        self._review_threshold = int(review_conflict_threshold)
        self._log = get_logger(logger, __name__)

    def profile_for(self, employee_id: str, profile: Optional[EmployeeProfile] = None) -> EmployeeProfile:
        if profile is not None:
            return profile
        if self._employees is not None:
            found = self._employees.get_profile(employee_id)
            if found:
                return found
        return EmployeeProfile(employee_id=employee_id)

    def context_for(self, profile: EmployeeProfile, work_date: date) -> CalculationContext:
        return CalculationContext(
            day=build_day_context(
                work_date,
                profile.employee_type,
                scheduled_hours=profile.scheduled_hours,
                calendar=self._calendar,
            ),
            policy=policy_for(profile.employee_type),
            rates=self._rates,
            hourly_wage=profile.hourly_wage,
            review_conflict_threshold=self._review_threshold,
        )

    def reconcile_day(
        self,
        employee_id: str,
        work_date: date,
        raw_events: Iterable[RawEvent],
        *,
        profile: Optional[EmployeeProfile] = None,
        previous_movement=None,
        current: Optional[AttendanceRecord] = None,
    ) -> ReconciliationResult:
        """Process the full set of a day's raw punches.

        Running it twice on the same punches yields the same record. Manual
        movements, leave and manual pins already on ``current`` (or on the
        stored record) are kept. ``previous_movement`` is the previous day's
        last code; when omitted it is read from the stored previous day.
        """
        employee_id = require_non_empty(employee_id, "employee_id")
        require_date(work_date, "work_date")
        events = [self._to_event(raw) for raw in raw_events]
        require_uniform_awareness([e.timestamp for e in events], "Punch timestamps")
        for event in events:
            if event.employee_id != employee_id:
                raise ValidationError(f"Punch for employee {event.employee_id} cannot be reconciled into {employee_id}'s day")
            if event.timestamp.date() != work_date:
                raise ValidationError(f"Punch at {event.timestamp.isoformat()} is outside {work_date.isoformat()}")

        profile = self.profile_for(employee_id, profile)
        ctx = self.context_for(profile, work_date)
        carried_over = self._carried_over(employee_id, work_date, previous_movement)

        processing = self._processor.process(events, method=ctx.policy.calculation_method, carried_over=carried_over)
        movements = [
            Movement(e.timestamp, e.work_code, MovementSource.BIOMETRIC, e.device_id) for e in processing.effective_events
        ]
        ingestion = [c for c in processing.conflicts if c.is_ingestion]

        base = current or self._load(employee_id, work_date)
        record = transitions.replace_biometric_movements(base, movements, ctx, conflicts=ingestion, carried_over=carried_over)
        self._store(record)

        self._log.info(
            "Reconciled %s on %s: status=%s worked=%.2fh overtime=%.2fh conflicts=%s",
            employee_id,
            work_date.isoformat(),
            record.status.value,
            record.worked_minutes() / 60,
            record.overtime_hours,
            len(record.conflicts),
        )
        return ReconciliationResult(record=record, breakdown=transitions.hours_breakdown(record, ctx), processing=processing)

    def register_entry(self, employee_id: str, work_date: date, at: datetime, *, modified_by: Optional[str] = None, profile=None) -> AttendanceRecord:
        ctx = self.context_for(self.profile_for(employee_id, profile), work_date)
        record = transitions.register_entry(self._load(employee_id, work_date), at, ctx, modified_by=modified_by)
        return self._store(record)

    def register_exit(self, employee_id: str, work_date: date, at: datetime, *, modified_by: Optional[str] = None, profile=None) -> AttendanceRecord:
        ctx = self.context_for(self.profile_for(employee_id, profile), work_date)
        record = transitions.register_exit(self._load(employee_id, work_date), at, ctx, modified_by=modified_by)
        return self._store(record)

    def correct(self, employee_id: str, work_date: date, *, modified_by: str, profile=None, **changes) -> AttendanceRecord:
        ctx = self.context_for(self.profile_for(employee_id, profile), work_date)
        record = transitions.apply_correction(self._load(employee_id, work_date), ctx, modified_by=modified_by, **changes)
        self._log.info("Manual correction of %s on %s by %s", employee_id, work_date.isoformat(), modified_by)
        return self._store(record)

    def mark_leave(self, employee_id: str, work_date: date, leave_status: AttendanceStatus, *, modified_by: Optional[str] = None, notes=None) -> AttendanceRecord:
        record = transitions.mark_leave(self._load(employee_id, work_date), leave_status, modified_by=modified_by, notes=notes)
        return self._store(record)

    def clear_leave(self, employee_id: str, work_date: date, *, modified_by: Optional[str] = None, profile=None) -> AttendanceRecord:
        ctx = self.context_for(self.profile_for(employee_id, profile), work_date)
        record = transitions.clear_leave(self._load(employee_id, work_date), ctx, modified_by=modified_by)
        return self._store(record)

    def recalculate(self, employee_id: str, work_date: date, *, clear_modification: bool = False, profile=None) -> AttendanceRecord:
        ctx = self.context_for(self.profile_for(employee_id, profile), work_date)
        record = transitions.recalculate(self._load(employee_id, work_date), ctx, clear_modification=clear_modification)
        return self._store(record)

    def period_breakdown(self, employee_id: str, start_date: date, end_date: date, *, profile=None) -> OvertimeBreakdown:
        """Combined tiers and amounts of every stored day in [start_date, end_date]."""
        if start_date > end_date:
            raise ValidationError("start_date must not be after end_date")
        if self._records is None:
            return OvertimeBreakdown()
        profile = self.profile_for(employee_id, profile)
        days = self._records.list_for_employee(employee_id, start_date, end_date)
        return combine_overtime(transitions.hours_breakdown(r, self.context_for(profile, r.work_date)) for r in days)

    @staticmethod
    def _to_event(raw: RawEvent) -> BiometricEvent:
        if isinstance(raw, BiometricEvent):
            return raw
        if isinstance(raw, Mapping):
            return BiometricEvent.from_raw(raw)
        raise ValidationError(f"Unsupported punch payload: {type(raw).__name__}")

    def _carried_over(self, employee_id: str, work_date: date, previous) -> Optional[WorkCode]:
        if previous is not None:
            return to_work_code(getattr(previous, "work_code", previous))
        if self._records is None:
            return None
        prior = self._records.get_for_employee_and_date(employee_id, work_date - timedelta(days=1))
        if prior and prior.movements:
            return prior.movements[-1].work_code
        return None

    def _load(self, employee_id: str, work_date: date) -> AttendanceRecord:
        if self._records is not None:
            found = self._records.get_for_employee_and_date(employee_id, work_date)
            if found:
                return found
        return transitions.empty_record(employee_id, work_date)

    def _store(self, record: AttendanceRecord) -> AttendanceRecord:
        if self._records is not None:
            self._records.save(record)
        return record
