from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import ModuleType
from typing import Optional

from .attendance.repository import AttendanceRepository, EmployeeDirectory
from .attendance.service import ReconciliationService
from .biometrics.processor import BiometricEventProcessor
from .core.constants import (
    DEFAULT_DUPLICATE_THRESHOLD_SECONDS,
    DEFAULT_REVIEW_CONFLICT_THRESHOLD,
    MIN_CONFIDENCE_SCORE,
)
from .overtime.calendar import FixedHolidayCalendar, HolidayCalendar
from .overtime.model import OvertimeRates


@dataclass(frozen=True)
class EngineSettings:
    duplicate_threshold_seconds: int = DEFAULT_DUPLICATE_THRESHOLD_SECONDS
    min_confidence_score: float = MIN_CONFIDENCE_SCORE
    review_conflict_threshold: int = DEFAULT_REVIEW_CONFLICT_THRESHOLD
    overtime_rates: dict = field(default_factory=dict)
    holidays: tuple[str, ...] = ()
    log_level: str = "INFO"

    @classmethod
    def from_module(cls, settings: ModuleType) -> "EngineSettings":
        return cls(
            duplicate_threshold_seconds=int(getattr(settings, "DUPLICATE_THRESHOLD_SECONDS", DEFAULT_DUPLICATE_THRESHOLD_SECONDS)),
            min_confidence_score=float(getattr(settings, "MIN_CONFIDENCE_SCORE", MIN_CONFIDENCE_SCORE)),
            review_conflict_threshold=int(getattr(settings, "REVIEW_CONFLICT_THRESHOLD", DEFAULT_REVIEW_CONFLICT_THRESHOLD)),
            overtime_rates=dict(getattr(settings, "OVERTIME_RATES", {}) or {}),
            holidays=tuple(getattr(settings, "HOLIDAYS", ()) or ()),
            log_level=str(getattr(settings, "LOG_LEVEL", "INFO")),
        )


@dataclass(frozen=True)
class Container:
    settings: EngineSettings
    rates: OvertimeRates
    calendar: HolidayCalendar
    processor: BiometricEventProcessor
    reconciliation_service: ReconciliationService


def build_container(
    settings: Optional[EngineSettings] = None,
    *,
    employees: Optional[EmployeeDirectory] = None,
    records: Optional[AttendanceRepository] = None,
    logger: Optional[logging.Logger] = None,
) -> Container:
    settings = settings or EngineSettings()
    rates = OvertimeRates.from_mapping(settings.overtime_rates)
    calendar = FixedHolidayCalendar.from_iso(settings.holidays)

    processor = BiometricEventProcessor(
        duplicate_threshold_seconds=settings.duplicate_threshold_seconds,
        min_confidence=settings.min_confidence_score,
        logger=logger,
    )
    reconciliation_service = ReconciliationService(
        processor,
        calendar=calendar,
        employees=employees,
        records=records,
        rates=rates,
        review_conflict_threshold=settings.review_conflict_threshold,
        logger=logger,
    )

    return Container(
        settings=settings,
        rates=rates,
        calendar=calendar,
        processor=processor,
        reconciliation_service=reconciliation_service,
    )
