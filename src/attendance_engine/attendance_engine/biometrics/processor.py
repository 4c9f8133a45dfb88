from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import require_uniform_awareness
from ..common.logging_utils import get_logger
from ..core.constants import DEFAULT_DUPLICATE_THRESHOLD_SECONDS, MIN_CONFIDENCE_SCORE
from ..core.enums import CalculationMethod, ConflictKind, WorkCode
from ..core.exceptions import ValidationError
from ..sequencing.bounds import summarize_punches
from .model import BiometricEvent, Conflict, EventStats, ProcessedEvent, ProcessingResult


class BiometricEventProcessor:
    """Turns a day's raw punches into entry/exit plus conflict notes.

    Steps, in order: sort, deduplicate, mark effective punches, derive
    entry/exit, validate the code sequence. Deduplication runs before any
    derivation, so feeding the same punch twice never moves entry/exit.
    """

    def __init__(
        self,
        *,
        duplicate_threshold_seconds: int = DEFAULT_DUPLICATE_THRESHOLD_SECONDS,
        min_confidence: float = MIN_CONFIDENCE_SCORE,
        logger: Optional[logging.Logger] = None,
    ):
        if duplicate_threshold_seconds < 0:
            raise ValidationError("duplicate_threshold_seconds cannot be negative")
        self._threshold = duplicate_threshold_seconds
        self._min_confidence = min_confidence
        self._log = get_logger(logger, __name__)

    @property
    def duplicate_threshold_seconds(self) -> int:
        return self._threshold

    def is_duplicate(self, first: BiometricEvent, second: BiometricEvent) -> bool:
        if (first.employee_id, first.device_id, first.work_code) != (second.employee_id, second.device_id, second.work_code):
            return False
        return abs((second.timestamp - first.timestamp).total_seconds()) < self._threshold

    def deduplicate(self, events: Iterable[BiometricEvent]) -> list[ProcessedEvent]:
        events = list(events)
        require_uniform_awareness([e.timestamp for e in events], "Punch timestamps")
        ordered = sorted(events, key=lambda e: (e.timestamp, e.work_code, e.device_id))
        kept_by_key: dict[tuple, BiometricEvent] = {}
        out: list[ProcessedEvent] = []

        for event in ordered:
            key = (event.employee_id, event.device_id, event.work_code)
            kept = kept_by_key.get(key)
            if kept is not None and self.is_duplicate(kept, event):
                seconds = int((event.timestamp - kept.timestamp).total_seconds())
                out.append(
                    ProcessedEvent(
                        event=event,
                        is_duplicate=True,
                        note=f"duplicate of {kept.work_code.name} at {kept.timestamp.isoformat()} ({seconds}s later)",
                    )
                )
                self._log.debug("Duplicate punch dropped: employee=%s device=%s code=%s", event.employee_id, event.device_id, event.work_code.name)
                continue

            kept_by_key[key] = event
            out.append(ProcessedEvent(event=event))
        return out

    def process(
        self,
        events: Sequence[BiometricEvent],
        *,
        method: CalculationMethod = CalculationMethod.ENTRY_EXIT,
        carried_over: Optional[WorkCode] = None,
    ) -> ProcessingResult:
        conflicts: list[Conflict] = []
        annotated: list[ProcessedEvent] = []

        for item in self.deduplicate(events):
            event = item.event
            if item.is_duplicate:
                conflicts.append(Conflict(ConflictKind.DUPLICATE, f"Duplicate punch: {item.note}", event.timestamp, event.work_code))
                annotated.append(item)
            elif event.confidence_score < self._min_confidence:
                note = f"confidence {event.confidence_score} below {self._min_confidence}"
                conflicts.append(Conflict(ConflictKind.LOW_CONFIDENCE, f"Low confidence punch: {note}", event.timestamp, event.work_code))
                annotated.append(ProcessedEvent(event=event, note=note))
            else:
                annotated.append(ProcessedEvent(event=event, is_effective=True))

        effective = [p.event for p in annotated if p.is_effective]
        summary = summarize_punches([(e.timestamp, e.work_code) for e in effective], method, carried_over=carried_over)
        conflicts.extend(summary.conflicts)

        if conflicts:
            self._log.warning("Punch processing found %s conflict(s): %s", len(conflicts), ", ".join(c.kind.value for c in conflicts))

        return ProcessingResult(
            events=tuple(annotated),
            entry=summary.entry,
            exit=summary.exit,
            sequence=summary.sequence,
            conflicts=tuple(conflicts),
            lunch_minutes=summary.lunch_minutes,
            break_minutes=summary.break_minutes,
        )

    @staticmethod
    def stats(processed: Sequence[ProcessedEvent]) -> EventStats:
        if not processed:
            return EventStats(
                total=0,
                effective=0,
                discarded=0,
                duplicates=0,
                average_confidence=0.0,
                unique_devices=0,
                unique_employees=0,
            )

        events = [p.event for p in processed]
        timestamps = sorted(e.timestamp for e in events)
        effective = sum(1 for p in processed if p.is_effective)
        return EventStats(
            total=len(processed),
            effective=effective,
            discarded=len(processed) - effective,
            duplicates=sum(1 for p in processed if p.is_duplicate),
            average_confidence=sum(e.confidence_score for e in events) / len(events),
            unique_devices=len({e.device_id for e in events}),
            unique_employees=len({e.employee_id for e in events}),
            first_timestamp=timestamps[0],
            last_timestamp=timestamps[-1],
        )
