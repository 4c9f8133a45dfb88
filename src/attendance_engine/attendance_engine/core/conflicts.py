from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .enums import ConflictKind, WorkCode

# Raised while ingesting punches; they survive recalculation.
INGESTION_KINDS = frozenset({ConflictKind.DUPLICATE, ConflictKind.LOW_CONFIDENCE})


@dataclass(frozen=True)
class Conflict:
    """Non-fatal anomaly attached to a reconciliation result."""

    kind: ConflictKind
    message: str
    timestamp: Optional[datetime] = None
    work_code: Optional[WorkCode] = None

    @property
    def is_ingestion(self) -> bool:
        return self.kind in INGESTION_KINDS
