"""Value types shared by the reconciliation stages."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Union


class PunchKind(str, enum.Enum):
    IN = "IN"
    OUT = "OUT"
    BREAK_START = "BREAK_START"
    BREAK_END = "BREAK_END"


@dataclass(frozen=True)
class CompleteInterval:
    """Pre-paired entry/exit record written directly by storage."""

    id: str
    user_id: str
    start: datetime
    end: datetime
    kind: PunchKind = PunchKind.IN
    simulated: bool = False


@dataclass(frozen=True)
class PointRecord:
    """Single-timestamp record that still needs pairing."""

    id: str
    user_id: str
    timestamp: datetime
    kind: PunchKind
    simulated: bool = False


RawRecord = Union[CompleteInterval, PointRecord]


def record_instant(record: RawRecord) -> datetime:
    if isinstance(record, CompleteInterval):
        return record.start
    if isinstance(record, PointRecord):
        return record.timestamp
    raise TypeError(f"Unsupported raw record: {type(record).__name__}")


@dataclass(frozen=True)
class ResidualEvent:
    timestamp: datetime
    source_record_id: str
    simulated: bool = False


@dataclass(frozen=True)
class CorrectionRecord:
    target_record_id: str
    field_changed: str
    old_value: str | None
    new_value: str | None
    reason: str = ""
    status: str | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    corrected_at: datetime | None = None


@dataclass(frozen=True)
class WorkSession:
    start: datetime
    end: datetime | None
    duration_ms: int
    source_record_ids: tuple[str, ...]
    simulated: bool = False
    is_modified: bool = False
    original_value: str | None = None
    modified_by: str | None = None
    corrections: tuple[CorrectionRecord, ...] = ()

    @property
    def is_open(self) -> bool:
        return self.end is None


@dataclass(frozen=True)
class NormalizedDay:
    pre_sessions: tuple[WorkSession, ...]
    residual_events: tuple[ResidualEvent, ...]
    absorbed_record_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class DayAggregate:
    date_key: str | None
    sessions: tuple[WorkSession, ...] = ()
    total_ms: int = 0
    absorbed_record_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class WorkScheduleSettings:
    daily_hours: float = 8
    friday_hours: float = 6
    include_paid_break: bool = False
    # Python weekday numbering, Monday == 0.
    last_weekday: int = 4


@dataclass(frozen=True)
class DayTotal:
    date_key: str | None
    total_ms: int
    expected_ms: int
    overtime_ms: int


@dataclass(frozen=True)
class PeriodTotals:
    period_total_ms: int
    expected_ms: int
    overtime_ms: int
    per_day: tuple[DayTotal, ...] = field(default_factory=tuple)
    total_days: int = 0
    average_day_ms: int = 0
