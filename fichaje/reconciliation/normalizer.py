"""Split a day's raw records into complete sessions and residual point events.

Legacy dual-write paths log the same physical punch more than once with
sub-second drift, so timestamps closer than the tolerance are treated as
the same action.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable

from fichaje.reconciliation.types import (
    NormalizedDay,
    PointRecord,
    RawRecord,
    ResidualEvent,
    WorkSession,
    record_instant,
)


logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE_MS = 1000


def duration_ms(start: datetime, end: datetime) -> int:
    return (end - start) // timedelta(milliseconds=1)


def _within(a: datetime, b: datetime, tolerance: timedelta) -> bool:
    return abs(a - b) <= tolerance


def _sorted_records(records: Iterable[RawRecord]) -> list[RawRecord]:
    return sorted(records, key=lambda record: (record_instant(record), record.id))


def normalize_day(records: Iterable[RawRecord], tolerance_ms: int = DEFAULT_TOLERANCE_MS) -> NormalizedDay:
    tolerance = timedelta(milliseconds=max(0, tolerance_ms))
    pre_sessions: list[WorkSession] = []
    covered: list[datetime] = []
    close_events: list[ResidualEvent] = []
    points: list[PointRecord] = []

    for record in _sorted_records(records):
        if isinstance(record, PointRecord):
            points.append(record)
            continue

        if record.end > record.start:
            pre_sessions.append(
                WorkSession(
                    start=record.start,
                    end=record.end,
                    duration_ms=duration_ms(record.start, record.end),
                    source_record_ids=(record.id,),
                    simulated=record.simulated,
                )
            )
            covered.extend((record.start, record.end))
        elif record.end == record.start:
            close_events.append(ResidualEvent(record.end, record.id, record.simulated))
        else:
            logger.warning(
                "Record %s ends before it starts (%s < %s); keeping it as an open session.",
                record.id,
                record.end.isoformat(),
                record.start.isoformat(),
            )
            pre_sessions.append(
                WorkSession(
                    start=record.start,
                    end=None,
                    duration_ms=0,
                    source_record_ids=(record.id,),
                    simulated=record.simulated,
                )
            )

    absorbed: list[str] = []
    candidates = list(close_events)
    for point in points:
        if any(_within(point.timestamp, ts, tolerance) for ts in covered):
            absorbed.append(point.id)
            continue
        candidates.append(ResidualEvent(point.timestamp, point.id, point.simulated))

    candidates.sort(key=lambda event: (event.timestamp, event.source_record_id))
    residual: list[ResidualEvent] = []
    for event in candidates:
        if residual and _within(residual[-1].timestamp, event.timestamp, tolerance):
            absorbed.append(event.source_record_id)
            continue
        residual.append(event)

    return NormalizedDay(
        pre_sessions=tuple(pre_sessions),
        residual_events=tuple(residual),
        absorbed_record_ids=tuple(sorted(absorbed)),
    )
