"""Per-day composition of normalized and paired sessions."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Sequence

from fichaje.reconciliation.normalizer import DEFAULT_TOLERANCE_MS, normalize_day
from fichaje.reconciliation.pairing import pair_events
from fichaje.reconciliation.types import DayAggregate, RawRecord, WorkSession, record_instant


def _session_sort_key(session: WorkSession) -> tuple[datetime, str]:
    first_id = session.source_record_ids[0] if session.source_record_ids else ""
    return session.start, first_id


def aggregate_day(
    date_key: str | None,
    pre_sessions: Sequence[WorkSession],
    paired_sessions: Sequence[WorkSession],
    absorbed_record_ids: Sequence[str] = (),
) -> DayAggregate:
    sessions = tuple(sorted([*pre_sessions, *paired_sessions], key=_session_sort_key))
    total_ms = sum(session.duration_ms for session in sessions if session.end is not None)
    return DayAggregate(
        date_key=date_key,
        sessions=sessions,
        total_ms=total_ms,
        absorbed_record_ids=tuple(absorbed_record_ids),
    )


def reconcile_day(
    records: Iterable[RawRecord],
    tolerance_ms: int = DEFAULT_TOLERANCE_MS,
    date_key: str | None = None,
) -> DayAggregate:
    """Rebuild the uncorrected sessions of a single day.

    ``date_key`` defaults to the calendar date of the earliest record and
    stays ``None`` for an empty day.
    """
    day_records = list(records)
    if date_key is None and day_records:
        date_key = min(record_instant(record) for record in day_records).date().isoformat()

    normalized = normalize_day(day_records, tolerance_ms=tolerance_ms)
    paired = pair_events(normalized.residual_events)
    return aggregate_day(date_key, normalized.pre_sessions, paired, normalized.absorbed_record_ids)


def group_records_by_day(records: Iterable[RawRecord]) -> dict[str, list[RawRecord]]:
    """Bucket records by the calendar date of their first instant, in date order."""
    by_day: dict[str, list[RawRecord]] = {}
    for record in records:
        by_day.setdefault(record_instant(record).date().isoformat(), []).append(record)
    return {key: by_day[key] for key in sorted(by_day)}


def reconcile_records(
    records: Iterable[RawRecord],
    tolerance_ms: int = DEFAULT_TOLERANCE_MS,
) -> list[DayAggregate]:
    return [
        reconcile_day(day_records, tolerance_ms=tolerance_ms, date_key=date_key)
        for date_key, day_records in group_records_by_day(records).items()
    ]
