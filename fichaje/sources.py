"""Read-only adapters that feed stored rows into the reconciliation engine.

Rows with an ``end_ts`` are legacy entry/exit pairs and become complete
intervals; the rest are point records.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, time
from typing import Iterable

from flask import current_app
from sqlalchemy import or_, select
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.sql import Select

from fichaje.extensions import db
from fichaje.models import CorrectionStatus, TimeCorrection, TimeRecord, WorkSettings
from fichaje.reconciliation import (
    CompleteInterval,
    CorrectionRecord,
    PointRecord,
    PunchKind,
    RawRecord,
    WorkScheduleSettings,
)


def _day_bounds(start_day: date, end_day: date) -> tuple[datetime, datetime]:
    return datetime.combine(start_day, time.min), datetime.combine(end_day, time.max)


def employee_records_between_stmt(employee_id: uuid.UUID, start: datetime, end: datetime) -> Select:
    return (
        select(TimeRecord)
        .where(TimeRecord.employee_id == employee_id, TimeRecord.ts >= start, TimeRecord.ts <= end)
        .order_by(TimeRecord.ts.asc(), TimeRecord.id.asc())
    )


def visible_corrections_stmt(record_ids: list[uuid.UUID]) -> Select:
    return (
        select(TimeCorrection)
        .where(
            TimeCorrection.record_id.in_(record_ids),
            or_(TimeCorrection.status == CorrectionStatus.APPROVED, TimeCorrection.status.is_(None)),
        )
        .order_by(TimeCorrection.created_at.asc(), TimeCorrection.id.asc())
    )


def to_raw_record(row: TimeRecord) -> RawRecord:
    kind = PunchKind(getattr(row.type, "value", row.type))
    if row.end_ts is not None:
        return CompleteInterval(
            id=str(row.id),
            user_id=str(row.employee_id),
            start=row.ts,
            end=row.end_ts,
            kind=kind,
            simulated=bool(row.simulated),
        )
    return PointRecord(
        id=str(row.id),
        user_id=str(row.employee_id),
        timestamp=row.ts,
        kind=kind,
        simulated=bool(row.simulated),
    )


def to_correction_record(row: TimeCorrection) -> CorrectionRecord:
    return CorrectionRecord(
        target_record_id=str(row.record_id),
        field_changed=getattr(row.field_changed, "value", str(row.field_changed)),
        old_value=row.old_value,
        new_value=row.new_value,
        reason=row.reason or "",
        status=getattr(row.status, "value", None) if row.status is not None else None,
        reviewed_by=row.reviewed_by,
        reviewed_at=row.reviewed_at,
        corrected_at=row.created_at,
    )


def fetch_raw_records(employee_id: uuid.UUID, start_day: date, end_day: date) -> list[RawRecord]:
    start, end = _day_bounds(start_day, end_day)
    rows = db.session.execute(employee_records_between_stmt(employee_id, start, end)).scalars().all()
    return [to_raw_record(row) for row in rows]


def fetch_corrections_map(record_ids: Iterable[str]) -> dict[str, list[CorrectionRecord]]:
    parsed_ids: list[uuid.UUID] = []
    for record_id in record_ids:
        try:
            parsed_ids.append(uuid.UUID(str(record_id)))
        except ValueError:
            continue
    if not parsed_ids:
        return {}

    corrections_map: dict[str, list[CorrectionRecord]] = {}
    for row in db.session.execute(visible_corrections_stmt(parsed_ids)).scalars().all():
        corrections_map.setdefault(str(row.record_id), []).append(to_correction_record(row))
    return corrections_map


def fetch_schedule_settings(employee_id: uuid.UUID) -> WorkScheduleSettings | None:
    stmt = select(WorkSettings).where(WorkSettings.employee_id == employee_id).limit(1)
    try:
        row = db.session.execute(stmt).scalar_one_or_none()
    except (OperationalError, ProgrammingError, LookupError):
        db.session.rollback()
        current_app.logger.warning(
            "Work settings lookup failed for employee %s. Falling back to default schedule. "
            "Run `alembic upgrade head` to apply pending migrations.",
            employee_id,
            exc_info=True,
        )
        return None

    if row is None:
        return None
    return WorkScheduleSettings(
        daily_hours=float(row.daily_hours),
        friday_hours=float(row.friday_hours),
        include_paid_break=bool(row.include_paid_break),
        last_weekday=int(row.last_weekday),
    )
