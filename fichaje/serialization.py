"""JSON payload codec for the attendance endpoints."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Mapping

from fichaje.reconciliation import (
    CompleteInterval,
    CorrectionRecord,
    DayAggregate,
    DayTotal,
    PeriodTotals,
    PointRecord,
    PunchKind,
    RawRecord,
    WorkScheduleSettings,
    WorkSession,
)
from fichaje.reconciliation.formatting import ms_to_hhmm, ms_to_hhmmss


KIND_ALIASES = {
    "entrada": PunchKind.IN,
    "entry": PunchKind.IN,
    "salida": PunchKind.OUT,
    "exit": PunchKind.OUT,
    "breakstart": PunchKind.BREAK_START,
    "breakend": PunchKind.BREAK_END,
}


class PayloadError(ValueError):
    """Raised when a request body cannot be decoded into engine inputs."""


def _parse_datetime(value: object, field_name: str) -> datetime:
    if not isinstance(value, str) or not value.strip():
        raise PayloadError(f"{field_name} must be an ISO 8601 datetime string.")
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise PayloadError(f"{field_name} is not a valid ISO 8601 datetime: {value!r}") from exc
    # Wall-clock time is used as given, any offset is ignored.
    return parsed.replace(tzinfo=None)


def _parse_optional_datetime(value: object, field_name: str) -> datetime | None:
    if value is None or value == "":
        return None
    return _parse_datetime(value, field_name)


def _parse_kind(value: object) -> PunchKind:
    if value is None:
        return PunchKind.IN
    raw = str(value).strip()
    alias = KIND_ALIASES.get(raw.replace("_", "").replace("-", "").lower())
    if alias is not None:
        return alias
    try:
        return PunchKind(raw.upper())
    except ValueError as exc:
        raise PayloadError(f"Unknown punch kind: {value!r}") from exc


def _parse_flag(value: object, field_name: str, default: bool = False) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise PayloadError(f"{field_name} must be a JSON boolean.")
    return value


def parse_raw_record(item: object) -> RawRecord:
    if not isinstance(item, Mapping):
        raise PayloadError("Each record must be a JSON object.")
    record_id = item.get("id")
    if record_id is None or str(record_id).strip() == "":
        raise PayloadError("Each record needs an id.")

    common = {
        "id": str(record_id),
        "user_id": str(item.get("user_id") or ""),
        "kind": _parse_kind(item.get("kind")),
        "simulated": _parse_flag(item.get("simulated"), "simulated"),
    }
    if item.get("end") is not None:
        return CompleteInterval(
            start=_parse_datetime(item.get("start"), "start"),
            end=_parse_datetime(item.get("end"), "end"),
            **common,
        )
    timestamp = item.get("timestamp", item.get("start"))
    return PointRecord(timestamp=_parse_datetime(timestamp, "timestamp"), **common)


def parse_raw_records(items: object) -> list[RawRecord]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise PayloadError("records must be a list.")
    records = [parse_raw_record(item) for item in items]
    seen: set[str] = set()
    for record in records:
        if record.id in seen:
            raise PayloadError(f"Duplicate record id: {record.id}")
        seen.add(record.id)
    return records


def parse_corrections_map(payload: object) -> dict[str, list[CorrectionRecord]]:
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise PayloadError("corrections must be an object keyed by record id.")

    corrections_map: dict[str, list[CorrectionRecord]] = {}
    for record_id, items in payload.items():
        if not isinstance(items, list):
            raise PayloadError(f"corrections for {record_id} must be a list.")
        parsed: list[CorrectionRecord] = []
        for item in items:
            if not isinstance(item, Mapping):
                raise PayloadError(f"corrections for {record_id} must contain objects.")
            parsed.append(
                CorrectionRecord(
                    target_record_id=str(record_id),
                    field_changed=str(item.get("field_changed") or "TIMESTAMP"),
                    old_value=None if item.get("old_value") is None else str(item.get("old_value")),
                    new_value=None if item.get("new_value") is None else str(item.get("new_value")),
                    reason=str(item.get("reason") or ""),
                    status=None if item.get("status") is None else str(item.get("status")),
                    reviewed_by=None if item.get("reviewed_by") is None else str(item.get("reviewed_by")),
                    reviewed_at=_parse_optional_datetime(item.get("reviewed_at"), "reviewed_at"),
                    corrected_at=_parse_optional_datetime(item.get("corrected_at"), "corrected_at"),
                )
            )
        corrections_map[str(record_id)] = parsed
    return corrections_map


def parse_schedule_settings(payload: object) -> WorkScheduleSettings | None:
    if payload is None:
        return None
    if not isinstance(payload, Mapping):
        raise PayloadError("settings must be an object.")
    defaults = WorkScheduleSettings()
    try:
        settings = WorkScheduleSettings(
            daily_hours=float(payload.get("daily_hours", defaults.daily_hours)),
            friday_hours=float(payload.get("friday_hours", defaults.friday_hours)),
            include_paid_break=_parse_flag(
                payload.get("include_paid_break"), "include_paid_break", defaults.include_paid_break
            ),
            last_weekday=int(payload.get("last_weekday", defaults.last_weekday)),
        )
    except (TypeError, ValueError) as exc:
        raise PayloadError("settings hours must be numeric.") from exc
    if not math.isfinite(settings.daily_hours) or not math.isfinite(settings.friday_hours):
        raise PayloadError("settings hours must be finite numbers.")
    if settings.daily_hours < 0 or settings.friday_hours < 0:
        raise PayloadError("settings hours must not be negative.")
    if not 0 <= settings.last_weekday <= 6:
        raise PayloadError("settings last_weekday must be between 0 (Monday) and 6 (Sunday).")
    return settings


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def correction_payload(correction: CorrectionRecord) -> dict[str, Any]:
    return {
        "target_record_id": correction.target_record_id,
        "field_changed": correction.field_changed,
        "old_value": correction.old_value,
        "new_value": correction.new_value,
        "reason": correction.reason,
        "status": correction.status,
        "reviewed_by": correction.reviewed_by,
        "reviewed_at": _iso(correction.reviewed_at),
        "corrected_at": _iso(correction.corrected_at),
    }


def session_payload(session: WorkSession) -> dict[str, Any]:
    return {
        "start": _iso(session.start),
        "end": _iso(session.end),
        "duration_ms": session.duration_ms,
        "duration_display": ms_to_hhmmss(session.duration_ms) if not session.is_open else None,
        "source_record_ids": list(session.source_record_ids),
        "is_open": session.is_open,
        "simulated": session.simulated,
        "is_modified": session.is_modified,
        "original_value": session.original_value,
        "modified_by": session.modified_by,
        "corrections": [correction_payload(item) for item in session.corrections],
    }


def day_payload(day: DayAggregate, day_total: DayTotal | None = None) -> dict[str, Any]:
    return {
        "date": day.date_key,
        "sessions": [session_payload(session) for session in day.sessions],
        "total_ms": day.total_ms,
        "total_display": ms_to_hhmmss(day.total_ms),
        "expected_ms": day_total.expected_ms if day_total is not None else None,
        "overtime_ms": day_total.overtime_ms if day_total is not None else None,
        "absorbed_record_ids": list(day.absorbed_record_ids),
    }


def period_payload(days: list[DayAggregate], totals: PeriodTotals) -> dict[str, Any]:
    return {
        "days": [day_payload(day, day_total) for day, day_total in zip(days, totals.per_day)],
        "totals": {
            "period_total_ms": totals.period_total_ms,
            "period_total_display": ms_to_hhmm(totals.period_total_ms),
            "expected_ms": totals.expected_ms,
            "overtime_ms": totals.overtime_ms,
            "overtime_display": ms_to_hhmm(totals.overtime_ms),
            "total_days": totals.total_days,
            "average_day_ms": totals.average_day_ms,
        },
    }
