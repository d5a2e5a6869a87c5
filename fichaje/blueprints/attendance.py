"""Attendance reconciliation routes."""

from __future__ import annotations

from typing import Any, Mapping, Sequence
from uuid import UUID

from flask import Blueprint, abort, current_app, request

from fichaje.extensions import db
from fichaje.forms import AttendanceRangeForm
from fichaje.models import Employee
from fichaje.reconciliation import (
    CorrectionRecord,
    RawRecord,
    WorkScheduleSettings,
    annotate_corrections,
    reconcile_records,
    totalize_period,
)
from fichaje.serialization import (
    PayloadError,
    parse_corrections_map,
    parse_raw_records,
    parse_schedule_settings,
    period_payload,
)
from fichaje.sources import fetch_corrections_map, fetch_raw_records, fetch_schedule_settings


bp = Blueprint("attendance", __name__)


def _default_schedule() -> WorkScheduleSettings:
    return WorkScheduleSettings(
        daily_hours=float(current_app.config["DEFAULT_DAILY_HOURS"]),
        friday_hours=float(current_app.config["DEFAULT_FRIDAY_HOURS"]),
        include_paid_break=False,
    )


def _build_attendance_payload(
    records: Sequence[RawRecord],
    corrections_map: Mapping[str, Sequence[CorrectionRecord]],
    settings: WorkScheduleSettings | None,
) -> dict[str, Any]:
    tolerance_ms = int(current_app.config["RECONCILE_TOLERANCE_MS"])
    paid_break_ms = int(current_app.config["PAID_BREAK_MINUTES"]) * 60 * 1000

    days = [annotate_corrections(day, corrections_map) for day in reconcile_records(records, tolerance_ms=tolerance_ms)]
    totals = totalize_period(days, settings, paid_break_ms=paid_break_ms, defaults=_default_schedule())
    open_sessions = sum(1 for day in days for session in day.sessions if session.is_open)
    if open_sessions:
        current_app.logger.info("Reconciled %s day(s) with %s open session(s).", len(days), open_sessions)
    return period_payload(days, totals)


@bp.get("/employees/<uuid:employee_id>/attendance")
def employee_attendance(employee_id: UUID):
    employee = db.session.get(Employee, employee_id)
    if employee is None:
        abort(404)

    form = AttendanceRangeForm(formdata=request.args)
    if not form.validate():
        return {"errors": form.errors}, 400

    records = fetch_raw_records(employee.id, form.date_from.data, form.date_to.data)
    corrections_map = fetch_corrections_map(record.id for record in records)
    settings = fetch_schedule_settings(employee.id)

    payload = _build_attendance_payload(records, corrections_map, settings)
    payload["employee"] = {"id": str(employee.id), "name": employee.name}
    payload["period_start"] = form.date_from.data.isoformat()
    payload["period_end"] = form.date_to.data.isoformat()
    return payload


@bp.post("/attendance/reconcile")
def reconcile():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        abort(400, description="Request body must be a JSON object.")

    try:
        records = parse_raw_records(body.get("records"))
        corrections_map = parse_corrections_map(body.get("corrections"))
        settings = parse_schedule_settings(body.get("settings"))
    except PayloadError as exc:
        current_app.logger.warning("Rejected reconciliation payload: %s", exc)
        abort(400, description=str(exc))

    return _build_attendance_payload(records, corrections_map, settings)
