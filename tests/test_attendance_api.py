from __future__ import annotations

from datetime import datetime
import uuid

from sqlalchemy import select

from fichaje.extensions import db
from fichaje.models import (
    CorrectionField,
    CorrectionStatus,
    Employee,
    TimeCorrection,
    TimeRecord,
    TimeRecordType,
    WorkSettings,
)


HOUR_MS = 3_600_000


def _employee_id(email: str = "employee@example.com") -> uuid.UUID:
    return db.session.execute(select(Employee.id).where(Employee.email == email)).scalar_one()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_employee_attendance_returns_annotated_days_and_totals(client, app):
    with app.app_context():
        employee_id = _employee_id()
        legacy_pair = TimeRecord(
            employee_id=employee_id,
            type=TimeRecordType.IN,
            ts=datetime(2026, 2, 10, 9, 0),
            end_ts=datetime(2026, 2, 10, 13, 0),
        )
        entry = TimeRecord(employee_id=employee_id, type=TimeRecordType.IN, ts=datetime(2026, 2, 10, 14, 0))
        exit_ = TimeRecord(employee_id=employee_id, type=TimeRecordType.OUT, ts=datetime(2026, 2, 10, 19, 0))
        open_entry = TimeRecord(employee_id=employee_id, type=TimeRecordType.IN, ts=datetime(2026, 2, 11, 9, 0))
        db.session.add_all([legacy_pair, entry, exit_, open_entry])
        db.session.flush()
        db.session.add(
            TimeCorrection(
                record_id=legacy_pair.id,
                employee_id=employee_id,
                field_changed=CorrectionField.TIMESTAMP,
                old_value="2026-02-10T09:20:00",
                new_value="2026-02-10T09:00:00",
                reason="Olvido al fichar",
                status=CorrectionStatus.APPROVED,
                reviewed_by="admin@example.com",
                reviewed_at=datetime(2026, 2, 11, 8, 0),
            )
        )
        db.session.commit()
        legacy_pair_id = str(legacy_pair.id)

    response = client.get(f"/employees/{employee_id}/attendance?date_from=2026-02-10&date_to=2026-02-11")
    assert response.status_code == 200
    payload = response.get_json()

    assert payload["employee"]["name"] == "Empleada Fichaje"
    assert payload["period_start"] == "2026-02-10"
    assert payload["period_end"] == "2026-02-11"

    days = {day["date"]: day for day in payload["days"]}
    assert set(days) == {"2026-02-10", "2026-02-11"}

    first_day = days["2026-02-10"]
    assert first_day["total_ms"] == 9 * HOUR_MS
    assert first_day["total_display"] == "09:00:00"
    assert first_day["expected_ms"] == 8 * HOUR_MS
    assert first_day["overtime_ms"] == HOUR_MS
    assert len(first_day["sessions"]) == 2
    corrected, paired = first_day["sessions"]
    assert corrected["source_record_ids"] == [legacy_pair_id]
    assert corrected["is_modified"] is True
    assert corrected["original_value"] == "2026-02-10T09:20:00"
    assert corrected["modified_by"] == "admin@example.com"
    assert corrected["corrections"][0]["reason"] == "Olvido al fichar"
    assert paired["is_modified"] is False
    assert paired["duration_display"] == "05:00:00"

    second_day = days["2026-02-11"]
    assert second_day["total_ms"] == 0
    assert second_day["sessions"][0]["is_open"] is True
    assert second_day["sessions"][0]["end"] is None

    totals = payload["totals"]
    assert totals["period_total_ms"] == 9 * HOUR_MS
    assert totals["period_total_display"] == "09:00"
    assert totals["overtime_ms"] == HOUR_MS
    assert totals["total_days"] == 2


def test_employee_attendance_rejects_inverted_range(client, app):
    with app.app_context():
        employee_id = _employee_id()

    response = client.get(f"/employees/{employee_id}/attendance?date_from=2026-02-11&date_to=2026-02-10")
    assert response.status_code == 400
    assert "date_to" in response.get_json()["errors"]

    missing = client.get(f"/employees/{employee_id}/attendance")
    assert missing.status_code == 400


def test_employee_attendance_unknown_employee(client):
    response = client.get(f"/employees/{uuid.uuid4()}/attendance?date_from=2026-02-10&date_to=2026-02-10")
    assert response.status_code == 404


def test_employee_without_settings_uses_default_schedule(client, app):
    with app.app_context():
        employee_id = _employee_id("nosettings@example.com")
        db.session.add_all(
            [
                TimeRecord(employee_id=employee_id, type=TimeRecordType.IN, ts=datetime(2026, 2, 13, 8, 0)),
                TimeRecord(employee_id=employee_id, type=TimeRecordType.OUT, ts=datetime(2026, 2, 13, 15, 0)),
            ]
        )
        db.session.commit()

    response = client.get(f"/employees/{employee_id}/attendance?date_from=2026-02-13&date_to=2026-02-13")
    assert response.status_code == 200
    day = response.get_json()["days"][0]
    assert day["expected_ms"] == 6 * HOUR_MS
    assert day["overtime_ms"] == HOUR_MS


def test_stored_last_weekday_moves_the_short_day(client, app):
    with app.app_context():
        employee_id = _employee_id()
        settings = db.session.execute(select(WorkSettings).where(WorkSettings.employee_id == employee_id)).scalar_one()
        settings.last_weekday = 3
        db.session.add_all(
            [
                TimeRecord(employee_id=employee_id, type=TimeRecordType.IN, ts=datetime(2026, 2, 12, 8, 0)),
                TimeRecord(employee_id=employee_id, type=TimeRecordType.OUT, ts=datetime(2026, 2, 12, 15, 0)),
                TimeRecord(employee_id=employee_id, type=TimeRecordType.IN, ts=datetime(2026, 2, 13, 8, 0)),
                TimeRecord(employee_id=employee_id, type=TimeRecordType.OUT, ts=datetime(2026, 2, 13, 15, 0)),
            ]
        )
        db.session.commit()

    response = client.get(f"/employees/{employee_id}/attendance?date_from=2026-02-12&date_to=2026-02-13")
    assert response.status_code == 200
    thursday, friday = response.get_json()["days"]
    assert thursday["expected_ms"] == 6 * HOUR_MS
    assert thursday["overtime_ms"] == HOUR_MS
    assert friday["expected_ms"] == 8 * HOUR_MS
    assert friday["overtime_ms"] == 0


def test_reconcile_endpoint_computes_from_posted_records(client):
    response = client.post(
        "/attendance/reconcile",
        json={
            "records": [
                {"id": "r1", "start": "2026-02-10T09:00:00", "end": "2026-02-10T13:00:00", "kind": "entrada"},
                {"id": "r2", "timestamp": "2026-02-10T14:00:00", "kind": "entry"},
                {"id": "r3", "timestamp": "2026-02-10T18:00:00", "kind": "salida"},
                {"id": "r4", "timestamp": "2026-02-10T18:00:00.500", "kind": "OUT"},
                {"id": "r5", "timestamp": "2026-02-11T09:00:00", "kind": "IN"},
                {"id": "r6", "timestamp": "2026-02-11T16:00:00", "kind": "OUT"},
            ],
            "corrections": {
                "r2": [
                    {
                        "field_changed": "TIMESTAMP",
                        "old_value": "2026-02-10T14:10:00",
                        "new_value": "2026-02-10T14:00:00",
                        "reason": "Ajuste",
                        "reviewed_at": "2026-02-12T10:00:00",
                    }
                ]
            },
            "settings": {"daily_hours": 8, "friday_hours": 6, "include_paid_break": False},
        },
    )
    assert response.status_code == 200
    payload = response.get_json()

    first_day, second_day = payload["days"]
    assert first_day["total_ms"] == 8 * HOUR_MS
    assert first_day["absorbed_record_ids"] == ["r4"]
    assert [session["is_modified"] for session in first_day["sessions"]] == [False, True]
    assert first_day["sessions"][1]["original_value"] == "2026-02-10T14:10:00"
    assert second_day["total_ms"] == 7 * HOUR_MS
    assert payload["totals"]["period_total_ms"] == 15 * HOUR_MS
    assert payload["totals"]["overtime_ms"] == 0


def test_reconcile_endpoint_rejects_malformed_payloads(client):
    not_json = client.post("/attendance/reconcile", data="nope", content_type="text/plain")
    assert not_json.status_code == 400

    bad_timestamp = client.post(
        "/attendance/reconcile",
        json={"records": [{"id": "r1", "timestamp": "ayer"}]},
    )
    assert bad_timestamp.status_code == 400
    assert "timestamp" in bad_timestamp.get_json()["description"]

    duplicated = client.post(
        "/attendance/reconcile",
        json={
            "records": [
                {"id": "r1", "timestamp": "2026-02-10T09:00:00"},
                {"id": "r1", "timestamp": "2026-02-10T10:00:00"},
            ]
        },
    )
    assert duplicated.status_code == 400

    bad_kind = client.post(
        "/attendance/reconcile",
        json={"records": [{"id": "r1", "timestamp": "2026-02-10T09:00:00", "kind": "lunch"}]},
    )
    assert bad_kind.status_code == 400

    for raw_hours in ("1e400", "NaN", "-Infinity"):
        non_finite = client.post(
            "/attendance/reconcile",
            data=(
                '{"records": [{"id": "r1", "timestamp": "2026-02-10T09:00:00"}], '
                f'"settings": {{"daily_hours": {raw_hours}}}}}'
            ),
            content_type="application/json",
        )
        assert non_finite.status_code == 400
        assert "finite" in non_finite.get_json()["description"]


def test_reconcile_endpoint_requires_json_booleans_for_flags(client):
    records = [
        {"id": "r1", "timestamp": "2026-02-10T09:00:00", "kind": "IN"},
        {"id": "r2", "timestamp": "2026-02-10T17:00:00", "kind": "OUT"},
    ]

    string_simulated = client.post(
        "/attendance/reconcile",
        json={"records": [dict(records[0], simulated="false"), records[1]]},
    )
    assert string_simulated.status_code == 400
    assert "simulated" in string_simulated.get_json()["description"]

    string_break = client.post(
        "/attendance/reconcile",
        json={"records": records, "settings": {"include_paid_break": "false"}},
    )
    assert string_break.status_code == 400
    assert "include_paid_break" in string_break.get_json()["description"]

    response = client.post(
        "/attendance/reconcile",
        json={
            "records": [dict(records[0], simulated=False), dict(records[1], simulated=None)],
            "settings": {"include_paid_break": False},
        },
    )
    assert response.status_code == 200
    day = response.get_json()["days"][0]
    assert day["sessions"][0]["simulated"] is False
    assert day["expected_ms"] == 8 * HOUR_MS

    with_break = client.post(
        "/attendance/reconcile",
        json={"records": records, "settings": {"include_paid_break": True}},
    )
    assert with_break.get_json()["days"][0]["expected_ms"] == 8 * HOUR_MS + 30 * 60_000


def test_reconcile_endpoint_with_no_records(client):
    response = client.post("/attendance/reconcile", json={"records": []})
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["days"] == []
    assert payload["totals"]["period_total_ms"] == 0
