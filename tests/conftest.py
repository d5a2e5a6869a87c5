from __future__ import annotations

from decimal import Decimal
from typing import Iterator
import uuid

import pytest
from sqlalchemy.pool import StaticPool

from fichaje import create_app
from fichaje.config import Config
from fichaje.extensions import db
from fichaje.models import Employee, WorkSettings


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite+pysqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {
        "connect_args": {"check_same_thread": False},
        "poolclass": StaticPool,
    }
    RECONCILE_TOLERANCE_MS = 1000
    PAID_BREAK_MINUTES = 30
    DEFAULT_DAILY_HOURS = 8.0
    DEFAULT_FRIDAY_HOURS = 6.0


@pytest.fixture()
def app() -> Iterator:
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()

        employee = Employee(id=uuid.uuid4(), name="Empleada Fichaje", email="employee@example.com", active=True)
        no_settings_employee = Employee(id=uuid.uuid4(), name="Sin ajustes", email="nosettings@example.com", active=True)
        db.session.add_all([employee, no_settings_employee])
        db.session.flush()
        db.session.add(
            WorkSettings(
                employee_id=employee.id,
                daily_hours=Decimal("8.00"),
                friday_hours=Decimal("6.00"),
                include_paid_break=False,
            )
        )
        db.session.commit()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()
