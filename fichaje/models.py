"""Database models read by the record, correction and schedule sources."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from fichaje.extensions import db


def now_local() -> datetime:
    # Wall-clock times are stored naive, in the employee's local time.
    return datetime.now()


class TimeRecordType(str, enum.Enum):
    IN = "IN"
    OUT = "OUT"
    BREAK_START = "BREAK_START"
    BREAK_END = "BREAK_END"


class CorrectionField(str, enum.Enum):
    TIMESTAMP = "TIMESTAMP"
    TYPE = "TYPE"
    MULTIPLE = "MULTIPLE"


class CorrectionStatus(str, enum.Enum):
    REQUESTED = "REQUESTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Employee(db.Model):
    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class TimeRecord(db.Model):
    __tablename__ = "time_records"
    __table_args__ = (Index("ix_time_records_employee_ts", "employee_id", "ts"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    employee_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    ts: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=now_local)
    # Legacy entry/exit pairs carry the exit here; point records leave it empty.
    end_ts: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    type: Mapped[TimeRecordType] = mapped_column(Enum(TimeRecordType, name="time_record_type"), nullable=False)
    simulated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    modified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=now_local)


class TimeCorrection(db.Model):
    __tablename__ = "time_corrections"
    __table_args__ = (Index("ix_time_corrections_record_created", "record_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    record_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("time_records.id", ondelete="CASCADE"), nullable=False)
    employee_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    field_changed: Mapped[CorrectionField] = mapped_column(
        Enum(CorrectionField, name="correction_field"),
        nullable=False,
    )
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Rows written before the review workflow existed have no status.
    status: Mapped[CorrectionStatus | None] = mapped_column(
        Enum(CorrectionStatus, name="correction_status"),
        nullable=True,
    )
    reviewed_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=now_local)


class WorkSettings(db.Model):
    __tablename__ = "work_settings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    employee_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    daily_hours: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("8.00"))
    friday_hours: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("6.00"))
    include_paid_break: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_weekday: Mapped[int] = mapped_column(Integer, nullable=False, default=4)
