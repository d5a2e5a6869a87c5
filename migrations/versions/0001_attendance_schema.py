"""Attendance records, corrections and work settings.

Revision ID: 0001_attendance_schema
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

from typing import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "0001_attendance_schema"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


time_record_type = sa.Enum("IN", "OUT", "BREAK_START", "BREAK_END", name="time_record_type")
correction_field = sa.Enum("TIMESTAMP", "TYPE", "MULTIPLE", name="correction_field")
correction_status = sa.Enum("REQUESTED", "APPROVED", "REJECTED", name="correction_status")


def upgrade() -> None:
    op.create_table(
        "employees",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "time_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("ts", sa.DateTime(timezone=False), nullable=False),
        sa.Column("end_ts", sa.DateTime(timezone=False), nullable=True),
        sa.Column("type", time_record_type, nullable=False),
        sa.Column("simulated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("modified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_time_records_employee_ts", "time_records", ["employee_id", "ts"], unique=False)

    op.create_table(
        "time_corrections",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("record_id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("field_changed", correction_field, nullable=False),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=False, server_default=""),
        sa.Column("status", correction_status, nullable=True),
        sa.Column("reviewed_by", sa.String(length=255), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=False), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["record_id"], ["time_records.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_time_corrections_record_created",
        "time_corrections",
        ["record_id", "created_at"],
        unique=False,
    )

    op.create_table(
        "work_settings",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("daily_hours", sa.Numeric(5, 2), nullable=False, server_default=sa.text("8.00")),
        sa.Column("friday_hours", sa.Numeric(5, 2), nullable=False, server_default=sa.text("6.00")),
        sa.Column("include_paid_break", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_weekday", sa.Integer(), nullable=False, server_default=sa.text("4")),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id"),
    )


def downgrade() -> None:
    op.drop_table("work_settings")
    op.drop_index("ix_time_corrections_record_created", table_name="time_corrections")
    op.drop_table("time_corrections")
    op.drop_index("ix_time_records_employee_ts", table_name="time_records")
    op.drop_table("time_records")
    op.drop_table("employees")

    bind = op.get_bind()
    correction_status.drop(bind, checkfirst=True)
    correction_field.drop(bind, checkfirst=True)
    time_record_type.drop(bind, checkfirst=True)
