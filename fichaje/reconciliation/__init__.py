"""Attendance reconciliation engine.

Raw punch records -> normalized events -> paired sessions -> day
aggregates -> correction annotations -> period totals. Every stage is a
pure function over immutable values.
"""

from fichaje.reconciliation.aggregator import aggregate_day, group_records_by_day, reconcile_day, reconcile_records
from fichaje.reconciliation.corrections import annotate_corrections, canonical_correction
from fichaje.reconciliation.normalizer import DEFAULT_TOLERANCE_MS, normalize_day
from fichaje.reconciliation.pairing import pair_events
from fichaje.reconciliation.totalizer import DEFAULT_PAID_BREAK_MS, DEFAULT_SCHEDULE, totalize_period
from fichaje.reconciliation.types import (
    CompleteInterval,
    CorrectionRecord,
    DayAggregate,
    DayTotal,
    PeriodTotals,
    PointRecord,
    PunchKind,
    RawRecord,
    ResidualEvent,
    WorkScheduleSettings,
    WorkSession,
)


__all__ = [
    "DEFAULT_PAID_BREAK_MS",
    "DEFAULT_SCHEDULE",
    "DEFAULT_TOLERANCE_MS",
    "CompleteInterval",
    "CorrectionRecord",
    "DayAggregate",
    "DayTotal",
    "PeriodTotals",
    "PointRecord",
    "PunchKind",
    "RawRecord",
    "ResidualEvent",
    "WorkScheduleSettings",
    "WorkSession",
    "aggregate_day",
    "annotate_corrections",
    "canonical_correction",
    "group_records_by_day",
    "normalize_day",
    "pair_events",
    "reconcile_day",
    "reconcile_records",
    "totalize_period",
]
