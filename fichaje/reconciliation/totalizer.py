"""Period totals and per-day overtime against the contracted schedule."""

from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from fichaje.reconciliation.types import DayAggregate, DayTotal, PeriodTotals, WorkScheduleSettings


logger = logging.getLogger(__name__)

MS_PER_HOUR = 60 * 60 * 1000
DEFAULT_PAID_BREAK_MS = 30 * 60 * 1000
DEFAULT_SCHEDULE = WorkScheduleSettings(daily_hours=8, friday_hours=6, include_paid_break=False)


def _hours_to_ms(hours: float) -> int:
    return int(round(max(0.0, float(hours)) * MS_PER_HOUR))


def _is_last_weekday(date_key: str | None, settings: WorkScheduleSettings) -> bool:
    if not date_key:
        return False
    try:
        return date.fromisoformat(date_key).weekday() == settings.last_weekday
    except ValueError:
        return False


def expected_ms_for_day(
    day: DayAggregate,
    settings: WorkScheduleSettings,
    paid_break_ms: int = DEFAULT_PAID_BREAK_MS,
) -> int:
    hours = settings.friday_hours if _is_last_weekday(day.date_key, settings) else settings.daily_hours
    expected = _hours_to_ms(hours)
    if settings.include_paid_break and day.sessions:
        expected += max(0, paid_break_ms)
    return expected


def totalize_period(
    days: Sequence[DayAggregate],
    settings: WorkScheduleSettings | None,
    paid_break_ms: int = DEFAULT_PAID_BREAK_MS,
    defaults: WorkScheduleSettings = DEFAULT_SCHEDULE,
) -> PeriodTotals:
    if settings is None:
        logger.info(
            "No work schedule settings supplied; using %sh daily / %sh on the last weekday without paid break.",
            defaults.daily_hours,
            defaults.friday_hours,
        )
        settings = defaults

    per_day: list[DayTotal] = []
    for day in days:
        expected = expected_ms_for_day(day, settings, paid_break_ms=paid_break_ms)
        per_day.append(
            DayTotal(
                date_key=day.date_key,
                total_ms=day.total_ms,
                expected_ms=expected,
                overtime_ms=max(0, day.total_ms - expected),
            )
        )

    period_total_ms = sum(day.total_ms for day in days)
    worked_days = sum(1 for day in days if day.sessions)
    return PeriodTotals(
        period_total_ms=period_total_ms,
        expected_ms=sum(item.expected_ms for item in per_day),
        overtime_ms=sum(item.overtime_ms for item in per_day),
        per_day=tuple(per_day),
        total_days=worked_days,
        average_day_ms=period_total_ms // worked_days if worked_days else 0,
    )
