"""Duration labels used by report rows."""

from __future__ import annotations


def ms_to_hhmmss(ms: int) -> str:
    sign = "-" if ms < 0 else ""
    total_seconds = abs(ms) // 1000
    return f"{sign}{total_seconds // 3600:02d}:{(total_seconds % 3600) // 60:02d}:{total_seconds % 60:02d}"


def ms_to_hhmm(ms: int) -> str:
    sign = "-" if ms < 0 else ""
    # Half-minute rounds up.
    total_minutes = (abs(ms) + 30_000) // 60_000
    return f"{sign}{total_minutes // 60:02d}:{total_minutes % 60:02d}"
