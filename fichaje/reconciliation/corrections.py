"""Overlay administrative corrections onto reconciled sessions.

Read-side only: correction records are never modified, and the full list
for each session is passed through for the audit appendix.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Mapping, Sequence

from fichaje.reconciliation.types import CorrectionRecord, DayAggregate, WorkSession


CorrectionsMap = Mapping[str, Sequence[CorrectionRecord]]


def canonical_correction(corrections: Sequence[CorrectionRecord]) -> CorrectionRecord | None:
    """Latest correction by review time, then creation time, then list position."""
    if not corrections:
        return None

    def sort_key(item: tuple[int, CorrectionRecord]) -> tuple[datetime, int]:
        position, correction = item
        moment = correction.reviewed_at or correction.corrected_at or datetime.min
        return moment, position

    return max(enumerate(corrections), key=sort_key)[1]


def _annotate_session(session: WorkSession, corrections_map: CorrectionsMap) -> WorkSession:
    related: list[CorrectionRecord] = []
    for record_id in session.source_record_ids:
        related.extend(corrections_map.get(record_id) or ())

    if not related:
        return replace(session, is_modified=False, original_value=None, modified_by=None, corrections=())

    canonical = canonical_correction(related)
    assert canonical is not None
    return replace(
        session,
        is_modified=True,
        original_value=canonical.old_value,
        modified_by=canonical.reviewed_by,
        corrections=tuple(related),
    )


def annotate_corrections(day: DayAggregate, corrections_map: CorrectionsMap) -> DayAggregate:
    sessions = tuple(_annotate_session(session, corrections_map) for session in day.sessions)
    return replace(day, sessions=sessions)
