"""Sequential pairing of residual point events into work sessions."""

from __future__ import annotations

from typing import Sequence

from fichaje.reconciliation.normalizer import duration_ms
from fichaje.reconciliation.types import ResidualEvent, WorkSession


def _open_session(event: ResidualEvent) -> WorkSession:
    return WorkSession(
        start=event.timestamp,
        end=None,
        duration_ms=0,
        source_record_ids=(event.source_record_id,),
        simulated=event.simulated,
    )


def pair_events(events: Sequence[ResidualEvent]) -> tuple[WorkSession, ...]:
    """Pair events by position: [start, end], [start, end], ...

    Stored kinds are not reliable once events are detached from their
    interval siblings, so only order is used. When a candidate end does
    not come after its start, the start becomes an open session and the
    candidate end is retried as the next start. A trailing event without
    partner is returned as an open session.
    """
    sessions: list[WorkSession] = []
    index = 0
    while index < len(events):
        start = events[index]
        if index + 1 >= len(events):
            sessions.append(_open_session(start))
            break

        end = events[index + 1]
        if end.timestamp > start.timestamp:
            sessions.append(
                WorkSession(
                    start=start.timestamp,
                    end=end.timestamp,
                    duration_ms=duration_ms(start.timestamp, end.timestamp),
                    source_record_ids=(start.source_record_id, end.source_record_id),
                    simulated=start.simulated or end.simulated,
                )
            )
            index += 2
        else:
            sessions.append(_open_session(start))
            index += 1

    return tuple(sessions)
