"""Automatic status transitions.

``reconcile`` is pure: it looks at a drive snapshot and the current time
and says what the status should be now. Callers persist the result.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from drives.domain.models import Event
from drives.domain.status import (
    TERMINAL_KINDS,
    Active,
    Completed,
    EventStatus,
    NotCompleted,
    Postponed,
    StatusKind,
    Upcoming,
)

SYSTEM_ACTOR = "system"

REASON_QUORUM_MISSED = "Did not meet minimum participant requirement"
REASON_END_PASSED = "Automatically completed as end date passed"
REASON_RESUMED = "Automatically resumed after postponement"
REASON_STARTED = "Start date has passed"


@dataclass(frozen=True)
class StatusUpdate:
    """Status fields to persist after a reconciliation."""

    status: EventStatus
    updated_at: datetime
    updated_by: str = SYSTEM_ACTOR


def _next_status(event: Event, now: datetime) -> EventStatus | None:
    if event.status_kind in TERMINAL_KINDS:
        return None

    if event.has_ended(now):
        if event.current_participants < event.min_participants:
            return NotCompleted(reason=REASON_QUORUM_MISSED)
        return Completed(reason=REASON_END_PASSED)

    if isinstance(event.status, Postponed) and event.status.until < now:
        return Upcoming(reason=REASON_RESUMED)

    if (
        event.status_kind is StatusKind.UPCOMING
        and event.starts_at <= now
        and (event.ends_at is None or event.ends_at >= now)
    ):
        return Active(reason=REASON_STARTED)

    return None


def reconcile(event: Event, now: datetime) -> StatusUpdate | None:
    """Return the status the drive should have at ``now``, or None if unchanged.

    Transitions are applied until none matches, so a postponed drive whose
    resume date and start date have both passed comes back as active in one
    call and a second call is always a no-op.
    """
    snapshot = event
    status = None
    for _ in StatusKind:
        next_status = _next_status(snapshot, now)
        if next_status is None:
            break
        status = next_status
        snapshot = replace(snapshot, status=next_status)

    if status is None:
        return None
    return StatusUpdate(status=status, updated_at=now)


def apply_update(event: Event, update: StatusUpdate) -> Event:
    return replace(
        event,
        status=update.status,
        status_updated_at=update.updated_at,
        status_updated_by=update.updated_by,
    )
