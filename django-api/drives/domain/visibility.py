"""Public listing rules.

Only drives that are still ahead of (or inside) their time window and
have gathered a quorum are discoverable. Fetching a drive by id never
goes through this filter.
"""

from collections.abc import Iterable
from datetime import datetime

from drives.domain.models import Event
from drives.domain.status import StatusKind


def is_publicly_listed(event: Event, now: datetime) -> bool:
    if event.effective_end < now:
        return False
    if event.status_kind is StatusKind.COMPLETED:
        return False
    return event.current_participants >= event.min_participants


def filter_listed(events: Iterable[Event], now: datetime) -> list[Event]:
    return [event for event in events if is_publicly_listed(event, now)]
