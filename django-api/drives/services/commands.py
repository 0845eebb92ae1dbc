"""Input payloads accepted by the services.

Handlers parse wire formats into these; services validate business rules.
A ``None`` field in a patch means "leave unchanged".
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class EventDraft:
    name: str | None
    description: str | None
    starts_at: datetime | None
    location: str | None
    city_id: str | None
    category_ids: list[str] = field(default_factory=list)
    expected_participants: int | None = None
    ends_at: datetime | None = None
    full_address: str = ""
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class EventPatch:
    name: str | None = None
    description: str | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    location: str | None = None
    full_address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    city_id: str | None = None
    category_ids: list[str] | None = None
    expected_participants: int | None = None
    status: str | None = None
    status_reason: str | None = None
    postponed_until: datetime | None = None

    @property
    def touches_status(self) -> bool:
        return (
            self.status is not None
            or self.status_reason is not None
            or self.postponed_until is not None
        )


@dataclass(frozen=True)
class EventQuery:
    """Listing filters.

    ``city`` is a city id or ``"Name, State"``; ``category`` is a category id
    or name. ``sort`` is ``date`` or ``participants``.
    """

    city: str | None = None
    category: str | None = None
    sort: str = "date"
    top: int | None = None


@dataclass(frozen=True)
class FeedbackInput:
    testimonial: str | None = None
    rating: int | None = None
    location_clear: bool | None = None
    org_rating: int | None = None
    volunteer_impact_felt: int | None = None
    would_attend_again: bool | None = None
    suggestions: str | None = None
