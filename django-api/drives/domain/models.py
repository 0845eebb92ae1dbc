"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in drives/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta

from drives.domain.status import EventStatus, StatusKind
from drives.domain.value_objects import (
    CategoryId,
    CityId,
    EventId,
    GeoPoint,
    UserId,
    min_participants,
)

# A drive without an end date runs through the end of the day after it starts.
OPEN_ENDED_DAYS = 1


@dataclass(frozen=True)
class City:
    """Reference data: a city drives take place in."""

    id: CityId
    name: str
    state: str
    country: str
    coordinates: GeoPoint | None = None


@dataclass(frozen=True)
class Category:
    """Reference data: a kind of drive (education, environment, ...)."""

    id: CategoryId
    name: str


@dataclass(frozen=True)
class Event:
    """Domain representation of a drive.

    ``version`` increases on every persisted write and is what the stores
    compare-and-swap on.
    """

    id: EventId
    name: str
    description: str
    starts_at: datetime
    ends_at: datetime | None
    location: str
    full_address: str
    coordinates: GeoPoint | None
    expected_participants: int
    current_participants: int
    status: EventStatus
    status_updated_by: str | None
    status_updated_at: datetime | None
    creator_id: UserId
    category_ids: frozenset[CategoryId]
    city_id: CityId
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.starts_at is None:
            raise ValueError("Event requires a start date")
        if self.ends_at is not None and self.ends_at < self.starts_at:
            raise ValueError("Event end date cannot precede its start date")
        if self.expected_participants <= 0:
            raise ValueError("Expected participants must be positive")
        if self.current_participants < 0:
            raise ValueError("Current participants cannot be negative")

    @property
    def status_kind(self) -> StatusKind:
        return self.status.kind

    @property
    def status_reason(self) -> str | None:
        return self.status.reason

    @property
    def effective_end(self) -> datetime:
        if self.ends_at is not None:
            return self.ends_at
        last_day = self.starts_at.date() + timedelta(days=OPEN_ENDED_DAYS)
        return datetime.combine(last_day, time.max, tzinfo=self.starts_at.tzinfo)

    @property
    def min_participants(self) -> int:
        return min_participants(self.expected_participants)

    @property
    def is_full(self) -> bool:
        return self.current_participants >= self.expected_participants

    def has_ended(self, now: datetime) -> bool:
        return self.effective_end < now


@dataclass(frozen=True)
class ParticipantRecord:
    """One user's enrollment in one drive."""

    event_id: EventId
    user_id: UserId
    joined_at: datetime


@dataclass(frozen=True)
class Testimonial:
    """Post-drive feedback left by a participant or the creator."""

    event_id: EventId
    user_id: UserId
    testimonial: str
    rating: int
    submitted_at: datetime
    location_clear: bool | None = None
    org_rating: int | None = None
    volunteer_impact_felt: int | None = None
    would_attend_again: bool | None = None
    suggestions: str | None = None


@dataclass(frozen=True)
class CompletionSummary:
    """Aggregates a downstream content generator reads once a drive is done."""

    event_id: EventId
    status: StatusKind
    participant_count: int
    testimonial_count: int
    average_rating: float | None
    would_attend_again_ratio: float | None

    @property
    def is_completed(self) -> bool:
        return self.status is StatusKind.COMPLETED


@dataclass(frozen=True)
class UserDrives:
    """Drives a user has joined and drives they created."""

    participated: tuple[Event, ...] = ()
    created: tuple[Event, ...] = ()
