"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from drives.domain import (
    Category,
    CategoryId,
    City,
    CityId,
    Event,
    EventId,
    ParticipantRecord,
    Testimonial,
    UserId,
)


class EventStore(ABC):
    """Interface for event persistence operations.

    Stores never write ``current_participants``; that counter belongs to the
    ParticipantLedger.
    """

    @abstractmethod
    def add_event(self, event: Event) -> Event:
        """Persist a new event and return it as stored."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def find_events(
        self,
        city_id: CityId | None = None,
        category_id: CategoryId | None = None,
        creator_id: UserId | None = None,
        participant_id: UserId | None = None,
    ) -> list[Event]:
        """Return events matching every given filter, ordered by starts_at."""
        ...

    @abstractmethod
    def find_unsettled_events(self) -> list[Event]:
        """Return events the status engine may still move."""
        ...

    @abstractmethod
    def save_event(self, event: Event) -> Event:
        """Write ``event`` if the stored version still equals ``event.version``.

        Returns the stored event with its new version.

        Raises:
            ConcurrentUpdateError: If the stored version moved on.
            EventNotFoundError: If the event no longer exists.
        """
        ...


class ParticipantLedger(ABC):
    """Owns enrollment records and the counter derived from them.

    Each write pairs the record insert/delete with the counter change in one
    atomic unit, and evaluates its preconditions inside that unit.
    """

    @abstractmethod
    def join(self, event_id: EventId, user_id: UserId, joined_at: datetime) -> ParticipantRecord:
        """Enroll a user.

        Raises:
            EventNotFoundError: If the event does not exist.
            EventNotJoinableError: If the event status does not accept joins.
            AlreadyJoinedError: If the user already holds a record.
            CapacityExceededError: If no slot is left.
        """
        ...

    @abstractmethod
    def leave(self, event_id: EventId, user_id: UserId) -> None:
        """Remove a user's enrollment.

        Raises:
            EventNotFoundError: If the event does not exist.
            NotJoinedError: If the user holds no record.
        """
        ...

    @abstractmethod
    def is_participant(self, event_id: EventId, user_id: UserId) -> bool:
        ...

    @abstractmethod
    def list_participants(self, event_id: EventId) -> list[ParticipantRecord]:
        """Return records for an event, ordered by joined_at."""
        ...


class ReferenceDataStore(ABC):
    """Read-only lookups of cities and categories."""

    @abstractmethod
    def get_city(self, city_id: CityId) -> City | None:
        ...

    @abstractmethod
    def find_city(self, name: str, state: str | None = None) -> City | None:
        """Return the first city with this name (and state, when given)."""
        ...

    @abstractmethod
    def list_cities(self) -> list[City]:
        ...

    @abstractmethod
    def get_category(self, category_id: CategoryId) -> Category | None:
        ...

    @abstractmethod
    def find_category(self, name: str) -> Category | None:
        ...

    @abstractmethod
    def list_categories(self) -> list[Category]:
        ...


class FeedbackStore(ABC):
    """Interface for post-drive testimonials."""

    @abstractmethod
    def add_testimonial(self, testimonial: Testimonial) -> Testimonial:
        """Persist a testimonial.

        Raises:
            FeedbackAlreadySubmittedError: If the user already left one.
        """
        ...

    @abstractmethod
    def list_testimonials(self, event_id: EventId) -> list[Testimonial]:
        ...
