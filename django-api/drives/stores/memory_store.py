"""Thread-safe in-memory implementation of the drive stores.

Used by the unit tests and for local experiments without a database. All
state sits behind one lock, so every ledger write is atomic with its
precondition checks.
"""

import threading
from dataclasses import replace
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
from drives.domain.errors import (
    AlreadyJoinedError,
    CapacityExceededError,
    ConcurrentUpdateError,
    EventNotFoundError,
    EventNotJoinableError,
    FeedbackAlreadySubmittedError,
    NotJoinedError,
)
from drives.domain.status import JOINABLE_KINDS, TERMINAL_KINDS
from drives.stores.interfaces import (
    EventStore,
    FeedbackStore,
    ParticipantLedger,
    ReferenceDataStore,
)


class InMemoryStore(EventStore, ParticipantLedger, ReferenceDataStore, FeedbackStore):
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._events: dict[EventId, Event] = {}
        self._participants: dict[EventId, dict[UserId, ParticipantRecord]] = {}
        self._testimonials: dict[EventId, dict[UserId, Testimonial]] = {}
        self._cities: dict[CityId, City] = {}
        self._categories: dict[CategoryId, Category] = {}

    # Reference data

    def add_city(self, city: City) -> City:
        with self._lock:
            self._cities[city.id] = city
        return city

    def add_category(self, category: Category) -> Category:
        with self._lock:
            self._categories[category.id] = category
        return category

    def get_city(self, city_id: CityId) -> City | None:
        return self._cities.get(city_id)

    def find_city(self, name: str, state: str | None = None) -> City | None:
        for city in self.list_cities():
            if city.name.lower() != name.lower():
                continue
            if state and city.state.lower() != state.lower():
                continue
            return city
        return None

    def list_cities(self) -> list[City]:
        with self._lock:
            return sorted(self._cities.values(), key=lambda city: city.name)

    def get_category(self, category_id: CategoryId) -> Category | None:
        return self._categories.get(category_id)

    def find_category(self, name: str) -> Category | None:
        for category in self.list_categories():
            if category.name.lower() == name.lower():
                return category
        return None

    def list_categories(self) -> list[Category]:
        with self._lock:
            return sorted(self._categories.values(), key=lambda category: category.name)

    # Events

    def add_event(self, event: Event) -> Event:
        with self._lock:
            stored = replace(event, current_participants=0, version=0)
            self._events[event.id] = stored
            self._participants[event.id] = {}
            return stored

    def get_event(self, event_id: EventId) -> Event | None:
        with self._lock:
            return self._events.get(event_id)

    def find_events(
        self,
        city_id: CityId | None = None,
        category_id: CategoryId | None = None,
        creator_id: UserId | None = None,
        participant_id: UserId | None = None,
    ) -> list[Event]:
        with self._lock:
            events = [
                event
                for event in self._events.values()
                if (city_id is None or event.city_id == city_id)
                and (category_id is None or category_id in event.category_ids)
                and (creator_id is None or event.creator_id == creator_id)
                and (participant_id is None or participant_id in self._participants[event.id])
            ]
        return sorted(events, key=lambda event: event.starts_at)

    def find_unsettled_events(self) -> list[Event]:
        with self._lock:
            events = [
                event for event in self._events.values() if event.status_kind not in TERMINAL_KINDS
            ]
        return sorted(events, key=lambda event: event.starts_at)

    def save_event(self, event: Event) -> Event:
        with self._lock:
            stored = self._events.get(event.id)
            if stored is None:
                raise EventNotFoundError(str(event.id))
            if stored.version != event.version:
                raise ConcurrentUpdateError(str(event.id))
            saved = replace(
                event,
                current_participants=stored.current_participants,
                version=stored.version + 1,
            )
            self._events[event.id] = saved
            return saved

    # Ledger

    def join(self, event_id: EventId, user_id: UserId, joined_at: datetime) -> ParticipantRecord:
        with self._lock:
            event = self._events.get(event_id)
            if event is None:
                raise EventNotFoundError(str(event_id))
            if event.status_kind not in JOINABLE_KINDS:
                raise EventNotJoinableError(str(event_id), event.status_kind.value)
            records = self._participants[event_id]
            if user_id in records:
                raise AlreadyJoinedError(str(event_id), str(user_id))
            if event.is_full:
                raise CapacityExceededError(str(event_id))
            record = ParticipantRecord(event_id=event_id, user_id=user_id, joined_at=joined_at)
            records[user_id] = record
            self._events[event_id] = replace(
                event,
                current_participants=event.current_participants + 1,
                version=event.version + 1,
            )
            return record

    def leave(self, event_id: EventId, user_id: UserId) -> None:
        with self._lock:
            event = self._events.get(event_id)
            if event is None:
                raise EventNotFoundError(str(event_id))
            if self._participants[event_id].pop(user_id, None) is None:
                raise NotJoinedError(str(event_id), str(user_id))
            self._events[event_id] = replace(
                event,
                current_participants=max(event.current_participants - 1, 0),
                version=event.version + 1,
            )

    def is_participant(self, event_id: EventId, user_id: UserId) -> bool:
        with self._lock:
            return user_id in self._participants.get(event_id, {})

    def list_participants(self, event_id: EventId) -> list[ParticipantRecord]:
        with self._lock:
            records = list(self._participants.get(event_id, {}).values())
        return sorted(records, key=lambda record: record.joined_at)

    # Feedback

    def add_testimonial(self, testimonial: Testimonial) -> Testimonial:
        with self._lock:
            received = self._testimonials.setdefault(testimonial.event_id, {})
            if testimonial.user_id in received:
                raise FeedbackAlreadySubmittedError(
                    str(testimonial.event_id), str(testimonial.user_id)
                )
            received[testimonial.user_id] = testimonial
            return testimonial

    def list_testimonials(self, event_id: EventId) -> list[Testimonial]:
        with self._lock:
            testimonials = list(self._testimonials.get(event_id, {}).values())
        return sorted(testimonials, key=lambda testimonial: testimonial.submitted_at)
