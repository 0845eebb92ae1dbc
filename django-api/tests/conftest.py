"""Pytest configuration and shared fixtures."""

import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest
from rest_framework.test import APIClient

from drives.domain import (
    Category,
    CategoryId,
    City,
    CityId,
    Event,
    EventId,
    Upcoming,
    UserId,
)
from drives.services import EventService, FeedbackService
from drives.stores.memory_store import InMemoryStore

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
MUMBAI = City(
    id=CityId(uuid.UUID("11111111-1111-4111-8111-111111111111")),
    name="Mumbai",
    state="Maharashtra",
    country="India",
)
DELHI = City(
    id=CityId(uuid.UUID("22222222-2222-4222-8222-222222222222")),
    name="Delhi",
    state="Delhi",
    country="India",
)
ENVIRONMENT = Category(
    id=CategoryId(uuid.UUID("33333333-3333-4333-8333-333333333333")),
    name="Environment",
)
EDUCATION = Category(
    id=CategoryId(uuid.UUID("44444444-4444-4444-8444-444444444444")),
    name="Education",
)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def mumbai() -> City:
    return MUMBAI


@pytest.fixture
def delhi() -> City:
    return DELHI


@pytest.fixture
def environment() -> Category:
    return ENVIRONMENT


@pytest.fixture
def education() -> Category:
    return EDUCATION


@pytest.fixture
def make_event():
    """Build a domain Event snapshot; keyword arguments override defaults."""

    def _make(**overrides) -> Event:
        fields = dict(
            id=EventId(uuid.uuid4()),
            name="Juhu beach clean-up",
            description="Collect plastic along the shoreline",
            starts_at=NOW + timedelta(days=7),
            ends_at=None,
            location="Juhu Beach",
            full_address="Juhu Tara Rd, Mumbai",
            coordinates=None,
            expected_participants=30,
            current_participants=0,
            status=Upcoming(),
            status_updated_by=None,
            status_updated_at=None,
            creator_id=UserId("creator-1"),
            category_ids=frozenset({ENVIRONMENT.id}),
            city_id=MUMBAI.id,
        )
        fields.update(overrides)
        return Event(**fields)

    return _make


@pytest.fixture
def memory_store() -> InMemoryStore:
    store = InMemoryStore()
    for city in (MUMBAI, DELHI):
        store.add_city(city)
    for category in (ENVIRONMENT, EDUCATION):
        store.add_category(category)
    return store


@pytest.fixture
def seed_event(memory_store, make_event):
    """Store an event with ``participants`` volunteers already enrolled."""

    def _seed(participants: int = 0, **overrides) -> Event:
        event = make_event(**overrides)
        stored = memory_store.add_event(replace(event, status=Upcoming()))
        for index in range(participants):
            memory_store.join(stored.id, UserId(f"volunteer-{index}"), NOW - timedelta(days=30))
        stored = memory_store.get_event(stored.id)
        if stored.status != event.status:
            stored = memory_store.save_event(replace(stored, status=event.status))
        return stored

    return _seed


@pytest.fixture
def service(memory_store, clock) -> EventService:
    return EventService(
        store=memory_store,
        ledger=memory_store,
        reference=memory_store,
        clock=clock,
    )


@pytest.fixture
def feedback_service(service, memory_store, clock) -> FeedbackService:
    return FeedbackService(
        events=service,
        ledger=memory_store,
        feedback=memory_store,
        clock=clock,
    )


@pytest.fixture
def reference_rows(db):
    """Persist the fixed cities and categories in the test database."""
    from drives import models

    for city in (MUMBAI, DELHI):
        models.City.objects.create(
            id=city.id.value, name=city.name, state=city.state, country=city.country
        )
    for category in (ENVIRONMENT, EDUCATION):
        models.Category.objects.create(id=category.id.value, name=category.name)
