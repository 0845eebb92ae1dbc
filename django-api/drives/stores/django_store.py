"""Django ORM implementation of the drive stores."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from uuid import uuid4

from django.conf import settings
from django.core.cache import cache
from django.db import IntegrityError, InterfaceError, OperationalError, transaction
from django.db.models import F, IntegerField, Value
from django.db.models.functions import Greatest
from django.utils import timezone

from drives import models
from drives.domain import (
    Category,
    CategoryId,
    City,
    CityId,
    Event,
    EventId,
    GeoPoint,
    ParticipantRecord,
    StatusKind,
    Testimonial,
    UserId,
)
from drives.domain.errors import (
    AlreadyJoinedError,
    CapacityExceededError,
    ConcurrentUpdateError,
    DomainError,
    EventNotFoundError,
    EventNotJoinableError,
    FeedbackAlreadySubmittedError,
    NotJoinedError,
    TransientStorageError,
)
from drives.domain.status import JOINABLE_KINDS, TERMINAL_KINDS, build_status, postponed_until
from drives.stores.interfaces import (
    EventStore,
    FeedbackStore,
    ParticipantLedger,
    ReferenceDataStore,
)

logger = logging.getLogger(__name__)

_JOINABLE = [kind.value for kind in JOINABLE_KINDS]
_TERMINAL = [kind.value for kind in TERMINAL_KINDS]


@contextmanager
def storage_errors() -> Iterator[None]:
    """Report database outages as TransientStorageError."""
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        logger.warning(f"Storage failure: {exc}")
        raise TransientStorageError() from exc


def _geo(latitude: float | None, longitude: float | None) -> GeoPoint | None:
    if latitude is None or longitude is None:
        return None
    return GeoPoint(latitude=latitude, longitude=longitude)


def to_event(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        name=row.name,
        description=row.description,
        starts_at=row.starts_at,
        ends_at=row.ends_at,
        location=row.location,
        full_address=row.full_address,
        coordinates=_geo(row.latitude, row.longitude),
        expected_participants=row.expected_participants,
        current_participants=row.current_participants,
        status=build_status(StatusKind(row.status), row.status_reason, row.postponed_until),
        status_updated_by=row.status_updated_by,
        status_updated_at=row.status_updated_at,
        creator_id=UserId(row.creator_id),
        category_ids=frozenset(CategoryId(category.id) for category in row.categories.all()),
        city_id=CityId(row.city_id),
        version=row.version,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _writable_fields(event: Event) -> dict:
    return {
        "name": event.name,
        "description": event.description,
        "starts_at": event.starts_at,
        "ends_at": event.ends_at,
        "location": event.location,
        "full_address": event.full_address,
        "latitude": event.coordinates.latitude if event.coordinates else None,
        "longitude": event.coordinates.longitude if event.coordinates else None,
        "expected_participants": event.expected_participants,
        "status": event.status_kind.value,
        "status_reason": event.status_reason,
        "postponed_until": postponed_until(event.status),
        "status_updated_by": event.status_updated_by,
        "status_updated_at": event.status_updated_at,
        "city_id": event.city_id.value,
    }


class DjangoEventStore(EventStore):
    """PostgreSQL-backed event store using Django ORM."""

    def _query(self):
        return models.Event.objects.prefetch_related("categories")

    def add_event(self, event: Event) -> Event:
        with storage_errors(), transaction.atomic():
            row = models.Event.objects.create(
                id=event.id.value,
                creator_id=event.creator_id.value,
                current_participants=0,
                version=0,
                **_writable_fields(event),
            )
            row.categories.set([category_id.value for category_id in event.category_ids])
        return self.get_event(event.id)

    def get_event(self, event_id: EventId) -> Event | None:
        with storage_errors():
            row = self._query().filter(pk=event_id.value).first()
            return to_event(row) if row is not None else None

    def find_events(
        self,
        city_id: CityId | None = None,
        category_id: CategoryId | None = None,
        creator_id: UserId | None = None,
        participant_id: UserId | None = None,
    ) -> list[Event]:
        queryset = self._query()
        if city_id is not None:
            queryset = queryset.filter(city_id=city_id.value)
        if category_id is not None:
            queryset = queryset.filter(categories=category_id.value)
        if creator_id is not None:
            queryset = queryset.filter(creator_id=creator_id.value)
        if participant_id is not None:
            queryset = queryset.filter(participants__user_id=participant_id.value)
        with storage_errors():
            return [to_event(row) for row in queryset.order_by("starts_at")]

    def find_unsettled_events(self) -> list[Event]:
        with storage_errors():
            return [
                to_event(row)
                for row in self._query().exclude(status__in=_TERMINAL).order_by("starts_at")
            ]

    def save_event(self, event: Event) -> Event:
        with storage_errors(), transaction.atomic():
            updated = models.Event.objects.filter(
                pk=event.id.value, version=event.version
            ).update(
                **_writable_fields(event),
                version=F("version") + 1,
                updated_at=timezone.now(),
            )
            if not updated:
                if not models.Event.objects.filter(pk=event.id.value).exists():
                    raise EventNotFoundError(str(event.id))
                raise ConcurrentUpdateError(str(event.id))
            row = models.Event.objects.get(pk=event.id.value)
            row.categories.set([category_id.value for category_id in event.category_ids])
        return self.get_event(event.id)


class DjangoParticipantLedger(ParticipantLedger):
    """Participant ledger backed by the ORM.

    Joining claims a slot with a single conditional UPDATE (status joinable
    and counter below capacity) and inserts the record in the same
    transaction; the unique constraint on (event, user) rejects duplicates.
    """

    def join(self, event_id: EventId, user_id: UserId, joined_at: datetime) -> ParticipantRecord:
        with storage_errors():
            try:
                with transaction.atomic():
                    claimed = models.Event.objects.filter(
                        pk=event_id.value,
                        status__in=_JOINABLE,
                        current_participants__lt=F("expected_participants"),
                    ).update(
                        current_participants=F("current_participants") + 1,
                        version=F("version") + 1,
                        updated_at=joined_at,
                    )
                    if not claimed:
                        raise self._join_rejection(event_id, user_id)
                    models.Participant.objects.create(
                        event_id=event_id.value,
                        user_id=user_id.value,
                        joined_at=joined_at,
                    )
            except IntegrityError:
                raise AlreadyJoinedError(str(event_id), str(user_id)) from None
        return ParticipantRecord(event_id=event_id, user_id=user_id, joined_at=joined_at)

    def _join_rejection(self, event_id: EventId, user_id: UserId) -> DomainError:
        status = (
            models.Event.objects.filter(pk=event_id.value)
            .values_list("status", flat=True)
            .first()
        )
        if status is None:
            return EventNotFoundError(str(event_id))
        if status not in _JOINABLE:
            return EventNotJoinableError(str(event_id), status)
        if self.is_participant(event_id, user_id):
            return AlreadyJoinedError(str(event_id), str(user_id))
        return CapacityExceededError(str(event_id))

    def leave(self, event_id: EventId, user_id: UserId) -> None:
        with storage_errors(), transaction.atomic():
            locked = list(
                models.Event.objects.select_for_update()
                .filter(pk=event_id.value)
                .values_list("pk", flat=True)
            )
            if not locked:
                raise EventNotFoundError(str(event_id))
            deleted, _ = models.Participant.objects.filter(
                event_id=event_id.value, user_id=user_id.value
            ).delete()
            if not deleted:
                raise NotJoinedError(str(event_id), str(user_id))
            models.Event.objects.filter(pk=event_id.value).update(
                current_participants=Greatest(
                    F("current_participants") - 1, Value(0), output_field=IntegerField()
                ),
                version=F("version") + 1,
                updated_at=timezone.now(),
            )

    def is_participant(self, event_id: EventId, user_id: UserId) -> bool:
        with storage_errors():
            return models.Participant.objects.filter(
                event_id=event_id.value, user_id=user_id.value
            ).exists()

    def list_participants(self, event_id: EventId) -> list[ParticipantRecord]:
        with storage_errors():
            return [
                ParticipantRecord(
                    event_id=event_id,
                    user_id=UserId(row.user_id),
                    joined_at=row.joined_at,
                )
                for row in models.Participant.objects.filter(event_id=event_id.value)
            ]


def _to_city(row: models.City) -> City:
    return City(
        id=CityId(row.id),
        name=row.name,
        state=row.state,
        country=row.country,
        coordinates=_geo(row.latitude, row.longitude),
    )


def _to_category(row: models.Category) -> Category:
    return Category(id=CategoryId(row.id), name=row.name)


def cache_generation_key(kind: str) -> str:
    return f"reference:{kind}:generation"


def invalidate_reference_cache(kind: str) -> None:
    """Start a new cache generation so every cached ``kind`` lookup misses."""
    cache.set(cache_generation_key(kind), uuid4().hex, None)


class DjangoReferenceDataStore(ReferenceDataStore):
    """City/category lookups cached in the Django cache.

    Keys carry a generation token that signals rotate whenever a city or
    category changes.
    """

    def __init__(self, timeout: int | None = None) -> None:
        self._timeout = timeout if timeout is not None else settings.DRIVES["REFERENCE_CACHE_TIMEOUT"]

    def _key(self, kind: str, suffix: str) -> str:
        generation = cache.get_or_set(cache_generation_key(kind), uuid4().hex, None)
        return f"reference:{kind}:{generation}:{suffix}"

    def _cached(self, kind: str, suffix: str, load):
        key = self._key(kind, suffix)
        value = cache.get(key)
        if value is None:
            with storage_errors():
                value = load()
            if value is not None:
                cache.set(key, value, self._timeout)
        return value

    def get_city(self, city_id: CityId) -> City | None:
        def load() -> City | None:
            row = models.City.objects.filter(pk=city_id.value).first()
            return _to_city(row) if row is not None else None

        return self._cached("cities", f"id:{city_id}", load)

    def find_city(self, name: str, state: str | None = None) -> City | None:
        def load() -> City | None:
            queryset = models.City.objects.filter(name__iexact=name)
            if state:
                queryset = queryset.filter(state__iexact=state)
            row = queryset.first()
            return _to_city(row) if row is not None else None

        return self._cached("cities", f"name:{name.lower()}|{(state or '').lower()}", load)

    def list_cities(self) -> list[City]:
        return self._cached(
            "cities", "all", lambda: [_to_city(row) for row in models.City.objects.all()]
        )

    def get_category(self, category_id: CategoryId) -> Category | None:
        def load() -> Category | None:
            row = models.Category.objects.filter(pk=category_id.value).first()
            return _to_category(row) if row is not None else None

        return self._cached("categories", f"id:{category_id}", load)

    def find_category(self, name: str) -> Category | None:
        def load() -> Category | None:
            row = models.Category.objects.filter(name__iexact=name).first()
            return _to_category(row) if row is not None else None

        return self._cached("categories", f"name:{name.lower()}", load)

    def list_categories(self) -> list[Category]:
        return self._cached(
            "categories",
            "all",
            lambda: [_to_category(row) for row in models.Category.objects.all()],
        )


class DjangoFeedbackStore(FeedbackStore):
    def add_testimonial(self, testimonial: Testimonial) -> Testimonial:
        with storage_errors():
            try:
                with transaction.atomic():
                    models.Testimonial.objects.create(
                        event_id=testimonial.event_id.value,
                        user_id=testimonial.user_id.value,
                        testimonial=testimonial.testimonial,
                        rating=testimonial.rating,
                        location_clear=testimonial.location_clear,
                        org_rating=testimonial.org_rating,
                        volunteer_impact_felt=testimonial.volunteer_impact_felt,
                        would_attend_again=testimonial.would_attend_again,
                        suggestions=testimonial.suggestions,
                        submitted_at=testimonial.submitted_at,
                    )
            except IntegrityError:
                raise FeedbackAlreadySubmittedError(
                    str(testimonial.event_id), str(testimonial.user_id)
                ) from None
        return testimonial

    def list_testimonials(self, event_id: EventId) -> list[Testimonial]:
        with storage_errors():
            return [
                Testimonial(
                    event_id=event_id,
                    user_id=UserId(row.user_id),
                    testimonial=row.testimonial,
                    rating=row.rating,
                    submitted_at=row.submitted_at,
                    location_clear=row.location_clear,
                    org_rating=row.org_rating,
                    volunteer_impact_felt=row.volunteer_impact_felt,
                    would_attend_again=row.would_attend_again,
                    suggestions=row.suggestions,
                )
                for row in models.Testimonial.objects.filter(event_id=event_id.value)
            ]
