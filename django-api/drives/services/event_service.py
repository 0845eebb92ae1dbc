"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Every read path reconciles the drive's status and persists any change
before returning it.
"""

import logging
from dataclasses import replace
from datetime import datetime
from uuid import UUID, uuid4

from drives.clock import Clock, SystemClock
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
    Upcoming,
    UserDrives,
    UserId,
)
from drives.domain.errors import (
    ConcurrentUpdateError,
    EventNotFoundError,
    EventNotJoinableError,
    ForbiddenError,
    ImmutableEventError,
    InvalidIdError,
    ValidationError,
)
from drives.domain.status import (
    JOINABLE_KINDS,
    MANUAL_KINDS,
    build_status,
    parse_kind,
    postponed_until,
)
from drives.domain.status_engine import apply_update, reconcile
from drives.domain.visibility import filter_listed
from drives.services.commands import EventDraft, EventPatch, EventQuery
from drives.signals import event_status_changed
from drives.stores.interfaces import EventStore, ParticipantLedger, ReferenceDataStore

logger = logging.getLogger(__name__)

SORT_KEYS = ("date", "participants")


def parse_event_id(value: str) -> EventId:
    try:
        return EventId.from_string(value)
    except (TypeError, ValueError):
        raise InvalidIdError("event_id") from None


def parse_user_id(value: str | None) -> UserId:
    try:
        return UserId(value)
    except (TypeError, ValueError, AttributeError):
        raise ValidationError("A user id is required", field="user_id") from None


def _looks_like_uuid(value: str) -> bool:
    try:
        UUID(value)
    except ValueError:
        return False
    return True


def _require_text(value: str | None, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required", field=field)
    return str(value).strip()


def _require_positive(value: int | None, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field} must be a positive integer", field=field)
    return value


def _coordinates(latitude: float | None, longitude: float | None) -> GeoPoint | None:
    if latitude is None and longitude is None:
        return None
    if latitude is None or longitude is None:
        field = "latitude" if latitude is None else "longitude"
        raise ValidationError("latitude and longitude must be given together", field=field)
    try:
        return GeoPoint(latitude=float(latitude), longitude=float(longitude))
    except ValueError as exc:
        raise ValidationError(str(exc), field="coordinates") from None


def _check_window(starts_at: datetime, ends_at: datetime | None) -> None:
    if ends_at is not None and ends_at < starts_at:
        raise ValidationError("ends_at cannot be before starts_at", field="ends_at")


class EventService:
    """Orchestrates drive lifecycle, participation and listing."""

    def __init__(
        self,
        store: EventStore,
        ledger: ParticipantLedger,
        reference: ReferenceDataStore,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._ledger = ledger
        self._reference = reference
        self._clock = clock or SystemClock()

    # Reads

    def get_event(self, event_id: str) -> Event:
        """Return a drive by ID with its status reconciled.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self._load(parse_event_id(event_id))
        return self._refresh(event, self._clock.now())

    def list_events(self, query: EventQuery | None = None) -> list[Event]:
        """Return publicly listed drives matching ``query``."""
        query = query or EventQuery()
        if query.sort not in SORT_KEYS:
            raise ValidationError(f"sort must be one of {', '.join(SORT_KEYS)}", field="sort")
        if query.top is not None:
            _require_positive(query.top, "top")

        city_id = self._resolve_city(query.city) if query.city else None
        category_id = self._resolve_category(query.category) if query.category else None
        if (query.city and city_id is None) or (query.category and category_id is None):
            return []

        now = self._clock.now()
        candidates = self._store.find_events(city_id=city_id, category_id=category_id)
        listed = filter_listed((self._refresh(event, now) for event in candidates), now)

        if query.top is not None or query.sort == "participants":
            listed.sort(key=lambda event: (-event.current_participants, event.starts_at))
        else:
            listed.sort(key=lambda event: event.starts_at)
        if query.top is not None:
            listed = listed[: query.top]
        return listed

    def list_user_drives(self, user_id: str) -> UserDrives:
        """Return drives the user joined and drives the user created."""
        uid = parse_user_id(user_id)
        now = self._clock.now()
        participated = self._store.find_events(participant_id=uid)
        created = self._store.find_events(creator_id=uid)
        return UserDrives(
            participated=tuple(self._refresh(event, now) for event in participated),
            created=tuple(self._refresh(event, now) for event in created),
        )

    def is_participant(self, event_id: str, user_id: str) -> bool:
        event = self._load(parse_event_id(event_id))
        return self._ledger.is_participant(event.id, parse_user_id(user_id))

    def list_participants(self, event_id: str, actor_id: str) -> list[ParticipantRecord]:
        """Return a drive's enrollment records in join order.

        Raises:
            ForbiddenError: If the actor is not the creator.
        """
        actor = parse_user_id(actor_id)
        event = self._load(parse_event_id(event_id))
        if event.creator_id != actor:
            raise ForbiddenError("Only the drive creator can see the participant list")
        return self._ledger.list_participants(event.id)

    def list_cities(self) -> list[City]:
        return self._reference.list_cities()

    def list_categories(self) -> list[Category]:
        return self._reference.list_categories()

    # Writes

    def create_event(self, draft: EventDraft, creator_id: str) -> Event:
        """Create a drive in the upcoming state with no participants."""
        creator = parse_user_id(creator_id)
        name = _require_text(draft.name, "name")
        description = _require_text(draft.description, "description")
        if draft.starts_at is None:
            raise ValidationError("starts_at is required", field="starts_at")
        _check_window(draft.starts_at, draft.ends_at)
        location = _require_text(draft.location, "location")
        city_id = self._require_city(draft.city_id)
        category_ids = self._require_categories(draft.category_ids)
        expected = _require_positive(draft.expected_participants, "expected_participants")

        now = self._clock.now()
        event = Event(
            id=EventId(uuid4()),
            name=name,
            description=description,
            starts_at=draft.starts_at,
            ends_at=draft.ends_at,
            location=location,
            full_address=(draft.full_address or "").strip(),
            coordinates=_coordinates(draft.latitude, draft.longitude),
            expected_participants=expected,
            current_participants=0,
            status=Upcoming(),
            status_updated_by=str(creator),
            status_updated_at=now,
            creator_id=creator,
            category_ids=category_ids,
            city_id=city_id,
        )
        stored = self._store.add_event(event)
        logger.info(f"Created drive: {stored.id} - {stored.name} by {creator}")
        return stored

    def update_event(self, event_id: str, patch: EventPatch, actor_id: str) -> Event:
        """Apply a creator edit.

        Raises:
            ForbiddenError: If the actor is not the creator.
            ImmutableEventError: If the drive has completed.
            ValidationError: If a field is missing or invalid.
            ConcurrentUpdateError: If the drive changed while being edited.
        """
        actor = parse_user_id(actor_id)
        now = self._clock.now()
        event = self._refresh(self._load(parse_event_id(event_id)), now)
        if event.creator_id != actor:
            raise ForbiddenError()
        if event.status_kind is StatusKind.COMPLETED:
            raise ImmutableEventError(str(event.id))

        updated = self._apply_patch(event, patch)
        if patch.touches_status:
            updated = replace(
                updated,
                status=self._manual_status(event, patch),
                status_updated_by=str(actor),
                status_updated_at=now,
            )

        saved = self._store.save_event(updated)
        logger.info(f"Updated drive: {saved.id} by {actor}")
        if saved.status != event.status:
            self._notify(event, saved, str(actor))
        return self._refresh(saved, now)

    def set_status(
        self,
        event_id: str,
        status: str,
        reason: str | None,
        until: datetime | None,
        actor_id: str,
    ) -> Event:
        """Manually set a drive's status (cancel, postpone, ...)."""
        if status is None:
            raise ValidationError("status is required", field="status")
        patch = EventPatch(status=status, status_reason=reason, postponed_until=until)
        return self.update_event(event_id, patch, actor_id)

    def join(self, event_id: str, user_id: str) -> ParticipantRecord:
        """Enroll a user in a drive.

        Raises:
            EventNotFoundError, EventNotJoinableError, AlreadyJoinedError,
            CapacityExceededError.
        """
        uid = parse_user_id(user_id)
        now = self._clock.now()
        event = self._refresh(self._load(parse_event_id(event_id)), now)
        self._require_joinable(event)
        record = self._ledger.join(event.id, uid, now)
        logger.info(f"User {uid} joined drive {event.id}")
        return record

    def leave(self, event_id: str, user_id: str, reason: str | None = None) -> None:
        uid = parse_user_id(user_id)
        now = self._clock.now()
        event = self._refresh(self._load(parse_event_id(event_id)), now)
        self._require_joinable(event)
        self._ledger.leave(event.id, uid)
        logger.info(f"User {uid} left drive {event.id}. Reason: {reason or 'not given'}")

    def reconcile_all(self) -> int:
        """Reconcile every drive the engine may still move; return how many changed."""
        now = self._clock.now()
        changed = 0
        for event in self._store.find_unsettled_events():
            try:
                refreshed = self._refresh(event, now)
            except (ConcurrentUpdateError, EventNotFoundError) as exc:
                logger.warning(f"Skipped drive {event.id} during sweep: {exc}")
                continue
            if refreshed.status != event.status:
                changed += 1
        logger.info(f"Reconciled drives: {changed} changed")
        return changed

    # Helpers

    def _load(self, event_id: EventId) -> Event:
        event = self._store.get_event(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    def _refresh(self, event: Event, now: datetime) -> Event:
        """Reconcile and persist, retrying once if the drive moved underneath."""
        for attempt in range(2):
            update = reconcile(event, now)
            if update is None:
                return event
            try:
                saved = self._store.save_event(apply_update(event, update))
            except ConcurrentUpdateError:
                logger.warning(f"Concurrent update on drive {event.id} while reconciling")
                if attempt:
                    raise
                event = self._load(event.id)
                continue
            self._notify(event, saved, update.updated_by)
            return saved
        return event

    def _notify(self, before: Event, after: Event, actor: str) -> None:
        logger.info(
            f"Drive {after.id} status {before.status_kind.value} -> "
            f"{after.status_kind.value}: {after.status_reason or ''}"
        )
        event_status_changed.send(
            sender=self.__class__,
            event=after,
            previous=before.status_kind,
            actor=actor,
        )

    def _require_joinable(self, event: Event) -> None:
        if event.status_kind not in JOINABLE_KINDS:
            raise EventNotJoinableError(str(event.id), event.status_kind.value)

    def _resolve_city(self, value: str) -> CityId | None:
        if _looks_like_uuid(value):
            return CityId.from_string(value)
        name, _, state = (part.strip() for part in value.partition(","))
        city = self._reference.find_city(name, state or None)
        return city.id if city is not None else None

    def _resolve_category(self, value: str) -> CategoryId | None:
        if _looks_like_uuid(value):
            return CategoryId.from_string(value)
        category = self._reference.find_category(value.strip())
        return category.id if category is not None else None

    def _require_city(self, value: str | None) -> CityId:
        if not value:
            raise ValidationError("city_id is required", field="city_id")
        try:
            city_id = CityId.from_string(value)
        except ValueError:
            raise ValidationError("city_id is not a valid id", field="city_id") from None
        if self._reference.get_city(city_id) is None:
            raise ValidationError("city_id does not match a known city", field="city_id")
        return city_id

    def _require_categories(self, values: list[str] | None) -> frozenset[CategoryId]:
        if not values:
            raise ValidationError("At least one category is required", field="category_ids")
        category_ids = set()
        for value in values:
            try:
                category_id = CategoryId.from_string(value)
            except ValueError:
                raise ValidationError(
                    f"{value!r} is not a valid category id", field="category_ids"
                ) from None
            if self._reference.get_category(category_id) is None:
                raise ValidationError(
                    f"{value!r} does not match a known category", field="category_ids"
                )
            category_ids.add(category_id)
        return frozenset(category_ids)

    def _apply_patch(self, event: Event, patch: EventPatch) -> Event:
        changes = {}
        for field in ("name", "description", "location"):
            value = getattr(patch, field)
            if value is not None:
                changes[field] = _require_text(value, field)
        if patch.full_address is not None:
            changes["full_address"] = patch.full_address.strip()
        if patch.starts_at is not None:
            changes["starts_at"] = patch.starts_at
        if patch.ends_at is not None:
            changes["ends_at"] = patch.ends_at
        _check_window(
            changes.get("starts_at", event.starts_at),
            changes.get("ends_at", event.ends_at),
        )
        if patch.latitude is not None or patch.longitude is not None:
            changes["coordinates"] = _coordinates(patch.latitude, patch.longitude)
        if patch.city_id is not None:
            changes["city_id"] = self._require_city(patch.city_id)
        if patch.category_ids is not None:
            changes["category_ids"] = self._require_categories(patch.category_ids)
        if patch.expected_participants is not None:
            expected = _require_positive(patch.expected_participants, "expected_participants")
            if expected < event.current_participants:
                raise ValidationError(
                    "expected_participants cannot drop below the current participant count",
                    field="expected_participants",
                )
            changes["expected_participants"] = expected
        return replace(event, **changes) if changes else event

    def _manual_status(self, event: Event, patch: EventPatch):
        kind = parse_kind(patch.status) if patch.status is not None else event.status_kind
        if kind not in MANUAL_KINDS:
            raise ValidationError(f"Status {kind.value!r} cannot be set manually", field="status")
        reason = patch.status_reason
        until = patch.postponed_until
        if patch.status is None:
            # Editing the reason or resume date of the current status.
            reason = reason if reason is not None else event.status_reason
            until = until if until is not None else postponed_until(event.status)
        if kind is StatusKind.POSTPONED and until is not None and until <= self._clock.now():
            raise ValidationError(
                "postponed_until must be in the future", field="postponed_until"
            )
        return build_status(kind, reason, until)
