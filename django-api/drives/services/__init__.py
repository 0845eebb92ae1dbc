from drives.services.event_service import EventService
from drives.services.feedback_service import FeedbackService
from drives.stores.django_store import (
    DjangoEventStore,
    DjangoFeedbackStore,
    DjangoParticipantLedger,
    DjangoReferenceDataStore,
)


def build_event_service() -> EventService:
    """Wire the event service to the Django ORM stores."""
    return EventService(
        store=DjangoEventStore(),
        ledger=DjangoParticipantLedger(),
        reference=DjangoReferenceDataStore(),
    )


def build_feedback_service(events: EventService | None = None) -> FeedbackService:
    return FeedbackService(
        events=events or build_event_service(),
        ledger=DjangoParticipantLedger(),
        feedback=DjangoFeedbackStore(),
    )


__all__ = ["EventService", "FeedbackService", "build_event_service", "build_feedback_service"]
