"""Post-drive feedback and completion aggregates."""

import logging

from drives.clock import Clock, SystemClock
from drives.domain import CompletionSummary, Testimonial
from drives.domain.errors import ForbiddenError, ValidationError
from drives.services.commands import FeedbackInput
from drives.services.event_service import EventService, parse_user_id
from drives.stores.interfaces import FeedbackStore, ParticipantLedger

logger = logging.getLogger(__name__)


def _score(value, field: str, required: bool = False) -> int | None:
    if value is None and not required:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        raise ValidationError(f"{field} must be between 1 and 5", field=field)
    return value


def _flag(value, field: str) -> bool | None:
    if value is not None and not isinstance(value, bool):
        raise ValidationError(f"{field} must be a boolean", field=field)
    return value


class FeedbackService:
    """Collects testimonials once a drive is over and summarises them."""

    def __init__(
        self,
        events: EventService,
        ledger: ParticipantLedger,
        feedback: FeedbackStore,
        clock: Clock | None = None,
    ) -> None:
        self._events = events
        self._ledger = ledger
        self._feedback = feedback
        self._clock = clock or SystemClock()

    def submit_feedback(self, event_id: str, user_id: str, data: FeedbackInput) -> Testimonial:
        """Record a participant's (or the creator's) feedback.

        Raises:
            ForbiddenError: If the drive has not ended, or the user neither
                joined nor created it.
            FeedbackAlreadySubmittedError: If the user already left feedback.
            ValidationError: If a field is missing or out of range.
        """
        uid = parse_user_id(user_id)
        now = self._clock.now()
        event = self._events.get_event(event_id)
        if not event.has_ended(now):
            raise ForbiddenError("Feedback opens once the drive has ended")
        if event.creator_id != uid and not self._ledger.is_participant(event.id, uid):
            raise ForbiddenError("Only participants and the creator can leave feedback")

        if data.testimonial is None or not data.testimonial.strip():
            raise ValidationError("testimonial is required", field="testimonial")
        if data.suggestions is not None and not isinstance(data.suggestions, str):
            raise ValidationError("suggestions must be text", field="suggestions")

        testimonial = self._feedback.add_testimonial(
            Testimonial(
                event_id=event.id,
                user_id=uid,
                testimonial=data.testimonial.strip(),
                rating=_score(data.rating, "rating", required=True),
                submitted_at=now,
                location_clear=_flag(data.location_clear, "location_clear"),
                org_rating=_score(data.org_rating, "org_rating"),
                volunteer_impact_felt=_score(data.volunteer_impact_felt, "volunteer_impact_felt"),
                would_attend_again=_flag(data.would_attend_again, "would_attend_again"),
                suggestions=data.suggestions,
            )
        )
        logger.info(f"Feedback from {uid} recorded for drive {event.id}")
        return testimonial

    def get_completion_summary(self, event_id: str) -> CompletionSummary:
        event = self._events.get_event(event_id)
        testimonials = self._feedback.list_testimonials(event.id)

        average = None
        if testimonials:
            average = sum(t.rating for t in testimonials) / len(testimonials)
        answers = [t.would_attend_again for t in testimonials if t.would_attend_again is not None]
        again_ratio = sum(answers) / len(answers) if answers else None

        return CompletionSummary(
            event_id=event.id,
            status=event.status_kind,
            participant_count=event.current_participants,
            testimonial_count=len(testimonials),
            average_rating=average,
            would_attend_again_ratio=again_ratio,
        )
