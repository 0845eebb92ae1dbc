"""Unit tests for post-drive feedback and completion summaries.

Run with: pytest tests/test_feedback.py -v
"""

from datetime import timedelta

import pytest

from drives.domain import StatusKind
from drives.domain.errors import (
    FeedbackAlreadySubmittedError,
    ForbiddenError,
    ValidationError,
)
from drives.services.commands import FeedbackInput

from conftest import NOW

DAY = timedelta(days=1)


@pytest.fixture
def finished_drive(seed_event):
    """A drive that ended yesterday with 12 of 30 volunteers."""
    return seed_event(participants=12, starts_at=NOW - 2 * DAY, ends_at=NOW - DAY)


def feedback(**overrides) -> FeedbackInput:
    fields = dict(testimonial="Met wonderful people", rating=4)
    fields.update(overrides)
    return FeedbackInput(**fields)


class TestSubmitFeedback:
    def test_participant_can_leave_feedback(self, feedback_service, finished_drive):
        testimonial = feedback_service.submit_feedback(
            str(finished_drive.id),
            "volunteer-0",
            feedback(org_rating=5, location_clear=True, suggestions="More gloves"),
        )

        assert testimonial.rating == 4
        assert testimonial.org_rating == 5
        assert testimonial.submitted_at == NOW

    def test_creator_can_leave_feedback(self, feedback_service, finished_drive):
        testimonial = feedback_service.submit_feedback(
            str(finished_drive.id), "creator-1", feedback()
        )
        assert str(testimonial.user_id) == "creator-1"

    def test_outsider_is_forbidden(self, feedback_service, finished_drive):
        with pytest.raises(ForbiddenError):
            feedback_service.submit_feedback(str(finished_drive.id), "passer-by", feedback())

    def test_feedback_opens_after_the_drive_ends(self, feedback_service, seed_event, clock):
        drive = seed_event(participants=1, starts_at=NOW + DAY, ends_at=NOW + 2 * DAY)

        with pytest.raises(ForbiddenError):
            feedback_service.submit_feedback(str(drive.id), "volunteer-0", feedback())

        clock.advance(3 * DAY)
        feedback_service.submit_feedback(str(drive.id), "volunteer-0", feedback())

    def test_one_testimonial_per_user(self, feedback_service, finished_drive):
        feedback_service.submit_feedback(str(finished_drive.id), "volunteer-0", feedback())
        with pytest.raises(FeedbackAlreadySubmittedError):
            feedback_service.submit_feedback(str(finished_drive.id), "volunteer-0", feedback())

    @pytest.mark.parametrize(
        "overrides,field",
        [
            (dict(testimonial=None), "testimonial"),
            (dict(testimonial="   "), "testimonial"),
            (dict(rating=None), "rating"),
            (dict(rating=6), "rating"),
            (dict(rating=True), "rating"),
            (dict(org_rating=0), "org_rating"),
            (dict(volunteer_impact_felt=9), "volunteer_impact_felt"),
            (dict(would_attend_again="yes"), "would_attend_again"),
            (dict(location_clear=1), "location_clear"),
        ],
    )
    def test_invalid_feedback_names_the_field(self, feedback_service, finished_drive, overrides, field):
        with pytest.raises(ValidationError) as exc_info:
            feedback_service.submit_feedback(
                str(finished_drive.id), "volunteer-0", feedback(**overrides)
            )
        assert exc_info.value.field == field


class TestCompletionSummary:
    def test_summarises_testimonials(self, feedback_service, finished_drive):
        drive_id = str(finished_drive.id)
        feedback_service.submit_feedback(drive_id, "volunteer-0", feedback(rating=5, would_attend_again=True))
        feedback_service.submit_feedback(drive_id, "volunteer-1", feedback(rating=4, would_attend_again=False))
        feedback_service.submit_feedback(drive_id, "volunteer-2", feedback(rating=3))

        summary = feedback_service.get_completion_summary(drive_id)

        assert summary.status is StatusKind.COMPLETED
        assert summary.is_completed is True
        assert summary.participant_count == 12
        assert summary.testimonial_count == 3
        assert summary.average_rating == pytest.approx(4.0)
        assert summary.would_attend_again_ratio == pytest.approx(0.5)

    def test_without_testimonials(self, feedback_service, seed_event):
        drive = seed_event(participants=2, starts_at=NOW - 2 * DAY, ends_at=NOW - DAY)

        summary = feedback_service.get_completion_summary(str(drive.id))

        assert summary.status is StatusKind.NOT_COMPLETED
        assert summary.is_completed is False
        assert summary.average_rating is None
        assert summary.would_attend_again_ratio is None
