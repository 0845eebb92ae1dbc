"""Unit tests for automatic status transitions.

Run with: pytest tests/test_status_engine.py -v
"""

from datetime import timedelta

import pytest

from drives.domain import (
    Active,
    Cancelled,
    Completed,
    NotCompleted,
    Postponed,
    StatusKind,
    Upcoming,
)
from drives.domain.status_engine import (
    REASON_END_PASSED,
    REASON_QUORUM_MISSED,
    REASON_RESUMED,
    REASON_STARTED,
    SYSTEM_ACTOR,
    apply_update,
    reconcile,
)

DAY = timedelta(days=1)


class TestScenarios:
    def test_upcoming_becomes_active_once_started(self, make_event, now):
        """Start yesterday, no end date, upcoming -> active."""
        event = make_event(starts_at=now - DAY, ends_at=None, status=Upcoming())

        update = reconcile(event, now)

        assert update is not None
        assert update.status == Active(reason=REASON_STARTED)
        assert update.updated_at == now
        assert update.updated_by == SYSTEM_ACTOR

    def test_ended_below_quorum_is_not_completed(self, make_event, now):
        """Ended yesterday with 5 of 30 -> not_completed (quorum is 10)."""
        event = make_event(
            starts_at=now - 2 * DAY,
            ends_at=now - DAY,
            expected_participants=30,
            current_participants=5,
            status=Active(),
        )

        update = reconcile(event, now)

        assert update.status == NotCompleted(reason=REASON_QUORUM_MISSED)

    def test_ended_with_quorum_is_completed(self, make_event, now):
        """Ended yesterday with 12 of 30 -> completed."""
        event = make_event(
            starts_at=now - 2 * DAY,
            ends_at=now - DAY,
            expected_participants=30,
            current_participants=12,
            status=Active(),
        )

        update = reconcile(event, now)

        assert update.status == Completed(reason=REASON_END_PASSED)

    def test_postponement_lapses_back_to_upcoming(self, make_event, now):
        """Postponed until yesterday -> upcoming, postponed_until cleared."""
        event = make_event(
            starts_at=now + 3 * DAY,
            status=Postponed(until=now - DAY, reason="Monsoon warning"),
        )

        update = reconcile(event, now)

        assert update.status == Upcoming(reason=REASON_RESUMED)
        assert not hasattr(update.status, "until")

    def test_upcoming_ended_without_ever_starting_is_settled(self, make_event, now):
        event = make_event(
            starts_at=now - 3 * DAY,
            ends_at=now - 2 * DAY,
            current_participants=0,
            status=Upcoming(),
        )
        assert reconcile(event, now).status.kind is StatusKind.NOT_COMPLETED

    def test_postponed_past_end_is_settled_first(self, make_event, now):
        event = make_event(
            starts_at=now - 3 * DAY,
            ends_at=now - 2 * DAY,
            expected_participants=12,
            current_participants=10,
            status=Postponed(until=now - DAY, reason="Strike"),
        )
        assert reconcile(event, now).status.kind is StatusKind.COMPLETED

    def test_started_drive_with_future_end_becomes_active(self, make_event, now):
        event = make_event(starts_at=now - DAY, ends_at=now + DAY)
        assert reconcile(event, now).status.kind is StatusKind.ACTIVE


class TestNoChange:
    def test_future_upcoming_unchanged(self, make_event, now):
        assert reconcile(make_event(starts_at=now + DAY), now) is None

    def test_running_active_unchanged(self, make_event, now):
        event = make_event(starts_at=now - DAY, ends_at=now + DAY, status=Active())
        assert reconcile(event, now) is None

    def test_postponement_still_running(self, make_event, now):
        event = make_event(status=Postponed(until=now + DAY, reason="Heat wave"))
        assert reconcile(event, now) is None


class TestTerminalStability:
    @pytest.mark.parametrize(
        "status",
        [
            Completed(reason=REASON_END_PASSED),
            Cancelled(reason="Venue unavailable"),
            NotCompleted(reason=REASON_QUORUM_MISSED),
        ],
    )
    @pytest.mark.parametrize("days_later", [0, 1, 30, 3650])
    def test_terminal_status_never_moves(self, make_event, now, status, days_later):
        event = make_event(
            starts_at=now - 2 * DAY,
            ends_at=now - DAY,
            current_participants=25,
            status=status,
        )
        assert reconcile(event, now + timedelta(days=days_later)) is None


class TestIdempotence:
    @pytest.mark.parametrize(
        "overrides",
        [
            dict(status=Upcoming()),
            dict(starts_at_offset=-DAY, status=Upcoming()),
            dict(starts_at_offset=-3 * DAY, ends_at_offset=-DAY, status=Active()),
            dict(starts_at_offset=-3 * DAY, ends_at_offset=-DAY, current=15, status=Active()),
            dict(starts_at_offset=-DAY, postponed_offset=-DAY),
            dict(starts_at_offset=2 * DAY, postponed_offset=-DAY),
        ],
    )
    def test_second_reconcile_is_noop(self, make_event, now, overrides):
        starts_at = now + overrides.get("starts_at_offset", 2 * DAY)
        ends_offset = overrides.get("ends_at_offset")
        status = overrides.get("status")
        if "postponed_offset" in overrides:
            status = Postponed(until=now + overrides["postponed_offset"], reason="Rain")
        event = make_event(
            starts_at=starts_at,
            ends_at=now + ends_offset if ends_offset is not None else None,
            current_participants=overrides.get("current", 0),
            status=status,
        )

        first = reconcile(event, now)
        once = apply_update(event, first) if first else event

        assert reconcile(once, now) is None

    def test_lapsed_postponement_with_started_drive_lands_on_active(self, make_event, now):
        """Resume and start both apply in one call."""
        event = make_event(
            starts_at=now - DAY,
            status=Postponed(until=now - timedelta(hours=1), reason="Rain"),
        )

        update = reconcile(event, now)

        assert update.status == Active(reason=REASON_STARTED)

    def test_apply_update_records_actor_and_time(self, make_event, now):
        event = make_event(starts_at=now - DAY)
        updated = apply_update(event, reconcile(event, now))
        assert updated.status_kind is StatusKind.ACTIVE
        assert updated.status_updated_at == now
        assert updated.status_updated_by == SYSTEM_ACTOR
