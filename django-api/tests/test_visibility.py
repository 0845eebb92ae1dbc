"""Unit tests for the public listing filter.

Run with: pytest tests/test_visibility.py -v
"""

from datetime import timedelta

from drives.domain import Active, Cancelled, Completed, NotCompleted
from drives.domain.visibility import filter_listed, is_publicly_listed

DAY = timedelta(days=1)


class TestIsPubliclyListed:
    def test_future_drive_with_quorum_is_listed(self, make_event, now):
        event = make_event(expected_participants=20, current_participants=10)
        assert is_publicly_listed(event, now) is True

    def test_future_drive_below_quorum_is_hidden(self, make_event, now):
        """3 of 20 signed up: quorum is 10, so the drive stays hidden."""
        event = make_event(expected_participants=20, current_participants=3)
        assert is_publicly_listed(event, now) is False

    def test_large_drive_uses_third_of_expected(self, make_event, now):
        assert is_publicly_listed(make_event(expected_participants=45, current_participants=14), now) is False
        assert is_publicly_listed(make_event(expected_participants=45, current_participants=15), now) is True

    def test_ended_drive_is_hidden(self, make_event, now):
        event = make_event(
            starts_at=now - 2 * DAY,
            ends_at=now - DAY,
            current_participants=20,
            status=NotCompleted(),
        )
        assert is_publicly_listed(event, now) is False

    def test_completed_drive_is_hidden_even_inside_window(self, make_event, now):
        event = make_event(
            starts_at=now - DAY,
            ends_at=now + DAY,
            current_participants=20,
            status=Completed(),
        )
        assert is_publicly_listed(event, now) is False

    def test_running_drive_is_listed(self, make_event, now):
        event = make_event(
            starts_at=now - DAY,
            ends_at=now + DAY,
            current_participants=12,
            status=Active(),
        )
        assert is_publicly_listed(event, now) is True

    def test_cancelled_drive_with_quorum_stays_listed(self, make_event, now):
        event = make_event(current_participants=10, status=Cancelled(reason="Venue closed"))
        assert is_publicly_listed(event, now) is True


class TestFilterListed:
    def test_keeps_order_and_drops_hidden(self, make_event, now):
        first = make_event(current_participants=10)
        hidden = make_event(current_participants=2)
        second = make_event(current_participants=11)

        assert filter_listed([first, hidden, second], now) == [first, second]
