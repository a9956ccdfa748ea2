"""Tests for ongoing / upcoming / past classification."""

from datetime import timedelta

import pytest

from ridebook.models.booking import BookingCategory, ClassificationBucket, UnifiedBooking, VehicleDescriptor
from ridebook.services.booking_classifier import amount_label, classify, filter_by_bucket, status_badge


def booking(status, relevant_date=None, booking_id="1"):
    return UnifiedBooking(
        id=booking_id,
        category=BookingCategory.RENTAL,
        status=status,
        relevant_date=relevant_date,
        vehicle=VehicleDescriptor(make="Unknown", display_name="My Car", image_url="x"),
    )


class TestClassify:
    @pytest.mark.parametrize("status", ["completed", "cancelled"])
    @pytest.mark.parametrize("offset", [timedelta(days=-3), timedelta(days=3), None])
    def test_terminal_status_is_always_past(self, now, status, offset):
        """Completed and cancelled win over any date, including a future one."""
        relevant = now + offset if offset is not None else None
        assert classify(booking(status, relevant), now) is ClassificationBucket.PAST

    @pytest.mark.parametrize("status", ["confirmed", "scheduled", "pending", "in_progress", "on_hold"])
    def test_elapsed_date_is_past(self, now, status):
        assert classify(booking(status, now - timedelta(minutes=1)), now) is ClassificationBucket.PAST

    @pytest.mark.parametrize("offset", [timedelta(0), timedelta(hours=5), None])
    def test_in_progress_is_ongoing(self, now, offset):
        """Relevant date equal to now has not elapsed yet."""
        relevant = now + offset if offset is not None else None
        assert classify(booking("in_progress", relevant), now) is ClassificationBucket.ONGOING

    @pytest.mark.parametrize("status", ["confirmed", "scheduled", "pending"])
    @pytest.mark.parametrize("offset", [timedelta(0), timedelta(days=1), None])
    def test_open_bookings_are_upcoming(self, now, status, offset):
        relevant = now + offset if offset is not None else None
        assert classify(booking(status, relevant), now) is ClassificationBucket.UPCOMING

    def test_naive_now_is_treated_as_utc(self, now):
        naive_now = now.replace(tzinfo=None)
        assert classify(booking("confirmed", now - timedelta(seconds=1)), naive_now) is ClassificationBucket.PAST


class TestFilterByBucket:
    def test_filter_does_not_mutate_input(self, now):
        bookings = [
            booking("in_progress", booking_id="a"),
            booking("completed", booking_id="b"),
            booking("confirmed", now + timedelta(days=2), booking_id="c"),
        ]
        snapshot = list(bookings)

        assert [b.id for b in filter_by_bucket(bookings, ClassificationBucket.ONGOING, now)] == ["a"]
        assert [b.id for b in filter_by_bucket(bookings, ClassificationBucket.PAST, now)] == ["b"]
        assert [b.id for b in filter_by_bucket(bookings, ClassificationBucket.UPCOMING, now)] == ["c"]
        assert bookings == snapshot

    def test_membership_follows_the_clock(self, now):
        """The same booking moves to past once its date elapses."""
        bookings = [booking("confirmed", now + timedelta(hours=1))]
        assert filter_by_bucket(bookings, ClassificationBucket.UPCOMING, now)
        later = now + timedelta(hours=2)
        assert filter_by_bucket(bookings, ClassificationBucket.PAST, later)
        assert not filter_by_bucket(bookings, ClassificationBucket.UPCOMING, later)


class TestDisplayHelpers:
    def test_known_status_badge(self):
        assert status_badge("in_progress") == ("IN PROGRESS", "#1A73E8")

    def test_unknown_status_badge(self):
        assert status_badge("on_hold") == ("ON_HOLD", "#6B7280")

    def test_amount_label(self, now):
        assert amount_label(booking("completed"), now) == "TOTAL PAID"
        assert amount_label(booking("confirmed"), now) == "AMOUNT DUE"
