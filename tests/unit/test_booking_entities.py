"""Unit tests for booking entity and its status transition table."""

import pytest
from datetime import datetime, timedelta
from uuid import uuid4

from src.car_rental.domain.entities.booking import (
    ALLOWED_TRANSITIONS,
    Booking,
    BookingStatus,
    TERMINAL_STATUSES,
    TransitionActor
)
from src.car_rental.domain.exceptions import InvalidOperationError
from src.car_rental.domain.value_objects.rental_period import RentalPeriod

START = datetime(2030, 6, 10, 9, 0)
BEFORE_START = START - timedelta(days=1)


def make_booking(status: BookingStatus = BookingStatus.PENDING, user_id=None) -> Booking:
    return Booking(
        user_id=user_id or uuid4(),
        car_id=uuid4(),
        period=RentalPeriod(start=START, end=START + timedelta(days=2)),
        status=status
    )


class TestBooking:
    """Test cases for Booking entity."""

    def test_booking_creation(self):
        """Test that a new booking starts out pending and active."""
        user_id = uuid4()
        booking = make_booking(user_id=user_id)

        assert booking.status == BookingStatus.PENDING
        assert booking.is_active()
        assert booking.is_owned_by(user_id)
        assert not booking.is_owned_by(uuid4())
        assert booking.start_date == START
        assert booking.total_days == 2

    def test_total_price(self):
        assert make_booking().total_price(45.5) == 91.0

    def test_equality_is_by_id(self):
        booking = make_booking()
        same = Booking(
            user_id=uuid4(),
            car_id=uuid4(),
            period=booking.period,
            booking_id=booking.id
        )

        assert booking == same
        assert hash(booking) == hash(same)
        assert booking != make_booking()


class TestBookingTransitions:
    """Test cases for the booking status transition table."""

    def test_terminal_statuses_have_no_transitions(self):
        for status in TERMINAL_STATUSES:
            assert ALLOWED_TRANSITIONS[status] == {}

    def test_approve_pending_booking(self):
        booking = make_booking()

        booking.approve()

        assert booking.status == BookingStatus.CONFIRMED
        assert booking.is_active()

    @pytest.mark.parametrize("status,message", [
        (BookingStatus.CONFIRMED, "Booking is already confirmed"),
        (BookingStatus.CANCELLED, "Cannot approve a cancelled booking"),
        (BookingStatus.COMPLETED, "Booking is already completed"),
    ])
    def test_approve_rejected(self, status, message):
        booking = make_booking(status)

        with pytest.raises(InvalidOperationError, match=message):
            booking.approve()

        assert booking.status == status

    @pytest.mark.parametrize("status", [BookingStatus.PENDING, BookingStatus.CONFIRMED])
    def test_cancel_before_start(self, status):
        booking = make_booking(status)

        booking.cancel(now=BEFORE_START)

        assert booking.status == BookingStatus.CANCELLED
        assert not booking.is_active()

    @pytest.mark.parametrize("status,message", [
        (BookingStatus.CANCELLED, "Booking is already cancelled"),
        (BookingStatus.COMPLETED, "Cannot cancel a completed booking"),
    ])
    def test_cancel_terminal_rejected(self, status, message):
        with pytest.raises(InvalidOperationError, match=message):
            make_booking(status).cancel(now=BEFORE_START)

    def test_cancel_after_start_rejected(self):
        """Test that a pending booking cannot be cancelled once its period has begun."""
        booking = make_booking()

        with pytest.raises(InvalidOperationError, match="Cannot cancel a booking that has already started"):
            booking.cancel(now=START + timedelta(minutes=1))

        assert booking.status == BookingStatus.PENDING

    def test_owner_cannot_confirm(self):
        booking = make_booking()

        assert not booking.can_transition_to(BookingStatus.CONFIRMED, TransitionActor.OWNER)
        with pytest.raises(InvalidOperationError, match="Only the admin"):
            booking.transition_to(BookingStatus.CONFIRMED, TransitionActor.OWNER)

    def test_admin_cannot_cancel(self):
        booking = make_booking()

        assert booking.can_transition_to(BookingStatus.CANCELLED, TransitionActor.OWNER)
        assert not booking.can_transition_to(BookingStatus.CANCELLED, TransitionActor.ADMIN)

    def test_nothing_transitions_to_completed(self):
        """Test that COMPLETED is never reachable through the table."""
        for targets in ALLOWED_TRANSITIONS.values():
            assert BookingStatus.COMPLETED not in targets

    def test_transition_updates_timestamp(self):
        booking = make_booking()
        before = booking.updated_at

        booking.cancel(now=BEFORE_START)

        assert booking.updated_at >= before
