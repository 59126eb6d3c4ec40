from datetime import datetime, time
from decimal import Decimal

import pytest
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError

from bookandplay.core.config import settings
from bookandplay.core.exceptions import (
    AvailabilityStaleError,
    InvalidSelectionError,
    InvalidTransitionError,
    NotFoundError,
    PartialWriteError,
    PermissionDeniedError,
)
from bookandplay.models import Booking, BookingSlot, Notification, SlotReservation, SpecialOccasion
from bookandplay.services import booking_service
from bookandplay.services.availability import get_available_slots
from bookandplay.services.selection import SlotWindow

from tests.conftest import SATURDAY, TUESDAY
from tests.helpers import add_booking

BEFORE = datetime(2029, 12, 31, 12, 0)


def windows(*starts):
    return [SlotWindow(time(h), time(h + 1)) for h in starts]


def book(db, venue, player, *starts, booking_date=TUESDAY, field_id=None):
    return booking_service.create_booking(
        db, player.id, venue.id, field_id, booking_date, windows(*starts), now=BEFORE
    )


@pytest.fixture
def auto_confirm(monkeypatch):
    monkeypatch.setattr(settings, "AUTO_CONFIRM_BOOKINGS", True)


# ---------------------------------------------------------------------
# SUBMIT
# ---------------------------------------------------------------------
def test_booking_is_created_pending_with_ordered_slots(db, venue, player, owner):
    booking = book(db, venue, player, 8, 7)

    assert booking.status == "pending"
    assert booking.start_time == time(7)
    assert booking.end_time == time(9)
    assert booking.total_slots == 2
    assert booking.total_amount == Decimal("20.00")  # 2 day hours at 10
    assert [(s.slot_start_time, s.slot_order) for s in booking.slots] == [(time(7), 1), (time(8), 2)]
    assert db.query(SlotReservation).count() == 0

    note = db.query(Notification).one()
    assert note.user_id == owner.id
    assert note.title == "New Booking Request"
    assert note.message == "Pat Player requested a booking at Goal Arena for Tue, 01 Jan 2030"


def test_weekend_booking_price(db, venue, player):
    booking = book(db, venue, player, 6, 7, booking_date=SATURDAY)
    assert booking.total_amount == Decimal("100.00")


@pytest.mark.parametrize("starts", [(), (6, 8)])
def test_empty_or_broken_selection_is_rejected(db, venue, player, starts):
    with pytest.raises(InvalidSelectionError):
        book(db, venue, player, *starts)
    assert db.query(Booking).count() == 0


def test_slot_outside_the_grid_is_rejected(db, venue, player):
    with pytest.raises(InvalidSelectionError):
        book(db, venue, player, 8, 9)


def test_past_date_is_rejected(db, venue, player):
    with pytest.raises(InvalidSelectionError):
        booking_service.create_booking(
            db, player.id, venue.id, None, TUESDAY, windows(7), now=datetime(2030, 1, 2, 8)
        )


def test_started_slot_is_rejected(db, venue, player):
    with pytest.raises(InvalidSelectionError):
        booking_service.create_booking(
            db, player.id, venue.id, None, TUESDAY, windows(7), now=datetime(2030, 1, 1, 6, 45)
        )


def test_closed_date_is_rejected(db, venue, player):
    db.add(SpecialOccasion(
        venue_id=venue.id, title="Maintenance", start_date=TUESDAY, end_date=TUESDAY, override_type="closed"
    ))
    db.commit()

    with pytest.raises(InvalidSelectionError, match="Maintenance"):
        book(db, venue, player, 7)


def test_unknown_player(db, venue):
    with pytest.raises(NotFoundError):
        booking_service.create_booking(db, 999, venue.id, None, TUESDAY, windows(7), now=BEFORE)


def test_closed_field_cannot_be_booked(db, field_venue, player):
    pitch = field_venue.fields[0]
    pitch.status = "maintenance"
    db.commit()

    with pytest.raises(NotFoundError):
        book(db, field_venue, player, 7, field_id=pitch.id)


def test_stale_selection_writes_nothing(db, venue, player, other_player):
    add_booking(db, venue, other_player, TUESDAY, [7])

    with pytest.raises(AvailabilityStaleError) as exc:
        book(db, venue, player, 6, 7)

    assert exc.value.retryable
    assert exc.value.message == "Some selected slots are no longer available. Please refresh and try again."
    assert db.query(Booking).count() == 1
    assert db.query(BookingSlot).count() == 1


def test_pending_bookings_do_not_block_each_other(db, venue, player, other_player):
    first = book(db, venue, player, 7)
    second = book(db, venue, other_player, 7)

    assert first.status == second.status == "pending"


def test_auto_confirm_takes_the_slots(db, venue, player, auto_confirm):
    booking = book(db, venue, player, 7, 8)

    assert booking.status == "confirmed"
    assert booking.confirmed_at is not None
    assert db.query(SlotReservation).count() == 2
    assert [s.start_time.hour for s in get_available_slots(db, venue.id, TUESDAY, now=BEFORE)] == [6]

    note = db.query(Notification).one()
    assert note.user_id == player.id
    assert note.title == "Booking Confirmed"


def test_second_auto_confirmed_booking_for_same_hour_fails(db, venue, player, other_player, auto_confirm):
    book(db, venue, player, 7)

    with pytest.raises(AvailabilityStaleError):
        book(db, venue, other_player, 7, 8)

    assert db.query(Booking).count() == 1


def test_reservation_constraint_decides_when_recheck_is_raced(
    db, venue, player, other_player, auto_confirm, monkeypatch
):
    # both submitters passed the re-check before either committed
    book(db, venue, player, 7)
    monkeypatch.setattr(booking_service, "_check_not_occupied", lambda *args, **kwargs: None)

    with pytest.raises(AvailabilityStaleError):
        book(db, venue, other_player, 7)

    assert db.query(Booking).count() == 1
    assert db.query(SlotReservation).count() == 1


def test_slot_write_failure_rolls_back_the_booking(db, venue, player):
    def fail(mapper, connection, target):
        raise SQLAlchemyError("disk full")

    event.listen(BookingSlot, "before_insert", fail)
    try:
        with pytest.raises(PartialWriteError) as exc:
            book(db, venue, player, 7)
    finally:
        event.remove(BookingSlot, "before_insert", fail)

    assert exc.value.retryable
    assert db.query(Booking).count() == 0
    assert db.query(BookingSlot).count() == 0


def test_notification_failure_keeps_the_booking(db, venue, player):
    def fail(mapper, connection, target):
        raise SQLAlchemyError("outbox down")

    event.listen(Notification, "before_insert", fail)
    try:
        booking = book(db, venue, player, 7)
    finally:
        event.remove(Notification, "before_insert", fail)

    assert db.query(Booking).filter(Booking.id == booking.id).count() == 1
    assert db.query(Notification).count() == 0


# ---------------------------------------------------------------------
# LIFECYCLE
# ---------------------------------------------------------------------
def test_owner_confirms_pending_booking(db, venue, player, owner):
    booking = book(db, venue, player, 7)

    confirmed = booking_service.confirm_booking(db, booking.id, owner.id)

    assert confirmed.status == "confirmed"
    assert db.query(SlotReservation).filter(SlotReservation.booking_id == booking.id).count() == 1
    latest = db.query(Notification).order_by(Notification.id.desc()).first()
    assert latest.user_id == player.id
    assert latest.title == "Booking Confirmed"


def test_only_the_owner_can_confirm(db, venue, player):
    booking = book(db, venue, player, 7)

    with pytest.raises(PermissionDeniedError):
        booking_service.confirm_booking(db, booking.id, player.id)


def test_second_confirm_for_same_hour_is_rejected(db, venue, player, other_player, owner):
    first = book(db, venue, player, 7)
    second = book(db, venue, other_player, 7, 8)

    booking_service.confirm_booking(db, first.id, owner.id)

    with pytest.raises(AvailabilityStaleError):
        booking_service.confirm_booking(db, second.id, owner.id)

    assert booking_service.get_booking(db, second.id).status == "pending"


def test_cancel_frees_the_hours_for_another_confirm(db, venue, player, other_player, owner):
    first = book(db, venue, player, 7)
    second = book(db, venue, other_player, 7)
    booking_service.confirm_booking(db, first.id, owner.id)

    booking_service.cancel_booking(db, first.id, player.id)
    confirmed = booking_service.confirm_booking(db, second.id, owner.id)

    assert confirmed.status == "confirmed"
    assert db.query(SlotReservation).count() == 1


def test_owner_cancel_notifies_player_with_reason(db, venue, player, owner):
    booking = book(db, venue, player, 7)

    cancelled = booking_service.cancel_booking(db, booking.id, owner.id, "  Pitch flooded ")

    assert cancelled.status == "cancelled"
    assert cancelled.cancelled_by == owner.id
    assert cancelled.cancellation_reason == "Pitch flooded"
    latest = db.query(Notification).order_by(Notification.id.desc()).first()
    assert latest.user_id == player.id
    assert latest.message.endswith("Reason: Pitch flooded")


def test_player_cancel_notifies_owner(db, venue, player, owner):
    booking = book(db, venue, player, 7)

    booking_service.cancel_booking(db, booking.id, player.id)

    latest = db.query(Notification).order_by(Notification.id.desc()).first()
    assert latest.user_id == owner.id
    assert latest.title == "Booking Cancelled"


def test_strangers_cannot_cancel(db, venue, player, other_player):
    booking = book(db, venue, player, 7)

    with pytest.raises(PermissionDeniedError):
        booking_service.cancel_booking(db, booking.id, other_player.id)


def test_terminal_states_do_not_move(db, venue, player, owner):
    booking = book(db, venue, player, 7)

    with pytest.raises(InvalidTransitionError):
        booking_service.complete_booking(db, booking.id, owner.id)

    booking_service.confirm_booking(db, booking.id, owner.id)
    completed = booking_service.complete_booking(db, booking.id, owner.id)
    assert completed.status == "completed"
    assert completed.completed_at is not None
    assert db.query(SlotReservation).count() == 0

    with pytest.raises(InvalidTransitionError):
        booking_service.cancel_booking(db, booking.id, player.id)


# ---------------------------------------------------------------------
# PRICING CHECKS
# ---------------------------------------------------------------------
def test_quote_matches_submitted_amount(db, venue, player):
    quoted = booking_service.quote_price(db, venue.id, SATURDAY, windows(6, 7))
    booking = book(db, venue, player, 6, 7, booking_date=SATURDAY)

    assert quoted == booking.total_amount == Decimal("100.00")
    assert booking_service.amount_matches(db, booking)


@pytest.mark.parametrize(
    "selection",
    [
        [SlotWindow(time(6), time(8))],  # two hours in one window
        [SlotWindow(time(1), time(2))],  # before opening
    ],
)
def test_quote_rejects_windows_that_are_not_grid_hours(db, venue, selection):
    with pytest.raises(InvalidSelectionError):
        booking_service.quote_price(db, venue.id, TUESDAY, selection, now=BEFORE)


def test_quote_rejects_past_dates(db, venue):
    with pytest.raises(InvalidSelectionError):
        booking_service.quote_price(db, venue.id, TUESDAY, windows(7), now=datetime(2030, 1, 2, 9))


def test_amount_check_uses_given_recomputed_value(db, venue, player):
    booking = book(db, venue, player, 7)

    assert booking_service.amount_matches(db, booking, Decimal("10.00"))
    assert not booking_service.amount_matches(db, booking, Decimal("999.00"))


def test_custom_pricing_occasion_is_charged(db, venue, player):
    db.add(SpecialOccasion(
        venue_id=venue.id, title="Cup final", start_date=TUESDAY, end_date=TUESDAY,
        override_type="custom_pricing", custom_day_charges=Decimal("25"), custom_night_charges=Decimal("40"),
    ))
    db.commit()

    booking = book(db, venue, player, 7)
    assert booking.total_amount == Decimal("25.00")
    assert booking_service.recompute_amount(db, booking) == Decimal("25.00")


def test_recompute_detects_tariff_drift(db, venue, player):
    booking = book(db, venue, player, 7)

    venue.day_charges = Decimal("15")
    db.commit()

    assert booking_service.recompute_amount(db, booking) == Decimal("15.00")
    assert not booking_service.amount_matches(db, booking)


# ---------------------------------------------------------------------
# LISTINGS
# ---------------------------------------------------------------------
def test_listings(db, venue, player, other_player, owner):
    mine = book(db, venue, player, 6)
    book(db, venue, other_player, 7)

    assert [b.id for b in booking_service.list_player_bookings(db, player.id)] == [mine.id]
    assert len(booking_service.list_venue_bookings(db, venue.id, owner.id)) == 2
    assert booking_service.list_venue_bookings(db, venue.id, owner.id, status="confirmed") == []

    with pytest.raises(PermissionDeniedError):
        booking_service.list_venue_bookings(db, venue.id, player.id)
