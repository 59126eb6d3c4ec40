from datetime import time

from bookandplay.models import Booking, User, Venue, VenueField
from bookandplay.models.enums import (
    ApprovalStatus,
    AvailabilityStatus,
    BookingStatus,
    FieldStatus,
    UserType,
    VenueStatus,
)
from bookandplay.services.availability import classify

from tests.conftest import TUESDAY


def test_column_defaults_come_from_the_enums(db, owner):
    user = User(name="Nia", email="nia@example.com")
    venue = Venue(
        owner_id=owner.id, name="Side Court", location="Model Town", city="Lahore",
        opening_time=time(8), closing_time=time(10), days_available=[1],
    )
    db.add_all([user, venue])
    db.flush()
    field = VenueField(venue_id=venue.id, field_name="Court 1")
    db.add(field)
    db.commit()

    assert user.user_type == UserType.PLAYER
    assert venue.status == VenueStatus.OPEN
    assert venue.approval_status == ApprovalStatus.PENDING
    assert field.status == FieldStatus.OPEN
    assert venue.is_open and not venue.is_approved


def test_new_booking_starts_pending(db, venue, player):
    booking = Booking(
        player_id=player.id, venue_id=venue.id, booking_date=TUESDAY,
        start_time=time(6), end_time=time(7), total_slots=1, total_amount=10,
    )
    db.add(booking)
    db.commit()

    assert booking.status == BookingStatus.PENDING


def test_classify_speaks_the_availability_enum():
    assert classify(0, 3) == AvailabilityStatus.AVAILABLE
    assert classify(1, 3) == AvailabilityStatus.LIMITED
    assert classify(3, 3) == AvailabilityStatus.UNAVAILABLE
