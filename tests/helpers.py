from datetime import time

from bookandplay.models import Booking, BookingSlot


def hours(*starts):
    return [(time(h), time(h + 1)) for h in starts]


def add_booking(db, venue, player, booking_date, starts, status="confirmed", field_id=None):
    """Store a booking directly, bypassing the submit checks."""
    windows = hours(*starts)
    booking = Booking(
        player_id=player.id,
        venue_id=venue.id,
        field_id=field_id,
        booking_date=booking_date,
        start_time=windows[0][0],
        end_time=windows[-1][1],
        total_slots=len(windows),
        total_amount=0,
        status=status,
    )
    for order, (start, end) in enumerate(windows, start=1):
        booking.slots.append(BookingSlot(slot_start_time=start, slot_end_time=end, slot_order=order))

    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking
