"""
Availability resolution.

Only confirmed bookings consume capacity. A booking made for a field also
blocks the venue-level grid for that hour, and a venue-level booking blocks
every field, so a field-less selection never double-sells a pitch.
"""

from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from bookandplay.core.config import settings
from bookandplay.core.exceptions import InvalidSelectionError, NotFoundError
from bookandplay.core.logging_config import get_logger
from bookandplay.core.redis import availability_key, get_cache_many, set_cache
from bookandplay.models.booking import Booking
from bookandplay.models.booking_slot import BookingSlot
from bookandplay.models.enums import AvailabilityStatus, BookingStatus
from bookandplay.models.time_slot import TimeSlot
from bookandplay.models.venue import Venue
from bookandplay.models.venue_field import VenueField
from bookandplay.services.slot_grid import ensure_time_slots_exist
from bookandplay.services.special_occasions import occasions_for_range, resolve_override
from bookandplay.utils.timeutils import day_of_week, daterange

logger = get_logger()

MAX_CALENDAR_DAYS = 366


# ---------------------------------------------------------------------
# LOOKUPS
# ---------------------------------------------------------------------
def get_bookable_venue(db: Session, venue_id: int) -> Venue:
    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if not venue or not venue.is_approved:
        raise NotFoundError("Venue not found")
    return venue


def get_venue_field(db: Session, venue: Venue, field_id: int | None) -> VenueField | None:
    if not field_id:
        return None

    field = db.query(VenueField).filter(
        VenueField.id == field_id,
        VenueField.venue_id == venue.id,
    ).first()
    if not field:
        raise NotFoundError("Field not found")
    return field


def grid_slots(db: Session, venue: Venue, field: VenueField | None, dow: int) -> list[TimeSlot]:
    """Active grid for one weekday; field grids fall back to the venue grid."""
    if not venue.is_open:
        return []
    if field is not None and not field.is_open:
        return []

    q = db.query(TimeSlot).filter(
        TimeSlot.venue_id == venue.id,
        TimeSlot.day_of_week == dow,
        TimeSlot.is_active == True,
    )

    if field is not None:
        slots = q.filter(TimeSlot.field_id == field.id).order_by(TimeSlot.start_time.asc()).all()
        if slots:
            return slots

    return q.filter(TimeSlot.field_id.is_(None)).order_by(TimeSlot.start_time.asc()).all()


def apply_custom_hours(slots, custom_hours):
    if not custom_hours:
        return slots
    opening, closing = custom_hours
    return [s for s in slots if s.start_time >= opening and s.end_time <= closing]


def confirmed_slot_rows(db: Session, venue_id: int, start: date, end: date, field_id: int | None = None):
    """(booking_date, start, end) of every hour held by a confirmed booking."""
    q = (
        db.query(Booking.booking_date, BookingSlot.slot_start_time, BookingSlot.slot_end_time)
        .join(BookingSlot, BookingSlot.booking_id == Booking.id)
        .filter(
            Booking.venue_id == venue_id,
            Booking.status == BookingStatus.CONFIRMED.value,
            Booking.booking_date >= start,
            Booking.booking_date <= end,
        )
    )

    if field_id:
        q = q.filter((Booking.field_id == field_id) | (Booking.field_id.is_(None)))

    return q.all()


def occupied_pairs(db: Session, venue_id: int, target: date, field_id: int | None = None) -> set:
    return {
        (row.slot_start_time, row.slot_end_time)
        for row in confirmed_slot_rows(db, venue_id, target, target, field_id)
    }


def is_past_for_today(slot, target: date, now: datetime) -> bool:
    if target != now.date():
        return False
    cutoff = now + timedelta(minutes=settings.SAME_DAY_BUFFER_MINUTES)
    return datetime.combine(target, slot.start_time) <= cutoff


# ---------------------------------------------------------------------
# CONTRACT B: FREE SLOTS FOR ONE DATE
# ---------------------------------------------------------------------
def get_available_slots(
    db: Session,
    venue_id: int,
    target: date,
    field_id: int | None = None,
    now: datetime | None = None,
) -> list[TimeSlot]:
    now = now or datetime.now()

    venue = get_bookable_venue(db, venue_id)
    field = get_venue_field(db, venue, field_id)

    # past dates can never be booked
    if target < now.date():
        return []

    ensure_time_slots_exist(db, venue.id)

    override = resolve_override(
        occasions_for_range(db, venue.id, target, target, field_id), target
    )
    if override.closed:
        logger.info(f"Venue {venue.id} closed on {target}: {override.reason}")
        return []

    slots = apply_custom_hours(grid_slots(db, venue, field, day_of_week(target)), override.custom_hours)
    if not slots:
        return []

    booked = occupied_pairs(db, venue.id, target, field_id)

    available = [
        s for s in slots
        if (s.start_time, s.end_time) not in booked and not is_past_for_today(s, target, now)
    ]
    available.sort(key=lambda s: s.start_time)
    return available


# ---------------------------------------------------------------------
# CONTRACT A: CALENDAR SUMMARY
# ---------------------------------------------------------------------
def classify(booked_count: int, total_count: int) -> str:
    if total_count == 0 or booked_count >= total_count:
        return AvailabilityStatus.UNAVAILABLE.value
    if booked_count == 0:
        return AvailabilityStatus.AVAILABLE.value
    return AvailabilityStatus.LIMITED.value


def get_venue_availability(
    db: Session,
    venue_id: int,
    start_date: date,
    end_date: date,
    field_id: int | None = None,
    now: datetime | None = None,
) -> dict[str, str]:
    """
    Per-date status for [start_date, end_date]. Dates before today are
    always "unavailable"; today is classified on its whole grid, the
    same-day cut-off only applies to get_available_slots.
    """
    if end_date < start_date:
        raise InvalidSelectionError("End date cannot be before start date")
    if (end_date - start_date).days >= MAX_CALENDAR_DAYS:
        raise InvalidSelectionError(f"Date range cannot exceed {MAX_CALENDAR_DAYS} days")

    venue = get_bookable_venue(db, venue_id)
    field = get_venue_field(db, venue, field_id)

    ensure_time_slots_exist(db, venue.id)

    occasions = occasions_for_range(db, venue.id, start_date, end_date, field_id)

    booked_by_date = {}
    for row in confirmed_slot_rows(db, venue.id, start_date, end_date, field_id):
        booked_by_date.setdefault(row.booking_date, set()).add(
            (row.slot_start_time, row.slot_end_time)
        )

    today = (now or datetime.now()).date()
    dates = list(daterange(start_date, end_date))
    upcoming = [d for d in dates if d >= today]

    # one round-trip for the whole range
    keys = {d: availability_key(venue.id, field_id, d) for d in upcoming}
    cached_by_date = dict(zip(upcoming, get_cache_many([keys[d] for d in upcoming])))

    grid_by_dow = {}
    result = {}

    for d in dates:
        if d < today:
            result[d.isoformat()] = AvailabilityStatus.UNAVAILABLE.value
            continue

        cached = cached_by_date.get(d)
        if cached:
            result[d.isoformat()] = cached
            continue

        key = keys[d]
        override = resolve_override(occasions, d)
        if override.closed:
            status = AvailabilityStatus.UNAVAILABLE.value
        else:
            dow = day_of_week(d)
            if dow not in grid_by_dow:
                grid_by_dow[dow] = grid_slots(db, venue, field, dow)

            slots = apply_custom_hours(grid_by_dow[dow], override.custom_hours)
            pairs = {(s.start_time, s.end_time) for s in slots}
            booked = booked_by_date.get(d, set()) & pairs
            status = classify(len(booked), len(pairs))

        result[d.isoformat()] = status
        set_cache(key, status, ttl=settings.AVAILABILITY_CACHE_TTL_SECONDS)

    return result
