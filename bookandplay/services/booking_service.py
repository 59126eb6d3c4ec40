"""
Booking submission and lifecycle.

Submission re-reads confirmed bookings inside the write transaction (the
client's availability snapshot may be stale) and writes the booking with all
of its slot rows or nothing. Confirmation takes one SlotReservation per hour;
the unique constraint on reservations is the final arbiter between two
owners/players racing for the same hour.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from bookandplay.core.config import settings
from bookandplay.core.exceptions import (
    AvailabilityStaleError,
    InvalidSelectionError,
    InvalidTransitionError,
    NotFoundError,
    PartialWriteError,
    PermissionDeniedError,
    StorageUnavailableError,
)
from bookandplay.core.logging_config import get_logger
from bookandplay.core.redis import invalidate_venue_availability
from bookandplay.models.booking import Booking
from bookandplay.models.booking_slot import BookingSlot
from bookandplay.models.enums import BOOKING_TRANSITIONS, BookingStatus
from bookandplay.models.slot_reservation import SlotReservation
from bookandplay.models.user import User
from bookandplay.models.venue import Venue
from bookandplay.services import notifications
from bookandplay.services.availability import (
    apply_custom_hours,
    get_bookable_venue,
    get_venue_field,
    grid_slots,
    is_past_for_today,
    occupied_pairs,
)
from bookandplay.services.selection import SlotWindow, contiguous_run, slot_key
from bookandplay.services.slot_grid import ensure_time_slots_exist
from bookandplay.services.special_occasions import date_override
from bookandplay.utils.pricing import calculate_booking_price, to_decimal
from bookandplay.utils.timeutils import day_of_week

logger = get_logger()


# ---------------------------------------------------------------------
# SELECTION VALIDATION
# ---------------------------------------------------------------------
def _normalize_selection(selected_slots) -> list[SlotWindow]:
    windows = [SlotWindow(s.start_time, s.end_time) for s in selected_slots]
    if not windows:
        raise InvalidSelectionError("Please select at least one time slot")

    run = contiguous_run(windows)
    if len(run) != len(windows):
        raise InvalidSelectionError("Selected time slots must be consecutive")
    return run


def _validate_against_grid(db: Session, venue, field, booking_date: date, windows, now: datetime):
    """Every window must be an hour of the venue/field grid for that date."""
    if booking_date < now.date():
        raise InvalidSelectionError("Cannot book past dates")

    override = date_override(db, venue.id, booking_date, field.id if field else None)
    if override.closed:
        raise InvalidSelectionError(
            f"Venue is closed on this date{': ' + override.reason if override.reason else ''}"
        )

    slots = apply_custom_hours(
        grid_slots(db, venue, field, day_of_week(booking_date)), override.custom_hours
    )
    grid = {slot_key(s) for s in slots}

    for w in windows:
        if slot_key(w) not in grid:
            raise InvalidSelectionError(
                f"{w.start_time:%H:%M}-{w.end_time:%H:%M} is not a bookable slot for this date"
            )
        if is_past_for_today(w, booking_date, now):
            raise InvalidSelectionError(
                f"{w.start_time:%H:%M}-{w.end_time:%H:%M} has already started"
            )

    return override


def _load_venue_for_write(db: Session, venue_id: int) -> Venue:
    # row lock serializes writers per venue on PostgreSQL
    venue = (
        db.query(Venue)
        .filter(Venue.id == venue_id)
        .with_for_update()
        .first()
    )
    if not venue:
        raise NotFoundError("Venue not found")
    return venue


def _check_not_occupied(db: Session, venue_id: int, booking_date: date, field_id, windows):
    booked = occupied_pairs(db, venue_id, booking_date, field_id)
    conflicts = [w for w in windows if slot_key(w) in booked]
    if conflicts:
        raise AvailabilityStaleError()


def _reserve(db: Session, booking: Booking):
    for s in booking.slots:
        db.add(SlotReservation(
            booking_id=booking.id,
            venue_id=booking.venue_id,
            field_key=booking.field_id or 0,
            booking_date=booking.booking_date,
            slot_start_time=s.slot_start_time,
        ))
    db.flush()


def _release(db: Session, booking: Booking):
    db.query(SlotReservation).filter(SlotReservation.booking_id == booking.id).delete()


# ---------------------------------------------------------------------
# PRICING
# ---------------------------------------------------------------------
def quote_price(
    db: Session,
    venue_id: int,
    booking_date: date,
    selected_slots,
    field_id: int | None = None,
    now: datetime | None = None,
) -> Decimal:
    """Price a selection the way create_booking would, without writing anything."""
    windows = _normalize_selection(selected_slots)

    venue = get_bookable_venue(db, venue_id)
    field = get_venue_field(db, venue, field_id)

    ensure_time_slots_exist(db, venue.id)

    override = _validate_against_grid(db, venue, field, booking_date, windows, now or datetime.now())
    return calculate_booking_price(venue, booking_date, windows, override.custom_pricing)


def recompute_amount(db: Session, booking: Booking) -> Decimal:
    """Price of a stored booking from its slot rows and the venue tariff."""
    venue = db.query(Venue).filter(Venue.id == booking.venue_id).first()
    windows = [SlotWindow(s.slot_start_time, s.slot_end_time) for s in booking.slots]
    override = date_override(db, booking.venue_id, booking.booking_date, booking.field_id)
    return calculate_booking_price(venue, booking.booking_date, windows, override.custom_pricing)


# ---------------------------------------------------------------------
# SUBMIT
# ---------------------------------------------------------------------
def create_booking(
    db: Session,
    player_id: int,
    venue_id: int,
    field_id: int | None,
    booking_date: date,
    selected_slots,
    notes: str | None = None,
    now: datetime | None = None,
) -> Booking:
    now = now or datetime.now()
    log = logger.bind(log_type="booking")

    windows = _normalize_selection(selected_slots)

    player = db.query(User).filter(User.id == player_id, User.is_active == True).first()
    if not player:
        raise NotFoundError("Player not found")

    venue = get_bookable_venue(db, venue_id)
    if not venue.is_open:
        raise NotFoundError("Venue is closed")

    field = get_venue_field(db, venue, field_id)
    if field is not None and not field.is_open:
        raise NotFoundError("Field is closed")

    ensure_time_slots_exist(db, venue.id)

    auto_confirm = settings.AUTO_CONFIRM_BOOKINGS

    try:
        _load_venue_for_write(db, venue.id)

        override = _validate_against_grid(db, venue, field, booking_date, windows, now)
        _check_not_occupied(db, venue.id, booking_date, field_id, windows)

        total_amount = calculate_booking_price(venue, booking_date, windows, override.custom_pricing)

        booking = Booking(
            player_id=player.id,
            venue_id=venue.id,
            field_id=field_id,
            booking_date=booking_date,
            start_time=windows[0].start_time,
            end_time=windows[-1].end_time,
            total_slots=len(windows),
            total_amount=total_amount,
            status=(BookingStatus.CONFIRMED if auto_confirm else BookingStatus.PENDING).value,
            confirmed_at=now if auto_confirm else None,
            notes=notes,
        )
        db.add(booking)
        db.flush()

        try:
            for order, w in enumerate(windows, start=1):
                booking.slots.append(BookingSlot(
                    slot_start_time=w.start_time,
                    slot_end_time=w.end_time,
                    slot_order=order,
                ))
            db.flush()
        except (IntegrityError, OperationalError):
            raise
        except SQLAlchemyError as e:
            db.rollback()
            log.error(f"Booking slots not written, booking rolled back | venue={venue.id} -> {e}")
            raise PartialWriteError()

        if auto_confirm:
            _reserve(db, booking)

        db.commit()

    except IntegrityError:
        db.rollback()
        log.warning(
            f"Booking conflict | player={player_id} venue={venue_id} "
            f"field={field_id} date={booking_date}"
        )
        raise AvailabilityStaleError()
    except AvailabilityStaleError:
        db.rollback()
        log.warning(
            f"Stale selection | player={player_id} venue={venue_id} "
            f"field={field_id} date={booking_date}"
        )
        raise
    except OperationalError as e:
        db.rollback()
        log.error(f"Booking storage unavailable -> {e}")
        raise StorageUnavailableError()
    except SQLAlchemyError as e:
        db.rollback()
        log.error(f"Booking write failed -> {e}")
        raise PartialWriteError()
    except Exception:
        db.rollback()
        raise

    db.refresh(booking)

    log.info(
        f"Booking Created | id={booking.id} player={player.id} venue={venue.id} "
        f"date={booking.booking_date} {booking.start_time}-{booking.end_time} "
        f"amount={booking.total_amount} status={booking.status}"
    )

    if auto_confirm:
        invalidate_venue_availability(venue.id)
        notifications.dispatch(db, notifications.booking_confirmed(booking, venue))
    else:
        notifications.dispatch(db, notifications.booking_pending(booking, venue, player))

    return booking


# ---------------------------------------------------------------------
# LIFECYCLE
# ---------------------------------------------------------------------
def get_booking(db: Session, booking_id: int) -> Booking:
    booking = (
        db.query(Booking)
        .options(selectinload(Booking.slots))
        .filter(Booking.id == booking_id)
        .first()
    )
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def _transition(booking: Booking, target: BookingStatus):
    current = BookingStatus(booking.status)
    if target not in BOOKING_TRANSITIONS[current]:
        raise InvalidTransitionError(
            f"Booking is {current.value} and cannot become {target.value}"
        )
    booking.status = target.value


def _owned_booking(db: Session, booking_id: int, owner_id: int):
    booking = get_booking(db, booking_id)
    venue = db.query(Venue).filter(Venue.id == booking.venue_id).first()
    if venue.owner_id != owner_id:
        raise PermissionDeniedError("You do not own this venue")
    return booking, venue


def confirm_booking(db: Session, booking_id: int, owner_id: int) -> Booking:
    log = logger.bind(log_type="booking")
    booking, venue = _owned_booking(db, booking_id, owner_id)

    try:
        _load_venue_for_write(db, venue.id)
        _transition(booking, BookingStatus.CONFIRMED)

        windows = [SlotWindow(s.slot_start_time, s.slot_end_time) for s in booking.slots]
        _check_not_occupied(db, venue.id, booking.booking_date, booking.field_id, windows)

        booking.confirmed_at = datetime.utcnow()
        _reserve(db, booking)
        db.commit()

    except (IntegrityError, AvailabilityStaleError):
        db.rollback()
        log.warning(f"Confirm conflict | booking={booking_id} venue={venue.id}")
        raise AvailabilityStaleError(
            "These slots were already confirmed for another booking"
        )
    except OperationalError as e:
        db.rollback()
        log.error(f"Confirm storage unavailable -> {e}")
        raise StorageUnavailableError()
    except Exception:
        db.rollback()
        raise

    db.refresh(booking)
    invalidate_venue_availability(venue.id)
    log.info(f"Booking Confirmed | id={booking.id} owner={owner_id}")

    notifications.dispatch(db, notifications.booking_confirmed(booking, venue))
    return booking


def cancel_booking(db: Session, booking_id: int, actor_id: int, reason: str | None = None) -> Booking:
    log = logger.bind(log_type="booking")
    booking = get_booking(db, booking_id)
    venue = db.query(Venue).filter(Venue.id == booking.venue_id).first()

    is_owner = venue.owner_id == actor_id
    if not is_owner and booking.player_id != actor_id:
        raise PermissionDeniedError("You cannot cancel this booking")

    reason = (reason or "").strip() or None

    try:
        _transition(booking, BookingStatus.CANCELLED)
        booking.cancelled_at = datetime.utcnow()
        booking.cancelled_by = actor_id
        booking.cancellation_reason = reason
        _release(db, booking)
        db.commit()
    except OperationalError as e:
        db.rollback()
        log.error(f"Cancel storage unavailable -> {e}")
        raise StorageUnavailableError()
    except Exception:
        db.rollback()
        raise

    db.refresh(booking)
    invalidate_venue_availability(venue.id)
    log.info(f"Booking Cancelled | id={booking.id} by={actor_id} reason={reason}")

    if is_owner:
        notifications.dispatch(db, notifications.booking_cancelled(booking, venue, reason))
    else:
        notifications.dispatch(db, notifications.booking_cancelled_by_player(booking, venue, booking.player))

    return booking


def complete_booking(db: Session, booking_id: int, owner_id: int) -> Booking:
    booking, venue = _owned_booking(db, booking_id, owner_id)

    try:
        _transition(booking, BookingStatus.COMPLETED)
        booking.completed_at = datetime.utcnow()
        _release(db, booking)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(booking)
    invalidate_venue_availability(venue.id)
    logger.bind(log_type="booking").info(f"Booking Completed | id={booking.id}")
    return booking


# ---------------------------------------------------------------------
# LISTINGS
# ---------------------------------------------------------------------
def list_player_bookings(db: Session, player_id: int, status: str | None = None):
    q = (
        db.query(Booking)
        .options(selectinload(Booking.slots))
        .filter(Booking.player_id == player_id)
    )
    if status:
        q = q.filter(Booking.status == status)
    return q.order_by(Booking.booking_date.desc(), Booking.start_time.desc()).all()


def list_venue_bookings(db: Session, venue_id: int, owner_id: int, status: str | None = None):
    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if not venue:
        raise NotFoundError("Venue not found")
    if venue.owner_id != owner_id:
        raise PermissionDeniedError("You do not own this venue")

    q = (
        db.query(Booking)
        .options(selectinload(Booking.slots))
        .filter(Booking.venue_id == venue_id)
    )
    if status:
        q = q.filter(Booking.status == status)
    return q.order_by(Booking.booking_date.desc(), Booking.start_time.asc()).all()


def amount_matches(db: Session, booking: Booking, recomputed: Decimal | None = None) -> bool:
    if recomputed is None:
        recomputed = recompute_amount(db, booking)

    matches = to_decimal(booking.total_amount) == recomputed
    if not matches:
        logger.bind(log_type="booking").warning(
            f"Amount drift | booking={booking.id} stored={booking.total_amount} recomputed={recomputed}"
        )
    return matches
