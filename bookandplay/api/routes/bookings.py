from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookandplay.db.session import get_db
from bookandplay.schemas.booking import (
    AmountCheckOut,
    BookingAction,
    BookingCreate,
    BookingOut,
    PriceQuote,
    PriceQuoteOut,
)
from bookandplay.services import booking_service

router = APIRouter(prefix="/bookings", tags=["Bookings"])


# ---------------------------------------------------------------------
# CREATE BOOKING
# ---------------------------------------------------------------------
@router.post("/", response_model=BookingOut)
def create_booking(data: BookingCreate, db: Session = Depends(get_db)):
    return booking_service.create_booking(
        db,
        player_id=data.player_id,
        venue_id=data.venue_id,
        field_id=data.field_id,
        booking_date=data.booking_date,
        selected_slots=data.slots,
        notes=data.notes,
    )


# ---------------------------------------------------------------------
# PRICE QUOTE (nothing is written)
# ---------------------------------------------------------------------
@router.post("/quote", response_model=PriceQuoteOut)
def quote(data: PriceQuote, db: Session = Depends(get_db)):
    amount = booking_service.quote_price(
        db, data.venue_id, data.booking_date, data.slots, data.field_id
    )
    return PriceQuoteOut(
        venue_id=data.venue_id,
        field_id=data.field_id,
        booking_date=data.booking_date,
        total_slots=len(data.slots),
        total_amount=amount,
    )


# ---------------------------------------------------------------------
# PLAYER - MY BOOKINGS
# ---------------------------------------------------------------------
@router.get("/my", response_model=list[BookingOut])
def my_bookings(player_id: int, status: str | None = None, db: Session = Depends(get_db)):
    return booking_service.list_player_bookings(db, player_id, status)


# ---------------------------------------------------------------------
# OWNER - BOOKINGS OF OWN VENUE
# ---------------------------------------------------------------------
@router.get("/venue/{venue_id}", response_model=list[BookingOut])
def venue_bookings(
    venue_id: int,
    owner_id: int = Query(...),
    status: str | None = None,
    db: Session = Depends(get_db),
):
    return booking_service.list_venue_bookings(db, venue_id, owner_id, status)


# ---------------------------------------------------------------------
# BOOKING DETAILS
# ---------------------------------------------------------------------
@router.get("/{booking_id}", response_model=BookingOut)
def get_booking(booking_id: int, db: Session = Depends(get_db)):
    return booking_service.get_booking(db, booking_id)


@router.get("/{booking_id}/verify-amount", response_model=AmountCheckOut)
def verify_amount(booking_id: int, db: Session = Depends(get_db)):
    booking = booking_service.get_booking(db, booking_id)
    recomputed = booking_service.recompute_amount(db, booking)

    return AmountCheckOut(
        booking_id=booking.id,
        stored_amount=booking.total_amount,
        recomputed_amount=recomputed,
        matches=booking_service.amount_matches(db, booking, recomputed),
    )


# ---------------------------------------------------------------------
# STATUS TRANSITIONS
# ---------------------------------------------------------------------
@router.post("/{booking_id}/confirm", response_model=BookingOut)
def confirm_booking(booking_id: int, data: BookingAction, db: Session = Depends(get_db)):
    return booking_service.confirm_booking(db, booking_id, data.actor_id)


@router.post("/{booking_id}/cancel", response_model=BookingOut)
def cancel_booking(booking_id: int, data: BookingAction, db: Session = Depends(get_db)):
    return booking_service.cancel_booking(db, booking_id, data.actor_id, data.reason)


@router.post("/{booking_id}/complete", response_model=BookingOut)
def complete_booking(booking_id: int, data: BookingAction, db: Session = Depends(get_db)):
    return booking_service.complete_booking(db, booking_id, data.actor_id)
