from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookandplay.db.session import get_db
from bookandplay.schemas.slot import (
    AvailableSlotsOut,
    SelectionOut,
    SelectionToggle,
    SlotWindowIn,
    VenueAvailabilityOut,
)
from bookandplay.services.availability import get_available_slots, get_venue_availability
from bookandplay.services.selection import SlotSelection

router = APIRouter(tags=["Availability"])


# =====================================================================
# CALENDAR: PER-DAY STATUS
# =====================================================================
@router.get("/venues/{venue_id}/availability", response_model=VenueAvailabilityOut)
def venue_availability(
    venue_id: int,
    start_date: date,
    end_date: date,
    field_id: int | None = None,
    db: Session = Depends(get_db),
):
    availability = get_venue_availability(db, venue_id, start_date, end_date, field_id)

    return VenueAvailabilityOut(
        venue_id=venue_id,
        field_id=field_id,
        start_date=start_date,
        end_date=end_date,
        availability=availability,
    )


# =====================================================================
# FREE SLOTS FOR ONE DATE
# =====================================================================
@router.get("/venues/{venue_id}/available-slots", response_model=AvailableSlotsOut)
def available_slots(
    venue_id: int,
    date_str: date,
    field_id: int | None = None,
    db: Session = Depends(get_db),
):
    slots = get_available_slots(db, venue_id, date_str, field_id)
    return {"venue_id": venue_id, "field_id": field_id, "date": date_str, "slots": slots}


# =====================================================================
# SLOT SELECTION (stateless toggle)
# =====================================================================
@router.post("/selection/toggle", response_model=SelectionOut)
def toggle_slot(data: SelectionToggle):
    selection = SlotSelection(data.selected)
    selection.toggle(data.slot)

    return SelectionOut(
        selected=[SlotWindowIn(start_time=s.start_time, end_time=s.end_time) for s in selection.selected],
        start_time=selection.start_time,
        end_time=selection.end_time,
        total_slots=len(selection),
    )
