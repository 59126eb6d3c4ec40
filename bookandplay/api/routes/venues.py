from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, selectinload

from bookandplay.core.logging_config import get_logger
from bookandplay.db.session import get_db
from bookandplay.models.enums import ApprovalStatus, UserType
from bookandplay.models.venue import Venue
from bookandplay.schemas.slot import GridResultOut
from bookandplay.schemas.venue import (
    FieldCreate,
    FieldOut,
    FieldStatusUpdate,
    VenueApproval,
    VenueCreate,
    VenueOut,
    VenueStatusUpdate,
    VenueUpdate,
)
from bookandplay.services import venues as venue_service
from bookandplay.services.slot_grid import ensure_time_slots_exist, repair_missing_time_slots

router = APIRouter(prefix="/venues", tags=["Venues"])
logger = get_logger()


# =====================================================================
# CREATE VENUE (Venue owner) - slot grid generated immediately
# =====================================================================
@router.post("/", response_model=VenueOut)
def create_venue(data: VenueCreate, db: Session = Depends(get_db)):
    return venue_service.create_venue(db, data)


# =====================================================================
# EDIT VENUE (Owner) - schedule changes regenerate the grid
# =====================================================================
@router.put("/{venue_id}", response_model=VenueOut)
def edit_venue(venue_id: int, data: VenueUpdate, db: Session = Depends(get_db)):
    return venue_service.update_venue(db, venue_id, data)


@router.patch("/{venue_id}/status", response_model=VenueOut)
def change_venue_status(venue_id: int, data: VenueStatusUpdate, db: Session = Depends(get_db)):
    return venue_service.set_venue_status(db, venue_id, data.owner_id, data.status)


# =====================================================================
# APPROVE / REJECT VENUE (Admin)
# =====================================================================
@router.post("/{venue_id}/review", response_model=VenueOut)
def review_venue(venue_id: int, data: VenueApproval, db: Session = Depends(get_db)):
    return venue_service.review_venue(
        db, venue_id, data.admin_id, data.approval_status, data.rejection_reason
    )


# =====================================================================
# FIELDS
# =====================================================================
@router.post("/{venue_id}/fields", response_model=FieldOut)
def add_field(venue_id: int, data: FieldCreate, db: Session = Depends(get_db)):
    return venue_service.add_field(db, venue_id, data)


@router.patch("/{venue_id}/fields/{field_id}/status", response_model=FieldOut)
def change_field_status(venue_id: int, field_id: int, data: FieldStatusUpdate, db: Session = Depends(get_db)):
    return venue_service.set_field_status(db, venue_id, field_id, data.owner_id, data.status)


# =====================================================================
# TIME SLOT GRID
# =====================================================================
@router.post("/{venue_id}/time-slots", response_model=GridResultOut | None)
def ensure_time_slots(venue_id: int, db: Session = Depends(get_db)):
    result = ensure_time_slots_exist(db, venue_id)
    if result is None:
        return None
    return GridResultOut(
        venue_id=result.venue_id,
        created=result.created,
        reactivated=result.reactivated,
        deactivated=result.deactivated,
        failed_field_ids=result.failed_field_ids,
    )


@router.post("/time-slots/repair")
def repair_time_slots(admin_id: int, db: Session = Depends(get_db)):
    venue_service.require_user(db, admin_id, UserType.ADMIN.value)

    result = repair_missing_time_slots(db)
    logger.bind(log_type="admin").info(f"Admin {admin_id} repaired slot grids -> {result}")
    return result


# =====================================================================
# LIST VENUES (Players / Guests)
# =====================================================================
@router.get("/", response_model=list[VenueOut])
def list_venues(city: str | None = None, page: int = 1, limit: int = 10, db: Session = Depends(get_db)):
    return venue_service.list_approved_venues(db, city=city, page=page, limit=limit)


# =====================================================================
# VENUE DETAILS
# =====================================================================
@router.get("/{venue_id}", response_model=VenueOut)
def get_venue(venue_id: int, db: Session = Depends(get_db)):
    venue = (
        db.query(Venue)
        .options(selectinload(Venue.fields))
        .filter(Venue.id == venue_id, Venue.approval_status == ApprovalStatus.APPROVED.value)
        .first()
    )

    if not venue:
        raise HTTPException(status_code=404, detail="Venue not found")

    return venue
