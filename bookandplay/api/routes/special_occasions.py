from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookandplay.db.session import get_db
from bookandplay.models.special_occasion import SpecialOccasion
from bookandplay.schemas.special_occasion import SpecialOccasionCreate, SpecialOccasionOut
from bookandplay.services import special_occasions as occasion_service

router = APIRouter(prefix="/venues/{venue_id}/special-occasions", tags=["Special Occasions"])


@router.post("/", response_model=SpecialOccasionOut)
def create_occasion(venue_id: int, data: SpecialOccasionCreate, db: Session = Depends(get_db)):
    return occasion_service.create_special_occasion(db, venue_id, data.owner_id, data)


@router.get("/", response_model=list[SpecialOccasionOut])
def list_occasions(
    venue_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
):
    q = db.query(SpecialOccasion).filter(SpecialOccasion.venue_id == venue_id)

    if start_date and end_date:
        q = q.filter(
            SpecialOccasion.end_date >= start_date,
            SpecialOccasion.start_date <= end_date,
        )

    return q.order_by(SpecialOccasion.start_date.asc()).all()


@router.delete("/{occasion_id}")
def delete_occasion(venue_id: int, occasion_id: int, owner_id: int, db: Session = Depends(get_db)):
    occasion_service.delete_special_occasion(db, venue_id, occasion_id, owner_id)
    return {"message": "Special occasion deleted successfully"}
