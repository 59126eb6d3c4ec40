from datetime import datetime

from sqlalchemy.orm import Session, selectinload

from bookandplay.core.exceptions import NotFoundError, PermissionDeniedError
from bookandplay.core.logging_config import get_logger
from bookandplay.core.redis import invalidate_venue_availability
from bookandplay.models.enums import ApprovalStatus, UserType, VenueStatus
from bookandplay.models.user import User
from bookandplay.models.venue import Venue
from bookandplay.models.venue_field import VenueField
from bookandplay.services.slot_grid import generate_slots, validate_schedule

logger = get_logger()


def require_user(db: Session, user_id: int, user_type: str) -> User:
    user = db.query(User).filter(User.id == user_id, User.is_active == True).first()
    if not user:
        raise NotFoundError("User not found")
    if user.user_type != user_type:
        raise PermissionDeniedError(f"Only a {user_type.replace('_', ' ')} can do that")
    return user


def get_owned_venue(db: Session, venue_id: int, owner_id: int) -> Venue:
    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if not venue:
        raise NotFoundError("Venue not found")
    if venue.owner_id != owner_id:
        raise PermissionDeniedError("You do not own this venue")
    return venue


def create_venue(db: Session, data) -> Venue:
    owner = require_user(db, data.owner_id, UserType.VENUE_OWNER.value)
    validate_schedule(data.opening_time, data.closing_time, data.days_available)

    venue = Venue(
        owner_id=owner.id,
        name=data.name,
        description=data.description,
        location=data.location,
        city=data.city,
        address=data.address,
        opening_time=data.opening_time,
        closing_time=data.closing_time,
        days_available=data.days_available,
        day_charges=data.day_charges,
        night_charges=data.night_charges,
        weekday_charges=data.weekday_charges,
        weekend_charges=data.weekend_charges,
        status=VenueStatus.OPEN.value,
        approval_status=ApprovalStatus.PENDING.value,
    )
    db.add(venue)
    db.flush()

    for f in data.fields or []:
        db.add(VenueField(
            venue_id=venue.id,
            field_name=f.field_name,
            field_number=f.field_number,
            field_type=f.field_type,
        ))

    db.commit()
    db.refresh(venue)

    logger.info(f"Venue Created | id={venue.id} owner={owner.id}")

    generate_slots(db, venue)
    return venue


def update_venue(db: Session, venue_id: int, data) -> Venue:
    venue = get_owned_venue(db, venue_id, data.owner_id)
    validate_schedule(data.opening_time, data.closing_time, data.days_available)

    schedule_changed = (
        venue.opening_time != data.opening_time
        or venue.closing_time != data.closing_time
        or list(venue.days_available or []) != list(data.days_available)
    )

    venue.name = data.name
    venue.description = data.description
    venue.location = data.location
    venue.city = data.city
    venue.address = data.address
    venue.opening_time = data.opening_time
    venue.closing_time = data.closing_time
    venue.days_available = data.days_available
    venue.day_charges = data.day_charges
    venue.night_charges = data.night_charges
    venue.weekday_charges = data.weekday_charges
    venue.weekend_charges = data.weekend_charges

    db.commit()
    db.refresh(venue)

    if schedule_changed:
        generate_slots(db, venue)
    else:
        invalidate_venue_availability(venue.id)

    return venue


def set_venue_status(db: Session, venue_id: int, owner_id: int, status: str) -> Venue:
    venue = get_owned_venue(db, venue_id, owner_id)
    venue.status = status
    db.commit()
    db.refresh(venue)

    invalidate_venue_availability(venue.id)
    logger.info(f"Venue {venue.id} status -> {status}")
    return venue


def review_venue(db: Session, venue_id: int, admin_id: int, approval_status: str, reason=None) -> Venue:
    require_user(db, admin_id, UserType.ADMIN.value)

    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if not venue:
        raise NotFoundError("Venue not found")

    venue.approval_status = approval_status
    if approval_status == ApprovalStatus.APPROVED.value:
        venue.approved_at = datetime.utcnow()
        venue.rejection_reason = None
    else:
        venue.rejection_reason = reason

    db.commit()
    db.refresh(venue)

    invalidate_venue_availability(venue.id)
    logger.bind(log_type="admin").info(
        f"Admin {admin_id} set venue {venue.id} approval -> {approval_status}"
    )
    return venue


def add_field(db: Session, venue_id: int, data) -> VenueField:
    venue = get_owned_venue(db, venue_id, data.owner_id)

    field = VenueField(
        venue_id=venue.id,
        field_name=data.field_name,
        field_number=data.field_number,
        field_type=data.field_type,
    )
    db.add(field)
    db.commit()
    db.refresh(field)

    generate_slots(db, venue)
    return field


def set_field_status(db: Session, venue_id: int, field_id: int, owner_id: int, status: str) -> VenueField:
    venue = get_owned_venue(db, venue_id, owner_id)

    field = db.query(VenueField).filter(
        VenueField.id == field_id,
        VenueField.venue_id == venue.id,
    ).first()
    if not field:
        raise NotFoundError("Field not found")

    field.status = status
    db.commit()
    db.refresh(field)

    invalidate_venue_availability(venue.id)
    return field


def list_approved_venues(db: Session, city: str | None = None, page: int = 1, limit: int = 10):
    q = (
        db.query(Venue)
        .options(selectinload(Venue.fields))
        .filter(Venue.approval_status == ApprovalStatus.APPROVED.value)
    )
    if city:
        q = q.filter(Venue.city.ilike(f"%{city}%"))

    return (
        q.order_by(Venue.name.asc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
