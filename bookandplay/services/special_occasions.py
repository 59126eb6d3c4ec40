from dataclasses import dataclass
from datetime import date

from sqlalchemy import or_
from sqlalchemy.orm import Session

from bookandplay.core.exceptions import ConfigurationError, NotFoundError, PermissionDeniedError
from bookandplay.core.logging_config import get_logger
from bookandplay.core.redis import invalidate_venue_availability
from bookandplay.models.enums import OverrideType
from bookandplay.models.special_occasion import SpecialOccasion
from bookandplay.models.venue import Venue

logger = get_logger()


@dataclass
class DateOverride:
    """What special occasions change for one venue/field on one date."""

    closed: bool = False
    reason: str | None = None
    custom_hours: tuple | None = None  # (opening time, closing time)
    custom_pricing: tuple | None = None  # (day charge, night charge)


def occasions_for_range(db: Session, venue_id: int, start: date, end: date, field_id: int | None = None):
    q = db.query(SpecialOccasion).filter(
        SpecialOccasion.venue_id == venue_id,
        SpecialOccasion.start_date <= end,
        SpecialOccasion.end_date >= start,
    )

    # venue-wide occasions always apply; field ones only to that field
    if field_id:
        q = q.filter(or_(SpecialOccasion.field_id.is_(None), SpecialOccasion.field_id == field_id))
    else:
        q = q.filter(SpecialOccasion.field_id.is_(None))

    return q.order_by(SpecialOccasion.start_date.asc()).all()


def resolve_override(occasions, target: date) -> DateOverride:
    """Closure beats custom hours, custom hours beat custom pricing."""
    active = [o for o in occasions if o.start_date <= target <= o.end_date]
    override = DateOverride()

    closure = next((o for o in active if o.override_type == OverrideType.CLOSED.value), None)
    if closure:
        override.closed = True
        override.reason = closure.title
        return override

    hours = next((o for o in active if o.override_type == OverrideType.CUSTOM_HOURS.value), None)
    if hours:
        override.custom_hours = (hours.custom_opening_time, hours.custom_closing_time)

    pricing = next((o for o in active if o.override_type == OverrideType.CUSTOM_PRICING.value), None)
    if pricing:
        override.custom_pricing = (
            pricing.custom_day_charges or 0,
            pricing.custom_night_charges or 0,
        )

    return override


def date_override(db: Session, venue_id: int, target: date, field_id: int | None = None) -> DateOverride:
    return resolve_override(occasions_for_range(db, venue_id, target, target, field_id), target)


def _owned_venue(db: Session, venue_id: int, owner_id: int) -> Venue:
    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if not venue:
        raise NotFoundError("Venue not found")
    if venue.owner_id != owner_id:
        raise PermissionDeniedError("You do not own this venue")
    return venue


def create_special_occasion(db: Session, venue_id: int, owner_id: int, data) -> SpecialOccasion:
    _owned_venue(db, venue_id, owner_id)

    if data.end_date < data.start_date:
        raise ConfigurationError("End date cannot be before start date")

    if data.override_type == OverrideType.CUSTOM_HOURS.value:
        if not data.custom_opening_time or not data.custom_closing_time:
            raise ConfigurationError("Custom hours need an opening and closing time")
        if data.custom_opening_time >= data.custom_closing_time:
            raise ConfigurationError("Opening time must be before closing time")

    occasion = SpecialOccasion(
        venue_id=venue_id,
        field_id=data.field_id,
        title=data.title,
        description=data.description,
        start_date=data.start_date,
        end_date=data.end_date,
        override_type=data.override_type,
        custom_opening_time=data.custom_opening_time,
        custom_closing_time=data.custom_closing_time,
        custom_day_charges=data.custom_day_charges,
        custom_night_charges=data.custom_night_charges,
    )
    db.add(occasion)
    db.commit()
    db.refresh(occasion)

    invalidate_venue_availability(venue_id)
    logger.info(
        f"Special occasion {occasion.id} ({occasion.override_type}) created for venue {venue_id} "
        f"{occasion.start_date} -> {occasion.end_date}"
    )
    return occasion


def delete_special_occasion(db: Session, venue_id: int, occasion_id: int, owner_id: int):
    occasion = db.query(SpecialOccasion).filter(
        SpecialOccasion.id == occasion_id,
        SpecialOccasion.venue_id == venue_id,
    ).first()
    if not occasion:
        raise NotFoundError("Special occasion not found")

    _owned_venue(db, venue_id, owner_id)

    db.delete(occasion)
    db.commit()

    invalidate_venue_availability(venue_id)
