"""
Slot grid generation.

A venue's grid is one hourly TimeSlot per (day in days_available, hour in
[opening hour, closing hour)), once at venue level (field_id NULL) and once
per field. Grids are reference data: rows are inserted when missing and
deactivated when the schedule no longer covers them, never deleted.

Hour granularity is deliberate: opening/closing minutes are truncated to the
hour and a warning is logged when that drops part of the opening window.
"""

from dataclasses import dataclass, field as dc_field
from datetime import time

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookandplay.core.config import settings
from bookandplay.core.exceptions import ConfigurationError, NotFoundError
from bookandplay.core.logging_config import get_logger
from bookandplay.core.redis import invalidate_venue_availability
from bookandplay.models.enums import ApprovalStatus
from bookandplay.models.time_slot import TimeSlot
from bookandplay.models.venue import Venue
from bookandplay.models.venue_field import VenueField
from bookandplay.utils.timeutils import hour_slot, parse_time

logger = get_logger().bind(log_type="slots")

ALL_DAYS = [0, 1, 2, 3, 4, 5, 6]


@dataclass(frozen=True)
class SlotDefinition:
    venue_id: int
    field_id: int | None
    day_of_week: int
    start_time: time
    end_time: time

    @property
    def key(self):
        return (self.field_id or 0, self.day_of_week, self.start_time)


@dataclass
class GridResult:
    venue_id: int
    created: int = 0
    reactivated: int = 0
    deactivated: int = 0
    failed_field_ids: list = dc_field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed_field_ids


def validate_schedule(opening_time, closing_time, days_available):
    """Raise ConfigurationError unless the schedule yields at least one slot."""
    if opening_time is None or closing_time is None:
        raise ConfigurationError("Opening and closing time are required")

    if opening_time >= closing_time:
        raise ConfigurationError("Opening time must be before closing time")

    if not days_available:
        raise ConfigurationError("Venue must be available on at least one day")

    if any(int(d) < 0 or int(d) > 6 for d in days_available):
        raise ConfigurationError("Days available must be weekday numbers 0-6")

    if closing_time.hour <= opening_time.hour:
        raise ConfigurationError(
            "Opening hours must cover at least one full hour slot"
        )


def build_grid(venue, fields=()) -> list[SlotDefinition]:
    """Pure grid computation; venue-level definitions first, then per field."""
    validate_schedule(venue.opening_time, venue.closing_time, venue.days_available)

    if venue.opening_time.minute or venue.closing_time.minute:
        logger.warning(
            f"Venue {venue.id}: hours {venue.opening_time}-{venue.closing_time} "
            f"truncated to whole hours for the slot grid"
        )

    opening_hour = venue.opening_time.hour
    closing_hour = venue.closing_time.hour
    days = sorted(set(int(d) for d in venue.days_available))

    owners = [None] + [f.id for f in fields]
    grid = []

    for field_id in owners:
        for day in days:
            for hour in range(opening_hour, closing_hour):
                start, end = hour_slot(hour)
                grid.append(SlotDefinition(venue.id, field_id, day, start, end))

    return grid


def _existing_slots(db: Session, venue_id: int, field_key: int) -> dict:
    rows = (
        db.query(TimeSlot)
        .filter(TimeSlot.venue_id == venue_id, TimeSlot.field_key == field_key)
        .all()
    )
    return {(r.field_key, r.day_of_week, r.start_time): r for r in rows}


def _sync_scope(db: Session, venue_id: int, field_key: int, wanted: list[SlotDefinition], result: GridResult):
    existing = _existing_slots(db, venue_id, field_key)
    wanted_keys = set()

    for definition in wanted:
        wanted_keys.add(definition.key)
        row = existing.get(definition.key)

        if row is None:
            db.add(TimeSlot(
                venue_id=definition.venue_id,
                field_id=definition.field_id,
                field_key=field_key,
                day_of_week=definition.day_of_week,
                start_time=definition.start_time,
                end_time=definition.end_time,
                is_active=True,
            ))
            result.created += 1
        elif not row.is_active:
            row.is_active = True
            result.reactivated += 1

    for key, row in existing.items():
        if key not in wanted_keys and row.is_active:
            row.is_active = False
            result.deactivated += 1

    db.commit()


def generate_slots(db: Session, venue: Venue, fields=None) -> GridResult:
    """
    Materialize the venue's grid. Safe to call repeatedly.

    Venue-level slots are committed first so that a failure while writing a
    field's slots still leaves the venue bookable without a field.
    """
    if fields is None:
        fields = db.query(VenueField).filter(VenueField.venue_id == venue.id).all()

    grid = build_grid(venue, fields)
    result = GridResult(venue_id=venue.id)

    by_scope = {}
    for definition in grid:
        by_scope.setdefault(definition.field_id or 0, []).append(definition)

    try:
        _sync_scope(db, venue.id, 0, by_scope.get(0, []), result)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Venue {venue.id}: venue-level slot generation failed -> {e}")
        raise

    for f in fields:
        try:
            _sync_scope(db, venue.id, f.id, by_scope.get(f.id, []), result)
        except SQLAlchemyError as e:
            db.rollback()
            result.failed_field_ids.append(f.id)
            logger.error(f"Venue {venue.id}: slots for field {f.id} not generated -> {e}")

    invalidate_venue_availability(venue.id)

    logger.info(
        f"Venue {venue.id}: grid synced | created={result.created} "
        f"reactivated={result.reactivated} deactivated={result.deactivated} "
        f"failed_fields={result.failed_field_ids}"
    )
    return result


def venue_has_time_slots(db: Session, venue_id: int) -> bool:
    return (
        db.query(TimeSlot.id)
        .filter(TimeSlot.venue_id == venue_id)
        .first()
    ) is not None


def _fields_missing_slots(db: Session, venue_id: int) -> list:
    fields = db.query(VenueField).filter(VenueField.venue_id == venue_id).all()
    missing = []
    for f in fields:
        has = db.query(TimeSlot.id).filter(TimeSlot.field_id == f.id).first()
        if has is None:
            missing.append(f)
    return missing


def ensure_time_slots_exist(db: Session, venue_id: int) -> GridResult | None:
    """Generate the grid if the venue, or any of its fields, has none yet."""
    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if not venue:
        raise NotFoundError("Venue not found")

    if venue_has_time_slots(db, venue_id) and not _fields_missing_slots(db, venue_id):
        return None

    logger.info(f"Venue {venue_id}: no time slots found, generating")
    return generate_slots(db, venue)


def repair_missing_time_slots(db: Session) -> dict:
    """Generate grids for every approved venue that has none."""
    venues = db.query(Venue).filter(Venue.approval_status == ApprovalStatus.APPROVED.value).all()
    repaired, failed = [], []

    for venue in venues:
        if venue_has_time_slots(db, venue.id):
            continue

        if not venue.days_available:
            venue.days_available = ALL_DAYS
        if venue.opening_time is None:
            venue.opening_time = parse_time(settings.DEFAULT_OPENING_TIME)
        if venue.closing_time is None:
            venue.closing_time = parse_time(settings.DEFAULT_CLOSING_TIME)

        try:
            generate_slots(db, venue)
            repaired.append(venue.id)
        except (ConfigurationError, SQLAlchemyError) as e:
            db.rollback()
            failed.append(venue.id)
            logger.error(f"Venue {venue.id}: repair failed -> {e}")

    return {"repaired": repaired, "failed": failed}
