from datetime import time
from decimal import Decimal
from types import SimpleNamespace

import pytest

from bookandplay.core.exceptions import ConfigurationError, NotFoundError, PermissionDeniedError
from bookandplay.models import SpecialOccasion, TimeSlot
from bookandplay.services import venues as venue_service
from bookandplay.services.special_occasions import (
    create_special_occasion,
    date_override,
    delete_special_occasion,
    resolve_override,
)

from tests.conftest import TUESDAY


def occasion_data(**overrides):
    values = dict(
        field_id=None,
        title="League night",
        description=None,
        start_date=TUESDAY,
        end_date=TUESDAY,
        override_type="custom_hours",
        custom_opening_time=time(7),
        custom_closing_time=time(8),
        custom_day_charges=None,
        custom_night_charges=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def schedule_update(venue, **overrides):
    values = dict(
        owner_id=venue.owner_id,
        name=venue.name,
        description=None,
        location=venue.location,
        city=venue.city,
        address=None,
        opening_time=venue.opening_time,
        closing_time=venue.closing_time,
        days_available=list(venue.days_available),
        day_charges=Decimal("10"),
        night_charges=Decimal("20"),
        weekday_charges=Decimal("0"),
        weekend_charges=Decimal("50"),
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def active_hours(db, venue_id):
    return sorted({
        s.start_time.hour
        for s in db.query(TimeSlot).filter(TimeSlot.venue_id == venue_id, TimeSlot.is_active == True)
    })


def test_schedule_edit_regenerates_the_grid(db, venue):
    venue_service.update_venue(db, venue.id, schedule_update(venue, closing_time=time(11)))

    assert active_hours(db, venue.id) == [6, 7, 8, 9, 10]


def test_tariff_edit_keeps_the_grid(db, venue):
    before = db.query(TimeSlot).count()

    updated = venue_service.update_venue(db, venue.id, schedule_update(venue, day_charges=Decimal("12")))

    assert updated.day_charges == Decimal("12.00")
    assert db.query(TimeSlot).count() == before


def test_invalid_schedule_edit_is_refused(db, venue):
    with pytest.raises(ConfigurationError):
        venue_service.update_venue(db, venue.id, schedule_update(venue, days_available=[]))

    assert active_hours(db, venue.id) == [6, 7, 8]


def test_only_the_owner_edits(db, venue, player):
    with pytest.raises(PermissionDeniedError):
        venue_service.update_venue(db, venue.id, schedule_update(venue, owner_id=player.id))


def test_new_field_gets_a_grid(db, venue, owner):
    field = venue_service.add_field(
        db, venue.id, SimpleNamespace(owner_id=owner.id, field_name="Cage", field_number="3", field_type="cricket")
    )

    assert db.query(TimeSlot).filter(TimeSlot.field_id == field.id).count() == 21


def test_review_needs_an_admin(db, venue, owner, admin):
    with pytest.raises(PermissionDeniedError):
        venue_service.review_venue(db, venue.id, owner.id, "rejected", "No photos")

    reviewed = venue_service.review_venue(db, venue.id, admin.id, "rejected", "No photos")
    assert reviewed.approval_status == "rejected"
    assert reviewed.rejection_reason == "No photos"


def test_closure_beats_custom_hours_and_pricing():
    closed = SimpleNamespace(start_date=TUESDAY, end_date=TUESDAY, override_type="closed", title="Flooded")
    hours = SimpleNamespace(
        start_date=TUESDAY, end_date=TUESDAY, override_type="custom_hours",
        custom_opening_time=time(7), custom_closing_time=time(8),
    )
    pricing = SimpleNamespace(
        start_date=TUESDAY, end_date=TUESDAY, override_type="custom_pricing",
        custom_day_charges=Decimal("5"), custom_night_charges=None,
    )

    override = resolve_override([pricing, hours, closed], TUESDAY)
    assert override.closed and override.reason == "Flooded"
    assert override.custom_hours is None

    override = resolve_override([pricing, hours], TUESDAY)
    assert override.custom_hours == (time(7), time(8))
    assert override.custom_pricing == (Decimal("5"), 0)


def test_create_and_delete_occasion(db, venue, owner):
    occasion = create_special_occasion(db, venue.id, owner.id, occasion_data())

    assert date_override(db, venue.id, TUESDAY).custom_hours == (time(7), time(8))

    delete_special_occasion(db, venue.id, occasion.id, owner.id)
    assert db.query(SpecialOccasion).count() == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"end_date": TUESDAY.replace(day=1, month=1, year=2029)},
        {"custom_opening_time": None},
        {"custom_opening_time": time(9), "custom_closing_time": time(8)},
    ],
)
def test_invalid_occasions_are_refused(db, venue, owner, overrides):
    with pytest.raises(ConfigurationError):
        create_special_occasion(db, venue.id, owner.id, occasion_data(**overrides))


def test_occasion_of_another_venue_is_not_found(db, venue, owner):
    occasion = create_special_occasion(db, venue.id, owner.id, occasion_data())

    with pytest.raises(NotFoundError):
        delete_special_occasion(db, venue.id + 1, occasion.id, owner.id)
