import os
import tempfile
from datetime import date, time

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "bookandplay-test-logs"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bookandplay.db.session import Base, enable_sqlite_fk, get_db
from bookandplay.main import app
from bookandplay.models import User, Venue, VenueField
from bookandplay.services.slot_grid import generate_slots

# 2030-01-01 is a Tuesday
TUESDAY = date(2030, 1, 1)
SATURDAY = date(2030, 1, 5)
SUNDAY = date(2030, 1, 6)
MONDAY = date(2030, 1, 7)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_fk)
    Base.metadata.create_all(engine)

    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    yield factory

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_user(db, name, user_type):
    user = User(name=name, email=f"{name.lower().replace(' ', '.')}@example.com", user_type=user_type)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def owner(db):
    return make_user(db, "Olivia Owner", "venue_owner")


@pytest.fixture
def player(db):
    return make_user(db, "Pat Player", "player")


@pytest.fixture
def other_player(db):
    return make_user(db, "Sam Striker", "player")


@pytest.fixture
def admin(db):
    return make_user(db, "Ada Admin", "admin")


def make_venue(db, owner, fields=(), **overrides):
    values = dict(
        owner_id=owner.id,
        name="Goal Arena",
        location="Gulberg",
        city="Lahore",
        opening_time=time(6, 0),
        closing_time=time(9, 0),
        days_available=[0, 1, 2, 3, 4, 5, 6],
        day_charges=10,
        night_charges=20,
        weekday_charges=0,
        weekend_charges=50,
        status="open",
        approval_status="approved",
    )
    values.update(overrides)

    venue = Venue(**values)
    db.add(venue)
    db.flush()

    for name in fields:
        db.add(VenueField(venue_id=venue.id, field_name=name))

    db.commit()
    db.refresh(venue)
    return venue


@pytest.fixture
def venue(db, owner):
    venue = make_venue(db, owner)
    generate_slots(db, venue)
    return venue


@pytest.fixture
def field_venue(db, owner):
    venue = make_venue(db, owner, fields=("Pitch A", "Pitch B"))
    generate_slots(db, venue)
    return venue
