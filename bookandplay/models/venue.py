from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Time, Numeric, DateTime, JSON, ForeignKey, CheckConstraint,
)
from sqlalchemy.orm import relationship, validates
from bookandplay.db.session import Base
from bookandplay.models.enums import ApprovalStatus, VenueStatus


class Venue(Base):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, index=True)

    # Ownership
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String, nullable=False)
    description = Column(String)
    location = Column(String, nullable=False)
    city = Column(String, nullable=False)
    address = Column(String)

    # Schedule
    opening_time = Column(Time, nullable=False)
    closing_time = Column(Time, nullable=False)
    # weekday numbers, 0 = Sunday
    days_available = Column(JSON, nullable=False, default=list)

    # Tariff (per hour)
    day_charges = Column(Numeric(10, 2), nullable=False, default=0)
    night_charges = Column(Numeric(10, 2), nullable=False, default=0)
    weekday_charges = Column(Numeric(10, 2), nullable=False, default=0)
    weekend_charges = Column(Numeric(10, 2), nullable=False, default=0)

    status = Column(String, nullable=False, default=VenueStatus.OPEN.value)
    approval_status = Column(String, nullable=False, default=ApprovalStatus.PENDING.value)
    rejection_reason = Column(String, nullable=True)
    approved_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("opening_time < closing_time", name="ck_venue_hours"),
    )

    # RELATIONSHIPS -------------------------------------

    owner = relationship("User")
    fields = relationship("VenueField", back_populates="venue", cascade="all, delete", order_by="VenueField.id")
    time_slots = relationship("TimeSlot", back_populates="venue", cascade="all, delete")
    bookings = relationship("Booking", back_populates="venue")

    @validates("days_available")
    def _validate_days(self, key, days):
        days = sorted(set(int(d) for d in (days or [])))
        if any(d < 0 or d > 6 for d in days):
            raise ValueError("days_available must hold weekday numbers 0-6")
        return days

    @validates("day_charges", "night_charges", "weekday_charges", "weekend_charges")
    def _validate_charge(self, key, value):
        if value is not None and value < 0:
            raise ValueError(f"{key} cannot be negative")
        return value

    @property
    def is_open(self) -> bool:
        return self.status == VenueStatus.OPEN.value

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED.value
