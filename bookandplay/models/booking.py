from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, Time, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from bookandplay.db.session import Base
from bookandplay.models.enums import BookingStatus


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    field_id = Column(Integer, ForeignKey("venue_fields.id"), nullable=True)

    booking_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    total_slots = Column(Integer, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)

    # pending -> confirmed | cancelled ; confirmed -> completed | cancelled
    status = Column(String, nullable=False, default=BookingStatus.PENDING.value, index=True)

    notes = Column(String, nullable=True)
    cancellation_reason = Column(String, nullable=True)
    cancelled_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    confirmed_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    player = relationship("User", foreign_keys=[player_id])
    venue = relationship("Venue", back_populates="bookings")
    field = relationship("VenueField")
    slots = relationship(
        "BookingSlot",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingSlot.slot_order",
    )
