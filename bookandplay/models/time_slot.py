from sqlalchemy import Column, Integer, Time, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from bookandplay.db.session import Base


class TimeSlot(Base):
    """One hourly grid entry for a venue (field_id NULL) or one of its fields."""

    __tablename__ = "time_slots"

    id = Column(Integer, primary_key=True, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    field_id = Column(Integer, ForeignKey("venue_fields.id", ondelete="CASCADE"), nullable=True, index=True)

    # 0 for venue-level rows; NULLs never collide in a unique index
    field_key = Column(Integer, nullable=False, default=0)

    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        UniqueConstraint("venue_id", "field_key", "day_of_week", "start_time", name="uq_time_slot"),
    )

    venue = relationship("Venue", back_populates="time_slots")
    field = relationship("VenueField")
