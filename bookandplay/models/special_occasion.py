from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, Time, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from bookandplay.db.session import Base


class SpecialOccasion(Base):
    """Date-range override of a venue's (or one field's) regular schedule."""

    __tablename__ = "venue_special_occasions"

    id = Column(Integer, primary_key=True, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    field_id = Column(Integer, ForeignKey("venue_fields.id", ondelete="CASCADE"), nullable=True)

    title = Column(String, nullable=False)
    description = Column(String, nullable=True)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    # closed | custom_hours | custom_pricing
    override_type = Column(String, nullable=False)

    custom_opening_time = Column(Time, nullable=True)
    custom_closing_time = Column(Time, nullable=True)
    custom_day_charges = Column(Numeric(10, 2), nullable=True)
    custom_night_charges = Column(Numeric(10, 2), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    venue = relationship("Venue")
