from sqlalchemy import Column, Integer, Date, Time, ForeignKey, UniqueConstraint
from bookandplay.db.session import Base


class SlotReservation(Base):
    """
    One row per hour held by a confirmed booking.

    The unique constraint is what makes two confirmed bookings for the same
    venue/field/date/hour impossible, whatever the clients saw beforehand.
    """

    __tablename__ = "slot_reservations"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)

    venue_id = Column(Integer, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False)
    field_key = Column(Integer, nullable=False, default=0)
    booking_date = Column(Date, nullable=False)
    slot_start_time = Column(Time, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "venue_id", "field_key", "booking_date", "slot_start_time",
            name="uq_slot_reservation",
        ),
    )
