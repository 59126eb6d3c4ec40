from sqlalchemy import Column, Integer, Time, ForeignKey
from sqlalchemy.orm import relationship
from bookandplay.db.session import Base


class BookingSlot(Base):
    __tablename__ = "booking_slots"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)

    slot_start_time = Column(Time, nullable=False)
    slot_end_time = Column(Time, nullable=False)
    slot_order = Column(Integer, nullable=False)

    booking = relationship("Booking", back_populates="slots")
