from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from bookandplay.db.session import Base
from bookandplay.models.enums import FieldStatus


class VenueField(Base):
    __tablename__ = "venue_fields"

    id = Column(Integer, primary_key=True, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)

    field_name = Column(String, nullable=False)
    field_number = Column(String, nullable=True)
    field_type = Column(String, nullable=False, default="futsal")

    status = Column(String, nullable=False, default=FieldStatus.OPEN.value)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    venue = relationship("Venue", back_populates="fields")

    @property
    def is_open(self) -> bool:
        return self.status == FieldStatus.OPEN.value
