from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from bookandplay.db.session import Base
from bookandplay.models.enums import UserType


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone_number = Column(String, nullable=True)

    # player | venue_owner | admin
    user_type = Column(String, nullable=False, default=UserType.PLAYER.value)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
