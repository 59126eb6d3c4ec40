from pydantic import BaseModel, EmailStr
from typing import Literal


class UserBase(BaseModel):
    name: str
    email: EmailStr
    phone_number: str | None = None

    class Config:
        from_attributes = True


class UserCreate(UserBase):
    user_type: Literal["player", "venue_owner", "admin"] = "player"


class UserOut(UserBase):
    id: int
    user_type: str
