from datetime import date, datetime, time
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel


class SpecialOccasionBase(BaseModel):
    field_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    override_type: Literal["closed", "custom_hours", "custom_pricing"]
    custom_opening_time: Optional[time] = None
    custom_closing_time: Optional[time] = None
    custom_day_charges: Optional[Decimal] = None
    custom_night_charges: Optional[Decimal] = None


class SpecialOccasionCreate(SpecialOccasionBase):
    owner_id: int


class SpecialOccasionOut(SpecialOccasionBase):
    id: int
    venue_id: int
    created_at: datetime

    model_config = {"from_attributes": True}
