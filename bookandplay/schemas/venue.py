from datetime import datetime, time
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class FieldBase(BaseModel):
    field_name: str
    field_number: Optional[str] = None
    field_type: str = "futsal"


class FieldCreate(FieldBase):
    owner_id: int


class FieldOut(FieldBase):
    id: int
    venue_id: int
    status: str

    model_config = {"from_attributes": True}


class FieldStatusUpdate(BaseModel):
    owner_id: int
    status: Literal["open", "closed", "maintenance"]


class VenueBase(BaseModel):
    name: str
    description: Optional[str] = None
    location: str
    city: str
    address: Optional[str] = None

    # Schedule (days: 0 = Sunday)
    opening_time: time
    closing_time: time
    days_available: List[int]

    # Tariff fields (per hour)
    day_charges: Decimal = Field(default=Decimal("0"), ge=0)
    night_charges: Decimal = Field(default=Decimal("0"), ge=0)
    weekday_charges: Decimal = Field(default=Decimal("0"), ge=0)
    weekend_charges: Decimal = Field(default=Decimal("0"), ge=0)

    @field_validator("days_available")
    @classmethod
    def check_days(cls, days):
        if any(d < 0 or d > 6 for d in days):
            raise ValueError("days_available must hold weekday numbers 0-6")
        return sorted(set(days))

    @model_validator(mode="after")
    def check_hours(self):
        if self.opening_time >= self.closing_time:
            raise ValueError("opening_time must be before closing_time")
        return self


class VenueCreate(VenueBase):
    owner_id: int
    fields: Optional[List[FieldBase]] = []


class VenueUpdate(VenueBase):
    owner_id: int


class VenueStatusUpdate(BaseModel):
    owner_id: int
    status: Literal["open", "closed", "maintenance"]


class VenueApproval(BaseModel):
    admin_id: int
    approval_status: Literal["approved", "rejected"]
    rejection_reason: Optional[str] = None


class VenueOut(VenueBase):
    id: int
    owner_id: int
    status: str
    approval_status: str
    fields: List[FieldOut] = []
    created_at: datetime

    model_config = {"from_attributes": True}
