from pydantic import BaseModel
from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Optional

from bookandplay.schemas.slot import SlotWindowIn


class BookingBase(BaseModel):
    venue_id: int
    field_id: Optional[int] = None
    booking_date: date


class BookingCreate(BookingBase):
    player_id: int
    slots: List[SlotWindowIn]
    notes: Optional[str] = None


class PriceQuote(BookingBase):
    slots: List[SlotWindowIn]


class PriceQuoteOut(BookingBase):
    total_slots: int
    total_amount: Decimal


class BookingAction(BaseModel):
    actor_id: int
    reason: Optional[str] = None


class BookingSlotOut(BaseModel):
    slot_start_time: time
    slot_end_time: time
    slot_order: int

    model_config = {"from_attributes": True}


class BookingOut(BookingBase):
    id: int
    player_id: int
    start_time: time
    end_time: time
    total_slots: int
    total_amount: Decimal
    status: str
    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: datetime
    confirmed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    slots: List[BookingSlotOut] = []

    model_config = {"from_attributes": True}


class AmountCheckOut(BaseModel):
    booking_id: int
    stored_amount: Decimal
    recomputed_amount: Decimal
    matches: bool
