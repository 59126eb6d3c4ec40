from datetime import date, time
from typing import List, Optional

from pydantic import BaseModel, model_validator


class SlotWindowIn(BaseModel):
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def check_order(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class TimeSlotOut(BaseModel):
    id: int
    venue_id: int
    field_id: Optional[int] = None
    day_of_week: int
    start_time: time
    end_time: time
    is_active: bool

    model_config = {"from_attributes": True}


class AvailableSlotsOut(BaseModel):
    venue_id: int
    field_id: Optional[int] = None
    date: date
    slots: List[TimeSlotOut]


class VenueAvailabilityOut(BaseModel):
    venue_id: int
    field_id: Optional[int] = None
    start_date: date
    end_date: date
    availability: dict[str, str]


class SelectionToggle(BaseModel):
    selected: List[SlotWindowIn] = []
    slot: SlotWindowIn


class SelectionOut(BaseModel):
    selected: List[SlotWindowIn]
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    total_slots: int


class GridResultOut(BaseModel):
    venue_id: int
    created: int
    reactivated: int
    deactivated: int
    failed_field_ids: List[int] = []
