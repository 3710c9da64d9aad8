import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from restodesk.models.booking import BookingStatus
from restodesk.schemas.response import CamelRequest

SLOT_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class BookingRequest(CamelRequest):
    restaurant_id: int
    party_size: int = Field(..., gt=0)
    date: datetime.date
    time: str = Field(..., pattern=SLOT_TIME_PATTERN, description="Slot start, HH:MM.")
    notes: Optional[str] = None


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class AvailabilityResponse(BaseModel):
    restaurant_id: int
    date: datetime.date
    time: str
    capacity_left: int


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_id: int
    user_id: int
    party_size: int
    date: datetime.date
    time: str
    notes: Optional[str] = None
    status: BookingStatus
    username: Optional[str] = None
    email: Optional[str] = None
