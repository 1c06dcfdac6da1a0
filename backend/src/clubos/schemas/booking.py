"""
Booking Pydantic Schemas
Request and response models for Booking endpoints
"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from clubos.models.booking import BookingStatus
from clubos.models.facility import FacilityType
from clubos.utils.datetime_utils import format_time

DATE_REGEX = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"
TIME_REGEX = r"^[0-9]{2}:[0-9]{2}$"


class BookingCreate(BaseModel):
    """Schema for creating a new booking"""

    facility_id: UUID
    date: str = Field(..., pattern=DATE_REGEX, description="YYYY-MM-DD")
    start_time: str = Field(..., pattern=TIME_REGEX, description="HH:MM")
    end_time: str = Field(..., pattern=TIME_REGEX, description="HH:MM")
    party_size: int = Field(1, ge=1, le=20)
    notes: Optional[str] = Field(None, max_length=1000)


class BookingFacility(BaseModel):
    """Facility summary embedded in booking responses"""

    id: UUID
    name: str
    type: FacilityType

    class Config:
        from_attributes = True


class BookingMember(BaseModel):
    """Member summary embedded in booking responses"""

    id: UUID
    first_name: str
    last_name: str

    class Config:
        from_attributes = True


class BookingResponse(BaseModel):
    """Schema for Booking responses"""

    id: UUID
    club_id: UUID
    facility_id: UUID
    member_id: UUID

    date: date
    start_time: str
    end_time: str
    party_size: int
    notes: Optional[str] = None

    status: BookingStatus
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    facility: Optional[BookingFacility] = None
    member: Optional[BookingMember] = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def normalize_time(cls, value):
        return format_time(value)

    class Config:
        from_attributes = True


class BookingEnvelope(BaseModel):
    booking: BookingResponse


class BookingList(BaseModel):
    """Schema for list of bookings"""

    bookings: List[BookingResponse]
