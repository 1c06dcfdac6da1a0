"""
Facility Pydantic Schemas
Response models for facilities and slot availability
"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from clubos.models.facility import FacilityType


class FacilityResponse(BaseModel):
    """Schema for Facility responses"""

    id: UUID
    club_id: UUID
    name: str
    type: FacilityType
    description: Optional[str] = None
    capacity: Optional[int] = None
    is_active: bool

    class Config:
        from_attributes = True


class FacilityList(BaseModel):
    facilities: List[FacilityResponse]


class SlotResponse(BaseModel):
    """One bookable window; start/end are HH:MM"""

    start_time: str
    end_time: str
    is_available: bool
    booking_id: Optional[UUID] = None

    class Config:
        from_attributes = True


class TeeTimesResponse(BaseModel):
    """Schema for the tee-times endpoint"""

    facility: FacilityResponse
    date: date
    day_of_week: int
    slots: List[SlotResponse]
