"""
Event Pydantic Schemas
Request and response models for events and RSVPs
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from clubos.models.event import EventStatus, RsvpStatus


class EventResponse(BaseModel):
    """Event with the attending count and the caller's own RSVP status"""

    id: UUID
    club_id: UUID
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    image_url: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    capacity: Optional[int] = None
    price: Optional[float] = None
    status: EventStatus

    rsvp_count: int = 0
    user_rsvp_status: Optional[RsvpStatus] = None


class EventList(BaseModel):
    events: List[EventResponse]


class RsvpRequest(BaseModel):
    """Schema for RSVPing to an event"""

    event_id: UUID
    status: RsvpStatus
    guest_count: int = Field(0, ge=0, le=10)


class RsvpResponse(BaseModel):
    id: UUID
    event_id: UUID
    member_id: UUID
    status: RsvpStatus
    guest_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RsvpEnvelope(BaseModel):
    rsvp: RsvpResponse
