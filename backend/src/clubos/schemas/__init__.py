"""
Pydantic Schemas Package
Exports all request/response schemas
"""

from clubos.schemas.booking import (
    BookingCreate,
    BookingEnvelope,
    BookingFacility,
    BookingMember,
    BookingList,
    BookingResponse,
)
from clubos.schemas.chat import ChatAttachment, ChatMessage, ChatRequest, ChatResponse
from clubos.schemas.event import EventList, EventResponse, RsvpEnvelope, RsvpRequest, RsvpResponse
from clubos.schemas.facility import FacilityList, FacilityResponse, SlotResponse, TeeTimesResponse

__all__ = [
    "BookingCreate",
    "BookingEnvelope",
    "BookingFacility",
    "BookingMember",
    "BookingList",
    "BookingResponse",
    "ChatAttachment",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "EventList",
    "EventResponse",
    "FacilityList",
    "FacilityResponse",
    "RsvpEnvelope",
    "RsvpRequest",
    "RsvpResponse",
    "SlotResponse",
    "TeeTimesResponse",
]
