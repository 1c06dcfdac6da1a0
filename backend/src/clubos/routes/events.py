"""
Event API Routes
Upcoming events and member RSVPs
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from clubos.database import get_db
from clubos.dependencies.auth import get_current_member
from clubos.schemas.event import EventList, RsvpEnvelope, RsvpRequest
from clubos.services import event_service
from clubos.services.member_service import MemberContext

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("", response_model=EventList)
def list_events(
    ctx: MemberContext = Depends(get_current_member),
    db: Session = Depends(get_db),
):
    """Upcoming published events with attending counts and the caller's RSVP"""
    return {"events": event_service.list_upcoming_events(db, ctx)}


@router.post("/rsvp", response_model=RsvpEnvelope)
def rsvp_to_event(
    rsvp_data: RsvpRequest,
    ctx: MemberContext = Depends(get_current_member),
    db: Session = Depends(get_db),
):
    """Create or replace the caller's RSVP"""
    rsvp = event_service.upsert_rsvp(
        db,
        ctx,
        event_id=rsvp_data.event_id,
        status=rsvp_data.status,
        guest_count=rsvp_data.guest_count,
    )

    return {"rsvp": rsvp}
