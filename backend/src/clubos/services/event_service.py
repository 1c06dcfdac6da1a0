"""
Event Service
Upcoming event listings and RSVP writes with capacity enforcement
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clubos.exceptions import Conflict, InvalidInput, InvalidState, NotFound
from clubos.models.event import ClubEvent, EventRsvp, EventStatus, RsvpStatus
from clubos.services.member_service import MemberContext

logger = logging.getLogger(__name__)

# Members may only choose these; waitlisted is assigned by staff
MEMBER_RSVP_STATUSES = (RsvpStatus.ATTENDING, RsvpStatus.DECLINED, RsvpStatus.MAYBE)
MAX_GUEST_COUNT = 10


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def count_attending(db: Session, event_id: UUID) -> int:
    """Number of attending RSVP rows for an event"""
    return (
        db.query(func.count(EventRsvp.id))
        .filter(EventRsvp.event_id == event_id, EventRsvp.status == RsvpStatus.ATTENDING)
        .scalar()
    )


def count_seats_taken(db: Session, event_id: UUID, exclude_member_id: Optional[UUID] = None) -> int:
    """Seats held by attending RSVPs: each one takes 1 + guest_count"""
    query = db.query(func.coalesce(func.sum(1 + EventRsvp.guest_count), 0)).filter(
        EventRsvp.event_id == event_id,
        EventRsvp.status == RsvpStatus.ATTENDING,
    )

    if exclude_member_id:
        query = query.filter(EventRsvp.member_id != exclude_member_id)

    return int(query.scalar())


def get_member_rsvp(db: Session, event_id: UUID, member_id: UUID) -> Optional[EventRsvp]:
    return db.query(EventRsvp).filter(EventRsvp.event_id == event_id, EventRsvp.member_id == member_id).first()


def upcoming_events_query(db: Session, club_id: UUID):
    """Published events of a club that have not started yet, soonest first"""
    return (
        db.query(ClubEvent)
        .filter(
            ClubEvent.club_id == club_id,
            ClubEvent.status == EventStatus.PUBLISHED,
            ClubEvent.start_date >= datetime.utcnow(),
        )
        .order_by(ClubEvent.start_date.asc())
    )


def enrich_event(db: Session, event: ClubEvent, member_id: UUID) -> Dict[str, Any]:
    """Event fields plus the attending count and the member's own RSVP status"""
    rsvp = get_member_rsvp(db, event.id, member_id)

    return {
        "id": event.id,
        "club_id": event.club_id,
        "title": event.title,
        "description": event.description,
        "location": event.location,
        "image_url": event.image_url,
        "start_date": event.start_date,
        "end_date": event.end_date,
        "capacity": event.capacity,
        "price": event.price,
        "status": event.status,
        "rsvp_count": count_attending(db, event.id),
        "user_rsvp_status": rsvp.status if rsvp else None,
    }


def list_upcoming_events(db: Session, ctx: MemberContext, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Upcoming published events of the caller's club with RSVP enrichment"""
    query = upcoming_events_query(db, ctx.club_id)

    if limit:
        query = query.limit(limit)

    return [enrich_event(db, event, ctx.member_id) for event in query.all()]


def find_events_by_title(
    db: Session,
    ctx: MemberContext,
    title: str,
    event_ids: Optional[List[UUID]] = None,
    upcoming_only: bool = True,
) -> List[ClubEvent]:
    """
    Case-insensitive substring match on event titles within the caller's club

    Returns every candidate so callers can ask the member to disambiguate.
    An exact (case-insensitive) title match among several candidates wins.
    """
    term = title.strip()
    if not term:
        return []

    if upcoming_only:
        query = upcoming_events_query(db, ctx.club_id)
    else:
        query = (
            db.query(ClubEvent)
            .filter(ClubEvent.club_id == ctx.club_id, ClubEvent.status == EventStatus.PUBLISHED)
            .order_by(ClubEvent.start_date.asc())
        )

    if event_ids is not None:
        if not event_ids:
            return []
        query = query.filter(ClubEvent.id.in_(event_ids))

    candidates = query.filter(ClubEvent.title.ilike(f"%{_escape_like(term)}%", escape="\\")).all()

    if len(candidates) > 1:
        exact = [event for event in candidates if event.title.strip().lower() == term.lower()]
        if len(exact) == 1:
            return exact

    return candidates


def ensure_capacity(db: Session, event: ClubEvent, member_id: UUID, guest_count: int) -> None:
    """Raise Conflict if an attending RSVP of 1 + guest_count seats would overfill the event"""
    if event.capacity is None:
        return

    seats_taken = count_seats_taken(db, event.id, exclude_member_id=member_id)
    if seats_taken + 1 + guest_count > event.capacity:
        db.rollback()
        logger.info(f"RSVP rejected at capacity: event={event.id} member={member_id}")
        raise Conflict("This event is at capacity")


def upsert_rsvp(
    db: Session,
    ctx: MemberContext,
    event_id: UUID,
    status: Union[RsvpStatus, str],
    guest_count: int = 0,
) -> EventRsvp:
    """
    Create or replace the caller's RSVP for an event

    Seats are counted as 1 + guest_count per attending RSVP, excluding the
    caller's own prior row so re-confirming never double-counts.

    Raises:
        InvalidInput: Unknown status or guest_count out of range
        NotFound: Event not in the caller's club
        InvalidState: Event not published, or already started
        Conflict: Attending would exceed the event capacity
    """
    try:
        status = RsvpStatus(status)
    except ValueError:
        raise InvalidInput(f"Invalid RSVP status: {status}")

    if status not in MEMBER_RSVP_STATUSES:
        raise InvalidInput(f"Invalid RSVP status: {status.value}")

    if not isinstance(guest_count, int) or not 0 <= guest_count <= MAX_GUEST_COUNT:
        raise InvalidInput(f"guest_count must be between 0 and {MAX_GUEST_COUNT}")

    query = db.query(ClubEvent).filter(ClubEvent.id == event_id, ClubEvent.club_id == ctx.club_id)
    if status == RsvpStatus.ATTENDING:
        # Serializes concurrent attending RSVPs per event on Postgres
        query = query.with_for_update()
    event = query.first()

    if not event:
        raise NotFound("Event not found")

    if event.status != EventStatus.PUBLISHED:
        raise InvalidState("This event is not accepting RSVPs")

    if event.start_date <= datetime.utcnow():
        raise InvalidState("This event has already started")

    if status == RsvpStatus.ATTENDING:
        ensure_capacity(db, event, ctx.member_id, guest_count)

    rsvp = get_member_rsvp(db, event.id, ctx.member_id)
    if rsvp is None:
        rsvp = EventRsvp(event_id=event.id, member_id=ctx.member_id, status=status, guest_count=guest_count)
        db.add(rsvp)
    else:
        rsvp.status = status
        rsvp.guest_count = guest_count

    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted this member's row first; replace it
        db.rollback()
        if status == RsvpStatus.ATTENDING:
            event = db.query(ClubEvent).filter(ClubEvent.id == event_id).with_for_update().one()
            ensure_capacity(db, event, ctx.member_id, guest_count)
        rsvp = get_member_rsvp(db, event.id, ctx.member_id)
        if rsvp is None:
            raise
        rsvp.status = status
        rsvp.guest_count = guest_count
        db.commit()

    db.refresh(rsvp)
    return rsvp
