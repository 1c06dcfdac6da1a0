"""
Booking Service
Creation, cancellation and listing of facility bookings
"""

import logging
from datetime import date, datetime, time
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from clubos.exceptions import Conflict, Forbidden, InvalidInput, InvalidState, NotFound
from clubos.models.booking import ACTIVE_BOOKING_STATUSES, ACTIVE_SLOT_INDEX, Booking, BookingStatus
from clubos.models.facility import Facility, FacilityType
from clubos.services.availability_service import GOLF_INELIGIBLE_MESSAGE, get_club_facility
from clubos.services.member_service import MemberContext
from clubos.utils.datetime_utils import parse_date, parse_time, utc_today

logger = logging.getLogger(__name__)

MIN_PARTY_SIZE = 1
MAX_PARTY_SIZE = 20
MAX_GOLF_PARTY_SIZE = 4

ALREADY_BOOKED_MESSAGE = "This tee time is already booked"


def check_double_booking(db: Session, facility_id: UUID, on_date: date, start_time: time) -> bool:
    """
    Check if an active booking already holds this slot.

    Rows are compared by minute, so a stored 08:00:30 holds the 08:00 slot.
    Advisory only: the partial unique index on (facility_id, date, start_time)
    is what actually prevents two active rows.
    """
    minute = start_time.replace(second=0, microsecond=0)
    existing_booking = (
        db.query(Booking.id)
        .filter(
            Booking.facility_id == facility_id,
            Booking.date == on_date,
            Booking.start_time >= minute,
            Booking.start_time <= minute.replace(second=59, microsecond=999999),
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        )
        .first()
    )

    return existing_booking is not None


def is_slot_conflict(error: IntegrityError) -> bool:
    """True when the violated constraint is the active-slot unique index"""
    diag = getattr(error.orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None)
    if constraint_name:
        return constraint_name == ACTIVE_SLOT_INDEX

    # SQLite names the columns instead of the index
    message = str(error.orig)
    return ACTIVE_SLOT_INDEX in message or "UNIQUE constraint failed: bookings.facility_id" in message


def create_booking(
    db: Session,
    ctx: MemberContext,
    facility_id: UUID,
    booking_date: Union[str, date],
    start_time: Union[str, time],
    end_time: Union[str, time],
    party_size: int = 1,
    notes: Optional[str] = None,
) -> Booking:
    """
    Create a confirmed booking for the calling member

    Checks run in order and stop at the first failure: input shape, facility
    in the caller's club, golf eligibility and golf party size, slot free.

    Raises:
        InvalidInput: Bad date/time shape or party size
        NotFound: Facility not in the caller's club
        Forbidden: Golf facility and caller not golf-eligible
        Conflict: Slot already held by an active booking
    """
    on_date = parse_date(booking_date)
    start = parse_time(start_time, "start_time")
    end = parse_time(end_time, "end_time")

    if not isinstance(party_size, int) or not MIN_PARTY_SIZE <= party_size <= MAX_PARTY_SIZE:
        raise InvalidInput(f"party_size must be between {MIN_PARTY_SIZE} and {MAX_PARTY_SIZE}")

    facility = get_club_facility(db, ctx.club_id, facility_id)

    if facility.type == FacilityType.GOLF:
        if not ctx.is_golf_eligible:
            raise Forbidden(GOLF_INELIGIBLE_MESSAGE)

        if party_size > MAX_GOLF_PARTY_SIZE:
            raise InvalidInput(f"Golf tee times support a maximum of {MAX_GOLF_PARTY_SIZE} players")

    if check_double_booking(db, facility.id, on_date, start):
        raise Conflict(ALREADY_BOOKED_MESSAGE)

    booking = Booking(
        club_id=ctx.club_id,
        facility_id=facility.id,
        member_id=ctx.member_id,
        date=on_date,
        start_time=start,
        end_time=end,
        party_size=party_size,
        notes=notes,
        status=BookingStatus.CONFIRMED,
    )

    db.add(booking)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not is_slot_conflict(e):
            raise
        # Lost the race to a concurrent booking of the same slot
        logger.warning(f"Double booking rejected by constraint: facility={facility.id} date={on_date} start={start}")
        raise Conflict(ALREADY_BOOKED_MESSAGE)

    db.refresh(booking)
    logger.info(f"Booking {booking.id} confirmed for member {ctx.member_id}")

    return booking


def cancel_booking(db: Session, ctx: MemberContext, booking_id: UUID) -> Booking:
    """
    Cancel a booking owned by the caller (admins may cancel any booking in their club)

    Raises:
        NotFound: Booking not in the caller's club
        Forbidden: Caller neither owns the booking nor is an admin
        InvalidState: Booking not active, or dated in the past
    """
    booking = db.query(Booking).filter(Booking.id == booking_id, Booking.club_id == ctx.club_id).first()

    if not booking:
        raise NotFound("Booking not found")

    if booking.member_id != ctx.member_id and not ctx.is_admin:
        raise Forbidden("You can only cancel your own bookings")

    if booking.status not in ACTIVE_BOOKING_STATUSES:
        raise InvalidState("This booking cannot be cancelled")

    if booking.date < utc_today():
        raise InvalidState("Cannot cancel past bookings")

    booking.status = BookingStatus.CANCELLED
    booking.cancelled_at = datetime.utcnow()

    db.commit()
    db.refresh(booking)

    return booking


def list_my_bookings(db: Session, ctx: MemberContext) -> List[Booking]:
    """Upcoming active bookings of the caller, soonest first"""
    return (
        db.query(Booking)
        .options(joinedload(Booking.facility), joinedload(Booking.member))
        .filter(
            Booking.member_id == ctx.member_id,
            Booking.club_id == ctx.club_id,
            Booking.date >= utc_today(),
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        )
        .order_by(Booking.date.asc(), Booking.start_time.asc())
        .all()
    )


def list_facilities(db: Session, ctx: MemberContext, facility_type: Optional[FacilityType] = None) -> List[Facility]:
    """Active facilities of the caller's club, by name"""
    query = db.query(Facility).filter(Facility.club_id == ctx.club_id, Facility.is_active.is_(True))

    if facility_type:
        query = query.filter(Facility.type == facility_type)

    return query.order_by(Facility.name.asc()).all()
