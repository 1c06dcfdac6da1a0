"""
Availability Service
Merges a facility's weekly slot templates with the bookings on a given date
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from clubos.exceptions import Forbidden, NotFound
from clubos.models.booking import ACTIVE_BOOKING_STATUSES, Booking
from clubos.models.facility import BookingSlot, Facility, FacilityType
from clubos.services.member_service import MemberContext
from clubos.utils.datetime_utils import day_of_week, format_time

GOLF_INELIGIBLE_MESSAGE = "Golf booking requires a Premium, VIP, or Honorary membership"


@dataclass(frozen=True)
class SlotAvailability:
    start_time: str
    end_time: str
    is_available: bool
    booking_id: Optional[UUID] = None


def get_club_facility(db: Session, club_id: UUID, facility_id: UUID) -> Facility:
    """
    Fetch a facility only if it belongs to the caller's club

    Raises:
        NotFound: If no such facility exists in this club
    """
    facility = db.query(Facility).filter(Facility.id == facility_id, Facility.club_id == club_id).first()

    if not facility:
        raise NotFound("Facility not found")

    return facility


def list_available_slots(db: Session, facility_id: UUID, on_date: date) -> List[SlotAvailability]:
    """
    Compute the bookable windows of a facility on a date

    Slots come from the active templates for the date's weekday, in start_time
    order. A slot is taken when an active booking starts at the same minute.
    Read-only; safe to call repeatedly.
    """
    weekday = day_of_week(on_date)

    slots = (
        db.query(BookingSlot)
        .filter(
            BookingSlot.facility_id == facility_id,
            BookingSlot.day_of_week == weekday,
            BookingSlot.is_active.is_(True),
        )
        .order_by(BookingSlot.start_time.asc())
        .all()
    )

    if not slots:
        return []

    bookings = (
        db.query(Booking.id, Booking.start_time)
        .filter(
            Booking.facility_id == facility_id,
            Booking.date == on_date,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        )
        .all()
    )

    # Stored times may carry seconds; the lookup is minute-granular
    booked_times = {format_time(start_time): booking_id for booking_id, start_time in bookings}

    availability = []
    for slot in slots:
        start_key = format_time(slot.start_time)
        booking_id = booked_times.get(start_key)
        availability.append(
            SlotAvailability(
                start_time=start_key,
                end_time=format_time(slot.end_time),
                is_available=booking_id is None,
                booking_id=booking_id,
            )
        )

    return availability


def get_tee_times(db: Session, ctx: MemberContext, facility_id: UUID, on_date: date) -> Dict[str, Any]:
    """
    Slot availability for one of the caller's club facilities

    Golf facilities are only visible to golf-eligible members.

    Raises:
        NotFound: If the facility is not in the caller's club
        Forbidden: If the facility is golf and the caller is not eligible
    """
    facility = get_club_facility(db, ctx.club_id, facility_id)

    if facility.type == FacilityType.GOLF and not ctx.is_golf_eligible:
        raise Forbidden(GOLF_INELIGIBLE_MESSAGE)

    return {
        "facility": facility,
        "date": on_date,
        "day_of_week": day_of_week(on_date),
        "slots": list_available_slots(db, facility.id, on_date),
    }
