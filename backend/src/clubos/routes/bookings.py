"""
Booking API Routes
Tee-time availability, booking creation and cancellation
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from clubos.database import get_db
from clubos.dependencies.auth import get_current_member
from clubos.schemas.booking import BookingCreate, BookingEnvelope, BookingList
from clubos.schemas.facility import TeeTimesResponse
from clubos.services import availability_service, booking_service
from clubos.services.member_service import MemberContext
from clubos.utils.datetime_utils import parse_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.get("/tee-times", response_model=TeeTimesResponse)
def get_tee_times(
    facility_id: UUID = Query(...),
    date: str = Query(..., description="YYYY-MM-DD"),
    ctx: MemberContext = Depends(get_current_member),
    db: Session = Depends(get_db),
):
    """Slot availability for a facility on a date"""
    return availability_service.get_tee_times(db, ctx, facility_id, parse_date(date))


@router.get("/my", response_model=BookingList)
def list_my_bookings(
    ctx: MemberContext = Depends(get_current_member),
    db: Session = Depends(get_db),
):
    """Upcoming active bookings of the caller"""
    return {"bookings": booking_service.list_my_bookings(db, ctx)}


@router.post("", response_model=BookingEnvelope, status_code=status.HTTP_201_CREATED)
def create_booking(
    booking_data: BookingCreate,
    ctx: MemberContext = Depends(get_current_member),
    db: Session = Depends(get_db),
):
    """Book a slot for the caller"""
    booking = booking_service.create_booking(
        db,
        ctx,
        facility_id=booking_data.facility_id,
        booking_date=booking_data.date,
        start_time=booking_data.start_time,
        end_time=booking_data.end_time,
        party_size=booking_data.party_size,
        notes=booking_data.notes,
    )

    return {"booking": booking}


@router.patch("/{booking_id}/cancel", response_model=BookingEnvelope)
def cancel_booking(
    booking_id: UUID,
    ctx: MemberContext = Depends(get_current_member),
    db: Session = Depends(get_db),
):
    """Cancel one of the caller's bookings"""
    booking = booking_service.cancel_booking(db, ctx, booking_id)
    logger.info(f"Booking {booking.id} cancelled by member {ctx.member_id}")

    return {"booking": booking}
