"""
Facility API Routes
Listing of the caller's club facilities
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from clubos.database import get_db
from clubos.dependencies.auth import get_current_member
from clubos.models.facility import FacilityType
from clubos.schemas.facility import FacilityList
from clubos.services import booking_service
from clubos.services.member_service import MemberContext

router = APIRouter(prefix="/facilities", tags=["Facilities"])


@router.get("", response_model=FacilityList)
def list_facilities(
    facility_type: Optional[FacilityType] = Query(None, alias="type"),
    ctx: MemberContext = Depends(get_current_member),
    db: Session = Depends(get_db),
):
    """List active facilities, optionally filtered by type"""
    return {"facilities": booking_service.list_facilities(db, ctx, facility_type)}
