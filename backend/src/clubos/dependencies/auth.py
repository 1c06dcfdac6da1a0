"""
Authentication Dependencies
FastAPI dependencies that turn a bearer token into the calling member
"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from clubos.database import get_db
from clubos.exceptions import InvalidInput, Unauthenticated
from clubos.services.member_service import MemberContext, resolve_member
from clubos.utils.auth import decode_access_token

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Get the authenticated Supabase user id from the bearer token

    Raises:
        Unauthenticated: If no token is sent or it does not verify
    """
    if credentials is None:
        raise Unauthenticated("Not authenticated")

    return decode_access_token(credentials.credentials)


def parse_club_header(x_club_id: Optional[str]) -> Optional[UUID]:
    """Club id pinned by the X-Club-Id header, or None when absent"""
    if not x_club_id:
        return None

    try:
        return UUID(x_club_id)
    except ValueError:
        raise InvalidInput("Invalid X-Club-Id header")


async def get_current_member(
    user_id: str = Depends(get_current_user_id),
    x_club_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> MemberContext:
    """
    Resolve the caller to a member of exactly one club

    Args:
        user_id: Authenticated user id
        x_club_id: Optional X-Club-Id header selecting the club when the
            identity belongs to several
        db: Database session

    Raises:
        InvalidInput: Malformed X-Club-Id
        NotFound: No member row for this identity (in the selected club)
    """
    return resolve_member(db, user_id, parse_club_header(x_club_id))
