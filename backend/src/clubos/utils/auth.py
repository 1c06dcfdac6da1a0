"""
Authentication Utilities
Verification of Supabase-issued access tokens
"""

import logging

import jwt

from clubos.config import settings
from clubos.exceptions import Unauthenticated

logger = logging.getLogger(__name__)


def decode_access_token(token: str) -> str:
    """
    Decode a Supabase access token and return the external user id

    Args:
        token: Bearer token from the Authorization header

    Returns:
        The token subject (Supabase auth user id)

    Raises:
        Unauthenticated: If the token is missing, expired, or has a bad signature
    """
    if not settings.SUPABASE_JWT_SECRET:
        logger.error("SUPABASE_JWT_SECRET is not configured; rejecting all tokens")
        raise Unauthenticated("Unauthorized")

    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.ALGORITHM],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Token has expired")
    except jwt.PyJWTError as e:
        logger.info(f"Rejected access token: {str(e)}")
        raise Unauthenticated("Could not validate credentials")

    user_id = payload.get("sub")
    if not user_id:
        raise Unauthenticated("Could not validate credentials")

    return str(user_id)
