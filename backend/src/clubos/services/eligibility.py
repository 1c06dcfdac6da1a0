"""
Golf Eligibility
Derived permission to book golf facilities, computed from role and tier level
"""

from typing import Optional, Union

from clubos.models.member import MemberRole, TierLevel

GOLF_ELIGIBLE_ROLES = (MemberRole.ADMIN, MemberRole.STAFF)
GOLF_ELIGIBLE_TIERS = (TierLevel.PREMIUM, TierLevel.VIP, TierLevel.HONORARY)


def is_golf_eligible(role: Union[MemberRole, str], tier_level: Optional[Union[TierLevel, str]]) -> bool:
    """
    Admins and staff are always eligible (they manage bookings).
    Members are eligible iff their tier level is premium, vip, or honorary.
    """
    if role in GOLF_ELIGIBLE_ROLES:
        return True
    return tier_level is not None and tier_level in GOLF_ELIGIBLE_TIERS
