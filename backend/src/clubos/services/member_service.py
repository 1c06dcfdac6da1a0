"""
Member Service
Resolves an authenticated identity to its member row and club context
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from clubos.exceptions import NotFound
from clubos.models.member import Member, MemberRole, TierLevel
from clubos.services.eligibility import is_golf_eligible


@dataclass(frozen=True)
class MemberContext:
    """
    The calling member plus the derived club/tier context.

    club_id is the tenant boundary: every query issued on behalf of this
    member must filter by it.
    """

    member: Member
    club_id: UUID
    tier_level: Optional[TierLevel]

    @property
    def member_id(self) -> UUID:
        return self.member.id

    @property
    def role(self) -> MemberRole:
        return self.member.role

    @property
    def is_admin(self) -> bool:
        return self.member.role == MemberRole.ADMIN

    @property
    def is_golf_eligible(self) -> bool:
        return is_golf_eligible(self.member.role, self.tier_level)


def resolve_member(db: Session, user_id: str, club_id: Optional[UUID] = None) -> MemberContext:
    """
    Look up the member row linked to an external auth identity

    Args:
        db: Database session
        user_id: Supabase auth user id
        club_id: Optional club to pin when the identity belongs to several clubs

    Returns:
        MemberContext for the member

    Raises:
        NotFound: If the identity is not provisioned into any (or the requested) club
    """
    query = db.query(Member).options(joinedload(Member.membership_tier)).filter(Member.user_id == str(user_id))

    if club_id:
        query = query.filter(Member.club_id == club_id)

    member = query.order_by(Member.created_at.asc()).first()

    if member is None:
        raise NotFound("Member not found")

    return MemberContext(member=member, club_id=member.club_id, tier_level=member.tier_level)
