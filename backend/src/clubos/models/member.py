"""
Member and Membership Tier Models
A member is a user's identity within one club
"""

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import JSON, Boolean, Column, Date, DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import Float, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from clubos.database import Base


class MemberRole(str, enum.Enum):
    """Role of a member inside their club"""

    ADMIN = "admin"
    STAFF = "staff"
    MEMBER = "member"


class MemberStatus(str, enum.Enum):
    """Lifecycle status; members are never hard-deleted"""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    PENDING = "pending"


class TierLevel(str, enum.Enum):
    """Membership tier level"""

    STANDARD = "standard"
    PREMIUM = "premium"
    VIP = "vip"
    HONORARY = "honorary"


class MembershipTier(Base):
    """
    Membership Tier Model
    Defines a tier level and its dues
    """

    __tablename__ = "membership_tiers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    club_id = Column(Uuid, ForeignKey("clubs.id"), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    level = Column(
        SQLEnum(TierLevel, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    description = Column(Text)
    monthly_dues = Column(Float, nullable=False, default=0)
    annual_dues = Column(Float)
    benefits = Column(JSON, default=list)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    club = relationship("Club", back_populates="membership_tiers")
    members = relationship("Member", back_populates="membership_tier")

    def __repr__(self):
        return f"<MembershipTier(name='{self.name}', level='{self.level}')>"


class Member(Base):
    """
    Member Model
    Exactly one row per (club, external auth identity)
    """

    __tablename__ = "members"
    __table_args__ = (UniqueConstraint("club_id", "user_id", name="uq_members_club_user"),)

    # Primary Key
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Associations
    club_id = Column(Uuid, ForeignKey("clubs.id"), nullable=False, index=True)
    user_id = Column(String(255), nullable=False, index=True)  # Supabase auth user id
    membership_tier_id = Column(Uuid, ForeignKey("membership_tiers.id"), nullable=True)

    # Identity
    member_number = Column(String(50))
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20))

    # Role & Status
    role = Column(
        SQLEnum(MemberRole, values_callable=lambda x: [e.value for e in x]),
        default=MemberRole.MEMBER,
        nullable=False,
        index=True,
    )
    status = Column(
        SQLEnum(MemberStatus, values_callable=lambda x: [e.value for e in x]),
        default=MemberStatus.ACTIVE,
        nullable=False,
    )

    # Billing mirror (written by Stripe webhooks only)
    stripe_customer_id = Column(String(255), index=True)
    stripe_subscription_id = Column(String(255))
    subscription_status = Column(String(50))

    join_date = Column(Date, default=date.today)
    notes = Column(Text)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    club = relationship("Club", back_populates="members")
    membership_tier = relationship("MembershipTier", back_populates="members")
    bookings = relationship("Booking", back_populates="member")

    def __repr__(self):
        return f"<Member(name='{self.first_name} {self.last_name}', role='{self.role}')>"

    @property
    def tier_level(self):
        """Tier level of the member, or None when no tier is assigned"""
        return self.membership_tier.level if self.membership_tier else None

    @property
    def is_admin(self) -> bool:
        return self.role == MemberRole.ADMIN
