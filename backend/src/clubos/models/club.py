"""
Club Model
The tenant boundary: every other row belongs to exactly one club
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text, Uuid
from sqlalchemy.orm import relationship

from clubos.database import Base


class Club(Base):
    """
    Club Model
    Created at signup, rarely mutated, never deleted in-flow
    """

    __tablename__ = "clubs"

    # Primary Key
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Basic Information
    name = Column(String(200), nullable=False, index=True)
    slug = Column(String(100), unique=True, nullable=False, index=True)  # URL-friendly name
    logo_url = Column(String(500))

    # Contact
    address = Column(Text)
    phone = Column(String(20))
    email = Column(String(255))
    website = Column(String(255))

    timezone = Column(String(64), default="America/New_York", nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    members = relationship("Member", back_populates="club")
    membership_tiers = relationship("MembershipTier", back_populates="club")
    facilities = relationship("Facility", back_populates="club")

    def __repr__(self):
        return f"<Club(name='{self.name}', slug='{self.slug}')>"
