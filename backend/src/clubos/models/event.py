"""
Event Models
Club events and member RSVPs
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import Float, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from clubos.database import Base


class EventStatus(str, enum.Enum):
    """Lifecycle of an event"""

    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class RsvpStatus(str, enum.Enum):
    """Member's answer to an event"""

    ATTENDING = "attending"
    DECLINED = "declined"
    MAYBE = "maybe"
    WAITLISTED = "waitlisted"


class ClubEvent(Base):
    """
    Club Event Model
    A schedulable happening with optional capacity and price
    """

    __tablename__ = "events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    club_id = Column(Uuid, ForeignKey("clubs.id"), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text)
    location = Column(String(255))
    image_url = Column(String(500))

    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime)

    capacity = Column(Integer)  # None = unlimited
    price = Column(Float)

    status = Column(
        SQLEnum(EventStatus, values_callable=lambda x: [e.value for e in x]),
        default=EventStatus.DRAFT,
        nullable=False,
        index=True,
    )

    created_by = Column(Uuid, ForeignKey("members.id"), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    rsvps = relationship("EventRsvp", back_populates="event", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<ClubEvent(title='{self.title}', status='{self.status}', start='{self.start_date}')>"


class EventRsvp(Base):
    """
    Event RSVP Model
    One row per (event, member); cancelling an RSVP sets it to declined
    """

    __tablename__ = "event_rsvps"
    __table_args__ = (
        UniqueConstraint("event_id", "member_id", name="uq_event_rsvps_event_member"),
        CheckConstraint("guest_count >= 0", name="ck_event_rsvps_guest_count"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id = Column(Uuid, ForeignKey("events.id"), nullable=False, index=True)
    member_id = Column(Uuid, ForeignKey("members.id"), nullable=False, index=True)

    status = Column(
        SQLEnum(RsvpStatus, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        index=True,
    )
    guest_count = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    event = relationship("ClubEvent", back_populates="rsvps")

    def __repr__(self):
        return f"<EventRsvp(event_id='{self.event_id}', member_id='{self.member_id}', status='{self.status}')>"
