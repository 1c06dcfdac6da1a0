"""
Booking Model
A concrete reservation of a facility slot by a member
"""

import enum
import uuid
from datetime import datetime, time

from sqlalchemy import CheckConstraint, Column, Date, DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, Index, Integer, Text, Time, Uuid, text
from sqlalchemy.orm import relationship, validates

from clubos.database import Base


class BookingStatus(str, enum.Enum):
    """Status of booking"""

    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"


# Statuses that occupy a slot
ACTIVE_BOOKING_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.PENDING)

ACTIVE_SLOT_INDEX = "uq_bookings_active_slot"

_ACTIVE_SLOT_PREDICATE = text("status IN ('confirmed', 'pending')")


class Booking(Base):
    """
    Booking Model
    At most one active (confirmed/pending) row per (facility_id, date, start_time),
    enforced by a partial unique index.
    """

    __tablename__ = "bookings"
    __table_args__ = (
        Index(
            ACTIVE_SLOT_INDEX,
            "facility_id",
            "date",
            "start_time",
            unique=True,
            postgresql_where=_ACTIVE_SLOT_PREDICATE,
            sqlite_where=_ACTIVE_SLOT_PREDICATE,
        ),
        CheckConstraint("party_size BETWEEN 1 AND 20", name="ck_bookings_party_size"),
    )

    # Primary Key
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Associations
    club_id = Column(Uuid, ForeignKey("clubs.id"), nullable=False, index=True)
    facility_id = Column(Uuid, ForeignKey("facilities.id"), nullable=False, index=True)
    member_id = Column(Uuid, ForeignKey("members.id"), nullable=False, index=True)

    # When
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    party_size = Column(Integer, default=1, nullable=False)
    notes = Column(Text)

    status = Column(
        SQLEnum(BookingStatus, values_callable=lambda x: [e.value for e in x]),
        default=BookingStatus.CONFIRMED,
        nullable=False,
        index=True,
    )

    # Cancellation
    cancelled_at = Column(DateTime)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    facility = relationship("Facility", back_populates="bookings")
    member = relationship("Member", back_populates="bookings")

    @validates("start_time", "end_time")
    def truncate_to_minute(self, key, value):
        # Slots are minute-granular; the unique index compares stored values exactly
        if isinstance(value, time):
            return value.replace(second=0, microsecond=0)
        return value

    def __repr__(self):
        return f"<Booking(id='{self.id}', date='{self.date}', start='{self.start_time}', status='{self.status}')>"
