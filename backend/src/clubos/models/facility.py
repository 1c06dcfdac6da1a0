"""
Facility and Booking Slot Models
Bookable resources and their recurring weekly availability templates
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, Integer, String, Text, Time, Uuid
from sqlalchemy.orm import relationship

from clubos.database import Base


class FacilityType(str, enum.Enum):
    """Category of facility"""

    GOLF = "golf"
    TENNIS = "tennis"
    DINING = "dining"
    POOL = "pool"
    FITNESS = "fitness"
    OTHER = "other"


class Facility(Base):
    """
    Facility Model
    A bookable resource scoped to a club
    """

    __tablename__ = "facilities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    club_id = Column(Uuid, ForeignKey("clubs.id"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    type = Column(
        SQLEnum(FacilityType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        index=True,
    )
    description = Column(Text)
    capacity = Column(Integer)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    club = relationship("Club", back_populates="facilities")
    booking_slots = relationship("BookingSlot", back_populates="facility", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="facility")

    def __repr__(self):
        return f"<Facility(name='{self.name}', type='{self.type}')>"


class BookingSlot(Base):
    """
    Booking Slot Model
    A recurring weekly window (day_of_week 0=Sunday). Defines what can be booked,
    not what has been booked.
    """

    __tablename__ = "booking_slots"
    __table_args__ = (CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_booking_slots_day_of_week"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    facility_id = Column(Uuid, ForeignKey("facilities.id"), nullable=False, index=True)

    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    max_bookings = Column(Integer, default=1, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    facility = relationship("Facility", back_populates="booking_slots")

    def __repr__(self):
        return f"<BookingSlot(day={self.day_of_week}, start='{self.start_time}', end='{self.end_time}')>"
