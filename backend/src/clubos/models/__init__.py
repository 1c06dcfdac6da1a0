"""
Database Models Package
Exports all SQLAlchemy models
"""

from clubos.models.billing import Invoice, Payment
from clubos.models.booking import Booking
from clubos.models.club import Club
from clubos.models.event import ClubEvent, EventRsvp
from clubos.models.facility import BookingSlot, Facility
from clubos.models.member import Member, MembershipTier

__all__ = [
    "Club",
    "Member",
    "MembershipTier",
    "Facility",
    "BookingSlot",
    "Booking",
    "ClubEvent",
    "EventRsvp",
    "Invoice",
    "Payment",
]
