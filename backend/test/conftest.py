"""
Pytest Configuration and Fixtures
"""

from datetime import datetime, time, timedelta
from typing import Callable, Generator, Optional
from uuid import uuid4

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from clubos.config import settings
from clubos.database import Base, get_db
from clubos.main import app  # This is the FastAPI instance
from clubos.models.booking import Booking, BookingStatus
from clubos.models.club import Club
from clubos.models.event import ClubEvent, EventStatus
from clubos.models.facility import BookingSlot, Facility, FacilityType
from clubos.models.member import Member, MemberRole, MembershipTier, TierLevel
from clubos.services.member_service import MemberContext, resolve_member

TEST_JWT_SECRET = "test-supabase-jwt-secret-with-enough-length-for-hs256"
TEST_WEBHOOK_SECRET = "whsec_test_secret"

settings.SUPABASE_JWT_SECRET = TEST_JWT_SECRET
settings.STRIPE_WEBHOOK_SECRET = TEST_WEBHOOK_SECRET

# In-memory SQLite shared across the session's connections
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema per test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override"""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


def make_token(user_id: str, expires_in: timedelta = timedelta(minutes=30), secret: str = TEST_JWT_SECRET) -> str:
    """Supabase-shaped access token"""
    to_encode = {
        "sub": user_id,
        "aud": settings.SUPABASE_JWT_AUDIENCE,
        "role": "authenticated",
        "exp": datetime.utcnow() + expires_in,
    }
    return jwt.encode(to_encode, secret, algorithm="HS256")


def headers_for(member: Member) -> dict:
    return {"Authorization": f"Bearer {make_token(member.user_id)}"}


@pytest.fixture
def test_club(db: Session) -> Club:
    """Create a test club"""
    unique_id = str(uuid4())[:8]

    club = Club(
        name="Willow Creek Country Club",
        slug=f"willow-creek-{unique_id}",
        email=f"office-{unique_id}@willowcreek.com",
        phone="+15555550100",
        address="1 Fairway Drive",
    )
    db.add(club)
    db.commit()
    db.refresh(club)
    return club


@pytest.fixture
def other_club(db: Session) -> Club:
    """A second tenant"""
    unique_id = str(uuid4())[:8]

    club = Club(name="Harbor Point Club", slug=f"harbor-point-{unique_id}")
    db.add(club)
    db.commit()
    db.refresh(club)
    return club


@pytest.fixture
def make_tier(db: Session) -> Callable[..., MembershipTier]:
    def _make_tier(club: Club, level: TierLevel) -> MembershipTier:
        tier = MembershipTier(club_id=club.id, name=level.value.title(), level=level, monthly_dues=250.0)
        db.add(tier)
        db.commit()
        db.refresh(tier)
        return tier

    return _make_tier


@pytest.fixture
def make_member(db: Session, make_tier) -> Callable[..., Member]:
    """Factory for members; tier_level=None leaves the member without a tier"""

    def _make_member(
        club: Club,
        role: MemberRole = MemberRole.MEMBER,
        tier_level: Optional[TierLevel] = TierLevel.STANDARD,
        user_id: Optional[str] = None,
        first_name: str = "Pat",
    ) -> Member:
        unique_id = str(uuid4())[:8]
        tier = make_tier(club, tier_level) if tier_level else None

        member = Member(
            club_id=club.id,
            user_id=user_id or str(uuid4()),
            membership_tier_id=tier.id if tier else None,
            first_name=first_name,
            last_name="Member",
            email=f"member-{unique_id}@example.com",
            role=role,
        )
        db.add(member)
        db.commit()
        db.refresh(member)
        return member

    return _make_member


@pytest.fixture
def member_ctx(db: Session) -> Callable[[Member], MemberContext]:
    def _member_ctx(member: Member) -> MemberContext:
        return resolve_member(db, member.user_id, member.club_id)

    return _member_ctx


@pytest.fixture
def standard_member(test_club: Club, make_member) -> Member:
    return make_member(test_club, tier_level=TierLevel.STANDARD, first_name="Sam")


@pytest.fixture
def premium_member(test_club: Club, make_member) -> Member:
    return make_member(test_club, tier_level=TierLevel.PREMIUM, first_name="Alex")


@pytest.fixture
def admin_member(test_club: Club, make_member) -> Member:
    return make_member(test_club, role=MemberRole.ADMIN, tier_level=None, first_name="Jordan")


@pytest.fixture
def auth_headers(premium_member: Member) -> dict:
    """Authentication headers for a golf-eligible member"""
    return headers_for(premium_member)


@pytest.fixture
def make_facility(db: Session) -> Callable[..., Facility]:
    def _make_facility(club: Club, facility_type: FacilityType = FacilityType.GOLF, name: Optional[str] = None):
        facility = Facility(club_id=club.id, name=name or f"{facility_type.value.title()} 1", type=facility_type)
        db.add(facility)
        db.commit()
        db.refresh(facility)
        return facility

    return _make_facility


@pytest.fixture
def golf_course(test_club: Club, make_facility) -> Facility:
    return make_facility(test_club, FacilityType.GOLF, "Championship Course")


@pytest.fixture
def dining_room(test_club: Club, make_facility) -> Facility:
    return make_facility(test_club, FacilityType.DINING, "Main Dining Room")


@pytest.fixture
def make_slot(db: Session) -> Callable[..., BookingSlot]:
    def _make_slot(facility: Facility, day_of_week: int, start: time, end: time, is_active: bool = True):
        slot = BookingSlot(
            facility_id=facility.id,
            day_of_week=day_of_week,
            start_time=start,
            end_time=end,
            is_active=is_active,
        )
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    return _make_slot


@pytest.fixture
def make_booking(db: Session) -> Callable[..., Booking]:
    def _make_booking(
        facility: Facility,
        member: Member,
        on_date,
        start: time,
        end: time,
        status: BookingStatus = BookingStatus.CONFIRMED,
    ) -> Booking:
        booking = Booking(
            club_id=facility.club_id,
            facility_id=facility.id,
            member_id=member.id,
            date=on_date,
            start_time=start,
            end_time=end,
            party_size=1,
            status=status,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make_booking


@pytest.fixture
def make_event(db: Session) -> Callable[..., ClubEvent]:
    def _make_event(
        club: Club,
        title: str = "Wine Tasting",
        capacity: Optional[int] = None,
        status: EventStatus = EventStatus.PUBLISHED,
        starts_in: timedelta = timedelta(days=7),
    ) -> ClubEvent:
        start = datetime.utcnow() + starts_in
        event = ClubEvent(
            club_id=club.id,
            title=title,
            description=f"{title} at the clubhouse",
            location="Clubhouse",
            start_date=start,
            end_date=start + timedelta(hours=2),
            capacity=capacity,
            price=45.0,
            status=status,
        )
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    return _make_event
