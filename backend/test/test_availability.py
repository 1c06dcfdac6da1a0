"""
Tests for Slot Availability and the Tee-Times Endpoint
"""

from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import update
from sqlalchemy.orm import Session

from clubos.exceptions import Forbidden, NotFound
from clubos.models.booking import Booking, BookingStatus
from clubos.services.availability_service import get_tee_times, list_available_slots
from clubos.utils.datetime_utils import day_of_week
from conftest import headers_for

SATURDAY = date(2026, 4, 4)
SUNDAY = date(2026, 4, 5)


class TestDayOfWeek:
    """Test the 0=Sunday weekday convention"""

    def test_sunday_is_zero(self):
        assert day_of_week(SUNDAY) == 0

    def test_saturday_is_six(self):
        assert day_of_week(SATURDAY) == 6

    def test_monday_is_one(self):
        assert day_of_week(date(2026, 4, 6)) == 1


class TestListAvailableSlots:
    """Test merging slot templates with bookings"""

    def test_slots_in_start_time_order(self, db: Session, golf_course, make_slot):
        make_slot(golf_course, 6, time(8, 20), time(8, 30))
        make_slot(golf_course, 6, time(8, 0), time(8, 10))
        make_slot(golf_course, 6, time(8, 10), time(8, 20))

        slots = list_available_slots(db, golf_course.id, SATURDAY)

        assert [slot.start_time for slot in slots] == ["08:00", "08:10", "08:20"]
        assert [slot.end_time for slot in slots] == ["08:10", "08:20", "08:30"]
        assert all(slot.is_available for slot in slots)

    def test_booked_slot_marked_unavailable(self, db: Session, golf_course, premium_member, make_slot, make_booking):
        make_slot(golf_course, 6, time(8, 0), time(8, 10))
        make_slot(golf_course, 6, time(8, 10), time(8, 20))
        booking = make_booking(golf_course, premium_member, SATURDAY, time(8, 10), time(8, 20))

        slots = list_available_slots(db, golf_course.id, SATURDAY)

        assert slots[0].is_available is True
        assert slots[0].booking_id is None
        assert slots[1].is_available is False
        assert slots[1].booking_id == booking.id

    def test_booking_stored_with_seconds_holds_its_minute(
        self, db: Session, golf_course, premium_member, make_slot, make_booking
    ):
        make_slot(golf_course, 6, time(8, 0), time(8, 10))
        booking = make_booking(golf_course, premium_member, SATURDAY, time(8, 0), time(8, 10))
        # Rows written outside the ORM may carry seconds
        db.execute(update(Booking).where(Booking.id == booking.id).values(start_time=time(8, 0, 30)))
        db.commit()

        slots = list_available_slots(db, golf_course.id, SATURDAY)

        assert slots[0].start_time == "08:00"
        assert slots[0].is_available is False
        assert slots[0].booking_id == booking.id

    def test_cancelled_booking_frees_slot(self, db: Session, golf_course, premium_member, make_slot, make_booking):
        make_slot(golf_course, 6, time(8, 0), time(8, 10))
        make_booking(golf_course, premium_member, SATURDAY, time(8, 0), time(8, 10), status=BookingStatus.CANCELLED)

        slots = list_available_slots(db, golf_course.id, SATURDAY)

        assert slots[0].is_available is True

    def test_other_weekday_and_inactive_templates_ignored(self, db: Session, golf_course, make_slot):
        make_slot(golf_course, 0, time(9, 0), time(9, 10))
        make_slot(golf_course, 6, time(9, 0), time(9, 10), is_active=False)

        assert list_available_slots(db, golf_course.id, SATURDAY) == []

    def test_sunday_templates_use_zero(self, db: Session, golf_course, make_slot):
        make_slot(golf_course, 0, time(7, 0), time(7, 10))

        slots = list_available_slots(db, golf_course.id, SUNDAY)

        assert len(slots) == 1
        assert slots[0].start_time == "07:00"

    def test_no_templates_returns_empty(self, db: Session, golf_course):
        assert list_available_slots(db, golf_course.id, SATURDAY) == []


class TestGetTeeTimes:
    """Test the tee-times service guard"""

    def test_standard_member_forbidden_on_golf(self, db: Session, golf_course, standard_member, member_ctx):
        with pytest.raises(Forbidden):
            get_tee_times(db, member_ctx(standard_member), golf_course.id, SATURDAY)

    def test_facility_from_other_club_not_found(self, db: Session, other_club, make_facility, premium_member, member_ctx):
        foreign = make_facility(other_club)

        with pytest.raises(NotFound):
            get_tee_times(db, member_ctx(premium_member), foreign.id, SATURDAY)

    def test_eligible_member_sees_slots(self, db: Session, golf_course, premium_member, member_ctx, make_slot):
        make_slot(golf_course, 6, time(8, 0), time(8, 10))

        result = get_tee_times(db, member_ctx(premium_member), golf_course.id, SATURDAY)

        assert result["facility"].id == golf_course.id
        assert result["day_of_week"] == 6
        assert len(result["slots"]) == 1


class TestTeeTimesRoute:
    """Test GET /bookings/tee-times"""

    def test_standard_member_golf_then_dining(
        self, client: TestClient, golf_course, dining_room, standard_member, make_slot
    ):
        """Golf is forbidden for a standard tier, dining is open"""
        make_slot(dining_room, 6, time(18, 0), time(19, 0))
        headers = headers_for(standard_member)

        response = client.get(
            "/bookings/tee-times",
            params={"facility_id": str(golf_course.id), "date": "2026-04-04"},
            headers=headers,
        )
        assert response.status_code == 403

        response = client.get(
            "/bookings/tee-times",
            params={"facility_id": str(dining_room.id), "date": "2026-04-04"},
            headers=headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["facility"]["id"] == str(dining_room.id)
        assert data["date"] == "2026-04-04"
        assert data["day_of_week"] == 6
        assert data["slots"] == [
            {"start_time": "18:00", "end_time": "19:00", "is_available": True, "booking_id": None}
        ]

    def test_bad_date_format(self, client: TestClient, golf_course, auth_headers):
        response = client.get(
            "/bookings/tee-times",
            params={"facility_id": str(golf_course.id), "date": "04/04/2026"},
            headers=auth_headers,
        )

        assert response.status_code == 400

    def test_missing_facility_id(self, client: TestClient, auth_headers):
        response = client.get("/bookings/tee-times", params={"date": "2026-04-04"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid input"

    def test_unknown_facility(self, client: TestClient, test_club, auth_headers):
        response = client.get(
            "/bookings/tee-times",
            params={"facility_id": "00000000-0000-0000-0000-000000000000", "date": "2026-04-04"},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Facility not found"
