"""
Tests for Pydantic Schemas
"""

from datetime import date, time
from uuid import uuid4

import pytest
from pydantic import ValidationError

from clubos.models.booking import BookingStatus
from clubos.schemas.booking import BookingCreate, BookingResponse
from clubos.schemas.chat import ChatRequest
from clubos.schemas.event import RsvpRequest


class TestBookingSchemas:
    def test_create_defaults(self):
        booking = BookingCreate(facility_id=uuid4(), date="2026-04-04", start_time="08:00", end_time="08:10")

        assert booking.party_size == 1
        assert booking.notes is None

    @pytest.mark.parametrize(
        "field,value",
        [
            ("date", "2026-4-4"),
            ("date", "2026-04-04\n"),
            ("start_time", "8:00"),
            ("start_time", "08:00\n"),
            ("end_time", "\u0660\u0668:\u0661\u0660"),
            ("party_size", 21),
        ],
    )
    def test_create_rejects(self, field, value):
        data = {"facility_id": uuid4(), "date": "2026-04-04", "start_time": "08:00", "end_time": "08:10"}
        data[field] = value

        with pytest.raises(ValidationError):
            BookingCreate(**data)

    def test_response_formats_times(self):
        response = BookingResponse(
            id=uuid4(),
            club_id=uuid4(),
            facility_id=uuid4(),
            member_id=uuid4(),
            date=date(2026, 4, 4),
            start_time=time(8, 0, 30),
            end_time="08:10:00",
            party_size=2,
            status=BookingStatus.CONFIRMED,
        )

        assert response.start_time == "08:00"
        assert response.end_time == "08:10"


class TestRsvpRequest:
    def test_default_guest_count(self):
        assert RsvpRequest(event_id=uuid4(), status="attending").guest_count == 0

    @pytest.mark.parametrize("guest_count", [-1, 11])
    def test_guest_bounds(self, guest_count):
        with pytest.raises(ValidationError):
            RsvpRequest(event_id=uuid4(), status="attending", guest_count=guest_count)


class TestChatRequest:
    def test_content_length_limit(self):
        with pytest.raises(ValidationError):
            ChatRequest(messages=[{"role": "user", "content": "x" * 4001}])

    def test_valid_conversation(self):
        request = ChatRequest(
            messages=[
                {"role": "user", "content": "Any events?"},
                {"role": "assistant", "content": "A wine tasting on Friday."},
                {"role": "user", "content": "Sign me up"},
            ]
        )

        assert len(request.messages) == 3
