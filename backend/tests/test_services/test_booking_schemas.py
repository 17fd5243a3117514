"""Tests for booking request/response schemas."""

import uuid
from datetime import date, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from hoteldesk.schemas.booking import BookingCreate, BookingResponse, BookingUpdate
from hoteldesk.schemas.room import EmbeddedRoom


class TestBookingCreate:
    def test_defaults(self):
        body = BookingCreate(
            room_id=str(uuid.uuid4()),
            customer_name="Aiko Tanaka",
            customer_email="aiko@example.jp",
            customer_phone="+81 90 1234 5678",
        )
        assert body.status == "confirmed"
        assert body.number_of_guests == 1
        assert body.total_price is None
        assert body.check_in is None

    def test_embedded_room_parsed(self):
        room_id = str(uuid.uuid4())
        body = BookingCreate(
            room_id={"id": room_id, "room_number": "101", "amenities": ["wifi"]},
            customer_name="Aiko Tanaka",
            customer_email="aiko@example.jp",
            customer_phone="+81 90 1234 5678",
        )
        assert isinstance(body.room_id, EmbeddedRoom)
        assert body.room_id.id == room_id

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            BookingCreate(
                customer_name="Aiko Tanaka",
                customer_email="aiko@example.jp",
                customer_phone="+81 90 1234 5678",
                status="pending",
            )

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            BookingCreate(
                customer_name="Aiko Tanaka",
                customer_email="aiko@example.jp",
                customer_phone="+81 90 1234 5678",
                total_price=Decimal("-1"),
            )


class TestBookingUpdate:
    def test_explicit_null_for_required_field_rejected(self):
        with pytest.raises(ValidationError, match="customer_name"):
            BookingUpdate(customer_name=None)

    def test_explicit_null_for_optional_field_allowed(self):
        update = BookingUpdate(special_requests=None)
        assert update.changes() == {"special_requests": None}

    def test_changes_only_contains_sent_fields(self):
        update = BookingUpdate(hotel_id=str(uuid.uuid4()), status="completed", number_of_guests=2)
        assert update.changes() == {"status": "completed", "number_of_guests": 2}

    def test_empty_update_has_no_changes(self):
        assert BookingUpdate().changes() == {}


class TestBookingResponse:
    def test_dates_emitted_as_midnight_timestamps(self):
        now = datetime(2025, 5, 1, 12, 0)
        response = BookingResponse(
            id=uuid.uuid4(),
            hotel_id=uuid.uuid4(),
            room_id=uuid.uuid4(),
            room_number="101",
            customer_name="Aiko Tanaka",
            customer_email="aiko@example.jp",
            customer_phone="+81 90 1234 5678",
            check_in=date(2025, 6, 1),
            check_out=date(2025, 6, 5),
            number_of_guests=1,
            total_price=Decimal("400.00"),
            status="confirmed",
            created_at=now,
            updated_at=now,
        )
        data = response.model_dump(mode="json")
        assert data["check_in"] == "2025-06-01T00:00:00"
        assert data["check_out"] == "2025-06-05T00:00:00"
