"""Tests for overlap detection and availability probes."""

import uuid
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from hoteldesk.exceptions import InvalidDateRangeError, InvalidReferenceError, MissingDatesError
from hoteldesk.models.booking import Booking
from hoteldesk.models.hotel import Hotel
from hoteldesk.models.room import Room
from hoteldesk.services.availability import check_availability, conflict_message, find_conflict

pytestmark = pytest.mark.asyncio


async def _insert(db: AsyncSession, room: Room, check_in: date, check_out: date, status: str = "confirmed") -> Booking:
    """Write a booking row directly, bypassing the service checks."""
    booking = Booking(
        hotel_id=room.hotel_id,
        room_id=room.id,
        room_number=room.room_number,
        customer_name="Thomas Becker",
        customer_email="thomas@example.de",
        customer_phone="+49 151 2345 6789",
        check_in=check_in,
        check_out=check_out,
        number_of_guests=1,
        total_price=Decimal("0"),
        status=status,
    )
    db.add(booking)
    await db.flush()
    return booking


class TestFindConflict:
    """Half-open interval overlap against active bookings."""

    @pytest.mark.parametrize(
        ("check_in", "check_out", "expected"),
        [
            (date(2025, 6, 3), date(2025, 6, 7), True),  # straddles check-out
            (date(2025, 5, 30), date(2025, 6, 2), True),  # straddles check-in
            (date(2025, 6, 2), date(2025, 6, 3), True),  # inside
            (date(2025, 5, 1), date(2025, 7, 1), True),  # encloses
            (date(2025, 6, 5), date(2025, 6, 8), False),  # starts on check-out day
            (date(2025, 5, 28), date(2025, 6, 1), False),  # ends on check-in day
            (date(2025, 7, 1), date(2025, 7, 3), False),
        ],
    )
    async def test_overlap_rule(
        self,
        db_session: AsyncSession,
        test_hotel: Hotel,
        test_room: Room,
        check_in: date,
        check_out: date,
        expected: bool,
    ) -> None:
        await _insert(db_session, test_room, date(2025, 6, 1), date(2025, 6, 5))

        conflict = await find_conflict(db_session, test_hotel.id, test_room.id, check_in, check_out)
        assert (conflict is not None) is expected

    async def test_inactive_statuses_ignored(
        self, db_session: AsyncSession, test_hotel: Hotel, test_room: Room
    ) -> None:
        await _insert(db_session, test_room, date(2025, 6, 1), date(2025, 6, 5), status="cancelled")
        await _insert(db_session, test_room, date(2025, 6, 1), date(2025, 6, 5), status="completed")

        assert await find_conflict(db_session, test_hotel.id, test_room.id, date(2025, 6, 2), date(2025, 6, 3)) is None

    async def test_reserved_counts(self, db_session: AsyncSession, test_hotel: Hotel, test_room: Room) -> None:
        reserved = await _insert(db_session, test_room, date(2025, 6, 1), date(2025, 6, 5), status="reserved")

        conflict = await find_conflict(db_session, test_hotel.id, test_room.id, date(2025, 6, 4), date(2025, 6, 6))
        assert conflict.id == reserved.id

    async def test_excluded_booking_ignored(
        self, db_session: AsyncSession, test_hotel: Hotel, test_room: Room
    ) -> None:
        own = await _insert(db_session, test_room, date(2025, 6, 1), date(2025, 6, 5))

        conflict = await find_conflict(
            db_session, test_hotel.id, test_room.id, date(2025, 6, 1), date(2025, 6, 5), exclude_booking_id=own.id
        )
        assert conflict is None

    async def test_earliest_conflict_reported(
        self, db_session: AsyncSession, test_hotel: Hotel, test_room: Room
    ) -> None:
        await _insert(db_session, test_room, date(2025, 6, 10), date(2025, 6, 12))
        earliest = await _insert(db_session, test_room, date(2025, 6, 2), date(2025, 6, 4))

        conflict = await find_conflict(db_session, test_hotel.id, test_room.id, date(2025, 6, 1), date(2025, 6, 30))
        assert conflict.id == earliest.id
        assert conflict_message(conflict) == (
            "Room is already booked from 2025-06-02 to 2025-06-04. Please select different dates."
        )

    async def test_other_rooms_and_hotels_ignored(
        self,
        db_session: AsyncSession,
        test_hotel: Hotel,
        test_room: Room,
        second_room: Room,
        other_hotel_room: Room,
    ) -> None:
        await _insert(db_session, second_room, date(2025, 6, 1), date(2025, 6, 5))
        await _insert(db_session, other_hotel_room, date(2025, 6, 1), date(2025, 6, 5))

        assert await find_conflict(db_session, test_hotel.id, test_room.id, date(2025, 6, 1), date(2025, 6, 5)) is None


class TestCheckAvailability:
    """Advisory availability probe with a price quote."""

    async def test_free_room_quoted(self, db_session: AsyncSession, test_hotel: Hotel, second_room: Room) -> None:
        result = await check_availability(
            db_session, str(test_hotel.id), str(second_room.id), "2025-06-01", "2025-06-04T00:00:00Z"
        )

        assert result.available is True
        assert result.conflict is None
        assert result.nights == 3
        assert result.quoted_price == Decimal("450.00")

    async def test_blocked_room_reports_conflict(
        self, db_session: AsyncSession, test_hotel: Hotel, test_room: Room
    ) -> None:
        blocking = await _insert(db_session, test_room, date(2025, 6, 1), date(2025, 6, 5))

        result = await check_availability(db_session, test_hotel.id, test_room.id, "2025-06-04", "2025-06-06")
        assert result.available is False
        assert result.conflict.id == blocking.id

    async def test_exclude_booking_when_editing(
        self, db_session: AsyncSession, test_hotel: Hotel, test_room: Room
    ) -> None:
        own = await _insert(db_session, test_room, date(2025, 6, 1), date(2025, 6, 5))

        result = await check_availability(
            db_session, test_hotel.id, test_room.id, "2025-06-02", "2025-06-06", exclude_booking_id=str(own.id)
        )
        assert result.available is True

    async def test_room_of_other_hotel_rejected(
        self, db_session: AsyncSession, test_hotel: Hotel, other_hotel_room: Room
    ) -> None:
        with pytest.raises(InvalidReferenceError):
            await check_availability(db_session, test_hotel.id, other_hotel_room.id, "2025-06-01", "2025-06-02")

    async def test_malformed_ids_rejected(self, db_session: AsyncSession, test_hotel: Hotel) -> None:
        with pytest.raises(InvalidReferenceError):
            await check_availability(db_session, "hotel-1", uuid.uuid4(), "2025-06-01", "2025-06-02")
        with pytest.raises(InvalidReferenceError):
            await check_availability(db_session, test_hotel.id, "", "2025-06-01", "2025-06-02")

    async def test_date_validation(self, db_session: AsyncSession, test_hotel: Hotel, test_room: Room) -> None:
        with pytest.raises(MissingDatesError):
            await check_availability(db_session, test_hotel.id, test_room.id, None, "2025-06-02")
        with pytest.raises(InvalidDateRangeError):
            await check_availability(db_session, test_hotel.id, test_room.id, "2025-06-02", "2025-06-02")
