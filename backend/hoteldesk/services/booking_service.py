"""Booking lifecycle: create, update, cancel and delete bookings.

This module is the only writer of booking rows. Create and update keep the
core invariant: for any hotel and room, active bookings never overlap. Each
write runs in the caller's transaction:

1. references and dates are validated without touching storage,
2. the room row is locked (``SELECT ... FOR UPDATE``),
3. conflicts are looked up,
4. the booking is written.

The lock serializes steps 2 to 4 per room until commit. On PostgreSQL an
exclusion constraint on ``bookings`` backs this up; a violation of it is
reported as ``RoomUnavailableError`` like any other conflict.
"""

import logging
import uuid
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hoteldesk.exceptions import CapacityExceededError, InvalidReferenceError, RoomUnavailableError
from hoteldesk.models.booking import ACTIVE_BOOKING_STATUSES, Booking
from hoteldesk.models.room import Room
from hoteldesk.schemas.booking import BookingCreate, BookingUpdate
from hoteldesk.services.availability import conflict_message, find_conflict, lock_room, quote_price
from hoteldesk.services.booking_queries import load_booking
from hoteldesk.services.dates import normalize_local_date
from hoteldesk.services.validation import (
    ensure_date_order,
    parse_reference,
    parse_stay_date,
    require_stay_dates,
    resolve_room_id,
)

logger = logging.getLogger(__name__)

# Name of the PostgreSQL exclusion constraint created by the initial migration.
ACTIVE_INTERVAL_CONSTRAINT = "ex_bookings_active_room_interval"
_EXCLUSION_VIOLATION_SQLSTATE = "23P01"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _lock_hotel_room(db: AsyncSession, hotel_id: uuid.UUID, room_id: uuid.UUID) -> Room:
    room = await lock_room(db, hotel_id, room_id)
    if room is None:
        raise InvalidReferenceError("Room not found for this hotel")
    return room


def _ensure_capacity(room: Room, number_of_guests: int) -> None:
    if number_of_guests > room.capacity:
        raise CapacityExceededError(
            f"Room {room.room_number} accommodates at most {room.capacity} guests "
            f"({number_of_guests} requested)"
        )


async def _ensure_no_conflict(
    db: AsyncSession,
    hotel_id: uuid.UUID,
    room_id: uuid.UUID,
    check_in: date,
    check_out: date,
    exclude_booking_id: uuid.UUID | None = None,
) -> None:
    conflict = await find_conflict(db, hotel_id, room_id, check_in, check_out, exclude_booking_id)
    if conflict is not None:
        logger.warning(
            "Rejected booking for room %s (hotel %s) %s..%s: overlaps booking %s",
            room_id,
            hotel_id,
            check_in,
            check_out,
            conflict.id,
        )
        raise RoomUnavailableError(conflict_message(conflict))


def _is_active_interval_violation(exc: IntegrityError) -> bool:
    if getattr(exc.orig, "sqlstate", None) == _EXCLUSION_VIOLATION_SQLSTATE:
        return True
    return ACTIVE_INTERVAL_CONSTRAINT in str(exc.orig)


async def _flush(db: AsyncSession) -> None:
    """Flush pending writes, translating an interval-constraint violation."""
    try:
        await db.flush()
    except IntegrityError as exc:
        if _is_active_interval_violation(exc):
            raise RoomUnavailableError(
                "Room is already booked for the selected dates. Please select different dates."
            ) from exc
        raise


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


async def create_booking(
    db: AsyncSession,
    hotel_id: str | uuid.UUID | None,
    payload: BookingCreate,
) -> Booking:
    """Create a booking after checking the room is free for the stay.

    ``status`` defaults to ``confirmed``; ``room_number`` defaults to the
    room's current number and ``total_price`` to the room's nightly rate times
    the number of nights.

    Raises:
        InvalidReferenceError, MissingDatesError, InvalidDateError,
        InvalidDateRangeError, CapacityExceededError, RoomUnavailableError
    """
    hotel_uuid = parse_reference(hotel_id, "hotel")
    room_uuid = resolve_room_id(payload.room_id)
    check_in, check_out = require_stay_dates(payload.check_in, payload.check_out)

    room = await _lock_hotel_room(db, hotel_uuid, room_uuid)
    _ensure_capacity(room, payload.number_of_guests)
    await _ensure_no_conflict(db, hotel_uuid, room_uuid, check_in, check_out)

    total_price = payload.total_price
    if total_price is None:
        total_price = quote_price(room, check_in, check_out)

    booking = Booking(
        hotel_id=hotel_uuid,
        room_id=room_uuid,
        room_number=payload.room_number or room.room_number,
        customer_name=payload.customer_name,
        customer_email=payload.customer_email,
        customer_phone=payload.customer_phone,
        check_in=check_in,
        check_out=check_out,
        number_of_guests=payload.number_of_guests,
        total_price=total_price,
        status=payload.status,
        special_requests=payload.special_requests,
        id_document=payload.id_document,
    )
    db.add(booking)
    await _flush(db)

    logger.info(
        "Created booking %s for room %s (hotel %s) %s..%s status=%s",
        booking.id,
        room_uuid,
        hotel_uuid,
        check_in,
        check_out,
        booking.status,
    )
    return await load_booking(db, hotel_uuid, booking.id)


async def update_booking(
    db: AsyncSession,
    hotel_id: str | uuid.UUID | None,
    booking_id: str | uuid.UUID | None,
    payload: BookingUpdate,
) -> Booking:
    """Apply a partial update to a booking.

    Dates and room not present in the update fall back to the stored values
    and the merged stay is validated as a whole. While the resulting status
    is active the stay is checked against the room's other bookings (never
    against the booking itself). Moving a booking to ``cancelled`` or
    ``completed`` skips the check. Only fields present in ``payload`` are
    written.

    Raises:
        BookingNotFoundError, InvalidReferenceError, InvalidDateError,
        InvalidDateRangeError, CapacityExceededError, RoomUnavailableError
    """
    hotel_uuid = parse_reference(hotel_id, "hotel")
    booking = await load_booking(db, hotel_uuid, booking_id, for_update=True)
    changes = payload.changes()

    new_check_in = parse_stay_date(changes.get("check_in"), "check-in")
    new_check_out = parse_stay_date(changes.get("check_out"), "check-out")
    check_in = new_check_in or normalize_local_date(booking.check_in)
    check_out = new_check_out or normalize_local_date(booking.check_out)
    ensure_date_order(check_in, check_out)

    room_changed = "room_id" in changes
    room_uuid = resolve_room_id(changes["room_id"]) if room_changed else booking.room_id
    status = changes.get("status", booking.status)
    number_of_guests = changes.get("number_of_guests", booking.number_of_guests)

    room = None
    if status in ACTIVE_BOOKING_STATUSES or room_changed:
        room = await _lock_hotel_room(db, hotel_uuid, room_uuid)
        if room_changed or "number_of_guests" in changes:
            _ensure_capacity(room, number_of_guests)
    if status in ACTIVE_BOOKING_STATUSES:
        await _ensure_no_conflict(db, hotel_uuid, room_uuid, check_in, check_out, exclude_booking_id=booking.id)

    for field, value in changes.items():
        if field == "room_id":
            booking.room_id = room_uuid
        elif field == "check_in":
            if new_check_in is not None:
                booking.check_in = new_check_in
        elif field == "check_out":
            if new_check_out is not None:
                booking.check_out = new_check_out
        else:
            setattr(booking, field, value)

    if room_changed and "room_number" not in changes and room is not None:
        booking.room_number = room.room_number

    await _flush(db)

    logger.info(
        "Updated booking %s (hotel %s): fields=%s",
        booking.id,
        hotel_uuid,
        sorted(changes),
    )
    return await load_booking(db, hotel_uuid, booking.id)


async def cancel_booking(
    db: AsyncSession,
    hotel_id: str | uuid.UUID | None,
    booking_id: str | uuid.UUID | None,
) -> Booking:
    """Mark a booking as cancelled. Cancelling twice is not an error."""
    hotel_uuid = parse_reference(hotel_id, "hotel")
    booking = await load_booking(db, hotel_uuid, booking_id, for_update=True)

    booking.status = "cancelled"
    await _flush(db)
    logger.info("Cancelled booking %s (hotel %s)", booking.id, hotel_uuid)

    return await load_booking(db, hotel_uuid, booking.id)


async def delete_booking(
    db: AsyncSession,
    hotel_id: str | uuid.UUID | None,
    booking_id: str | uuid.UUID | None,
) -> None:
    """Permanently remove a booking of the hotel."""
    hotel_uuid = parse_reference(hotel_id, "hotel")
    booking = await load_booking(db, hotel_uuid, booking_id)
    deleted_id = booking.id

    await db.delete(booking)
    await db.flush()
    logger.info("Deleted booking %s (hotel %s)", deleted_id, hotel_uuid)
