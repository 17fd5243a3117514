"""Room availability: overlap detection between booking intervals.

Stays are half-open intervals ``[check_in, check_out)``: a guest checking out
on day N frees the room for a guest checking in on day N. Two stays overlap
iff ``in_a < out_b and out_a > in_b``. Only active bookings (``confirmed``,
``reserved``) take part.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hoteldesk.exceptions import InvalidReferenceError
from hoteldesk.models.booking import ACTIVE_BOOKING_STATUSES, Booking
from hoteldesk.models.room import Room
from hoteldesk.services.dates import count_nights, format_calendar_date
from hoteldesk.services.validation import parse_booking_id, parse_reference, require_stay_dates, resolve_room_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailabilityResult:
    room: Room
    check_in: date
    check_out: date
    conflict: Booking | None

    @property
    def available(self) -> bool:
        return self.conflict is None

    @property
    def nights(self) -> int:
        return count_nights(self.check_in, self.check_out)

    @property
    def quoted_price(self) -> Decimal:
        return quote_price(self.room, self.check_in, self.check_out)


async def find_conflict(
    db: AsyncSession,
    hotel_id: uuid.UUID,
    room_id: uuid.UUID,
    check_in: date,
    check_out: date,
    exclude_booking_id: uuid.UUID | None = None,
) -> Booking | None:
    """Return the earliest active booking of the room that overlaps the interval, if any."""
    query = select(Booking).where(
        Booking.hotel_id == hotel_id,
        Booking.room_id == room_id,
        Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        Booking.check_in < check_out,
        Booking.check_out > check_in,
    )
    if exclude_booking_id is not None:
        query = query.where(Booking.id != exclude_booking_id)

    result = await db.execute(query.order_by(Booking.check_in).limit(1))
    return result.scalars().first()


def conflict_message(conflict: Booking) -> str:
    """Human-readable explanation naming the interval that blocks the room."""
    return (
        f"Room is already booked from {format_calendar_date(conflict.check_in)} "
        f"to {format_calendar_date(conflict.check_out)}. Please select different dates."
    )


async def lock_room(db: AsyncSession, hotel_id: uuid.UUID, room_id: uuid.UUID) -> Room | None:
    """Load the hotel's room and hold a row lock on it until the transaction ends.

    Every create or update for a room takes this lock before checking for
    conflicts, so check-then-write sequences on the same room run one at a
    time. Rooms of other hotels are never returned.
    """
    result = await db.execute(
        select(Room).where(Room.id == room_id, Room.hotel_id == hotel_id).with_for_update()
    )
    return result.scalar_one_or_none()


def quote_price(room: Room, check_in: date, check_out: date) -> Decimal:
    """Nightly rate times the number of nights."""
    return Decimal(room.price) * count_nights(check_in, check_out)


async def check_availability(
    db: AsyncSession,
    hotel_id: str | uuid.UUID | None,
    room_id: str | uuid.UUID | None,
    check_in: str | date | datetime | None,
    check_out: str | date | datetime | None,
    exclude_booking_id: str | uuid.UUID | None = None,
) -> AvailabilityResult:
    """Probe whether a room can be booked for a date range, with a price quote.

    This is advisory: nothing is locked or written, and a later create may
    still be rejected if another booking lands first.
    """
    hotel_uuid = parse_reference(hotel_id, "hotel")
    room_uuid = resolve_room_id(room_id)
    ci, co = require_stay_dates(check_in, check_out)

    result = await db.execute(select(Room).where(Room.id == room_uuid, Room.hotel_id == hotel_uuid))
    room = result.scalar_one_or_none()
    if room is None:
        raise InvalidReferenceError("Room not found for this hotel")

    exclude_uuid = parse_booking_id(exclude_booking_id) if exclude_booking_id else None
    conflict = await find_conflict(db, hotel_uuid, room_uuid, ci, co, exclude_booking_id=exclude_uuid)
    if conflict is not None:
        logger.debug("Room %s unavailable %s..%s (blocked by %s)", room_uuid, ci, co, conflict.id)

    return AvailabilityResult(room=room, check_in=ci, check_out=co, conflict=conflict)
