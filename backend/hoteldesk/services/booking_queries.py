"""Read side of the booking engine: hotel-scoped lookups, listings and receipts."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hoteldesk.config import settings
from hoteldesk.database import utcnow
from hoteldesk.exceptions import BookingNotFoundError
from hoteldesk.models.booking import Booking
from hoteldesk.models.hotel import Hotel
from hoteldesk.services.dates import count_nights, format_calendar_date
from hoteldesk.services.validation import parse_booking_id, parse_reference, resolve_room_id


@dataclass(frozen=True)
class BookingReceipt:
    booking_id: uuid.UUID
    hotel_name: str
    hotel_address: str
    hotel_phone: str
    hotel_logo: str | None
    customer_name: str
    customer_email: str
    customer_phone: str
    room_number: str
    room_type: str | None
    check_in: str
    check_out: str
    nights: int
    number_of_guests: int
    status: str
    total_price: Decimal
    currency: str
    issued_at: datetime


async def load_booking(
    db: AsyncSession,
    hotel_id: uuid.UUID,
    booking_id: str | uuid.UUID | None,
    *,
    for_update: bool = False,
) -> Booking:
    """Fetch a booking of the given hotel with its room snapshot.

    Raises ``BookingNotFoundError`` when the id is malformed, the booking does
    not exist, or it belongs to another hotel.
    """
    booking_uuid = parse_booking_id(booking_id)
    if booking_uuid is None:
        raise BookingNotFoundError()

    query = (
        select(Booking)
        .options(selectinload(Booking.room))
        .where(Booking.id == booking_uuid, Booking.hotel_id == hotel_id)
        .execution_options(populate_existing=True)
    )
    if for_update:
        query = query.with_for_update(of=Booking)

    result = await db.execute(query)
    booking = result.scalar_one_or_none()
    if booking is None:
        raise BookingNotFoundError()
    return booking


async def get_booking(
    db: AsyncSession,
    hotel_id: str | uuid.UUID | None,
    booking_id: str | uuid.UUID | None,
) -> Booking:
    """Return one booking of the hotel, room snapshot attached."""
    hotel_uuid = parse_reference(hotel_id, "hotel")
    return await load_booking(db, hotel_uuid, booking_id)


async def list_bookings(
    db: AsyncSession,
    hotel_id: str | uuid.UUID | None,
    status: str | None = None,
    room_id: str | uuid.UUID | None = None,
) -> list[Booking]:
    """Return the hotel's bookings, newest first, optionally filtered by status or room."""
    hotel_uuid = parse_reference(hotel_id, "hotel")

    query = select(Booking).options(selectinload(Booking.room)).where(Booking.hotel_id == hotel_uuid)
    if status is not None:
        query = query.where(Booking.status == status)
    if room_id is not None:
        query = query.where(Booking.room_id == resolve_room_id(room_id))

    result = await db.execute(query.order_by(Booking.created_at.desc(), Booking.id))
    return list(result.scalars().all())


async def get_booking_receipt(
    db: AsyncSession,
    hotel_id: str | uuid.UUID | None,
    booking_id: str | uuid.UUID | None,
) -> BookingReceipt:
    """Assemble the printable receipt of a booking."""
    hotel_uuid = parse_reference(hotel_id, "hotel")
    booking = await load_booking(db, hotel_uuid, booking_id)

    result = await db.execute(select(Hotel).where(Hotel.id == hotel_uuid))
    hotel = result.scalar_one()

    return BookingReceipt(
        booking_id=booking.id,
        hotel_name=hotel.name,
        hotel_address=hotel.address,
        hotel_phone=hotel.phone,
        hotel_logo=hotel.logo,
        customer_name=booking.customer_name,
        customer_email=booking.customer_email,
        customer_phone=booking.customer_phone,
        room_number=booking.room_number,
        room_type=booking.room.room_type if booking.room else None,
        check_in=format_calendar_date(booking.check_in),
        check_out=format_calendar_date(booking.check_out),
        nights=count_nights(booking.check_in, booking.check_out),
        number_of_guests=booking.number_of_guests,
        status=booking.status,
        total_price=booking.total_price,
        currency=settings.currency,
        issued_at=utcnow(),
    )
