"""Bookings API router.

Tenant rule: every request names its hotel explicitly (``hotel_id`` in the
body for writes with a payload, in the query string otherwise) and only
bookings of that hotel are visible. A booking of another hotel answers
exactly like a missing one.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hoteldesk.api.deps import get_db
from hoteldesk.models.booking import Booking
from hoteldesk.schemas.booking import (
    STATUS_PATTERN,
    AvailabilityResponse,
    BookingCreate,
    BookingListResponse,
    BookingReceiptResponse,
    BookingResponse,
    BookingUpdate,
    ConflictSummary,
)
from hoteldesk.schemas.common import MessageResponse
from hoteldesk.services import booking_queries, booking_service
from hoteldesk.services.availability import check_availability
from hoteldesk.services.dates import format_calendar_date

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])

_HOTEL_ID_DESCRIPTION = "ID of the hotel that owns the bookings"


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
) -> Booking:
    """Create a booking for a room of the hotel given in ``hotel_id``.

    Validates that:
    - The hotel and room ids are well formed and the room belongs to the hotel.
    - Both dates are present and check-out is after check-in.
    - No confirmed or reserved booking of the room overlaps the stay.
    """
    return await booking_service.create_booking(db, body.hotel_id, body)


@router.get(
    "",
    response_model=BookingListResponse,
    summary="List bookings of a hotel",
)
async def list_bookings(
    hotel_id: str | None = Query(None, description=_HOTEL_ID_DESCRIPTION),
    status_filter: str | None = Query(
        None, alias="status", pattern=STATUS_PATTERN, description="Filter by booking status"
    ),
    room_id: str | None = Query(None, description="Filter by room"),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Return every booking of the hotel, newest first, with room snapshots."""
    items = await booking_queries.list_bookings(db, hotel_id, status=status_filter, room_id=room_id)
    return {"items": items, "total": len(items)}


@router.get(
    "/availability",
    response_model=AvailabilityResponse,
    summary="Check whether a room is free for a date range",
)
async def get_availability(
    hotel_id: str | None = Query(None, description=_HOTEL_ID_DESCRIPTION),
    room_id: str | None = Query(None, description="Room to check"),
    check_in: str | None = Query(None, description="YYYY-MM-DD or timestamp"),
    check_out: str | None = Query(None, description="YYYY-MM-DD or timestamp"),
    exclude_booking_id: str | None = Query(None, description="Ignore this booking (when editing it)"),
    db: AsyncSession = Depends(get_db),
) -> AvailabilityResponse:
    """Report availability and a price quote (nightly rate times nights)."""
    result = await check_availability(db, hotel_id, room_id, check_in, check_out, exclude_booking_id)

    conflict = None
    if result.conflict is not None:
        conflict = ConflictSummary(
            booking_id=result.conflict.id,
            check_in=format_calendar_date(result.conflict.check_in),
            check_out=format_calendar_date(result.conflict.check_out),
            status=result.conflict.status,
        )

    return AvailabilityResponse(
        room_id=result.room.id,
        check_in=format_calendar_date(result.check_in),
        check_out=format_calendar_date(result.check_out),
        nights=result.nights,
        available=result.available,
        quoted_price=result.quoted_price,
        conflict=conflict,
    )


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking with its room snapshot",
)
async def get_booking(
    booking_id: str,
    hotel_id: str | None = Query(None, description=_HOTEL_ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db),
) -> Booking:
    """Retrieve a single booking. Returns 404 if it is not a booking of the hotel."""
    return await booking_queries.get_booking(db, hotel_id, booking_id)


@router.get(
    "/{booking_id}/receipt",
    response_model=BookingReceiptResponse,
    summary="Get the printable receipt of a booking",
)
async def get_booking_receipt(
    booking_id: str,
    hotel_id: str | None = Query(None, description=_HOTEL_ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db),
) -> BookingReceiptResponse:
    """Return the printable receipt of a booking, dates as ``YYYY-MM-DD``."""
    receipt = await booking_queries.get_booking_receipt(db, hotel_id, booking_id)
    return BookingReceiptResponse.model_validate(receipt, from_attributes=True)


@router.put(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Update a booking",
)
async def update_booking(
    booking_id: str,
    body: BookingUpdate,
    db: AsyncSession = Depends(get_db),
) -> Booking:
    """Partially update a booking.

    Fields left out of the body keep their stored values. Date, room and
    status changes are re-checked for conflicts unless the booking is being
    cancelled or completed.
    """
    return await booking_service.update_booking(db, body.hotel_id, booking_id, body)


@router.patch(
    "/{booking_id}/cancel",
    response_model=BookingResponse,
    summary="Cancel a booking",
)
async def cancel_booking(
    booking_id: str,
    hotel_id: str | None = Query(None, description=_HOTEL_ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db),
) -> Booking:
    """Set the booking's status to ``cancelled``, freeing its dates."""
    return await booking_service.cancel_booking(db, hotel_id, booking_id)


@router.delete(
    "/{booking_id}",
    response_model=MessageResponse,
    summary="Delete a booking",
)
async def delete_booking(
    booking_id: str,
    hotel_id: str | None = Query(None, description=_HOTEL_ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Permanently delete a booking of the hotel."""
    await booking_service.delete_booking(db, hotel_id, booking_id)
    return {"message": "Booking deleted"}
