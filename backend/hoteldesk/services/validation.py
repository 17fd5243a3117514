"""Input checks shared by the booking operations.

Everything here runs before storage is touched: a request with a malformed
hotel id never reaches the database.
"""

import uuid
from datetime import date, datetime

from hoteldesk.exceptions import (
    InvalidDateError,
    InvalidDateRangeError,
    InvalidReferenceError,
    MissingDatesError,
)
from hoteldesk.schemas.room import EmbeddedRoom
from hoteldesk.services.dates import format_calendar_date, normalize_local_date


def parse_reference(value: str | uuid.UUID | None, label: str) -> uuid.UUID:
    """Parse a hotel or room identifier.

    Raises:
        InvalidReferenceError: If ``value`` is missing or not a UUID.
    """
    if isinstance(value, uuid.UUID):
        return value
    if not value:
        raise InvalidReferenceError(f"Valid {label} ID is required")
    try:
        return uuid.UUID(str(value).strip())
    except ValueError:
        raise InvalidReferenceError(f"Valid {label} ID is required") from None


def resolve_room_id(reference: str | uuid.UUID | EmbeddedRoom | None) -> uuid.UUID:
    """Reduce a bare id or an embedded room object to the room's UUID."""
    if isinstance(reference, EmbeddedRoom):
        reference = reference.id
    return parse_reference(reference, "room")


def parse_booking_id(value: str | uuid.UUID | None) -> uuid.UUID | None:
    """Parse a booking id, returning ``None`` when it cannot match any booking."""
    try:
        return parse_reference(value, "booking")
    except InvalidReferenceError:
        return None


def parse_stay_date(value: str | date | datetime | None, label: str) -> date | None:
    """Normalize one stay date; empty values are treated as absent.

    Raises:
        InvalidDateError: If the value cannot be read as a calendar day.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return normalize_local_date(value)
    except ValueError:
        raise InvalidDateError(f"Invalid {label} date: {value!r}") from None


def require_stay_dates(
    check_in: str | date | datetime | None,
    check_out: str | date | datetime | None,
) -> tuple[date, date]:
    """Normalize both stay dates and require that check-out follows check-in.

    Raises:
        MissingDatesError: If either date is absent.
        InvalidDateError: If either date cannot be parsed.
        InvalidDateRangeError: If check-out is not strictly after check-in.
    """
    check_in_date = parse_stay_date(check_in, "check-in")
    check_out_date = parse_stay_date(check_out, "check-out")
    if check_in_date is None or check_out_date is None:
        raise MissingDatesError()
    ensure_date_order(check_in_date, check_out_date)
    return check_in_date, check_out_date


def ensure_date_order(check_in: date, check_out: date) -> None:
    """Raise ``InvalidDateRangeError`` unless check-out is at least one day after check-in."""
    check_in_str = format_calendar_date(check_in)
    check_out_str = format_calendar_date(check_out)
    if check_out_str <= check_in_str:
        raise InvalidDateRangeError(
            f"Check-out date ({check_out_str}) must be after check-in date ({check_in_str})"
        )
