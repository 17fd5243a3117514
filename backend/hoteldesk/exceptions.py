"""Booking domain errors.

Services raise these; the HTTP layer renders them as
``{"detail": message, "code": code}`` with the class's ``status_code``.
"""

from fastapi import status


class BookingError(Exception):
    """Base class for user-displayable booking errors."""

    code: str = "booking_error"
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidReferenceError(BookingError):
    """Malformed hotel or room identifier, or a room outside the hotel."""

    code = "invalid_reference"


class MissingDatesError(BookingError):
    code = "missing_dates"

    def __init__(self, message: str = "Check-in and check-out dates are required") -> None:
        super().__init__(message)


class InvalidDateError(BookingError):
    """A date value that cannot be read as a calendar day."""

    code = "invalid_date"


class InvalidDateRangeError(BookingError):
    code = "invalid_date_range"


class CapacityExceededError(BookingError):
    code = "capacity_exceeded"


class RoomUnavailableError(BookingError):
    """The requested interval overlaps an active booking for the room."""

    code = "room_unavailable"
    status_code = status.HTTP_409_CONFLICT


class BookingNotFoundError(BookingError):
    """Booking is absent or belongs to another hotel; both look the same to the caller."""

    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Booking not found") -> None:
        super().__init__(message)
