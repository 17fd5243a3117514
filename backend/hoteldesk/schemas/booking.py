"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import date, datetime, time
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from hoteldesk.schemas.room import EmbeddedRoom, RoomSnapshot

STATUS_PATTERN = "^(confirmed|reserved|cancelled|completed)$"

# A room may be referenced by its id or by an embedded room object.
RoomReference = str | EmbeddedRoom

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    """Schema for creating a new booking.

    ``hotel_id`` and ``room_id`` are kept as raw values so that malformed ids
    are reported as invalid references rather than generic validation errors.
    Dates accept ``YYYY-MM-DD`` or full timestamp strings.
    """

    hotel_id: str | None = None
    room_id: RoomReference | None = None
    room_number: str | None = Field(None, min_length=1, max_length=50)
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str = Field(..., min_length=1, max_length=50)
    check_in: str | None = None
    check_out: str | None = None
    number_of_guests: int = Field(1, ge=1)
    total_price: Decimal | None = Field(None, ge=0)
    status: str = Field("confirmed", pattern=STATUS_PATTERN)
    special_requests: str | None = None
    id_document: str | None = Field(None, max_length=1024)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("customer_email")
    @classmethod
    def _lowercase_email(cls, value: str) -> str:
        return value.lower()


# Fields that may be omitted from an update but never explicitly cleared.
_NON_NULLABLE_UPDATE_FIELDS = frozenset(
    {
        "room_id",
        "room_number",
        "customer_name",
        "customer_email",
        "customer_phone",
        "number_of_guests",
        "total_price",
        "status",
    }
)


class BookingUpdate(BaseModel):
    """Schema for partially updating a booking.

    Only fields present in the request body are applied; ``model_fields_set``
    distinguishes an omitted field from one explicitly sent. An empty or null
    ``check_in`` / ``check_out`` keeps the stored date.
    """

    hotel_id: str | None = None
    room_id: RoomReference | None = None
    room_number: str | None = Field(None, min_length=1, max_length=50)
    customer_name: str | None = Field(None, min_length=1, max_length=255)
    customer_email: EmailStr | None = None
    customer_phone: str | None = Field(None, min_length=1, max_length=50)
    check_in: str | None = None
    check_out: str | None = None
    number_of_guests: int | None = Field(None, ge=1)
    total_price: Decimal | None = Field(None, ge=0)
    status: str | None = Field(None, pattern=STATUS_PATTERN)
    special_requests: str | None = None
    id_document: str | None = Field(None, max_length=1024)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("customer_email")
    @classmethod
    def _lowercase_email(cls, value: str | None) -> str | None:
        return value.lower() if value is not None else None

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> "BookingUpdate":
        """Required booking fields can be changed but not cleared."""
        cleared = sorted(
            name for name in self.model_fields_set & _NON_NULLABLE_UPDATE_FIELDS if getattr(self, name) is None
        )
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self

    def changes(self) -> dict:
        """Return only the booking fields explicitly provided by the caller."""
        return {name: getattr(self, name) for name in self.model_fields_set if name != "hotel_id"}


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingResponse(BaseModel):
    """Booking returned from CRUD operations, with the room snapshot attached."""

    id: uuid.UUID
    hotel_id: uuid.UUID
    room_id: uuid.UUID
    room_number: str
    customer_name: str
    customer_email: str
    customer_phone: str
    check_in: datetime
    check_out: datetime
    number_of_guests: int
    total_price: Decimal
    status: str
    special_requests: str | None = None
    id_document: str | None = None
    created_at: datetime
    updated_at: datetime
    room: RoomSnapshot | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def _date_as_timestamp(cls, value):
        """Calendar dates are emitted as midnight timestamps."""
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time.min)
        return value


class BookingListResponse(BaseModel):
    """All bookings of a hotel, newest first."""

    items: list[BookingResponse]
    total: int


class ConflictSummary(BaseModel):
    """The active booking that blocks a requested interval."""

    booking_id: uuid.UUID
    check_in: str
    check_out: str
    status: str


class AvailabilityResponse(BaseModel):
    """Result of probing a room for a date range."""

    room_id: uuid.UUID
    check_in: str
    check_out: str
    nights: int
    available: bool
    quoted_price: Decimal
    conflict: ConflictSummary | None = None


class BookingReceiptResponse(BaseModel):
    """Printable receipt for a booking."""

    booking_id: uuid.UUID
    hotel_name: str
    hotel_address: str
    hotel_phone: str
    hotel_logo: str | None = None
    customer_name: str
    customer_email: str
    customer_phone: str
    room_number: str
    room_type: str | None = None
    check_in: str
    check_out: str
    nights: int
    number_of_guests: int
    status: str
    total_price: Decimal
    currency: str
    issued_at: datetime
