"""Booking model: guest reservations of a hotel room."""

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hoteldesk.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

BOOKING_STATUSES = ("confirmed", "reserved", "cancelled", "completed")

# Only these statuses occupy a room; the rest never block new bookings.
ACTIVE_BOOKING_STATUSES = ("confirmed", "reserved")

DEFAULT_BOOKING_STATUS = "confirmed"


class Booking(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A stay in one room of one hotel over ``[check_in, check_out)``."""

    __tablename__ = "bookings"

    hotel_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("hotels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_number: Mapped[str] = mapped_column(String(50), nullable=False)  # snapshot taken at booking time
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(50), nullable=False)
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    number_of_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(50),
        default=DEFAULT_BOOKING_STATUS,
        index=True,
    )  # confirmed, reserved, cancelled, completed
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)
    id_document: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    # Relationships
    room: Mapped["Room"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    # The PostgreSQL exclusion constraint on active intervals lives in the
    # initial migration; it has no portable DDL equivalent.
    __table_args__ = (
        Index("ix_bookings_hotel_room_check_in", "hotel_id", "room_id", "check_in"),
        CheckConstraint("check_out > check_in", name="ck_bookings_check_out_after_check_in"),
        CheckConstraint("number_of_guests >= 1", name="ck_bookings_number_of_guests_positive"),
        CheckConstraint("total_price >= 0", name="ck_bookings_total_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, hotel_id={self.hotel_id}, room_id={self.room_id}, status={self.status})>"
