"""Room model: bookable units inside a hotel."""

import uuid
from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hoteldesk.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Room(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A room with a nightly rate and guest capacity.

    The booking engine reads rooms (snapshot, rate, capacity) and row-locks
    them while checking for conflicts, but never changes them.
    """

    __tablename__ = "rooms"

    hotel_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("hotels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_number: Mapped[str] = mapped_column(String(50), nullable=False)
    room_type: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    status: Mapped[str] = mapped_column(String(50), default="available")  # available, occupied, maintenance

    # Relationships
    hotel: Mapped["Hotel"] = relationship(back_populates="rooms")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (UniqueConstraint("hotel_id", "room_number", name="uq_rooms_hotel_room_number"),)

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, hotel_id={self.hotel_id}, room_number={self.room_number!r})>"
