"""Hotel model: the tenant every room and booking belongs to."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hoteldesk.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Hotel(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A hotel account. All room and booking data is partitioned by hotel."""

    __tablename__ = "hotels"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(String(512), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    logo: Mapped[str | None] = mapped_column(String(1024), default=None)  # hosted image URL

    # Relationships
    rooms: Mapped[list["Room"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="hotel", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Hotel(id={self.id}, name={self.name!r})>"
