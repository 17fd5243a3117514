"""SQLAlchemy models for HotelDesk.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from hoteldesk.models.booking import Booking
from hoteldesk.models.hotel import Hotel
from hoteldesk.models.room import Room

__all__ = [
    "Booking",
    "Hotel",
    "Room",
]
