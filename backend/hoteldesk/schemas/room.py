"""Pydantic v2 schemas for room references and snapshots."""

import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class EmbeddedRoom(BaseModel):
    """A room passed by value instead of by id.

    Clients that already hold a room object may send it in place of a bare
    ``room_id``; only ``id`` is used to identify the room.
    """

    id: str
    room_number: str | None = None
    room_type: str | None = None
    price: Decimal | None = None

    model_config = ConfigDict(extra="ignore")


class RoomSnapshot(BaseModel):
    """Room fields embedded in booking responses."""

    id: uuid.UUID
    room_number: str
    room_type: str
    price: Decimal

    model_config = ConfigDict(from_attributes=True)
