"""Seed the database with a demo hotel, its rooms and a spread of bookings.

Bookings go through the booking service, so the seed data obeys the same
rules as the API (no overlapping active stays per room).

Run from the backend directory:
    python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add backend to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, select

from hoteldesk.database import async_session_factory
from hoteldesk.exceptions import BookingError
from hoteldesk.models.booking import Booking
from hoteldesk.models.hotel import Hotel
from hoteldesk.models.room import Room
from hoteldesk.schemas.booking import BookingCreate
from hoteldesk.services.booking_service import cancel_booking, create_booking

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_HOTEL = {
    "name": "Lagoon Crest Hotel",
    "address": "42 Beach Road, Negombo",
    "phone": "+94 31 222 4455",
    "description": "Family-run beachfront hotel with garden and lagoon views.",
}

ROOMS = [
    {"room_number": "101", "room_type": "Standard Double", "price": Decimal("9500.00"), "capacity": 2},
    {"room_number": "102", "room_type": "Standard Double", "price": Decimal("9500.00"), "capacity": 2},
    {"room_number": "201", "room_type": "Deluxe Lagoon View", "price": Decimal("14500.00"), "capacity": 3},
    {"room_number": "202", "room_type": "Family Suite", "price": Decimal("22000.00"), "capacity": 5},
]

GUESTS = [
    ("Nimali Perera", "nimali.perera@example.com", "+94 77 123 4567"),
    ("Thomas Becker", "thomas.becker@example.de", "+49 151 2345 6789"),
    ("Aiko Tanaka", "aiko.tanaka@example.jp", "+81 90 1234 5678"),
    ("Sarah Mitchell", "sarah.mitchell@example.com.au", "+61 400 123 456"),
    ("Rohan Fernando", "rohan.fernando@example.com", "+94 71 987 6543"),
]


def _build_bookings(rooms: list[Room], today: date) -> list[dict]:
    """Booking definitions relative to ``today``: past, current and upcoming stays."""
    r101, r102, r201, r202 = rooms
    return [
        {"room": r101, "guest": 0, "start": -10, "nights": 3, "guests": 2, "status": "completed"},
        {"room": r101, "guest": 1, "start": -1, "nights": 4, "guests": 2, "status": "confirmed"},
        # back-to-back with the stay above
        {"room": r101, "guest": 2, "start": 3, "nights": 2, "guests": 1, "status": "reserved"},
        {"room": r102, "guest": 3, "start": 5, "nights": 7, "guests": 2, "status": "confirmed",
         "special_requests": "Quiet room, late check-in around 11pm"},
        {"room": r201, "guest": 4, "start": 0, "nights": 2, "guests": 3, "status": "confirmed"},
        {"room": r202, "guest": 0, "start": 14, "nights": 5, "guests": 4, "status": "reserved",
         "special_requests": "Baby cot required"},
        # cancelled below, freeing the dates again
        {"room": r202, "guest": 2, "start": 30, "nights": 3, "guests": 2, "status": "confirmed", "cancel": True},
    ]


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def seed() -> None:
    """Populate the database with the demo hotel.

    Idempotent: an existing demo hotel (matched by name) is deleted with its
    rooms and bookings before re-seeding.
    """
    async with async_session_factory() as session:
        result = await session.execute(select(Hotel).where(Hotel.name == DEMO_HOTEL["name"]))
        existing = result.scalar_one_or_none()
        if existing is not None:
            print(f"⚠️  Demo hotel '{existing.name}' already exists. Deleting and re-seeding...")
            await session.execute(delete(Booking).where(Booking.hotel_id == existing.id))
            await session.execute(delete(Room).where(Room.hotel_id == existing.id))
            await session.execute(delete(Hotel).where(Hotel.id == existing.id))
            await session.flush()

        # ------------------------------------------------------------------
        # 1. Hotel and rooms
        # ------------------------------------------------------------------
        hotel = Hotel(**DEMO_HOTEL)
        session.add(hotel)
        await session.flush()
        print(f"✅ Created hotel: {hotel.name} (id={hotel.id})")

        rooms: list[Room] = []
        for room_data in ROOMS:
            room = Room(hotel_id=hotel.id, **room_data)
            session.add(room)
            rooms.append(room)
        await session.flush()
        for room in rooms:
            print(f"   🛏  Room {room.room_number}, {room.room_type} (LKR {room.price}/night)")

        # ------------------------------------------------------------------
        # 2. Bookings
        # ------------------------------------------------------------------
        today = date.today()
        created = 0
        for entry in _build_bookings(rooms, today):
            name, email, phone = GUESTS[entry["guest"]]
            check_in = today + timedelta(days=entry["start"])
            check_out = check_in + timedelta(days=entry["nights"])
            payload = BookingCreate(
                room_id=str(entry["room"].id),
                customer_name=name,
                customer_email=email,
                customer_phone=phone,
                check_in=check_in.isoformat(),
                check_out=check_out.isoformat(),
                number_of_guests=entry["guests"],
                status=entry["status"],
                special_requests=entry.get("special_requests"),
            )
            try:
                booking = await create_booking(session, hotel.id, payload)
            except BookingError as exc:
                print(f"   ❌ Skipped booking for room {entry['room'].room_number}: {exc.message}")
                continue
            if entry.get("cancel"):
                await cancel_booking(session, hotel.id, booking.id)
            created += 1

        await session.commit()

        print(f"✅ Created {created} bookings")
        print()
        print("=" * 60)
        print("📊 Seed Summary")
        print("=" * 60)
        print(f"   Hotel id:  {hotel.id}")
        print(f"   Rooms:     {len(rooms)}")
        print(f"   Bookings:  {created}")
        print("=" * 60)
        print(f"🎉 Done! Try GET /api/v1/bookings?hotel_id={hotel.id}")


if __name__ == "__main__":
    asyncio.run(seed())
