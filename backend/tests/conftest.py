"""Shared test configuration and fixtures.

Uses a transactional rollback strategy per test for full isolation:
- Each test gets a fresh schema and a transaction that rolls back after it.
- ``TEST_DATABASE_URL`` selects the database; it defaults to an in-memory
  SQLite database so the suite runs without a PostgreSQL server.
"""

import os
from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from hoteldesk.database import Base, get_db
from hoteldesk.main import app
from hoteldesk.models.hotel import Hotel
from hoteldesk.models.room import Room

# ---------------------------------------------------------------------------
# Test database engine
# ---------------------------------------------------------------------------

_test_db_url = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


def _make_engine():
    if _test_db_url.startswith("sqlite"):
        # One shared connection, otherwise every checkout sees an empty in-memory DB.
        return create_async_engine(
            _test_db_url,
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(_test_db_url, echo=False, pool_pre_ping=True)


@pytest_asyncio.fixture
async def test_engine():
    """Create an engine with all tables, dropping them afterwards."""
    engine = _make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


# ---------------------------------------------------------------------------
# Per-test: transactional rollback for isolation
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: hotels and rooms
# ---------------------------------------------------------------------------


async def _create_hotel(db_session: AsyncSession, name: str) -> Hotel:
    hotel = Hotel(name=name, address="1 Galle Road, Colombo", phone="+94 11 234 5678")
    db_session.add(hotel)
    await db_session.flush()
    return hotel


async def _create_room(
    db_session: AsyncSession,
    hotel: Hotel,
    room_number: str,
    price: str = "100.00",
    capacity: int = 2,
    room_type: str = "Deluxe Double",
) -> Room:
    room = Room(
        hotel_id=hotel.id,
        room_number=room_number,
        room_type=room_type,
        price=Decimal(price),
        capacity=capacity,
    )
    db_session.add(room)
    await db_session.flush()
    return room


@pytest_asyncio.fixture
async def test_hotel(db_session: AsyncSession) -> Hotel:
    """The tenant most tests operate in."""
    return await _create_hotel(db_session, "Test Hotel")


@pytest_asyncio.fixture
async def other_hotel(db_session: AsyncSession) -> Hotel:
    """A second tenant, used to check isolation."""
    return await _create_hotel(db_session, "Other Hotel")


@pytest_asyncio.fixture
async def test_room(db_session: AsyncSession, test_hotel: Hotel) -> Room:
    """Room 101 of the test hotel: 100.00 per night, two guests."""
    return await _create_room(db_session, test_hotel, "101")


@pytest_asyncio.fixture
async def second_room(db_session: AsyncSession, test_hotel: Hotel) -> Room:
    """Room 102 of the test hotel: 150.00 per night, four guests."""
    return await _create_room(db_session, test_hotel, "102", price="150.00", capacity=4, room_type="Family")


@pytest_asyncio.fixture
async def other_hotel_room(db_session: AsyncSession, other_hotel: Hotel) -> Room:
    """Room 101 of the other hotel."""
    return await _create_room(db_session, other_hotel, "101")
