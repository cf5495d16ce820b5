"""Test fixtures and configuration for donor matching tests."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest


def _set_test_environment() -> None:
    os.environ["ENVIRONMENT"] = "development"
    os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
    os.environ["DEFAULT_RADIUS_KM"] = "10"
    os.environ["MAX_RADIUS_KM"] = "50"
    os.environ["CORS_ORIGINS"] = "http://localhost:8081"
    # High enough that the suite never trips the limiter by accident
    os.environ["RATE_LIMIT_DEFAULT"] = "10000/minute"


# The imports below build the engine from settings, so set the environment first
_set_test_environment()


def pytest_configure(config):
    """Set up environment variables before any test imports happen."""
    _set_test_environment()

    try:
        from donormatch.core.config import get_settings
        get_settings.cache_clear()
    except ImportError:
        pass


from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from donormatch.db import models  # noqa: F401  registers the tables
from donormatch.db.base import Base
from donormatch.db.seed import BLOOD_BANKS, seed_session
from donormatch.schemas.candidates import (
    AvailabilityStatus,
    BloodBank,
    Coordinate,
    Donor,
    OxygenSupplier,
)

CITY_CENTRE = Coordinate(latitude=12.9716, longitude=77.5946)


def make_bank(data: dict) -> BloodBank:
    return BloodBank(
        id=data["id"],
        name=data["name"],
        location=data["location"],
        coordinate=Coordinate(latitude=data["latitude"], longitude=data["longitude"]),
        contact=data["contact"],
        email=data["email"],
        inventory=data["inventory"],
        operating_hours=data["operating_hours"],
        is_open=data["is_open"],
    )


def _north_of(km: float, origin: Coordinate = CITY_CENTRE) -> Coordinate:
    """Coordinate roughly ``km`` kilometres due north of ``origin``."""
    return Coordinate(latitude=origin.latitude + km / 111.195, longitude=origin.longitude)


@pytest.fixture
async def async_engine():
    """Create an async SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def async_session(async_engine) -> AsyncIterator[AsyncSession]:
    """Create an async session for testing."""
    factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
async def seeded_session(async_session) -> AsyncSession:
    """Session over a database holding the sample data set."""
    await seed_session(async_session)
    return async_session


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Create a test client with the database session mocked out."""
    from donormatch.core.config import get_settings
    get_settings.cache_clear()

    mock_session = AsyncMock()
    mock_session.execute = AsyncMock(return_value=MagicMock(scalar=MagicMock(return_value=1)))
    mock_session.commit = AsyncMock()
    mock_session.rollback = AsyncMock()
    mock_session.close = AsyncMock()

    @asynccontextmanager
    async def mock_get_session():
        yield mock_session

    @asynccontextmanager
    async def mock_transaction():
        yield mock_session

    with patch("donormatch.routes.health.async_transaction", mock_transaction):
        with patch("donormatch.routes.matches.get_async_session", mock_get_session):
            with patch("donormatch.routes.blood_banks.get_async_session", mock_get_session):
                from donormatch.main import app
                app.state.limiter.reset()
                with TestClient(app) as test_client:
                    yield test_client


@pytest.fixture
def city_centre() -> Coordinate:
    """Seeker position at City Blood Bank, Bangalore."""
    return CITY_CENTRE


@pytest.fixture
def offset_north():
    """Factory for coordinates a given number of km north of the city centre."""
    return _north_of


@pytest.fixture
def bangalore_banks() -> list[BloodBank]:
    """City, Central and Life Care blood banks, in that order."""
    return [make_bank(data) for data in BLOOD_BANKS]


@pytest.fixture
def city_bank(bangalore_banks) -> BloodBank:
    return bangalore_banks[0]


@pytest.fixture
def available_donor() -> Donor:
    return Donor(
        id="donor-1",
        name="Arjun Rao",
        location="Indiranagar, Bangalore",
        coordinate=_north_of(2),
        blood_group="O+",
        availability_status=AvailabilityStatus.AVAILABLE,
    )


@pytest.fixture
def unavailable_donor() -> Donor:
    return Donor(
        id="donor-2",
        name="Meera Iyer",
        location="Koramangala, Bangalore",
        coordinate=_north_of(1),
        blood_group="O+",
        availability_status=AvailabilityStatus.UNAVAILABLE,
    )


@pytest.fixture
def oxygen_supplier() -> OxygenSupplier:
    return OxygenSupplier(
        id="oxy-1",
        name="S P Health Care",
        location="Kolathur, Chennai",
        coordinate=Coordinate(latitude=13.0827, longitude=80.2707),
        contact="+91 1234567891",
        operating_hours="9:00 AM to 6:00 PM",
    )
