from __future__ import annotations

import asyncio
import logging
from datetime import date

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from donormatch.core.logging import configure_logging
from donormatch.db.models import BloodBank, BloodInventory, Donor, OxygenSupplier
from donormatch.db.session import create_tables, get_async_session

logger = logging.getLogger(__name__)

BLOOD_BANKS = [
    {
        "id": "a0eebc99-9c0b-4ef8-bb6d-6bb9bd380a11",
        "name": "City Blood Bank",
        "location": "Bangalore",
        "latitude": 12.9716,
        "longitude": 77.5946,
        "contact": "+91 9876543210",
        "email": "contact@citybloodbank.com",
        "inventory": {"O+": 50, "O-": 20, "A+": 45, "A-": 15, "B+": 40, "B-": 18, "AB+": 25, "AB-": 12},
        "operating_hours": "24/7",
        "is_open": True,
    },
    {
        "id": "b0eebc99-9c0b-4ef8-bb6d-6bb9bd380a12",
        "name": "Central Blood Center",
        "location": "Bangalore",
        "latitude": 12.9782,
        "longitude": 77.6408,
        "contact": "+91 9876543211",
        "email": "info@centralblood.com",
        "inventory": {"O+": 35, "O-": 15, "A+": 30, "A-": 12, "B+": 28, "B-": 14, "AB+": 20, "AB-": 10},
        "operating_hours": "8:00 AM - 8:00 PM",
        "is_open": True,
    },
    {
        "id": "c0eebc99-9c0b-4ef8-bb6d-6bb9bd380a13",
        "name": "Life Care Blood Bank",
        "location": "Bangalore",
        "latitude": 12.9342,
        "longitude": 77.6092,
        "contact": "+91 9876543212",
        "email": "support@lifecareblood.com",
        "inventory": {"O+": 42, "O-": 18, "A+": 38, "A-": 16, "B+": 35, "B-": 15, "AB+": 22, "AB-": 11},
        "operating_hours": "24/7",
        "is_open": True,
    },
]

OXYGEN_SUPPLIERS = [
    {
        "name": "S P Health Care",
        "location": "123 Main Street, Kolathur, Chennai-600099",
        "latitude": 13.0827,
        "longitude": 80.2707,
        "contact": "+91 1234567891",
        "operating_hours": "9:00 AM to 6:00 PM",
    },
    {
        "name": "Chennai Home Care",
        "location": "456 Hospital Road, Kolathur, Chennai-600099",
        "latitude": 13.0825,
        "longitude": 80.2705,
        "contact": "+91 9876543210",
        "operating_hours": "8:00 AM to 8:00 PM",
    },
    {
        "name": "Ns Oxy Care",
        "location": "789 Health Avenue, Kolathur, Chennai-600099",
        "latitude": 13.0830,
        "longitude": 80.2710,
        "contact": "+91 8765432109",
        "operating_hours": "9:30 AM to 7:00 PM",
    },
    {
        "name": "Amos Surgicals",
        "location": "321 Medical Lane, Kolathur, Chennai-600099",
        "latitude": 13.0823,
        "longitude": 80.2703,
        "contact": "+91 7654321098",
        "operating_hours": "8:30 AM to 6:30 PM",
    },
]

DONORS = [
    {
        "name": "Arjun Rao",
        "blood_group": "O+",
        "location": "Indiranagar, Bangalore",
        "latitude": 12.9719,
        "longitude": 77.6412,
        "availability_status": "available",
        "last_donation_date": date(2024, 1, 12),
        "gender": "male",
    },
    {
        "name": "Meera Iyer",
        "blood_group": "O+",
        "location": "Koramangala, Bangalore",
        "latitude": 12.9352,
        "longitude": 77.6245,
        "availability_status": "unavailable",
        "last_donation_date": date(2024, 3, 2),
        "gender": "female",
    },
    {
        "name": "Farhan Sheikh",
        "blood_group": "B-",
        "location": "Jayanagar, Bangalore",
        "latitude": 12.9250,
        "longitude": 77.5938,
        "availability_status": "available",
        "last_donation_date": None,
        "gender": "male",
    },
    {
        "name": "Lakshmi Nair",
        "blood_group": "AB+",
        "location": "Malleshwaram, Bangalore",
        "latitude": 13.0035,
        "longitude": 77.5710,
        "availability_status": "available",
        "last_donation_date": date(2023, 11, 20),
        "gender": "female",
    },
]


async def seed_session(session: AsyncSession) -> None:
    """Replace all candidate rows with the sample data set."""
    await session.execute(delete(BloodInventory))
    await session.execute(delete(BloodBank))
    await session.execute(delete(Donor))
    await session.execute(delete(OxygenSupplier))

    for data in BLOOD_BANKS:
        fields = {key: value for key, value in data.items() if key != "inventory"}
        bank = BloodBank(**fields)
        bank.inventory = [
            BloodInventory(blood_group=group, units=units) for group, units in data["inventory"].items()
        ]
        session.add(bank)

    for data in DONORS:
        session.add(Donor(**data))

    for data in OXYGEN_SUPPLIERS:
        session.add(OxygenSupplier(**data))

    await session.commit()
    logger.info(
        "Seeded %d blood banks, %d donors, %d oxygen suppliers",
        len(BLOOD_BANKS),
        len(DONORS),
        len(OXYGEN_SUPPLIERS),
    )


async def seed() -> None:
    await create_tables()
    async with get_async_session() as session:
        await seed_session(session)


if __name__ == "__main__":
    configure_logging()
    asyncio.run(seed())
