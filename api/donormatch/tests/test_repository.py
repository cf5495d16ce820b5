"""Tests for the database-backed candidate repository."""
from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from donormatch.core.errors import DataSourceFailure
from donormatch.db.models import BloodBank as BloodBankRow
from donormatch.db.models import BloodInventory, Donor as DonorRow
from donormatch.db.repository import CandidateRepository, blood_bank_from_row, donor_from_row
from donormatch.db.seed import BLOOD_BANKS, DONORS, OXYGEN_SUPPLIERS
from donormatch.schemas.candidates import (
    BloodBank,
    BloodGroup,
    CandidateCategory,
    Donor,
    OxygenSupplier,
    SearchCriteria,
)
from donormatch.services.matching import find_matches


class TestRowConversion:
    """Tests for ORM row to candidate conversion."""

    def test_bank_inventory_merged(self):
        row = BloodBankRow(id="b1", name="Bank", latitude=12.9, longitude=77.5, is_open=True)
        row.inventory = [
            BloodInventory(blood_group="O+", units=3),
            BloodInventory(blood_group="O+", units=2),
            BloodInventory(blood_group="A-", units=0),
        ]
        bank = blood_bank_from_row(row)
        assert bank.inventory == {BloodGroup.O_POS: 5, BloodGroup.A_NEG: 0}
        assert bank.coordinate.latitude == 12.9

    def test_bank_unknown_inventory_group_skipped(self):
        row = BloodBankRow(id="b1", name="Bank", is_open=True)
        row.inventory = [BloodInventory(blood_group="ZZ", units=3)]
        assert blood_bank_from_row(row).inventory == {}

    def test_missing_coordinate(self):
        row = DonorRow(id="d1", name="Donor", blood_group="B+", availability_status="available", latitude=None)
        assert donor_from_row(row).coordinate is None

    def test_out_of_range_coordinate_dropped(self):
        row = DonorRow(
            id="d1",
            name="Donor",
            blood_group="B+",
            availability_status="available",
            latitude=120.0,
            longitude=77.5,
        )
        assert donor_from_row(row).coordinate is None


class TestCandidateRepository:
    """Tests against an in-memory SQLite database."""

    @pytest.mark.asyncio
    async def test_list_blood_banks(self, seeded_session):
        banks = await CandidateRepository(seeded_session).list_blood_banks()
        assert sorted(b.name for b in banks) == sorted(data["name"] for data in BLOOD_BANKS)
        city = next(b for b in banks if b.name == "City Blood Bank")
        assert city.units_for(BloodGroup.O_POS) == 50
        assert len(city.inventory) == 8

    @pytest.mark.asyncio
    async def test_list_donors_filtered_in_sql(self, seeded_session):
        repository = CandidateRepository(seeded_session)
        all_donors = await repository.list_donors()
        assert len(all_donors) == len(DONORS)

        o_pos = await repository.list_donors(blood_group=BloodGroup.O_POS, available_only=True)
        assert [d.name for d in o_pos] == ["Arjun Rao"]

    @pytest.mark.asyncio
    async def test_list_oxygen_suppliers(self, seeded_session):
        suppliers = await CandidateRepository(seeded_session).list_oxygen_suppliers()
        assert len(suppliers) == len(OXYGEN_SUPPLIERS)
        assert all(isinstance(s, OxygenSupplier) for s in suppliers)

    @pytest.mark.asyncio
    async def test_get_blood_bank(self, seeded_session):
        repository = CandidateRepository(seeded_session)
        bank = await repository.get_blood_bank(BLOOD_BANKS[1]["id"])
        assert bank.name == "Central Blood Center"
        assert await repository.get_blood_bank("does-not-exist") is None

    @pytest.mark.asyncio
    async def test_malformed_row_skipped(self, async_session):
        async_session.add(DonorRow(id="bad", name="Bad", blood_group="??", availability_status="available"))
        async_session.add(DonorRow(id="good", name="Good", blood_group="A+", availability_status="available"))
        await async_session.commit()

        donors = await CandidateRepository(async_session).list_donors()
        assert [d.id for d in donors] == ["good"]

    @pytest.mark.asyncio
    async def test_query_error_wrapped(self):
        session = AsyncMock()
        session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("db down")))

        with pytest.raises(DataSourceFailure) as exc_info:
            await CandidateRepository(session).list_blood_banks()
        assert exc_info.value.source == "blood_banks"
        assert isinstance(exc_info.value.__cause__, OperationalError)


class TestFetcher:
    """Tests for fetch_candidates collaborators built by the repository."""

    @pytest.mark.asyncio
    async def test_blood_category(self, seeded_session, city_centre):
        criteria = SearchCriteria(seeker=city_centre, blood_group="O+")
        fetch = CandidateRepository(seeded_session).fetcher(CandidateCategory.BLOOD, criteria)
        candidates = await fetch()
        kinds = {type(c) for c in candidates}
        assert kinds == {Donor, BloodBank}
        # only the available O+ donor comes back from SQL
        assert [c.name for c in candidates if isinstance(c, Donor)] == ["Arjun Rao"]

    @pytest.mark.asyncio
    async def test_oxygen_category(self, seeded_session, city_centre):
        criteria = SearchCriteria(seeker=city_centre)
        candidates = await CandidateRepository(seeded_session).fetcher(CandidateCategory.OXYGEN, criteria)()
        assert len(candidates) == len(OXYGEN_SUPPLIERS)

    @pytest.mark.asyncio
    async def test_all_category(self, seeded_session, city_centre):
        criteria = SearchCriteria(seeker=city_centre)
        candidates = await CandidateRepository(seeded_session).fetcher(CandidateCategory.ALL, criteria)()
        assert len(candidates) == len(BLOOD_BANKS) + len(DONORS) + len(OXYGEN_SUPPLIERS)

    @pytest.mark.asyncio
    async def test_unknown_group_does_not_narrow_query(self, seeded_session, city_centre):
        criteria = SearchCriteria(seeker=city_centre, blood_group="nonsense")
        candidates = await CandidateRepository(seeded_session).fetcher(CandidateCategory.DONORS, criteria)()
        assert len(candidates) == len(DONORS)

    @pytest.mark.asyncio
    async def test_end_to_end_bangalore(self, seeded_session, city_centre):
        criteria = SearchCriteria(seeker=city_centre, blood_group="O+", radius_km=10)
        fetch = CandidateRepository(seeded_session).fetcher(CandidateCategory.BLOOD_BANKS, criteria)
        results = await find_matches(criteria, fetch)
        assert [r.candidate.name for r in results] == [
            "City Blood Bank",
            "Life Care Blood Bank",
            "Central Blood Center",
        ]

    @pytest.mark.asyncio
    async def test_end_to_end_fetch_failure(self, city_centre):
        session = AsyncMock()
        session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("db down")))
        criteria = SearchCriteria(seeker=city_centre, blood_group="O+")

        fetch = CandidateRepository(session).fetcher(CandidateCategory.BLOOD, criteria)
        with pytest.raises(DataSourceFailure):
            await find_matches(criteria, fetch)
