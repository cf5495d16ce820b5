from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from donormatch.core.errors import DataSourceFailure, InvalidCoordinate
from donormatch.db import models
from donormatch.schemas.candidates import (
    AvailabilityStatus,
    BloodBank,
    BloodGroup,
    Candidate,
    CandidateCategory,
    Coordinate,
    Donor,
    OxygenSupplier,
    SearchCriteria,
)
from donormatch.services.filters import parse_blood_group
from donormatch.services.geospatial import validate_coordinate
from donormatch.services.matching import CandidateFetcher

logger = logging.getLogger(__name__)


def _coordinate(kind: str, row_id: str, lat: Optional[float], lon: Optional[float]) -> Optional[Coordinate]:
    if lat is None or lon is None:
        return None
    try:
        return validate_coordinate(lat, lon)
    except InvalidCoordinate as exc:
        logger.warning("Ignoring stored coordinate for %s %s: %s", kind, row_id, exc)
        return None


def _inventory(rows: list[models.BloodInventory], bank_id: str) -> dict[BloodGroup, int]:
    """Merge per-group inventory rows into one mapping, summing duplicates."""
    inventory: dict[BloodGroup, int] = {}
    for row in rows:
        try:
            group = BloodGroup(row.blood_group)
        except ValueError:
            logger.warning("Unknown blood group %r in inventory of bank %s", row.blood_group, bank_id)
            continue
        inventory[group] = inventory.get(group, 0) + max(row.units, 0)
    return inventory


def donor_from_row(row: models.Donor) -> Donor:
    return Donor(
        id=row.id,
        name=row.name,
        location=row.location,
        coordinate=_coordinate("donor", row.id, row.latitude, row.longitude),
        contact=row.contact,
        blood_group=row.blood_group,
        availability_status=row.availability_status,
        last_donation_date=row.last_donation_date,
        gender=row.gender,
    )


def blood_bank_from_row(row: models.BloodBank) -> BloodBank:
    return BloodBank(
        id=row.id,
        name=row.name,
        location=row.location,
        coordinate=_coordinate("blood_bank", row.id, row.latitude, row.longitude),
        contact=row.contact,
        email=row.email,
        inventory=_inventory(row.inventory, row.id),
        operating_hours=row.operating_hours,
        is_open=row.is_open,
    )


def oxygen_supplier_from_row(row: models.OxygenSupplier) -> OxygenSupplier:
    return OxygenSupplier(
        id=row.id,
        name=row.name,
        location=row.location,
        coordinate=_coordinate("oxygen_supplier", row.id, row.latitude, row.longitude),
        contact=row.contact,
        operating_hours=row.operating_hours,
    )


class CandidateRepository:
    """Loads matching candidates from the database.

    Every query error is re-raised as DataSourceFailure so the HTTP layer can
    answer 503 instead of an empty list.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _scalars(self, source: str, query) -> list:
        try:
            result = await self._session.execute(query)
        except SQLAlchemyError as exc:
            logger.error("Query against %s failed: %s", source, exc)
            raise DataSourceFailure(source, str(exc)) from exc
        return list(result.scalars().all())

    @staticmethod
    def _convert(rows: list, convert, kind: str) -> list:
        converted = []
        for row in rows:
            try:
                converted.append(convert(row))
            except ValidationError as exc:
                logger.warning("Skipping malformed %s row %s: %s", kind, row.id, exc.errors())
        return converted

    async def list_donors(
        self,
        *,
        blood_group: Optional[BloodGroup] = None,
        available_only: bool = False,
    ) -> list[Donor]:
        query = select(models.Donor).order_by(models.Donor.name)
        if blood_group is not None:
            query = query.where(models.Donor.blood_group == blood_group.value)
        if available_only:
            query = query.where(models.Donor.availability_status == AvailabilityStatus.AVAILABLE.value)
        rows = await self._scalars("donors", query)
        return self._convert(rows, donor_from_row, "donor")

    async def list_blood_banks(self) -> list[BloodBank]:
        rows = await self._scalars("blood_banks", select(models.BloodBank).order_by(models.BloodBank.name))
        return self._convert(rows, blood_bank_from_row, "blood_bank")

    async def list_oxygen_suppliers(self) -> list[OxygenSupplier]:
        rows = await self._scalars(
            "oxygen_suppliers", select(models.OxygenSupplier).order_by(models.OxygenSupplier.name)
        )
        return self._convert(rows, oxygen_supplier_from_row, "oxygen_supplier")

    async def get_blood_bank(self, bank_id: str) -> Optional[BloodBank]:
        rows = await self._scalars(
            "blood_banks", select(models.BloodBank).where(models.BloodBank.id == bank_id)
        )
        if not rows:
            return None
        return blood_bank_from_row(rows[0])

    def fetcher(self, category: CandidateCategory, criteria: SearchCriteria) -> CandidateFetcher:
        """Build the ``fetch_candidates`` collaborator for one search.

        Donor queries are narrowed in SQL to available donors of the requested
        group; an unknown group is left to the filter, which matches nothing.
        """
        try:
            blood_group = parse_blood_group(criteria.blood_group)
        except ValueError:
            blood_group = None

        async def fetch() -> list[Candidate]:
            candidates: list[Candidate] = []
            if category in (CandidateCategory.DONORS, CandidateCategory.BLOOD, CandidateCategory.ALL):
                candidates.extend(
                    await self.list_donors(blood_group=blood_group, available_only=blood_group is not None)
                )
            if category in (CandidateCategory.BLOOD_BANKS, CandidateCategory.BLOOD, CandidateCategory.ALL):
                candidates.extend(await self.list_blood_banks())
            if category in (CandidateCategory.OXYGEN, CandidateCategory.ALL):
                candidates.extend(await self.list_oxygen_suppliers())
            return candidates

        return fetch


__all__ = [
    "CandidateRepository",
    "donor_from_row",
    "blood_bank_from_row",
    "oxygen_supplier_from_row",
]
