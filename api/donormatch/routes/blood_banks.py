from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from donormatch.db.repository import CandidateRepository
from donormatch.db.session import get_async_session
from donormatch.schemas.availability import AvailabilityResponse
from donormatch.schemas.candidates import BloodBank, BloodGroup
from donormatch.services.availability import check_blood_availability
from donormatch.services.filters import parse_blood_group

router = APIRouter(prefix="/blood-banks", tags=["blood-banks"])


@router.get("/availability")
async def blood_availability(
    blood_group: str = Query(...),
    bank_id: Optional[str] = Query(None),
) -> AvailabilityResponse:
    try:
        group = parse_blood_group(blood_group)
    except ValueError:
        group = None
    if group is None:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid blood_group. Must be one of: {', '.join(g.value for g in BloodGroup)}",
        )

    async with get_async_session() as session:
        banks = await CandidateRepository(session).list_blood_banks()
    return check_blood_availability(banks, group, bank_id=bank_id)


@router.get("/{bank_id}")
async def blood_bank_detail(bank_id: str) -> BloodBank:
    async with get_async_session() as session:
        bank = await CandidateRepository(session).get_blood_bank(bank_id)
    if bank is None:
        raise HTTPException(status_code=404, detail="Blood bank not found")
    return bank
