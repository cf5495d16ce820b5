from __future__ import annotations

from typing import Iterable, Optional

from donormatch.schemas.availability import AvailabilityLocation, AvailabilityResponse
from donormatch.schemas.candidates import BloodBank, BloodGroup


def check_blood_availability(
    banks: Iterable[BloodBank],
    blood_group: BloodGroup,
    bank_id: Optional[str] = None,
) -> AvailabilityResponse:
    """Report which blood banks hold at least one unit of ``blood_group``.

    When ``bank_id`` is given only that bank is considered.
    """
    relevant = [bank for bank in banks if bank_id is None or bank.id == bank_id]
    locations = [
        AvailabilityLocation(bank_id=bank.id, name=bank.name, units=bank.units_for(blood_group))
        for bank in relevant
        if bank.units_for(blood_group) > 0
    ]
    return AvailabilityResponse(
        blood_group=blood_group,
        available=bool(locations),
        locations=locations,
    )


__all__ = ["check_blood_availability"]
