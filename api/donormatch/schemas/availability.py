from __future__ import annotations

from pydantic import BaseModel

from donormatch.schemas.candidates import BloodGroup


class AvailabilityLocation(BaseModel):
    bank_id: str
    name: str
    units: int


class AvailabilityResponse(BaseModel):
    blood_group: BloodGroup
    available: bool
    locations: list[AvailabilityLocation]


__all__ = ["AvailabilityLocation", "AvailabilityResponse"]
