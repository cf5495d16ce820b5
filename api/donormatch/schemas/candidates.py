from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

DEFAULT_RADIUS_KM = 10.0


class BloodGroup(str, Enum):
    O_POS = "O+"
    O_NEG = "O-"
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"


class AvailabilityStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class CandidateCategory(str, Enum):
    DONORS = "donors"
    BLOOD_BANKS = "blood_banks"
    OXYGEN = "oxygen"
    BLOOD = "blood"  # donors and blood banks together
    ALL = "all"


class Coordinate(BaseModel):
    """Immutable latitude/longitude pair in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(ge=-180, le=180, allow_inf_nan=False)


class _CandidateBase(BaseModel):
    id: str
    name: str
    location: Optional[str] = None
    coordinate: Optional[Coordinate] = None
    contact: Optional[str] = None

    @property
    def search_text(self) -> str:
        """Text matched by the location filter: display name plus location."""
        return " ".join(part for part in (self.name, self.location) if part)


class Donor(_CandidateBase):
    kind: Literal["donor"] = "donor"
    blood_group: BloodGroup
    availability_status: AvailabilityStatus = AvailabilityStatus.AVAILABLE
    last_donation_date: Optional[date] = None
    gender: Optional[str] = None


class BloodBank(_CandidateBase):
    kind: Literal["blood_bank"] = "blood_bank"
    email: Optional[str] = None
    inventory: dict[BloodGroup, NonNegativeInt] = Field(default_factory=dict)
    operating_hours: Optional[str] = None
    is_open: bool = True

    def units_for(self, blood_group: BloodGroup) -> int:
        return self.inventory.get(blood_group, 0)


class OxygenSupplier(_CandidateBase):
    kind: Literal["oxygen_supplier"] = "oxygen_supplier"
    operating_hours: Optional[str] = None


Candidate = Annotated[Union[Donor, BloodBank, OxygenSupplier], Field(discriminator="kind")]


class SearchCriteria(BaseModel):
    """What a seeker is looking for and where they are.

    ``blood_group`` is kept as free text so that unrecognised values reach the
    filter (which matches nothing for them) instead of failing validation.
    ``radius_km=None`` disables radius truncation. ``open_only`` drops blood
    banks that are marked closed; other kinds have no open status.
    """

    seeker: Coordinate
    blood_group: Optional[str] = None
    radius_km: Optional[float] = Field(default=DEFAULT_RADIUS_KM, gt=0, allow_inf_nan=False)
    location_text: Optional[str] = None
    open_only: bool = False

    @field_validator("blood_group", "location_text")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value


class RankedResult(BaseModel):
    candidate: Candidate
    distance_km: float = Field(ge=0)


class MatchListResponse(BaseModel):
    items: list[RankedResult]
    total: int


__all__ = [
    "DEFAULT_RADIUS_KM",
    "BloodGroup",
    "AvailabilityStatus",
    "CandidateCategory",
    "Coordinate",
    "Donor",
    "BloodBank",
    "OxygenSupplier",
    "Candidate",
    "SearchCriteria",
    "RankedResult",
    "MatchListResponse",
]
