from __future__ import annotations

import logging
from typing import Iterable, Optional

from donormatch.schemas.candidates import (
    AvailabilityStatus,
    BloodBank,
    BloodGroup,
    Candidate,
    Donor,
    SearchCriteria,
)

logger = logging.getLogger(__name__)


def parse_blood_group(value: Optional[str]) -> Optional[BloodGroup]:
    """Normalise user text like ``" ab+ "`` to a BloodGroup.

    Returns None for blank input and raises ValueError for anything that is
    not one of the eight ABO/Rh groups.
    """
    if value is None:
        return None
    if isinstance(value, BloodGroup):
        return value
    normalized = "".join(value.split()).upper()
    if not normalized:
        return None
    return BloodGroup(normalized)


def _has_blood_group(candidate: Candidate, blood_group: BloodGroup) -> bool:
    if isinstance(candidate, Donor):
        return (
            candidate.blood_group == blood_group
            and candidate.availability_status == AvailabilityStatus.AVAILABLE
        )
    if isinstance(candidate, BloodBank):
        return candidate.units_for(blood_group) > 0
    # Oxygen suppliers carry no blood at all
    return False


def _is_closed(candidate: Candidate) -> bool:
    return isinstance(candidate, BloodBank) and not candidate.is_open


def _matches_location_text(candidate: Candidate, needle: str) -> bool:
    return needle in candidate.search_text.lower()


def filter_candidates(candidates: Iterable[Candidate], criteria: SearchCriteria) -> list[Candidate]:
    """Keep the candidates that satisfy every attribute criterion that is set.

    Input order is preserved. Distance is not considered here.
    """
    blood_group: Optional[BloodGroup] = None
    if criteria.blood_group is not None:
        try:
            blood_group = parse_blood_group(criteria.blood_group)
        except ValueError:
            logger.warning("Unknown blood group %r in search criteria; matching nothing", criteria.blood_group)
            return []

    needle = criteria.location_text.strip().lower() if criteria.location_text else None

    kept: list[Candidate] = []
    for candidate in candidates:
        if blood_group is not None and not _has_blood_group(candidate, blood_group):
            continue
        if needle and not _matches_location_text(candidate, needle):
            continue
        if criteria.open_only and _is_closed(candidate):
            continue
        kept.append(candidate)
    return kept


__all__ = ["parse_blood_group", "filter_candidates"]
