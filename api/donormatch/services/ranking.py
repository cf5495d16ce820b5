from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

from donormatch.schemas.candidates import DEFAULT_RADIUS_KM, Candidate, Coordinate, RankedResult
from donormatch.services.geospatial import distance_km, validate_coordinate

logger = logging.getLogger(__name__)


def rank_by_distance(
    candidates: Iterable[Candidate],
    seeker: Coordinate,
    radius_km: Optional[float] = DEFAULT_RADIUS_KM,
) -> list[RankedResult]:
    """Attach seeker distance to each candidate and order them nearest first.

    Candidates without a coordinate are dropped. When ``radius_km`` is set,
    anything farther away is dropped too; ``None`` keeps every distance.
    Equal distances keep their input order.
    """
    if radius_km is not None:
        if not math.isfinite(radius_km):
            raise ValueError("radius_km must be a finite number")
        if radius_km <= 0:
            raise ValueError("radius_km must be positive")
    seeker = validate_coordinate(seeker.latitude, seeker.longitude)

    ranked: list[RankedResult] = []
    skipped = 0
    for candidate in candidates:
        if candidate.coordinate is None:
            skipped += 1
            logger.debug("Skipping %s %s without coordinate", candidate.kind, candidate.id)
            continue
        distance = distance_km(seeker, candidate.coordinate)
        if radius_km is not None and distance > radius_km:
            continue
        ranked.append(RankedResult(candidate=candidate, distance_km=distance))

    if skipped:
        logger.info("Excluded %d candidate(s) with no coordinate from ranking", skipped)

    # list.sort is stable, so ties keep their original relative order
    ranked.sort(key=lambda result: result.distance_km)
    return ranked


__all__ = ["rank_by_distance"]
