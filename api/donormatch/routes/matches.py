from __future__ import annotations

import math
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from donormatch.core.config import get_settings
from donormatch.db.repository import CandidateRepository
from donormatch.db.session import get_async_session
from donormatch.schemas.candidates import CandidateCategory, MatchListResponse, SearchCriteria
from donormatch.services.geospatial import validate_coordinate
from donormatch.services.matching import find_matches

router = APIRouter(prefix="/matches", tags=["matches"])
settings = get_settings()


@router.get("")
async def matches_nearby(
    lat: float = Query(...),
    lon: float = Query(...),
    blood_group: Optional[str] = Query(None),
    radius_km: Optional[float] = Query(None),
    location: Optional[str] = Query(None),
    category: CandidateCategory = Query(CandidateCategory.BLOOD),
    open_only: bool = Query(False),
) -> MatchListResponse:
    seeker = validate_coordinate(lat, lon)
    radius = radius_km if radius_km is not None else settings.default_radius_km
    if not math.isfinite(radius):
        raise HTTPException(status_code=400, detail="radius_km must be a finite number")
    if radius <= 0:
        raise HTTPException(status_code=400, detail="radius_km must be positive")
    if radius > settings.max_radius_km:
        raise HTTPException(
            status_code=400,
            detail=f"Search radius cannot exceed {settings.max_radius_km:g}km",
        )

    criteria = SearchCriteria(
        seeker=seeker,
        blood_group=blood_group,
        radius_km=radius,
        location_text=location,
        open_only=open_only,
    )
    async with get_async_session() as session:
        repository = CandidateRepository(session)
        results = await find_matches(criteria, repository.fetcher(category, criteria))
    return MatchListResponse(items=results, total=len(results))
