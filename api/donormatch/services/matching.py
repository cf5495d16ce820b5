from __future__ import annotations

import inspect
import logging
from typing import Awaitable, Callable, Sequence, Union

from donormatch.schemas.candidates import Candidate, RankedResult, SearchCriteria
from donormatch.services.filters import filter_candidates
from donormatch.services.ranking import rank_by_distance

logger = logging.getLogger(__name__)

CandidateFetcher = Callable[[], Union[Sequence[Candidate], Awaitable[Sequence[Candidate]]]]


async def find_matches(criteria: SearchCriteria, fetch_candidates: CandidateFetcher) -> list[RankedResult]:
    """Fetch candidates, filter them by the criteria and rank by distance.

    ``fetch_candidates`` may be a plain function or a coroutine function.
    Whatever it raises (including timeouts and cancellation) reaches the
    caller untouched, so an empty list always means "nothing matched".
    """
    fetched = fetch_candidates()
    if inspect.isawaitable(fetched):
        fetched = await fetched
    candidates = list(fetched)

    filtered = filter_candidates(candidates, criteria)
    results = rank_by_distance(filtered, criteria.seeker, criteria.radius_km)
    logger.debug(
        "find_matches: fetched=%d filtered=%d ranked=%d blood_group=%s radius_km=%s",
        len(candidates),
        len(filtered),
        len(results),
        criteria.blood_group,
        criteria.radius_km,
    )
    return results


__all__ = ["CandidateFetcher", "find_matches"]
