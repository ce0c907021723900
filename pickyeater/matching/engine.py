from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence

from .errors import InvalidArgument
from .filters import passes_filters
from .models import Business, MatchResult, Preferences, SortPreference
from .scoring import score_business

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
DEFAULT_MIN_PARALLEL_BATCH = 500


def _filter_and_score(
    businesses: Sequence[Business], preferences: Preferences
) -> list[MatchResult]:
    return [
        MatchResult(business=b, score=score_business(b, preferences))
        for b in businesses
        if passes_filters(b, preferences)
    ]


def _chunks(businesses: Sequence[Business], count: int) -> list[Sequence[Business]]:
    size = max(1, math.ceil(len(businesses) / count))
    return [businesses[i:i + size] for i in range(0, len(businesses), size)]


def score_candidates(
    businesses: Sequence[Business],
    preferences: Preferences,
    workers: int = 1,
    min_parallel_batch: int = DEFAULT_MIN_PARALLEL_BATCH,
) -> list[MatchResult]:
    """Filter and score *businesses*, keeping input order.

    With ``workers > 1`` and a large enough input the work is split into
    contiguous chunks run on a thread pool; chunk results are concatenated
    in input order.
    """
    if workers <= 1 or len(businesses) < min_parallel_batch:
        return _filter_and_score(businesses, preferences)

    chunks = _chunks(businesses, workers)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        parts = pool.map(lambda chunk: _filter_and_score(chunk, preferences), chunks)
        results: list[MatchResult] = []
        for part in parts:
            results.extend(part)
    return results


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------
# Every key ends with review_count desc and id asc so that the order is total
# and pages stay stable across repeated calls.


def _best_match_key(r: MatchResult) -> tuple:
    return (-r.score, -r.business.review_count, r.business.id)


def _distance_key(r: MatchResult) -> tuple:
    distance = r.business.distance_meters
    return (
        distance is None,
        distance if distance is not None else 0.0,
        -r.score,
        -r.business.review_count,
        r.business.id,
    )


def _rating_key(r: MatchResult) -> tuple:
    return (-r.business.rating, -r.score, -r.business.review_count, r.business.id)


def _review_count_key(r: MatchResult) -> tuple:
    return (-r.business.review_count, -r.score, r.business.id)


_SORT_KEYS: dict[SortPreference, Callable[[MatchResult], tuple]] = {
    SortPreference.best_match: _best_match_key,
    SortPreference.distance: _distance_key,
    SortPreference.rating: _rating_key,
    SortPreference.review_count: _review_count_key,
}


def rank(
    businesses: Sequence[Business],
    preferences: Preferences,
    workers: int = 1,
    min_parallel_batch: int = DEFAULT_MIN_PARALLEL_BATCH,
) -> list[MatchResult]:
    """Return every business passing the hard filters, scored and fully sorted."""
    if not businesses:
        return []
    scored = score_candidates(
        businesses, preferences, workers=workers, min_parallel_batch=min_parallel_batch,
    )
    scored.sort(key=_SORT_KEYS[preferences.sort_preference])
    logger.debug(
        "Ranked %d of %d candidates by %s",
        len(scored), len(businesses), preferences.sort_preference.value,
    )
    return scored


def _validate_page(page: int, page_size: int) -> None:
    if page < 0:
        raise InvalidArgument(f"page must be >= 0, got {page}")
    if page_size < 0:
        raise InvalidArgument(f"page_size must be >= 0, got {page_size}")


def paginate(items: Sequence, page: int, page_size: int) -> list:
    """Return ``items[page*page_size : (page+1)*page_size]``; empty past the end."""
    _validate_page(page, page_size)
    start = page * page_size
    if start >= len(items):
        return []
    return list(items[start:min(start + page_size, len(items))])


def match(
    businesses: Sequence[Business],
    preferences: Preferences,
    page: int = 0,
    page_size: int = DEFAULT_PAGE_SIZE,
    workers: int = 1,
    min_parallel_batch: int = DEFAULT_MIN_PARALLEL_BATCH,
) -> list[Business]:
    """Filter, score, sort and paginate *businesses* against *preferences*.

    Returns the businesses on the requested 0-based page. Scores are not
    returned; use :func:`rank` when they are needed.

    Raises ``InvalidArgument`` for a negative page or page size.
    """
    _validate_page(page, page_size)
    ranked = rank(
        businesses, preferences, workers=workers, min_parallel_batch=min_parallel_batch,
    )
    return [r.business for r in paginate(ranked, page, page_size)]
