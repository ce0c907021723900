from __future__ import annotations

import logging
import time
from typing import Sequence

from .analytics.store import EventStore
from .catalog.store import BusinessCatalog
from .config import DEFAULT_SERVICE_CONFIG, ServiceConfig
from .matching.cache import MatchCache, candidate_digest
from .matching.engine import paginate, rank
from .matching.models import Business, MatchResponse, Preferences
from .preferences.store import PreferencesStore

logger = logging.getLogger(__name__)


class MatchService:
    """Wires the matcher to preference storage, the page cache and analytics.

    Cached pages are keyed by preferences fingerprint, so the service
    subscribes to the preferences store and drops the previous fingerprint's
    pages whenever a user edits their preferences.
    """

    def __init__(
        self,
        preferences: PreferencesStore | None = None,
        cache: MatchCache | None = None,
        catalog: BusinessCatalog | None = None,
        events: EventStore | None = None,
        config: ServiceConfig = DEFAULT_SERVICE_CONFIG,
    ) -> None:
        self.config = config
        self.preferences = preferences or PreferencesStore()
        self.cache = cache or MatchCache(
            max_entries=config.cache_max_entries,
            ttl_seconds=config.cache_ttl_seconds,
        )
        self.catalog = catalog or BusinessCatalog(config.catalog_path)
        self.events = events or EventStore()
        self._unsubscribe = self.preferences.subscribe(self._on_preferences_changed)

    def _on_preferences_changed(
        self,
        user_id: str,
        previous: Preferences | None,
        current: Preferences | None,
    ) -> None:
        stale = previous or Preferences()
        dropped = self.cache.invalidate(stale.fingerprint())
        logger.info("Invalidated %d cached pages after preference change for %s", dropped, user_id)

    def close(self) -> None:
        self._unsubscribe()

    # ── Matching ─────────────────────────────────────────────────────────

    def _build_response(
        self,
        businesses: Sequence[Business],
        preferences: Preferences,
        page: int,
        page_size: int,
    ) -> MatchResponse:
        ranked = rank(
            businesses,
            preferences,
            workers=self.config.workers,
            min_parallel_batch=self.config.min_parallel_batch,
        )
        page_items = paginate(ranked, page, page_size)
        return MatchResponse(
            results=[r.business for r in page_items],
            total_matches=len(ranked),
            page=page,
            page_size=page_size,
            has_more=page_size > 0 and (page + 1) * page_size < len(ranked),
        )

    def _record(
        self,
        preferences: Preferences,
        response: MatchResponse,
        candidates: int,
        start_time: float,
        cache_hit: bool,
        location: str | None = None,
    ) -> None:
        elapsed_ms = round((time.time() - start_time) * 1000, 1)
        self.events.record_event("match", {
            "location": location,
            "dietary_restrictions": sorted(d.value for d in preferences.dietary_restrictions),
            "cuisines": sorted(preferences.cuisine_preferences),
            "price_ceiling": preferences.price_ceiling,
            "minimum_rating": preferences.minimum_rating,
            "maximum_distance_meters": preferences.maximum_distance_meters,
            "sort_preference": preferences.sort_preference.value,
            "total_candidates": candidates,
            "results_returned": len(response.results),
            "response_time_ms": elapsed_ms,
            "cache_hit": cache_hit,
        })

    def match(
        self,
        businesses: Sequence[Business],
        preferences: Preferences,
        page: int = 0,
        page_size: int | None = None,
    ) -> MatchResponse:
        """Rank *businesses* for *preferences* without touching the cache."""
        start_time = time.time()
        if page_size is None:
            page_size = self.config.default_page_size
        response = self._build_response(businesses, preferences, page, page_size)
        self._record(preferences, response, len(businesses), start_time, cache_hit=False)
        return response

    def match_for_user(
        self,
        user_id: str,
        location: str,
        businesses: Sequence[Business] | None = None,
        page: int = 0,
        page_size: int | None = None,
    ) -> MatchResponse:
        """Return a page of matches for a user's saved preferences at *location*.

        Falls back to the catalog snapshot when *businesses* is None. Pages
        are cached per candidate set, so a new candidate list or a reloaded
        catalog never reuses a page ranked from different businesses.
        """
        start_time = time.time()
        if page_size is None:
            page_size = self.config.default_page_size
        preferences = self.preferences.get_or_default(user_id)
        fingerprint = preferences.fingerprint()
        candidates = self.catalog.businesses() if businesses is None else businesses
        digest = candidate_digest(candidates)

        cached = self.cache.get(fingerprint, location, page, page_size, digest)
        if cached is not None:
            self._record(preferences, cached, len(candidates), start_time, True, location)
            return cached

        response = self._build_response(candidates, preferences, page, page_size)
        self.cache.set(fingerprint, location, page, page_size, response, digest)
        self._record(preferences, response, len(candidates), start_time, False, location)
        return response

    # ── Preferences ──────────────────────────────────────────────────────

    def get_preferences(self, user_id: str) -> Preferences | None:
        return self.preferences.get(user_id)

    def update_preferences(self, user_id: str, preferences: Preferences) -> Preferences:
        self.preferences.save(user_id, preferences)
        return preferences

    def delete_preferences(self, user_id: str) -> bool:
        return self.preferences.delete(user_id)

    def list_users(self) -> list[str]:
        return self.preferences.user_ids()


def build_service(config: ServiceConfig = DEFAULT_SERVICE_CONFIG) -> MatchService:
    return MatchService(config=config)
