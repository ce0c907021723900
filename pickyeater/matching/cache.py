from __future__ import annotations

import hashlib
import json
import threading
import time
from typing import Any, Sequence

from .models import Business

_DEFAULT_TTL = 300  # 5 minutes
_DEFAULT_MAX_ENTRIES = 256


def candidate_digest(businesses: Sequence[Business]) -> str:
    """Order-independent digest of a candidate set."""
    rows = sorted(json.dumps(b.model_dump(mode="json"), sort_keys=True) for b in businesses)
    return hashlib.sha256("\n".join(rows).encode()).hexdigest()[:16]


def make_key(fingerprint: str, location: str, page: int, page_size: int, candidates: str = "") -> str:
    normalized = json.dumps(
        {
            "location": location.strip().lower(),
            "page": page,
            "page_size": page_size,
            "candidates": candidates,
        },
        sort_keys=True,
    )
    digest = hashlib.sha256(normalized.encode()).hexdigest()[:16]
    return f"{fingerprint}:{digest}"


class MatchCache:
    """Bounded memo of match pages keyed by preferences fingerprint.

    All access goes through one lock. Once ``max_entries`` is reached the
    oldest entry is evicted; entries older than ``ttl_seconds`` count as
    misses. ``invalidate`` drops every page computed for a fingerprint.
    """

    def __init__(
        self,
        max_entries: int = _DEFAULT_MAX_ENTRIES,
        ttl_seconds: float | None = _DEFAULT_TTL,
    ) -> None:
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._entries: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def _expired(self, entry: dict[str, Any]) -> bool:
        if self.ttl_seconds is None:
            return False
        return time.time() - entry["created_at"] >= self.ttl_seconds

    def get(
        self,
        fingerprint: str,
        location: str,
        page: int,
        page_size: int,
        candidates: str = "",
    ) -> Any | None:
        key = make_key(fingerprint, location, page, page_size, candidates)
        with self._lock:
            entry = self._entries.get(key)
            if entry and not self._expired(entry):
                self._hits += 1
                return entry["value"]
            if entry:
                del self._entries[key]
            self._misses += 1
            return None

    def set(
        self,
        fingerprint: str,
        location: str,
        page: int,
        page_size: int,
        value: Any,
        candidates: str = "",
    ) -> None:
        if self.max_entries <= 0:
            return
        key = make_key(fingerprint, location, page, page_size, candidates)
        with self._lock:
            self._entries.pop(key, None)
            while len(self._entries) >= self.max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
            self._entries[key] = {"value": value, "created_at": time.time()}

    def invalidate(self, fingerprint: str) -> int:
        """Remove all entries computed for *fingerprint*; return how many."""
        prefix = f"{fingerprint}:"
        with self._lock:
            stale = [k for k in self._entries if k.startswith(prefix)]
            for k in stale:
                del self._entries[k]
        return len(stale)

    def stats(self) -> dict:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
            }

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
