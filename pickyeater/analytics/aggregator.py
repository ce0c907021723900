from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    matches = [e for e in events if e["type"] == "match"]
    total = len(matches)

    # Average response time
    times = [m["response_time_ms"] for m in matches if "response_time_ms" in m]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Top dietary restrictions
    dietary_counter: Counter[str] = Counter()
    for m in matches:
        for d in m.get("dietary_restrictions", []) or []:
            dietary_counter[d] += 1
    top_dietary = [{"name": n, "count": c} for n, c in dietary_counter.most_common(10)]

    # Top cuisines
    cuisine_counter: Counter[str] = Counter()
    for m in matches:
        for c in m.get("cuisines", []) or []:
            cuisine_counter[c] += 1
    top_cuisines = [{"name": n, "count": c} for n, c in cuisine_counter.most_common(10)]

    # Sort preference usage
    sort_usage = dict(Counter(m.get("sort_preference", "best_match") for m in matches))

    # Filter usage rates
    filter_counts = {"price_ceiling": 0, "rating": 0, "distance": 0, "dietary": 0, "cuisine": 0}
    for m in matches:
        if m.get("price_ceiling") is not None:
            filter_counts["price_ceiling"] += 1
        if m.get("minimum_rating", 0) > 0:
            filter_counts["rating"] += 1
        if m.get("maximum_distance_meters") is not None:
            filter_counts["distance"] += 1
        if m.get("dietary_restrictions"):
            filter_counts["dietary"] += 1
        if m.get("cuisines"):
            filter_counts["cuisine"] += 1
    filter_usage = {
        k: round(v / total * 100, 1) if total else 0.0
        for k, v in filter_counts.items()
    }

    # Cache stats
    cache_hits = sum(1 for m in matches if m.get("cache_hit"))
    cache_misses = total - cache_hits

    empty = sum(1 for m in matches if m.get("results_returned", 0) == 0)

    return {
        "total_matches": total,
        "avg_response_time_ms": avg_time,
        "top_dietary_restrictions": top_dietary,
        "top_cuisines": top_cuisines,
        "sort_preference_usage": sort_usage,
        "filter_usage": filter_usage,
        "cache_stats": {
            "hits": cache_hits,
            "misses": cache_misses,
            "hit_rate": round(cache_hits / total * 100, 1) if total else 0.0,
        },
        "empty_result_rate": round(empty / total * 100, 1) if total else 0.0,
    }
