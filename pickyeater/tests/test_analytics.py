from __future__ import annotations

from pickyeater.analytics.aggregator import compute_analytics
from pickyeater.analytics.store import EventStore


def test_analytics_empty():
    body = compute_analytics([])
    assert body["total_matches"] == 0
    assert body["avg_response_time_ms"] == 0.0
    assert body["cache_stats"]["hit_rate"] == 0.0
    assert body["empty_result_rate"] == 0.0


def test_analytics_aggregates_match_events():
    store = EventStore()
    store.record_event("match", {
        "dietary_restrictions": ["vegan"],
        "cuisines": ["thai"],
        "price_ceiling": 2,
        "minimum_rating": 4.0,
        "maximum_distance_meters": None,
        "sort_preference": "rating",
        "results_returned": 0,
        "response_time_ms": 4.0,
        "cache_hit": False,
    })
    store.record_event("match", {
        "dietary_restrictions": ["vegan", "halal"],
        "cuisines": [],
        "price_ceiling": None,
        "minimum_rating": 0.0,
        "maximum_distance_meters": 1500,
        "sort_preference": "best_match",
        "results_returned": 5,
        "response_time_ms": 2.0,
        "cache_hit": True,
    })
    store.record_event("preferences_saved", {"user_id": "u1"})

    body = compute_analytics(store.get_events())

    assert body["total_matches"] == 2
    assert body["avg_response_time_ms"] == 3.0
    assert body["top_dietary_restrictions"][0] == {"name": "vegan", "count": 2}
    assert body["top_cuisines"] == [{"name": "thai", "count": 1}]
    assert body["sort_preference_usage"] == {"rating": 1, "best_match": 1}
    assert body["filter_usage"] == {
        "price_ceiling": 50.0,
        "rating": 50.0,
        "distance": 50.0,
        "dietary": 100.0,
        "cuisine": 50.0,
    }
    assert body["cache_stats"] == {"hits": 1, "misses": 1, "hit_rate": 50.0}
    assert body["empty_result_rate"] == 50.0


def test_clear_events():
    store = EventStore()
    store.record_event("match", {})
    store.clear_events()
    assert store.get_events() == []
