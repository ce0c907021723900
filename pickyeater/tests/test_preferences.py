from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest
from pydantic import ValidationError

from pickyeater.catalog.store import BusinessCatalog
from pickyeater.matching.models import Business, DietaryRestriction, Preferences
from pickyeater.preferences.store import PreferencesStore
from pickyeater.service import MatchService

_MISSING_CATALOG = Path(__file__).resolve().parent / "missing-catalog.csv"


# ── Preferences model ────────────────────────────────────────────────────


class TestPreferencesModel:
    def test_cuisine_list_means_full_affinity(self):
        prefs = Preferences(cuisine_preferences=["Thai", " Sushi "])
        assert prefs.cuisine_preferences == {"thai": 1.0, "sushi": 1.0}

    def test_cuisine_weights_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            Preferences(cuisine_preferences={"thai": 1.5})

    def test_restriction_spellings(self):
        prefs = Preferences(dietary_restrictions=["glutenFree", "dairy_free", "Nut Free", "halal"])
        assert prefs.dietary_restrictions == {
            DietaryRestriction.gluten_free,
            DietaryRestriction.dairy_free,
            DietaryRestriction.nut_free,
            DietaryRestriction.halal,
        }

    def test_unknown_restriction_rejected(self):
        with pytest.raises(ValidationError):
            Preferences(dietary_restrictions=["paleo"])

    def test_price_ceiling_range(self):
        with pytest.raises(ValidationError):
            Preferences(price_ceiling=5)

    def test_fingerprint_ignores_ordering(self):
        a = Preferences(cuisine_preferences={"thai": 1.0, "sushi": 0.5}, dietary_restrictions=["vegan", "halal"])
        b = Preferences(cuisine_preferences={"sushi": 0.5, "thai": 1.0}, dietary_restrictions=["halal", "vegan"])
        assert a.fingerprint() == b.fingerprint()

    def test_fingerprint_changes_with_content(self):
        assert Preferences().fingerprint() != Preferences(minimum_rating=4.0).fingerprint()


# ── Store ────────────────────────────────────────────────────────────────


class TestPreferencesStore:
    def test_get_or_default(self):
        store = PreferencesStore()
        assert store.get("u1") is None
        assert store.get_or_default("u1") == Preferences()

    def test_save_notifies_listeners(self):
        store = PreferencesStore()
        seen = []
        store.subscribe(lambda uid, prev, cur: seen.append((uid, prev, cur)))
        first = Preferences(minimum_rating=3.0)
        second = Preferences(minimum_rating=4.0)
        store.save("u1", first)
        store.save("u1", second)
        assert seen == [("u1", None, first), ("u1", first, second)]

    def test_saving_identical_preferences_is_silent(self):
        store = PreferencesStore()
        seen = []
        store.subscribe(lambda *args: seen.append(args))
        store.save("u1", Preferences(price_ceiling=2))
        store.save("u1", Preferences(price_ceiling=2))
        assert len(seen) == 1

    def test_delete_notifies(self):
        store = PreferencesStore()
        seen = []
        store.save("u1", Preferences())
        store.subscribe(lambda *args: seen.append(args))
        assert store.delete("u1") is True
        assert store.delete("u1") is False
        assert seen == [("u1", Preferences(), None)]

    def test_unsubscribe(self):
        store = PreferencesStore()
        seen = []
        unsubscribe = store.subscribe(lambda *args: seen.append(args))
        unsubscribe()
        store.save("u1", Preferences())
        assert seen == []
        assert store.user_ids() == ["u1"]


# ── Invalidation through the service ─────────────────────────────────────


def test_preference_change_invalidates_cached_pages():
    service = MatchService(catalog=BusinessCatalog(_MISSING_CATALOG))
    cheap = Business(id="c", name="Cheap", rating=4.0, price_tier=1)
    pricey = Business(id="p", name="Pricey", rating=4.8, price_tier=4)

    service.update_preferences("u1", Preferences(price_ceiling=2))
    first = service.match_for_user("u1", "soma", businesses=[cheap, pricey])
    assert [b.id for b in first.results] == ["c"]
    assert service.cache.stats()["size"] == 1

    service.update_preferences("u1", Preferences(price_ceiling=4))
    assert service.cache.stats()["size"] == 0

    second = service.match_for_user("u1", "soma", businesses=[cheap, pricey])
    assert [b.id for b in second.results] == ["p", "c"]
    service.close()


def test_cached_page_is_scoped_to_candidate_set():
    service = MatchService(catalog=BusinessCatalog(_MISSING_CATALOG))
    old = Business(id="old", name="Old Spot", rating=4.0)
    new = Business(id="new", name="New Spot", rating=4.0)

    first = service.match_for_user("u1", "soho", businesses=[old])
    second = service.match_for_user("u1", "soho", businesses=[new])

    assert [b.id for b in first.results] == ["old"]
    assert [b.id for b in second.results] == ["new"]
    assert service.cache.stats()["hits"] == 0
    service.close()


def test_users_with_same_preferences_do_not_share_candidates():
    service = MatchService(catalog=BusinessCatalog(_MISSING_CATALOG))
    service.update_preferences("alice", Preferences(minimum_rating=3.0))
    service.update_preferences("bob", Preferences(minimum_rating=3.0))

    alice = service.match_for_user("alice", "soma", businesses=[Business(id="a", name="A", rating=4.0)])
    bob = service.match_for_user("bob", "soma", businesses=[Business(id="b", name="B", rating=4.0)])

    assert [b.id for b in alice.results] == ["a"]
    assert [b.id for b in bob.results] == ["b"]
    service.close()


def test_catalog_reload_is_not_served_stale_pages(tmp_path: Path):
    path = tmp_path / "businesses.csv"
    pd.DataFrame([{"id": "first", "name": "First", "rating": 4.0, "review_count": 10}]).to_csv(path, index=False)
    service = MatchService(catalog=BusinessCatalog(path))
    assert [b.id for b in service.match_for_user("u1", "soma").results] == ["first"]

    pd.DataFrame([{"id": "second", "name": "Second", "rating": 4.0, "review_count": 10}]).to_csv(path, index=False)
    service.catalog.reload()

    assert [b.id for b in service.match_for_user("u1", "soma").results] == ["second"]
    service.close()


def test_cache_hit_records_candidate_count():
    service = MatchService(catalog=BusinessCatalog(_MISSING_CATALOG))
    service.update_preferences("u1", Preferences(minimum_rating=4.0))
    businesses = [
        Business(id="good", name="Good", rating=4.5),
        Business(id="meh", name="Meh", rating=2.0),
        Business(id="bad", name="Bad", rating=1.0),
    ]

    service.match_for_user("u1", "soma", businesses=businesses)
    service.match_for_user("u1", "soma", businesses=businesses)

    miss, hit = service.events.get_events()
    assert miss["cache_hit"] is False
    assert hit["cache_hit"] is True
    assert miss["total_candidates"] == hit["total_candidates"] == 3
    assert hit["results_returned"] == 1
    service.close()
