"""Hard filters: a business failing any of these never reaches scoring."""

from __future__ import annotations

from .dietary import satisfies_all
from .models import Business, Preferences


def passes_price(business: Business, preferences: Preferences) -> bool:
    # Unknown price tier is not penalised at the filter stage.
    if preferences.price_ceiling is None or business.price_tier is None:
        return True
    return business.price_tier <= preferences.price_ceiling


def passes_rating(business: Business, preferences: Preferences) -> bool:
    return business.rating >= preferences.minimum_rating


def passes_distance(business: Business, preferences: Preferences) -> bool:
    if preferences.maximum_distance_meters is None or business.distance_meters is None:
        return True
    return business.distance_meters <= preferences.maximum_distance_meters


def passes_dietary(business: Business, preferences: Preferences) -> bool:
    if not preferences.dietary_restrictions:
        return True
    return satisfies_all(preferences.dietary_restrictions, business.categories)


_HARD_FILTERS = (passes_price, passes_rating, passes_distance, passes_dietary)


def passes_filters(business: Business, preferences: Preferences) -> bool:
    """Return True when *business* satisfies every hard constraint.

    Cuisine preferences are not checked here; they only influence the score.
    """
    return all(check(business, preferences) for check in _HARD_FILTERS)
