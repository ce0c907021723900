from __future__ import annotations

from .dietary import normalise_tag
from .models import Business, Preferences

# Component weights, summing to MAX_SCORE.
RATING_WEIGHT = 30.0
DISTANCE_WEIGHT = 20.0
PRICE_WEIGHT = 20.0
CUISINE_WEIGHT = 30.0
MAX_SCORE = 100.0


def _rating_score(business: Business) -> float:
    return (business.rating / 5.0) * RATING_WEIGHT


def _distance_score(business: Business, preferences: Preferences) -> float:
    """Closer is better; needs a configured ceiling to normalise against."""
    ceiling = preferences.maximum_distance_meters
    distance = business.distance_meters
    if ceiling is None or distance is None:
        return 0.0
    if ceiling <= 0:
        return DISTANCE_WEIGHT if distance <= 0 else 0.0
    return max(0.0, 1.0 - distance / ceiling) * DISTANCE_WEIGHT


def _price_score(business: Business, preferences: Preferences) -> float:
    if preferences.price_ceiling is None or business.price_tier is None:
        return 0.0
    return PRICE_WEIGHT if business.price_tier <= preferences.price_ceiling else 0.0


def _cuisine_score(business: Business, preferences: Preferences) -> float:
    if not preferences.cuisine_preferences or not business.categories:
        return 0.0
    weights: dict[str, float] = {}
    for cuisine, weight in preferences.cuisine_preferences.items():
        tag = normalise_tag(cuisine)
        weights[tag] = max(weight, weights.get(tag, 0.0))
    per_category = CUISINE_WEIGHT / len(business.categories)
    total = sum(weights.get(normalise_tag(c), 0.0) * per_category for c in business.categories)
    return min(total, CUISINE_WEIGHT)


def score_breakdown(business: Business, preferences: Preferences) -> dict[str, float]:
    """Return each component's contribution, keyed by component name."""
    return {
        "rating": _rating_score(business),
        "distance": _distance_score(business, preferences),
        "price": _price_score(business, preferences),
        "cuisine": _cuisine_score(business, preferences),
    }


def score_business(business: Business, preferences: Preferences) -> float:
    """Compute the weighted match score in [0, 100].

    Only meaningful for businesses that already passed the hard filters.
    """
    total = sum(score_breakdown(business, preferences).values())
    return max(0.0, min(MAX_SCORE, total))
