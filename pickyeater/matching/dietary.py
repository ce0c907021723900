from __future__ import annotations

import re
from typing import Iterable

from .models import DietaryRestriction

_SEPARATORS_RE = re.compile(r"[\s_\-]+")


def normalise_tag(tag: str) -> str:
    """Lower-case a category tag and collapse ``-``, ``_`` and whitespace runs."""
    return _SEPARATORS_RE.sub(" ", tag.strip().lower()).strip()


# Category tags (as the search provider emits them, titles or aliases) that
# satisfy each restriction. Vegan venues serve no meat or dairy, so they also
# satisfy vegetarian and dairy-free.
_SYNONYMS: dict[DietaryRestriction, tuple[str, ...]] = {
    DietaryRestriction.vegetarian: ("vegetarian", "vegetarian friendly", "veggie", "vegan"),
    DietaryRestriction.vegan: ("vegan", "plant based", "vegan friendly"),
    DietaryRestriction.gluten_free: ("gluten free", "glutenfree", "gluten free options", "celiac friendly"),
    DietaryRestriction.dairy_free: ("dairy free", "lactose free", "vegan"),
    DietaryRestriction.nut_free: ("nut free", "peanut free", "allergy friendly"),
    DietaryRestriction.halal: ("halal",),
    DietaryRestriction.kosher: ("kosher",),
}

SYNONYMS: dict[DietaryRestriction, frozenset[str]] = {
    restriction: frozenset(normalise_tag(term) for term in terms)
    for restriction, terms in _SYNONYMS.items()
}


def search_terms(restriction: DietaryRestriction) -> frozenset[str]:
    """Return the normalised category tags that satisfy *restriction*."""
    return SYNONYMS[restriction]


def satisfies(restriction: DietaryRestriction, categories: Iterable[str]) -> bool:
    terms = SYNONYMS[restriction]
    return any(normalise_tag(c) in terms for c in categories)


def satisfies_all(
    restrictions: Iterable[DietaryRestriction], categories: Iterable[str]
) -> bool:
    """True when every restriction is matched by at least one category."""
    normalised = {normalise_tag(c) for c in categories}
    return all(SYNONYMS[r] & normalised for r in restrictions)
