"""
Preference matcher & ranker.

Responsibilities:
- Drop businesses that fail a hard constraint (price, rating, distance, dietary).
- Score survivors with a weighted rating / distance / price / cuisine heuristic.
- Sort into a deterministic total order and return the requested page.
- Memoize pages per preferences fingerprint with explicit invalidation.
"""

from .engine import match, paginate, rank
from .errors import InvalidArgument
from .models import (
    Business,
    Coordinates,
    DietaryRestriction,
    MatchResult,
    Preferences,
    SortPreference,
)

__all__ = [
    "Business",
    "Coordinates",
    "DietaryRestriction",
    "InvalidArgument",
    "MatchResult",
    "Preferences",
    "SortPreference",
    "match",
    "paginate",
    "rank",
]
