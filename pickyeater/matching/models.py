from __future__ import annotations

import hashlib
import json
import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DietaryRestriction(str, Enum):
    vegetarian = "vegetarian"
    vegan = "vegan"
    gluten_free = "gluten-free"
    dairy_free = "dairy-free"
    nut_free = "nut-free"
    halal = "halal"
    kosher = "kosher"


_CAMEL_RE = re.compile(r"(?<=[a-z])(?=[A-Z])")


def _restriction_key(raw: str) -> str:
    """Normalise "glutenFree", "gluten_free" or "Gluten Free" to "gluten-free"."""
    text = _CAMEL_RE.sub("-", str(raw).strip())
    return re.sub(r"[\s_]+", "-", text).lower()


class SortPreference(str, Enum):
    best_match = "best_match"
    distance = "distance"
    rating = "rating"
    review_count = "review_count"


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class Business(BaseModel):
    """A restaurant record as returned by the business search provider."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    review_count: int = Field(default=0, ge=0)
    price_tier: int | None = Field(default=None, ge=1, le=4)
    categories: list[str] = Field(default_factory=list)
    coordinates: Coordinates | None = None
    distance_meters: float | None = Field(default=None, ge=0.0)
    is_open: bool | None = None
    address: str = ""
    phone: str | None = None
    image_url: str | None = None

    @field_validator("categories")
    @classmethod
    def _lower_categories(cls, value: list[str]) -> list[str]:
        return [c.strip().lower() for c in value if c and c.strip()]


class Preferences(BaseModel):
    """A user's saved constraints plus sort choice.

    ``cuisine_preferences`` maps a lower-cased cuisine tag to an affinity
    weight in [0, 1]. A plain list of tags is accepted and means weight 1.0
    for every tag.
    """

    model_config = ConfigDict(frozen=True)

    dietary_restrictions: frozenset[DietaryRestriction] = Field(default_factory=frozenset)
    cuisine_preferences: dict[str, float] = Field(default_factory=dict)
    price_ceiling: int | None = Field(default=None, ge=1, le=4)
    minimum_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    maximum_distance_meters: float | None = Field(default=None, ge=0.0)
    sort_preference: SortPreference = SortPreference.best_match

    @field_validator("dietary_restrictions", mode="before")
    @classmethod
    def _normalise_restrictions(cls, value):
        if value is None:
            return frozenset()
        if isinstance(value, (str, DietaryRestriction)):
            value = [value]
        return frozenset(
            v if isinstance(v, DietaryRestriction) else _restriction_key(v) for v in value
        )

    @field_validator("cuisine_preferences", mode="before")
    @classmethod
    def _normalise_cuisines(cls, value):
        if value is None:
            return {}
        if isinstance(value, (list, tuple, set, frozenset)):
            value = {tag: 1.0 for tag in value}
        normalised: dict[str, float] = {}
        for tag, weight in dict(value).items():
            key = str(tag).strip().lower()
            if not key:
                continue
            weight = 1.0 if weight is None else float(weight)
            if not 0.0 <= weight <= 1.0:
                raise ValueError(f"affinity weight for {key!r} must be within [0, 1]")
            normalised[key] = weight
        return normalised

    def fingerprint(self) -> str:
        """Return a short stable hash identifying these preferences."""
        canonical = self.model_dump(mode="json")
        canonical["dietary_restrictions"] = sorted(canonical["dietary_restrictions"])
        payload = json.dumps(canonical, sort_keys=True)
        return hashlib.sha256(payload.encode()).hexdigest()[:16]


class MatchResult(BaseModel):
    """A business that survived filtering, paired with its transient score."""

    model_config = ConfigDict(frozen=True)

    business: Business
    score: float = Field(..., ge=0.0, le=100.0)


# ── API payloads ─────────────────────────────────────────────────────────


class MatchRequest(BaseModel):
    businesses: list[Business] = Field(default_factory=list)
    preferences: Preferences = Field(default_factory=Preferences)
    page: int = Field(default=0, ge=0)
    page_size: int = Field(default=20, ge=0, le=200)


class UserMatchRequest(BaseModel):
    location: str = Field(..., min_length=1, description="Query origin the candidates were fetched for")
    businesses: list[Business] | None = Field(
        default=None,
        description="Provider results; the local catalog snapshot is used when omitted",
    )
    page: int = Field(default=0, ge=0)
    page_size: int = Field(default=20, ge=0, le=200)


class MatchResponse(BaseModel):
    results: list[Business]
    total_matches: int
    page: int
    page_size: int
    has_more: bool
