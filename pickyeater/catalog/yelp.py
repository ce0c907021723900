"""Translate Yelp Fusion business payloads into :class:`Business` records."""

from __future__ import annotations

from typing import Any

from ..matching.models import Business, Coordinates

PRICE_SYMBOLS = ["$", "$$", "$$$", "$$$$"]


def price_tier_from_symbol(price: str | None) -> int | None:
    """Map "$".."$$$$" to 1..4; anything else is an unknown tier."""
    if not price:
        return None
    symbol = price.strip()
    # Some locales use other currency glyphs; only the length matters.
    if symbol and len(set(symbol)) == 1 and 1 <= len(symbol) <= 4:
        return len(symbol)
    return None


def _categories(raw: list[dict[str, Any]] | None) -> list[str]:
    seen: list[str] = []
    for item in raw or []:
        title = (item.get("title") or "").strip()
        if not title:
            title = (item.get("alias") or "").replace("_", " ").strip()
        tag = title.lower()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def _coordinates(raw: dict[str, Any] | None) -> Coordinates | None:
    if not raw:
        return None
    lat, lon = raw.get("latitude"), raw.get("longitude")
    if lat is None or lon is None:
        return None
    return Coordinates(latitude=float(lat), longitude=float(lon))


def _address(location: dict[str, Any] | None) -> str:
    if not location:
        return ""
    display = location.get("display_address")
    if display:
        return ", ".join(str(line) for line in display if line)

    parts = [location.get(k) for k in ("address1", "address2", "address3")]
    components = [p for p in parts if p]
    city = location.get("city") or ""
    state = location.get("state") or ""
    zip_code = location.get("zip_code") or ""
    tail = f"{city}, {state} {zip_code}".strip(" ,")
    if tail:
        components.append(tail)
    return ", ".join(components)


def _is_open(payload: dict[str, Any]) -> bool | None:
    hours = payload.get("hours") or []
    if hours and "is_open_now" in hours[0]:
        return bool(hours[0]["is_open_now"])
    if "is_closed" in payload and payload["is_closed"] is not None:
        return not payload["is_closed"]
    return None


def business_from_yelp(payload: dict[str, Any]) -> Business:
    """Build a :class:`Business` from one entry of a Yelp ``businesses`` list.

    Raises ``ValueError`` when the payload lacks an id or a name, or when a
    field is out of range.
    """
    business_id = payload.get("id")
    name = payload.get("name")
    if not business_id or not name:
        raise ValueError("Yelp business payload requires 'id' and 'name'")

    distance = payload.get("distance")
    return Business(
        id=str(business_id),
        name=str(name),
        rating=float(payload.get("rating") or 0.0),
        review_count=int(payload.get("review_count") or 0),
        price_tier=price_tier_from_symbol(payload.get("price")),
        categories=_categories(payload.get("categories")),
        coordinates=_coordinates(payload.get("coordinates")),
        distance_meters=float(distance) if distance is not None else None,
        is_open=_is_open(payload),
        address=_address(payload.get("location")),
        phone=payload.get("phone") or payload.get("display_phone") or None,
        image_url=payload.get("image_url") or None,
    )


def businesses_from_search_response(response: dict[str, Any] | list) -> list[Business]:
    """Map a ``/businesses/search`` response body (or its bare list)."""
    items = response.get("businesses", []) if isinstance(response, dict) else response
    return [business_from_yelp(item) for item in items]
