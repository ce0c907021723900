from __future__ import annotations

import logging
import threading
from pathlib import Path

import pandas as pd

from ..matching.models import Business, Coordinates
from .ingest import CATEGORY_SEPARATOR

logger = logging.getLogger(__name__)


def _optional(value):
    return None if pd.isna(value) else value


def _parse_bool(value) -> bool | None:
    if pd.isna(value):
        return None
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _row_to_business(row: pd.Series) -> Business:
    lat, lon = _optional(row.get("latitude")), _optional(row.get("longitude"))
    categories = _optional(row.get("categories")) or ""
    price = _optional(row.get("price_tier"))
    distance = _optional(row.get("distance_meters"))
    return Business(
        id=str(row["id"]),
        name=str(row["name"]),
        rating=float(_optional(row.get("rating")) or 0.0),
        review_count=int(_optional(row.get("review_count")) or 0),
        price_tier=int(price) if price is not None else None,
        categories=[c for c in str(categories).split(CATEGORY_SEPARATOR) if c],
        coordinates=Coordinates(latitude=float(lat), longitude=float(lon))
        if lat is not None and lon is not None
        else None,
        distance_meters=float(distance) if distance is not None else None,
        is_open=_parse_bool(row.get("is_open")),
        address=str(_optional(row.get("address")) or ""),
        phone=_optional(row.get("phone")),
        image_url=_optional(row.get("image_url")),
    )


class BusinessCatalog:
    """Local snapshot of provider results, loaded from the processed CSV on first use."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._businesses: list[Business] | None = None
        self._lock = threading.Lock()

    def _load(self) -> list[Business]:
        if not self.path.exists():
            logger.warning("Business catalog %s not found, serving no candidates", self.path)
            return []
        df = pd.read_csv(self.path, dtype={"id": str, "phone": str})
        return [_row_to_business(row) for _, row in df.iterrows()]

    def businesses(self) -> list[Business]:
        """Return the catalog's businesses, loading them on first call."""
        with self._lock:
            if self._businesses is None:
                self._businesses = self._load()
            return self._businesses

    def reload(self) -> list[Business]:
        with self._lock:
            self._businesses = self._load()
            return self._businesses
