from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

import pandas as pd

from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .yelp import business_from_yelp

logger = logging.getLogger(__name__)

CATEGORY_SEPARATOR = "|"

CANONICAL_COLUMNS: List[str] = [
    "id",
    "name",
    "rating",
    "review_count",
    "price_tier",
    "categories",
    "latitude",
    "longitude",
    "distance_meters",
    "is_open",
    "address",
    "phone",
    "image_url",
]


def _read_raw_file(path: Path) -> list[dict[str, Any]]:
    with path.open(encoding="utf-8") as fh:
        body = json.load(fh)
    if isinstance(body, dict):
        return list(body.get("businesses", []))
    return list(body)


def _to_row(payload: dict[str, Any]) -> dict[str, Any]:
    business = business_from_yelp(payload)
    coords = business.coordinates
    return {
        "id": business.id,
        "name": business.name,
        "rating": business.rating,
        "review_count": business.review_count,
        "price_tier": business.price_tier,
        "categories": CATEGORY_SEPARATOR.join(business.categories),
        "latitude": coords.latitude if coords else None,
        "longitude": coords.longitude if coords else None,
        "distance_meters": business.distance_meters,
        "is_open": business.is_open,
        "address": business.address,
        "phone": business.phone,
        "image_url": business.image_url,
    }


def run_ingestion(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> Path:
    """
    Build the local business catalog snapshot.

    Steps:
    - Read every saved Yelp search response (``*.json``) from the raw directory.
    - Map each business into the canonical schema, skipping malformed records.
    - Drop duplicate ids (first occurrence wins) and persist as CSV.
    """

    config.raw_data_dir.mkdir(parents=True, exist_ok=True)
    config.processed_data_dir.mkdir(parents=True, exist_ok=True)

    rows: list[dict[str, Any]] = []
    for path in sorted(config.raw_data_dir.glob("*.json")):
        for payload in _read_raw_file(path):
            try:
                rows.append(_to_row(payload))
            except (ValueError, TypeError, AttributeError):
                logger.warning("Skipping malformed business record in %s", path.name, exc_info=True)

    canonical = pd.DataFrame(rows, columns=CANONICAL_COLUMNS)
    canonical = canonical.drop_duplicates(subset="id", keep="first")
    canonical["price_tier"] = canonical["price_tier"].astype("Int64")
    canonical["review_count"] = canonical["review_count"].astype("Int64")

    output_path = config.processed_path
    canonical.to_csv(output_path, index=False)
    logger.info("Wrote %d businesses to %s", len(canonical), output_path)
    return output_path


if __name__ == "__main__":
    path = run_ingestion()
    print(f"Ingestion complete. Catalog saved to: {path}")
