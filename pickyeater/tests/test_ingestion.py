import json
from pathlib import Path

import pandas as pd

from pickyeater.catalog.config import CatalogConfig
from pickyeater.catalog.ingest import CANONICAL_COLUMNS, run_ingestion
from pickyeater.catalog.store import BusinessCatalog

RAW_RESPONSE = {
    "businesses": [
        {
            "id": "veg-1",
            "name": "Green Table",
            "rating": 4.5,
            "review_count": 210,
            "price": "$$",
            "categories": [{"alias": "vegan", "title": "Vegan"}, {"alias": "cafes", "title": "Cafes"}],
            "coordinates": {"latitude": 37.77, "longitude": -122.42},
            "distance": 650.5,
            "is_closed": False,
            "location": {"display_address": ["1 Market St", "San Francisco, CA 94105"]},
            "phone": "+14155550101",
        },
        {
            "id": "bbq-1",
            "name": "Smoke House",
            "rating": 3.5,
            "review_count": 48,
            "categories": [{"alias": "bbq", "title": "Barbeque"}],
        },
        {"id": "broken"},
        {"id": "veg-1", "name": "Green Table (duplicate)", "rating": 1.0},
    ],
    "total": 4,
}


def _config(tmp_path: Path) -> CatalogConfig:
    return CatalogConfig(
        raw_data_dir=tmp_path / "raw",
        processed_data_dir=tmp_path / "processed",
    )


def test_run_ingestion_creates_canonical_csv(tmp_path: Path):
    cfg = _config(tmp_path)
    cfg.raw_data_dir.mkdir(parents=True)
    (cfg.raw_data_dir / "soma.json").write_text(json.dumps(RAW_RESPONSE))

    output_path = run_ingestion(config=cfg)

    assert output_path.is_file(), "Processed CSV should be created"
    df = pd.read_csv(output_path)
    assert list(df.columns) == CANONICAL_COLUMNS
    assert df["id"].tolist() == ["veg-1", "bbq-1"]


def test_catalog_loads_ingested_businesses(tmp_path: Path):
    cfg = _config(tmp_path)
    cfg.raw_data_dir.mkdir(parents=True)
    (cfg.raw_data_dir / "soma.json").write_text(json.dumps(RAW_RESPONSE))
    run_ingestion(config=cfg)

    businesses = {b.id: b for b in BusinessCatalog(cfg.processed_path).businesses()}

    green = businesses["veg-1"]
    assert green.name == "Green Table"
    assert green.price_tier == 2
    assert green.categories == ["vegan", "cafes"]
    assert green.distance_meters == 650.5
    assert green.is_open is True
    assert green.coordinates is not None
    assert green.address == "1 Market St, San Francisco, CA 94105"
    assert green.phone == "+14155550101"

    smoke = businesses["bbq-1"]
    assert smoke.price_tier is None
    assert smoke.distance_meters is None
    assert smoke.coordinates is None
    assert smoke.is_open is None
    assert smoke.review_count == 48


def test_empty_raw_directory_yields_empty_catalog(tmp_path: Path):
    cfg = _config(tmp_path)
    output_path = run_ingestion(config=cfg)
    assert BusinessCatalog(output_path).businesses() == []


def test_missing_catalog_file_is_empty(tmp_path: Path):
    assert BusinessCatalog(tmp_path / "nope.csv").businesses() == []


def test_catalog_reload_picks_up_new_snapshot(tmp_path: Path):
    cfg = _config(tmp_path)
    catalog = BusinessCatalog(cfg.processed_path)
    assert catalog.businesses() == []

    cfg.raw_data_dir.mkdir(parents=True)
    (cfg.raw_data_dir / "soma.json").write_text(json.dumps(RAW_RESPONSE))
    run_ingestion(config=cfg)

    assert catalog.businesses() == []
    assert [b.id for b in catalog.reload()] == ["veg-1", "bbq-1"]
