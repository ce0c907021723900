from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .catalog.config import DEFAULT_CATALOG_CONFIG

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


@dataclass(frozen=True)
class ServiceConfig:
    default_page_size: int = int(os.getenv("PICKYEATER_PAGE_SIZE", "20"))
    cache_max_entries: int = int(os.getenv("PICKYEATER_CACHE_MAX_ENTRIES", "256"))
    cache_ttl_seconds: float = float(os.getenv("PICKYEATER_CACHE_TTL_SECONDS", "300"))
    workers: int = int(os.getenv("PICKYEATER_WORKERS", "1"))
    min_parallel_batch: int = int(os.getenv("PICKYEATER_MIN_PARALLEL_BATCH", "500"))
    catalog_path: Path = Path(
        os.getenv("PICKYEATER_CATALOG_PATH", str(DEFAULT_CATALOG_CONFIG.processed_path))
    )


DEFAULT_SERVICE_CONFIG = ServiceConfig()
