from __future__ import annotations

from functools import lru_cache

from app.core.config import settings
from app.services.catalog.imdb_provider import ImdbApiProvider
from app.services.catalog.provider import CatalogProvider
from app.services.catalog.snapshot_provider import SnapshotProvider


@lru_cache
def get_provider() -> CatalogProvider:
    if settings.catalog_provider == "imdbapi":
        return ImdbApiProvider(
            base_url=settings.catalog_base_url,
            timeout=settings.catalog_timeout_secs,
            user_agent=settings.user_agent,
        )
    if settings.catalog_provider == "snapshot":
        return SnapshotProvider(snapshot_path=settings.catalog_snapshot_path)
    raise ValueError(f"Unknown catalog provider: {settings.catalog_provider}")
