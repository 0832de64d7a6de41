from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from app.core.config import settings
from app.services.catalog.factory import get_provider
from app.services.catalog.imdb_provider import ImdbApiProvider
from app.services.catalog.preload import preload_catalog
from app.workers.async_utils import run_async

logger = logging.getLogger(__name__)


def preload_catalog_job() -> dict[str, Any]:
    """Build the catalog snapshot from the seed keywords (runs on an rq worker)."""
    provider = get_provider()
    if not isinstance(provider, ImdbApiProvider):
        # The snapshot provider would only be reading back its own output.
        provider = ImdbApiProvider(
            base_url=settings.catalog_base_url,
            timeout=settings.catalog_timeout_secs,
            user_agent=settings.user_agent,
        )

    try:
        summary = run_async(
            preload_catalog(
                provider,
                snapshot_path=settings.catalog_snapshot_path,
                keywords=settings.preload_keywords,
                max_pages=settings.preload_max_pages,
                page_size=settings.preload_page_size,
            )
        )
    except Exception:
        logger.exception("preload_catalog_job failed")
        raise

    return asdict(summary)
