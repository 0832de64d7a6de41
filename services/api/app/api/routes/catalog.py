from __future__ import annotations

from app.api.deps import get_catalog_provider
from app.api.rate_limit import rate_limiter
from app.core.config import settings
from app.schemas.catalog import CatalogSearchResponse, PreloadEnqueuedOut
from app.services.catalog.provider import CatalogProvider
from app.services.catalog.search import search_titles
from app.services.catalog.snapshot_provider import load_snapshot
from app.services.errors import UpstreamError
from app.workers.queue import enqueue_catalog_preload
from fastapi import APIRouter, Depends, HTTPException, Query

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get(
    "/search",
    response_model=CatalogSearchResponse,
    dependencies=[
        Depends(
            rate_limiter(
                "catalog_search",
                limit=settings.rate_limit_search_per_window,
                window_seconds=settings.rate_limit_window_seconds,
            )
        )
    ],
)
async def search_catalog(
    query: str = Query(default=""),
    limit: int | None = Query(default=None, ge=1, le=200),
    provider: CatalogProvider = Depends(get_catalog_provider),
):
    try:
        titles = await search_titles(provider, query, limit=limit)
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=e.message)
    return CatalogSearchResponse(data=titles)


@router.get("/movies", response_model=CatalogSearchResponse)
def list_snapshot_movies():
    try:
        titles = load_snapshot(settings.catalog_snapshot_path)
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return CatalogSearchResponse(data=titles)


@router.post("/preload", response_model=PreloadEnqueuedOut, status_code=202)
def start_catalog_preload():
    job = enqueue_catalog_preload()
    return PreloadEnqueuedOut(job_id=job.id)
