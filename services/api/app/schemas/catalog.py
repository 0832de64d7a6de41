from __future__ import annotations

from app.schemas.library import CamelModel
from app.services.catalog.types import CatalogTitle
from pydantic import Field


class CatalogSearchResponse(CamelModel):
    success: bool = True
    data: list[CatalogTitle] = Field(default_factory=list)


class PreloadEnqueuedOut(CamelModel):
    success: bool = True
    job_id: str
