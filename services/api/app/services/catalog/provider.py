from __future__ import annotations

from typing import Protocol

from app.services.catalog.types import CatalogPage


class CatalogProvider(Protocol):
    name: str

    async def search_page(
        self,
        *,
        query: str,
        page_token: str | None = None,
        page_size: int | None = None,
    ) -> CatalogPage: ...
