from __future__ import annotations

import json
import logging
from pathlib import Path

from app.services.catalog.types import CatalogPage, CatalogTitle

logger = logging.getLogger(__name__)


def _norm(s: str) -> str:
    return " ".join(s.lower().split())


def load_snapshot(path: str | Path) -> list[CatalogTitle]:
    """Read a snapshot written by the preload. Missing file means no titles."""
    p = Path(path)
    if not p.exists():
        return []
    raw = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"Catalog snapshot must be a JSON array: {p}")
    return [CatalogTitle.model_validate(it) for it in raw]


class SnapshotProvider:
    """Offline search over the preloaded catalog snapshot.

    Answers with the same raw shape as the remote API so the search and
    preload code paths stay the same.
    """

    name = "snapshot"

    def __init__(self, snapshot_path: str):
        self.snapshot_path = snapshot_path

    async def search_page(
        self,
        *,
        query: str,
        page_token: str | None = None,
        page_size: int | None = None,
    ) -> CatalogPage:
        q = _norm(query)
        matches = [t for t in load_snapshot(self.snapshot_path) if q and q in _norm(t.title)]

        start = int(page_token) if page_token and page_token.isdigit() else 0
        end = start + page_size if page_size else len(matches)
        chunk = matches[start:end]

        return CatalogPage(
            titles=[self._to_raw(t) for t in chunk],
            next_page_token=str(end) if end < len(matches) else None,
        )

    @staticmethod
    def _to_raw(t: CatalogTitle) -> dict:
        raw: dict = {"id": t.id, "type": t.type, "primaryTitle": t.title}
        if t.year is not None:
            raw["startYear"] = t.year
        if t.image:
            raw["primaryImage"] = {"url": t.image}
        if t.rating and t.rating != "N/A":
            raw["rating"] = {"aggregateRating": t.rating}
        return raw
