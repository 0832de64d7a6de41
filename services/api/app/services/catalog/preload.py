from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from app.services.catalog.provider import CatalogProvider
from app.services.catalog.search import merge_titles
from app.services.catalog.types import CatalogTitle
from app.services.errors import UpstreamError

logger = logging.getLogger(__name__)


@dataclass
class PreloadSummary:
    keywords: int = 0
    pages: int = 0
    failed_pages: int = 0
    titles: int = 0
    failures: list[str] = field(default_factory=list)
    snapshot_written: bool = False


def write_snapshot(path: str | Path, titles: Iterable[CatalogTitle]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    payload = [t.model_dump(mode="json") for t in titles]
    tmp = p.with_name(f".{p.name}.tmp")
    tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    os.replace(tmp, p)
    return p


async def collect_catalog(
    provider: CatalogProvider,
    *,
    keywords: Iterable[str],
    max_pages: int = 3,
    page_size: int = 50,
) -> tuple[dict[str, CatalogTitle], PreloadSummary]:
    """Page through the catalog for each seed keyword and merge the movies found.

    At most `max_pages` pages per keyword. A failed page ends that keyword
    (it counts as an empty page); nothing is retried.
    """
    catalog: dict[str, CatalogTitle] = {}
    summary = PreloadSummary()

    for keyword in keywords:
        keyword = keyword.strip()
        if not keyword:
            continue
        summary.keywords += 1

        page_token: str | None = None
        for page_no in range(1, max_pages + 1):
            try:
                page = await provider.search_page(
                    query=keyword, page_token=page_token, page_size=page_size
                )
            except UpstreamError as exc:
                logger.warning("preload page failed for %r: %s", keyword, exc.message)
                summary.failed_pages += 1
                summary.failures.append(f"{keyword}: {exc.message}")
                break

            summary.pages += 1
            added = merge_titles(catalog, page.titles, fill_defaults=False)
            logger.info(
                "preload %r page %d: %d new titles", keyword, page_no, added
            )

            page_token = page.next_page_token
            if not page_token:
                break

    summary.titles = len(catalog)
    return catalog, summary


async def preload_catalog(
    provider: CatalogProvider,
    *,
    snapshot_path: str | Path,
    keywords: Iterable[str],
    max_pages: int = 3,
    page_size: int = 50,
) -> PreloadSummary:
    catalog, summary = await collect_catalog(
        provider, keywords=keywords, max_pages=max_pages, page_size=page_size
    )
    if summary.pages == 0:
        # Every request failed; keep whatever snapshot is already on disk.
        logger.warning(
            "catalog preload fetched no pages (%d failed); snapshot %s left unchanged",
            summary.failed_pages,
            snapshot_path,
        )
        return summary

    write_snapshot(snapshot_path, catalog.values())
    summary.snapshot_written = True
    logger.info(
        "catalog snapshot written to %s with %d titles", snapshot_path, summary.titles
    )
    return summary
