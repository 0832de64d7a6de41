from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from app.services.catalog.provider import CatalogProvider
from app.services.catalog.types import MISSING_RATING, MOVIE_TYPE, CatalogTitle


def _current_year() -> int:
    return datetime.now(timezone.utc).year


def _as_year(v: Any) -> int | None:
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, str) and v.strip().isdigit():
        return int(v.strip())
    return None


def _nested(raw: dict[str, Any], key: str, field: str) -> Any:
    value = raw.get(key)
    return value.get(field) if isinstance(value, dict) else None


def _format_rating(v: Any) -> str | None:
    if v is None or v == "":
        return None
    if isinstance(v, float) and v.is_integer():
        # 8.0 -> "8", the way the catalog's own clients print it
        return str(int(v))
    return str(v)


def to_catalog_title(raw: dict[str, Any], *, fill_defaults: bool = True) -> CatalogTitle | None:
    """Reshape a raw catalog title, or None when it is not a usable movie.

    With `fill_defaults` a missing rating becomes "N/A", a missing year the
    current year and a missing poster an empty string. Without it the gaps
    stay null (the preload snapshot keeps them that way).
    """
    if raw.get("type") != MOVIE_TYPE:
        return None
    title_id = raw.get("id")
    title = raw.get("primaryTitle") or raw.get("title")
    if not title_id or not title:
        return None

    url = _nested(raw, "primaryImage", "url")
    image = url if isinstance(url, str) and url else None
    rating = _format_rating(_nested(raw, "rating", "aggregateRating"))
    year = _as_year(raw.get("startYear"))

    if fill_defaults:
        image = image or ""
        rating = rating or MISSING_RATING
        year = year if year is not None else _current_year()

    return CatalogTitle(
        id=str(title_id),
        title=str(title),
        year=year,
        image=image,
        rating=rating,
        type=MOVIE_TYPE,
    )


def merge_titles(
    into: dict[str, CatalogTitle],
    raw_titles: list[dict[str, Any]],
    *,
    fill_defaults: bool = True,
) -> int:
    """Add movie titles not yet in `into` (keyed by id). Returns how many were new."""
    added = 0
    for raw in raw_titles:
        t = to_catalog_title(raw, fill_defaults=fill_defaults)
        if t is None or t.id in into:
            continue
        into[t.id] = t
        added += 1
    return added


async def search_titles(
    provider: CatalogProvider, query: str, *, limit: int | None = None
) -> list[CatalogTitle]:
    """Free-text search restricted to movies, deduplicated by catalog id.

    Raises UpstreamError when the provider cannot be reached.
    """
    q = (query or "").strip()
    if not q:
        return []

    page = await provider.search_page(query=q)
    found: dict[str, CatalogTitle] = {}
    merge_titles(found, page.titles)

    out = list(found.values())
    return out[:limit] if limit else out
