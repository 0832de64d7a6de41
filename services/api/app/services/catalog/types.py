from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

MOVIE_TYPE = "movie"
MISSING_RATING = "N/A"


class CatalogTitle(BaseModel):
    """A title in the shape clients display and post back to /library."""

    id: str
    title: str
    year: int | None = None
    image: str | None = None
    rating: str | None = None
    type: str = MOVIE_TYPE


class CatalogPage(BaseModel):
    # raw title objects as the provider returned them
    titles: list[dict[str, Any]] = Field(default_factory=list)
    next_page_token: str | None = None
