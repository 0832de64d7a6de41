from __future__ import annotations

from datetime import datetime, timezone

from app.models.base import Base
from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LibraryEntry(Base):
    __tablename__ = "library"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # External catalog id (e.g. IMDb "tt0111161"); the business key.
    movie_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)

    # Relative to settings.media_root, POSIX separators.
    audio_review_path: Mapped[str | None] = mapped_column(String(500), nullable=True)

    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    # Kept as the catalog formats it, "N/A" included.
    rating: Mapped[str | None] = mapped_column(String(20), nullable=True)
    type: Mapped[str] = mapped_column(String(40), nullable=False, default="movie")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


# At most one entry per movie; the index is what settles concurrent adds.
Index("ix_library_movie_id", LibraryEntry.movie_id, unique=True)
