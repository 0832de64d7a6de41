from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.crud.library_entries import (
    delete_entry,
    entry_exists,
    get_entry,
    insert_entry,
    list_entries,
)
from app.models.library_entry import LibraryEntry
from app.services.errors import (
    DuplicateEntryError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

if TYPE_CHECKING:
    from app.services.audio_reviews import AudioStorage

logger = logging.getLogger(__name__)

DEFAULT_ENTRY_TYPE = "movie"


def _clean(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


class LibraryService:
    """Add/remove/list over the `library` table.

    `movie_id` is the business key. Every operation addresses entries by it,
    never by the surrogate `id`.
    """

    def __init__(self, db: Session, storage: AudioStorage | None = None):
        self.db = db
        self.storage = storage

    def add(
        self,
        *,
        movie_id: str,
        title: str,
        year: int | None = None,
        image: str | None = None,
        rating: str | None = None,
        type: str | None = None,
    ) -> LibraryEntry:
        movie_id = _clean(movie_id)
        title = _clean(title)
        if not movie_id:
            raise ValidationError("movieId is required")
        if not title:
            raise ValidationError("title is required")

        if entry_exists(self.db, movie_id=movie_id):
            raise DuplicateEntryError(movie_id)

        values = {
            "movie_id": movie_id,
            "title": title,
            "year": year,
            "image": image,
            "rating": rating,
            "type": _clean(type) or DEFAULT_ENTRY_TYPE,
        }
        try:
            entry = insert_entry(self.db, values=values)
        except IntegrityError:
            # Lost a race with a concurrent add; the unique index has the final word.
            self.db.rollback()
            raise DuplicateEntryError(movie_id)

        logger.info("library entry added", extra={"movie_id": movie_id})
        return entry

    def remove(self, movie_id: str) -> None:
        entry = get_entry(self.db, movie_id=movie_id)
        if entry is None:
            raise NotFoundError(f"Movie {movie_id} is not in the library")

        audio_path = entry.audio_review_path
        if delete_entry(self.db, movie_id=movie_id) == 0:
            raise NotFoundError(f"Movie {movie_id} is not in the library")

        if audio_path and self.storage is not None:
            try:
                self.storage.delete(audio_path)
            except (OSError, StorageError):
                logger.warning(
                    "could not delete audio review %s for removed movie %s",
                    audio_path,
                    movie_id,
                    exc_info=True,
                )

        logger.info("library entry removed", extra={"movie_id": movie_id})

    def list(self) -> list[LibraryEntry]:
        return list_entries(self.db)

    def exists(self, movie_id: str) -> bool:
        return entry_exists(self.db, movie_id=movie_id)

    def get(self, movie_id: str) -> LibraryEntry:
        entry = get_entry(self.db, movie_id=movie_id)
        if entry is None:
            raise NotFoundError(f"Movie {movie_id} is not in the library")
        return entry
