from __future__ import annotations

import contextlib
import logging
import mimetypes
import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from app.crud.library_entries import get_entry, set_audio_review_path
from app.models.library_entry import LibraryEntry
from app.services.errors import NotFoundError, StorageError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

# Not in every platform's mime table; mobile clients record .m4a.
mimetypes.add_type("audio/mp4", ".m4a")

_unsafe_chars = re.compile(r"[^A-Za-z0-9_-]")
_extension = re.compile(r"^\.[A-Za-z0-9]{1,10}$")

DEFAULT_MEDIA_TYPE = "application/octet-stream"

# mimetypes.guess_extension is platform dependent (audio/mpeg -> .mpga on some).
_AUDIO_EXTENSIONS = {
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
    "audio/mp4": ".m4a",
    "audio/m4a": ".m4a",
    "audio/x-m4a": ".m4a",
    "audio/aac": ".aac",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/ogg": ".ogg",
    "audio/webm": ".webm",
}


def safe_stem(movie_id: str) -> str:
    return _unsafe_chars.sub("_", movie_id.strip()) or "_"


def derive_extension(filename: str | None, content_type: str | None = None) -> str:
    """Extension for a stored review, taken from the upload's original name.

    Falls back to the declared content type, then to no extension.
    """
    suffix = PurePosixPath((filename or "").replace("\\", "/")).suffix.lower()
    if _extension.match(suffix):
        return suffix
    if content_type:
        mime = content_type.split(";", 1)[0].strip().lower()
        guessed = _AUDIO_EXTENSIONS.get(mime) or mimetypes.guess_extension(mime)
        if guessed:
            return guessed
    return ""


@dataclass(frozen=True)
class AudioReview:
    path: Path
    media_type: str


class AudioStorage:
    """Files for audio reviews, one per movie, under `root / upload_dir`.

    Paths handed out are relative to `root` so they can be stored on the entry
    and resolved again by any process that shares the same root.
    """

    def __init__(self, root: str | Path, upload_dir: str = "uploads/audio_reviews"):
        self.root = Path(root).resolve()
        self.upload_dir = PurePosixPath(upload_dir)

    @property
    def directory(self) -> Path:
        return self.root / self.upload_dir

    def relative_path_for(self, movie_id: str, extension: str) -> str:
        return str(self.upload_dir / f"{safe_stem(movie_id)}{extension}")

    def resolve(self, relative_path: str) -> Path:
        full = (self.root / relative_path).resolve()
        if not full.is_relative_to(self.root):
            raise StorageError(f"Audio path escapes the storage root: {relative_path}")
        return full

    def exists(self, relative_path: str | None) -> bool:
        if not relative_path:
            return False
        try:
            return self.resolve(relative_path).is_file()
        except StorageError:
            return False

    def write(self, relative_path: str, source: BinaryIO) -> Path:
        target = self.resolve(relative_path)
        tmp = target.with_name(f".{target.name}.part")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "wb") as buffer:
                shutil.copyfileobj(source, buffer)
            os.replace(tmp, target)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise StorageError(f"Could not store audio review: {exc}") from exc
        return target

    def delete(self, relative_path: str) -> bool:
        """Remove a stored file. Returns False when it was already gone."""
        target = self.resolve(relative_path)
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        return True


class AudioReviewService:
    def __init__(self, db: Session, storage: AudioStorage):
        self.db = db
        self.storage = storage

    def attach(
        self,
        movie_id: str,
        source: BinaryIO,
        *,
        filename: str | None,
        content_type: str | None = None,
    ) -> str:
        """Store an uploaded review for `movie_id` and record its path.

        Same-name uploads overwrite. A review recorded under a different name
        (e.g. an earlier upload with another extension) is deleted only once the
        new file is stored and recorded, so a failed upload keeps the old one.
        """
        entry = get_entry(self.db, movie_id=movie_id)
        if entry is None:
            raise NotFoundError(f"Movie {movie_id} is not in the library")

        new_path = self.storage.relative_path_for(movie_id, derive_extension(filename, content_type))
        previous = entry.audio_review_path

        self.storage.write(new_path, source)
        set_audio_review_path(self.db, movie_id=movie_id, path=new_path)

        if previous and previous != new_path:
            try:
                self.storage.delete(previous)
            except (OSError, StorageError):
                logger.warning("could not delete previous audio review %s", previous, exc_info=True)

        logger.info("audio review stored", extra={"movie_id": movie_id, "path": new_path})
        return new_path

    def fetch(self, movie_id: str) -> AudioReview:
        entry = get_entry(self.db, movie_id=movie_id)
        if entry is None or not entry.audio_review_path:
            raise NotFoundError(f"No audio review for movie {movie_id}")

        try:
            path = self.storage.resolve(entry.audio_review_path)
        except StorageError:
            raise NotFoundError(f"No audio review for movie {movie_id}")
        if not path.is_file():
            raise NotFoundError(f"No audio review for movie {movie_id}")

        media_type, _ = mimetypes.guess_type(path.name)
        return AudioReview(path=path, media_type=media_type or DEFAULT_MEDIA_TYPE)

    def has_audio(self, entry: LibraryEntry) -> bool:
        return self.storage.exists(entry.audio_review_path)
