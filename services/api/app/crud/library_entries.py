from __future__ import annotations

from app.models.library_entry import LibraryEntry
from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session


def get_entry(db: Session, *, movie_id: str) -> LibraryEntry | None:
    stmt = select(LibraryEntry).where(LibraryEntry.movie_id == movie_id)
    return db.execute(stmt).scalar_one_or_none()


def list_entries(db: Session) -> list[LibraryEntry]:
    """Return every entry, newest first."""
    stmt = select(LibraryEntry).order_by(
        LibraryEntry.created_at.desc(), LibraryEntry.id.desc()
    )
    return list(db.execute(stmt).scalars().all())


def entry_exists(db: Session, *, movie_id: str) -> bool:
    stmt = select(LibraryEntry.id).where(LibraryEntry.movie_id == movie_id).limit(1)
    return db.execute(stmt).first() is not None


def insert_entry(db: Session, *, values: dict) -> LibraryEntry:
    entry = LibraryEntry(**values)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def delete_entry(db: Session, *, movie_id: str) -> int:
    """Delete by business key and return the number of rows removed."""
    result = db.execute(delete(LibraryEntry).where(LibraryEntry.movie_id == movie_id))
    db.commit()
    return result.rowcount or 0


def set_audio_review_path(db: Session, *, movie_id: str, path: str | None) -> int:
    result = db.execute(
        update(LibraryEntry)
        .where(LibraryEntry.movie_id == movie_id)
        .values(audio_review_path=path)
    )
    db.commit()
    return result.rowcount or 0
