from __future__ import annotations

from functools import lru_cache

from app.core.config import settings
from app.db.session import get_db
from app.services.audio_reviews import AudioReviewService, AudioStorage
from app.services.catalog.factory import get_provider
from app.services.catalog.provider import CatalogProvider
from app.services.library import LibraryService
from fastapi import Depends
from sqlalchemy.orm import Session


@lru_cache
def get_audio_storage() -> AudioStorage:
    return AudioStorage(root=settings.media_root, upload_dir=settings.audio_upload_dir)


def get_library_service(
    db: Session = Depends(get_db),
    storage: AudioStorage = Depends(get_audio_storage),
) -> LibraryService:
    return LibraryService(db, storage=storage)


def get_audio_service(
    db: Session = Depends(get_db),
    storage: AudioStorage = Depends(get_audio_storage),
) -> AudioReviewService:
    return AudioReviewService(db, storage)


def get_catalog_provider() -> CatalogProvider:
    return get_provider()
