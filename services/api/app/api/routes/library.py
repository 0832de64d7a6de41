from __future__ import annotations

from app.api.deps import get_audio_service, get_library_service
from app.models.library_entry import LibraryEntry
from app.schemas.library import (
    AudioUploadResponse,
    LibraryCheckResponse,
    LibraryEntryIn,
    LibraryEntryOut,
    LibraryEntryResponse,
    LibraryListResponse,
    MessageResponse,
)
from app.services.audio_reviews import AudioReviewService
from app.services.errors import (
    DuplicateEntryError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from app.services.library import LibraryService
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import FileResponse

router = APIRouter(prefix="/library", tags=["library"])


def _entry_out(entry: LibraryEntry, audio: AudioReviewService) -> LibraryEntryOut:
    out = LibraryEntryOut.model_validate(entry)
    return out.model_copy(update={"has_audio_review": audio.has_audio(entry)})


@router.post("", response_model=LibraryEntryResponse)
def add_to_library(
    payload: LibraryEntryIn,
    library: LibraryService = Depends(get_library_service),
    audio: AudioReviewService = Depends(get_audio_service),
):
    try:
        entry = library.add(
            movie_id=payload.movie_id,
            title=payload.title,
            year=payload.year,
            image=payload.image,
            rating=payload.rating,
            type=payload.type,
        )
    except (ValidationError, DuplicateEntryError) as e:
        raise HTTPException(status_code=400, detail=e.message)

    return LibraryEntryResponse(data=_entry_out(entry, audio))


@router.delete("/{movie_id}", response_model=MessageResponse)
def remove_from_library(
    movie_id: str, library: LibraryService = Depends(get_library_service)
):
    try:
        library.remove(movie_id)
    except NotFoundError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return MessageResponse(message="Movie removed from library")


@router.get("", response_model=LibraryListResponse)
def list_library(
    library: LibraryService = Depends(get_library_service),
    audio: AudioReviewService = Depends(get_audio_service),
):
    return LibraryListResponse(data=[_entry_out(e, audio) for e in library.list()])


@router.get("/{movie_id}/check", response_model=LibraryCheckResponse)
def check_in_library(
    movie_id: str, library: LibraryService = Depends(get_library_service)
):
    return LibraryCheckResponse(is_in_library=library.exists(movie_id))


# HEAD lets clients probe for a review without downloading it.
@router.api_route("/{movie_id}/audio", methods=["GET", "HEAD"], response_class=FileResponse)
def get_audio_review(
    movie_id: str, audio: AudioReviewService = Depends(get_audio_service)
):
    try:
        review = audio.fetch(movie_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    return FileResponse(
        str(review.path),
        media_type=review.media_type,
        headers={"Accept-Ranges": "bytes", "Cache-Control": "no-cache"},
    )


@router.put("/{movie_id}/audio", response_model=AudioUploadResponse)
def upload_audio_review(
    movie_id: str,
    file: UploadFile = File(...),
    audio: AudioReviewService = Depends(get_audio_service),
):
    try:
        path = audio.attach(
            movie_id,
            file.file,
            filename=file.filename,
            content_type=file.content_type,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=e.message)
    finally:
        file.file.close()

    return AudioUploadResponse(audio_path=path)
