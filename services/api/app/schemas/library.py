from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class LibraryEntryIn(CamelModel):
    movie_id: str = Field(min_length=1, max_length=64)
    title: str = Field(min_length=1, max_length=500)
    year: int | None = None
    image: str | None = None
    rating: str | None = None
    type: str | None = None


class LibraryEntryOut(CamelModel):
    id: int
    movie_id: str
    title: str
    audio_review_path: str | None = None
    year: int | None = None
    image: str | None = None
    rating: str | None = None
    type: str
    created_at: datetime
    updated_at: datetime
    has_audio_review: bool = False


class LibraryEntryResponse(CamelModel):
    success: bool = True
    data: LibraryEntryOut


class LibraryListResponse(CamelModel):
    success: bool = True
    data: list[LibraryEntryOut] = Field(default_factory=list)


class LibraryCheckResponse(CamelModel):
    success: bool = True
    is_in_library: bool


class AudioUploadResponse(CamelModel):
    success: bool = True
    audio_path: str


class MessageResponse(CamelModel):
    success: bool = True
    message: str
