from app.models.base import Base
from app.models.library_entry import LibraryEntry


__all__ = [
    "Base",
    "LibraryEntry",
]
