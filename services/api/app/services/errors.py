from __future__ import annotations


class LibraryError(Exception):
    """Base class for errors reported by the library, audio and catalog services."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LibraryError):
    pass


class DuplicateEntryError(LibraryError):
    def __init__(self, movie_id: str):
        super().__init__(f"Movie {movie_id} is already in the library")
        self.movie_id = movie_id


class NotFoundError(LibraryError):
    pass


class UpstreamError(LibraryError):
    """The external catalog was unreachable or answered with a non-2xx status."""


class StorageError(LibraryError):
    """Reading or writing an audio review file failed."""
