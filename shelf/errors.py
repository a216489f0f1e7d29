"""Errors raised by the Shelf core."""


class ShelfError(Exception):
    """Base exception for library indexing and page retrieval."""


class ArchiveUnreadable(ShelfError):
    """Raised when an archive cannot be opened, listed or read."""


class NoImageEntries(ShelfError):
    """Raised when an archive holds no recognized image entries."""


class ComicNotFound(ShelfError):
    """Raised when no record matches the requested comic id."""


class ArchiveMissing(ShelfError):
    """Raised when a record's archive no longer exists on disk."""


class InvalidPageIndex(ShelfError):
    """Raised when a page number is outside the archive's live page list."""


class CoverWriteFailure(ShelfError):
    """Raised when the cover file for a new record cannot be written."""


class IndexPersistFailure(ShelfError):
    """Raised when the index snapshot cannot be read or written."""
