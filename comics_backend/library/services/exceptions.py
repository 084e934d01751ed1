# library/services/exceptions.py


class LibraryServiceError(Exception):
    """Base error for library / progress operations."""


class LibraryAccessError(LibraryServiceError):
    """Paid comic cannot be added with the requested access type."""


class LibraryEntryNotFoundError(LibraryServiceError):
    """Comic is not in the user's library."""


class InvalidProgressError(LibraryServiceError):
    """Page numbers outside the comic's range."""


class NoActiveSessionError(LibraryServiceError):
    """No reading session is currently open."""


class BookmarkNotFoundError(LibraryServiceError):
    """No bookmark on that page."""
