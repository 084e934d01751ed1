# comics/services/exceptions.py

"""
COMICS SERVICE ERRORS

Centralized domain errors for catalog + upload services.
"""


class ComicServiceError(Exception):
    """Base exception for all comics service failures."""


class ComicNotAvailableError(ComicServiceError):
    """Raised when a comic is hidden or otherwise not reachable."""


class ComicAccessDeniedError(ComicServiceError):
    """Raised when a user needs to purchase a comic before reading it."""


class UploadDirectoryNotFoundError(ComicServiceError):
    """Raised when an import directory does not exist."""


class NoImagesFoundError(ComicServiceError):
    """Raised when an import directory holds no supported images."""


class InvalidUploadError(ComicServiceError):
    """Raised when an uploaded file is not an accepted image."""


class InvalidSearchError(ComicServiceError):
    """Raised when search parameters fail validation."""

    def __init__(self, errors):
        super().__init__("Invalid search parameters")
        self.errors = errors
