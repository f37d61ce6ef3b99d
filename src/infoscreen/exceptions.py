"""Structured exception types for the info screen server.

Each exception maps to an HTTP status code and an error code so the API
layer can render them through a single exception handler.

Usage:
    from infoscreen.exceptions import ImageNotFoundException

    # In service layer
    if record is None:
        raise ImageNotFoundException(image_id)
"""

from .models.errors import ErrorCode


class InfoScreenException(Exception):
    """Base exception for the info screen server.

    Attributes:
        error_code: ErrorCode enum value for API responses
        status_code: HTTP status code to return
        message: Human-readable error message
    """

    error_code: ErrorCode = ErrorCode.INVALID_INPUT
    status_code: int = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ImageNotFoundException(InfoScreenException):
    """Raised when no catalog record has the requested id."""

    error_code = ErrorCode.IMAGE_NOT_FOUND
    status_code = 404

    def __init__(self, image_id: int) -> None:
        self.image_id = image_id
        super().__init__("Image not found")


class PageNotFoundException(InfoScreenException):
    """Raised when a front-end page is not installed."""

    error_code = ErrorCode.PAGE_NOT_FOUND
    status_code = 404

    def __init__(self, page: str) -> None:
        self.page = page
        super().__init__(f"{page} is not installed")


class InvalidInputException(InfoScreenException):
    """Raised when a request carries unusable input."""

    error_code = ErrorCode.INVALID_INPUT
    status_code = 400


class InvalidFileTypeException(InvalidInputException):
    """Raised when an uploaded file has a disallowed extension."""

    error_code = ErrorCode.INVALID_FILE_TYPE
    status_code = 400


class FileTooLargeException(InvalidInputException):
    """Raised when an upload exceeds the configured size limit."""

    error_code = ErrorCode.FILE_TOO_LARGE
    status_code = 413


class StorageException(InfoScreenException):
    """Raised when reading or writing image data on disk fails."""

    error_code = ErrorCode.STORAGE_ERROR
    status_code = 500


class ThumbnailException(StorageException):
    """Raised when both thumbnail strategies fail for an image."""

    error_code = ErrorCode.THUMBNAIL_FAILED
    status_code = 500
