"""Domain models."""

from .errors import ErrorCode, ErrorResponse
from .image import ImagePatch, ImageRecord, format_datetime

__all__ = ["ErrorCode", "ErrorResponse", "ImagePatch", "ImageRecord", "format_datetime"]
