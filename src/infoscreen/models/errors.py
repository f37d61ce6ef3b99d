"""Error response models."""

from enum import Enum

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Error codes for API responses."""

    IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"
    PAGE_NOT_FOUND = "PAGE_NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    STORAGE_ERROR = "STORAGE_ERROR"
    THUMBNAIL_FAILED = "THUMBNAIL_FAILED"


class ErrorResponse(BaseModel):
    """Unified error response format."""

    error: str = Field(..., description="Error description")
    code: str = Field(..., description="Error code")
