"""Pydantic request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from ..models import ImagePatch, ImageRecord, format_datetime


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Image schemas
class ImageResponse(CamelModel):
    """Image record response."""

    id: int
    filename: str
    original_name: str
    storage_path: str
    size_bytes: int
    uploaded_at: datetime
    updated_at: datetime | None = None
    title: str
    description: str
    order: int
    active: bool

    @field_serializer("uploaded_at", "updated_at")
    def serialize_timestamp(self, value: datetime | None) -> str | None:
        return format_datetime(value) if value is not None else None

    @classmethod
    def from_record(cls, record: ImageRecord) -> "ImageResponse":
        """Build a response from a domain record."""
        return cls.model_validate(record.to_dict())


class UpdateImageRequest(BaseModel):
    """Partial image update. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    order: int | None = None
    active: bool | None = None

    def to_patch(self) -> ImagePatch:
        """Convert to the domain patch, keeping only provided fields."""
        return ImagePatch(**self.model_dump(exclude_none=True))


class ImageMutationResponse(BaseModel):
    """Upload/update response."""

    success: bool = True
    image: ImageResponse


class SuccessResponse(BaseModel):
    """Bare success response."""

    success: bool = True


# System schemas
class HealthResponse(CamelModel):
    """Health check response."""

    status: str
    timestamp: datetime
    uptime: float
    images_count: int


class ClientCounts(BaseModel):
    """Connected WebSocket clients per channel."""

    display: int
    control: int


class SystemResponse(CamelModel):
    """System information response."""

    version: str
    images: int
    active_images: int
    clients: ClientCounts
    current_slide: int = Field(description="Last slide index reported by a display")
