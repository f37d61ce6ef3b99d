"""Image domain model."""

from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from pathlib import Path
from typing import Any


def _utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


# Domain attribute -> persisted/wire key
_WIRE_NAMES = {
    "id": "id",
    "filename": "filename",
    "original_name": "originalName",
    "storage_path": "storagePath",
    "size_bytes": "sizeBytes",
    "uploaded_at": "uploadedAt",
    "updated_at": "updatedAt",
    "title": "title",
    "description": "description",
    "order": "order",
    "active": "active",
}


@dataclass
class ImageRecord:
    """A single slideshow image known to the catalog."""

    id: int
    filename: str
    original_name: str = ""
    storage_path: str = ""
    size_bytes: int = 0
    uploaded_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime | None = None
    title: str = ""
    description: str = ""
    order: int = 0
    active: bool = True

    @property
    def stem(self) -> str:
        """File name without its extension."""
        return Path(self.filename).stem

    def apply(self, patch: "ImagePatch") -> None:
        """Merge the fields set in ``patch`` and stamp the update time."""
        for name, value in patch.changes().items():
            setattr(self, name, value)
        self.updated_at = _utc_now()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase mapping used on disk and on the wire."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                value = format_datetime(value)
            data[_WIRE_NAMES[f.name]] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ImageRecord":
        """Build a record from its camelCase mapping, ignoring unknown keys."""
        kwargs: dict[str, Any] = {}
        for name, key in _WIRE_NAMES.items():
            if key in data:
                kwargs[name] = data[key]
        for name in ("uploaded_at", "updated_at"):
            if isinstance(kwargs.get(name), str):
                kwargs[name] = _parse_datetime(kwargs[name])
        return cls(**kwargs)


@dataclass
class ImagePatch:
    """Partial update for an image record.

    Only the editable fields exist here, so identity and storage fields can
    never be overwritten through an update.
    """

    title: str | None = None
    description: str | None = None
    order: int | None = None
    active: bool | None = None

    def changes(self) -> dict[str, Any]:
        """Fields that were provided, keyed by attribute name."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


def format_datetime(value: datetime) -> str:
    """Render a timestamp as ISO-8601, writing UTC as a trailing ``Z``."""
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def _parse_datetime(value: str) -> datetime:
    """Parse an ISO timestamp, accepting a trailing ``Z``."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)
