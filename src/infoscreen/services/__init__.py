"""Service layer."""

from .broadcast import BroadcastHub, ConnectionRegistry
from .image_store import FileMeta, ImageStore
from .thumbnail_service import ThumbnailService, ThumbnailStats

__all__ = [
    "BroadcastHub",
    "ConnectionRegistry",
    "FileMeta",
    "ImageStore",
    "ThumbnailService",
    "ThumbnailStats",
]
