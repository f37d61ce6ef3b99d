"""Authoritative in-memory image catalog mirrored to disk."""

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from pathlib import Path

from ..config import Settings
from ..exceptions import ImageNotFoundException, StorageException, ThumbnailException
from ..models import ImagePatch, ImageRecord
from ..storage import CatalogFile, FileStorage
from .thumbnail_service import ThumbnailService

logger = logging.getLogger(__name__)


@dataclass
class FileMeta:
    """Metadata of a file already written to the image directory."""

    filename: str
    original_name: str
    path: Path
    size: int


class ImageStore:
    """Owns the ordered list of image records.

    The store is the only writer of the list. Mutations are serialized by a
    lock and replace the list only after the catalog file was written.
    """

    def __init__(
        self,
        settings: Settings,
        file_storage: FileStorage | None = None,
        thumbnails: ThumbnailService | None = None,
    ) -> None:
        """Initialize image store."""
        self.settings = settings
        self.file_storage = file_storage or FileStorage(settings)
        self.thumbnails = thumbnails or ThumbnailService(settings, self.file_storage)
        self.catalog_file = CatalogFile(settings.catalog_path)
        self._images: list[ImageRecord] = []
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._images)

    def load(self) -> list[ImageRecord]:
        """
        Populate the catalog.

        The persisted catalog file wins when it can be read. Otherwise the
        image directory is scanned and one record is built per allow-listed
        file. Any failure leaves an empty catalog instead of raising.

        Returns:
            The loaded records.
        """
        if self.catalog_file.exists():
            try:
                self._images = self.catalog_file.load()
                logger.info("Loaded %d images from %s", len(self._images), self.catalog_file.path)
                return self.list_images()
            except StorageException as e:
                logger.error("%s; rebuilding catalog from image directory", e.message)

        try:
            self._images = self._scan_directory()
        except OSError as e:
            logger.error("Failed to load images: %s", e)
            self._images = []

        logger.info("Loaded %d images", len(self._images))
        return self.list_images()

    def _scan_directory(self) -> list[ImageRecord]:
        paths = [
            p for p in self.file_storage.list_images() if self.settings.is_allowed_extension(p.name)
        ]
        records = []
        for index, path in enumerate(paths, start=1):
            stat = path.stat()
            records.append(
                ImageRecord(
                    id=index,
                    filename=path.name,
                    original_name=path.name,
                    storage_path=str(path),
                    size_bytes=stat.st_size,
                    uploaded_at=datetime.fromtimestamp(stat.st_mtime, UTC),
                    title=path.stem,
                    order=index,
                )
            )
        return records

    async def save(self) -> None:
        """Persist the catalog to disk."""
        async with self._lock:
            await self._commit(self.list_images())

    async def _commit(self, images: list[ImageRecord]) -> None:
        """Write ``images`` to disk, then make them the live catalog.

        The live list is left untouched when the write fails.
        """
        await asyncio.to_thread(self.catalog_file.save, images)
        self._images = images

    def list_images(self) -> list[ImageRecord]:
        """Return a snapshot of the catalog in display order."""
        return list(self._images)

    def get(self, image_id: int) -> ImageRecord:
        """
        Get a record by id.

        Raises:
            ImageNotFoundException: If no record has the id.
        """
        return self._images[self._index_of(image_id)]

    def _index_of(self, image_id: int) -> int:
        for i, record in enumerate(self._images):
            if record.id == image_id:
                return i
        raise ImageNotFoundException(image_id)

    def _next_id(self) -> int:
        """Current time in milliseconds, bumped past any existing id it collides with."""
        candidate = int(time.time() * 1000)
        if any(r.id == candidate for r in self._images):
            candidate = max(r.id for r in self._images) + 1
        return candidate

    async def add(self, meta: FileMeta) -> ImageRecord:
        """
        Append a record for a stored upload and build its thumbnail.

        Thumbnail failures are logged; the record stays active without one.

        Args:
            meta: The stored file.

        Returns:
            The new record.

        Raises:
            StorageException: If the catalog cannot be written. The record is
                not added in that case.
        """
        async with self._lock:
            record = ImageRecord(
                id=self._next_id(),
                filename=meta.filename,
                original_name=meta.original_name,
                storage_path=str(meta.path),
                size_bytes=meta.size,
                title=Path(meta.original_name).stem,
                order=len(self._images) + 1,
            )
            await self._commit([*self._images, record])

        try:
            await asyncio.to_thread(self.thumbnails.generate, record.filename)
        except ThumbnailException as e:
            logger.error("%s", e.message)

        return record

    async def update(self, image_id: int, patch: ImagePatch) -> ImageRecord:
        """
        Merge the provided fields into a record.

        Raises:
            ImageNotFoundException: If no record has the id.
        """
        async with self._lock:
            index = self._index_of(image_id)
            record = replace(self._images[index])
            record.apply(patch)
            images = self.list_images()
            images[index] = record
            await self._commit(images)
        return record

    async def remove(self, image_id: int) -> ImageRecord:
        """
        Delete a record along with its image and thumbnail files.

        The catalog is persisted first. File deletion is best effort;
        missing files are ignored.

        Raises:
            ImageNotFoundException: If no record has the id.
        """
        async with self._lock:
            index = self._index_of(image_id)
            record = self._images[index]
            await self._commit(self._images[:index] + self._images[index + 1:])

        image_path = (
            Path(record.storage_path)
            if record.storage_path
            else self.file_storage.get_image_path(record.filename)
        )
        self.file_storage.delete_file(image_path)
        self.file_storage.delete_file(self.file_storage.get_thumbnail_path(record.filename))
        return record

    def count_active(self) -> int:
        """Number of records flagged active."""
        return sum(1 for r in self._images if r.active)
