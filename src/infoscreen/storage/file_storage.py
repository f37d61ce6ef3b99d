"""File system operations for image storage."""

import asyncio
import logging
import time
from pathlib import Path

from fastapi import UploadFile

from ..config import Settings
from ..exceptions import FileTooLargeException, StorageException

logger = logging.getLogger(__name__)

# Upload chunk size when streaming to disk
_CHUNK_SIZE = 1024 * 1024


class FileStorage:
    """File storage operations for images and thumbnails."""

    def __init__(self, settings: Settings) -> None:
        """Initialize file storage."""
        self.images_dir = settings.images_path
        self.thumbnails_dir = settings.thumbnails_path
        self.max_file_size = settings.max_file_size

    def ensure_directories(self) -> None:
        """Ensure all required directories exist."""
        self.images_dir.mkdir(parents=True, exist_ok=True)
        self.thumbnails_dir.mkdir(parents=True, exist_ok=True)

    def get_image_path(self, filename: str) -> Path:
        """Get the stored image path for a file name."""
        return self.images_dir / filename

    def get_thumbnail_path(self, filename: str) -> Path:
        """Get the thumbnail path for a file name."""
        return self.thumbnails_dir / filename

    def list_images(self) -> list[Path]:
        """List all regular files in the image directory, sorted by name."""
        if not self.images_dir.exists():
            return []
        return sorted(p for p in self.images_dir.iterdir() if p.is_file())

    def list_thumbnails(self) -> list[Path]:
        """List all regular files in the thumbnail directory."""
        if not self.thumbnails_dir.exists():
            return []
        return sorted(p for p in self.thumbnails_dir.iterdir() if p.is_file())

    @staticmethod
    def make_stored_filename(original_name: str) -> str:
        """
        Build the on-disk name for an upload.

        Keeps the original stem and appends a millisecond timestamp so
        repeated uploads of the same file never overwrite each other.

        Args:
            original_name: Client-supplied file name, possibly with directories.

        Returns:
            A bare file name like ``photo_1718000000000.jpg``.
        """
        name = Path(original_name).name
        stem = Path(name).stem or "image"
        suffix = Path(name).suffix
        return f"{stem}_{int(time.time() * 1000)}{suffix}"

    async def save_upload(self, upload: UploadFile, filename: str) -> tuple[Path, int]:
        """
        Stream an upload to the image directory.

        Args:
            upload: Incoming multipart file.
            filename: Target file name inside the image directory.

        Returns:
            The stored path and its size in bytes.

        Raises:
            FileTooLargeException: If the stream exceeds the size limit.
            StorageException: If the file cannot be written.
        """
        path = self.get_image_path(filename)
        size = 0
        try:
            with open(path, "wb") as f:
                while chunk := await upload.read(_CHUNK_SIZE):
                    size += len(chunk)
                    if size > self.max_file_size:
                        raise FileTooLargeException(
                            f"File exceeds maximum size of {self.max_file_size} bytes"
                        )
                    await asyncio.to_thread(f.write, chunk)
        except FileTooLargeException:
            self.delete_file(path)
            raise
        except OSError as e:
            self.delete_file(path)
            raise StorageException(f"Failed to store upload: {e}") from e
        return path, size

    def delete_file(self, path: Path) -> bool:
        """Delete a file, treating a missing file as already deleted."""
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("Could not delete %s: %s", path, e)
            return False
