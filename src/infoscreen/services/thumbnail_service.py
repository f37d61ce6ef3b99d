"""Thumbnail generation using Pillow."""

import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageOps

from ..config import Settings
from ..exceptions import ThumbnailException
from ..storage import FileStorage

logger = logging.getLogger(__name__)

# Errors Pillow raises for unreadable or hostile images
_IMAGE_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


@dataclass
class ThumbnailStats:
    """Counters for a batch thumbnail run."""

    total: int = 0
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    removed: int = 0


def _to_rgb(image: Image.Image) -> Image.Image:
    """Flatten an image onto white so it can be encoded as JPEG."""
    if image.mode == "RGB":
        return image
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return image.convert("RGB")


class ThumbnailService:
    """Builds downsized previews of catalog images."""

    def __init__(self, settings: Settings, file_storage: FileStorage | None = None) -> None:
        """Initialize thumbnail service."""
        self.settings = settings
        self.file_storage = file_storage or FileStorage(settings)
        self.size = (settings.thumbnail_width, settings.thumbnail_height)
        self.quality = settings.thumbnail_quality

    def generate(self, filename: str) -> Path:
        """
        Generate the thumbnail for a stored image.

        The image is cropped to fill the target box around its center. If
        that fails, a second attempt scales it to fit inside the box without
        cropping.

        Args:
            filename: Name of the image inside the image directory.

        Returns:
            Path of the written thumbnail.

        Raises:
            ThumbnailException: If both strategies fail.
        """
        source = self.file_storage.get_image_path(filename)
        target = self.file_storage.get_thumbnail_path(filename)
        target.parent.mkdir(parents=True, exist_ok=True)

        try:
            self._write_cover(source, target)
        except _IMAGE_ERRORS as e:
            logger.warning("Cover thumbnail failed for %s, retrying with fit: %s", filename, e)
            try:
                self._write_inside(source, target)
            except _IMAGE_ERRORS as fallback_error:
                raise ThumbnailException(
                    f"Thumbnail generation failed for {filename}: {fallback_error}"
                ) from fallback_error

        logger.info("Thumbnail: %s", filename)
        return target

    def _write_cover(self, source: Path, target: Path) -> None:
        with Image.open(source) as image:
            image = ImageOps.exif_transpose(image)
            thumb = ImageOps.fit(
                image,
                self.size,
                method=Image.Resampling.LANCZOS,
                centering=(0.5, 0.5),
            )
            _to_rgb(thumb).save(target, format="JPEG", quality=self.quality, progressive=True)

    def _write_inside(self, source: Path, target: Path) -> None:
        with Image.open(source) as image:
            image.thumbnail(self.size)
            _to_rgb(image).save(target, format="JPEG", quality=self.quality)

    def is_fresh(self, filename: str) -> bool:
        """Check whether a thumbnail exists and is not older than its source."""
        source = self.file_storage.get_image_path(filename)
        target = self.file_storage.get_thumbnail_path(filename)
        if not target.exists():
            return False
        return target.stat().st_mtime >= source.stat().st_mtime

    def generate_all(self, force: bool = False) -> ThumbnailStats:
        """
        Generate thumbnails for every allow-listed image.

        Args:
            force: Regenerate even when the thumbnail is up to date.

        Returns:
            Counters for the run.
        """
        stats = ThumbnailStats()
        self.file_storage.ensure_directories()

        for path in self.file_storage.list_images():
            if not self.settings.is_allowed_extension(path.name):
                continue
            stats.total += 1

            if not force and self.is_fresh(path.name):
                stats.skipped += 1
                continue

            try:
                self.generate(path.name)
                stats.processed += 1
            except ThumbnailException as e:
                logger.error("%s", e.message)
                stats.failed += 1

        return stats

    def cleanup_orphans(self) -> int:
        """Delete thumbnails whose source image no longer exists."""
        images = {p.name for p in self.file_storage.list_images()}
        removed = 0
        for thumb in self.file_storage.list_thumbnails():
            if thumb.name not in images and self.file_storage.delete_file(thumb):
                removed += 1
        if removed:
            logger.info("Removed %d orphaned thumbnail(s)", removed)
        return removed
