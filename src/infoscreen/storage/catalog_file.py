"""JSON-based catalog persistence."""

import json
import logging
import os
from pathlib import Path

from ..exceptions import StorageException
from ..models import ImageRecord

logger = logging.getLogger(__name__)


class CatalogFile:
    """Reads and writes the catalog as a JSON array of image records."""

    def __init__(self, path: Path) -> None:
        """Initialize the catalog file."""
        self.path = path

    def exists(self) -> bool:
        """Check if the catalog file exists."""
        return self.path.exists()

    def load(self) -> list[ImageRecord]:
        """
        Load records from disk.

        Raises:
            StorageException: If the file cannot be read or is not a JSON array.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageException(f"Failed to read catalog {self.path}: {e}") from e

        if not isinstance(data, list):
            raise StorageException(f"Catalog {self.path} is not a JSON array")

        try:
            return [ImageRecord.from_dict(item) for item in data]
        except (TypeError, ValueError) as e:
            raise StorageException(f"Catalog {self.path} has malformed records: {e}") from e

    def save(self, records: list[ImageRecord]) -> None:
        """Write records atomically via a temp file in the same directory."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump([r.to_dict() for r in records], f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageException(f"Failed to write catalog {self.path}: {e}") from e
        logger.debug("Saved %d records to %s", len(records), self.path)
