"""Storage layer."""

from .catalog_file import CatalogFile
from .file_storage import FileStorage

__all__ = ["CatalogFile", "FileStorage"]
