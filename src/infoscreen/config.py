"""Configuration management using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Every field can be overridden with an ``INFOSCREEN_`` prefixed variable
    or from a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="INFOSCREEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Service configuration
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    system_version: str = "1.0.0"

    # Storage configuration
    data_dir: Path = Path("./data")
    images_dir: Path | None = None
    thumbnails_dir: Path | None = None
    catalog_file: Path | None = None
    public_dir: Path = Path("./public")

    # Upload limits, stored as comma-separated string for env var compatibility
    max_file_size: int = 5 * 1024 * 1024
    allowed_extensions_str: str = Field(
        default=".jpg,.jpeg,.png,.gif,.webp,.bmp",
        validation_alias="INFOSCREEN_ALLOWED_EXTENSIONS",
    )

    # Thumbnail configuration
    thumbnail_width: int = 400
    thumbnail_height: int = 300
    thumbnail_quality: int = Field(default=80, ge=1, le=95)

    cors_origins_str: str = Field(
        default="*",
        validation_alias="INFOSCREEN_CORS_ALLOWED_ORIGINS",
    )

    @property
    def images_path(self) -> Path:
        """Directory holding uploaded images."""
        return self.images_dir or self.data_dir / "images"

    @property
    def thumbnails_path(self) -> Path:
        """Directory holding generated thumbnails."""
        return self.thumbnails_dir or self.data_dir / "thumbnails"

    @property
    def catalog_path(self) -> Path:
        """JSON file the catalog is persisted to."""
        return self.catalog_file or self.data_dir / "catalog.json"

    @property
    def allowed_extensions(self) -> frozenset[str]:
        """Lower-cased allow-listed extensions, each with a leading dot."""
        extensions = set()
        for ext in self.allowed_extensions_str.split(","):
            ext = ext.strip().lower()
            if not ext:
                continue
            extensions.add(ext if ext.startswith(".") else f".{ext}")
        return frozenset(extensions)

    @property
    def cors_allowed_origins(self) -> list[str]:
        """CORS allowed origins as a list."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    def is_allowed_extension(self, filename: str) -> bool:
        """Check whether a file name carries an allow-listed extension."""
        return Path(filename).suffix.lower() in self.allowed_extensions


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
