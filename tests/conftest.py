"""Shared fixtures: isolated settings, store instances and an app client."""

import io
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from infoscreen.config import Settings
from infoscreen.main import create_app
from infoscreen.services import ImageStore
from infoscreen.storage import FileStorage


def image_bytes(size: tuple[int, int] = (800, 400), fmt: str = "JPEG", mode: str = "RGB") -> bytes:
    """Encode a solid-color image in memory."""
    color = (200, 80, 40, 255) if mode == "RGBA" else (200, 80, 40)
    buf = io.BytesIO()
    Image.new(mode, size, color[: len(mode)]).save(buf, format=fmt)
    return buf.getvalue()


def write_image(path: Path, size: tuple[int, int] = (800, 400), fmt: str = "JPEG") -> Path:
    """Write a solid-color image to disk, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(image_bytes(size, fmt))
    return path


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing every directory at a per-test temp dir."""
    return Settings(
        data_dir=tmp_path / "data",
        public_dir=tmp_path / "public",
        thumbnail_width=40,
        thumbnail_height=30,
        log_level="WARNING",
    )


@pytest.fixture
def file_storage(settings: Settings) -> FileStorage:
    storage = FileStorage(settings)
    storage.ensure_directories()
    return storage


@pytest.fixture
def store(settings: Settings, file_storage: FileStorage) -> ImageStore:
    """Empty, loaded image store."""
    image_store = ImageStore(settings, file_storage=file_storage)
    image_store.load()
    return image_store


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """Test client running the app lifespan against isolated directories."""
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def make_image():
    """Factory writing a solid-color image file."""
    return write_image


@pytest.fixture
def encode_image():
    """Factory encoding a solid-color image to bytes."""
    return image_bytes
