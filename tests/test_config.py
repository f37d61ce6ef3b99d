"""Tests for settings."""

from pathlib import Path

import pytest

from infoscreen.config import Settings


def test_directories_derive_from_data_dir(tmp_path: Path) -> None:
    settings = Settings(data_dir=tmp_path)
    assert settings.images_path == tmp_path / "images"
    assert settings.thumbnails_path == tmp_path / "thumbnails"
    assert settings.catalog_path == tmp_path / "catalog.json"


def test_explicit_directories_win(tmp_path: Path) -> None:
    settings = Settings(data_dir=tmp_path, images_dir=tmp_path / "pics")
    assert settings.images_path == tmp_path / "pics"


def test_default_extensions() -> None:
    settings = Settings()
    assert settings.is_allowed_extension("photo.JPG")
    assert settings.is_allowed_extension("banner.webp")
    assert not settings.is_allowed_extension("setup.exe")
    assert not settings.is_allowed_extension("README")


def test_extensions_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INFOSCREEN_ALLOWED_EXTENSIONS", "png, .JPG ,,")
    settings = Settings()
    assert settings.allowed_extensions == frozenset({".png", ".jpg"})


def test_env_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INFOSCREEN_PORT", "9090")
    monkeypatch.setenv("INFOSCREEN_MAX_FILE_SIZE", "1024")
    settings = Settings()
    assert settings.port == 9090
    assert settings.max_file_size == 1024


def test_cors_origins_split(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INFOSCREEN_CORS_ALLOWED_ORIGINS", "http://kiosk.local, http://admin.local")
    assert Settings().cors_allowed_origins == ["http://kiosk.local", "http://admin.local"]
