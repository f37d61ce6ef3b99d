"""Tests for image domain models."""

from datetime import UTC, datetime

from infoscreen.models import ImagePatch, ImageRecord


def _record(**overrides) -> ImageRecord:
    data = {
        "id": 1718000000000,
        "filename": "photo_1718000000000.jpg",
        "original_name": "photo.jpg",
        "storage_path": "/data/images/photo_1718000000000.jpg",
        "size_bytes": 2048,
        "uploaded_at": datetime(2024, 6, 10, 8, 0, tzinfo=UTC),
        "title": "photo",
        "order": 1,
    }
    data.update(overrides)
    return ImageRecord(**data)


class TestImageRecord:
    """Tests for ImageRecord serialization and merging."""

    def test_to_dict_uses_camel_case_keys(self) -> None:
        data = _record().to_dict()
        assert data["originalName"] == "photo.jpg"
        assert data["storagePath"] == "/data/images/photo_1718000000000.jpg"
        assert data["sizeBytes"] == 2048
        assert data["uploadedAt"] == "2024-06-10T08:00:00Z"
        assert data["updatedAt"] is None
        assert data["description"] == ""
        assert data["active"] is True

    def test_from_dict_restores_record(self) -> None:
        record = _record(description="Front of the shop", active=False)
        assert ImageRecord.from_dict(record.to_dict()) == record

    def test_from_dict_accepts_z_suffix_and_ignores_unknown_keys(self) -> None:
        record = ImageRecord.from_dict(
            {"id": 3, "filename": "a.png", "uploadedAt": "2024-06-10T08:00:00Z", "legacy": 1}
        )
        assert record.uploaded_at == datetime(2024, 6, 10, 8, 0, tzinfo=UTC)
        assert record.title == ""

    def test_apply_merges_only_provided_fields(self) -> None:
        record = _record(description="keep me")
        record.apply(ImagePatch(title="Opening hours", active=False))

        assert record.title == "Opening hours"
        assert record.active is False
        assert record.description == "keep me"
        assert record.order == 1
        assert record.updated_at is not None


class TestImagePatch:
    def test_changes_skips_unset_fields(self) -> None:
        assert ImagePatch(order=4).changes() == {"order": 4}

    def test_false_and_empty_values_are_changes(self) -> None:
        assert ImagePatch(description="", active=False).changes() == {
            "description": "",
            "active": False,
        }
