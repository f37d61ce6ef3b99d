"""Image catalog API endpoints."""

import logging
from pathlib import Path

from fastapi import APIRouter, File, UploadFile

from ..exceptions import InvalidFileTypeException, InvalidInputException, StorageException
from ..models import ErrorResponse
from ..services import FileMeta
from .dependencies import HubDep, SettingsDep, StoreDep
from .schemas import (
    ImageMutationResponse,
    ImageResponse,
    SuccessResponse,
    UpdateImageRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])


@router.get("/images", response_model=list[ImageResponse])
async def list_images(store: StoreDep) -> list[ImageResponse]:
    """List the full catalog in display order."""
    return [ImageResponse.from_record(r) for r in store.list_images()]


@router.get(
    "/images/{image_id}",
    response_model=ImageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_image(image_id: int, store: StoreDep) -> ImageResponse:
    """Get a single image record."""
    return ImageResponse.from_record(store.get(image_id))


@router.post(
    "/upload",
    response_model=ImageMutationResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
)
async def upload_image(
    store: StoreDep,
    hub: HubDep,
    settings: SettingsDep,
    image: UploadFile | None = File(default=None),
) -> ImageMutationResponse:
    """Store an uploaded image and announce it to display clients."""
    if image is None or not image.filename:
        raise InvalidInputException("No file")

    original_name = Path(image.filename).name
    if not settings.is_allowed_extension(original_name):
        raise InvalidFileTypeException("Invalid file type")

    filename = store.file_storage.make_stored_filename(original_name)
    path, size = await store.file_storage.save_upload(image, filename)

    try:
        record = await store.add(
            FileMeta(filename=filename, original_name=original_name, path=path, size=size)
        )
    except StorageException:
        store.file_storage.delete_file(path)
        raise
    logger.info("Uploaded %s as %s (%d bytes)", original_name, filename, size)

    await hub.image_uploaded(record)
    return ImageMutationResponse(image=ImageResponse.from_record(record))


@router.put(
    "/images/{image_id}",
    response_model=ImageMutationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_image(
    image_id: int,
    request: UpdateImageRequest,
    store: StoreDep,
    hub: HubDep,
) -> ImageMutationResponse:
    """Update editable fields of an image."""
    record = await store.update(image_id, request.to_patch())
    await hub.image_updated(record)
    return ImageMutationResponse(image=ImageResponse.from_record(record))


@router.delete(
    "/images/{image_id}",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_image(image_id: int, store: StoreDep, hub: HubDep) -> SuccessResponse:
    """Delete an image, its file and its thumbnail."""
    await store.remove(image_id)
    await hub.image_deleted(image_id)
    return SuccessResponse()
