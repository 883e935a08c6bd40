"""Mountain API endpoints."""

import logging
from pathlib import PurePosixPath
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import ValidationError as PydanticValidationError

from peakbook.api.forms import submitted_files, validation_message
from peakbook.config import Settings, get_settings
from peakbook.database import Database, get_db
from peakbook.models.mountain import Mountain
from peakbook.models.user import User
from peakbook.schemas.common import ApiResponse
from peakbook.schemas.mountain import ImagesAdded, MountainCreate
from peakbook.services.errors import NotFoundError, ValidationError
from peakbook.services.uploads import UPLOADS_PREFIX, StagedFile, UploadBatch
from peakbook.utils.security import CurrentUser, ensure_owner_or_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mountains", tags=["mountains"])

IMAGE_FOLDER = "mountains"


def check_image_count(files: list[UploadFile], settings: Settings, empty_message: str) -> None:
    """Reject requests with no images or more than the per-request maximum."""
    if not files:
        raise ValidationError(empty_message)
    if len(files) > settings.max_images_per_request:
        raise ValidationError(
            f"At most {settings.max_images_per_request} images can be uploaded at once."
        )


def commit_images(
    batch: UploadBatch,
    mountain: Mountain,
    staged_files: list[StagedFile],
) -> list[str]:
    """Commit staged images as ``<id>_<n>.<ext>``, continuing after the current count.

    Sequence numbers already used by the mountain, or whose file exists on
    disk, are skipped.
    """
    taken_stems = {PurePosixPath(p).stem for p in mountain.images}
    sequence = len(mountain.images)
    paths = []
    for staged in staged_files:
        while True:
            sequence += 1
            stem = f"{mountain.id}_{sequence}"
            candidate = f"{UPLOADS_PREFIX}/{IMAGE_FOLDER}/{stem}{staged.extension}"
            if stem not in taken_stems and not batch.pipeline.exists(candidate):
                break
        paths.append(batch.commit(staged, IMAGE_FOLDER, stem))
        taken_stems.add(stem)
    return paths


@router.get("", response_model=ApiResponse[list[Mountain]])
async def list_mountains(db: Database = Depends(get_db)) -> ApiResponse[list[Mountain]]:
    """List every mountain."""
    return ApiResponse(data=await db.mountains.all())


@router.post("", response_model=ApiResponse[Mountain], status_code=201)
async def create_mountain(
    current_user: CurrentUser,
    name: Annotated[str | None, Form()] = None,
    height: Annotated[str | None, Form()] = None,
    country: Annotated[str | None, Form()] = None,
    needs_equipment: Annotated[str | None, Form(alias="needsEquipment")] = None,
    description: Annotated[str | None, Form()] = None,
    images: Annotated[list[UploadFile] | None, File()] = None,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[Mountain]:
    """Create a mountain from multipart form data with 1-5 images.

    Images are staged, then renamed to ``<id>_<n>.<ext>`` once the id is
    allocated. On any failure every file written by this request is removed.
    Requires authentication.
    """
    files = submitted_files(images)
    check_image_count(files, settings, "At least one image is required.")

    if not name or not height or not country or needs_equipment is None:
        raise ValidationError("All mountain fields are required.")
    try:
        data = MountainCreate(
            name=name,
            height=height,
            country=country,
            needs_equipment=needs_equipment,
            description=description or "",
        )
    except PydanticValidationError as e:
        raise ValidationError(validation_message(e)) from e

    async with db.uploads.session() as batch:
        staged_files = [
            await batch.stage(f, settings.max_mountain_image_bytes) for f in files
        ]

        def build(new_id: int) -> Mountain:
            mountain = Mountain(
                id=new_id,
                name=data.name,
                height=data.height,
                country=data.country,
                needs_equipment=data.needs_equipment,
                description=data.description,
                uploaded_by=current_user.username,
            )
            mountain.images = commit_images(batch, mountain, staged_files)
            return mountain

        mountain = await db.mountains.insert(build)

    def record_upload(user: User) -> None:
        user.uploaded_mountains.append(mountain.id)

    try:
        await db.users.update_by_id(current_user.id, record_upload)
    except NotFoundError:
        logger.warning(
            "Uploader %s vanished before mountain %d was recorded", current_user.id, mountain.id
        )

    return ApiResponse(data=mountain, message="Mountain uploaded successfully!")


@router.delete("/{mountain_id}", response_model=ApiResponse[None])
async def delete_mountain(
    mountain_id: int,
    current_user: CurrentUser,
    db: Database = Depends(get_db),
) -> ApiResponse[None]:
    """Delete a mountain and its image files.

    Only the uploader or an admin can delete a mountain. The id is also
    removed from every user's wishlist and summited list.
    Requires authentication.
    """
    image_paths = await db.mountains.delete(
        mountain_id,
        guard=lambda m: ensure_owner_or_admin(current_user, m.uploaded_by, "delete"),
    )
    await db.uploads.purge(image_paths)

    def prune(user: User) -> None:
        user.wishlist = [mid for mid in user.wishlist if mid != mountain_id]
        user.summited = [mid for mid in user.summited if mid != mountain_id]

    await db.users.update_all(prune)

    return ApiResponse(message="Mountain deleted successfully.")


@router.patch("/{mountain_id}/images", response_model=ApiResponse[ImagesAdded])
async def add_mountain_images(
    mountain_id: int,
    current_user: CurrentUser,
    images: Annotated[list[UploadFile] | None, File()] = None,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[ImagesAdded]:
    """Append up to five images to a mountain.

    Only the uploader or an admin can add images.
    Requires authentication.
    """
    files = submitted_files(images)
    check_image_count(files, settings, "No image files provided.")

    mountain = await db.mountains.find_by_id(mountain_id)
    if mountain is None:
        raise NotFoundError("Mountain not found.")
    ensure_owner_or_admin(current_user, mountain.uploaded_by, "add images to")

    new_paths: list[str] = []

    async with db.uploads.session() as batch:
        staged_files = [
            await batch.stage(f, settings.max_mountain_image_bytes) for f in files
        ]

        def append(current: Mountain) -> None:
            # Ownership is re-checked against the record loaded under the lock
            ensure_owner_or_admin(current_user, current.uploaded_by, "add images to")
            new_paths.extend(commit_images(batch, current, staged_files))
            current.images.extend(new_paths)

        mountain = await db.mountains.update(mountain_id, append)

    logger.info("Added %d images to mountain %d", len(new_paths), mountain_id)
    return ApiResponse(
        data=ImagesAdded(new_image_paths=new_paths, total_images=len(mountain.images)),
        message="Images added successfully!",
    )
