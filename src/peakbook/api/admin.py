"""Admin-only API endpoints."""

import logging

from fastapi import APIRouter, Depends

from peakbook.database import Database, get_db
from peakbook.models.mountain import Mountain
from peakbook.schemas.common import ApiResponse
from peakbook.schemas.mountain import DeletePicture
from peakbook.services.errors import NotFoundError
from peakbook.utils.security import AdminUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.delete("/mountains/{mountain_id}/pictures", response_model=ApiResponse[list[str]])
async def delete_mountain_picture(
    mountain_id: int,
    picture: DeletePicture,
    current_user: AdminUser,
    db: Database = Depends(get_db),
) -> ApiResponse[list[str]]:
    """Remove one image from a mountain and delete its file.

    Returns the remaining image paths. The mountain may end up with no images.
    Requires the admin role.
    """

    def remove(mountain: Mountain) -> None:
        if picture.image_path not in mountain.images:
            raise NotFoundError("Picture not found for this mountain.")
        mountain.images = [p for p in mountain.images if p != picture.image_path]

    mountain = await db.mountains.update(mountain_id, remove)
    await db.uploads.purge([picture.image_path])

    logger.info(
        "Admin %s removed %s from mountain %d",
        current_user.username,
        picture.image_path,
        mountain_id,
    )
    return ApiResponse(data=mountain.images, message="Picture deleted successfully.")
