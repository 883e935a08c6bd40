"""User profile, wishlist and summited-list API endpoints."""

import uuid
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, File, UploadFile

from peakbook.config import Settings, get_settings
from peakbook.database import Database, get_db
from peakbook.models.user import User
from peakbook.schemas.common import ApiResponse
from peakbook.schemas.user import (
    MountainListEntry,
    ProfileImageUpdated,
    PublicProfile,
)
from peakbook.services.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from peakbook.utils.security import CurrentUser


router = APIRouter(prefix="/users", tags=["users"])

ListName = Literal["wishlist", "summited"]

LIST_MESSAGES: dict[ListName, dict[str, str]] = {
    "wishlist": {
        "duplicate": "Mountain already in wishlist.",
        "missing": "Mountain not found in wishlist.",
        "added": "Mountain added to wishlist successfully.",
        "removed": "Mountain removed from wishlist successfully.",
    },
    "summited": {
        "duplicate": "Mountain already marked as summited.",
        "missing": "Mountain not found in summited list.",
        "added": "Mountain marked as summited successfully.",
        "removed": "Mountain unmarked as summited successfully.",
    },
}


async def add_to_list(db: Database, caller: User, list_name: ListName, mountain_id: int) -> User:
    """Append ``mountain_id`` to one of the caller's lists.

    Raises:
        NotFoundError: If the mountain does not exist
        ConflictError: If the mountain is already on the list
    """

    def append(user: User) -> None:
        entries: list[int] = getattr(user, list_name)
        if mountain_id in entries:
            raise ConflictError(LIST_MESSAGES[list_name]["duplicate"])
        entries.append(mountain_id)

    # Lock order: mountains before users
    async with db.mountains.hold(mountain_id):
        return await db.users.update_by_id(caller.id, append)


async def remove_from_list(
    db: Database, caller: User, list_name: ListName, mountain_id: int
) -> User:
    """Remove ``mountain_id`` from one of the caller's lists.

    Raises:
        NotFoundError: If the mountain is not on the list
    """

    def remove(user: User) -> None:
        entries: list[int] = getattr(user, list_name)
        if mountain_id not in entries:
            raise NotFoundError(LIST_MESSAGES[list_name]["missing"])
        setattr(user, list_name, [mid for mid in entries if mid != mountain_id])

    return await db.users.update_by_id(caller.id, remove)


@router.post("/wishlist", response_model=ApiResponse[list[int]])
async def add_to_wishlist(
    entry: MountainListEntry,
    current_user: CurrentUser,
    db: Database = Depends(get_db),
) -> ApiResponse[list[int]]:
    """Add a mountain to the caller's wishlist.

    Requires authentication.
    """
    user = await add_to_list(db, current_user, "wishlist", entry.mountain_id)
    return ApiResponse(data=user.wishlist, message=LIST_MESSAGES["wishlist"]["added"])


@router.delete("/wishlist/{mountain_id}", response_model=ApiResponse[list[int]])
async def remove_from_wishlist(
    mountain_id: int,
    current_user: CurrentUser,
    db: Database = Depends(get_db),
) -> ApiResponse[list[int]]:
    """Remove a mountain from the caller's wishlist.

    Requires authentication.
    """
    user = await remove_from_list(db, current_user, "wishlist", mountain_id)
    return ApiResponse(data=user.wishlist, message=LIST_MESSAGES["wishlist"]["removed"])


@router.post("/summited", response_model=ApiResponse[list[int]])
async def add_to_summited(
    entry: MountainListEntry,
    current_user: CurrentUser,
    db: Database = Depends(get_db),
) -> ApiResponse[list[int]]:
    """Mark a mountain as summited by the caller.

    Requires authentication.
    """
    user = await add_to_list(db, current_user, "summited", entry.mountain_id)
    return ApiResponse(data=user.summited, message=LIST_MESSAGES["summited"]["added"])


@router.delete("/summited/{mountain_id}", response_model=ApiResponse[list[int]])
async def remove_from_summited(
    mountain_id: int,
    current_user: CurrentUser,
    db: Database = Depends(get_db),
) -> ApiResponse[list[int]]:
    """Unmark a mountain as summited by the caller.

    Requires authentication.
    """
    user = await remove_from_list(db, current_user, "summited", mountain_id)
    return ApiResponse(data=user.summited, message=LIST_MESSAGES["summited"]["removed"])


@router.get("/{username}", response_model=ApiResponse[PublicProfile])
async def get_public_profile(
    username: str,
    db: Database = Depends(get_db),
) -> ApiResponse[PublicProfile]:
    """Get a user's public profile.

    Wishlist and summited ids are populated with the mountain records; ids of
    mountains that no longer exist are skipped.
    """
    user = await db.users.find_by_username(username)
    if user is None:
        raise NotFoundError("User not found.")

    mountains = {m.id: m for m in await db.mountains.all()}
    profile = PublicProfile(
        id=user.id,
        username=user.username,
        nickname=user.nickname,
        profile_image_path=user.profile_image_path,
        bio=user.bio,
        summited_mountains=[mountains[mid] for mid in user.summited if mid in mountains],
        wishlist_mountains=[mountains[mid] for mid in user.wishlist if mid in mountains],
        uploaded_mountains=user.uploaded_mountains,
    )
    return ApiResponse(data=profile)


@router.post("/{username}/pfp", response_model=ApiResponse[ProfileImageUpdated])
async def update_profile_picture(
    username: str,
    current_user: CurrentUser,
    pfp: Annotated[UploadFile | None, File()] = None,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[ProfileImageUpdated]:
    """Replace a user's profile picture and delete the previous file.

    Only the user themself can change their picture.
    Requires authentication.
    """
    if current_user.username != username:
        raise ForbiddenError("Not authorized to update this user's profile picture.")

    if pfp is None or not pfp.filename:
        raise ValidationError("No profile picture file provided.")

    old_path: str | None = None

    async with db.uploads.session() as batch:
        staged = await batch.stage(pfp, settings.max_profile_image_bytes)
        new_path = batch.commit(staged, "pfp", f"{username}-{uuid.uuid4().hex[:12]}")

        def replace(user: User) -> None:
            nonlocal old_path
            old_path = user.profile_image_path
            user.profile_image_path = new_path

        await db.users.update_by_username(username, replace)

    if old_path:
        await db.uploads.purge([old_path])

    return ApiResponse(
        data=ProfileImageUpdated(profile_image_path=new_path),
        message="Profile picture updated successfully.",
    )
