"""Authentication API endpoints."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import ValidationError as PydanticValidationError

from peakbook.api.forms import validation_message
from peakbook.config import Settings, get_settings
from peakbook.database import Database, get_db
from peakbook.models.user import User
from peakbook.schemas.common import ApiResponse
from peakbook.schemas.user import AuthResult, SignupData, UserLogin, UserProfile
from peakbook.services.errors import UnauthenticatedError, ValidationError
from peakbook.services.identity import new_user_id
from peakbook.utils.security import (
    CurrentUser,
    hash_password,
    issue_token,
    verify_password,
)


router = APIRouter(prefix="/auth", tags=["auth"])


def auth_result(user: User) -> AuthResult:
    """Build the signup/login payload with a fresh token."""
    profile = UserProfile.from_user(user)
    return AuthResult(**profile.model_dump(), token=issue_token(user.id))


@router.post("/signup", response_model=ApiResponse[AuthResult], status_code=201)
async def signup(
    username: Annotated[str | None, Form()] = None,
    password: Annotated[str | None, Form()] = None,
    nickname: Annotated[str | None, Form()] = None,
    pfp: Annotated[UploadFile | None, File()] = None,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[AuthResult]:
    """Register a new user.

    Accepts multipart form data with an optional ``pfp`` profile picture.
    The password is securely hashed before storage.

    Raises:
        ValidationError 400: If username or password is missing or malformed
        DuplicateUsernameError 409: If the username already exists
    """
    if not username or not password:
        raise ValidationError("Username and password are required.")
    try:
        data = SignupData(username=username, password=password, nickname=nickname)
    except PydanticValidationError as e:
        raise ValidationError(validation_message(e)) from e

    async with db.uploads.session() as batch:
        user = User(
            id=new_user_id(),
            username=data.username,
            nickname=data.nickname or data.username,
            password_hash=hash_password(data.password),
        )
        if pfp is not None and pfp.filename:
            staged = await batch.stage(pfp, settings.max_profile_image_bytes)
            user.profile_image_path = batch.commit(
                staged, "pfp", f"{user.username}-{uuid.uuid4().hex[:12]}"
            )
        await db.users.insert(user)

    return ApiResponse(data=auth_result(user), message="User registered successfully!")


@router.post("/login", response_model=ApiResponse[AuthResult])
async def login(
    credentials: UserLogin,
    db: Database = Depends(get_db),
) -> ApiResponse[AuthResult]:
    """Authenticate user and return a JWT token.

    Raises:
        UnauthenticatedError 401: If credentials are invalid
    """
    user = await db.users.find_by_username(credentials.username)

    # Validate user exists and password is correct
    if not user or not verify_password(credentials.password, user.password_hash):
        raise UnauthenticatedError("Invalid credentials")

    return ApiResponse(data=auth_result(user))


@router.get("/me", response_model=ApiResponse[UserProfile])
async def get_current_user_info(current_user: CurrentUser) -> ApiResponse[UserProfile]:
    """Get the current authenticated user's information.

    Requires a valid JWT token in the Authorization header.
    """
    return ApiResponse(data=UserProfile.from_user(current_user))
