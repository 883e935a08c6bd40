"""Pydantic schemas for user and authentication API endpoints."""

from datetime import datetime

from pydantic import Field, field_validator

from peakbook.models.mountain import Mountain
from peakbook.models.user import Role, User
from peakbook.schemas.common import APIModel

BCRYPT_MAX_BYTES = 72


class SignupData(APIModel):
    """Text fields of the multipart signup form."""

    username: str = Field(min_length=1, max_length=50, description="Unique username")
    password: str = Field(min_length=1, max_length=100, description="Password")
    nickname: str | None = Field(default=None, max_length=50, description="Display name")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username contains only allowed characters."""
        if not v.replace("_", "").replace("-", "").replace(".", "").isalnum():
            msg = "Username can only contain letters, numbers, dots, underscores, and hyphens"
            raise ValueError(msg)
        return v

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        # bcrypt only accepts up to 72 bytes
        if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password cannot be longer than {BCRYPT_MAX_BYTES} bytes")
        return v

    @field_validator("nickname")
    @classmethod
    def strip_nickname(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class UserLogin(APIModel):
    """Schema for user login request."""

    username: str = Field(min_length=1, description="Username")
    password: str = Field(min_length=1, description="Password")


class PublicUser(APIModel):
    """Minimal public user info, as shown in search results."""

    id: str = Field(description="User ID")
    username: str = Field(description="Username")
    nickname: str = Field(description="Display name")
    profile_image_path: str | None = Field(default=None, description="Profile picture path")

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls(
            id=user.id,
            username=user.username,
            nickname=user.nickname,
            profile_image_path=user.profile_image_path,
        )


class UserProfile(PublicUser):
    """The caller's own profile (never includes the password hash)."""

    role: Role = Field(description="Authorization role")
    wishlist: list[int] = Field(default_factory=list, description="Wishlisted mountain ids")
    summited: list[int] = Field(default_factory=list, description="Summited mountain ids")
    uploaded_mountains: list[int] = Field(
        default_factory=list, description="Ids of mountains the user created"
    )
    created_at: datetime = Field(description="When the user signed up")

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=user.id,
            username=user.username,
            nickname=user.nickname,
            profile_image_path=user.profile_image_path,
            role=user.role,
            wishlist=user.wishlist,
            summited=user.summited,
            uploaded_mountains=user.uploaded_mountains,
            created_at=user.created_at,
        )


class AuthResult(UserProfile):
    """Profile plus a freshly issued bearer token."""

    token: str = Field(description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class PublicProfile(PublicUser):
    """Public profile with wishlist and summited mountains populated."""

    bio: str = Field(default="", description="Short biography")
    summited_mountains: list[Mountain] = Field(default_factory=list)
    wishlist_mountains: list[Mountain] = Field(default_factory=list)
    uploaded_mountains: list[int] = Field(default_factory=list)


class MountainListEntry(APIModel):
    """Request body for adding a mountain to the wishlist or summited list."""

    mountain_id: int = Field(gt=0, description="Mountain ID")


class ProfileImageUpdated(APIModel):
    """Response after replacing a profile picture."""

    profile_image_path: str = Field(description="New profile picture path")
