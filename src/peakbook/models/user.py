"""User record model."""

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import Field

from peakbook.models.base import StoredRecord


class Role(StrEnum):
    """Authorization role of a user."""

    USER = "user"
    ADMIN = "admin"


class User(StoredRecord):
    """User account stored in users.json."""

    id: str
    username: str
    password_hash: str
    nickname: str
    role: Role = Role.USER
    bio: str = ""
    wishlist: list[int] = Field(default_factory=list)
    summited: list[int] = Field(default_factory=list)
    uploaded_mountains: list[int] = Field(default_factory=list)
    profile_image_path: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
