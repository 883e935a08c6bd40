"""Stores, upload pipeline and read-side services."""

from peakbook.services.errors import (
    ConflictError,
    DuplicateUsernameError,
    ForbiddenError,
    InternalError,
    InvalidTokenError,
    NotFoundError,
    ServiceError,
    UnauthenticatedError,
    UserNotFoundError,
    ValidationError,
)

__all__ = [
    "ConflictError",
    "DuplicateUsernameError",
    "ForbiddenError",
    "InternalError",
    "InvalidTokenError",
    "NotFoundError",
    "ServiceError",
    "UnauthenticatedError",
    "UserNotFoundError",
    "ValidationError",
]
