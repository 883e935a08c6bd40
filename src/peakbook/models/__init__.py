"""Stored record models."""

from peakbook.models.mountain import Mountain
from peakbook.models.user import Role, User

__all__ = [
    "Mountain",
    "Role",
    "User",
]
