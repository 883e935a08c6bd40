"""Pydantic schemas for request/response validation."""

from peakbook.schemas.common import APIModel, ApiResponse, ErrorResponse
from peakbook.schemas.mountain import DeletePicture, ImagesAdded, MountainCreate
from peakbook.schemas.rank import HighestPointRank, RankEntry, SummitedCountRank
from peakbook.schemas.search import SearchResults
from peakbook.schemas.user import (
    AuthResult,
    MountainListEntry,
    ProfileImageUpdated,
    PublicProfile,
    PublicUser,
    SignupData,
    UserLogin,
    UserProfile,
)

__all__ = [
    # Common
    "APIModel",
    "ApiResponse",
    "ErrorResponse",
    # Mountain schemas
    "MountainCreate",
    "ImagesAdded",
    "DeletePicture",
    # Rank schemas
    "RankEntry",
    "HighestPointRank",
    "SummitedCountRank",
    # Search schemas
    "SearchResults",
    # User schemas
    "SignupData",
    "UserLogin",
    "PublicUser",
    "UserProfile",
    "AuthResult",
    "PublicProfile",
    "MountainListEntry",
    "ProfileImageUpdated",
]
