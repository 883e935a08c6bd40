"""Pydantic schemas for the search endpoint."""

from pydantic import Field

from peakbook.models.mountain import Mountain
from peakbook.schemas.common import APIModel
from peakbook.schemas.user import PublicUser


class SearchResults(APIModel):
    mountains: list[Mountain] = Field(default_factory=list)
    users: list[PublicUser] = Field(default_factory=list)
