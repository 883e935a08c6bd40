"""Pydantic schemas for leaderboard endpoints."""

from pydantic import Field

from peakbook.schemas.common import APIModel


class RankEntry(APIModel):
    """User fields shown on a leaderboard."""

    username: str
    nickname: str
    profile_image_path: str | None = None


class HighestPointRank(RankEntry):
    highest_point: int = Field(description="Height of the tallest summited mountain")


class SummitedCountRank(RankEntry):
    summited_count: int = Field(description="Number of summited mountains")
