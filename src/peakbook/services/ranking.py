"""Leaderboards derived from the user and mountain collections."""

from peakbook.models.mountain import Mountain
from peakbook.models.user import User
from peakbook.schemas.rank import HighestPointRank, SummitedCountRank


def highest_point_ranking(users: list[User], mountains: list[Mountain]) -> list[HighestPointRank]:
    """Rank users by the tallest mountain they have summited, highest first.

    Summited ids that no longer resolve to a mountain are ignored; users with
    nothing summited score 0. Ties keep store order.
    """
    heights = {m.id: m.height for m in mountains}
    entries = [
        HighestPointRank(
            username=user.username,
            nickname=user.nickname,
            profile_image_path=user.profile_image_path,
            highest_point=max((heights[mid] for mid in user.summited if mid in heights), default=0),
        )
        for user in users
    ]
    return sorted(entries, key=lambda e: e.highest_point, reverse=True)


def summited_count_ranking(users: list[User], mountains: list[Mountain]) -> list[SummitedCountRank]:
    """Rank users by how many existing mountains they have summited."""
    known = {m.id for m in mountains}
    entries = [
        SummitedCountRank(
            username=user.username,
            nickname=user.nickname,
            profile_image_path=user.profile_image_path,
            summited_count=sum(1 for mid in user.summited if mid in known),
        )
        for user in users
    ]
    return sorted(entries, key=lambda e: e.summited_count, reverse=True)
