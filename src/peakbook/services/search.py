"""Case-insensitive substring search over mountains and users."""

from peakbook.models.mountain import Mountain
from peakbook.models.user import User
from peakbook.schemas.search import SearchResults
from peakbook.schemas.user import PublicUser
from peakbook.services.errors import ValidationError


def search(query: str, users: list[User], mountains: list[Mountain]) -> SearchResults:
    """Return mountains whose name or country contains ``query`` and users whose
    username or nickname does.

    Raises:
        ValidationError: If the query is empty. Any other query, whitespace
            included, is matched as given.
    """
    if not query:
        raise ValidationError("Search query is required.")

    needle = query.lower()
    matching_mountains = [
        m for m in mountains if needle in m.name.lower() or needle in m.country.lower()
    ]
    matching_users = [
        PublicUser.from_user(u)
        for u in users
        if needle in u.username.lower() or needle in u.nickname.lower()
    ]
    return SearchResults(mountains=matching_mountains, users=matching_users)
