"""Search API endpoint."""

from fastapi import APIRouter, Depends, Query

from peakbook.database import Database, get_db
from peakbook.schemas.common import ApiResponse
from peakbook.schemas.search import SearchResults
from peakbook.services.search import search

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=ApiResponse[SearchResults])
async def search_catalogue(
    q: str = Query("", description="Case-insensitive substring to match"),
    db: Database = Depends(get_db),
) -> ApiResponse[SearchResults]:
    """Find mountains by name or country and users by username or nickname."""
    users = await db.users.all()
    mountains = await db.mountains.all()
    return ApiResponse(data=search(q, users, mountains))
