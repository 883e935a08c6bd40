"""Leaderboard API endpoints."""

from fastapi import APIRouter, Depends

from peakbook.database import Database, get_db
from peakbook.schemas.common import ApiResponse
from peakbook.schemas.rank import HighestPointRank, SummitedCountRank
from peakbook.services.ranking import highest_point_ranking, summited_count_ranking

router = APIRouter(prefix="/ranks", tags=["ranks"])


@router.get("/highest-point", response_model=ApiResponse[list[HighestPointRank]])
async def highest_point(db: Database = Depends(get_db)) -> ApiResponse[list[HighestPointRank]]:
    """Users ranked by the tallest mountain they have summited."""
    users = await db.users.all()
    mountains = await db.mountains.all()
    return ApiResponse(data=highest_point_ranking(users, mountains))


@router.get("/summited-count", response_model=ApiResponse[list[SummitedCountRank]])
async def summited_count(db: Database = Depends(get_db)) -> ApiResponse[list[SummitedCountRank]]:
    """Users ranked by number of summited mountains."""
    users = await db.users.all()
    mountains = await db.mountains.all()
    return ApiResponse(data=summited_count_ranking(users, mountains))
