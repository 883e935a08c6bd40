"""Main API router aggregation."""

from fastapi import APIRouter

from peakbook.api.admin import router as admin_router
from peakbook.api.auth import router as auth_router
from peakbook.api.mountains import router as mountains_router
from peakbook.api.ranks import router as ranks_router
from peakbook.api.search import router as search_router
from peakbook.api.users import router as users_router

# Main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(mountains_router)
api_router.include_router(admin_router)
api_router.include_router(ranks_router)
api_router.include_router(search_router)
