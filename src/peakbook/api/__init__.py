"""API routers."""

from peakbook.api.router import api_router

__all__ = ["api_router"]
