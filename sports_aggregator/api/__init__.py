"""API routers package for Sports Aggregator."""

from fastapi import APIRouter

from .news_router import router as news_router
from .scores_router import router as scores_router
from .status_router import router as status_router


def create_api_router() -> APIRouter:
    """Create the main API router with all sub-routers."""
    router = APIRouter()

    router.include_router(news_router, prefix="/news", tags=["news"])
    router.include_router(scores_router, prefix="/scores", tags=["scores"])
    router.include_router(status_router, prefix="/status", tags=["status"])

    return router


__all__ = ['create_api_router']
