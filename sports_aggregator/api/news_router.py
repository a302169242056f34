"""News API router - aggregated sports news."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..config import Settings
from ..models import SportId
from ..services.news_aggregator import NewsAggregator
from .dependencies import clamp_limit, get_news_aggregator, get_settings_dep, parse_sport, sport_label


router = APIRouter()


def _envelope(result, sport: Optional[SportId]) -> dict:
    return {
        "articles": [article.to_dict() for article in result.items],
        "totalResults": len(result.items),
        "sport": sport_label(sport),
        "lastUpdated": result.last_updated.isoformat(),
    }


@router.get("")
async def get_news(
    sport: Optional[SportId] = Depends(parse_sport),
    limit: Optional[int] = Query(default=None),
    refresh: bool = Query(default=False),
    news: NewsAggregator = Depends(get_news_aggregator),
    settings: Settings = Depends(get_settings_dep),
):
    """Latest news, deduplicated across providers, newest first."""
    limit = clamp_limit(limit, settings.default_news_limit, settings.max_limit)
    result = await news.get_latest(sport, limit=limit, use_cache=not refresh)
    return _envelope(result, sport)


@router.get("/category/{category}")
async def get_news_by_category(
    category: str,
    sport: Optional[SportId] = Depends(parse_sport),
    limit: Optional[int] = Query(default=None),
    refresh: bool = Query(default=False),
    news: NewsAggregator = Depends(get_news_aggregator),
    settings: Settings = Depends(get_settings_dep),
):
    """Latest news whose category or tags match ``category``."""
    limit = clamp_limit(limit, settings.default_news_limit, settings.max_limit)
    result = await news.get_by_category(
        category, sport, limit=limit, use_cache=not refresh, pool_size=settings.max_limit
    )
    return _envelope(result, sport)


@router.post("/clear-cache")
async def clear_news_cache(news: NewsAggregator = Depends(get_news_aggregator)):
    cleared = news.clear_cache()
    return {"message": "News cache cleared", "cleared": cleared}
