"""Request dependencies shared by the API routers."""

from typing import Optional

from fastapi import HTTPException, Query, Request

from ..config import Settings
from ..container import ServiceContainer
from ..core.health_registry import ProviderHealthRegistry
from ..models import SportId
from ..services.news_aggregator import NewsAggregator
from ..services.scores_aggregator import ScoresAggregator

INVALID_SPORT_MESSAGE = "Invalid sport. Must be one of: basketball, football, soccer"


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_settings_dep(request: Request) -> Settings:
    return get_container(request).settings


def get_registry(request: Request) -> ProviderHealthRegistry:
    return get_container(request).registry


def get_news_aggregator(request: Request) -> NewsAggregator:
    return get_container(request).news


def get_scores_aggregator(request: Request) -> ScoresAggregator:
    return get_container(request).scores


def parse_sport(sport: Optional[str] = Query(default=None)) -> Optional[SportId]:
    """Validate the ``sport`` query parameter. Missing or "all" means every sport."""
    if sport is None or sport == "" or sport.lower() == "all":
        return None
    try:
        return SportId(sport.lower())
    except ValueError:
        raise HTTPException(status_code=400, detail=INVALID_SPORT_MESSAGE)


def clamp_limit(limit: Optional[int], default: int, maximum: int) -> int:
    if limit is None:
        return min(default, maximum)
    return max(1, min(limit, maximum))


def sport_label(sport: Optional[SportId]) -> str:
    return sport.value if sport else "all"
