"""Process-wide service wiring.

Everything the request handlers need is built once at startup and handed to
the FastAPI app; nothing here is a module-level singleton.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional

from .config import Settings
from .core.health_registry import ProviderHealthRegistry, utc_now
from .core.http_client import AsyncHTTPClient
from .providers.registry import build_news_providers, build_scores_providers
from .services.news_aggregator import NewsAggregator
from .services.scores_aggregator import ScoresAggregator

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    http_client: AsyncHTTPClient
    registry: ProviderHealthRegistry
    news: NewsAggregator
    scores: ScoresAggregator

    async def start(self) -> None:
        await self.http_client.start()

    async def close(self) -> None:
        await self.http_client.close()


def build_container(
    settings: Settings,
    http_client: Optional[AsyncHTTPClient] = None,
    clock: Callable = utc_now,
) -> ServiceContainer:
    """Create the registry, adapters and aggregators from configuration."""
    http_client = http_client or AsyncHTTPClient(timeout=settings.provider_timeout)

    registry = ProviderHealthRegistry(
        failure_threshold=settings.failure_threshold,
        recovery_window=timedelta(seconds=settings.recovery_window),
        clock=clock,
    )

    news = NewsAggregator(
        build_news_providers(settings, http_client),
        registry,
        priority=settings.get_news_priority(),
        cache_ttl=timedelta(seconds=settings.news_cache_ttl),
        clock=clock,
    )
    scores = ScoresAggregator(
        build_scores_providers(settings, http_client),
        registry,
        priority=settings.get_scores_priority(),
        cache_ttl=timedelta(seconds=settings.scores_cache_ttl),
        clock=clock,
    )

    logger.info(
        f"Registered {len(news.priority)} news and {len(scores.priority)} score providers"
    )
    return ServiceContainer(settings, http_client, registry, news, scores)
