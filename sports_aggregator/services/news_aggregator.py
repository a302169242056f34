"""News aggregation across all configured news providers."""

from typing import List, Optional

from ..models import AggregationResult, Article, SportId
from .aggregator import BaseAggregator
from .fallback_data import sample_news


class NewsAggregator(BaseAggregator[Article]):
    """Deduplicates by URL, newest first, cached for five minutes by default."""

    kind = "news"

    def sample_data(self) -> List[Article]:
        return sample_news(self._clock())

    async def get_by_category(
        self,
        category: str,
        sport: Optional[SportId] = None,
        limit: int = 50,
        use_cache: bool = True,
        pool_size: int = 100,
    ) -> AggregationResult[Article]:
        """Latest articles whose category or one of whose tags equals ``category``."""
        wanted = category.strip().lower()
        result = await self.get_latest(sport, limit=max(limit, pool_size), use_cache=use_cache)

        matching = [
            article for article in result.items
            if (article.category or "").lower() == wanted
            or wanted in (tag.lower() for tag in article.tags)
        ]
        return AggregationResult(
            matching[:limit],
            result.last_updated,
            from_cache=result.from_cache,
            is_fallback=result.is_fallback,
        )
