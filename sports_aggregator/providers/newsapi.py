"""NewsAPI.org everything-search adapter."""

from typing import Any, List, Mapping, Optional

from ..core.health_registry import utc_now
from ..models import Article, ProviderBatch, SportId
from ..utils.text_classifier import detect_sport, extract_category, extract_tags
from .base import NewsProvider, parse_datetime, url_digest

NEWSAPI_URL = "https://newsapi.org/v2/everything"

SPORT_QUERIES = {
    SportId.BASKETBALL: "basketball OR NBA",
    SportId.FOOTBALL: "NFL OR American football",
    SportId.SOCCER: "soccer OR Premier League OR La Liga OR Champions League",
}
ALL_SPORTS_QUERY = "basketball OR NBA OR NFL OR football OR soccer OR Premier League"

MAX_PAGE_SIZE = 100


class NewsAPIProvider(NewsProvider):
    """Keyword search over NewsAPI. Reports its quota through X-RateLimit headers."""

    name = "newsapi"
    display_name = "NewsAPI"

    async def fetch(self, sport: Optional[SportId], limit: int) -> ProviderBatch[Article]:
        api_key = self.require_api_key()
        query = SPORT_QUERIES[sport] if sport else ALL_SPORTS_QUERY

        response = await self.get_json(NEWSAPI_URL, params={
            "q": query,
            "sortBy": "publishedAt",
            "pageSize": min(limit, MAX_PAGE_SIZE),
            "language": "en",
            "apiKey": api_key,
        })
        remaining, reset_at = self.rate_limit_from_headers(
            response.headers, "X-RateLimit-Remaining", "X-RateLimit-Reset"
        )

        data = response.data
        if not isinstance(data, Mapping) or data.get("status") != "ok":
            return ProviderBatch([], remaining, reset_at)

        articles: List[Article] = [
            self._parse_article(raw)
            for raw in self.expect_list(data, "articles")
            if raw.get("title") and raw.get("url")
        ]
        return ProviderBatch(articles, remaining, reset_at)

    def _parse_article(self, raw: Mapping[str, Any]) -> Article:
        title = raw["title"]
        description = raw.get("description") or ""
        source = (raw.get("source") or {}).get("name") or self.display_name

        return Article(
            id=f"newsapi_{url_digest(raw['url'])}",
            title=title,
            description=description,
            content=raw.get("content") or None,
            url=raw["url"],
            image_url=raw.get("urlToImage") or None,
            source=source,
            author=raw.get("author") or None,
            published_at=parse_datetime(raw.get("publishedAt"), default=utc_now()),
            sport_id=detect_sport(title, description),
            category=extract_category(title, description),
            tags=extract_tags(title, description),
        )
