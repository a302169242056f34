"""GNews.io search adapter."""

from typing import Any, Mapping, Optional

from ..core.health_registry import utc_now
from ..models import Article, ProviderBatch, SportId
from ..utils.text_classifier import detect_sport, extract_category, extract_tags
from .base import NewsProvider, parse_datetime, url_digest

GNEWS_URL = "https://gnews.io/api/v4/search"

SPORT_QUERIES = {
    SportId.BASKETBALL: "NBA basketball",
    SportId.FOOTBALL: "NFL football",
    SportId.SOCCER: "soccer Premier League",
}
ALL_SPORTS_QUERY = "sports"


class GNewsProvider(NewsProvider):
    name = "gnews"
    display_name = "GNews"

    async def fetch(self, sport: Optional[SportId], limit: int) -> ProviderBatch[Article]:
        api_key = self.require_api_key()
        query = SPORT_QUERIES[sport] if sport else ALL_SPORTS_QUERY

        response = await self.get_json(GNEWS_URL, params={
            "q": query,
            "lang": "en",
            "max": limit,
            "apikey": api_key,
        })

        return ProviderBatch([
            self._parse_article(raw)
            for raw in self.expect_list(response.data, "articles")
            if raw.get("url")
        ])

    def _parse_article(self, raw: Mapping[str, Any]) -> Article:
        title = raw.get("title") or ""
        description = raw.get("description") or ""
        source_name = (raw.get("source") or {}).get("name")

        return Article(
            id=f"gnews_{url_digest(raw['url'])}",
            title=title,
            description=description,
            content=raw.get("content") or None,
            url=raw["url"],
            image_url=raw.get("image") or None,
            source=source_name or self.display_name,
            # GNews has no byline; the publication is the closest author information
            author=source_name or None,
            published_at=parse_datetime(raw.get("publishedAt"), default=utc_now()),
            sport_id=detect_sport(title, description),
            category=extract_category(title, description),
            tags=extract_tags(title, description),
        )
