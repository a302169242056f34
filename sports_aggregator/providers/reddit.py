"""Reddit subreddit listings as community buzz."""

from typing import Any, Mapping, Optional

from ..core.health_registry import utc_now
from ..models import Article, ProviderBatch, SportId
from ..utils.text_classifier import detect_sport, extract_tags
from .base import NewsProvider, parse_datetime

SUBREDDITS = {
    SportId.BASKETBALL: "nba",
    SportId.FOOTBALL: "nfl",
    SportId.SOCCER: "soccer",
}
ALL_SPORTS_SUBREDDIT = "sports"

MAX_POSTS = 25
DESCRIPTION_LENGTH = 300


class RedditProvider(NewsProvider):
    """Newest posts of the sport's subreddit (r/sports when no sport is given)."""

    name = "reddit"
    display_name = "Reddit"

    def __init__(self, http_client, api_key: Optional[str] = None, user_agent: str = "SportsAggregator/1.0"):
        super().__init__(http_client, api_key)
        self.user_agent = user_agent

    async def fetch(self, sport: Optional[SportId], limit: int) -> ProviderBatch[Article]:
        subreddit = SUBREDDITS[sport] if sport else ALL_SPORTS_SUBREDDIT

        response = await self.get_json(
            f"https://www.reddit.com/r/{subreddit}/new.json",
            params={"limit": min(limit, MAX_POSTS)},
            headers={"User-Agent": self.user_agent},
        )

        listing = response.data.get("data") if isinstance(response.data, Mapping) else None
        posts = self.expect_list(listing or {}, "children")

        articles = []
        for post in posts:
            data = post.get("data")
            if not isinstance(data, Mapping) or data.get("stickied") or not data.get("permalink"):
                continue
            articles.append(self._parse_post(data, subreddit, sport))
        return ProviderBatch(articles)

    def _parse_post(self, data: Mapping[str, Any], subreddit: str, sport: Optional[SportId]) -> Article:
        title = data.get("title") or ""
        selftext = data.get("selftext") or ""
        thumbnail = data.get("thumbnail") or ""

        return Article(
            id=f"reddit_{data.get('id') or data['permalink']}",
            title=title,
            description=selftext[:DESCRIPTION_LENGTH],
            content=selftext or None,
            url=f"https://reddit.com{data['permalink']}",
            image_url=thumbnail if thumbnail.startswith("http") else None,
            source=f"r/{subreddit}",
            author=data.get("author") or None,
            published_at=parse_datetime(data.get("created_utc"), default=utc_now()),
            # The sport subreddits are authoritative; r/sports needs guessing
            sport_id=sport or detect_sport(title, selftext),
            category="viral",
            tags=["reddit", "community"] + extract_tags(title, selftext),
        )
