"""ESPN site API: news and scoreboards (no key required)."""

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..core.health_registry import utc_now
from ..models import Article, GameStatus, ProviderBatch, ScoreEvent, SportId
from ..utils.text_classifier import extract_category, extract_tags
from .base import NewsProvider, ScoresProvider, parse_datetime, parse_int, url_digest

logger = logging.getLogger(__name__)

ESPN_BASE_URL = "https://site.api.espn.com/apis/site/v2/sports"

ESPN_PATHS = {
    SportId.BASKETBALL: "basketball/nba",
    SportId.FOOTBALL: "football/nfl",
    SportId.SOCCER: "soccer/eng.1",
}

ESPN_LEAGUES = {
    SportId.BASKETBALL: "NBA",
    SportId.FOOTBALL: "NFL",
    SportId.SOCCER: "Premier League",
}

ESPN_STATES = {
    "pre": GameStatus.SCHEDULED,
    "in": GameStatus.LIVE,
    "post": GameStatus.FINISHED,
}


class ESPNNewsProvider(NewsProvider):
    """News from ESPN, one request per sport. A failing sport endpoint is skipped."""

    name = "espn"
    display_name = "ESPN"

    async def fetch(self, sport: Optional[SportId], limit: int) -> ProviderBatch[Article]:
        articles: List[Article] = []
        for sport_id in self.sports_for(sport):
            response = await self.get_json(f"{ESPN_BASE_URL}/{ESPN_PATHS[sport_id]}/news", strict=False)
            if not response.ok:
                logger.debug(f"ESPN news for {sport_id.value} skipped: HTTP {response.status}")
                continue
            for raw in self.expect_list(response.data, "articles")[:limit]:
                article = self._parse_article(raw, sport_id)
                if article:
                    articles.append(article)
        return ProviderBatch(articles)

    def _parse_article(self, raw: Mapping[str, Any], sport_id: SportId) -> Optional[Article]:
        url = ((raw.get("links") or {}).get("web") or {}).get("href") or raw.get("url")
        if not url:
            return None

        title = raw.get("headline") or raw.get("title") or ""
        description = raw.get("description") or ""
        images = raw.get("images") or []
        image_url = images[0].get("url") if images and isinstance(images[0], Mapping) else raw.get("image")
        native_id = raw.get("id") or raw.get("dataSourceIdentifier") or url_digest(url)

        return Article(
            id=f"espn_{native_id}",
            title=title,
            description=description,
            content=raw.get("content") or None,
            url=url,
            image_url=image_url or None,
            source=self.display_name,
            author=raw.get("byline") or None,
            published_at=parse_datetime(raw.get("published"), default=utc_now()),
            sport_id=sport_id,
            category=extract_category(title, description),
            tags=extract_tags(title, description),
        )


class ESPNScoresProvider(ScoresProvider):
    """Scoreboards from ESPN, one request per sport."""

    name = "espn_scores"
    display_name = "ESPN"

    async def fetch(self, sport: Optional[SportId], limit: int) -> ProviderBatch[ScoreEvent]:
        scores: List[ScoreEvent] = []
        for sport_id in self.sports_for(sport):
            response = await self.get_json(f"{ESPN_BASE_URL}/{ESPN_PATHS[sport_id]}/scoreboard", strict=False)
            if not response.ok:
                logger.debug(f"ESPN scoreboard for {sport_id.value} skipped: HTTP {response.status}")
                continue

            league = self._league_name(response.data, sport_id)
            for event in self.expect_list(response.data, "events")[:limit]:
                score = self._parse_event(event, sport_id, league)
                if score:
                    scores.append(score)
        return ProviderBatch(scores)

    @staticmethod
    def _league_name(data: Any, sport_id: SportId) -> str:
        leagues = data.get("leagues") if isinstance(data, Mapping) else None
        if leagues and isinstance(leagues[0], Mapping) and leagues[0].get("name"):
            return leagues[0]["name"]
        return ESPN_LEAGUES[sport_id]

    def _parse_event(self, event: Mapping[str, Any], sport_id: SportId, league: str) -> Optional[ScoreEvent]:
        competitions = event.get("competitions") or []
        if not competitions:
            return None
        competition = competitions[0]

        competitors: Dict[str, Mapping[str, Any]] = {
            c.get("homeAway"): c for c in competition.get("competitors") or [] if isinstance(c, Mapping)
        }
        home, away = competitors.get("home"), competitors.get("away")
        if not home or not away or not event.get("id"):
            return None

        status_type = (event.get("status") or {}).get("type") or {}
        status = ESPN_STATES.get(status_type.get("state"), GameStatus.SCHEDULED)

        # ESPN reports "0" before tip-off; a scheduled game has no score yet
        has_score = status != GameStatus.SCHEDULED

        return ScoreEvent(
            id=f"espn_{event['id']}",
            sport_id=sport_id,
            league=league,
            home_team=(home.get("team") or {}).get("displayName") or "",
            away_team=(away.get("team") or {}).get("displayName") or "",
            home_score=parse_int(home.get("score")) if has_score else None,
            away_score=parse_int(away.get("score")) if has_score else None,
            status=status,
            start_time=parse_datetime(event.get("date"), default=utc_now()),
            period=status_type.get("shortDetail") or None,
            venue=(competition.get("venue") or {}).get("fullName") or None,
            source=self.display_name,
        )
