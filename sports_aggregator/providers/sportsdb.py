"""TheSportsDB past league events, as news items and as scores."""

import logging
from typing import Any, List, Mapping, Optional

from ..core.health_registry import utc_now
from ..models import Article, GameStatus, ProviderBatch, ScoreEvent, SportId
from .base import BaseProvider, NewsProvider, ScoresProvider, parse_datetime, parse_int

logger = logging.getLogger(__name__)

SPORTSDB_BASE_URL = "https://www.thesportsdb.com/api/v1/json"

LEAGUE_IDS = {
    SportId.BASKETBALL: "4387",  # NBA
    SportId.FOOTBALL: "4391",  # NFL
    SportId.SOCCER: "4328",  # Premier League
}

FINISHED_STATUSES = {"match finished", "ft", "aet", "aot", "pen", "final", "finished"}
SCHEDULED_STATUSES = {"ns", "not started", "tbd", "postponed", "cancelled"}


def event_status(raw: Mapping[str, Any]) -> GameStatus:
    status = (raw.get("strStatus") or "").strip().lower()
    if status in FINISHED_STATUSES:
        return GameStatus.FINISHED
    if status in SCHEDULED_STATUSES:
        return GameStatus.SCHEDULED
    if not status:
        # Past events often carry no status but do carry the final score
        has_score = raw.get("intHomeScore") not in (None, "")
        return GameStatus.FINISHED if has_score else GameStatus.SCHEDULED
    return GameStatus.LIVE


def event_start(raw: Mapping[str, Any]):
    if raw.get("strTimestamp"):
        return parse_datetime(raw["strTimestamp"], default=utc_now())
    if raw.get("dateEvent"):
        return parse_datetime(f"{raw['dateEvent']}T{raw.get('strTime') or '00:00:00'}", default=utc_now())
    return utc_now()


class _SportsDBMixin(BaseProvider):
    display_name = "TheSportsDB"

    async def _league_events(self, sport_id: SportId) -> List[Mapping[str, Any]]:
        api_key = self.require_api_key()
        response = await self.get_json(
            f"{SPORTSDB_BASE_URL}/{api_key}/eventspastleague.php",
            params={"id": LEAGUE_IDS[sport_id]},
            strict=False,
        )
        if not response.ok:
            logger.debug(f"TheSportsDB league {sport_id.value} skipped: HTTP {response.status}")
            return []
        return self.expect_list(response.data, "events")


class SportsDBNewsProvider(_SportsDBMixin, NewsProvider):
    """Recent league results rendered as news items, one request per sport."""

    name = "sportsdb"

    async def fetch(self, sport: Optional[SportId], limit: int) -> ProviderBatch[Article]:
        articles: List[Article] = []
        for sport_id in self.sports_for(sport):
            events = await self._league_events(sport_id)
            for raw in events[:limit]:
                article = self._parse_event(raw, sport_id)
                if article:
                    articles.append(article)
        return ProviderBatch(articles)

    def _parse_event(self, raw: Mapping[str, Any], sport_id: SportId) -> Optional[Article]:
        event_id = raw.get("idEvent")
        if not event_id:
            return None

        title = raw.get("strEvent") or f"{raw.get('strHomeTeam') or ''} vs {raw.get('strAwayTeam') or ''}"
        return Article(
            id=f"sportsdb_{event_id}",
            title=title,
            description=raw.get("strDescriptionEN") or raw.get("strEvent") or "",
            url=raw.get("strVideo") or f"https://www.thesportsdb.com/event/{event_id}",
            image_url=raw.get("strThumb") or None,
            source=self.display_name,
            published_at=event_start(raw),
            sport_id=sport_id,
            category="event",
            tags=["event", "score"],
        )


class SportsDBScoresProvider(_SportsDBMixin, ScoresProvider):
    name = "sportsdb_scores"

    async def fetch(self, sport: Optional[SportId], limit: int) -> ProviderBatch[ScoreEvent]:
        scores: List[ScoreEvent] = []
        for sport_id in self.sports_for(sport):
            events = await self._league_events(sport_id)
            for raw in events[:limit]:
                if not raw.get("idEvent"):
                    continue
                scores.append(ScoreEvent(
                    id=f"sportsdb_{raw['idEvent']}",
                    sport_id=sport_id,
                    league=raw.get("strLeague") or "",
                    home_team=raw.get("strHomeTeam") or "",
                    away_team=raw.get("strAwayTeam") or "",
                    home_score=parse_int(raw.get("intHomeScore")),
                    away_score=parse_int(raw.get("intAwayScore")),
                    status=event_status(raw),
                    start_time=event_start(raw),
                    venue=raw.get("strVenue") or None,
                    source=self.display_name,
                ))
        return ProviderBatch(scores)
