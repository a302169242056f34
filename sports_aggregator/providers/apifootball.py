"""API-Football live fixtures (soccer only), as news items and as scores."""

from typing import Any, Mapping, Optional

from ..core.health_registry import utc_now
from ..models import Article, GameStatus, ProviderBatch, ScoreEvent, SportId
from .base import BaseProvider, NewsProvider, ScoresProvider, parse_datetime, parse_int

API_FOOTBALL_URL = "https://v3.football.api-sports.io/fixtures"

FINISHED_CODES = {"FT", "AET", "PEN", "AWD", "WO"}
SCHEDULED_CODES = {"TBD", "NS", "PST", "CANC", "ABD", "SUSP"}


def fixture_status(short_code: Optional[str]) -> GameStatus:
    if not short_code or short_code in SCHEDULED_CODES:
        return GameStatus.SCHEDULED
    if short_code in FINISHED_CODES:
        return GameStatus.FINISHED
    return GameStatus.LIVE


class _APIFootballMixin(BaseProvider):
    display_name = "API-Football"
    sports = (SportId.SOCCER,)

    async def _live_fixtures(self):
        api_key = self.require_api_key()
        response = await self.get_json(
            API_FOOTBALL_URL,
            params={"live": "all"},
            headers={"x-apisports-key": api_key},
        )
        remaining, _ = self.rate_limit_from_headers(response.headers, "x-ratelimit-requests-remaining")
        return self.expect_list(response.data, "response"), remaining


class APIFootballNewsProvider(_APIFootballMixin, NewsProvider):
    """Live soccer fixtures turned into short news items."""

    name = "apifootball"

    async def fetch(self, sport: Optional[SportId], limit: int) -> ProviderBatch[Article]:
        if not self.supports(sport):
            return ProviderBatch()

        fixtures, remaining = await self._live_fixtures()
        articles = [
            article for article in (self._parse_fixture(raw) for raw in fixtures[:limit]) if article
        ]
        return ProviderBatch(articles, rate_limit_remaining=remaining)

    def _parse_fixture(self, raw: Mapping[str, Any]) -> Optional[Article]:
        fixture = raw.get("fixture") or {}
        league = raw.get("league") or {}
        teams = raw.get("teams") or {}
        fixture_id = fixture.get("id")
        if not fixture_id:
            return None

        home = (teams.get("home") or {}).get("name") or ""
        away = (teams.get("away") or {}).get("name") or ""
        status_long = (fixture.get("status") or {}).get("long") or "Scheduled"

        return Article(
            id=f"apifootball_{fixture_id}",
            title=f"{home} vs {away}",
            description=f"Live match: {league.get('name') or 'Unknown league'} - {status_long}",
            url=f"https://www.api-football.com/fixtures/{fixture_id}",
            image_url=league.get("logo") or None,
            source=self.display_name,
            published_at=parse_datetime(fixture.get("date"), default=utc_now()),
            sport_id=SportId.SOCCER,
            category="live",
            tags=["live", "fixture", "match"],
        )


class APIFootballScoresProvider(_APIFootballMixin, ScoresProvider):
    name = "apifootball_scores"

    async def fetch(self, sport: Optional[SportId], limit: int) -> ProviderBatch[ScoreEvent]:
        if not self.supports(sport):
            return ProviderBatch()

        fixtures, remaining = await self._live_fixtures()
        scores = [score for score in (self._parse_fixture(raw) for raw in fixtures[:limit]) if score]
        return ProviderBatch(scores, rate_limit_remaining=remaining)

    def _parse_fixture(self, raw: Mapping[str, Any]) -> Optional[ScoreEvent]:
        fixture = raw.get("fixture") or {}
        fixture_id = fixture.get("id")
        if not fixture_id:
            return None

        teams = raw.get("teams") or {}
        goals = raw.get("goals") or {}
        status = fixture.get("status") or {}
        elapsed = status.get("elapsed")

        return ScoreEvent(
            id=f"apifootball_{fixture_id}",
            sport_id=SportId.SOCCER,
            league=(raw.get("league") or {}).get("name") or "",
            home_team=(teams.get("home") or {}).get("name") or "",
            away_team=(teams.get("away") or {}).get("name") or "",
            home_score=parse_int(goals.get("home")),
            away_score=parse_int(goals.get("away")),
            status=fixture_status(status.get("short")),
            start_time=parse_datetime(fixture.get("date"), default=utc_now()),
            period=f"{elapsed}'" if elapsed else (status.get("long") or None),
            venue=(fixture.get("venue") or {}).get("name") or None,
            source=self.display_name,
        )
