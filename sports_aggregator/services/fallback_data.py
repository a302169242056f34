"""Built-in sample records served when every live provider is down."""

from datetime import datetime, timedelta
from typing import List

from ..models import Article, GameStatus, ScoreEvent, SportId


def sample_news(now: datetime) -> List[Article]:
    """Sample articles, timestamped relative to ``now``."""
    def hours_ago(hours: int) -> datetime:
        return now - timedelta(hours=hours)

    return [
        Article(
            id="sample_news_1",
            title="Lakers Make Blockbuster Trade Ahead of Deadline",
            description="The Los Angeles Lakers have completed a major trade...",
            url="https://example.com/lakers-trade",
            source="ESPN",
            published_at=hours_ago(1),
            sport_id=SportId.BASKETBALL,
            category="trade",
            tags=["trade", "breaking"],
        ),
        Article(
            id="sample_news_2",
            title="Chiefs Quarterback Sets New Passing Record",
            description="In a historic performance...",
            url="https://example.com/chiefs-record",
            source="NFL Network",
            published_at=hours_ago(2),
            sport_id=SportId.FOOTBALL,
            category="record",
            tags=["record", "playoff"],
        ),
        Article(
            id="sample_news_3",
            title="Manchester City Wins Thrilling Derby Match",
            description="In a highly anticipated derby...",
            url="https://example.com/city-derby",
            source="BBC Sport",
            published_at=hours_ago(1),
            sport_id=SportId.SOCCER,
            category="game",
            tags=["derby", "victory"],
        ),
    ]


def sample_scores(now: datetime) -> List[ScoreEvent]:
    """Sample games: one live, one finished, one scheduled."""
    return [
        ScoreEvent(
            id="sample_score_1",
            sport_id=SportId.BASKETBALL,
            league="NBA",
            home_team="Los Angeles Lakers",
            away_team="Golden State Warriors",
            home_score=88,
            away_score=84,
            status=GameStatus.LIVE,
            start_time=now - timedelta(hours=2),
            period="Q4 5:32",
            venue="Crypto.com Arena",
            source="Sample",
        ),
        ScoreEvent(
            id="sample_score_2",
            sport_id=SportId.FOOTBALL,
            league="NFL",
            home_team="Kansas City Chiefs",
            away_team="Buffalo Bills",
            home_score=27,
            away_score=24,
            status=GameStatus.FINISHED,
            start_time=now - timedelta(hours=6),
            period="Final",
            venue="Arrowhead Stadium",
            source="Sample",
        ),
        ScoreEvent(
            id="sample_score_3",
            sport_id=SportId.SOCCER,
            league="Premier League",
            home_team="Manchester City",
            away_team="Liverpool",
            status=GameStatus.SCHEDULED,
            start_time=now + timedelta(hours=3),
            venue="Etihad Stadium",
            source="Sample",
        ),
    ]
