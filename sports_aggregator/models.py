"""Common data model shared by providers, aggregators and the read API."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Generic, List, Optional, Tuple, TypeVar


class SportId(str, Enum):
    """Supported sports."""
    BASKETBALL = "basketball"
    FOOTBALL = "football"
    SOCCER = "soccer"


class GameStatus(str, Enum):
    """Score event lifecycle."""
    SCHEDULED = "scheduled"
    LIVE = "live"
    FINISHED = "finished"


@dataclass(frozen=True)
class Article:
    """Normalized news article. ``url`` is the deduplication identity.

    Frozen: cached result sets hand the same instances to every reader.
    """
    id: str
    title: str
    description: str
    url: str
    source: str
    published_at: datetime
    sport_id: SportId
    content: Optional[str] = None
    image_url: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    tags: Tuple[str, ...] = ()

    def __post_init__(self):
        # Tags are a set; keep first-seen order for stable output
        object.__setattr__(self, "tags", tuple(dict.fromkeys(self.tags)))

    @property
    def identity(self) -> str:
        return self.url

    @property
    def recency(self) -> datetime:
        return self.published_at

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'content': self.content,
            'url': self.url,
            'imageUrl': self.image_url,
            'source': self.source,
            'author': self.author,
            'publishedAt': self.published_at.isoformat(),
            'sportId': self.sport_id.value,
            'category': self.category,
            'tags': list(self.tags),
        }


@dataclass(frozen=True)
class ScoreEvent:
    """Normalized game/match record. ``id`` is the deduplication identity."""
    id: str
    sport_id: SportId
    league: str
    home_team: str
    away_team: str
    status: GameStatus
    start_time: datetime
    source: str
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    period: Optional[str] = None
    venue: Optional[str] = None

    @property
    def identity(self) -> str:
        return self.id

    @property
    def recency(self) -> datetime:
        return self.start_time

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'sportId': self.sport_id.value,
            'league': self.league,
            'homeTeam': self.home_team,
            'awayTeam': self.away_team,
            'homeScore': self.home_score,
            'awayScore': self.away_score,
            'status': self.status.value,
            'startTime': self.start_time.isoformat(),
            'period': self.period,
            'venue': self.venue,
            'source': self.source,
        }


T = TypeVar('T')


class ProviderBatch(list, Generic[T]):
    """Items returned by one provider call, plus any rate-limit data it reported."""

    def __init__(
        self,
        items=(),
        rate_limit_remaining: Optional[int] = None,
        rate_limit_reset_at: Optional[datetime] = None,
    ):
        super().__init__(items)
        self.rate_limit_remaining = rate_limit_remaining
        self.rate_limit_reset_at = rate_limit_reset_at


@dataclass
class AggregationResult(Generic[T]):
    """What an aggregator hands back for one request."""
    items: List[T]
    last_updated: datetime
    from_cache: bool = False
    is_fallback: bool = False
