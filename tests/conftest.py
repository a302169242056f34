"""Shared fixtures: a controllable clock, fake HTTP client and fake providers."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from sports_aggregator.core.http_client import JSONResponse
from sports_aggregator.models import Article, GameStatus, ProviderBatch, ScoreEvent, SportId
from sports_aggregator.providers.base import NewsProvider, ScoresProvider


BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = BASE_TIME):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeHTTPClient:
    """Stands in for AsyncHTTPClient; answers from a url -> response table."""

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes = routes or {}
        self.calls: List[Dict[str, Any]] = []

    async def fetch_json(self, provider, url, params=None, headers=None):
        self.calls.append({"provider": provider, "url": url, "params": params, "headers": headers})
        response = self.routes.get(url, JSONResponse(status=404))
        if isinstance(response, Exception):
            raise response
        return response


def ok(data, headers=None) -> JSONResponse:
    return JSONResponse(status=200, headers=headers or {}, data=data)


def make_article(
    url: str,
    hours_ago: float = 0,
    sport: SportId = SportId.BASKETBALL,
    source: str = "Test",
    article_id: Optional[str] = None,
    title: str = "Headline",
    category: Optional[str] = "general",
    tags: Optional[List[str]] = None,
) -> Article:
    return Article(
        id=article_id or f"test_{url}",
        title=title,
        description="",
        url=url,
        source=source,
        published_at=BASE_TIME - timedelta(hours=hours_ago),
        sport_id=sport,
        category=category,
        tags=tags or [],
    )


def make_score(
    score_id: str,
    hours_ago: float = 0,
    sport: SportId = SportId.BASKETBALL,
    source: str = "Test",
) -> ScoreEvent:
    return ScoreEvent(
        id=score_id,
        sport_id=sport,
        league="League",
        home_team="Home",
        away_team="Away",
        status=GameStatus.FINISHED,
        start_time=BASE_TIME - timedelta(hours=hours_ago),
        source=source,
        home_score=1,
        away_score=0,
    )


class FakeNewsProvider(NewsProvider):
    """Returns canned items or raises a canned error; counts calls."""

    def __init__(self, name: str, items=None, error: Optional[Exception] = None, **rate_limit):
        super().__init__(http_client=None)
        self.name = name
        self.display_name = name
        self.items = items or []
        self.error = error
        self.rate_limit = rate_limit
        self.calls = 0

    async def fetch(self, sport, limit):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return ProviderBatch(self.items, **self.rate_limit)


class FakeScoresProvider(ScoresProvider):
    def __init__(self, name: str, items=None, error: Optional[Exception] = None):
        super().__init__(http_client=None)
        self.name = name
        self.display_name = name
        self.items = items or []
        self.error = error
        self.calls = 0

    async def fetch(self, sport, limit):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return ProviderBatch(self.items)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def http():
    return FakeHTTPClient()
