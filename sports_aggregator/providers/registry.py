"""Provider set: maps provider names to adapter instances."""

from typing import Dict, Generic, Iterator, List, Optional, TypeVar

from ..config import Settings
from ..core.http_client import AsyncHTTPClient
from .apifootball import APIFootballNewsProvider, APIFootballScoresProvider
from .base import BaseProvider, NewsProvider, ScoresProvider
from .espn import ESPNNewsProvider, ESPNScoresProvider
from .gnews import GNewsProvider
from .newsapi import NewsAPIProvider
from .reddit import RedditProvider
from .sportsdb import SportsDBNewsProvider, SportsDBScoresProvider

P = TypeVar('P', bound=BaseProvider)


class ProviderSet(Generic[P]):
    """Adapters keyed by name. Adding a provider is a :meth:`register` call."""

    def __init__(self, providers: Optional[List[P]] = None):
        self._providers: Dict[str, P] = {}
        for provider in providers or []:
            self.register(provider)

    def register(self, provider: P) -> None:
        """Register an adapter under its name."""
        if not provider.name:
            raise ValueError(f"Provider {provider!r} has no name")
        self._providers[provider.name] = provider

    def get(self, name: str) -> Optional[P]:
        return self._providers.get(name)

    def names(self) -> List[str]:
        return list(self._providers)

    def __contains__(self, name: str) -> bool:
        return name in self._providers

    def __iter__(self) -> Iterator[P]:
        return iter(self._providers.values())

    def __len__(self) -> int:
        return len(self._providers)


def build_news_providers(settings: Settings, http_client: AsyncHTTPClient) -> ProviderSet[NewsProvider]:
    """Create the built-in news adapters from configuration."""
    return ProviderSet([
        ESPNNewsProvider(http_client),
        NewsAPIProvider(http_client, api_key=settings.news_api_key),
        GNewsProvider(http_client, api_key=settings.gnews_api_key),
        RedditProvider(http_client, user_agent=settings.reddit_user_agent),
        APIFootballNewsProvider(http_client, api_key=settings.api_football_key),
        SportsDBNewsProvider(http_client, api_key=settings.thesportsdb_key),
    ])


def build_scores_providers(settings: Settings, http_client: AsyncHTTPClient) -> ProviderSet[ScoresProvider]:
    """Create the built-in score adapters from configuration."""
    return ProviderSet([
        ESPNScoresProvider(http_client),
        SportsDBScoresProvider(http_client, api_key=settings.thesportsdb_key),
        APIFootballScoresProvider(http_client, api_key=settings.api_football_key),
    ])
