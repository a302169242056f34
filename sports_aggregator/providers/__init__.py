"""Upstream provider adapters."""

from .base import BaseProvider, NewsProvider, ScoresProvider
from .registry import ProviderSet, build_news_providers, build_scores_providers

__all__ = [
    'BaseProvider',
    'NewsProvider',
    'ScoresProvider',
    'ProviderSet',
    'build_news_providers',
    'build_scores_providers',
]
