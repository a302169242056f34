"""Aggregation services."""

from .news_aggregator import NewsAggregator
from .scores_aggregator import ScoresAggregator, Scoreboard

__all__ = ['NewsAggregator', 'ScoresAggregator', 'Scoreboard']
