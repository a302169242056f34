"""Sports Aggregator - multi-provider sports news and scores service."""

__version__ = "1.0.0"
