"""Custom exceptions for Sports Aggregator."""

from typing import Optional


class SportsAggregatorError(Exception):
    """Base exception for Sports Aggregator."""
    pass


class ConfigurationError(SportsAggregatorError):
    """Configuration related errors."""
    pass


class ProviderError(SportsAggregatorError):
    """Upstream provider fetching errors."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class NetworkTimeoutError(ProviderError):
    """Provider did not answer within the request timeout."""
    pass


class RateLimitedError(ProviderError):
    """Provider answered with HTTP 429."""

    def __init__(self, provider: str, retry_after: Optional[float] = None):
        super().__init__(provider, "Rate limited")
        self.retry_after = retry_after


class UpstreamHTTPError(ProviderError):
    """Provider answered with a non-success HTTP status."""

    def __init__(self, provider: str, status_code: int, response_text: str = None):
        super().__init__(provider, f"HTTP error {status_code}")
        self.status_code = status_code
        self.response_text = response_text


class MalformedResponseError(ProviderError):
    """Provider response could not be decoded or has an unexpected shape."""
    pass


class ConfigurationMissingError(ProviderError):
    """Provider credential is not configured."""
    pass
