"""Base classes for upstream data providers."""

import hashlib
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pytz
from dateutil import parser as date_parser

from ..core.exceptions import ConfigurationMissingError, MalformedResponseError, UpstreamHTTPError
from ..core.http_client import AsyncHTTPClient, JSONResponse
from ..models import Article, ProviderBatch, ScoreEvent, SportId


ALL_SPORTS: Tuple[SportId, ...] = (SportId.BASKETBALL, SportId.FOOTBALL, SportId.SOCCER)


def parse_datetime(value: Any, default: Optional[datetime] = None) -> Optional[datetime]:
    """Parse a provider timestamp into an aware UTC datetime."""
    if value in (None, ""):
        return default
    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        dt = date_parser.parse(str(value))
    except (ValueError, TypeError, OverflowError):
        return default
    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)


def parse_int(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def url_digest(url: str) -> str:
    """Short stable digest used to namespace ids for items without a native id."""
    return hashlib.md5(url.encode()).hexdigest()[:12]


class BaseProvider(ABC):
    """Common plumbing for every provider adapter.

    Subclasses set ``name``, ``display_name`` and ``sports`` (the sports the
    provider covers) and implement :meth:`fetch`.
    """

    name: str = ""
    display_name: str = ""
    sports: Tuple[SportId, ...] = ALL_SPORTS

    def __init__(self, http_client: AsyncHTTPClient, api_key: Optional[str] = None):
        self.http = http_client
        self.api_key = api_key

    @abstractmethod
    async def fetch(self, sport: Optional[SportId], limit: int) -> ProviderBatch:
        """
        Fetch items for one sport, or every supported sport when ``sport`` is None.

        Args:
            sport: Requested sport, None for all
            limit: Maximum number of items to return per request

        Returns:
            ProviderBatch of normalized items

        Raises:
            ProviderError: On timeout, throttling, upstream errors or missing credentials
        """
        pass

    def supports(self, sport: Optional[SportId]) -> bool:
        return sport is None or sport in self.sports

    def sports_for(self, sport: Optional[SportId]) -> Sequence[SportId]:
        """Sports to request: the one asked for, or all the provider covers."""
        if sport is None:
            return self.sports
        return (sport,) if sport in self.sports else ()

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationMissingError(self.name, f"{self.display_name} API key not configured")
        return self.api_key

    async def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        strict: bool = True,
    ) -> JSONResponse:
        """GET JSON from the provider.

        With ``strict`` a non-success status raises :class:`UpstreamHTTPError`;
        otherwise the response is returned for the caller to skip.
        """
        response = await self.http.fetch_json(self.name, url, params=params, headers=headers)
        if strict and not response.ok:
            raise UpstreamHTTPError(self.name, response.status)
        return response

    def expect_list(self, data: Any, key: str) -> List[Dict[str, Any]]:
        """Pull a list out of a JSON object; a missing key or null means no items."""
        if not isinstance(data, Mapping):
            raise MalformedResponseError(self.name, f"Expected JSON object, got {type(data).__name__}")
        items = data.get(key)
        if items is None:
            return []
        if not isinstance(items, list):
            raise MalformedResponseError(self.name, f"Expected '{key}' to be a list")
        return [item for item in items if isinstance(item, Mapping)]

    @staticmethod
    def rate_limit_from_headers(
        headers: Mapping[str, str],
        remaining_header: str,
        reset_header: Optional[str] = None,
    ) -> Tuple[Optional[int], Optional[datetime]]:
        """Read remaining quota and reset time (epoch seconds) from response headers."""
        lowered = {key.lower(): value for key, value in headers.items()}
        remaining = parse_int(lowered.get(remaining_header.lower()))
        reset_at = None
        if reset_header:
            reset_epoch = parse_int(lowered.get(reset_header.lower()))
            if reset_epoch is not None:
                reset_at = datetime.fromtimestamp(reset_epoch, tz=timezone.utc)
        return remaining, reset_at

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


class NewsProvider(BaseProvider):
    """Provider of :class:`Article` items."""

    @abstractmethod
    async def fetch(self, sport: Optional[SportId], limit: int) -> ProviderBatch[Article]:
        pass


class ScoresProvider(BaseProvider):
    """Provider of :class:`ScoreEvent` items."""

    @abstractmethod
    async def fetch(self, sport: Optional[SportId], limit: int) -> ProviderBatch[ScoreEvent]:
        pass
