"""Async HTTP client with connection pooling for upstream providers."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import aiohttp
from aiohttp import ClientTimeout, ClientError

from .. import __version__
from .exceptions import (
    MalformedResponseError,
    NetworkTimeoutError,
    ProviderError,
    RateLimitedError,
)

logger = logging.getLogger(__name__)


@dataclass
class JSONResponse:
    """Decoded upstream response. ``data`` is only populated for 2xx answers."""
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    data: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def _parse_retry_after(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class AsyncHTTPClient:
    """Async HTTP client sharing one session across all provider adapters.

    Every request is bounded by ``timeout`` seconds; a timeout is reported as
    a failure. HTTP 429 always raises :class:`RateLimitedError`. Other
    non-success statuses are returned to the caller, which decides whether
    they are fatal.
    """

    def __init__(self, timeout: float = 10.0, user_agent: Optional[str] = None):
        self.session: Optional[aiohttp.ClientSession] = None
        self.timeout = ClientTimeout(total=timeout)
        self.user_agent = user_agent or f"SportsAggregator/{__version__}"

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self):
        """Start the HTTP client session."""
        if self.session is None or self.session.closed:
            connector = aiohttp.TCPConnector(
                limit=20,  # Total connection pool size
                limit_per_host=5,  # Connections per host
                ttl_dns_cache=300,  # DNS cache TTL
                use_dns_cache=True,
            )
            self.session = aiohttp.ClientSession(
                connector=connector,
                timeout=self.timeout,
                headers={'User-Agent': self.user_agent},
            )

    async def close(self):
        """Close the HTTP client session."""
        if self.session and not self.session.closed:
            await self.session.close()

    async def fetch_json(
        self,
        provider: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> JSONResponse:
        """GET ``url`` and decode the JSON body on behalf of ``provider``."""
        if not self.session or self.session.closed:
            await self.start()

        try:
            async with self.session.get(url, params=params, headers=headers) as response:
                if response.status == 429:
                    raise RateLimitedError(
                        provider, retry_after=_parse_retry_after(response.headers.get('Retry-After'))
                    )

                if not 200 <= response.status < 300:
                    logger.debug(f"{provider} answered {response.status} for {url}")
                    return JSONResponse(status=response.status, headers=dict(response.headers))

                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise MalformedResponseError(provider, f"Invalid JSON: {e}")

                return JSONResponse(status=response.status, headers=dict(response.headers), data=data)

        except asyncio.TimeoutError:
            raise NetworkTimeoutError(provider, f"Timed out after {self.timeout.total}s")
        except ClientError as e:
            raise ProviderError(provider, f"Network error: {e}")
