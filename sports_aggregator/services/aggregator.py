"""Shared aggregation engine: availability filter, fan-out, merge, cache, fallback."""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Callable, Generic, Iterable, List, Optional, TypeVar

from ..core.cache import ResultCache
from ..core.exceptions import RateLimitedError
from ..core.health_registry import ProviderHealthRegistry, utc_now
from ..models import AggregationResult, ProviderBatch, SportId
from ..providers.base import BaseProvider
from ..providers.registry import ProviderSet
from ..utils.logging_config import log_operation

logger = logging.getLogger(__name__)

T = TypeVar('T')


class BaseAggregator(ABC, Generic[T]):
    """
    Orchestrates one kind of provider (news or scores) behind a single call.

    Per request:
    1. Serve a fresh cache entry if the caller allows it.
    2. Ask the health registry which providers of the priority list are usable.
    3. Call all of them concurrently and wait for every one to settle.
    4. Record each outcome in the registry, merge what succeeded,
       deduplicate, sort newest first, truncate and cache.
    5. If nothing usable came back, answer with built-in sample data (never cached).
    """

    kind: str = ""

    def __init__(
        self,
        providers: ProviderSet,
        registry: ProviderHealthRegistry,
        priority: Iterable[str],
        cache_ttl: timedelta,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize aggregator.

        Args:
            providers: Adapters keyed by name
            registry: Shared provider health registry
            priority: Provider names, highest priority first
            cache_ttl: Lifetime of cached result sets
            clock: Returns the current aware datetime
        """
        self.providers = providers
        self.registry = registry
        self.priority = self._resolve_priority(priority)
        self.cache: ResultCache[T] = ResultCache(cache_ttl, clock=clock)
        self._clock = clock
        self.registry.register_many(self.priority)

    def _resolve_priority(self, priority: Iterable[str]) -> List[str]:
        resolved = []
        for name in priority:
            if name not in self.providers:
                logger.warning(f"Unknown {self.kind} provider '{name}' in priority list, ignoring")
            elif name not in resolved:
                resolved.append(name)
        return resolved

    @staticmethod
    def cache_key(kind: str, sport: Optional[SportId], limit: int) -> str:
        return f"{kind}_{sport.value if sport else 'all'}_{limit}"

    async def get_latest(
        self,
        sport: Optional[SportId] = None,
        limit: int = 50,
        use_cache: bool = True,
    ) -> AggregationResult[T]:
        """Get the merged, newest-first result set for a sport (or all sports)."""
        key = self.cache_key(self.kind, sport, limit)

        if use_cache:
            entry = self.cache.get(key)
            if entry is not None:
                return AggregationResult(list(entry.value), entry.computed_at, from_cache=True)

        try:
            return await self._aggregate(key, sport, limit)
        except Exception as e:
            logger.exception(f"Unexpected error aggregating {self.kind}: {e}")
            return self._fallback(sport, limit, reason="internal error")

    async def _aggregate(self, key: str, sport: Optional[SportId], limit: int) -> AggregationResult[T]:
        pool = await self.fetch_pool(sport, limit)
        items = self.merge(pool, sport, limit)
        if not items:
            return self._fallback(sport, limit, reason="no provider returned usable items")

        entry = self.cache.set(key, items)
        return AggregationResult(list(entry.value), entry.computed_at)

    async def fetch_pool(self, sport: Optional[SportId], limit: int) -> List[T]:
        """
        Call every available provider concurrently and record each outcome.

        Returns the unmerged items in priority order, empty when no provider
        was available or none succeeded.
        """
        available = self.registry.available_in_priority_order(self.priority)
        if not available:
            log_operation(
                logger, f"{self.kind}_fetch", "skipped",
                sport=sport.value if sport else "all", reason="no providers available"
            )
            return []

        log_operation(
            logger, f"{self.kind}_fetch", "started",
            sport=sport.value if sport else "all", providers=",".join(available)
        )

        outcomes = await asyncio.gather(
            *(self._fetch_from(self.providers.get(name), sport, limit) for name in available),
            return_exceptions=True,
        )

        pool: List[T] = []
        failed = 0
        for name, outcome in zip(available, outcomes):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, Exception):
                failed += 1
                self._record_failure(name, outcome)
                continue
            self.registry.record_success(name, outcome.rate_limit_remaining, outcome.rate_limit_reset_at)
            pool.extend(outcome)

        log_operation(
            logger, f"{self.kind}_fetch", "completed",
            sport=sport.value if sport else "all", items=len(pool),
            succeeded=len(available) - failed, failed=failed
        )
        return pool

    async def _fetch_from(self, provider: BaseProvider, sport: Optional[SportId], limit: int) -> ProviderBatch:
        batch = await provider.fetch(sport, limit)
        if not isinstance(batch, ProviderBatch):
            batch = ProviderBatch(batch)
        return batch

    def _record_failure(self, name: str, error: Exception) -> None:
        message = str(error) or error.__class__.__name__
        if isinstance(error, RateLimitedError):
            reset_at = None
            if error.retry_after:
                reset_at = self._clock() + timedelta(seconds=error.retry_after)
            self.registry.record_rate_limited(name, message, reset_at=reset_at)
        else:
            self.registry.record_failure(name, message)
        log_operation(logger, f"{self.kind}_provider", "failed", provider=name, error=message)

    def merge(
        self,
        pool: Iterable[T],
        sport: Optional[SportId],
        limit: int,
        predicate: Optional[Callable[[T], bool]] = None,
    ) -> List[T]:
        """
        Filter to the requested sport (and ``predicate``), drop duplicates
        (first wins), sort newest first, truncate.
        """
        seen = set()
        unique: List[T] = []
        for item in pool:
            if sport is not None and item.sport_id != sport:
                continue
            if predicate is not None and not predicate(item):
                continue
            if item.identity in seen:
                continue
            seen.add(item.identity)
            unique.append(item)

        # sorted() is stable, so ties keep provider priority order
        unique = sorted(unique, key=lambda item: item.recency, reverse=True)
        return unique[:limit]

    def _fallback(self, sport: Optional[SportId], limit: int, reason: str) -> AggregationResult[T]:
        log_operation(
            logger, f"{self.kind}_fetch", "fallback",
            sport=sport.value if sport else "all", reason=reason
        )
        items = [item for item in self.sample_data() if sport is None or item.sport_id == sport]
        return AggregationResult(items[:limit], self._clock(), is_fallback=True)

    @abstractmethod
    def sample_data(self) -> List[T]:
        """Built-in records served when no provider produced anything."""
        pass

    def clear_cache(self) -> int:
        count = self.cache.clear()
        logger.info(f"Cleared {count} {self.kind} cache entries")
        return count

    def cache_stats(self) -> dict:
        return self.cache.get_stats()
