"""Provider health registry with failure threshold and rate-limit tracking."""

import logging
import threading
from dataclasses import dataclass, asdict, replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ProviderStatus:
    """Health and rate-limit state of one upstream provider."""
    name: str
    is_healthy: bool = True
    consecutive_failures: int = 0
    last_error: Optional[str] = None
    last_success_at: Optional[datetime] = None
    rate_limit_remaining: Optional[int] = None
    rate_limit_reset_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        return {
            'name': data['name'],
            'isHealthy': data['is_healthy'],
            'consecutiveFailures': data['consecutive_failures'],
            'lastError': data['last_error'],
            'lastSuccessAt': _iso(self.last_success_at),
            'rateLimitRemaining': data['rate_limit_remaining'],
            'rateLimitResetAt': _iso(self.rate_limit_reset_at),
        }


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class ProviderHealthRegistry:
    """
    Tracks per-provider health so aggregators can skip broken or throttled sources.

    A provider is marked unhealthy after ``failure_threshold`` consecutive
    failures. An unhealthy provider whose last success is older than
    ``recovery_window`` is optimistically put back into rotation on the next
    availability check; if it is still down, the next real call fails fast
    and the counter starts again.

    All state lives in memory. Every read-modify-write happens under a lock so
    concurrent callers never lose an update.
    """

    def __init__(
        self,
        failure_threshold: int = 3,
        recovery_window: timedelta = timedelta(minutes=5),
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize registry.

        Args:
            failure_threshold: Consecutive failures before a provider is unhealthy
            recovery_window: Time since last success after which an unhealthy
                provider is retried
            clock: Returns the current aware datetime
        """
        self.failure_threshold = failure_threshold
        self.recovery_window = recovery_window
        self._clock = clock
        self._statuses: Dict[str, ProviderStatus] = {}
        self._lock = threading.Lock()

    def register(self, name: str) -> None:
        """Register a provider; registering a known name is a no-op."""
        with self._lock:
            if name not in self._statuses:
                self._statuses[name] = ProviderStatus(name=name)

    def register_many(self, names: Iterable[str]) -> None:
        for name in names:
            self.register(name)

    def record_success(
        self,
        name: str,
        rate_limit_remaining: Optional[int] = None,
        rate_limit_reset_at: Optional[datetime] = None,
    ) -> None:
        """Record a successful call, keeping existing rate-limit data unless new values are given."""
        with self._lock:
            status = self._statuses.get(name)
            if status is None:
                return
            if not status.is_healthy:
                logger.info(f"Provider '{name}' recovered")
            status.is_healthy = True
            status.consecutive_failures = 0
            status.last_success_at = self._clock()
            if rate_limit_remaining is not None:
                status.rate_limit_remaining = rate_limit_remaining
            if rate_limit_reset_at is not None:
                status.rate_limit_reset_at = rate_limit_reset_at

    def record_failure(self, name: str, error_message: str) -> None:
        """Record a failed call; the provider turns unhealthy at the threshold."""
        with self._lock:
            self._record_failure_locked(name, error_message)

    def record_rate_limited(
        self,
        name: str,
        error_message: str,
        reset_at: Optional[datetime] = None,
    ) -> None:
        """Record a throttled call: a failure that also exhausts the remaining quota."""
        with self._lock:
            status = self._record_failure_locked(name, error_message)
            if status is None:
                return
            status.rate_limit_remaining = 0
            if reset_at is not None:
                status.rate_limit_reset_at = reset_at

    def _record_failure_locked(self, name: str, error_message: str) -> Optional[ProviderStatus]:
        status = self._statuses.get(name)
        if status is None:
            return None
        status.consecutive_failures += 1
        status.last_error = error_message
        if status.is_healthy and status.consecutive_failures >= self.failure_threshold:
            status.is_healthy = False
            logger.warning(
                f"Provider '{name}' marked as unhealthy after "
                f"{status.consecutive_failures} failures: {error_message}"
            )
        return status

    def is_available(self, name: str) -> bool:
        """Check whether a provider is healthy and not rate limited."""
        with self._lock:
            status = self._statuses.get(name)
            if status is None:
                return False

            now = self._clock()

            if not status.is_healthy:
                if status.last_success_at and now - status.last_success_at > self.recovery_window:
                    status.is_healthy = True
                    status.consecutive_failures = 0
                    logger.info(f"Provider '{name}' past recovery window, retrying")
                    return True
                return False

            if status.rate_limit_remaining is not None and status.rate_limit_remaining <= 0:
                if status.rate_limit_reset_at and now < status.rate_limit_reset_at:
                    return False
                # Reset time has passed (or was never announced)
                status.rate_limit_remaining = None

            return True

    def available_in_priority_order(self, priority: Iterable[str]) -> List[str]:
        """Filter a priority-ordered list of names down to available providers."""
        return [name for name in priority if self.is_available(name)]

    def get_status(self, name: str) -> Optional[ProviderStatus]:
        """Get a snapshot of one provider status."""
        with self._lock:
            status = self._statuses.get(name)
            return replace(status) if status else None

    def get_all_statuses(self) -> List[ProviderStatus]:
        """Get snapshots of all provider statuses in registration order."""
        with self._lock:
            return [replace(status) for status in self._statuses.values()]

    def reset(self, name: str) -> bool:
        """Manually recover a provider. Returns False for unknown names."""
        with self._lock:
            status = self._statuses.get(name)
            if status is None:
                return False
            status.is_healthy = True
            status.consecutive_failures = 0
            status.last_error = None
            logger.info(f"Provider '{name}' manually reset")
            return True
