"""In-memory result cache with TTL support."""

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Generic, Optional, Sequence, Tuple, TypeVar

from .health_registry import utc_now

T = TypeVar('T')


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A computed result set and the moment it was computed. Never mutated."""
    value: Tuple[T, ...]
    computed_at: datetime


class ResultCache(Generic[T]):
    """Keyed cache of merged result sets.

    Entries are replaced wholesale on every write. Expired entries are
    dropped lazily on read.
    """

    def __init__(self, ttl: timedelta, clock: Callable[[], datetime] = utc_now):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[CacheEntry[T]]:
        """Get a fresh entry, or None when missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.computed_at >= self.ttl:
                del self._entries[key]
                return None
            return entry

    def set(self, key: str, value: Sequence[T]) -> CacheEntry[T]:
        """Store a result set, replacing any previous entry for the key."""
        entry = CacheEntry(value=tuple(value), computed_at=self._clock())
        with self._lock:
            self._entries[key] = entry
        return entry

    def clear(self) -> int:
        """Evict every entry. Returns the number evicted."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'size': len(self._entries),
                'keys': list(self._entries.keys()),
                'ttl_seconds': self.ttl.total_seconds(),
            }
