import time
import threading
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value with the signature it was built from."""
    value: T
    signature: str
    stored_at: float


class SnapshotCache(Generic[T]):
    """
    In-memory cache of configuration snapshots.

    Each entry remembers the signature of the sources it was built from
    (file sizes and mtimes, or DB row timestamps) and when it was stored.
    An entry is served while it is within ``ttl_seconds``; callers that can
    cheaply recompute a signature may also reuse an expired entry whose
    signature still matches.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            ttl_seconds: Freshness window; 0 disables caching entirely
            clock: Monotonic time source, injectable for tests
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry[T]] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def now(self) -> float:
        return self._clock()

    def _is_fresh(self, entry: CacheEntry[T]) -> bool:
        return self.now() - entry.stored_at < self.ttl_seconds

    def get(self, key: str, signature: Optional[str] = None) -> Optional[CacheEntry[T]]:
        """
        Get a fresh entry.

        Args:
            key: Cache key
            signature: If given, the entry must also have been built from this signature

        Returns:
            The entry, or None on a miss
        """
        if not self.enabled:
            return None
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._is_fresh(entry):
                if signature is None or entry.signature == signature:
                    self._hits += 1
                    return entry
        self._misses += 1
        return None

    def peek(self, key: str) -> Optional[CacheEntry[T]]:
        """Get the entry regardless of age (used for signature comparison)."""
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, value: T, signature: str) -> CacheEntry[T]:
        """Store ``value`` under ``key``; a no-op when caching is disabled."""
        entry = CacheEntry(value=value, signature=signature, stored_at=self.now())
        if self.enabled:
            with self._lock:
                self._entries[key] = entry
        return entry

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one entry, or every entry when ``key`` is None."""
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)

    @property
    def stats(self) -> Dict[str, int]:
        return {"hits": self._hits, "misses": self._misses, "entries": len(self._entries)}
