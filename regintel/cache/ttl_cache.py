# -*- coding: utf-8 -*-
"""
TTL Cache

Generic in-process key/value cache with per-entry time-to-live, a size
cap, and a background expiry sweep. Used to memoize quality reports and
responses from external regulatory APIs.

Key states:
    absent       never set, deleted, or removed
    live         ``now - timestamp <= ttl``
    expired      past its TTL but not yet removed; reads treat it as
                 absent and remove it on the spot

Eviction:
    Inserting a new key into a full cache first removes the oldest
    ``eviction_fraction`` of ``max_size`` entries by write timestamp
    (not by access time). At least one entry is removed.

Sweep:
    A daemon thread removes every expired entry each
    ``sweep_interval_seconds``, so keys that are written and never read
    again do not accumulate. :meth:`TTLCache.destroy` stops the thread
    and clears the cache.

There is no partitioning by tenant; callers encode tenant or record
type into the key.

Example:
    >>> from regintel.cache.ttl_cache import TTLCache
    >>> with TTLCache(max_size=100) as cache:
    ...     report = cache.cached("quality-report:regulatory_update",
    ...                           lambda: {"score": 82}, ttl_ms=60_000)
    ...     cache.get_stats()["size"]
    1

Author: RegIntel Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from regintel.cache import metrics
from regintel.cache.config import CacheConfig, get_config

logger = logging.getLogger(__name__)

__all__ = [
    "CacheEntry",
    "TTLCache",
]

_MISSING = object()


def _epoch_ms() -> float:
    return time.time() * 1000.0


@dataclass
class CacheEntry:
    """A stored value with its write timestamp and TTL (milliseconds)."""

    data: Any
    timestamp: float
    ttl: float

    def is_expired(self, now_ms: float) -> bool:
        """Whether the entry is past its TTL at ``now_ms``."""
        return now_ms - self.timestamp > self.ttl


class TTLCache:
    """Thread-safe TTL cache with capped size and a background sweep.

    Attributes:
        max_size: Maximum number of entries.
        default_ttl_ms: TTL used when ``set`` receives none.
        sweep_interval_seconds: Seconds between background sweeps.

    Example:
        >>> cache = TTLCache(auto_sweep=False)
        >>> cache.set("fda:recalls", [1, 2, 3], ttl_ms=100)
        >>> cache.get("fda:recalls")
        [1, 2, 3]
        >>> cache.destroy()
    """

    def __init__(
        self,
        max_size: Optional[int] = None,
        default_ttl_ms: Optional[float] = None,
        sweep_interval_seconds: Optional[float] = None,
        eviction_fraction: Optional[float] = None,
        config: Optional[CacheConfig] = None,
        clock: Optional[Callable[[], float]] = None,
        auto_sweep: bool = True,
    ):
        """Initialize the cache.

        Args:
            max_size: Maximum number of entries (default from config).
            default_ttl_ms: Default TTL in milliseconds.
            sweep_interval_seconds: Interval of the background sweep.
            eviction_fraction: Share of ``max_size`` evicted when full.
            config: Source of defaults for unset arguments.
            clock: Callable returning the current time in epoch
                milliseconds. Injected by tests.
            auto_sweep: Start the background sweep thread immediately.
        """
        config = config or get_config()
        self.max_size = max_size if max_size is not None else config.max_size
        self.default_ttl_ms = (
            default_ttl_ms if default_ttl_ms is not None else config.default_ttl_ms
        )
        self.sweep_interval_seconds = (
            sweep_interval_seconds if sweep_interval_seconds is not None
            else config.sweep_interval_seconds
        )
        self._eviction_fraction = (
            eviction_fraction if eviction_fraction is not None
            else config.eviction_fraction
        )
        self._metrics_enabled = config.enable_metrics
        self._clock = clock or _epoch_ms

        self._cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()

        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

        self._stop_event = threading.Event()
        self._sweeper: Optional[threading.Thread] = None

        if auto_sweep:
            self.start()

        logger.info(
            "TTLCache initialized: max_size=%d, default_ttl=%dms, sweep=%.0fs",
            self.max_size, self.default_ttl_ms, self.sweep_interval_seconds,
        )

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[Any]:
        """Return the live value for ``key``, or None.

        Expired entries are removed on read. The stored object itself is
        returned, not a copy, so callers must treat it as read-only.
        """
        value = self._lookup(key)
        return None if value is _MISSING else value

    def set(self, key: str, value: Any, ttl_ms: Optional[float] = None) -> None:
        """Store ``value`` under ``key``, replacing any previous entry.

        Args:
            key: Cache key.
            value: Value to store.
            ttl_ms: Time-to-live in milliseconds (default: ``default_ttl_ms``).
        """
        ttl = ttl_ms if ttl_ms is not None else self.default_ttl_ms
        with self._lock:
            if key not in self._cache and len(self._cache) >= self.max_size:
                self._evict_oldest()
            self._cache.pop(key, None)
            self._cache[key] = CacheEntry(value, self._clock(), ttl)
            size = len(self._cache)
        self._publish_size(size)
        logger.debug("Cache set: %s (ttl=%sms)", key, ttl)

    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if an entry was removed."""
        with self._lock:
            removed = self._cache.pop(key, None) is not None
            size = len(self._cache)
        self._publish_size(size)
        return removed

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
        self._publish_size(0)
        logger.debug("Cache cleared (%d entries)", count)

    def cached(
        self,
        key: str,
        producer: Callable[[], Any],
        ttl_ms: Optional[float] = None,
    ) -> Any:
        """Return the cached value for ``key`` or compute and store it.

        Producer exceptions propagate and nothing is cached.

        Args:
            key: Cache key.
            producer: Zero-argument callable computing the value.
            ttl_ms: TTL for a freshly computed value.
        """
        value = self._lookup(key)
        if value is not _MISSING:
            return value

        try:
            value = producer()
        except Exception as exc:
            logger.error("Cache producer failed for key %s: %s", key, exc)
            raise

        self.set(key, value, ttl_ms)
        return value

    async def cached_async(
        self,
        key: str,
        producer: Callable[[], Awaitable[Any]],
        ttl_ms: Optional[float] = None,
    ) -> Any:
        """Coroutine variant of :meth:`cached` for async producers."""
        value = self._lookup(key)
        if value is not _MISSING:
            return value

        try:
            value = await producer()
        except Exception as exc:
            logger.error("Cache producer failed for key %s: %s", key, exc)
            raise

        self.set(key, value, ttl_ms)
        return value

    # ------------------------------------------------------------------
    # Expiry
    # ------------------------------------------------------------------

    def sweep_expired(self) -> int:
        """Remove every expired entry now. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._cache.items() if e.is_expired(now)]
            for key in expired:
                del self._cache[key]
            self._expirations += len(expired)
            size = len(self._cache)

        if expired:
            if self._metrics_enabled:
                metrics.inc_evictions("sweep", len(expired))
            logger.debug("Cache sweep removed %d expired entries", len(expired))
        self._publish_size(size)
        return len(expired)

    def start(self) -> None:
        """Start the background sweep thread if it is not running."""
        with self._lock:
            if self._sweeper is not None and self._sweeper.is_alive():
                return
            self._stop_event.clear()
            self._sweeper = threading.Thread(
                target=self._sweep_loop,
                name="ttl-cache-sweeper",
                daemon=True,
            )
            self._sweeper.start()

    def destroy(self) -> None:
        """Stop the sweep thread and clear the cache."""
        self._stop_event.set()
        sweeper = self._sweeper
        if sweeper is not None and sweeper is not threading.current_thread():
            sweeper.join(timeout=5.0)
        self._sweeper = None
        self.clear()
        logger.info("TTLCache destroyed")

    @property
    def is_sweeping(self) -> bool:
        sweeper = self._sweeper
        return sweeper is not None and sweeper.is_alive()

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    def get_stats(self) -> Dict[str, Any]:
        """Return size, capacity, keys, and hit/miss counters."""
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._cache),
                "max_size": self.max_size,
                "entries": list(self._cache.keys()),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_pct": (self._hits / total * 100) if total else 0.0,
                "evictions": self._evictions,
                "expirations": self._expirations,
            }

    def reset_stats(self) -> None:
        """Reset hit/miss/eviction counters."""
        with self._lock:
            self._hits = 0
            self._misses = 0
            self._evictions = 0
            self._expirations = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, key: str) -> bool:
        """Whether ``key`` is live (does not remove expired entries)."""
        with self._lock:
            entry = self._cache.get(key)
            return entry is not None and not entry.is_expired(self._clock())

    def __enter__(self) -> "TTLCache":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.destroy()

    # ------------------------------------------------------------------
    # Private methods
    # ------------------------------------------------------------------

    def _lookup(self, key: str) -> Any:
        """Return the live value or ``_MISSING``, removing expired entries."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                result = "miss"
                value = _MISSING
            elif entry.is_expired(self._clock()):
                del self._cache[key]
                self._expirations += 1
                self._misses += 1
                result = "expired"
                value = _MISSING
            else:
                self._hits += 1
                result = "hit"
                value = entry.data

        if self._metrics_enabled:
            metrics.inc_requests("hit" if result == "hit" else "miss")
            if result == "expired":
                metrics.inc_evictions("expired")
        return value

    def _evict_oldest(self) -> None:
        """Drop the oldest entries by write timestamp. Caller holds the lock."""
        count = max(1, int(self.max_size * self._eviction_fraction))
        oldest = sorted(self._cache.items(), key=lambda item: item[1].timestamp)
        for key, _ in oldest[:count]:
            del self._cache[key]
        self._evictions += min(count, len(oldest))
        if self._metrics_enabled:
            metrics.inc_evictions("capacity", min(count, len(oldest)))
        logger.debug("Cache full, evicted %d oldest entries", min(count, len(oldest)))

    def _sweep_loop(self) -> None:
        while not self._stop_event.wait(self.sweep_interval_seconds):
            try:
                self.sweep_expired()
            except Exception:
                logger.exception("Cache sweep failed")

    def _publish_size(self, size: int) -> None:
        if self._metrics_enabled:
            metrics.set_entries(size)
