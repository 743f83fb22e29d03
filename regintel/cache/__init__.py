# -*- coding: utf-8 -*-
"""
regintel/cache

In-process TTL cache used to memoize expensive results such as quality
reports.

Provides:
- TTLCache: keyed store with per-entry TTL, lazy expiry on read,
  periodic background sweep, and oldest-first capacity eviction
- CacheConfig: thread-safe configuration with RI_CACHE_ env prefix
- 3 Prometheus metrics with graceful fallback

Example:
    >>> from regintel.cache import TTLCache
    >>> cache = TTLCache(max_size=100, default_ttl_ms=60_000)
    >>> cache.set("k", {"v": 1})
    >>> cache.get("k")
    {'v': 1}
    >>> cache.destroy()
"""

from regintel.cache.config import (
    CacheConfig,
    get_config,
    set_config,
    reset_config,
)
from regintel.cache.metrics import PROMETHEUS_AVAILABLE
from regintel.cache.ttl_cache import CacheEntry, TTLCache

__all__ = [
    "CacheConfig",
    "get_config",
    "set_config",
    "reset_config",
    "PROMETHEUS_AVAILABLE",
    "CacheEntry",
    "TTLCache",
]
