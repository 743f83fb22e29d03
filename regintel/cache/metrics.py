# -*- coding: utf-8 -*-
"""
Prometheus Metrics - TTL Cache

3 Prometheus metrics for cache monitoring with graceful fallback when
prometheus_client is not installed.

Metrics:
    1. ri_cache_requests_total (Counter, labels: result)
    2. ri_cache_evictions_total (Counter, labels: reason)
    3. ri_cache_entries (Gauge)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

try:
    from prometheus_client import Counter, Gauge
    PROMETHEUS_AVAILABLE = True
except ImportError:
    PROMETHEUS_AVAILABLE = False
    logger.info("prometheus_client not installed; cache metrics disabled")


if PROMETHEUS_AVAILABLE:
    cache_requests_total = Counter(
        "ri_cache_requests_total",
        "Total cache lookups",
        labelnames=["result"],
    )

    cache_evictions_total = Counter(
        "ri_cache_evictions_total",
        "Total cache entries removed before an explicit delete",
        labelnames=["reason"],
    )

    cache_entries = Gauge(
        "ri_cache_entries",
        "Number of entries currently held by the cache",
    )

else:
    cache_requests_total = None  # type: ignore[assignment]
    cache_evictions_total = None  # type: ignore[assignment]
    cache_entries = None  # type: ignore[assignment]


def inc_requests(result: str) -> None:
    """Record a cache lookup.

    Args:
        result: hit or miss.
    """
    if not PROMETHEUS_AVAILABLE:
        return
    cache_requests_total.labels(result=result).inc()


def inc_evictions(reason: str, count: int = 1) -> None:
    """Record entries removed by the cache itself.

    Args:
        reason: expired (lazy, on read), capacity, or sweep.
        count: Number of entries removed.
    """
    if not PROMETHEUS_AVAILABLE or count <= 0:
        return
    cache_evictions_total.labels(reason=reason).inc(count)


def set_entries(count: int) -> None:
    """Publish the current entry count."""
    if not PROMETHEUS_AVAILABLE:
        return
    cache_entries.set(count)


__all__ = [
    "PROMETHEUS_AVAILABLE",
    "inc_requests",
    "inc_evictions",
    "set_entries",
]
