# -*- coding: utf-8 -*-
"""
TTL Cache Configuration

Configuration for the in-process TTL cache covering:
- Capacity and the share of entries evicted when the cap is reached
- Default entry time-to-live
- Background expiry sweep interval
- Metrics toggle

All settings can be overridden via environment variables with the
``RI_CACHE_`` prefix (e.g. ``RI_CACHE_MAX_SIZE``).

Example:
    >>> from regintel.cache.config import get_config
    >>> cfg = get_config()
    >>> print(cfg.max_size, cfg.default_ttl_ms)

Author: RegIntel Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

_ENV_PREFIX = "RI_CACHE_"


@dataclass
class CacheConfig:
    """Configuration for :class:`regintel.cache.ttl_cache.TTLCache`.

    Attributes:
        max_size: Maximum number of live entries.
        default_ttl_ms: TTL applied when ``set`` is called without one.
        sweep_interval_seconds: Seconds between background expiry sweeps.
        eviction_fraction: Share of ``max_size`` evicted (oldest first)
            when inserting into a full cache. At least one entry is
            always evicted.
        enable_metrics: Whether Prometheus metrics collection is enabled.
    """

    max_size: int = 1000
    default_ttl_ms: int = 5 * 60 * 1000
    sweep_interval_seconds: float = 300.0
    eviction_fraction: float = 0.1
    enable_metrics: bool = True

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        problems: List[str] = []
        if self.max_size <= 0:
            problems.append("max_size must be positive")
        if self.default_ttl_ms <= 0:
            problems.append("default_ttl_ms must be positive")
        if self.sweep_interval_seconds <= 0:
            problems.append("sweep_interval_seconds must be positive")
        if not 0.0 < self.eviction_fraction <= 1.0:
            problems.append("eviction_fraction must be within (0, 1]")
        return problems

    @classmethod
    def from_env(cls) -> CacheConfig:
        """Build a CacheConfig from ``RI_CACHE_*`` environment variables."""
        prefix = _ENV_PREFIX

        def _env(name: str, default: Any = None) -> Optional[str]:
            return os.environ.get(f"{prefix}{name}", default)

        def _bool(name: str, default: bool) -> bool:
            val = _env(name)
            if val is None:
                return default
            return val.lower() in ("true", "1", "yes")

        def _int(name: str, default: int) -> int:
            val = _env(name)
            if val is None:
                return default
            try:
                return int(val)
            except ValueError:
                logger.warning(
                    "Invalid integer for %s%s=%s, using default %d",
                    prefix, name, val, default,
                )
                return default

        def _float(name: str, default: float) -> float:
            val = _env(name)
            if val is None:
                return default
            try:
                return float(val)
            except ValueError:
                logger.warning(
                    "Invalid float for %s%s=%s, using default %f",
                    prefix, name, val, default,
                )
                return default

        config = cls(
            max_size=_int("MAX_SIZE", cls.max_size),
            default_ttl_ms=_int("DEFAULT_TTL_MS", cls.default_ttl_ms),
            sweep_interval_seconds=_float(
                "SWEEP_INTERVAL_SECONDS", cls.sweep_interval_seconds,
            ),
            eviction_fraction=_float(
                "EVICTION_FRACTION", cls.eviction_fraction,
            ),
            enable_metrics=_bool("ENABLE_METRICS", cls.enable_metrics),
        )

        logger.info(
            "CacheConfig loaded: max_size=%d, default_ttl=%dms, "
            "sweep_interval=%.0fs, eviction_fraction=%.2f",
            config.max_size,
            config.default_ttl_ms,
            config.sweep_interval_seconds,
            config.eviction_fraction,
        )
        return config


# ---------------------------------------------------------------------------
# Thread-safe singleton accessor
# ---------------------------------------------------------------------------

_config_instance: Optional[CacheConfig] = None
_config_lock = threading.Lock()


def get_config() -> CacheConfig:
    """Return the singleton CacheConfig, creating from env if needed."""
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = CacheConfig.from_env()
    return _config_instance


def set_config(config: CacheConfig) -> None:
    """Replace the singleton CacheConfig (useful for testing)."""
    global _config_instance
    with _config_lock:
        _config_instance = config
    logger.info("CacheConfig replaced programmatically")


def reset_config() -> None:
    """Reset the singleton (primarily for test teardown)."""
    global _config_instance
    with _config_lock:
        _config_instance = None


__all__ = [
    "CacheConfig",
    "get_config",
    "set_config",
    "reset_config",
]
