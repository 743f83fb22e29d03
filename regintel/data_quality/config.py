# -*- coding: utf-8 -*-
"""
Data Quality Engine Configuration

Centralized configuration for the regulatory-intelligence data quality
engine covering:
- Duplicate detection thresholds (title, content, grouping)
- Duplicate retention strategy
- Report payload limits (validation results, duplicates, common issues)
- Pass sizing guard (records per pass)
- Report caching, logging, and metrics settings

All settings can be overridden via environment variables with the
``RI_DQ_`` prefix (e.g. ``RI_DQ_SIMILARITY_THRESHOLD``).

Example:
    >>> from regintel.data_quality.config import get_config
    >>> cfg = get_config()
    >>> print(cfg.similarity_threshold, cfg.retention_strategy)

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

# ---------------------------------------------------------------------------
# Environment variable prefix
# ---------------------------------------------------------------------------

_ENV_PREFIX = "RI_DQ_"

_RETENTION_STRATEGIES = ("keep_first", "keep_latest", "keep_highest_score")


# ---------------------------------------------------------------------------
# DataQualityConfig
# ---------------------------------------------------------------------------


@dataclass
class DataQualityConfig:
    """Complete configuration for the data quality engine.

    Attributes:
        similarity_threshold: Title similarity at or above which two
            records are reported as a fuzzy match (0.0 to 1.0).
        content_similarity_threshold: Content similarity at or above
            which two records are reported as a semantic match.
        group_similarity_threshold: Minimum match similarity for a
            record to be attached to a duplicate group.
        retention_strategy: Which member of a duplicate group survives
            (keep_first, keep_latest, keep_highest_score).
        group_key_length: Number of leading title characters used as the
            coarse grouping key in quality reports.
        validation_result_limit: Maximum per-record validation results
            included in a quality report payload.
        duplicate_list_limit: Maximum duplicate matches included in a
            quality report payload.
        common_issue_limit: Maximum entries in the common issue summary.
        max_records_per_pass: Advisory ceiling for a single duplicate
            scan. Larger inputs are processed but logged as a warning
            because the scan is quadratic.
        report_cache_ttl_ms: Time-to-live for cached quality reports.
        log_level: Logging level for the regintel logger.
        enable_metrics: Whether Prometheus metrics collection is enabled.
    """

    # -- Duplicate detection -------------------------------------------------
    similarity_threshold: float = 0.85
    content_similarity_threshold: float = 0.9
    group_similarity_threshold: float = 0.8
    retention_strategy: str = "keep_first"

    # -- Report payload ------------------------------------------------------
    group_key_length: int = 50
    validation_result_limit: int = 50
    duplicate_list_limit: int = 100
    common_issue_limit: int = 10

    # -- Pass sizing ---------------------------------------------------------
    max_records_per_pass: int = 5000

    # -- Cache ---------------------------------------------------------------
    report_cache_ttl_ms: int = 300_000

    # -- Logging -------------------------------------------------------------
    log_level: str = "INFO"

    # -- Metrics -------------------------------------------------------------
    enable_metrics: bool = True

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> List[str]:
        """Return a list of human-readable configuration problems.

        An empty list means the configuration is usable.
        """
        problems: List[str] = []
        for name in (
            "similarity_threshold",
            "content_similarity_threshold",
            "group_similarity_threshold",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                problems.append(f"{name} must be within [0, 1], got {value}")
        if self.retention_strategy not in _RETENTION_STRATEGIES:
            problems.append(
                f"retention_strategy must be one of {_RETENTION_STRATEGIES}, "
                f"got {self.retention_strategy!r}"
            )
        for name in (
            "group_key_length",
            "validation_result_limit",
            "duplicate_list_limit",
            "common_issue_limit",
            "max_records_per_pass",
            "report_cache_ttl_ms",
        ):
            if getattr(self, name) <= 0:
                problems.append(f"{name} must be positive")
        # getLevelName maps known names to ints and anything else to a str.
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            problems.append(
                f"log_level must be a logging level name, got {self.log_level!r}"
            )
        return problems

    # ------------------------------------------------------------------
    # Factory helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> DataQualityConfig:
        """Build a DataQualityConfig from environment variables.

        Every field can be overridden via ``RI_DQ_<FIELD_UPPER>``.
        Boolean values accept ``true/1/yes`` (case-insensitive).

        Returns:
            Populated DataQualityConfig instance.
        """
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

        def _str(name: str, default: str) -> str:
            val = _env(name)
            if val is None:
                return default
            return val

        config = cls(
            # Duplicate detection
            similarity_threshold=_float(
                "SIMILARITY_THRESHOLD", cls.similarity_threshold,
            ),
            content_similarity_threshold=_float(
                "CONTENT_SIMILARITY_THRESHOLD",
                cls.content_similarity_threshold,
            ),
            group_similarity_threshold=_float(
                "GROUP_SIMILARITY_THRESHOLD",
                cls.group_similarity_threshold,
            ),
            retention_strategy=_str(
                "RETENTION_STRATEGY", cls.retention_strategy,
            ),
            # Report payload
            group_key_length=_int("GROUP_KEY_LENGTH", cls.group_key_length),
            validation_result_limit=_int(
                "VALIDATION_RESULT_LIMIT", cls.validation_result_limit,
            ),
            duplicate_list_limit=_int(
                "DUPLICATE_LIST_LIMIT", cls.duplicate_list_limit,
            ),
            common_issue_limit=_int(
                "COMMON_ISSUE_LIMIT", cls.common_issue_limit,
            ),
            # Pass sizing
            max_records_per_pass=_int(
                "MAX_RECORDS_PER_PASS", cls.max_records_per_pass,
            ),
            # Cache
            report_cache_ttl_ms=_int(
                "REPORT_CACHE_TTL_MS", cls.report_cache_ttl_ms,
            ),
            # Logging
            log_level=_str("LOG_LEVEL", cls.log_level),
            # Metrics
            enable_metrics=_bool("ENABLE_METRICS", cls.enable_metrics),
        )

        logger.info(
            "DataQualityConfig loaded: thresholds=[title=%.2f content=%.2f "
            "group=%.2f], retention=%s, limits=[validation=%d duplicates=%d "
            "issues=%d], max_records=%d, report_ttl=%dms, metrics=%s",
            config.similarity_threshold,
            config.content_similarity_threshold,
            config.group_similarity_threshold,
            config.retention_strategy,
            config.validation_result_limit,
            config.duplicate_list_limit,
            config.common_issue_limit,
            config.max_records_per_pass,
            config.report_cache_ttl_ms,
            config.enable_metrics,
        )
        return config


# ---------------------------------------------------------------------------
# Thread-safe singleton accessor
# ---------------------------------------------------------------------------

_config_instance: Optional[DataQualityConfig] = None
_config_lock = threading.Lock()


def get_config() -> DataQualityConfig:
    """Return the singleton DataQualityConfig, creating from env if needed.

    Uses double-checked locking for thread safety with minimal
    contention on the hot path.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = DataQualityConfig.from_env()
    return _config_instance


def set_config(config: DataQualityConfig) -> None:
    """Replace the singleton DataQualityConfig (useful for testing).

    Args:
        config: New configuration to install.
    """
    global _config_instance
    with _config_lock:
        _config_instance = config
    logger.info("DataQualityConfig replaced programmatically")


def reset_config() -> None:
    """Reset the singleton (primarily for test teardown)."""
    global _config_instance
    with _config_lock:
        _config_instance = None


__all__ = [
    "DataQualityConfig",
    "get_config",
    "set_config",
    "reset_config",
]
