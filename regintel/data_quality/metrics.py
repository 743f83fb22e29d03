# -*- coding: utf-8 -*-
"""
Prometheus Metrics - Data Quality Engine

7 Prometheus metrics for data quality pass monitoring with graceful
fallback when prometheus_client is not installed.

Metrics:
    1. ri_dq_passes_total (Counter, labels: operation, status)
    2. ri_dq_records_validated_total (Counter)
    3. ri_dq_matches_found_total (Counter, labels: match_type)
    4. ri_dq_validation_score (Histogram)
    5. ri_dq_pass_duration_seconds (Histogram, labels: operation)
    6. ri_dq_remediations_total (Counter, labels: action)
    7. ri_dq_errors_total (Counter, labels: error_type)

Author: RegIntel Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Graceful prometheus_client import
# ---------------------------------------------------------------------------

try:
    from prometheus_client import Counter, Histogram
    PROMETHEUS_AVAILABLE = True
except ImportError:
    PROMETHEUS_AVAILABLE = False
    logger.info(
        "prometheus_client not installed; data quality metrics disabled"
    )


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

if PROMETHEUS_AVAILABLE:
    # 1. Quality passes by operation and outcome
    dq_passes_total = Counter(
        "ri_dq_passes_total",
        "Total data quality passes executed",
        labelnames=["operation", "status"],
    )

    # 2. Records run through the validation rules
    dq_records_validated_total = Counter(
        "ri_dq_records_validated_total",
        "Total records validated",
    )

    # 3. Duplicate matches by match type
    dq_matches_found_total = Counter(
        "ri_dq_matches_found_total",
        "Total duplicate matches found",
        labelnames=["match_type"],
    )

    # 4. Per-record validation score distribution
    dq_validation_score = Histogram(
        "ri_dq_validation_score",
        "Per-record validation score distribution",
        buckets=(0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 100),
    )

    # 5. Pass duration by operation
    dq_pass_duration_seconds = Histogram(
        "ri_dq_pass_duration_seconds",
        "Data quality pass duration in seconds",
        labelnames=["operation"],
        buckets=(
            0.01, 0.05, 0.1, 0.25, 0.5, 1.0,
            2.5, 5.0, 10.0, 30.0, 60.0, 120.0,
        ),
    )

    # 6. Remediations written back to storage by action
    dq_remediations_total = Counter(
        "ri_dq_remediations_total",
        "Total remediations applied to the record store",
        labelnames=["action"],
    )

    # 7. Errors by error type
    dq_errors_total = Counter(
        "ri_dq_errors_total",
        "Total data quality errors encountered",
        labelnames=["error_type"],
    )

else:
    # No-op placeholders
    dq_passes_total = None  # type: ignore[assignment]
    dq_records_validated_total = None  # type: ignore[assignment]
    dq_matches_found_total = None  # type: ignore[assignment]
    dq_validation_score = None  # type: ignore[assignment]
    dq_pass_duration_seconds = None  # type: ignore[assignment]
    dq_remediations_total = None  # type: ignore[assignment]
    dq_errors_total = None  # type: ignore[assignment]


# Switched off by DataQualityService when enable_metrics is false.
_ENABLED = True


# ---------------------------------------------------------------------------
# Helper functions (safe to call even without prometheus_client)
# ---------------------------------------------------------------------------


def configure(enabled: bool) -> None:
    """Turn metric recording on or off for this process."""
    global _ENABLED
    _ENABLED = enabled


def inc_passes(operation: str, status: str) -> None:
    """Record a quality pass.

    Args:
        operation: Pass type (report, duplicates, standardize, cleanup).
        status: Outcome (completed, failed).
    """
    if not (PROMETHEUS_AVAILABLE and _ENABLED):
        return
    dq_passes_total.labels(operation=operation, status=status).inc()


def inc_records_validated(count: int = 1) -> None:
    """Record records run through validation."""
    if not (PROMETHEUS_AVAILABLE and _ENABLED):
        return
    dq_records_validated_total.inc(count)


def inc_matches(match_type: str, count: int = 1) -> None:
    """Record duplicate matches found.

    Args:
        match_type: exact, fuzzy, or semantic.
        count: Number of matches.
    """
    if not (PROMETHEUS_AVAILABLE and _ENABLED):
        return
    dq_matches_found_total.labels(match_type=match_type).inc(count)


def observe_score(score: float) -> None:
    """Record a per-record validation score."""
    if not (PROMETHEUS_AVAILABLE and _ENABLED):
        return
    dq_validation_score.observe(score)


def observe_duration(operation: str, seconds: float) -> None:
    """Record the wall-clock duration of a pass.

    Args:
        operation: Pass type.
        seconds: Duration in seconds.
    """
    if not (PROMETHEUS_AVAILABLE and _ENABLED):
        return
    dq_pass_duration_seconds.labels(operation=operation).observe(seconds)


def inc_remediations(action: str, count: int = 1) -> None:
    """Record remediations written back to storage.

    Args:
        action: delete or update.
        count: Number of records touched.
    """
    if not (PROMETHEUS_AVAILABLE and _ENABLED):
        return
    dq_remediations_total.labels(action=action).inc(count)


def inc_errors(error_type: str) -> None:
    """Record an error swallowed or surfaced by a quality pass.

    Args:
        error_type: Exception class name or short category.
    """
    if not (PROMETHEUS_AVAILABLE and _ENABLED):
        return
    dq_errors_total.labels(error_type=error_type).inc()


__all__ = [
    "PROMETHEUS_AVAILABLE",
    "configure",
    "inc_passes",
    "inc_records_validated",
    "inc_matches",
    "observe_score",
    "observe_duration",
    "inc_remediations",
    "inc_errors",
]
