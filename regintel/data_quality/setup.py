# -*- coding: utf-8 -*-
"""
Data Quality Service Setup

Provides ``configure_data_quality(app, store)`` which wires up the data
quality engine (validator, duplicate detector, standardizer, report
generator, provenance tracker) around a record store and an optional
TTL cache, and attaches the service to the application state.

Also exposes ``get_data_quality(app)`` for programmatic access and the
``DataQualityService`` facade class.

The service composes the engine with its collaborators. It never
creates or destroys the cache; whoever constructs the cache owns its
lifecycle.

Usage:
    >>> from regintel.cache.ttl_cache import TTLCache
    >>> from regintel.data_quality.setup import DataQualityService
    >>> from regintel.storage import InMemoryRecordStore
    >>> cache = TTLCache()
    >>> service = DataQualityService(InMemoryRecordStore(), cache=cache)
    >>> service.startup()
    >>> report = service.generate_quality_report("regulatory_update")
    >>> service.shutdown()
    >>> cache.destroy()

Author: RegIntel Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from regintel.cache.ttl_cache import TTLCache
from regintel.data_quality import metrics
from regintel.data_quality.config import DataQualityConfig, get_config
from regintel.data_quality.duplicate_detector import DuplicateDetector
from regintel.data_quality.models import (
    CleanupReport,
    DuplicateRemovalReport,
    DuplicateReport,
    DuplicateStats,
    HIGH_DUPLICATE_RATIO,
    QualityReport,
    RecommendedAction,
    StandardizationReport,
    StandardizedField,
)
from regintel.data_quality.provenance import ProvenanceTracker
from regintel.data_quality.record_fields import CATEGORY_FIELDS, DATE_FIELDS
from regintel.data_quality.report_generator import QualityReportGenerator
from regintel.data_quality.standardizer import Standardizer
from regintel.data_quality.validity_checker import RecordValidator
from regintel.exceptions import (
    ConfigurationError,
    DataAccessError,
    RegIntelException,
)
from regintel.storage import RecordStore

logger = logging.getLogger(__name__)

REPORT_CACHE_PREFIX = "quality-report"


# ===================================================================
# Response models used by the facade
# ===================================================================


class ServiceStats(BaseModel):
    """Aggregate statistics for the data quality service."""

    reports_generated: int = Field(default=0)
    report_cache_hits: int = Field(default=0)
    duplicate_passes: int = Field(default=0)
    records_removed: int = Field(default=0)
    records_standardized: int = Field(default=0)
    remediation_failures: int = Field(default=0)
    failed_passes: int = Field(default=0)
    provenance_entries: int = Field(default=0)


class ValidateAndCleanResponse(BaseModel):
    """Result of a full remediation pass over one record type."""

    record_type: str
    success: bool = Field(default=True)
    error: Optional[str] = Field(default=None)
    duplicates: Optional[DuplicateRemovalReport] = Field(default=None)
    standardization: Optional[StandardizationReport] = Field(default=None)
    report: Optional[QualityReport] = Field(default=None)
    processing_time_ms: float = Field(default=0.0)


# ===================================================================
# DataQualityService
# ===================================================================


class DataQualityService:
    """Facade over the data quality engine and its collaborators.

    Attributes:
        config: DataQualityConfig instance.
        store: Record store the service reads and remediates.
        cache: Optional TTL cache for quality reports.
        provenance: Chain-hashed log of every pass.

    Example:
        >>> service = DataQualityService(store, cache=cache)
        >>> result = service.remove_duplicates("regulatory_update", dry_run=True)
        >>> print(result.removed_ids)
    """

    def __init__(
        self,
        store: RecordStore,
        cache: Optional[TTLCache] = None,
        config: Optional[DataQualityConfig] = None,
    ) -> None:
        self.config = config or get_config()
        self.store = store
        self.cache = cache
        self.provenance = ProvenanceTracker()

        self.validator = RecordValidator()
        self.detector = DuplicateDetector(
            config=self.config, validator=self.validator,
        )
        self.standardizer = Standardizer(validator=self.validator)
        self.report_generator = QualityReportGenerator(
            config=self.config,
            validator=self.validator,
            detector=self.detector,
        )

        self._stats = ServiceStats()
        self._stats_lock = threading.Lock()
        self._started = False
        logger.info("DataQualityService facade created")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def startup(self) -> None:
        """Validate configuration and mark the service started.

        Raises:
            ConfigurationError: If the configuration is unusable.
        """
        problems = self.config.validate()
        if problems:
            raise ConfigurationError(
                message="Invalid data quality configuration",
                component="DataQualityService",
                context={"problems": problems},
            )
        logging.getLogger("regintel").setLevel(
            self.config.log_level.upper(),
        )
        metrics.configure(self.config.enable_metrics)
        self._started = True
        logger.info("DataQualityService started")

    def shutdown(self) -> None:
        """Mark the service stopped. The cache is left to its owner."""
        self._started = False
        logger.info("DataQualityService stopped")

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def generate_quality_report(
        self,
        record_type: str,
        use_cache: bool = True,
    ) -> QualityReport:
        """Quality report over every record of ``record_type``.

        Reports are memoized in the cache for ``report_cache_ttl_ms``.
        Failures are logged and produce an empty, uncached report.
        """
        key = self.report_cache_key(record_type)

        def _produce() -> QualityReport:
            report = self.report_generator.build(self._fetch(record_type))
            self.provenance.record(
                record_type, "quality_report", report.provenance_hash,
            )
            with self._stats_lock:
                self._stats.reports_generated += 1
            return report

        try:
            if self.cache is not None and use_cache:
                if key in self.cache:
                    with self._stats_lock:
                        self._stats.report_cache_hits += 1
                return self.cache.cached(
                    key, _produce, ttl_ms=self.config.report_cache_ttl_ms,
                )
            return _produce()
        except Exception as exc:
            self.report_generator.record_failure(exc)
            with self._stats_lock:
                self._stats.failed_passes += 1
            return QualityReport()

    def report_cache_key(self, record_type: str) -> str:
        """Cache key of the quality report for ``record_type``."""
        return f"{REPORT_CACHE_PREFIX}:{record_type}"

    def invalidate(self, record_type: str) -> bool:
        """Drop the cached report for ``record_type``."""
        if self.cache is None:
            return False
        return self.cache.delete(self.report_cache_key(record_type))

    # ------------------------------------------------------------------
    # Duplicates
    # ------------------------------------------------------------------

    def detect_duplicates(self, record_type: str) -> DuplicateReport:
        """Duplicate groups and removal candidates for ``record_type``.

        Failures are logged and produce an empty report.
        """
        try:
            records = self._fetch(record_type)
        except DataAccessError as exc:
            logger.error(
                "Duplicate detection for %s failed: %s", record_type, exc,
                exc_info=True,
            )
            metrics.inc_errors(type(exc).__name__)
            with self._stats_lock:
                self._stats.failed_passes += 1
            return DuplicateReport()

        report = self.detector.detect(records)
        self.provenance.record(
            record_type, "detect_duplicates", report.provenance_hash,
        )
        with self._stats_lock:
            self._stats.duplicate_passes += 1
        return report

    def remove_duplicates(
        self,
        record_type: str,
        dry_run: bool = False,
    ) -> DuplicateRemovalReport:
        """Delete removal candidates of ``record_type`` from the store.

        Each deletion is attempted independently; ids that cannot be
        deleted are reported in ``failed_ids``.

        Raises:
            DataAccessError: If the records cannot be loaded.
        """
        records = self._fetch(record_type)
        detection = self.detector.detect(records)

        removed: List[Any] = []
        failed: List[Any] = []
        if not dry_run:
            for record_id in detection.removal_candidates:
                try:
                    if self.store.delete(record_type, record_id):
                        removed.append(record_id)
                    else:
                        failed.append(record_id)
                except Exception as exc:
                    logger.warning(
                        "Could not delete %s/%s: %s", record_type, record_id, exc,
                    )
                    metrics.inc_errors(type(exc).__name__)
                    failed.append(record_id)

            if removed:
                metrics.inc_remediations("delete", len(removed))
                self.invalidate(record_type)

        if dry_run:
            message = (
                f"Dry run: {len(detection.removal_candidates)} duplicate "
                f"records would be removed from {record_type}"
            )
        else:
            message = f"Removed {len(removed)} duplicate records from {record_type}"

        result = DuplicateRemovalReport(
            record_type=record_type,
            total_processed=len(records),
            removed_count=len(removed),
            kept_count=len(records) - len(removed),
            removed_ids=detection.removal_candidates if dry_run else removed,
            failed_ids=failed,
            dry_run=dry_run,
            message=message,
        )
        self.provenance.record(
            record_type,
            "remove_duplicates",
            self.provenance.build_hash(result.model_dump(mode="json")),
        )
        with self._stats_lock:
            self._stats.duplicate_passes += 1
            self._stats.records_removed += len(removed)
            self._stats.remediation_failures += len(failed)
        logger.info(message)
        return result

    def get_duplicate_stats(self, record_type: str) -> DuplicateStats:
        """Distinct-title figures for records with a non-blank title.

        Raises:
            DataAccessError: If the records cannot be loaded.
        """
        titles = [
            str(record.get("title")).strip().lower()
            for record in self._fetch(record_type)
            if record.get("title") and str(record.get("title")).strip()
        ]
        total = len(titles)
        unique = len(set(titles))
        return DuplicateStats(
            record_type=record_type,
            total_records=total,
            unique_records=unique,
            uniqueness_ratio=unique / total if total else 0.0,
        )

    def generate_cleanup_report(self, record_type: str) -> CleanupReport:
        """Whether ``record_type`` needs an immediate duplicate cleanup."""
        stats = self.get_duplicate_stats(record_type)
        percentage = stats.duplicate_percentage
        if percentage > HIGH_DUPLICATE_RATIO * 100:
            action = RecommendedAction.IMMEDIATE_CLEANUP_REQUIRED
        else:
            action = RecommendedAction.MONITORING
        return CleanupReport(
            current_stats=stats,
            duplicate_percentage=round(percentage, 2),
            recommended_action=action,
            quality_score=round(stats.uniqueness_ratio * 100, 2),
        )

    # ------------------------------------------------------------------
    # Standardization
    # ------------------------------------------------------------------

    def standardize_records(
        self,
        record_type: str,
        apply: bool = False,
    ) -> StandardizationReport:
        """Standardize every record of ``record_type``.

        With ``apply`` the changed fields are written back through the
        store; otherwise only the counts are reported.

        Raises:
            DataAccessError: If the records cannot be loaded.
        """
        start = time.monotonic()
        records = self._fetch(record_type)
        report = StandardizationReport(
            record_type=record_type,
            records_processed=len(records),
            applied=apply,
        )

        for record in records:
            changes = self.standardizer.changes(record)
            if not changes:
                continue
            self._count_changes(report, changes)
            report.records_updated += 1
            if apply:
                self._apply_changes(record_type, record.get("id"), changes, report)

        if apply and report.records_updated:
            metrics.inc_remediations(
                "update", report.records_updated - len(report.failed_ids),
            )
            self.invalidate(record_type)

        elapsed = time.monotonic() - start
        metrics.observe_duration("standardize", elapsed)
        metrics.inc_passes("standardize", "completed")
        self.provenance.record(
            record_type,
            "standardize",
            self.provenance.build_hash(report.model_dump(mode="json")),
        )
        with self._stats_lock:
            if apply:
                self._stats.records_standardized += (
                    report.records_updated - len(report.failed_ids)
                )
            self._stats.remediation_failures += len(report.failed_ids)

        logger.info(
            "Standardized %s: processed=%d, updated=%d, countries=%d, "
            "dates=%d, categories=%d, titles=%d, applied=%s",
            record_type,
            report.records_processed,
            report.records_updated,
            report.countries_standardized,
            report.dates_fixed,
            report.categories_normalized,
            report.titles_cleaned,
            apply,
        )
        return report

    # ------------------------------------------------------------------
    # Combined remediation
    # ------------------------------------------------------------------

    def validate_and_clean(self, record_type: str) -> ValidateAndCleanResponse:
        """Remove duplicates, apply standardization, then re-report."""
        start = time.monotonic()
        logger.info("Starting validation and cleaning of %s", record_type)
        try:
            duplicates = self.remove_duplicates(record_type)
            standardization = self.standardize_records(record_type, apply=True)
        except RegIntelException as exc:
            logger.error(
                "Validation and cleaning of %s failed: %s", record_type, exc,
            )
            with self._stats_lock:
                self._stats.failed_passes += 1
            return ValidateAndCleanResponse(
                record_type=record_type,
                success=False,
                error=str(exc),
                processing_time_ms=round((time.monotonic() - start) * 1000, 3),
            )

        report = self.generate_quality_report(record_type, use_cache=False)
        elapsed_ms = round((time.monotonic() - start) * 1000, 3)
        logger.info(
            "Validation and cleaning of %s completed in %.1fms "
            "(average score %.2f)",
            record_type, elapsed_ms, report.metrics.average_quality_score,
        )
        return ValidateAndCleanResponse(
            record_type=record_type,
            duplicates=duplicates,
            standardization=standardization,
            report=report,
            processing_time_ms=elapsed_ms,
        )

    # ------------------------------------------------------------------
    # Statistics and health
    # ------------------------------------------------------------------

    def get_statistics(self) -> ServiceStats:
        """Aggregated service statistics."""
        with self._stats_lock:
            self._stats.provenance_entries = self.provenance.entry_count
            return self._stats.model_copy()

    def health_check(self) -> Dict[str, Any]:
        """Health status dict."""
        return {
            "status": "healthy" if self._started else "not_started",
            "service": "data-quality",
            "started": self._started,
            "cache": self.cache.get_stats()["size"] if self.cache else None,
            "cache_sweeping": self.cache.is_sweeping if self.cache else False,
            "provenance_entries": self.provenance.entry_count,
            "provenance_valid": self.provenance.verify_chain(),
            "prometheus_available": metrics.PROMETHEUS_AVAILABLE,
        }

    # ------------------------------------------------------------------
    # Private methods
    # ------------------------------------------------------------------

    def _fetch(self, record_type: str) -> List[Dict[str, Any]]:
        """Load every record of ``record_type``, wrapping store failures."""
        try:
            return list(self.store.get_all(record_type))
        except RegIntelException:
            raise
        except Exception as exc:
            raise DataAccessError(
                message=f"Failed to load {record_type} records",
                data_source=type(self.store).__name__,
                operation="get_all",
                cause=exc,
            ) from exc

    def _count_changes(
        self,
        report: StandardizationReport,
        changes: Mapping[str, Any],
    ) -> None:
        if StandardizedField.REGION.value in changes:
            report.countries_standardized += 1
        if any(name in changes for name in DATE_FIELDS):
            report.dates_fixed += 1
        if any(name in changes for name in CATEGORY_FIELDS):
            report.categories_normalized += 1
        if StandardizedField.TITLE.value in changes:
            report.titles_cleaned += 1

    def _apply_changes(
        self,
        record_type: str,
        record_id: Any,
        changes: Mapping[str, Any],
        report: StandardizationReport,
    ) -> None:
        try:
            self.store.update(record_type, record_id, changes)
        except Exception as exc:
            logger.warning(
                "Could not update %s/%s: %s", record_type, record_id, exc,
            )
            metrics.inc_errors(type(exc).__name__)
            report.failed_ids.append(record_id)


# ===================================================================
# Application wiring
# ===================================================================


async def configure_data_quality(
    app: Any,
    store: RecordStore,
    cache: Optional[TTLCache] = None,
    config: Optional[DataQualityConfig] = None,
) -> DataQualityService:
    """Create, start, and attach a DataQualityService to ``app.state``.

    Args:
        app: Application object exposing a ``state`` namespace.
        store: Record store collaborator.
        cache: Optional shared TTL cache.
        config: Optional data quality config.

    Returns:
        DataQualityService instance.
    """
    service = DataQualityService(store, cache=cache, config=config)
    service.startup()

    app.state.data_quality_service = service
    logger.info("Data quality service configured and started")
    return service


def get_data_quality(app: Any) -> DataQualityService:
    """Get the DataQualityService instance from app state.

    Raises:
        RuntimeError: If the service has not been configured.
    """
    service = getattr(app.state, "data_quality_service", None)
    if service is None:
        raise RuntimeError(
            "Data quality service not configured. "
            "Call configure_data_quality(app, store) first."
        )
    return service


__all__ = [
    "DataQualityService",
    "configure_data_quality",
    "get_data_quality",
    "ServiceStats",
    "ValidateAndCleanResponse",
    "REPORT_CACHE_PREFIX",
]
