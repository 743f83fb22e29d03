# -*- coding: utf-8 -*-
"""
regintel/data_quality: Data Quality Engine for Regulatory Records
=================================================================

This package assesses and improves the quality of regulatory
intelligence records (regulatory updates, legal cases). It supports:

- Rule-based validation scoring (0-100) with errors and warnings
- Title similarity (normalized Levenshtein) and duplicate detection
  with exact, fuzzy, and semantic (same content) matches
- Duplicate grouping and removal candidates (keep_first,
  keep_latest, keep_highest_score)
- Standardization of region codes, categories, titles, and dates
- Aggregated quality reports with recommendations, score
  distribution, and recurring issues
- SHA-256 provenance chain tracking of every pass
- 7 Prometheus metrics for observability
- Thread-safe configuration with RI_DQ_ env prefix

Key Components:
    - config: DataQualityConfig with RI_DQ_ env prefix
    - similarity_scorer: normalization and edit-distance similarity
    - validity_checker: per-record rule table
    - duplicate_detector: duplicate scan, grouping, retention
    - standardizer: lookup-table field normalization
    - report_generator: quality report aggregation
    - provenance: SHA-256 chain-hashed audit trail
    - metrics: Prometheus metrics
    - setup: DataQualityService facade

Example:
    >>> from regintel.data_quality import RecordValidator
    >>> result = RecordValidator().validate({"title": "Short"})
    >>> result.is_valid
    False
"""

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from regintel.data_quality.config import (
    DataQualityConfig,
    get_config,
    set_config,
    reset_config,
)

# ---------------------------------------------------------------------------
# Provenance and metrics
# ---------------------------------------------------------------------------
from regintel.data_quality.provenance import ProvenanceTracker
from regintel.data_quality.metrics import PROMETHEUS_AVAILABLE

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
from regintel.data_quality.models import (
    MatchType,
    Priority,
    RetentionStrategy,
    IssueSeverity,
    RecommendedAction,
    StandardizedField,
    SimilarityMatch,
    DuplicateGroup,
    DuplicateReport,
    DuplicateRemovalReport,
    ValidationResult,
    RecordValidation,
    DataStandardization,
    StandardizationReport,
    ReportDuplicateGroup,
    QualityMetrics,
    QualityDistribution,
    CommonIssue,
    QualityReport,
    DuplicateStats,
    CleanupReport,
)

# ---------------------------------------------------------------------------
# Engines
# ---------------------------------------------------------------------------
from regintel.data_quality.similarity_scorer import (
    SimilarityScorer,
    levenshtein_distance,
    normalize_text,
)
from regintel.data_quality.validity_checker import RecordValidator
from regintel.data_quality.duplicate_detector import DuplicateDetector
from regintel.data_quality.standardizer import Standardizer
from regintel.data_quality.report_generator import QualityReportGenerator

# ---------------------------------------------------------------------------
# Service facade
# ---------------------------------------------------------------------------
from regintel.data_quality.setup import (
    DataQualityService,
    configure_data_quality,
    get_data_quality,
)

__all__ = [
    "__version__",
    # Configuration
    "DataQualityConfig",
    "get_config",
    "set_config",
    "reset_config",
    # Provenance and metrics
    "ProvenanceTracker",
    "PROMETHEUS_AVAILABLE",
    # Models
    "MatchType",
    "Priority",
    "RetentionStrategy",
    "IssueSeverity",
    "RecommendedAction",
    "StandardizedField",
    "SimilarityMatch",
    "DuplicateGroup",
    "DuplicateReport",
    "DuplicateRemovalReport",
    "ValidationResult",
    "RecordValidation",
    "DataStandardization",
    "StandardizationReport",
    "ReportDuplicateGroup",
    "QualityMetrics",
    "QualityDistribution",
    "CommonIssue",
    "QualityReport",
    "DuplicateStats",
    "CleanupReport",
    # Engines
    "SimilarityScorer",
    "levenshtein_distance",
    "normalize_text",
    "RecordValidator",
    "DuplicateDetector",
    "Standardizer",
    "QualityReportGenerator",
    # Service
    "DataQualityService",
    "configure_data_quality",
    "get_data_quality",
]
