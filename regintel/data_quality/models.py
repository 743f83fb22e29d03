# -*- coding: utf-8 -*-
"""
Data Quality Engine Data Models

Pydantic v2 data models for the regulatory-intelligence data quality
engine. Every model is plain serializable data so an HTTP layer can
return it directly via ``model_dump(mode="json")``.

Enumerations (6):
    - MatchType, Priority, RetentionStrategy, IssueSeverity,
      RecommendedAction, StandardizedField

Engine models (7):
    - SimilarityMatch, DuplicateGroup, DuplicateReport,
      ValidationResult, RecordValidation, DataStandardization,
      StandardizationReport

Report models (8):
    - ReportDuplicateGroup, QualityMetrics, QualityDistribution,
      CommonIssue, QualityReport, DuplicateStats, CleanupReport,
      DuplicateRemovalReport

Author: RegIntel Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _utcnow() -> datetime:
    """Return current UTC datetime with microseconds zeroed."""
    return datetime.now(timezone.utc).replace(microsecond=0)


#: Record identifiers are assigned by storage and kept as-is (int or str).
RecordId = Union[int, str]


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: Score every record starts from before penalties are applied.
MAX_QUALITY_SCORE: int = 100

#: Quality distribution tier lower bounds.
EXCELLENT_SCORE: int = 90
GOOD_SCORE: int = 70
FAIR_SCORE: int = 50

#: Average score under which a report recommends reviewing collection.
ACCEPTABLE_AVERAGE_SCORE: float = 70.0

#: Per-record score under which a record counts as low quality.
LOW_QUALITY_SCORE: int = 60

#: Duplicate share of total records above which cleanup is recommended.
HIGH_DUPLICATE_RATIO: float = 0.1

#: Valid share of total records under which ingestion review is advised.
MIN_VALID_RATIO: float = 0.95


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class MatchType(str, Enum):
    """How a duplicate match was established."""

    EXACT = "exact"
    FUZZY = "fuzzy"
    SEMANTIC = "semantic"


class Priority(str, Enum):
    """Accepted values for a record's ``priority`` field."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RetentionStrategy(str, Enum):
    """Which member of a duplicate group is kept.

    KEEP_FIRST keeps the member that formed the group (input order).
    KEEP_LATEST keeps the member with the latest publication date.
    KEEP_HIGHEST_SCORE keeps the member with the best validation score.
    """

    KEEP_FIRST = "keep_first"
    KEEP_LATEST = "keep_latest"
    KEEP_HIGHEST_SCORE = "keep_highest_score"


class IssueSeverity(str, Enum):
    """Severity of a recurring validation issue across a record set."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RecommendedAction(str, Enum):
    """Follow-up suggested by a duplicate cleanup report."""

    IMMEDIATE_CLEANUP_REQUIRED = "IMMEDIATE_CLEANUP_REQUIRED"
    MONITORING = "MONITORING"


class StandardizedField(str, Enum):
    """Record fields rewritten by standardization."""

    REGION = "region"
    PUBLISHED_AT = "publishedAt"
    TYPE = "type"
    TITLE = "title"


# ---------------------------------------------------------------------------
# Duplicate detection
# ---------------------------------------------------------------------------


class SimilarityMatch(BaseModel):
    """One entry of the flat match list produced by a duplicate scan.

    Attributes:
        id: Identifier of the matched record.
        title: Raw title of the matched record.
        similarity: Similarity score (0.0 to 1.0).
        match_type: exact, fuzzy, or semantic.
        anchor_id: Identifier of the record this one was compared
            against. Equal to ``id`` for the anchor's own entry.
    """

    id: RecordId = Field(..., description="Identifier of the matched record")
    title: str = Field(default="", description="Raw title of the matched record")
    similarity: float = Field(
        ..., ge=0.0, le=1.0,
        description="Similarity score (0.0 to 1.0)",
    )
    match_type: MatchType = Field(..., description="How the match was established")
    anchor_id: RecordId = Field(
        ..., description="Record this match was compared against",
    )

    model_config = {"extra": "forbid"}

    @property
    def is_anchor(self) -> bool:
        """Whether this entry is the anchor record itself."""
        return self.id == self.anchor_id


class DuplicateGroup(BaseModel):
    """Records judged to describe the same regulatory fact.

    Attributes:
        key: Group identifier (``group_<n>``).
        anchor_id: Record the group was formed around.
        record_ids: Member identifiers in group-formation order.
        confidence: Minimum similarity observed among members.
        matches: Match entries that formed the group.
    """

    key: str = Field(..., description="Group identifier")
    anchor_id: RecordId = Field(..., description="Record the group formed around")
    record_ids: List[RecordId] = Field(
        default_factory=list,
        description="Member identifiers in group-formation order",
    )
    confidence: float = Field(
        default=1.0, ge=0.0, le=1.0,
        description="Minimum similarity among members",
    )
    matches: List[SimilarityMatch] = Field(
        default_factory=list,
        description="Match entries that formed the group",
    )

    model_config = {"extra": "forbid"}

    @property
    def member_count(self) -> int:
        return len(self.record_ids)


class DuplicateReport(BaseModel):
    """Outcome of a duplicate detection pass over one record set."""

    total_records: int = Field(default=0, ge=0)
    duplicates_found: int = Field(
        default=0, ge=0,
        description="Number of removal candidates",
    )
    duplicate_groups: List[DuplicateGroup] = Field(default_factory=list)
    removal_candidates: List[RecordId] = Field(default_factory=list)
    retention_strategy: RetentionStrategy = Field(
        default=RetentionStrategy.KEEP_FIRST,
    )
    generated_at: datetime = Field(default_factory=_utcnow)
    provenance_hash: str = Field(default="")

    model_config = {"extra": "forbid"}


class DuplicateRemovalReport(BaseModel):
    """Outcome of deleting removal candidates from the record store."""

    record_type: str = Field(..., description="Collection that was cleaned")
    total_processed: int = Field(default=0, ge=0)
    removed_count: int = Field(default=0, ge=0)
    kept_count: int = Field(default=0, ge=0)
    removed_ids: List[RecordId] = Field(default_factory=list)
    failed_ids: List[RecordId] = Field(default_factory=list)
    dry_run: bool = Field(default=False)
    message: str = Field(default="")
    timestamp: datetime = Field(default_factory=_utcnow)

    model_config = {"extra": "forbid"}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ValidationResult(BaseModel):
    """Fitness of a single record for display and use.

    ``is_valid`` is true iff ``errors`` is empty. ``score`` starts at 100
    and only decreases, never below 0.
    """

    is_valid: bool = Field(default=True)
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    score: int = Field(default=MAX_QUALITY_SCORE, ge=0, le=MAX_QUALITY_SCORE)

    model_config = {"extra": "forbid"}


class RecordValidation(ValidationResult):
    """ValidationResult tagged with the record it belongs to."""

    id: Optional[RecordId] = Field(None, description="Validated record id")


# ---------------------------------------------------------------------------
# Standardization
# ---------------------------------------------------------------------------


class DataStandardization(BaseModel):
    """Normalized values for a record, produced alongside the record.

    Unset attributes mean the corresponding input field was missing,
    unmapped, or (for dates) unparsable.
    """

    country_code: Optional[str] = Field(None, description="Canonical region code")
    normalized_date: Optional[datetime] = Field(
        None, description="Parsed publication date (UTC)",
    )
    standardized_category: Optional[str] = Field(
        None, description="Canonical category label",
    )
    cleaned_title: Optional[str] = Field(None, description="Cleaned title")

    model_config = {"extra": "forbid"}


class StandardizationReport(BaseModel):
    """Counts of fields changed by a standardization pass."""

    record_type: str = Field(default="")
    records_processed: int = Field(default=0, ge=0)
    records_updated: int = Field(default=0, ge=0)
    countries_standardized: int = Field(default=0, ge=0)
    dates_fixed: int = Field(default=0, ge=0)
    categories_normalized: int = Field(default=0, ge=0)
    titles_cleaned: int = Field(default=0, ge=0)
    applied: bool = Field(default=False)
    failed_ids: List[RecordId] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=_utcnow)

    model_config = {"extra": "forbid"}


# ---------------------------------------------------------------------------
# Quality report
# ---------------------------------------------------------------------------


class ReportDuplicateGroup(BaseModel):
    """Coarse reporting view of matches sharing a title prefix."""

    key: str = Field(..., description="Lowercased title prefix")
    count: int = Field(default=0, ge=0)
    matches: List[SimilarityMatch] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


class QualityMetrics(BaseModel):
    """Aggregate figures computed over the full, untruncated record set."""

    total_records: int = Field(default=0, ge=0)
    valid_records: int = Field(default=0, ge=0)
    average_quality_score: float = Field(default=0.0, ge=0.0, le=100.0)
    total_errors: int = Field(default=0, ge=0)
    total_warnings: int = Field(default=0, ge=0)
    duplicate_count: int = Field(
        default=0, ge=0,
        description="Number of removal candidates",
    )
    duplicate_groups: List[ReportDuplicateGroup] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


class QualityDistribution(BaseModel):
    """Record counts per score tier."""

    excellent: int = Field(default=0, ge=0, description="Score 90-100")
    good: int = Field(default=0, ge=0, description="Score 70-89")
    fair: int = Field(default=0, ge=0, description="Score 50-69")
    poor: int = Field(default=0, ge=0, description="Score below 50")

    model_config = {"extra": "forbid"}


class CommonIssue(BaseModel):
    """A validation message that recurs across the record set."""

    issue: str = Field(..., description="Validation message")
    count: int = Field(default=0, ge=0)
    severity: IssueSeverity = Field(default=IssueSeverity.LOW)

    model_config = {"extra": "forbid"}


class QualityReport(BaseModel):
    """Terminal artifact of a data quality pass.

    ``validation_results`` and ``duplicates`` are truncated for payload
    size. ``metrics`` always reflect the full record set.
    """

    metrics: QualityMetrics = Field(default_factory=QualityMetrics)
    validation_results: List[RecordValidation] = Field(default_factory=list)
    duplicates: List[SimilarityMatch] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    quality_distribution: QualityDistribution = Field(
        default_factory=QualityDistribution,
    )
    common_issues: List[CommonIssue] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=_utcnow)
    processing_time_ms: float = Field(default=0.0, ge=0.0)
    provenance_hash: str = Field(default="")

    model_config = {"extra": "forbid"}


class DuplicateStats(BaseModel):
    """Title uniqueness figures for one record type."""

    record_type: str = Field(..., description="Collection measured")
    total_records: int = Field(default=0, ge=0, description="Records with a title")
    unique_records: int = Field(default=0, ge=0, description="Distinct titles")
    uniqueness_ratio: float = Field(default=0.0, ge=0.0, le=1.0)

    model_config = {"extra": "forbid"}

    @property
    def duplicate_percentage(self) -> float:
        if self.total_records == 0:
            return 0.0
        return (self.total_records - self.unique_records) / self.total_records * 100


class CleanupReport(BaseModel):
    """Recommendation on whether a collection needs duplicate cleanup."""

    current_stats: DuplicateStats
    duplicate_percentage: float = Field(default=0.0, ge=0.0, le=100.0)
    recommended_action: RecommendedAction = Field(
        default=RecommendedAction.MONITORING,
    )
    quality_score: float = Field(default=0.0, ge=0.0, le=100.0)
    generated_at: datetime = Field(default_factory=_utcnow)

    model_config = {"extra": "forbid"}


__all__ = [
    "RecordId",
    "MAX_QUALITY_SCORE",
    "EXCELLENT_SCORE",
    "GOOD_SCORE",
    "FAIR_SCORE",
    "ACCEPTABLE_AVERAGE_SCORE",
    "LOW_QUALITY_SCORE",
    "HIGH_DUPLICATE_RATIO",
    "MIN_VALID_RATIO",
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
]
