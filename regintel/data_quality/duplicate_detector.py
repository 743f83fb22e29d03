# -*- coding: utf-8 -*-
"""
Duplicate Detector Engine - Data Quality Engine

Finds duplicate and near-duplicate records in one record set, groups the
matches, and decides which group members are removal candidates.

Scan (order-dependent, O(N^2) pairs):
    For each record not yet claimed by an earlier group, compare it with
    every later unclaimed record:

    - identical raw titles, or titles equal after normalization, give an
      ``exact`` match and no further checks for that pair
    - otherwise a title similarity at or above the threshold gives a
      ``fuzzy`` match
    - independently, when both records have content, a content
      similarity at or above the content threshold gives a ``semantic``
      match (a pair may therefore yield two entries)

    When a record collects any match, its own ``exact`` entry is emitted
    first, followed by its matches, and all of them are marked claimed.

Grouping:
    The flat match list is folded into non-overlapping groups, one per
    anchor entry. Members attach to their anchor's group when their
    similarity reaches the grouping threshold. Group confidence is the
    minimum similarity observed.

Retention:
    ``keep_first`` keeps the anchor; ``keep_latest`` keeps the member
    with the latest publication date; ``keep_highest_score`` keeps the
    member with the best validation score. Ties keep group order.

Example:
    >>> from regintel.data_quality.duplicate_detector import DuplicateDetector
    >>> detector = DuplicateDetector()
    >>> report = detector.detect([
    ...     {"id": 1, "title": "FDA Recall of Pumps"},
    ...     {"id": 2, "title": "FDA  Recall of Pumps"},
    ...     {"id": 3, "title": "Unrelated Update"},
    ... ])
    >>> report.removal_candidates
    [2]

Author: RegIntel Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from regintel.data_quality import metrics
from regintel.data_quality.config import DataQualityConfig, get_config
from regintel.data_quality.models import (
    DuplicateGroup,
    DuplicateReport,
    MatchType,
    RecordId,
    RetentionStrategy,
    SimilarityMatch,
)
from regintel.data_quality.record_fields import get_published_at, parse_date
from regintel.data_quality.similarity_scorer import SimilarityScorer
from regintel.data_quality.validity_checker import RecordValidator

logger = logging.getLogger(__name__)

__all__ = [
    "DuplicateDetector",
]

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _utcnow() -> datetime:
    """Return current UTC datetime with microseconds zeroed."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def _compute_provenance(operation: str, data_repr: str) -> str:
    """Compute SHA-256 provenance hash."""
    payload = f"{operation}:{data_repr}:{_utcnow().isoformat()}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


# =============================================================================
# DuplicateDetector
# =============================================================================


class DuplicateDetector:
    """Pairwise duplicate scan, match grouping, and retention policy.

    Attributes:
        _config: Thresholds and retention defaults.
        _scorer: Similarity scorer used for titles and content.
        _validator: Validator used by the ``keep_highest_score`` strategy.
        _stats_lock: Threading lock for stats updates.
    """

    def __init__(
        self,
        config: Optional[DataQualityConfig] = None,
        scorer: Optional[SimilarityScorer] = None,
        validator: Optional[RecordValidator] = None,
    ) -> None:
        self._config = config or get_config()
        self._scorer = scorer or SimilarityScorer()
        self._validator = validator or RecordValidator()
        self._stats_lock = threading.Lock()
        self._invocations: int = 0
        self._successes: int = 0
        self._failures: int = 0
        self._matches_found: int = 0
        self._groups_formed: int = 0
        self._total_duration_ms: float = 0.0
        self._last_invoked_at: Optional[datetime] = None
        logger.info(
            "DuplicateDetector initialized: threshold=%.2f, content=%.2f, "
            "group=%.2f, retention=%s",
            self._config.similarity_threshold,
            self._config.content_similarity_threshold,
            self._config.group_similarity_threshold,
            self._config.retention_strategy,
        )

    # ------------------------------------------------------------------
    # Public API - Scan
    # ------------------------------------------------------------------

    def find_duplicates(
        self,
        records: Sequence[Mapping[str, Any]],
        threshold: Optional[float] = None,
    ) -> List[SimilarityMatch]:
        """Scan ``records`` pairwise and return the flat match list.

        Args:
            records: Records in caller order. The order is significant.
            threshold: Title similarity threshold for fuzzy matches.
                Defaults to the configured ``similarity_threshold``.

        Returns:
            Flat list of SimilarityMatch entries, each anchor's own
            entry first followed by its matches.
        """
        if threshold is None:
            threshold = self._config.similarity_threshold
        content_threshold = self._config.content_similarity_threshold

        if len(records) > self._config.max_records_per_pass:
            logger.warning(
                "Duplicate scan over %d records exceeds the advised ceiling "
                "of %d; pairwise cost grows quadratically",
                len(records), self._config.max_records_per_pass,
            )

        logger.info(
            "Checking %d records for duplicates (threshold: %.2f)",
            len(records), threshold,
        )

        duplicates: List[SimilarityMatch] = []
        processed: set = set()

        for i, current in enumerate(records):
            current_id = current.get("id")
            if current_id in processed:
                continue

            current_title = current.get("title") or ""
            current_content = current.get("content")
            matches: List[SimilarityMatch] = []

            for candidate in records[i + 1:]:
                candidate_id = candidate.get("id")
                if candidate_id in processed:
                    continue

                candidate_title = candidate.get("title") or ""

                if (
                    current_title == candidate_title
                    or self._scorer.is_normalized_equal(
                        current_title, candidate_title,
                    )
                ):
                    matches.append(SimilarityMatch(
                        id=candidate_id,
                        title=candidate_title,
                        similarity=1.0,
                        match_type=MatchType.EXACT,
                        anchor_id=current_id,
                    ))
                    continue

                similarity = self._scorer.similarity(
                    current_title, candidate_title,
                )
                if similarity >= threshold:
                    matches.append(SimilarityMatch(
                        id=candidate_id,
                        title=candidate_title,
                        similarity=similarity,
                        match_type=MatchType.FUZZY,
                        anchor_id=current_id,
                    ))

                candidate_content = candidate.get("content")
                if current_content and candidate_content:
                    content_similarity = self._scorer.similarity(
                        current_content, candidate_content,
                    )
                    if content_similarity >= content_threshold:
                        matches.append(SimilarityMatch(
                            id=candidate_id,
                            title=candidate_title,
                            similarity=content_similarity,
                            match_type=MatchType.SEMANTIC,
                            anchor_id=current_id,
                        ))

            if matches:
                duplicates.append(SimilarityMatch(
                    id=current_id,
                    title=current_title,
                    similarity=1.0,
                    match_type=MatchType.EXACT,
                    anchor_id=current_id,
                ))
                duplicates.extend(matches)
                processed.update(match.id for match in matches)
                processed.add(current_id)

        for match_type in MatchType:
            count = sum(1 for m in duplicates if m.match_type == match_type)
            if count:
                metrics.inc_matches(match_type.value, count)

        logger.info("Found %d potential duplicates", len(duplicates))
        return duplicates

    # ------------------------------------------------------------------
    # Public API - Grouping
    # ------------------------------------------------------------------

    def group_matches(
        self,
        matches: Sequence[SimilarityMatch],
        group_threshold: Optional[float] = None,
    ) -> List[DuplicateGroup]:
        """Fold a flat match list into non-overlapping duplicate groups.

        Args:
            matches: Output of :meth:`find_duplicates`.
            group_threshold: Minimum similarity for a member to join its
                anchor's group. Defaults to ``group_similarity_threshold``.

        Returns:
            Groups with at least two members, keyed ``group_<n>``.
        """
        if group_threshold is None:
            group_threshold = self._config.group_similarity_threshold

        groups: List[DuplicateGroup] = []
        assigned: set = set()
        current: Optional[DuplicateGroup] = None

        def _close(group: Optional[DuplicateGroup]) -> None:
            if group is not None and group.member_count > 1:
                group.key = f"group_{len(groups) + 1}"
                groups.append(group)

        for match in matches:
            if match.is_anchor:
                _close(current)
                current = None
                if match.id in assigned:
                    continue
                assigned.add(match.id)
                current = DuplicateGroup(
                    key="",
                    anchor_id=match.id,
                    record_ids=[match.id],
                    confidence=match.similarity,
                    matches=[match],
                )
                continue

            if current is None or match.anchor_id != current.anchor_id:
                continue
            if match.similarity < group_threshold:
                continue

            if match.id not in current.record_ids:
                if match.id in assigned:
                    continue
                assigned.add(match.id)
                current.record_ids.append(match.id)
            current.matches.append(match)
            current.confidence = min(current.confidence, match.similarity)

        _close(current)
        return groups

    # ------------------------------------------------------------------
    # Public API - Retention
    # ------------------------------------------------------------------

    def select_removal_candidates(
        self,
        groups: Sequence[DuplicateGroup],
        records: Sequence[Mapping[str, Any]] = (),
        strategy: Optional[Union[RetentionStrategy, str]] = None,
    ) -> List[RecordId]:
        """Return ids of every group member that is not kept.

        Args:
            groups: Duplicate groups from :meth:`group_matches`.
            records: The scanned records, needed by the date and score
                based strategies.
            strategy: Retention strategy. Defaults to the configured one.

        Returns:
            Removal candidate ids in group order.
        """
        strategy = RetentionStrategy(
            strategy or self._config.retention_strategy
        )
        by_id: Dict[Any, Mapping[str, Any]] = {
            record.get("id"): record for record in records
        }

        candidates: List[RecordId] = []
        for group in groups:
            keeper = self._select_keeper(group, by_id, strategy)
            candidates.extend(rid for rid in group.record_ids if rid != keeper)
        return candidates

    # ------------------------------------------------------------------
    # Public API - Full pass
    # ------------------------------------------------------------------

    def detect(
        self,
        records: Sequence[Mapping[str, Any]],
        threshold: Optional[float] = None,
        strategy: Optional[Union[RetentionStrategy, str]] = None,
    ) -> DuplicateReport:
        """Run scan, grouping, and retention over ``records``.

        Unexpected failures are logged and produce an empty report
        rather than propagating to the caller.

        Args:
            records: Records to scan, in caller order.
            threshold: Title similarity threshold for fuzzy matches.
            strategy: Retention strategy override.

        Returns:
            DuplicateReport with groups and removal candidates.
        """
        start = time.monotonic()
        try:
            resolved = RetentionStrategy(
                strategy or self._config.retention_strategy
            )
            matches = self.find_duplicates(records, threshold)
            groups = self.group_matches(matches)
            candidates = self.select_removal_candidates(
                groups, records, resolved,
            )
        except Exception as exc:
            elapsed = time.monotonic() - start
            self._record_failure(elapsed)
            metrics.inc_errors(type(exc).__name__)
            metrics.inc_passes("duplicates", "failed")
            logger.error("Duplicate detection failed: %s", exc, exc_info=True)
            return DuplicateReport()

        elapsed = time.monotonic() - start
        self._record_success(elapsed, len(matches), len(groups))
        metrics.observe_duration("duplicates", elapsed)
        metrics.inc_passes("duplicates", "completed")

        logger.info(
            "Duplicate detection complete: records=%d, groups=%d, "
            "removal_candidates=%d, strategy=%s (%.1fms)",
            len(records), len(groups), len(candidates),
            resolved.value, elapsed * 1000.0,
        )
        return DuplicateReport(
            total_records=len(records),
            duplicates_found=len(candidates),
            duplicate_groups=groups,
            removal_candidates=candidates,
            retention_strategy=resolved,
            provenance_hash=_compute_provenance(
                "detect_duplicates", f"{len(records)}:{candidates}",
            ),
        )

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_statistics(self) -> Dict[str, Any]:
        """Return current engine operational statistics."""
        with self._stats_lock:
            avg_ms = 0.0
            if self._invocations > 0:
                avg_ms = self._total_duration_ms / self._invocations
            return {
                "engine_name": "DuplicateDetector",
                "invocations": self._invocations,
                "successes": self._successes,
                "failures": self._failures,
                "matches_found": self._matches_found,
                "groups_formed": self._groups_formed,
                "total_duration_ms": round(self._total_duration_ms, 3),
                "avg_duration_ms": round(avg_ms, 3),
                "last_invoked_at": (
                    self._last_invoked_at.isoformat()
                    if self._last_invoked_at else None
                ),
            }

    def reset_statistics(self) -> None:
        """Reset all operational statistics to zero."""
        with self._stats_lock:
            self._invocations = 0
            self._successes = 0
            self._failures = 0
            self._matches_found = 0
            self._groups_formed = 0
            self._total_duration_ms = 0.0
            self._last_invoked_at = None

    # ------------------------------------------------------------------
    # Private methods
    # ------------------------------------------------------------------

    def _select_keeper(
        self,
        group: DuplicateGroup,
        by_id: Mapping[Any, Mapping[str, Any]],
        strategy: RetentionStrategy,
    ) -> RecordId:
        """Pick the surviving member of ``group``."""
        keeper = group.record_ids[0]
        if strategy == RetentionStrategy.KEEP_FIRST:
            return keeper

        if strategy == RetentionStrategy.KEEP_LATEST:
            def rank(rid: Any) -> Any:
                record = by_id.get(rid, {})
                return parse_date(get_published_at(record)) or _OLDEST
        else:
            def rank(rid: Any) -> Any:
                return self._validator.validate(by_id.get(rid, {})).score

        best = rank(keeper)
        for rid in group.record_ids[1:]:
            value = rank(rid)
            if value > best:
                best = value
                keeper = rid
        return keeper

    def _record_success(
        self,
        elapsed_seconds: float,
        matches: int,
        groups: int,
    ) -> None:
        """Record a successful pass."""
        ms = elapsed_seconds * 1000.0
        with self._stats_lock:
            self._invocations += 1
            self._successes += 1
            self._matches_found += matches
            self._groups_formed += groups
            self._total_duration_ms += ms
            self._last_invoked_at = _utcnow()

    def _record_failure(self, elapsed_seconds: float) -> None:
        """Record a failed pass."""
        ms = elapsed_seconds * 1000.0
        with self._stats_lock:
            self._invocations += 1
            self._failures += 1
            self._total_duration_ms += ms
            self._last_invoked_at = _utcnow()
