# -*- coding: utf-8 -*-
"""Tests for the duplicate scan, grouping, and retention policies.

Covers:
- Exact, fuzzy, and semantic matches
- Order dependence of the scan and processed-record skipping
- Anchor-based grouping and the group similarity threshold
- keep_first, keep_latest, and keep_highest_score retention
- Failure handling of the full pass
"""

import logging

import pytest

from regintel.data_quality.config import DataQualityConfig
from regintel.data_quality.duplicate_detector import DuplicateDetector
from regintel.data_quality.models import MatchType, RetentionStrategy


@pytest.fixture
def detector(dq_settings):
    return DuplicateDetector(config=dq_settings)


SHARED_CONTENT = (
    "Manufacturers must notify the competent authority within fifteen "
    "days of becoming aware of a serious incident."
)


# ==============================================================================
# Scan
# ==============================================================================

class TestFindDuplicates:
    """Tests for DuplicateDetector.find_duplicates."""

    def test_near_identical_titles_are_fuzzy(self, detector, pump_records):
        """The double-spaced title is a fuzzy match of the first record."""
        matches = detector.find_duplicates(pump_records)

        assert [m.id for m in matches] == [1, 2]
        anchor, member = matches
        assert anchor.is_anchor
        assert anchor.match_type == MatchType.EXACT
        assert member.match_type == MatchType.FUZZY
        assert member.anchor_id == 1
        assert member.similarity == pytest.approx(0.95)

    def test_normalized_equal_titles_are_exact(self, detector):
        """Titles equal after normalization skip the content check."""
        records = [
            {"id": "a", "title": "EU MDR: Update!", "content": SHARED_CONTENT},
            {"id": "b", "title": "eu mdr update", "content": SHARED_CONTENT},
        ]
        matches = detector.find_duplicates(records)

        assert len(matches) == 2
        assert matches[1].match_type == MatchType.EXACT
        assert matches[1].similarity == 1.0

    def test_same_content_is_semantic(self, detector):
        """Different titles with the same content form a semantic match."""
        records = [
            {"id": 1, "title": "Incident reporting window", "content": SHARED_CONTENT},
            {"id": 2, "title": "Vigilance obligations", "content": SHARED_CONTENT},
        ]
        matches = detector.find_duplicates(records)

        assert [m.match_type for m in matches] == [
            MatchType.EXACT, MatchType.SEMANTIC,
        ]

    def test_fuzzy_and_semantic_for_same_pair(self, detector):
        """A pair can yield both a fuzzy and a semantic entry."""
        records = [
            {"id": 1, "title": "FDA Recall of Pumps", "content": SHARED_CONTENT},
            {"id": 2, "title": "FDA  Recall of Pumps", "content": SHARED_CONTENT},
        ]
        matches = detector.find_duplicates(records)

        assert [m.match_type for m in matches] == [
            MatchType.EXACT, MatchType.FUZZY, MatchType.SEMANTIC,
        ]
        assert [m.id for m in matches] == [1, 2, 2]

    def test_processed_records_are_not_anchors(self, detector):
        """Records absorbed by an earlier anchor never start a group."""
        records = [
            {"id": 1, "title": "Recall notice for pumps"},
            {"id": 2, "title": "Recall notice for pumps"},
            {"id": 3, "title": "Recall notice for pumps"},
        ]
        matches = detector.find_duplicates(records)

        anchors = [m.id for m in matches if m.is_anchor]
        assert anchors == [1]
        assert [m.id for m in matches] == [1, 2, 3]

    def test_unrelated_records(self, detector):
        """Test unrelated records produce no matches."""
        records = [
            {"id": 1, "title": "Swissmedic vigilance forms"},
            {"id": 2, "title": "Health Canada licence fees"},
        ]
        assert detector.find_duplicates(records) == []

    def test_threshold_override(self, detector, pump_records):
        """A stricter threshold drops the fuzzy match."""
        assert detector.find_duplicates(pump_records, threshold=0.99) == []

    def test_empty_input(self, detector):
        """Test empty input."""
        assert detector.find_duplicates([]) == []

    def test_oversized_pass_warns(self, pump_records, caplog):
        """Inputs above the advised ceiling are processed with a warning."""
        detector = DuplicateDetector(
            config=DataQualityConfig(max_records_per_pass=2),
        )
        with caplog.at_level(logging.WARNING):
            matches = detector.find_duplicates(pump_records)

        assert len(matches) == 2
        assert "exceeds the advised ceiling" in caplog.text


# ==============================================================================
# Grouping
# ==============================================================================

class TestGroupMatches:
    """Tests for DuplicateDetector.group_matches."""

    def test_single_group(self, detector, pump_records):
        """Test transitive matches share one group."""
        groups = detector.group_matches(detector.find_duplicates(pump_records))

        assert len(groups) == 1
        group = groups[0]
        assert group.key == "group_1"
        assert group.anchor_id == 1
        assert group.record_ids == [1, 2]
        assert group.confidence == pytest.approx(0.95)

    def test_separate_pairs_form_separate_groups(self, detector, report_records):
        """Test disjoint pairs stay in separate groups."""
        groups = detector.group_matches(detector.find_duplicates(report_records))

        assert [g.key for g in groups] == ["group_1", "group_2"]
        assert [g.record_ids for g in groups] == [[1, 2], [3, 4]]

    def test_member_counted_once(self, detector):
        """A fuzzy and a semantic entry for one record add one member."""
        records = [
            {"id": 1, "title": "FDA Recall of Pumps", "content": SHARED_CONTENT},
            {"id": 2, "title": "FDA  Recall of Pumps", "content": SHARED_CONTENT},
        ]
        groups = detector.group_matches(detector.find_duplicates(records))

        assert groups[0].record_ids == [1, 2]
        assert len(groups[0].matches) == 3
        assert groups[0].confidence == pytest.approx(0.95)

    def test_group_threshold_excludes_weak_members(self, detector, pump_records):
        """A group left with only its anchor is dropped."""
        matches = detector.find_duplicates(pump_records)
        assert detector.group_matches(matches, group_threshold=0.99) == []

    def test_groups_do_not_overlap(self, detector, report_records):
        """Test no record appears in two groups."""
        groups = detector.group_matches(detector.find_duplicates(report_records))
        seen = [rid for g in groups for rid in g.record_ids]
        assert len(seen) == len(set(seen))


# ==============================================================================
# Retention
# ==============================================================================

class TestRetention:
    """Tests for removal candidate selection."""

    def _groups(self, detector, records):
        return detector.group_matches(detector.find_duplicates(records))

    def test_keep_first_by_default(self, detector, pump_records):
        """Test the first record is kept by default."""
        report = detector.detect(pump_records)

        assert report.removal_candidates == [2]
        assert report.duplicates_found == 1
        assert report.retention_strategy == RetentionStrategy.KEEP_FIRST

    def test_keep_latest(self, detector, record_factory):
        """Test the latest record is kept."""
        records = [
            record_factory(1, publishedAt="2024-01-01"),
            record_factory(2, publishedAt="2024-05-01"),
            record_factory(3),
        ]
        records[2].pop("publishedAt")
        candidates = detector.select_removal_candidates(
            self._groups(detector, records), records,
            RetentionStrategy.KEEP_LATEST,
        )
        assert candidates == [1, 3]

    def test_keep_highest_score(self, detector, record_factory):
        """Test the highest scoring record is kept."""
        records = [
            record_factory(1, source=None),
            record_factory(2),
        ]
        candidates = detector.select_removal_candidates(
            self._groups(detector, records), records, "keep_highest_score",
        )
        assert candidates == [1]

    def test_ties_keep_group_order(self, detector, record_factory):
        """Test ties resolve to the earlier record."""
        records = [record_factory(1), record_factory(2)]
        for strategy in RetentionStrategy:
            candidates = detector.select_removal_candidates(
                self._groups(detector, records), records, strategy,
            )
            assert candidates == [2]

    def test_strategy_from_config(self, record_factory):
        """Test the configured retention strategy is used."""
        detector = DuplicateDetector(
            config=DataQualityConfig(retention_strategy="keep_latest"),
        )
        records = [
            record_factory(1, publishedAt="2023-02-01"),
            record_factory(2, publishedAt="2024-02-01"),
        ]
        report = detector.detect(records)
        assert report.retention_strategy == RetentionStrategy.KEEP_LATEST
        assert report.removal_candidates == [1]


# ==============================================================================
# Full pass
# ==============================================================================

class TestDetect:
    """Tests for DuplicateDetector.detect."""

    def test_report_fields(self, detector, report_records):
        """Test duplicate group fields."""
        report = detector.detect(report_records)

        assert report.total_records == 10
        assert report.removal_candidates == [2, 4]
        assert report.duplicates_found == 2
        assert len(report.duplicate_groups) == 2
        assert len(report.provenance_hash) == 64

    def test_failure_returns_empty_report(self, detector, pump_records):
        """An unusable strategy is logged and yields an empty report."""
        report = detector.detect(pump_records, strategy="keep_random")

        assert report.duplicate_groups == []
        assert report.removal_candidates == []
        assert detector.get_statistics()["failures"] == 1

    def test_statistics(self, detector, pump_records):
        """Test detector statistics."""
        detector.detect(pump_records)
        stats = detector.get_statistics()

        assert stats["invocations"] == 1
        assert stats["successes"] == 1
        assert stats["matches_found"] == 2
        assert stats["groups_formed"] == 1
        assert stats["last_invoked_at"] is not None

        detector.reset_statistics()
        assert detector.get_statistics()["invocations"] == 0
