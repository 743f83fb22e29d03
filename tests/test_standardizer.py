# -*- coding: utf-8 -*-
"""Tests for region, category, title, and date standardization."""

from datetime import datetime, timezone

import pytest

from regintel.data_quality.standardizer import (
    Standardizer,
    clean_title,
    standardize_category,
    standardize_country,
)


class TestStandardizeCountry:
    """Tests for the region lookup table."""

    @pytest.mark.parametrize("region,code", [
        ("USA", "US"),
        ("United States", "US"),
        ("America", "US"),
        ("UK", "GB"),
        ("Britain", "GB"),
        ("Deutschland", "DE"),
        ("Germany", "DE"),
        ("Schweiz", "CH"),
        ("Suisse", "CH"),
        ("Svizzera", "CH"),
        ("European Union", "EU"),
        ("Europe", "EU"),
    ])
    def test_aliases(self, region, code):
        """Test country aliases."""
        assert standardize_country(region) == code

    def test_unmapped_returns_none(self):
        """Test an unknown country."""
        assert standardize_country("Japan") is None
        assert standardize_country("") is None
        assert standardize_country(None) is None


class TestStandardizeCategory:
    """Tests for the ordered category table."""

    @pytest.mark.parametrize("category,label", [
        ("Class II 510k submission", "FDA 510(k) Clearance"),
        ("510(k) clearance letter", "FDA 510(k) Clearance"),
        ("PMA supplement", "FDA PMA Approval"),
        ("Voluntary RECALL", "Safety Recall"),
        ("Draft guideline", "Regulatory Guidance"),
        ("ISO committee news", "ISO Standard"),
        ("IEC 62304 amendment", "IEC Standard"),
        ("Field safety notice", "Safety Notice"),
        ("Public alert", "Safety Alert"),
        ("Warning letter", "Safety Warning"),
    ])
    def test_substring_rules(self, category, label):
        """Test substring category rules."""
        assert standardize_category(category) == label

    def test_first_matching_rule_wins(self):
        """A recall that mentions guidance is still a recall."""
        assert standardize_category("Recall guidance") == "Safety Recall"

    def test_standard_precedes_iso(self):
        """Test the standard rule wins over iso."""
        assert standardize_category("ISO standard draft") == "Technical Standard"

    @pytest.mark.parametrize("label", [
        "FDA 510(k) Clearance",
        "ISO Standard",
        "IEC Standard",
        "Safety Notice",
        "Technical Standard",
    ])
    def test_canonical_labels_are_stable(self, label):
        """Test canonical labels map to themselves."""
        assert standardize_category(label) == label

    @pytest.mark.parametrize("category,label", [
        ("safety alert", "Safety Notice"),
        ("iso standard", "Technical Standard"),
        ("Iso Standard", "Technical Standard"),
        (" ISO Standard", "Technical Standard"),
        ("safety notice", "Safety Notice"),
    ])
    def test_label_lookalikes_follow_rule_order(self, category, label):
        """Test only exact canonical labels skip the substring rules."""
        assert standardize_category(category) == label
        assert standardize_category(category) == \
            standardize_category(category + " draft")

    def test_unmapped_returns_none(self):
        """Test an unknown category."""
        assert standardize_category("Newsletter") is None


class TestCleanTitle:
    """Tests for clean_title."""

    def test_collapses_and_strips(self):
        """Test whitespace is collapsed and stripped."""
        assert clean_title("  Recall:   infusion pumps!!  ") == \
            "Recall: infusion pumps"

    def test_keeps_allowed_punctuation(self):
        """Test allowed punctuation survives."""
        assert clean_title("FDA 510(k) - Update, v2.1") == "FDA 510(k) - Update, v2.1"

    def test_empty(self):
        """Test empty titles."""
        assert clean_title("") is None


class TestStandardizer:
    """Tests for the Standardizer engine."""

    def test_standardize(self):
        """Test standardizing a record."""
        result = Standardizer().standardize({
            "region": "Deutschland",
            "type": "Class II 510(k) submission",
            "title": "  Recall:   infusion pumps!!  ",
            "publishedAt": "2024-03-15",
        })
        assert result.country_code == "DE"
        assert result.standardized_category == "FDA 510(k) Clearance"
        assert result.cleaned_title == "Recall: infusion pumps"
        assert result.normalized_date == datetime(2024, 3, 15, tzinfo=timezone.utc)

    def test_does_not_mutate_input(self):
        """Test the input record is left untouched."""
        record = {"region": "USA", "title": " Recall "}
        snapshot = dict(record)
        Standardizer().standardize(record)
        Standardizer().clean_record(record)
        assert record == snapshot

    def test_unparsable_date_left_unset(self):
        """Test an unparsable date is not normalized."""
        result = Standardizer().standardize({"publishedAt": "sometime"})
        assert result.normalized_date is None

    def test_changes_use_record_aliases(self):
        """Test changes are keyed by stored field names."""
        record = {
            "id": 7,
            "region": "Switzerland",
            "category": "recall",
            "decision_date": "2023-11-02",
            "title": "Clean title",
        }
        changes = Standardizer().changes(record)

        assert changes == {
            "region": "CH",
            "category": "Safety Recall",
            "decision_date": datetime(2023, 11, 2, tzinfo=timezone.utc),
        }

    def test_changes_idempotent(self):
        """Test a standardized record has no further changes."""
        standardizer = Standardizer()
        record = {
            "region": "UK",
            "type": "guidance document",
            "title": "  MHRA   guidance!  ",
            "publishedAt": "2024-02-01T10:00:00+01:00",
        }
        once = dict(record, **standardizer.changes(record))
        assert standardizer.changes(once) == {}

    def test_clean_record_stamps_quality(self, valid_record, now):
        """Test cleaning stamps the quality score."""
        cleaned = Standardizer().clean_record(
            dict(valid_record, region="USA"), now=now,
        )
        assert cleaned["region"] == "US"
        assert cleaned["_quality"] == {
            "score": 100,
            "is_valid": True,
            "has_warnings": False,
            "last_cleaned": now.isoformat(),
        }

    def test_clean_batch(self, valid_record, now):
        """Test cleaning a batch."""
        records = [valid_record, dict(valid_record, id=2, title="")]
        cleaned = Standardizer().clean_batch(records, now=now)

        assert len(cleaned) == 2
        assert cleaned[1]["_quality"]["is_valid"] is False
