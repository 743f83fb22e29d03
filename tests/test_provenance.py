# -*- coding: utf-8 -*-
"""Tests for the provenance chain."""

import json

from regintel.data_quality.provenance import ProvenanceTracker


class TestProvenanceTracker:
    """Tests for ProvenanceTracker."""

    def test_entries_link_to_previous(self):
        """Test each entry links to the previous hash."""
        tracker = ProvenanceTracker()
        first = tracker.record("regulatory_update", "quality_report", "a" * 64)
        tracker.record("regulatory_update", "remove_duplicates", "b" * 64)

        chain = tracker.get_chain("regulatory_update")
        assert len(chain) == 2
        assert chain[1]["previous_hash"] == first
        assert tracker.verify_chain()

    def test_tampering_is_detected(self):
        """Test chain verification detects tampering."""
        tracker = ProvenanceTracker()
        tracker.record("legal_case", "standardize", "a" * 64)
        tracker.record("legal_case", "standardize", "b" * 64)

        tracker._entries[0]["data_hash"] = "c" * 64
        assert not tracker.verify_chain()

    def test_chain_filtered_by_record_type(self):
        """Test filtering the chain by record type."""
        tracker = ProvenanceTracker()
        tracker.record("legal_case", "standardize", "a" * 64)
        tracker.record("regulatory_update", "standardize", "b" * 64)

        assert len(tracker.get_chain("legal_case")) == 1
        assert tracker.entry_count == 2

    def test_build_hash_is_order_independent(self):
        """Test hashing ignores key order."""
        tracker = ProvenanceTracker()
        assert tracker.build_hash({"a": 1, "b": 2}) == tracker.build_hash({"b": 2, "a": 1})
        assert len(tracker.build_hash({"a": 1})) == 64

    def test_export_json(self):
        """Test JSON export."""
        tracker = ProvenanceTracker()
        tracker.record("legal_case", "quality_report", "a" * 64)
        exported = json.loads(tracker.export_json())
        assert exported[0]["action"] == "quality_report"
