# -*- coding: utf-8 -*-
"""
Provenance Tracking for the Data Quality Engine

SHA-256 chain-hashed audit log of data quality passes (reports,
duplicate scans, remediations). Each entry stores the hash it links
from, so the whole log can be re-verified.

Example:
    >>> from regintel.data_quality.provenance import ProvenanceTracker
    >>> tracker = ProvenanceTracker()
    >>> chain_hash = tracker.record(
    ...     "regulatory_update", "quality_report", tracker.build_hash({"n": 3}),
    ... )
    >>> tracker.verify_chain()
    True

Author: RegIntel Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    """Return current UTC datetime with microseconds zeroed."""
    return datetime.now(timezone.utc).replace(microsecond=0)


class ProvenanceTracker:
    """Ordered, chain-hashed log of quality pass operations.

    Attributes:
        _entries: All entries, oldest first.
        _last_chain_hash: Chain hash of the newest entry.
        _lock: Thread-safety lock.
    """

    _GENESIS_HASH = hashlib.sha256(b"regintel-data-quality-genesis").hexdigest()

    def __init__(self) -> None:
        self._entries: List[Dict[str, Any]] = []
        self._last_chain_hash: str = self._GENESIS_HASH
        self._lock = threading.Lock()

    def record(self, record_type: str, action: str, data_hash: str) -> str:
        """Append an entry for ``action`` over ``record_type``.

        Args:
            record_type: Record collection the pass ran over.
            action: Operation performed (quality_report, detect_duplicates,
                remove_duplicates, standardize).
            data_hash: SHA-256 hash of the operation's result summary.

        Returns:
            Chain hash of the new entry.
        """
        timestamp = _utcnow().isoformat()
        with self._lock:
            previous = self._last_chain_hash
            chain_hash = self._compute_chain_hash(
                previous, data_hash, action, timestamp,
            )
            self._entries.append({
                "record_type": record_type,
                "action": action,
                "data_hash": data_hash,
                "timestamp": timestamp,
                "previous_hash": previous,
                "chain_hash": chain_hash,
            })
            self._last_chain_hash = chain_hash

        logger.debug(
            "Recorded provenance: %s action=%s hash=%s",
            record_type, action, chain_hash[:16],
        )
        return chain_hash

    def verify_chain(self) -> bool:
        """Recompute every chain hash and check the links."""
        with self._lock:
            entries = list(self._entries)

        previous = self._GENESIS_HASH
        for entry in entries:
            expected = self._compute_chain_hash(
                previous, entry["data_hash"], entry["action"], entry["timestamp"],
            )
            if entry["previous_hash"] != previous or entry["chain_hash"] != expected:
                logger.warning(
                    "Provenance chain broken at %s/%s",
                    entry["record_type"], entry["action"],
                )
                return False
            previous = entry["chain_hash"]
        return True

    def get_chain(self, record_type: str) -> List[Dict[str, Any]]:
        """Entries for ``record_type``, oldest first."""
        with self._lock:
            return [e for e in self._entries if e["record_type"] == record_type]

    @property
    def entry_count(self) -> int:
        with self._lock:
            return len(self._entries)

    def export_json(self) -> str:
        """Export all entries as a JSON string."""
        with self._lock:
            data = list(self._entries)
        return json.dumps(data, indent=2, default=str)

    def build_hash(self, data: Any) -> str:
        """SHA-256 of the canonical JSON form of ``data``."""
        serialized = json.dumps(data, sort_keys=True, default=str)
        return hashlib.sha256(serialized.encode("utf-8")).hexdigest()

    def _compute_chain_hash(
        self,
        previous_hash: str,
        data_hash: str,
        action: str,
        timestamp: str,
    ) -> str:
        combined = json.dumps({
            "previous": previous_hash,
            "data": data_hash,
            "action": action,
            "timestamp": timestamp,
        }, sort_keys=True)
        return hashlib.sha256(combined.encode("utf-8")).hexdigest()


__all__ = [
    "ProvenanceTracker",
]
