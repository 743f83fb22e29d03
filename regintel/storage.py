# -*- coding: utf-8 -*-
"""
Record store interface used by the data quality service.

The quality engine never talks to a database directly. The service
reads whole collections through :class:`RecordStore` and writes
accepted remediations (deletions, standardized fields) back through it.
:class:`InMemoryRecordStore` backs tests and local runs.
"""

from __future__ import annotations

import copy
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from regintel.exceptions import RecordNotFoundError

logger = logging.getLogger(__name__)

__all__ = [
    "RecordStore",
    "InMemoryRecordStore",
]


class RecordStore(ABC):
    """Abstract base for record collections keyed by ``id``."""

    @abstractmethod
    def get_all(self, record_type: str) -> List[Dict[str, Any]]:
        """All records of ``record_type`` in storage order."""

    @abstractmethod
    def get(self, record_type: str, record_id: Any) -> Optional[Dict[str, Any]]:
        """One record by id, or None."""

    @abstractmethod
    def create(self, record_type: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        """Insert ``record`` and return the stored copy."""

    @abstractmethod
    def update(
        self,
        record_type: str,
        record_id: Any,
        fields: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """Merge ``fields`` into a record. Raises RecordNotFoundError."""

    @abstractmethod
    def delete(self, record_type: str, record_id: Any) -> bool:
        """Delete a record by id. Returns True if deleted."""


class InMemoryRecordStore(RecordStore):
    """Dict-backed RecordStore.

    Records are copied on the way in and out, so callers can never
    mutate stored state by accident. Ids are assigned sequentially when
    a created record has none.
    """

    def __init__(
        self,
        collections: Optional[Mapping[str, List[Mapping[str, Any]]]] = None,
    ) -> None:
        self._collections: Dict[str, Dict[Any, Dict[str, Any]]] = {}
        self._next_id = 1
        self._lock = threading.RLock()
        for record_type, records in (collections or {}).items():
            for record in records:
                self.create(record_type, record)

    def get_all(self, record_type: str) -> List[Dict[str, Any]]:
        with self._lock:
            records = self._collections.get(record_type, {})
            return [copy.deepcopy(r) for r in records.values()]

    def get(self, record_type: str, record_id: Any) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._collections.get(record_type, {}).get(record_id)
            return copy.deepcopy(record) if record is not None else None

    def create(self, record_type: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        stored = copy.deepcopy(dict(record))
        with self._lock:
            if stored.get("id") is None:
                stored["id"] = self._next_id
            if isinstance(stored["id"], int):
                self._next_id = max(self._next_id, stored["id"] + 1)
            self._collections.setdefault(record_type, {})[stored["id"]] = stored
            return copy.deepcopy(stored)

    def update(
        self,
        record_type: str,
        record_id: Any,
        fields: Mapping[str, Any],
    ) -> Dict[str, Any]:
        with self._lock:
            record = self._collections.get(record_type, {}).get(record_id)
            if record is None:
                raise RecordNotFoundError(
                    message="Record not found",
                    record_type=record_type,
                    record_id=record_id,
                )
            record.update(copy.deepcopy(dict(fields)))
            record["id"] = record_id
            return copy.deepcopy(record)

    def delete(self, record_type: str, record_id: Any) -> bool:
        with self._lock:
            removed = self._collections.get(record_type, {}).pop(record_id, None)
        if removed is not None:
            logger.debug("Deleted %s/%s", record_type, record_id)
        return removed is not None

    def count(self, record_type: str) -> int:
        with self._lock:
            return len(self._collections.get(record_type, {}))
