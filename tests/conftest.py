# -*- coding: utf-8 -*-
"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone
from typing import Any, Dict, List

import pytest

from regintel.cache import config as cache_config
from regintel.cache.config import CacheConfig
from regintel.data_quality import config as dq_config
from regintel.data_quality import metrics as dq_metrics
from regintel.data_quality.config import DataQualityConfig
from regintel.storage import InMemoryRecordStore

REGULATORY_UPDATE = "regulatory_update"


class FakeClock:
    """Manually advanced epoch-millisecond clock for cache tests."""

    def __init__(self, start_ms: float = 1_700_000_000_000.0):
        self.now = start_ms

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture(autouse=True)
def reset_singletons():
    """Isolate tests from each other's configuration and env."""
    dq_config.reset_config()
    cache_config.reset_config()
    yield
    dq_config.reset_config()
    cache_config.reset_config()
    dq_metrics.configure(True)


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def dq_settings() -> DataQualityConfig:
    return DataQualityConfig()


@pytest.fixture
def cache_settings() -> CacheConfig:
    return CacheConfig(enable_metrics=False)


def make_record(record_id: Any, **overrides: Any) -> Dict[str, Any]:
    """A record that passes every validation rule (score 100)."""
    record = {
        "id": record_id,
        "title": "FDA issues final cybersecurity guidance",
        "content": (
            "The agency published final guidance describing premarket "
            "cybersecurity expectations for connected medical devices."
        ),
        "source": "FDA",
        "authority": "FDA",
        "region": "US",
        "publishedAt": "2024-03-15T00:00:00Z",
        "priority": "high",
        "metadata": {"originalLink": "https://www.fda.gov/guidance/cyber"},
    }
    record.update(overrides)
    return record


@pytest.fixture
def valid_record() -> Dict[str, Any]:
    return make_record(1)


@pytest.fixture
def pump_records() -> List[Dict[str, Any]]:
    """Two near-identical titles and one unrelated record."""
    return [
        {"id": 1, "title": "FDA Recall of Pumps"},
        {"id": 2, "title": "FDA  Recall of Pumps"},
        {"id": 3, "title": "Unrelated Update"},
    ]


_DISTINCT_TOPICS = [
    (
        "Swissmedic Updates Vigilance Reporting Forms",
        "Manufacturers must submit incident reports through the revised "
        "electronic portal starting next quarter.",
    ),
    (
        "MHRA Consultation on Software as a Medical Device",
        "Stakeholders are invited to comment on proposed classification "
        "rules for standalone clinical software.",
    ),
    (
        "ISO 13485 Revision Published for Quality Systems",
        "The revised quality management standard introduces stricter "
        "supplier control and design validation clauses.",
    ),
    (
        "Health Canada Licence Fee Changes Announced",
        "Annual right to sell fees increase for class three and class "
        "four devices from April onwards.",
    ),
    (
        "TGA Cybersecurity Guidance for Connected Devices",
        "Australian sponsors receive new expectations on patching, threat "
        "modelling and vulnerability disclosure.",
    ),
    (
        "PMDA Clinical Evaluation Requirements Clarified",
        "Japanese reviewers explained when foreign clinical data can "
        "support approval without bridging studies.",
    ),
]


@pytest.fixture
def report_records() -> List[Dict[str, Any]]:
    """Ten records: two exact-title pairs and six singles.

    The four paired records are complete (score 100). The six singles
    lack source, authority, and region (score 70), so the average is 82.
    """
    recall = dict(
        title="FDA Recall of Infusion Pumps",
        content=(
            "Several infusion pump models are being recalled because of "
            "software faults that may interrupt therapy."
        ),
    )
    mdr = dict(
        title="EU MDR Transition Deadline Extended",
        content=(
            "The European Parliament approved additional time for legacy "
            "devices to obtain certification under the regulation."
        ),
    )
    records = [
        make_record(1, **recall),
        make_record(2, **recall),
        make_record(3, **mdr),
        make_record(4, **mdr),
    ]
    for offset, (title, content) in enumerate(_DISTINCT_TOPICS):
        records.append({
            "id": 5 + offset,
            "title": title,
            "content": content,
        })
    return records


@pytest.fixture
def store(report_records) -> InMemoryRecordStore:
    return InMemoryRecordStore({REGULATORY_UPDATE: report_records})


@pytest.fixture
def record_factory():
    """Factory for complete records: ``record_factory(id, **overrides)``."""
    return make_record
