# -*- coding: utf-8 -*-
"""Tests for environment-driven configuration."""

import logging

import pytest

from regintel.cache import config as cache_config
from regintel.cache.config import CacheConfig
from regintel.data_quality import config as dq_config
from regintel.data_quality import metrics
from regintel.data_quality.config import DataQualityConfig


class TestDataQualityConfig:
    """Tests for DataQualityConfig."""

    def test_defaults(self):
        """Test default configuration values."""
        config = DataQualityConfig()
        assert config.similarity_threshold == 0.85
        assert config.content_similarity_threshold == 0.9
        assert config.group_key_length == 50
        assert config.retention_strategy == "keep_first"
        assert config.validate() == []

    def test_from_env(self, monkeypatch):
        """Test loading configuration from RI_DQ_ variables."""
        monkeypatch.setenv("RI_DQ_SIMILARITY_THRESHOLD", "0.9")
        monkeypatch.setenv("RI_DQ_RETENTION_STRATEGY", "keep_latest")
        monkeypatch.setenv("RI_DQ_VALIDATION_RESULT_LIMIT", "25")
        monkeypatch.setenv("RI_DQ_ENABLE_METRICS", "no")

        config = DataQualityConfig.from_env()
        assert config.similarity_threshold == 0.9
        assert config.retention_strategy == "keep_latest"
        assert config.validation_result_limit == 25
        assert config.enable_metrics is False

    def test_invalid_env_value_falls_back(self, monkeypatch, caplog):
        """Test an unparsable variable keeps the default."""
        monkeypatch.setenv("RI_DQ_DUPLICATE_LIST_LIMIT", "lots")
        with caplog.at_level(logging.WARNING):
            config = DataQualityConfig.from_env()

        assert config.duplicate_list_limit == 100
        assert "RI_DQ_DUPLICATE_LIST_LIMIT" in caplog.text

    def test_validate_reports_problems(self):
        """Test out of range values are reported."""
        config = DataQualityConfig(
            similarity_threshold=1.2,
            retention_strategy="keep_random",
            common_issue_limit=0,
        )
        problems = config.validate()
        assert len(problems) == 3

    def test_validate_rejects_unknown_log_level(self):
        """Test an unknown log level is reported."""
        problems = DataQualityConfig(log_level="VERBOSE").validate()
        assert len(problems) == 1
        assert "log_level" in problems[0]

    @pytest.mark.parametrize("level", ["debug", "INFO", "Warning", "ERROR"])
    def test_validate_accepts_level_names(self, level):
        """Test standard level names pass in any case."""
        assert DataQualityConfig(log_level=level).validate() == []

    def test_singleton(self, monkeypatch):
        """Test get/set/reset of the module configuration."""
        monkeypatch.setenv("RI_DQ_GROUP_KEY_LENGTH", "40")
        first = dq_config.get_config()
        assert first.group_key_length == 40
        assert dq_config.get_config() is first

        replacement = DataQualityConfig(group_key_length=10)
        dq_config.set_config(replacement)
        assert dq_config.get_config() is replacement

        dq_config.reset_config()
        assert dq_config.get_config() is not replacement


class TestCacheConfig:
    """Tests for CacheConfig."""

    def test_defaults(self):
        """Test default cache configuration values."""
        config = CacheConfig()
        assert config.max_size == 1000
        assert config.default_ttl_ms == 300_000
        assert config.sweep_interval_seconds == 300.0
        assert config.validate() == []

    def test_from_env(self, monkeypatch):
        """Test loading configuration from RI_CACHE_ variables."""
        monkeypatch.setenv("RI_CACHE_MAX_SIZE", "50")
        monkeypatch.setenv("RI_CACHE_EVICTION_FRACTION", "0.5")

        config = CacheConfig.from_env()
        assert config.max_size == 50
        assert config.eviction_fraction == 0.5

    @pytest.mark.parametrize("field,value", [
        ("max_size", 0),
        ("default_ttl_ms", -1),
        ("sweep_interval_seconds", 0),
        ("eviction_fraction", 1.5),
    ])
    def test_validate(self, field, value):
        """Test invalid cache settings are reported."""
        assert CacheConfig(**{field: value}).validate()

    def test_singleton(self):
        """Test get/set/reset of the cache configuration."""
        replacement = CacheConfig(max_size=3)
        cache_config.set_config(replacement)
        assert cache_config.get_config() is replacement


class TestMetricsToggle:
    """Tests for enabling and disabling data quality metrics."""

    def test_disabled_helpers_are_noops(self):
        """Test metric helpers do nothing when disabled."""
        metrics.configure(False)
        metrics.inc_passes("report", "completed")
        metrics.observe_score(50)
        metrics.inc_errors("ValueError")

    @pytest.mark.skipif(
        not metrics.PROMETHEUS_AVAILABLE, reason="prometheus_client not installed",
    )
    def test_enabled_counts(self):
        """Test metric helpers record when enabled."""
        metrics.configure(True)
        counter = metrics.dq_remediations_total.labels(action="delete")
        before = counter._value.get()
        metrics.inc_remediations("delete", 2)
        assert counter._value.get() == before + 2

        metrics.configure(False)
        metrics.inc_remediations("delete", 5)
        assert counter._value.get() == before + 2
