# -*- coding: utf-8 -*-
"""
regintel

Regulatory intelligence data quality platform.

Packages:
    - data_quality: validation scoring, duplicate detection,
      standardization, and quality reports over regulatory records
    - cache: in-process TTL cache with capacity eviction
    - storage: record store interface and in-memory implementation
    - exceptions: platform exception hierarchy

Author: RegIntel Platform Team
Date: October 2026
"""

__version__ = "1.0.0"

from regintel.exceptions import (
    RegIntelException,
    ConfigurationError,
    DataException,
    DataAccessError,
    RecordNotFoundError,
)

__all__ = [
    "__version__",
    "RegIntelException",
    "ConfigurationError",
    "DataException",
    "DataAccessError",
    "RecordNotFoundError",
]
