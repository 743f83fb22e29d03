# -*- coding: utf-8 -*-
"""
Validity Checker Engine - Data Quality Engine

Scores a single record's fitness for display and use with a fixed rule
table. Every record starts at 100 points; each triggered rule subtracts
its penalty and the final score is floored at 0. A record is valid iff
no error-severity rule fired.

Rule table:
    ========================================  ========  =======
    Condition                                 Severity  Penalty
    ========================================  ========  =======
    title missing or blank                    error     20
    title shorter than 10 characters          warning   5
    content missing or blank                  error     15
    content shorter than 50 characters        warning   5
    source missing                            warning   10
    authority missing                         warning   10
    region missing                            warning   10
    publication date unparsable               error     10
    publication date in the future            warning   5
    publication date before 2000-01-01        warning   5
    priority outside low/medium/high/critical error     5
    metadata.originalLink not a valid URL     warning   3
    content contains placeholder text         warning   10
    content highly repetitive                 warning   5
    ========================================  ========  =======

Short title/content checks only apply when the field is present, and the
three date checks are mutually exclusive.

Example:
    >>> from regintel.data_quality.validity_checker import RecordValidator
    >>> result = RecordValidator().validate({
    ...     "title": "MDR transition deadline extended",
    ...     "content": "",
    ...     "source": "EUR-Lex",
    ...     "authority": "European Commission",
    ...     "priority": "urgent",
    ... })
    >>> result.errors
    ['Content is required', 'Invalid priority value']
    >>> result.score
    70

Author: RegIntel Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Tuple
from urllib.parse import urlsplit

from regintel.data_quality import metrics
from regintel.data_quality.models import (
    MAX_QUALITY_SCORE,
    Priority,
    ValidationResult,
)
from regintel.data_quality.record_fields import get_published_at, parse_date

logger = logging.getLogger(__name__)

__all__ = [
    "RecordValidator",
    "PLACEHOLDER_TOKENS",
    "MIN_TITLE_LENGTH",
    "MIN_CONTENT_LENGTH",
]


# ---------------------------------------------------------------------------
# Rule constants
# ---------------------------------------------------------------------------

MIN_TITLE_LENGTH = 10
MIN_CONTENT_LENGTH = 50

#: Publication dates earlier than this are suspicious.
EARLIEST_PLAUSIBLE_DATE = datetime(2000, 1, 1, tzinfo=timezone.utc)

#: Case-insensitive markers of placeholder or mock content.
PLACEHOLDER_TOKENS: Tuple[str, ...] = (
    "lorem ipsum",
    "placeholder",
    "todo",
    "coming soon",
    "\U0001f534 mock data",
)

#: Repetition check applies to content longer than this many words.
REPETITION_MIN_WORDS = 20
REPETITION_MAX_UNIQUE_RATIO = 0.3

_VALID_PRIORITIES = frozenset(p.value for p in Priority)

_RE_URL_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*$")
_RE_WHITESPACE = re.compile(r"\s+")

# Penalties
_TITLE_MISSING = 20
_TITLE_SHORT = 5
_CONTENT_MISSING = 15
_CONTENT_SHORT = 5
_SOURCE_MISSING = 10
_AUTHORITY_MISSING = 10
_REGION_MISSING = 10
_DATE_INVALID = 10
_DATE_FUTURE = 5
_DATE_ANCIENT = 5
_PRIORITY_INVALID = 5
_URL_INVALID = 3
_PLACEHOLDER = 10
_REPETITIVE = 5


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _is_valid_url(value: Any) -> bool:
    """Whether ``value`` parses as an absolute URL."""
    if not isinstance(value, str) or _RE_WHITESPACE.search(value.strip()):
        return False
    try:
        parts = urlsplit(value.strip())
    except ValueError:
        return False
    if not parts.scheme or not _RE_URL_SCHEME.match(parts.scheme):
        return False
    if parts.scheme.lower() in ("http", "https", "ftp", "ws", "wss"):
        return bool(parts.netloc)
    return bool(parts.netloc or parts.path)


# =============================================================================
# RecordValidator
# =============================================================================


class RecordValidator:
    """Applies the rule table to one record at a time.

    The validator is stateless apart from the clock, which can be
    injected to make the future-date rule deterministic.
    """

    def __init__(self, clock=None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def validate(
        self,
        record: Mapping[str, Any],
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        """Score ``record`` against the rule table.

        Args:
            record: Record mapping.
            now: Reference time for the future-date rule. Defaults to
                the validator clock.

        Returns:
            ValidationResult with errors, warnings, and score.
        """
        errors = []
        warnings = []
        score = MAX_QUALITY_SCORE

        title = record.get("title")
        if _is_blank(title):
            errors.append("Title is required")
            score -= _TITLE_MISSING
        elif len(str(title)) < MIN_TITLE_LENGTH:
            warnings.append("Title is very short")
            score -= _TITLE_SHORT

        content = record.get("content")
        if _is_blank(content):
            errors.append("Content is required")
            score -= _CONTENT_MISSING
        elif len(str(content)) < MIN_CONTENT_LENGTH:
            warnings.append("Content is very brief")
            score -= _CONTENT_SHORT

        if not record.get("source"):
            warnings.append("Source is missing")
            score -= _SOURCE_MISSING

        if not record.get("authority"):
            warnings.append("Authority is missing")
            score -= _AUTHORITY_MISSING

        if not record.get("region"):
            warnings.append("Region is missing")
            score -= _REGION_MISSING

        raw_date = get_published_at(record)
        if raw_date is not None:
            published = parse_date(raw_date)
            reference = now or self._clock()
            if published is None:
                errors.append("Invalid publication date format")
                score -= _DATE_INVALID
            elif published > reference:
                warnings.append("Publication date is in the future")
                score -= _DATE_FUTURE
            elif published < EARLIEST_PLAUSIBLE_DATE:
                warnings.append("Publication date seems very old")
                score -= _DATE_ANCIENT

        priority = record.get("priority")
        if priority and (
            not isinstance(priority, str) or priority not in _VALID_PRIORITIES
        ):
            errors.append("Invalid priority value")
            score -= _PRIORITY_INVALID

        metadata = record.get("metadata")
        if isinstance(metadata, Mapping):
            link = metadata.get("originalLink")
            if link and not _is_valid_url(link):
                warnings.append("Invalid URL in metadata")
                score -= _URL_INVALID

        if content and isinstance(content, str):
            lowered = content.lower()
            if any(token in lowered for token in PLACEHOLDER_TOKENS):
                warnings.append("Content contains placeholder text")
                score -= _PLACEHOLDER

            words = _RE_WHITESPACE.split(lowered)
            if (
                len(words) > REPETITION_MIN_WORDS
                and len(set(words)) / len(words) < REPETITION_MAX_UNIQUE_RATIO
            ):
                warnings.append("Content appears very repetitive")
                score -= _REPETITIVE

        score = max(0, score)
        metrics.inc_records_validated()
        metrics.observe_score(score)
        if errors:
            logger.debug(
                "Record %s failed validation: %s", record.get("id"), errors,
            )

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            score=score,
        )
