# -*- coding: utf-8 -*-
"""
Record field access helpers shared by the quality engines.

Records arrive from several collections (regulatory updates, legal
cases, newsletters) whose field names differ slightly. These helpers
resolve the aliases in one place and parse publication dates leniently
with ``dateutil`` so every engine sees the same values.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional, Tuple

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

__all__ = [
    "DATE_FIELDS",
    "CATEGORY_FIELDS",
    "first_present",
    "get_published_at",
    "get_category",
    "parse_date",
]

#: Publication date aliases, in lookup order.
DATE_FIELDS: Tuple[str, ...] = (
    "publishedAt",
    "published_at",
    "decisionDate",
    "decision_date",
)

#: Type/category aliases, in lookup order.
CATEGORY_FIELDS: Tuple[str, ...] = ("type", "category")


def first_present(
    record: Mapping[str, Any],
    fields: Tuple[str, ...],
) -> Tuple[Optional[str], Any]:
    """Return ``(field_name, value)`` for the first truthy alias.

    Returns ``(None, None)`` when no alias carries a value.
    """
    for name in fields:
        value = record.get(name)
        if value not in (None, ""):
            return name, value
    return None, None


def get_published_at(record: Mapping[str, Any]) -> Any:
    """Raw publication date value of ``record`` (unparsed)."""
    return first_present(record, DATE_FIELDS)[1]


def get_category(record: Mapping[str, Any]) -> Any:
    """Raw type/category value of ``record``."""
    return first_present(record, CATEGORY_FIELDS)[1]


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a publication date into a timezone-aware UTC datetime.

    Accepts datetimes, dates, epoch milliseconds, and any string
    ``dateutil`` understands. Naive values are taken as UTC.

    Returns:
        The parsed datetime, or ``None`` when the value is missing or
        unparsable. Parsing failures are data-quality findings, so this
        never raises.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.debug("Epoch value out of range: %r", value)
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = date_parser.parse(text)
        except (ValueError, OverflowError):
            logger.debug("Could not parse date: %r", value)
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
