"""Shared utilities for Takings Core.

This module provides small, reusable helpers:

- Date parsing: standardized YYYY-MM-DD parsing and business-date extraction
- Number coercion: tolerant conversion of upstream money/quantity fields
- Duration formatting for log lines

Examples:
    >>> from takings_core.utils import business_date_from, to_float
    >>> business_date_from("2024-03-01T18:22:05.000Z")
    '2024-03-01'
    >>> to_float(None)
    0.0

"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any

# Leading calendar day of an ISO-8601 timestamp
ISO_DATE_RE = re.compile(r"^(?P<day>\d{4}-\d{2}-\d{2})")


def parse_date(s: str) -> date:
    """Parse a date string in YYYY-MM-DD format.

    Args:
        s: Date string in ISO format (YYYY-MM-DD).

    Returns:
        Parsed date object.

    Raises:
        ValueError: If the date string is not in YYYY-MM-DD format.

    Examples:
        >>> parse_date("2023-01-15")
        datetime.date(2023, 1, 15)

    """
    return datetime.strptime(s, "%Y-%m-%d").date()


def business_date_from(timestamp: Any) -> str | None:
    """Return the YYYY-MM-DD calendar day of an ISO timestamp.

    The date portion is taken as written, without timezone conversion,
    so "2024-03-01T23:30:00-05:00" stays on 2024-03-01.

    Args:
        timestamp: ISO-8601 string (or anything else).

    Returns:
        The date string, or None when the value carries no valid date.

    Examples:
        >>> business_date_from("2024-03-01T10:00:00Z")
        '2024-03-01'
        >>> business_date_from("") is None
        True

    """
    if not isinstance(timestamp, str):
        return None
    m = ISO_DATE_RE.match(timestamp.strip())
    if not m:
        return None
    day = m.group("day")
    try:
        parse_date(day)
    except ValueError:
        return None
    return day


def to_float(value: Any) -> float:
    """Coerce an upstream numeric field to float, defaulting to 0.0.

    None, booleans, NaN/inf and unparseable strings all become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def compute_start_date(
    from_date: str | None,
    days_to_load: int,
    today: date | None = None,
) -> date:
    """Resolve the inclusive start of the receipt window.

    Args:
        from_date: Explicit start in YYYY-MM-DD format. Takes precedence.
        days_to_load: Window size used when from_date is None.
        today: Reference day (defaults to the current UTC date).

    Returns:
        The first calendar day to fetch.

    Raises:
        ValueError: If from_date is malformed or days_to_load is negative.

    Examples:
        >>> compute_start_date(None, 7, date(2024, 3, 8))
        datetime.date(2024, 3, 1)

    """
    if from_date:
        return parse_date(from_date)
    if days_to_load < 0:
        raise ValueError(f"days_to_load must be >= 0, got {days_to_load}")
    if today is None:
        today = datetime.now(timezone.utc).date()
    return today - timedelta(days=days_to_load)


def format_duration(seconds: float) -> str:
    """Format a duration in seconds as a human-readable string.

    Args:
        seconds: Duration in seconds (can be fractional).

    Returns:
        Formatted string like "5m 30.5s" or "45.2s".

    Examples:
        >>> format_duration(90.5)
        '1m 30.5s'
        >>> format_duration(45.2)
        '45.2s'

    """
    mins, secs = divmod(seconds, 60.0)
    if mins >= 1:
        return f"{int(mins)}m {secs:04.1f}s"
    else:
        return f"{secs:.1f}s"
